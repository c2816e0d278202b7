import ipaddress
from typing import List, Optional, Tuple

from pyigd import negotiator, parsing
from pyigd.gateway import BaseGateway
from pyigd.models import PortMappingProtocol, PortMappingEntry, RequestResponse
from pyigd.aio.requester import AsyncRequester


class Gateway(BaseGateway):
    """
    Gateway found by pyigd.aio.search_gateway, every operation is a coroutine

    Compares equal to a blocking pyigd.Gateway with the same address and control url
    """

    def __init__(self, addr, control_url, requester: Optional[AsyncRequester]=None, port_picker=None):
        super().__init__(addr, control_url, requester or AsyncRequester(), port_picker)

    async def perform_request(self, request: negotiator.SoapRequest) -> RequestResponse:
        text = await self.requester.do_request(self.url, request.action, request.content)
        return parsing.parse_response(text, request.action + "Response")

    async def _run(self, operation):
        return await negotiator.drive_async(operation, self.perform_request)

    async def get_external_ip(self) -> ipaddress.IPv4Address:
        return await self._run(negotiator.get_external_ip())

    async def get_any_address(self,
        protocol: PortMappingProtocol,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ) -> Tuple[str, int]:
        return await self._run(negotiator.get_any_address(
            protocol, local_addr, lease_duration, description, self.port_picker
        ))

    async def add_any_port(self,
        protocol: PortMappingProtocol,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ) -> int:
        return await self._run(negotiator.add_any_port(
            protocol, local_addr, lease_duration, description, self.port_picker
        ))

    async def add_port(self,
        protocol: PortMappingProtocol,
        external_port: int,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ):
        await self._run(negotiator.add_port(protocol, external_port, local_addr, lease_duration, description))

    async def remove_port(self, protocol: PortMappingProtocol, external_port: int):
        await self._run(negotiator.remove_port(protocol, external_port))

    async def get_generic_port_mapping_entry(self, index: int) -> PortMappingEntry:
        return await self._run(negotiator.get_generic_port_mapping_entry(index))

    async def get_all_port_mappings(self) -> List[PortMappingEntry]:
        return await self._run(negotiator.get_all_port_mappings())
