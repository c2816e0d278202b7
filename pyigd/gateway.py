import ipaddress
import logging
from typing import Callable, List, Optional, Tuple

from yarl import URL

from pyigd import negotiator, parsing
from pyigd.models import PortMappingProtocol, PortMappingEntry, RequestResponse
from pyigd.network import Requester

logger = logging.getLogger(__name__)

class BaseGateway:
    def __init__(self,
        addr: Tuple[str, int],
        control_url: str,
        requester=None,
        port_picker: Optional[Callable[[], int]]=None
    ):
        """
        addr - (ip, port) of the gateway's HTTP server
        control_url - path SOAP actions are POSTed to
        requester - transport used for SOAP actions
        port_picker - returns candidate external ports for add_any_port
            (default is a uniform sample of the dynamic port range)
        """

        self._addr = (str(ipaddress.IPv4Address(addr[0])), int(addr[1]))
        self._control_url = control_url
        self.requester = requester
        self.port_picker = port_picker or negotiator.random_port

    @property
    def addr(self) -> Tuple[str, int]:
        return self._addr

    @property
    def control_url(self) -> str:
        return self._control_url

    @property
    def url(self) -> URL:
        control_url = URL(self._control_url)
        # only the path and query of an absolute control url are used
        if control_url.is_absolute():
            control_url = control_url.relative()
        return URL.build(scheme="http", host=self._addr[0], port=self._addr[1]).join(control_url)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BaseGateway):
            return NotImplemented
        return (self._addr, self._control_url) == (other._addr, other._control_url)

    def __hash__(self) -> int:
        return hash((self._addr, self._control_url))

    def __str__(self) -> str:
        return str(self.url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(addr={self._addr}, control_url={self._control_url!r})"


class Gateway(BaseGateway):
    """
    Gateway found by pyigd.search_gateway, performs blocking requests
    """

    def __init__(self, addr, control_url, requester: Optional[Requester]=None, port_picker=None):
        super().__init__(addr, control_url, requester or Requester(), port_picker)

    def perform_request(self, request: negotiator.SoapRequest) -> RequestResponse:
        text = self.requester.do_request(self.url, request.action, request.content)
        return parsing.parse_response(text, request.action + "Response")

    def _run(self, operation):
        return negotiator.drive(operation, self.perform_request)

    def get_external_ip(self) -> ipaddress.IPv4Address:
        """
        Returns the external ip address of the gateway
        Raises GetExternalIPError
        """

        return self._run(negotiator.get_external_ip())

    def get_any_address(self,
        protocol: PortMappingProtocol,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ) -> Tuple[str, int]:
        """
        protocol - PortMappingProtocol to map
        local_addr - (ip, port) traffic is sent to
        lease_duration - lease in seconds, 0 is permanent
        description - description of the mapping

        Calls get_external_ip followed by add_any_port
        Returns the mapped external (ip, port)
        Raises AddAnyPortError
        """

        return self._run(negotiator.get_any_address(
            protocol, local_addr, lease_duration, description, self.port_picker
        ))

    def add_any_port(self,
        protocol: PortMappingProtocol,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ) -> int:
        """
        Adds a port mapping with any external port
        Returns the external port that was mapped
        Raises AddAnyPortError
        """

        return self._run(negotiator.add_any_port(
            protocol, local_addr, lease_duration, description, self.port_picker
        ))

    def add_port(self,
        protocol: PortMappingProtocol,
        external_port: int,
        local_addr: Tuple[str, int],
        lease_duration: int,
        description: str
    ):
        """
        Adds a port mapping for a fixed external port
        Raises AddPortError
        """

        self._run(negotiator.add_port(protocol, external_port, local_addr, lease_duration, description))

    def remove_port(self, protocol: PortMappingProtocol, external_port: int):
        """
        Removes the port mapping of external_port
        Raises RemovePortError
        """

        self._run(negotiator.remove_port(protocol, external_port))

    def get_generic_port_mapping_entry(self, index: int) -> PortMappingEntry:
        """
        Get a single mapping given the index in the gateway's table of mappings
        Raises GetGenericPortMappingEntryError
        """

        return self._run(negotiator.get_generic_port_mapping_entry(index))

    def get_all_port_mappings(self) -> List[PortMappingEntry]:
        return self._run(negotiator.get_all_port_mappings())
