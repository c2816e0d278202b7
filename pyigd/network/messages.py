from typing import Tuple
from xml.sax.saxutils import escape

from pyigd.static import (
    SCHEME,
    GET_EXTERNAL_IP_ADDRESS,
    ADD_ANY_PORT_MAPPING,
    ADD_PORT_MAPPING,
    DELETE_PORT_MAPPING,
    GET_GENERIC_PORT_MAPPING_ENTRY,
)
from pyigd.models import PortMappingProtocol

MAPPING_CONTENT = """<u:{action} xmlns:u="{scheme}">
    <NewProtocol>{protocol}</NewProtocol>
    <NewExternalPort>{external_port}</NewExternalPort>
    <NewInternalClient>{internal_ip}</NewInternalClient>
    <NewInternalPort>{internal_port}</NewInternalPort>
    <NewLeaseDuration>{duration}</NewLeaseDuration>
    <NewPortMappingDescription>{description}</NewPortMappingDescription>
    <NewEnabled>1</NewEnabled>
    <NewRemoteHost></NewRemoteHost>
</u:{action}>"""


def format_get_external_ip_message() -> str:
    return """<u:{action} xmlns:u="{scheme}">
</u:{action}>""".format(
        action=GET_EXTERNAL_IP_ADDRESS,
        scheme=SCHEME
    )


def _format_mapping_message(
    action: str,
    protocol: PortMappingProtocol,
    external_port: int,
    local_addr: Tuple[str, int],
    lease_duration: int,
    description: str
) -> str:
    return MAPPING_CONTENT.format(
        action=action,
        scheme=SCHEME,
        protocol=protocol,
        external_port=external_port,
        internal_ip=local_addr[0],
        internal_port=local_addr[1],
        duration=lease_duration,
        description=escape(description),
    )


def format_add_any_port_mapping_message(protocol, external_port, local_addr, lease_duration, description) -> str:
    return _format_mapping_message(
        ADD_ANY_PORT_MAPPING, protocol, external_port, local_addr, lease_duration, description
    )


def format_add_port_mapping_message(protocol, external_port, local_addr, lease_duration, description) -> str:
    return _format_mapping_message(
        ADD_PORT_MAPPING, protocol, external_port, local_addr, lease_duration, description
    )


def format_delete_port_message(protocol: PortMappingProtocol, external_port: int) -> str:
    return """<u:{action} xmlns:u="{scheme}">
    <NewProtocol>{protocol}</NewProtocol>
    <NewExternalPort>{external_port}</NewExternalPort>
    <NewRemoteHost></NewRemoteHost>
</u:{action}>""".format(
        action=DELETE_PORT_MAPPING,
        scheme=SCHEME,
        protocol=protocol,
        external_port=external_port
    )


def format_get_generic_port_mapping_entry_message(index: int) -> str:
    return """<u:{action} xmlns:u="{scheme}">
    <NewPortMappingIndex>{index}</NewPortMappingIndex>
</u:{action}>""".format(
        action=GET_GENERIC_PORT_MAPPING_ENTRY,
        scheme=SCHEME,
        index=index
    )
