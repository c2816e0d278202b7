"""
Parsing of SOAP responses and translation of UPnP error codes
"""

import ipaddress
from typing import Optional

from bs4 import BeautifulSoup

from pyigd.models import PortMappingProtocol, PortMappingEntry, RequestResponse
from pyigd.exceptions import (
    Reason,
    RequestError,
    InvalidResponseError,
    ErrorCodeError,
    GetExternalIPError,
    AddAnyPortError,
    AddPortError,
    RemovePortError,
    GetGenericPortMappingEntryError,
)

# UPnP error codes
METHOD_UNKNOWN = 401
DESCRIPTION_TOO_LONG = 605
ACTION_NOT_AUTHORIZED = 606
SPECIFIED_ARRAY_INDEX_INVALID = 713
NO_SUCH_ENTRY_IN_ARRAY = 714
CONFLICT_IN_MAPPING_ENTRY = 718
SAME_PORT_VALUES_REQUIRED = 724
ONLY_PERMANENT_LEASES_SUPPORTED = 725
NO_PORT_MAPS_AVAILABLE = 728


def parse_response(text: str, ok: str) -> RequestResponse:
    """
    Parses a SOAP response body

    text - raw response body
    ok - name of the success element, "<ActionName>Response"

    Returns RequestResponse wrapping the success element
    Raises ErrorCodeError for a UPnP fault, InvalidResponseError for anything else
    """

    parser = BeautifulSoup(text, "lxml-xml")
    envelope = parser.find(True, recursive=False)
    if envelope is None:
        raise InvalidResponseError(text)

    body = envelope.find("Body", recursive=False)
    if body is None:
        raise InvalidResponseError(text)

    success = body.find(ok, recursive=False)
    if success is not None:
        return RequestResponse(text, success)

    upnp_error = None
    fault = body.find("Fault", recursive=False)
    if fault is not None:
        detail = fault.find("detail", recursive=False)
        if detail is not None:
            upnp_error = detail.find("UPnPError", recursive=False)
    if upnp_error is None:
        raise InvalidResponseError(text)

    code = upnp_error.find("errorCode", recursive=False)
    description = upnp_error.find("errorDescription", recursive=False)
    if code is None or description is None or description.string is None:
        raise InvalidResponseError(text)

    code = parse_unsigned(code.get_text(), 0xFFFF)
    if code is None:
        raise InvalidResponseError(text)
    raise ErrorCodeError(code, str(description.string))


def parse_unsigned(text: Optional[str], maximum: int) -> Optional[int]:
    """
    Returns text as an int in [0, maximum], None if it is not one
    """

    if text is None:
        return None
    text = text.strip()
    if not text.isdigit() or not text.isascii():
        return None
    value = int(text)
    if value > maximum:
        return None
    return value


def error_code(err: RequestError) -> Optional[int]:
    if isinstance(err, ErrorCodeError):
        return err.code
    return None


def parse_external_ip(response: RequestResponse) -> ipaddress.IPv4Address:
    text = response.field("NewExternalIPAddress")
    try:
        return ipaddress.IPv4Address((text or "").strip())
    except ValueError as e:
        raise GetExternalIPError.wrap(InvalidResponseError(response.text)) from e


def parse_reserved_port(response: RequestResponse) -> int:
    port = parse_unsigned(response.field("NewReservedPort"), 0xFFFF)
    if port is None:
        raise AddAnyPortError.wrap(InvalidResponseError(response.text))
    return port


def parse_port_mapping_entry(response: RequestResponse) -> PortMappingEntry:
    """
    Decodes a GetGenericPortMappingEntryResponse, every field is validated
    """

    def invalid(message):
        return GetGenericPortMappingEntryError.wrap(InvalidResponseError(message))

    def extract_field(name):
        value = response.field(name)
        if value is None:
            raise invalid("{} is missing".format(name))
        return value

    def extract_unsigned(name, maximum):
        value = parse_unsigned(extract_field(name), maximum)
        if value is None:
            raise invalid("Field {} is invalid".format(name))
        return value

    remote_host = extract_field("NewRemoteHost")
    external_port = extract_unsigned("NewExternalPort", 0xFFFF)

    protocol = extract_field("NewProtocol")
    if protocol not in ("TCP", "UDP"):
        raise invalid("Field NewProtocol is invalid")
    protocol = PortMappingProtocol(protocol)

    internal_port = extract_unsigned("NewInternalPort", 0xFFFF)

    internal_client = extract_field("NewInternalClient")
    if not internal_client:
        raise invalid("Field NewInternalClient is empty")

    enabled = extract_field("NewEnabled")
    if enabled not in ("0", "1"):
        raise invalid("Field NewEnabled is invalid")

    description = extract_field("NewPortMappingDescription")
    lease_duration = extract_unsigned("NewLeaseDuration", 0xFFFFFFFF)

    return PortMappingEntry(
        remote_host=remote_host,
        external_port=external_port,
        protocol=protocol,
        internal_port=internal_port,
        internal_client=internal_client,
        enabled=enabled == "1",
        description=description,
        lease_duration=lease_duration
    )


def _convert(err: RequestError, error_class, reasons: dict):
    reason = reasons.get(error_code(err))
    if reason is None:
        return error_class.wrap(err)
    return error_class(reason)


def convert_get_external_ip_error(err: RequestError) -> GetExternalIPError:
    return _convert(err, GetExternalIPError, {
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
    })


def convert_add_any_port_error(err: RequestError) -> AddAnyPortError:
    return _convert(err, AddAnyPortError, {
        DESCRIPTION_TOO_LONG: Reason.DESCRIPTION_TOO_LONG,
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        NO_PORT_MAPS_AVAILABLE: Reason.NO_PORTS_AVAILABLE,
    })


def convert_add_random_port_mapping_error(err: RequestError) -> AddAnyPortError:
    # 718 and 724 drive the retry loop and never get here
    return _convert(err, AddAnyPortError, {
        DESCRIPTION_TOO_LONG: Reason.DESCRIPTION_TOO_LONG,
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        ONLY_PERMANENT_LEASES_SUPPORTED: Reason.ONLY_PERMANENT_LEASES_SUPPORTED,
    })


def convert_add_same_port_mapping_error(err: RequestError) -> AddAnyPortError:
    return _convert(err, AddAnyPortError, {
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        CONFLICT_IN_MAPPING_ENTRY: Reason.EXTERNAL_PORT_IN_USE,
        ONLY_PERMANENT_LEASES_SUPPORTED: Reason.ONLY_PERMANENT_LEASES_SUPPORTED,
    })


def convert_add_port_error(err: RequestError) -> AddPortError:
    return _convert(err, AddPortError, {
        DESCRIPTION_TOO_LONG: Reason.DESCRIPTION_TOO_LONG,
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        CONFLICT_IN_MAPPING_ENTRY: Reason.PORT_IN_USE,
        SAME_PORT_VALUES_REQUIRED: Reason.SAME_PORT_VALUES_REQUIRED,
        ONLY_PERMANENT_LEASES_SUPPORTED: Reason.ONLY_PERMANENT_LEASES_SUPPORTED,
    })


def convert_remove_port_error(err: RequestError) -> RemovePortError:
    return _convert(err, RemovePortError, {
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        NO_SUCH_ENTRY_IN_ARRAY: Reason.NO_SUCH_PORT_MAPPING,
    })


def convert_get_generic_port_mapping_entry_error(err: RequestError) -> GetGenericPortMappingEntryError:
    return _convert(err, GetGenericPortMappingEntryError, {
        ACTION_NOT_AUTHORIZED: Reason.ACTION_NOT_AUTHORIZED,
        SPECIFIED_ARRAY_INDEX_INVALID: Reason.SPECIFIED_ARRAY_INDEX_INVALID,
    })


def convert_get_external_ip_to_add_any_port_error(err: GetExternalIPError) -> AddAnyPortError:
    if err.reason is Reason.ACTION_NOT_AUTHORIZED:
        return AddAnyPortError(Reason.ACTION_NOT_AUTHORIZED)
    return AddAnyPortError.wrap(err.request_error)
