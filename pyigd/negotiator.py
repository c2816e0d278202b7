"""
Gateway operations, independent of the transport

Every operation is a generator. It yields SoapRequest values, and the driver
sends back the RequestResponse of each one or throws the RequestError it
failed with into the generator. The value the generator returns is the
operation's result. pyigd.gateway.Gateway drives these with blocking I/O,
pyigd.aio.gateway.Gateway with asyncio.
"""

import logging
import random
from collections import namedtuple
from typing import Callable, Tuple

from pyigd.static import (
    PORT_RANGE,
    MAX_RETRIES,
    GET_EXTERNAL_IP_ADDRESS,
    ADD_ANY_PORT_MAPPING,
    ADD_PORT_MAPPING,
    DELETE_PORT_MAPPING,
    GET_GENERIC_PORT_MAPPING_ENTRY,
)
from pyigd.network import messages
from pyigd import parsing
from pyigd.exceptions import (
    Reason,
    RequestError,
    AddAnyPortError,
    AddPortError,
    GetExternalIPError,
    GetGenericPortMappingEntryError,
)

logger = logging.getLogger(__name__)

SoapRequest = namedtuple("SoapRequest", ["action", "content"])


def random_port() -> int:
    """
    Returns a random port from the dynamic/private range
    """

    return random.randrange(*PORT_RANGE)


def get_external_ip():
    try:
        response = yield SoapRequest(GET_EXTERNAL_IP_ADDRESS, messages.format_get_external_ip_message())
    except RequestError as e:
        raise parsing.convert_get_external_ip_error(e) from e

    return parsing.parse_external_ip(response)


def add_any_port(
    protocol,
    local_addr: Tuple[str, int],
    lease_duration: int,
    description: str,
    port_picker: Callable[[], int]=random_port
):
    """
    Adds a port mapping with any external port, returns the external port

    Tries AddAnyPortMapping with a random port first. A gateway that does not
    know that method gets AddPortMapping with a new random port, up to
    MAX_RETRIES times while the port conflicts with an existing mapping. If the
    gateway requires internal and external ports to match, one last attempt is
    made with the internal port.
    """

    if local_addr[1] == 0:
        raise AddAnyPortError(Reason.INTERNAL_PORT_ZERO_INVALID)

    external_port = port_picker()
    try:
        response = yield SoapRequest(
            ADD_ANY_PORT_MAPPING,
            messages.format_add_any_port_mapping_message(
                protocol, external_port, local_addr, lease_duration, description
            )
        )
    except RequestError as e:
        if parsing.error_code(e) != parsing.METHOD_UNKNOWN:
            raise parsing.convert_add_any_port_error(e) from e
        logger.debug("Gateway does not support %s, falling back to %s", ADD_ANY_PORT_MAPPING, ADD_PORT_MAPPING)
    else:
        return parsing.parse_reserved_port(response)

    return (yield from retry_add_random_port_mapping(
        protocol, local_addr, lease_duration, description, port_picker
    ))


def retry_add_random_port_mapping(protocol, local_addr, lease_duration, description, port_picker):
    for attempt in range(MAX_RETRIES):
        external_port = port_picker()
        try:
            yield SoapRequest(
                ADD_PORT_MAPPING,
                messages.format_add_port_mapping_message(
                    protocol, external_port, local_addr, lease_duration, description
                )
            )
        except RequestError as e:
            code = parsing.error_code(e)
            if code == parsing.CONFLICT_IN_MAPPING_ENTRY:
                logger.debug(
                    "External port %d is in use (attempt %d/%d)",
                    external_port, attempt + 1, MAX_RETRIES
                )
                continue
            if code == parsing.SAME_PORT_VALUES_REQUIRED:
                break
            raise parsing.convert_add_random_port_mapping_error(e) from e
        else:
            return external_port
    else:
        raise AddAnyPortError(Reason.NO_PORTS_AVAILABLE)

    logger.debug("Gateway requires same port values, trying port %d", local_addr[1])
    return (yield from add_same_port_mapping(protocol, local_addr, lease_duration, description))


def add_same_port_mapping(protocol, local_addr, lease_duration, description):
    try:
        yield SoapRequest(
            ADD_PORT_MAPPING,
            messages.format_add_port_mapping_message(
                protocol, local_addr[1], local_addr, lease_duration, description
            )
        )
    except RequestError as e:
        raise parsing.convert_add_same_port_mapping_error(e) from e

    return local_addr[1]


def get_any_address(protocol, local_addr, lease_duration, description, port_picker=random_port):
    """
    Returns (external ip, external port) of a new mapping to local_addr
    """

    try:
        ip = yield from get_external_ip()
    except GetExternalIPError as e:
        raise parsing.convert_get_external_ip_to_add_any_port_error(e) from e

    port = yield from add_any_port(protocol, local_addr, lease_duration, description, port_picker)
    return str(ip), port


def add_port(protocol, external_port: int, local_addr: Tuple[str, int], lease_duration: int, description: str):
    if external_port == 0:
        raise AddPortError(Reason.EXTERNAL_PORT_ZERO_INVALID)
    if local_addr[1] == 0:
        raise AddPortError(Reason.INTERNAL_PORT_ZERO_INVALID)

    try:
        yield SoapRequest(
            ADD_PORT_MAPPING,
            messages.format_add_port_mapping_message(
                protocol, external_port, local_addr, lease_duration, description
            )
        )
    except RequestError as e:
        raise parsing.convert_add_port_error(e) from e


def remove_port(protocol, external_port: int):
    try:
        yield SoapRequest(
            DELETE_PORT_MAPPING,
            messages.format_delete_port_message(protocol, external_port)
        )
    except RequestError as e:
        raise parsing.convert_remove_port_error(e) from e


def get_generic_port_mapping_entry(index: int):
    try:
        response = yield SoapRequest(
            GET_GENERIC_PORT_MAPPING_ENTRY,
            messages.format_get_generic_port_mapping_entry_message(index)
        )
    except RequestError as e:
        raise parsing.convert_get_generic_port_mapping_entry_error(e) from e

    return parsing.parse_port_mapping_entry(response)


def get_all_port_mappings():
    """
    Returns every entry of the port mapping table, in index order
    """

    index = 0
    all_mappings = []
    # keep going until we get an out of bounds error
    while True:
        try:
            mapping = yield from get_generic_port_mapping_entry(index)
        except GetGenericPortMappingEntryError as e:
            if e.reason is Reason.SPECIFIED_ARRAY_INDEX_INVALID:
                break
            raise
        all_mappings.append(mapping)
        index += 1

    return all_mappings


def drive(operation, perform):
    """
    Runs an operation with a blocking perform(SoapRequest) -> RequestResponse
    """

    try:
        request = next(operation)
        while True:
            try:
                response = perform(request)
            except RequestError as e:
                request = operation.throw(e)
            else:
                request = operation.send(response)
    except StopIteration as stop:
        return stop.value


async def drive_async(operation, perform):
    """
    Runs an operation with a coroutine perform(SoapRequest) -> RequestResponse
    """

    try:
        request = next(operation)
        while True:
            try:
                response = await perform(request)
            except RequestError as e:
                request = operation.throw(e)
            else:
                request = operation.send(response)
    except StopIteration as stop:
        return stop.value
