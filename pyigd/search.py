import logging
import socket
import time
from typing import Optional

from pyigd.static import BIND_ADDRESS, DEFAULT_TIMEOUT
from pyigd.models import SearchOptions
from pyigd.network import Requester, SSDP, decode_search_response, parse_search_result, get_control_url
from pyigd.gateway import Gateway
from pyigd.exceptions import SearchError, SearchIOError, SearchTimeoutError

logger = logging.getLogger(__name__)

def search_gateway(options: Optional[SearchOptions]=None, requester: Optional[Requester]=None) -> Gateway:
    """
    Searches the local network for a gateway

    options - SearchOptions (default binds to all interfaces with a 3 second timeout)
    requester - blocking Requester used for description fetches and by the returned Gateway

    Responses that can not be parsed or resolved are skipped. The timeout covers
    the whole search, description fetches included.

    Returns the first gateway whose control url could be resolved
    Raises SearchTimeoutError when none was found in time, SearchIOError on socket errors
    """

    if options is None:
        options = SearchOptions()
    if requester is None:
        requester = Requester()

    deadline = None
    if options.timeout is not None:
        deadline = time.monotonic() + options.timeout

    def remaining() -> Optional[float]:
        if deadline is None:
            return None
        left = deadline - time.monotonic()
        if left <= 0:
            raise SearchTimeoutError("Search timed out")
        return left

    try:
        with SSDP(options.bind_addr) as ssdp:
            ssdp.send(options.broadcast_address)
            while True:
                try:
                    response, address = ssdp.receive(remaining())
                except socket.timeout as e:
                    raise SearchTimeoutError("Search timed out") from e
                logger.debug("Received SSDP response from %s:%d", address[0], address[1])

                try:
                    location = parse_search_result(decode_search_response(response))
                    control_url = get_control_url(location, requester, remaining())
                except SearchTimeoutError:
                    raise
                except SearchError as e:
                    logger.debug("Skipping response from %s:%d: %s", address[0], address[1], e)
                    continue

                gateway = Gateway(location[0], control_url, requester)
                logger.info("Found gateway %s", gateway)
                return gateway
    except OSError as e:
        raise SearchIOError(str(e)) from e


def search_gateway_from_timeout(ip: str, timeout: Optional[float]) -> Gateway:
    """
    Search bound to the given interface, with the given timeout in seconds
    """

    return search_gateway(SearchOptions(bind_addr=(ip, 0), timeout=timeout))


def search_gateway_from(ip: str) -> Gateway:
    return search_gateway_from_timeout(ip, DEFAULT_TIMEOUT)


def search_gateway_timeout(timeout: Optional[float]) -> Gateway:
    return search_gateway_from_timeout(BIND_ADDRESS[0], timeout)
