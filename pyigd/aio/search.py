import asyncio
import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from pyigd.static import SSDP_REQUEST, BIND_ADDRESS, DEFAULT_TIMEOUT
from pyigd.models import SearchOptions
from pyigd.network import decode_search_response, parse_search_result, parse_control_url
from pyigd.aio.gateway import Gateway
from pyigd.aio.requester import AsyncRequester
from pyigd.exceptions import (
    HTTPError,
    RequestIOError,
    SearchError,
    SearchHTTPError,
    SearchIOError,
    SearchTimeoutError,
)

logger = logging.getLogger(__name__)

class SearchState(Enum):
    FETCHING = "fetching"
    DONE = "done"
    FAILED = "failed"


class Event(Enum):
    DATAGRAM = "datagram"
    CONTROL_URL = "control_url"
    ERROR = "error"


async def get_control_url(
    location: Tuple[Tuple[str, int], str],
    requester: Optional[AsyncRequester]=None,
    timeout: Optional[float]=None
) -> str:
    """
    Fetches a device description and resolves its control url

    location - ((ip, port), path) as returned by parse_search_result
    """

    if requester is None:
        requester = AsyncRequester()

    addr, path = location
    profile_location = "http://{}:{}{}".format(addr[0], addr[1], path)
    try:
        profile = await requester.fetch(profile_location, timeout)
    except RequestIOError as e:
        raise SearchIOError(str(e)) from e
    except HTTPError as e:
        raise SearchHTTPError(str(e)) from e

    return parse_control_url(profile)


class SearchProtocol(asyncio.DatagramProtocol):
    def __init__(self):
        self.events = asyncio.Queue()

    def datagram_received(self, data: bytes, addr):
        self.events.put_nowait((Event.DATAGRAM, (data, addr)))

    def error_received(self, exc: Exception):
        self.events.put_nowait((Event.ERROR, exc))


class Search:
    """
    One concurrent search over an open datagram endpoint

    Every responder gets at most one description fetch, keyed by the address
    of its LOCATION. Fetches run as tasks and report back through the same
    event queue as datagrams. The first resolved control url wins, fetches
    still running then are cancelled by close().
    """

    def __init__(self, transport: asyncio.DatagramTransport, protocol: SearchProtocol, requester: AsyncRequester):
        self.transport = transport
        self.events = protocol.events
        self.requester = requester
        self.pending: Dict[Tuple[str, int], SearchState] = {}
        self._tasks = set()

    async def run(self, broadcast_address: Tuple[str, int]) -> Gateway:
        logger.debug(
            "Sending SSDP request to %s:%d from %s",
            broadcast_address[0], broadcast_address[1], self.transport.get_extra_info("sockname")
        )
        self.transport.sendto(SSDP_REQUEST, broadcast_address)

        while True:
            event, payload = await self.events.get()
            if event is Event.DATAGRAM:
                self.handle_broadcast_response(*payload)
            elif event is Event.CONTROL_URL:
                gateway = self.handle_control_response(*payload)
                if gateway is not None:
                    return gateway
            else:
                raise SearchIOError(str(payload)) from payload

    def handle_broadcast_response(self, data: bytes, sender):
        logger.debug("Received SSDP response from %s:%d", sender[0], sender[1])
        try:
            location = parse_search_result(decode_search_response(data))
        except SearchError as e:
            logger.debug("Skipping response from %s:%d: %s", sender[0], sender[1], e)
            return

        addr = location[0]
        if addr in self.pending:
            logger.debug("Received duplicate SSDP response from %s:%d, dropping", addr[0], addr[1])
            return

        self.pending[addr] = SearchState.FETCHING
        task = asyncio.ensure_future(self.request_control_url(location))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def request_control_url(self, location):
        addr = location[0]
        try:
            control_url = await get_control_url(location, self.requester)
        except SearchError as e:
            self.events.put_nowait((Event.CONTROL_URL, (addr, e)))
        else:
            self.events.put_nowait((Event.CONTROL_URL, (addr, control_url)))

    def handle_control_response(self, addr: Tuple[str, int], result) -> Optional[Gateway]:
        if isinstance(result, SearchError):
            logger.debug("Could not resolve control url of %s:%d: %s", addr[0], addr[1], result)
            self.pending[addr] = SearchState.FAILED
            return None

        self.pending[addr] = SearchState.DONE
        gateway = Gateway(addr, result, self.requester)
        logger.info("Found gateway %s", gateway)
        return gateway

    async def close(self):
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self.transport.close()


async def search_gateway(options: Optional[SearchOptions]=None, requester: Optional[AsyncRequester]=None) -> Gateway:
    """
    Searches the local network for a gateway, resolving responders concurrently

    options - SearchOptions (default binds to all interfaces with a 3 second timeout)
    requester - AsyncRequester used for description fetches and by the returned Gateway

    Raises SearchTimeoutError when no gateway was resolved in time, SearchIOError on socket errors
    """

    if options is None:
        options = SearchOptions()
    if requester is None:
        requester = AsyncRequester()

    loop = asyncio.get_running_loop()
    try:
        transport, protocol = await loop.create_datagram_endpoint(SearchProtocol, local_addr=options.bind_addr)
    except OSError as e:
        raise SearchIOError(str(e)) from e

    search = Search(transport, protocol, requester)
    try:
        if options.timeout is None:
            return await search.run(options.broadcast_address)
        return await asyncio.wait_for(search.run(options.broadcast_address), options.timeout)
    except asyncio.TimeoutError as e:
        raise SearchTimeoutError("Search timed out") from e
    finally:
        await search.close()


async def search_gateway_from_timeout(ip: str, timeout: Optional[float]) -> Gateway:
    return await search_gateway(SearchOptions(bind_addr=(ip, 0), timeout=timeout))


async def search_gateway_from(ip: str) -> Gateway:
    return await search_gateway_from_timeout(ip, DEFAULT_TIMEOUT)


async def search_gateway_timeout(timeout: Optional[float]) -> Gateway:
    return await search_gateway_from_timeout(BIND_ADDRESS[0], timeout)
