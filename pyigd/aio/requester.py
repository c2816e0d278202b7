import asyncio
import logging
from typing import Optional

import aiohttp

from pyigd.static import REQUEST_TIMEOUT
from pyigd.network import Requester
from pyigd.exceptions import HTTPError, RequestIOError

logger = logging.getLogger(__name__)

class AsyncRequester:
    """
    aiohttp counterpart of pyigd.network.Requester, one session per request
    """

    make_headers = staticmethod(Requester.make_headers)
    make_body = staticmethod(Requester.make_body)

    def __init__(self, timeout: float=REQUEST_TIMEOUT):
        self.timeout = timeout

    def request_timeout(self, timeout: Optional[float]=None) -> aiohttp.ClientTimeout:
        if timeout is not None and self.timeout is not None:
            timeout = min(timeout, self.timeout)
        elif timeout is None:
            timeout = self.timeout
        return aiohttp.ClientTimeout(total=timeout)

    async def fetch(self, url, timeout: Optional[float]=None) -> bytes:
        logger.debug("Fetching %s", url)
        try:
            async with aiohttp.ClientSession(timeout=self.request_timeout(timeout)) as session, \
                    session.get(url) as response:
                response.raise_for_status()
                return await response.read()
        except asyncio.TimeoutError as e:
            raise RequestIOError("Request to {} timed out".format(url)) from e
        except aiohttp.ClientError as e:
            raise HTTPError(str(e)) from e

    async def do_request(self, url, action: str, content: str) -> str:
        headers = self.make_headers(action)
        body = self.make_body(content)

        logger.debug("Sending %s to %s", action, url)
        try:
            async with aiohttp.ClientSession(timeout=self.request_timeout()) as session, \
                    session.post(url, headers=headers, data=body.encode("utf-8")) as response:
                return await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise RequestIOError("Request to {} timed out".format(url)) from e
        except aiohttp.ClientError as e:
            raise HTTPError(str(e)) from e
