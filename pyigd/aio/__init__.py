"""
asyncio interface: coroutine versions of the search functions and a Gateway
whose operations are coroutines
"""

from pyigd.aio.requester import AsyncRequester
from pyigd.aio.gateway import Gateway
from pyigd.aio.search import (
    get_control_url,
    search_gateway,
    search_gateway_from,
    search_gateway_from_timeout,
    search_gateway_timeout,
)
