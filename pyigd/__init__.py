"""
pyigd: UPnP Internet Gateway Device client

Use one of the search_gateway functions to obtain a Gateway, then manage
port mappings through it. pyigd.aio has the asyncio equivalents.
"""

from pyigd.models import PortMappingProtocol, PortMappingEntry, SearchOptions
from pyigd.network import Requester, get_control_url
from pyigd.gateway import Gateway
from pyigd.search import (
    search_gateway,
    search_gateway_from,
    search_gateway_from_timeout,
    search_gateway_timeout,
)
from pyigd.exceptions import (
    IGDError,
    RequestError,
    HTTPError,
    RequestIOError,
    InvalidResponseError,
    ErrorCodeError,
    SearchError,
    SearchHTTPError,
    SearchIOError,
    SearchTimeoutError,
    SearchUnicodeError,
    SearchXMLError,
    InvalidSearchResponseError,
    Reason,
    GetExternalIPError,
    AddAnyPortError,
    AddPortError,
    RemovePortError,
    GetGenericPortMappingEntryError,
)

__version__ = "0.1.0"
