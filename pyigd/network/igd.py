import logging
from typing import Optional, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from pyigd.static import SCHEME, PPP_SCHEME
from pyigd.network.requester import Requester
from pyigd.exceptions import (
    HTTPError,
    RequestIOError,
    SearchHTTPError,
    SearchIOError,
    SearchXMLError,
    InvalidSearchResponseError,
)

logger = logging.getLogger(__name__)

# checked in this order within one serviceList
SCHEMES = (SCHEME, PPP_SCHEME)


def _child_text(tag: Tag, name: str) -> str:
    child = tag.find(name, recursive=False)
    if child is None:
        return ""
    return child.get_text().strip()


def scan_device(device: Tag) -> Optional[str]:
    """
    Depth-first search for the control url of a WAN connection service

    device - <device> element to start from

    Returns None if neither this device nor its sub devices expose one
    """

    stack = [device]
    while stack:
        device = stack.pop()

        found = {}
        service_list = device.find("serviceList", recursive=False)
        if service_list is not None:
            for service in service_list.find_all("service", recursive=False):
                schema = _child_text(service, "serviceType")
                control_url = _child_text(service, "controlURL")
                # an empty controlURL does not count as a match
                if schema in SCHEMES and control_url and schema not in found:
                    found[schema] = control_url
        for schema in SCHEMES:
            if schema in found:
                return found[schema]

        device_list = device.find("deviceList", recursive=False)
        if device_list is not None:
            # reversed so the first sub device is scanned first
            stack.extend(reversed(device_list.find_all("device", recursive=False)))

    return None


def parse_control_url(profile: Union[bytes, str]) -> str:
    """
    Returns the control url of the WANIPConnection (or WANPPPConnection) service

    profile - device description document
    """

    parser = BeautifulSoup(profile, "lxml-xml")
    root = parser.find(True, recursive=False)
    if root is None:
        raise SearchXMLError("Device description is not an XML document")

    device = root.find("device", recursive=False)
    if device is None:
        raise InvalidSearchResponseError("Device description has no root device")

    control_url = scan_device(device)
    if control_url is None:
        raise InvalidSearchResponseError("No WAN connection service found in device description")
    return control_url


def get_control_url(location: Tuple[Tuple[str, int], str], requester=None, timeout: Optional[float]=None) -> str:
    """
    Fetches a device description and resolves its control url

    location - ((ip, port), path) as returned by parse_search_result
    requester - blocking Requester used for the fetch (default is a new Requester)
    timeout - seconds the fetch may take
    """

    if requester is None:
        requester = Requester()

    addr, path = location
    profile_location = "http://{}:{}{}".format(addr[0], addr[1], path)
    try:
        profile = requester.fetch(profile_location, timeout)
    except RequestIOError as e:
        raise SearchIOError(str(e)) from e
    except HTTPError as e:
        raise SearchHTTPError(str(e)) from e

    control_url = parse_control_url(profile)
    logger.debug("Control url of %s is %s", profile_location, control_url)
    return control_url
