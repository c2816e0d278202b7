import logging
from typing import Dict, Optional

import requests

from pyigd.static import SCHEME, REQUEST_TIMEOUT
from pyigd.exceptions import HTTPError, RequestIOError

logger = logging.getLogger(__name__)

class Requester:
    def __init__(self, timeout: float=REQUEST_TIMEOUT):
        """
        timeout - upper bound in seconds for any single HTTP request
        """

        self.timeout = timeout

    @staticmethod
    def make_headers(action: str) -> Dict[str, str]:
        """
        Generates headers for request

        action - SOAPAction
        """

        return {
            "SOAPAction": '"{scheme}#{action}"'.format(
                scheme=SCHEME,
                action=action
            ),
            "Content-Type": 'text/xml; charset="utf-8"'
        }

    @staticmethod
    def make_body(content: str) -> str:
        """
        Generates body for request

        content - body content
        """

        return (
            '<?xml version="1.0"?>\n'
            '<s:Envelope s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/" '
            'xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">\n'
            "<s:Body>{content}</s:Body>\n"
            "</s:Envelope>"
        ).format(content=content)

    def request_timeout(self, timeout: Optional[float]=None) -> Optional[float]:
        if timeout is None:
            return self.timeout
        if self.timeout is None:
            return timeout
        return min(timeout, self.timeout)

    def fetch(self, url, timeout: Optional[float]=None) -> bytes:
        """
        GETs url and returns the body

        url - str or yarl.URL
        timeout - seconds left for the caller, capped by the requester's own timeout
        """

        logger.debug("Fetching %s", url)
        try:
            r = requests.get(str(url), timeout=self.request_timeout(timeout))
            r.raise_for_status()
        except requests.Timeout as e:
            raise RequestIOError(str(e)) from e
        except requests.RequestException as e:
            raise HTTPError(str(e)) from e

        return r.content

    def do_request(self, url, action: str, content: str) -> str:
        """
        POSTs a SOAP action and returns the response text

        Error statuses are not raised, gateways report UPnP faults with HTTP 500
        """

        headers = self.make_headers(action)
        body = self.make_body(content)

        logger.debug("Sending %s to %s", action, url)
        try:
            r = requests.post(
                str(url),
                headers=headers,
                data=body.encode("utf-8"),
                timeout=self.timeout
            )
        except requests.Timeout as e:
            raise RequestIOError(str(e)) from e
        except requests.RequestException as e:
            raise HTTPError(str(e)) from e

        return r.text
