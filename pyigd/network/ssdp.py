import ipaddress
import logging
import socket
from typing import Optional, Tuple

from yarl import URL

from pyigd.static import SSDP_REQUEST, MAX_RESPONSE_SIZE
from pyigd.exceptions import InvalidSearchResponseError, SearchUnicodeError

logger = logging.getLogger(__name__)

def decode_search_response(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SearchUnicodeError(str(e)) from e


def parse_search_result(text: str) -> Tuple[Tuple[str, int], str]:
    """
    Extracts the device description location from an SSDP response

    text - decoded SSDP response

    Returns ((ip, port), path) of the LOCATION header, header name is case-insensitive
    """

    for line in text.splitlines():
        line = line.strip()
        if not line.lower().startswith("location:"):
            continue

        location = line.split(":", 1)[1].strip()
        try:
            url = URL(location)
            ip = ipaddress.IPv4Address(url.host)
            port = url.explicit_port
        except ValueError as e:
            raise InvalidSearchResponseError("Invalid LOCATION {!r}".format(location)) from e
        if port is None:
            port = 80

        return (str(ip), port), url.path

    raise InvalidSearchResponseError("No LOCATION header in SSDP response")


class SSDP:
    def __init__(self, bind_addr: Tuple[str, int]):
        """
        bind_addr - local (ip, port) to listen for responses on

        Owns the UDP socket of one search
        """

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self.sock.bind(bind_addr)
        except OSError:
            self.sock.close()
            raise

    def send(self, broadcast_address: Tuple[str, int]):
        logger.debug(
            "Sending SSDP request to %s:%d from %s",
            broadcast_address[0], broadcast_address[1], self.sock.getsockname()
        )
        self.sock.sendto(SSDP_REQUEST, broadcast_address)

    def receive(self, timeout: Optional[float]) -> Tuple[bytes, Tuple[str, int]]:
        """
        Waits for the next datagram

        timeout - seconds to wait, None blocks forever (raises socket.timeout)
        """

        self.sock.settimeout(timeout)
        return self.sock.recvfrom(MAX_RESPONSE_SIZE)

    def close(self):
        self.sock.close()

    def __enter__(self) -> "SSDP":
        return self

    def __exit__(self, *exc_info):
        self.close()
