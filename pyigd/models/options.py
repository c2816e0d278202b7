from typing import Optional, Tuple

from pyigd.static import BIND_ADDRESS, SSDP_ADDRESS, DEFAULT_TIMEOUT


class SearchOptions:
    def __init__(self,
        bind_addr: Tuple[str, int]=BIND_ADDRESS,
        broadcast_address: Tuple[str, int]=SSDP_ADDRESS,
        timeout: Optional[float]=DEFAULT_TIMEOUT
    ):
        """
        bind_addr - local (ip, port) to bind the search socket to (default is all interfaces)
        broadcast_address - (ip, port) the M-SEARCH request is sent to (default is the SSDP multicast group)
        timeout - seconds the whole search may take, None to wait forever (default is 3 seconds)
        """

        self.bind_addr = bind_addr
        self.broadcast_address = broadcast_address
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"SearchOptions(bind_addr={self.bind_addr}, broadcast_address={self.broadcast_address}, timeout={self.timeout})"
