from enum import Enum


class PortMappingProtocol(Enum):
    TCP = "TCP"
    UDP = "UDP"

    def __str__(self) -> str:
        return self.value


class PortMappingEntry:
    def __init__(self,
        remote_host: str,
        external_port: int,
        protocol: PortMappingProtocol,
        internal_port: int,
        internal_client: str,
        enabled: bool,
        description: str,
        lease_duration: int
    ):
        """
        remote_host - remote host the mapping is restricted to ("" for any)
        external_port - external port on the gateway
        protocol - PortMappingProtocol of the mapping
        internal_port - port on the internal client traffic is sent to
        internal_client - ip address of the internal client
        enabled - whether the mapping is active
        description - description of the mapping
        lease_duration - remaining lease duration in seconds (0 is permanent)

        Entry of the gateway's port mapping table, as reported by GetGenericPortMappingEntry
        """

        self.remote_host = remote_host
        self.external_port = external_port
        self.protocol = protocol
        self.internal_port = internal_port
        self.internal_client = internal_client
        self.enabled = enabled
        self.description = description
        self.lease_duration = lease_duration

    def _key(self) -> tuple:
        return (
            self.remote_host,
            self.external_port,
            self.protocol,
            self.internal_port,
            self.internal_client,
            self.enabled,
            self.description,
            self.lease_duration,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, PortMappingEntry):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"PortMappingEntry(remote_host={self.remote_host!r}, external_port={self.external_port}, protocol={self.protocol}, internal_port={self.internal_port}, internal_client={self.internal_client!r}, enabled={self.enabled}, description={self.description!r}, lease_duration={self.lease_duration})"
