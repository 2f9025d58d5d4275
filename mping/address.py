"""Socket address value type and IP version helpers."""

import ipaddress
import socket
from dataclasses import dataclass, replace
from enum import IntEnum


class IPVersion(IntEnum):
    """IP version a session is committed to.

    ``ANY`` means no constraint: every participant supports both families.
    """

    ANY = 0
    V4 = 4
    V6 = 6


_FAMILY_TO_VERSION: dict[int, IPVersion] = {
    socket.AF_INET: IPVersion.V4,
    socket.AF_INET6: IPVersion.V6,
}

_VERSION_TO_FAMILY: dict[IPVersion, int] = {
    IPVersion.ANY: socket.AF_UNSPEC,
    IPVersion.V4: socket.AF_INET,
    IPVersion.V6: socket.AF_INET6,
}


def family_for_version(version: int) -> int:
    """Map an IP version (0, 4 or 6) to the matching ``socket.AF_*`` constant.

    Raises:
        ValueError: If *version* is not 0, 4 or 6.
    """
    return _VERSION_TO_FAMILY[IPVersion(version)]


def version_for_family(family: int) -> IPVersion | None:
    """Return the IP version of a socket family, or None for non-IP families."""
    return _FAMILY_TO_VERSION.get(family)


def split_zone(text: str) -> tuple[str, str | None]:
    """Split an IPv6 zone suffix off *text* (``"fe80::1%eth0"``)."""
    host, sep, zone = text.partition("%")
    return host, (zone if sep else None)


@dataclass(frozen=True)
class SocketAddress:
    """A concrete IPv4 or IPv6 socket address.

    Attributes:
        family: ``socket.AF_INET`` or ``socket.AF_INET6``.
        packed: Raw address bytes, 4 for IPv4 and 16 for IPv6.
        port: Port number in host order.
        flowinfo: IPv6 flow label (always 0 for IPv4).
        scope_id: IPv6 scope zone index (always 0 for IPv4).
    """

    family: int
    packed: bytes
    port: int = 0
    flowinfo: int = 0
    scope_id: int = 0

    def __post_init__(self) -> None:
        expected = {socket.AF_INET: 4, socket.AF_INET6: 16}.get(self.family)
        if expected is None:
            raise ValueError(f"Unsupported address family {self.family!r}")
        if len(self.packed) != expected:
            raise ValueError(
                f"Address payload must be {expected} bytes, got {len(self.packed)}"
            )
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"Port out of range: {self.port}")

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: tuple) -> "SocketAddress":
        """Build from a ``getaddrinfo``-style ``sockaddr`` tuple.

        IPv4 sockaddrs are ``(host, port)``; IPv6 ones are
        ``(host, port, flowinfo, scope_id)``.
        """
        host, _zone = split_zone(sockaddr[0])
        packed = socket.inet_pton(family, host)
        if family == socket.AF_INET6:
            return cls(family, packed, sockaddr[1], sockaddr[2], sockaddr[3])
        return cls(family, packed, sockaddr[1])

    @classmethod
    def from_text(cls, text: str, port: int = 0, scope_id: int = 0) -> "SocketAddress":
        """Build from a literal address such as ``"10.0.0.1"`` or ``"ff3e::1"``."""
        host, _zone = split_zone(text)
        ip = ipaddress.ip_address(host)
        if ip.version == 4:
            return cls(socket.AF_INET, ip.packed, port)
        return cls(socket.AF_INET6, ip.packed, port, scope_id=scope_id)

    @property
    def version(self) -> IPVersion:
        return _FAMILY_TO_VERSION[self.family]

    @property
    def ip(self) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
        return ipaddress.ip_address(self.packed)

    @property
    def host(self) -> str:
        return str(self.ip)

    @property
    def is_loopback(self) -> bool:
        ip = self.ip
        if ip.version == 6 and ip.ipv4_mapped is not None:
            return ip.ipv4_mapped.is_loopback
        return ip.is_loopback

    @property
    def is_multicast(self) -> bool:
        ip = self.ip
        if ip.version == 6 and ip.ipv4_mapped is not None:
            return ip.ipv4_mapped.is_multicast
        return ip.is_multicast

    def same_host(self, other: "SocketAddress") -> bool:
        """Compare family and address bytes, ignoring port and scope."""
        return self.family == other.family and self.packed == other.packed

    def with_port(self, port: int) -> "SocketAddress":
        return replace(self, port=port)

    def to_sockaddr(self) -> tuple:
        """Return the tuple form accepted by ``socket.bind``/``sendto``."""
        if self.family == socket.AF_INET6:
            return (self.host, self.port, self.flowinfo, self.scope_id)
        return (self.host, self.port)

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"
