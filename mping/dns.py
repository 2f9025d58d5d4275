"""Name resolution: labels to candidate socket addresses."""

import logging
import socket

from mping.address import IPVersion, SocketAddress, family_for_version, version_for_family
from mping.errors import ResolutionError

logger = logging.getLogger(__name__)


def resolve(
    label: str, port: str | int, ip_version: int = IPVersion.ANY
) -> list[SocketAddress]:
    """Resolve a hostname or literal address to all usable socket addresses.

    Wraps ``socket.getaddrinfo`` for datagram sockets and keeps only IPv4 and
    IPv6 results, deduplicated with the first occurrence winning.

    Args:
        label: Hostname or literal address (e.g. ``"node1"``, ``"ff3e::1"``).
        port: Port number or service name passed through to the resolver.
        ip_version: 4 or 6 to restrict the lookup to one family, 0 for both.

    Returns:
        Candidate addresses in resolver order. May be empty.

    Raises:
        ResolutionError: If the resolver cannot resolve *label* at all.
    """
    family = family_for_version(ip_version)
    logger.debug("Resolving %s (port=%s, ip_version=%d)", label, port, ip_version)

    try:
        results = socket.getaddrinfo(label, port, family=family, type=socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise ResolutionError(f"Can't get addr info for {label}: {exc}") from exc

    out: list[SocketAddress] = []
    for fam, _type, _proto, _canonname, sockaddr in results:
        if version_for_family(fam) is None:
            continue
        addr = SocketAddress.from_sockaddr(fam, sockaddr)
        if addr not in out:
            out.append(addr)

    logger.debug("Resolved %s → %d address(es)", label, len(out))
    return out
