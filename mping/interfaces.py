"""Local interface enumeration and matching of targets to local addresses."""

import logging
import socket
from dataclasses import dataclass

import psutil

from mping.address import IPVersion, SocketAddress, split_zone
from mping.errors import LocalAddressNotFound
from mping.models import Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterfaceAddress:
    """One IP address configured on a local interface.

    Attributes:
        name: Interface name as reported by the system (e.g. ``"eth0"``).
        address: The configured address, port 0.
    """

    name: str
    address: SocketAddress


@dataclass
class LocalMatch:
    """A target found to be one of the local host's own addresses.

    Attributes:
        ifname: Name of the interface carrying the address.
        address: The interface address.
        target: The matching target, still in the target list.
        ip_version: Family of the match; fixes the session version when
            negotiation left it unconstrained.
    """

    ifname: str
    address: SocketAddress
    target: Target
    ip_version: IPVersion


def list_interfaces() -> list[InterfaceAddress]:
    """Return every IPv4 and IPv6 address of every local interface.

    Uses ``psutil.net_if_addrs()``. IPv6 zone suffixes (``fe80::1%eth0``)
    become the scope id of the returned address.
    """
    out: list[InterfaceAddress] = []
    for ifname, addrs in psutil.net_if_addrs().items():
        for snic in addrs:
            if snic.family not in (socket.AF_INET, socket.AF_INET6):
                continue
            host, zone = split_zone(snic.address)
            scope_id = _scope_id(zone) if snic.family == socket.AF_INET6 else 0
            address = SocketAddress.from_text(host, scope_id=scope_id)
            out.append(InterfaceAddress(name=ifname, address=address))

    logger.debug("Found %d local interface address(es)", len(out))
    return out


def find_local_match(
    targets: list[Target],
    ip_version: int,
    interfaces: list[InterfaceAddress] | None = None,
) -> LocalMatch:
    """Find the first target whose address belongs to a local interface.

    Targets are scanned in list order. With ``IPVersion.ANY`` IPv6 matches
    are preferred over IPv4 ones.

    Args:
        targets: Collected targets.
        ip_version: Negotiated version, or 0.
        interfaces: Local addresses to match against; enumerated from the
            system when None.

    Returns:
        The ``LocalMatch`` describing the interface and target.

    Raises:
        LocalAddressNotFound: If no target is a local address.
    """
    if interfaces is None:
        interfaces = list_interfaces()

    if ip_version == IPVersion.ANY:
        versions = [IPVersion.V6, IPVersion.V4]
    else:
        versions = [IPVersion(ip_version)]

    for version in versions:
        for target in targets:
            for addr in target.addresses():
                if addr.version != version:
                    continue
                for iface in interfaces:
                    if iface.address.same_host(addr):
                        logger.info(
                            "Local address %s of %s found on interface %s",
                            iface.address.host,
                            target.label,
                            iface.name,
                        )
                        return LocalMatch(
                            ifname=iface.name,
                            address=iface.address,
                            target=target,
                            ip_version=version,
                        )

    raise LocalAddressNotFound("Can't find local address in arguments")


def _scope_id(zone: str | None) -> int:
    """Interface index for an IPv6 zone; 0 when the address carries none."""
    if zone is None:
        return 0
    if zone.isdigit():
        return int(zone)
    return socket.if_nametoindex(zone)
