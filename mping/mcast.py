"""Multicast group resolution and validation."""

import logging

from mping.address import IPVersion
from mping.dns import resolve
from mping.errors import InternalConsistencyError, InvalidMulticastAddress
from mping.models import MulticastAddress

logger = logging.getLogger(__name__)

DEFAULT_MCAST4_ADDR = "232.43.211.234"
DEFAULT_MCAST6_ADDR = "ff3e::4321:1234"

DEFAULT_MCAST_ADDRS: dict[IPVersion, str] = {
    IPVersion.V4: DEFAULT_MCAST4_ADDR,
    IPVersion.V6: DEFAULT_MCAST6_ADDR,
}


def resolve_multicast(
    ip_version: int,
    label: str | None,
    port: str | int,
    defaults: dict[IPVersion, str] | None = None,
) -> MulticastAddress:
    """Resolve the session's multicast group.

    Args:
        ip_version: The concrete (4 or 6) session version.
        label: Group given by the user, or None for the default group.
        port: Port the group is resolved with; it becomes the session port.
        defaults: Default group per version; ``DEFAULT_MCAST_ADDRS`` when None.

    Returns:
        A ``MulticastAddress`` holding a validated multicast address.

    Raises:
        ResolutionError: If the group cannot be resolved.
        InvalidMulticastAddress: If the group is not a multicast address.
        InternalConsistencyError: If *ip_version* is not concrete, or the
            group has no address of that version.
    """
    if defaults is None:
        defaults = DEFAULT_MCAST_ADDRS

    if label is None:
        label = defaults.get(IPVersion(ip_version))
        if label is None:
            raise InternalConsistencyError(
                f"no default multicast address for IP version {int(ip_version)}"
            )
        logger.debug("Using default multicast address %s", label)

    candidates = resolve(label, port, ip_version)
    address = next((c for c in candidates if c.version == ip_version), None)
    if address is None:
        raise InternalConsistencyError(
            f"mcast address {label} has no IPv{int(ip_version)} address"
        )

    if not address.is_multicast:
        raise InvalidMulticastAddress(
            f"Given address {label} is not valid multicast address"
        )

    logger.info("Multicast address %s resolved to %s", label, address)
    return MulticastAddress(label=label, address=address)
