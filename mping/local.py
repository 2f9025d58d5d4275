"""Local address extraction from the target list."""

import logging

from mping.address import IPVersion
from mping.errors import InternalConsistencyError
from mping.interfaces import LocalMatch
from mping.models import LocalAddress, Target

logger = logging.getLogger(__name__)


def extract_local_address(
    targets: list[Target], match: LocalMatch, ip_version: int
) -> tuple[LocalAddress, bool]:
    """Turn the matched local target into the session's local address.

    The interface address is taken as is, with the port of the matched
    target's own address so local and remote ends agree. When more than one
    target was given the matched one is removed from *targets*; when it is
    the only target it stays, and the session runs in single-target mode.

    Args:
        targets: The target list; modified in place.
        match: Result of ``find_local_match``.
        ip_version: Concrete session version.

    Returns:
        ``(local_address, single_target)``.

    Raises:
        InternalConsistencyError: If the interface address is neither IPv4
            nor IPv6, or the target has no address of that family.
    """
    version = match.address.version
    if version not in (IPVersion.V4, IPVersion.V6) or version != ip_version:
        raise InternalConsistencyError(
            f"local address family {version!r} does not match session IP version"
        )

    target_addr = match.target.address_for(version)
    if target_addr is None:
        raise InternalConsistencyError(f"host {match.target.label} lost its local address")

    local = LocalAddress(
        host_name=match.target.label,
        address=match.address.with_port(target_addr.port),
        ifname=match.ifname,
    )

    single_target = len(targets) == 1
    if not single_target:
        targets.remove(match.target)
        logger.debug("Removed local address %s from remote list", match.target.label)
    else:
        logger.info("Only local address %s given, single target mode", match.target.label)

    return local, single_target
