"""IP version negotiation across the multicast group and all targets."""

import logging

from mping.address import IPVersion
from mping.dns import resolve
from mping.errors import FamilyMismatchError, ResolutionError
from mping.models import Target, deep_supported_version

logger = logging.getLogger(__name__)


def negotiate_ip_version(
    ip_version: int,
    mcast_label: str | None,
    port: str | int,
    targets: list[Target],
) -> IPVersion:
    """Decide the IP version the whole session will use.

    Precedence, with no backtracking:

    1. A version forced by the user (``-4``/``-6``) is returned as is.
    2. A multicast group that resolves to only one family forces that
       family; every target must support it.
    3. Otherwise the first target supporting a single family sets the
       version and every other target must support it too. If all targets
       are dual-stack the result is ``IPVersion.ANY``.

    Args:
        ip_version: Forced version (4 or 6), or 0.
        mcast_label: Multicast group given by the user, or None.
        port: Port used to resolve the group.
        targets: Collected targets, not yet materialized.

    Returns:
        The negotiated ``IPVersion``.

    Raises:
        ResolutionError: If the group or a target supports neither family.
        FamilyMismatchError: If the families cannot be reconciled.
    """
    if ip_version != IPVersion.ANY:
        logger.info("User forced IP version %d, using that", ip_version)
        return IPVersion(ip_version)

    if mcast_label is not None:
        mcast_version = deep_supported_version(resolve(mcast_label, port))
        logger.debug("IP version for mcast %s is %s", mcast_label, _fmt(mcast_version))

        if mcast_version is None:
            raise ResolutionError(
                f"Mcast address {mcast_label} doesn't support ipv4 or ipv6"
            )

        if mcast_version != IPVersion.ANY:
            logger.info(
                "Mcast address %s supports only IPv%d, using that",
                mcast_label,
                mcast_version,
            )
            for target in targets:
                version = _target_version(target)
                if version not in (IPVersion.ANY, mcast_version):
                    raise FamilyMismatchError(
                        f"Multicast address is ipv{int(mcast_version)} but host "
                        f"{target.label} supports only ipv{int(version)}"
                    )
            return mcast_version

    pivot = IPVersion.ANY
    for target in targets:
        pivot = _target_version(target)
        if pivot != IPVersion.ANY:
            break

    if pivot == IPVersion.ANY:
        logger.info("Every address supports all IP versions")
        return IPVersion.ANY

    for target in targets:
        version = _target_version(target)
        if version not in (IPVersion.ANY, pivot):
            raise FamilyMismatchError(
                f"Host {target.label} doesn't support IP version {int(pivot)}"
            )

    logger.info("Every address supports IPv%d", pivot)
    return pivot


def _target_version(target: Target) -> IPVersion:
    version = target.supported_version()
    logger.debug("IP version for %s is %s", target.label, _fmt(version))
    if version is None:
        raise ResolutionError(f"Host {target.label} doesn't support ipv4 or ipv6")
    return version


def _fmt(version: IPVersion | None) -> str:
    if version is None:
        return "none"
    if version == IPVersion.ANY:
        return "any"
    return f"IPv{int(version)}"
