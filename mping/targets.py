"""Target collection: command-line labels to a deduplicated TargetList."""

import logging

from mping.address import IPVersion, SocketAddress
from mping.dns import resolve
from mping.errors import LoopbackRejected, UsageError
from mping.models import Target

logger = logging.getLogger(__name__)


def collect_targets(
    labels: list[str], port: str | int, ip_version: int = IPVersion.ANY
) -> list[Target]:
    """Resolve every remote label and build the session's target list.

    A label whose addresses overlap those of an earlier target is dropped
    silently, so ``node1`` and ``10.0.0.1`` naming the same host count once.

    Args:
        labels: Remote hosts in command-line order.
        port: Port passed to the resolver for every label.
        ip_version: Family hint, 0 for unconstrained or a forced 4/6.

    Returns:
        Targets in command-line order, each holding all its candidates.

    Raises:
        ResolutionError: If a label cannot be resolved.
        LoopbackRejected: If a label resolves to a loopback address.
        UsageError: If no target remains.
    """
    targets: list[Target] = []

    for label in labels:
        candidates = resolve(label, port, ip_version)

        if _is_in_list(candidates, targets):
            logger.debug("Address %r is a duplicate, ignoring", label)
            continue

        if _is_loopback(candidates, ip_version):
            raise LoopbackRejected(
                f"Address {label} looks like loopback. Loopback ping is not supported"
            )

        targets.append(Target(label=label, candidates=candidates))
        logger.debug("New address %r added to list (position %d)", label, len(targets) - 1)

    if not targets:
        raise UsageError("at least one remote address should be specified")

    return targets


def _is_in_list(candidates: list[SocketAddress], targets: list[Target]) -> bool:
    """True if any candidate matches any address already held by *targets*."""
    for target in targets:
        for held in target.addresses():
            if any(c.same_host(held) for c in candidates):
                return True
    return False


def _is_loopback(candidates: list[SocketAddress], ip_version: int) -> bool:
    return any(
        c.is_loopback
        for c in candidates
        if ip_version == IPVersion.ANY or c.version == ip_version
    )
