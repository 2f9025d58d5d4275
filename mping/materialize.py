"""Address materialization: one concrete address per target."""

import logging

from mping.models import Target

logger = logging.getLogger(__name__)


def materialize_targets(targets: list[Target], ip_version: int) -> None:
    """Collapse every target's candidates to the address for *ip_version*.

    Raises:
        InternalConsistencyError: If a target has no address of that version.
    """
    for target in targets:
        addr = target.materialize(ip_version)
        logger.debug("Host %s uses address %s", target.label, addr)
