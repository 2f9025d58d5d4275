"""Session address pipeline.

Pipeline: collect targets → negotiate IP version → find local interface →
resolve multicast group → extract local address → materialize targets.
"""

import logging

from mping.address import IPVersion
from mping.interfaces import InterfaceAddress, find_local_match
from mping.local import extract_local_address
from mping.materialize import materialize_targets
from mping.mcast import resolve_multicast
from mping.models import SessionAddresses
from mping.negotiate import negotiate_ip_version
from mping.targets import collect_targets

logger = logging.getLogger(__name__)

DEFAULT_PORT = "4321"


def resolve_session(
    remote_addrs: list[str],
    *,
    port: str | int = DEFAULT_PORT,
    ip_version: int = IPVersion.ANY,
    mcast_label: str | None = None,
    mcast_defaults: dict[IPVersion, str] | None = None,
    interfaces: list[InterfaceAddress] | None = None,
) -> SessionAddresses:
    """Resolve all addresses a multicast ping session needs.

    Either everything resolves consistently or an ``MpingError`` is raised;
    there are no partial results.

    Args:
        remote_addrs: Remote hosts as typed on the command line. One of
            them must be an address of the local host.
        port: Port used for every resolution.
        ip_version: Forced version (4 or 6), or 0.
        mcast_label: Multicast group, or None for the default group.
        mcast_defaults: Default group per IP version.
        interfaces: Local interface addresses; enumerated from the system
            when None.

    Returns:
        The resolved ``SessionAddresses``.
    """
    targets = collect_targets(remote_addrs, port, ip_version)
    version = negotiate_ip_version(ip_version, mcast_label, port, targets)

    match = find_local_match(targets, version, interfaces)
    if version == IPVersion.ANY:
        logger.info("Using IPv%d of local address %s", match.ip_version, match.target.label)
        version = match.ip_version

    mcast = resolve_multicast(version, mcast_label, port, mcast_defaults)
    local, single_target = extract_local_address(targets, match, version)
    materialize_targets(targets, version)

    return SessionAddresses(
        local=local,
        mcast=mcast,
        port=mcast.port,
        ifname=match.ifname,
        targets=targets,
        ip_version=version,
        single_target=single_target,
    )
