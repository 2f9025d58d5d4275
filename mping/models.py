"""Data models: Target, MulticastAddress, LocalAddress, SessionAddresses."""

from dataclasses import dataclass, field

from mping.address import IPVersion, SocketAddress
from mping.errors import InternalConsistencyError


def deep_supported_version(candidates: list[SocketAddress]) -> IPVersion | None:
    """Report which IP versions a set of resolver candidates covers.

    Returns:
        ``IPVersion.ANY`` if both IPv4 and IPv6 candidates exist, the single
        version if only one family is present, or None if *candidates* is
        empty.
    """
    versions = {c.version for c in candidates}
    if not versions:
        return None
    if len(versions) > 1:
        return IPVersion.ANY
    return versions.pop()


@dataclass(eq=False)
class Target:
    """One remote participant given on the command line.

    A target owns its resolver *candidates* until it is materialized, at
    which point exactly one of them is kept as *resolved_address* and the
    candidate list is emptied.

    Attributes:
        label: The string the user typed (hostname or literal address).
        candidates: Every address the resolver returned for *label*.
        resolved_address: The address chosen for the session's IP version,
            or None before materialization.
    """

    label: str
    candidates: list[SocketAddress] = field(default_factory=list)
    resolved_address: SocketAddress | None = None

    @property
    def materialized(self) -> bool:
        return self.resolved_address is not None

    def addresses(self) -> list[SocketAddress]:
        """Return the addresses currently held, before or after materialization."""
        if self.resolved_address is not None:
            return [self.resolved_address]
        return list(self.candidates)

    def supported_version(self) -> IPVersion | None:
        return deep_supported_version(self.addresses())

    def address_for(self, version: int) -> SocketAddress | None:
        """Return the first held address of *version*.

        ``IPVersion.ANY`` accepts whichever address comes first.
        """
        for addr in self.addresses():
            if version == IPVersion.ANY or addr.version == version:
                return addr
        return None

    def materialize(self, version: int) -> SocketAddress:
        """Collapse the candidates to the single address used by the session.

        Raises:
            InternalConsistencyError: If no candidate matches *version*.
        """
        if self.resolved_address is not None:
            return self.resolved_address

        addr = self.address_for(version)
        if addr is None:
            raise InternalConsistencyError(
                f"host {self.label} has no IPv{int(version)} address to use"
            )
        self.resolved_address = addr
        self.candidates = []
        return addr


@dataclass
class MulticastAddress:
    """The session's multicast group.

    Attributes:
        label: Group as given by the user, or the default literal.
        address: Resolved group address; always a multicast address.
    """

    label: str
    address: SocketAddress

    @property
    def port(self) -> int:
        return self.address.port


@dataclass
class LocalAddress:
    """Address of the local interface taking part in the session.

    Attributes:
        host_name: Label of the target that matched the interface.
        address: Interface address with the session port attached.
        ifname: System name of the interface (e.g. ``"eth0"``).
    """

    host_name: str
    address: SocketAddress
    ifname: str


@dataclass
class SessionAddresses:
    """Everything the ping exchange needs to know about addressing.

    Attributes:
        local: The local interface address.
        mcast: The multicast group.
        port: Session port, taken from the resolved group address.
        ifname: Name of the local interface.
        targets: Remote targets, materialized, in command-line order.
        ip_version: The IP version the session committed to.
        single_target: True when the only target given is the local host,
            in which case it stays in *targets*.
    """

    local: LocalAddress
    mcast: MulticastAddress
    port: int
    ifname: str
    targets: list[Target]
    ip_version: IPVersion
    single_target: bool = False
