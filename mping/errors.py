"""Exception hierarchy for address resolution and session setup."""


class MpingError(Exception):
    """Base class for every fatal mping error.

    Components raise these; only the CLI driver turns them into a message
    on stderr and a non-zero exit status.
    """


class UsageError(MpingError):
    """Raised for user-input errors (no targets, bad option values)."""


class ResolutionError(MpingError):
    """Raised when a label cannot be resolved to a usable address family."""


class LoopbackRejected(MpingError):
    """Raised when a remote target resolves to a loopback address."""


class FamilyMismatchError(MpingError):
    """Raised when targets and/or the multicast group disagree on IP version."""


class InvalidMulticastAddress(MpingError):
    """Raised when the resolved group address is not a multicast address."""


class LocalAddressNotFound(MpingError):
    """Raised when no target matches an address of a local interface."""


class InternalConsistencyError(MpingError):
    """Raised for states that earlier validation should have made impossible."""

    def __init__(self, detail: str = "") -> None:
        msg = "Internal program error"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
