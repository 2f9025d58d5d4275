"""Session option validation and derived defaults."""

import logging
import socket
from dataclasses import dataclass
from typing import Literal

from mping.errors import UsageError

logger = logging.getLogger(__name__)

INT32_MAX = 2**31 - 1

DEFAULT_WAIT_TIME = 1000  # ms
DEFAULT_TTL = 64
DEFAULT_WFF_TIME_MUL = 3
DUP_BUF_SECS = 2 * 60
MIN_DUP_BUF_ITEMS = 1024
MIN_RCVBUF_SIZE = 2048
MIN_SNDBUF_SIZE = 2048

TransportMethod = Literal["asm", "ssm"]


@dataclass
class SessionOptions:
    """Validated timing, buffer and reporting options of a session.

    All times are in milliseconds.

    Attributes:
        wait_time: Interval between two pings.
        ttl: Multicast TTL / hop limit.
        timeout_time: Exit after this long regardless of traffic; 0 disables.
        wait_for_finish_time: Time to wait before exit so other nodes can
            finish their statistics; -1000 waits forever.
        rate_limit_time: Minimum time between two answered packets.
        dup_buf_items: Size of the duplicate-detection buffer; 0 disables.
        rcvbuf_size: Receive socket buffer size; 0 keeps the system default.
        sndbuf_size: Send socket buffer size; 0 keeps the system default.
        transport_method: ``"asm"`` (any-source) or ``"ssm"``
            (source-specific) multicast.
        force: How many ``-F`` flags were given.
        quiet: How many ``-q`` flags were given.
        cont_stat: How many ``-C`` flags were given.
    """

    wait_time: int = DEFAULT_WAIT_TIME
    ttl: int = DEFAULT_TTL
    timeout_time: int = 0
    wait_for_finish_time: int = DEFAULT_WAIT_TIME * DEFAULT_WFF_TIME_MUL
    rate_limit_time: int = DEFAULT_WAIT_TIME
    dup_buf_items: int = MIN_DUP_BUF_ITEMS
    rcvbuf_size: int = 0
    sndbuf_size: int = 0
    transport_method: TransportMethod = "asm"
    force: int = 0
    quiet: int = 0
    cont_stat: int = 0


def is_ssm_supported() -> bool:
    """True if the platform can join source-specific multicast groups."""
    return hasattr(socket, "IP_ADD_SOURCE_MEMBERSHIP")


def build_options(
    *,
    interval: float | None = None,
    ttl: int | None = None,
    timeout: float | None = None,
    wait_for_finish: float | None = None,
    rate_limit: float | None = None,
    rcvbuf: float | None = None,
    sndbuf: float | None = None,
    transport_method: str = "asm",
    no_dup_detection: bool = False,
    force: int = 0,
    quiet: int = 0,
    cont_stat: int = 0,
) -> SessionOptions:
    """Validate raw option values and compute the derived ones.

    Times are given in seconds, as on the command line. None means the
    option was not given.

    Raises:
        UsageError: On an out-of-range value, or a value below the safe
            default without enough ``-F`` flags.
    """
    opts = SessionOptions(force=force, quiet=quiet, cont_stat=cont_stat)

    if transport_method not in ("asm", "ssm") or (
        transport_method == "ssm" and not is_ssm_supported()
    ):
        raise UsageError(f"illegal parameter, -M argument -- {transport_method}")
    opts.transport_method = transport_method  # type: ignore[assignment]

    if rcvbuf is not None:
        if rcvbuf < MIN_RCVBUF_SIZE or rcvbuf > INT32_MAX:
            raise UsageError(f"illegal number, -R argument -- {rcvbuf:g}")
        opts.rcvbuf_size = int(rcvbuf)

    if sndbuf is not None:
        if sndbuf < MIN_SNDBUF_SIZE or sndbuf > INT32_MAX:
            raise UsageError(f"illegal number, -S argument -- {sndbuf:g}")
        opts.sndbuf_size = int(sndbuf)

    if ttl is not None:
        if ttl <= 0 or ttl > 255:
            raise UsageError(f"illegal number, -t argument -- {ttl}")
        opts.ttl = ttl

    if interval is not None:
        opts.wait_time = _seconds_to_ms(interval, "i")
    if timeout is not None:
        opts.timeout_time = _seconds_to_ms(timeout, "T")

    rate_limit_ms = None
    if rate_limit is not None:
        rate_limit_ms = _seconds_to_ms(rate_limit, "r")

    wff_ms = None
    if wait_for_finish is not None:
        wff_ms = _seconds_to_ms(wait_for_finish, "w", allow_forever=True)

    if force < 1:
        if opts.wait_time < DEFAULT_WAIT_TIME:
            raise UsageError(
                f"illegal number, -i argument {opts.wait_time} ms < "
                f"{DEFAULT_WAIT_TIME} ms. Use -F to force."
            )
        if opts.ttl < DEFAULT_TTL:
            raise UsageError(
                f"illegal number, -t argument {opts.ttl} < {DEFAULT_TTL}. Use -F to force."
            )

    if force < 2 and opts.wait_time == 0:
        raise UsageError(
            f"illegal number, -i argument {opts.wait_time} ms < 1 ms. Use -FF to force."
        )

    if wff_ms is None:
        wff_ms = opts.wait_time * DEFAULT_WFF_TIME_MUL
    opts.wait_for_finish_time = wff_ms

    if opts.wait_time == 0 or no_dup_detection:
        opts.dup_buf_items = 0
    else:
        # + 1 compensates for truncation
        opts.dup_buf_items = max(
            (DUP_BUF_SECS * 1000) // opts.wait_time + 1, MIN_DUP_BUF_ITEMS
        )

    opts.rate_limit_time = opts.wait_time if rate_limit_ms is None else rate_limit_ms

    logger.debug("Session options: %s", opts)
    return opts


def _seconds_to_ms(value: float, flag: str, allow_forever: bool = False) -> int:
    if (value < 0 and not (allow_forever and value == -1)) or value * 1000 > INT32_MAX:
        raise UsageError(f"illegal number, -{flag} argument -- {value:g}")
    return int(value * 1000.0)
