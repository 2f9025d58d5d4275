"""Output renderer: rich table and JSON views of a resolved session."""

import dataclasses
import json
import logging
import sys
from io import StringIO

from rich.console import Console
from rich.table import Table

from mping.address import IPVersion, SocketAddress
from mping.models import SessionAddresses
from mping.options import SessionOptions

logger = logging.getLogger(__name__)


def render(
    session: SessionAddresses,
    fmt: str,
    *,
    options: SessionOptions | None = None,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Dispatch output to the appropriate formatter.

    Args:
        session: Resolved session addresses.
        fmt: Output format — ``"table"`` or ``"json"``.
        options: Session options to include, if any.
        file: Writable file object for output (default: ``sys.stdout``).
        width: Explicit console width (default: auto-detect).

    Raises:
        ValueError: If *fmt* is not ``"table"`` or ``"json"``.
    """
    if fmt == "table":
        render_table(session, options=options, file=file, width=width)
    elif fmt == "json":
        render_json(session, options=options, file=file)
    else:
        raise ValueError(f"Unknown output format: {fmt!r}")


# ---------------------------------------------------------------------------
# Table (rich) formatter
# ---------------------------------------------------------------------------


def render_table(
    session: SessionAddresses,
    *,
    options: SessionOptions | None = None,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Render *session* as ``rich`` tables to *file*.

    One row for the local address, one for the multicast group and one per
    remote target, followed by a summary line and, when *options* is given,
    an options table.
    """
    out = file or sys.stdout
    console = Console(file=out, highlight=False, width=width)

    table = Table(title=f"mping session — {_fmt_version(session.ip_version)}")
    table.add_column("Role")
    table.add_column("Host")
    table.add_column("Address")
    table.add_column("Port", justify="right")

    local = session.local
    table.add_row(
        f"local ({local.ifname})", local.host_name, local.address.host, str(local.address.port)
    )
    table.add_row(
        "multicast",
        session.mcast.label,
        session.mcast.address.host,
        str(session.mcast.port),
    )
    for target in session.targets:
        addr = target.resolved_address
        table.add_row(
            "remote",
            target.label,
            _fmt(addr.host if addr else None),
            _fmt(addr.port if addr else None),
        )

    console.print(table)

    mode = "single target" if session.single_target else f"{len(session.targets)} remote"
    console.print(f"  interface {session.ifname}, port {session.port}, {mode}")

    if options is not None:
        opts = Table(title="Session options")
        opts.add_column("Option")
        opts.add_column("Value", justify="right")
        for f in dataclasses.fields(options):
            opts.add_row(f.name, str(getattr(options, f.name)))
        console.print(opts)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


def render_json(
    session: SessionAddresses,
    *,
    options: SessionOptions | None = None,
    file: object | None = None,
) -> None:
    """Render *session* as JSON to *file*.

    The output is an object with ``ip_version``, ``port``, ``ifname``,
    ``single_target``, ``local``, ``mcast``, ``targets`` and, when given,
    ``options``.
    """
    out = file or sys.stdout
    payload = session_to_dict(session)
    if options is not None:
        payload["options"] = dataclasses.asdict(options)
    json.dump(payload, out, indent=2, default=str)
    out.write("\n")  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def session_to_dict(session: SessionAddresses) -> dict:
    """Convert ``SessionAddresses`` to plain JSON-friendly types."""
    return {
        "ip_version": int(session.ip_version),
        "port": session.port,
        "ifname": session.ifname,
        "single_target": session.single_target,
        "local": {
            "host_name": session.local.host_name,
            **_address_to_dict(session.local.address),
        },
        "mcast": {
            "label": session.mcast.label,
            **_address_to_dict(session.mcast.address),
        },
        "targets": [
            {
                "label": t.label,
                **(_address_to_dict(t.resolved_address) if t.resolved_address else {}),
            }
            for t in session.targets
        ],
    }


def _address_to_dict(addr: SocketAddress) -> dict:
    out = {"address": addr.host, "port": addr.port, "version": int(addr.version)}
    if addr.scope_id:
        out["scope_id"] = addr.scope_id
    return out


def _fmt_version(version: IPVersion) -> str:
    if version == IPVersion.ANY:
        return "any IP version"
    return f"IPv{int(version)}"


def _fmt(value: object) -> str:
    """Format a field value for table display.

    ``None`` becomes ``"—"``, everything else is stringified.
    """
    if value is None:
        return "—"
    return str(value)


def render_to_string(
    session: SessionAddresses,
    fmt: str,
    *,
    options: SessionOptions | None = None,
    width: int = 200,
) -> str:
    """Render to a string instead of stdout — useful for testing."""
    buf = StringIO()
    render(session, fmt, options=options, file=buf, width=width)
    return buf.getvalue()
