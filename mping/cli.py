"""CLI entry point for the mping tool."""

import logging
import sys

import click

from mping import __version__
from mping.address import IPVersion
from mping.config import ConfigError, load_config
from mping.errors import MpingError, UsageError
from mping.options import build_options
from mping.output import render
from mping.session import resolve_session

logger = logging.getLogger(__name__)

FORMATS = ("table", "json")
TRANSPORT_METHODS = ("asm", "ssm")


class MpingCommand(click.Command):
    """Command whose usage errors exit with status 1 instead of click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


def _log_level(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


@click.command(cls=MpingCommand, context_settings={"help_option_names": ["-h", "--help"]})
# -4 and -6 share one destination, so the last one given wins.
@click.option("-4", "ip_version", flag_value=int(IPVersion.V4), default=int(IPVersion.ANY),
              help="Force IPv4.")
@click.option("-6", "ip_version", flag_value=int(IPVersion.V6), default=int(IPVersion.ANY),
              help="Force IPv6.")
@click.option("-m", "mcast_addr", default=None, metavar="mcast_addr",
              help="Multicast group address (default: 232.43.211.234 / ff3e::4321:1234).")
@click.option("-p", "port", default=None, metavar="port",
              help="Port used for all addresses (default: 4321).")
@click.option("-i", "interval", type=float, default=None, metavar="interval",
              help="Ping interval in seconds (default: 1).")
@click.option("-t", "ttl", type=int, default=None, metavar="ttl",
              help="Multicast TTL (default: 64).")
@click.option("-T", "timeout", type=float, default=None, metavar="timeout",
              help="Exit after this many seconds.")
@click.option("-w", "wait_for_finish", type=float, default=None, metavar="wait_time",
              help="Seconds to wait for other nodes before exit (-1 waits forever).")
@click.option("-r", "rate_limit", type=float, default=None, metavar="rate_limit",
              help="Minimum seconds between two answered packets.")
@click.option("-R", "rcvbuf", type=float, default=None, metavar="rcvbuf",
              help="Receive socket buffer size.")
@click.option("-S", "sndbuf", type=float, default=None, metavar="sndbuf",
              help="Send socket buffer size.")
@click.option("-M", "transport_method", type=click.Choice(TRANSPORT_METHODS), default="asm",
              show_default=True, help="Multicast transport method.")
@click.option("-D", "no_dup_detection", is_flag=True, help="Disable duplicate packet detection.")
@click.option("-F", "force", count=True, help="Force values below safe defaults.")
@click.option("-q", "quiet", count=True, help="Quiet mode.")
@click.option("-C", "cont_stat", count=True, help="Continuous statistics.")
@click.option("-v", "verbose", count=True, help="Increase verbosity.")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=False),
              help="Path to YAML config file (default: ~/.mping/config.yaml).")
@click.option("-f", "--format", "output_format", default="table",
              type=click.Choice(FORMATS, case_sensitive=False), show_default=True,
              help="Format of the resolved-session report.")
@click.version_option(__version__, "-V", "--version", prog_name="mping",
                      message="%(prog)s version %(version)s")
@click.argument("remote_addrs", nargs=-1, metavar="remote_addr...")
@click.pass_context
def main(
    ctx: click.Context,
    remote_addrs: tuple[str, ...],
    ip_version: int,
    mcast_addr: str | None,
    port: str | None,
    interval: float | None,
    ttl: int | None,
    timeout: float | None,
    wait_for_finish: float | None,
    rate_limit: float | None,
    rcvbuf: float | None,
    sndbuf: float | None,
    transport_method: str,
    no_dup_detection: bool,
    force: int,
    quiet: int,
    cont_stat: int,
    verbose: int,
    config_path: str | None,
    output_format: str,
) -> None:
    """Resolve the addresses of a multicast ping session.

    One of the remote addresses must belong to the local host.
    """
    logging.basicConfig(
        level=_log_level(verbose),
        format="%(levelname)s: %(message)s",
    )

    try:
        cfg = load_config(config_path)
    except (ConfigError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    logger.debug("Config loaded: %s", cfg)

    try:
        opts = build_options(
            interval=interval if interval is not None else cfg.interval,
            ttl=ttl if ttl is not None else cfg.ttl,
            timeout=timeout,
            wait_for_finish=wait_for_finish,
            rate_limit=rate_limit,
            rcvbuf=rcvbuf,
            sndbuf=sndbuf,
            transport_method=transport_method,
            no_dup_detection=no_dup_detection,
            force=force,
            quiet=quiet,
            cont_stat=cont_stat,
        )
        session = resolve_session(
            list(remote_addrs),
            port=port if port is not None else cfg.port,
            ip_version=IPVersion(ip_version or IPVersion.ANY),
            mcast_label=mcast_addr,
            mcast_defaults=cfg.mcast_defaults(),
        )
    except UsageError as exc:
        err = click.UsageError(str(exc), ctx)
        err.exit_code = 1
        raise err from exc
    except MpingError as exc:
        click.echo(f"mping: {exc}", err=True)
        sys.exit(1)

    render(session, output_format.lower(), options=opts)
