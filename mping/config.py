"""YAML configuration file loading."""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from mping.address import IPVersion
from mping.mcast import DEFAULT_MCAST4_ADDR, DEFAULT_MCAST6_ADDR
from mping.session import DEFAULT_PORT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".mping"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"


@dataclass
class MpingConfig:
    """Site defaults for the mping tool.

    Every field has a default so the tool works without a config file.
    Command-line flags always win over these values.

    Attributes:
        port: Port (number or service name) used for every resolution.
        mcast4_addr: Multicast group used for IPv4 sessions without ``-m``.
        mcast6_addr: Multicast group used for IPv6 sessions without ``-m``.
        ttl: Multicast TTL, or None for the built-in default.
        interval: Ping interval in seconds, or None for the built-in default.
    """

    port: str = DEFAULT_PORT
    mcast4_addr: str = DEFAULT_MCAST4_ADDR
    mcast6_addr: str = DEFAULT_MCAST6_ADDR
    ttl: int | None = None
    interval: float | None = None

    def mcast_defaults(self) -> dict[IPVersion, str]:
        """Default multicast group per IP version."""
        return {IPVersion.V4: self.mcast4_addr, IPVersion.V6: self.mcast6_addr}


# Keys in the YAML file that map to MpingConfig fields.
_YAML_KEY_TO_FIELD: dict[str, str] = {
    "port": "port",
    "mcast4_addr": "mcast4_addr",
    "mcast6_addr": "mcast6_addr",
    "ttl": "ttl",
    "interval": "interval",
}

_FIELD_TYPES: dict[str, type] = {
    "port": str,
    "mcast4_addr": str,
    "mcast6_addr": str,
    "ttl": int,
    "interval": float,
}

_OPTIONAL_KEYS = frozenset({"ttl", "interval"})


def load_config(path: Path | str | None = None) -> MpingConfig:
    """Load configuration from a YAML file.

    Args:
        path: Explicit path to a YAML config file.  If ``None``, the
            default location (``~/.mping/config.yaml``) is tried.  If the
            default file doesn't exist, an ``MpingConfig`` with all defaults
            is returned silently.

    Returns:
        A populated ``MpingConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit *path* was given but doesn't exist.
        ConfigError: If the file is not a valid YAML mapping, or a known
            key holds a value of the wrong type.
    """
    resolved = _resolve_path(path)

    if resolved is None:
        logger.debug("No config file found; using defaults")
        return MpingConfig()

    logger.debug("Loading config from %s", resolved)
    text = resolved.read_text(encoding="utf-8")

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {resolved}: {exc}") from exc

    if raw is None:
        return MpingConfig()

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Expected a YAML mapping at the top level in {resolved}, "
            f"got {type(raw).__name__}"
        )

    return _build_config(raw, source=resolved)


class ConfigError(Exception):
    """Raised when a configuration file is malformed or unreadable."""


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _resolve_path(path: Path | str | None) -> Path | None:
    """Return a concrete ``Path`` to read, or ``None`` if nothing to read.

    Raises:
        FileNotFoundError: If the caller supplied an explicit path that
            doesn't exist on disk.
    """
    if path is not None:
        p = Path(path).expanduser()
        if not p.is_file():
            raise FileNotFoundError(f"Config file not found: {p}")
        return p

    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.is_file():
        return default
    return None


def _build_config(raw: dict, source: Path) -> MpingConfig:
    """Map raw YAML dict to an ``MpingConfig``, ignoring unknown keys.

    Raises:
        ConfigError: If a known key holds a value of the wrong type.
    """
    kwargs: dict[str, object] = {}

    for yaml_key, field_name in _YAML_KEY_TO_FIELD.items():
        if yaml_key in raw:
            kwargs[field_name] = _coerce(yaml_key, raw[yaml_key], source)

    unknown = set(raw) - set(_YAML_KEY_TO_FIELD)
    if unknown:
        logger.warning(
            "Ignoring unknown config keys in %s: %s",
            source,
            ", ".join(sorted(unknown)),
        )

    return MpingConfig(**kwargs)


def _coerce(key: str, value: object, source: Path) -> object:
    """Convert one YAML value to the type its field expects."""
    # ttl and interval may be null to fall back to the built-in defaults.
    if value is None and key in _OPTIONAL_KEYS:
        return None

    message = f"Invalid value for {key} in {source}: {value!r}"
    if value is None or isinstance(value, (bool, list, dict)):
        raise ConfigError(message)

    # YAML reads a bare 4321 as an int; the resolver takes the port as text.
    try:
        return _FIELD_TYPES[key](value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(message) from exc
