"""Configuration file loader for shipver.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``shipver.toml`` — settings under ``[shipver]`` table
- ``pyproject.toml`` — settings under ``[tool.shipver]`` table

Discovery order:

1. Explicit path from ``--config`` or ``SHIPVER_CONFIG``
2. ``shipver.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.shipver]`` section

Configuration precedence: defaults < config file < environment < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``shipver.toml``)::

    [shipver]
    strategy = "auto"
    strict_strategy = true
    allow_custom_channels = false
    tag_branches = ["main", "release/*"]

    [shipver.artifact_stores]
    release = "libs-release-local"
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass, field

from shipver.exceptions import ConfigurationError
from shipver.utils.logger import get_logger
from shipver.constants import (
    DEFAULT_ALLOW_CUSTOM_CHANNELS,
    DEFAULT_ARTIFACT_STORES,
    DEFAULT_CONTAINER_REGISTRIES,
    DEFAULT_STRATEGY,
    DEFAULT_STRICT_STRATEGY,
    DEFAULT_TAG_BRANCHES,
    DEFAULT_TAG_PREFIX,
    STRATEGIES,
    TIERS,
)

logger = get_logger("config")


@dataclass
class ShipverConfig:
    """Parsed and validated shipver configuration.

    Contains settings from ``shipver.toml`` or ``pyproject.toml``.
    All fields have defaults, so empty config files are valid.

    Attributes:
        strategy: Default versioning strategy when none is given on the
            command line.
        strict_strategy: Reject unknown strategies instead of falling back
            to ``auto``.
        allow_custom_channels: Accept custom prerelease labels outside the
            built-in channel set.
        tag_prefix: Prefix of version tags.
        tag_branches: Branches on which tags are created; a trailing ``*``
            matches by prefix.
        artifact_stores: Artifact store name per tier.
        container_registries: Container registry repository per tier.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    strategy: str = DEFAULT_STRATEGY
    strict_strategy: bool = DEFAULT_STRICT_STRATEGY
    allow_custom_channels: bool = DEFAULT_ALLOW_CUSTOM_CHANNELS
    tag_prefix: str = DEFAULT_TAG_PREFIX
    tag_branches: List[str] = field(default_factory=lambda: list(DEFAULT_TAG_BRANCHES))
    artifact_stores: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_ARTIFACT_STORES)
    )
    container_registries: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CONTAINER_REGISTRIES)
    )

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "strategy": self.strategy,
            "strict_strategy": self.strict_strategy,
            "allow_custom_channels": self.allow_custom_channels,
            "tag_prefix": self.tag_prefix,
            "tag_branches": list(self.tag_branches),
            "artifact_stores": dict(self.artifact_stores),
            "container_registries": dict(self.container_registries),
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``SHIPVER_CONFIG``)
    2. ``shipver.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.shipver]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigurationError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    shipver_toml = cwd / "shipver.toml"
    if shipver_toml.is_file():
        logger.debug("Found shipver.toml: %s", shipver_toml)
        return shipver_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_shipver_section(pyproject_toml):
        logger.debug("Found [tool.shipver] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_shipver_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.shipver] section.

    An unreadable or invalid pyproject.toml is treated as having no
    section; it is somebody else's file.
    """
    try:
        raw = _read_toml(path)
    except ConfigurationError as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return False
    return "shipver" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> ShipverConfig:
    """Load and validate shipver configuration.

    Discovers config file (or uses provided path), parses and validates it.
    Returns config with defaults if no file found.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`ShipverConfig` with values from file or defaults.

    Raises:
        ConfigurationError: File cannot be parsed, has unknown keys, or
            invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return ShipverConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("shipver", {})
    else:
        section = raw.get("shipver", {})

    if not section:
        logger.debug("Config file found but no shipver section, using defaults")
        return ShipverConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigurationError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigurationError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


_KNOWN_KEYS = {
    "strategy",
    "strict_strategy",
    "allow_custom_channels",
    "tag_prefix",
    "tag_branches",
    "artifact_stores",
    "container_registries",
}


def _parse_section(
    section: Mapping[str, Any],
    *,
    config_path: str,
) -> ShipverConfig:
    """Parse and validate the ``[shipver]`` or ``[tool.shipver]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigurationError: Unknown keys or incorrect types.
    """
    config = ShipverConfig()

    unknown = set(section.keys()) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in ("strict_strategy", "allow_custom_channels"):
        if option in section:
            setattr(
                config,
                option,
                _expect_type(section[option], bool, option, config_path),
            )

    if "strategy" in section:
        strategy = _expect_type(section["strategy"], str, "strategy", config_path)
        strategy = strategy.strip().lower()
        if strategy not in STRATEGIES:
            raise ConfigurationError(
                f"strategy must be one of {', '.join(STRATEGIES)}",
                config_path=config_path,
                option="strategy",
                value=section["strategy"],
            )
        config.strategy = strategy

    if "tag_prefix" in section:
        config.tag_prefix = _expect_type(
            section["tag_prefix"], str, "tag_prefix", config_path
        )

    if "tag_branches" in section:
        branches = _expect_type(section["tag_branches"], list, "tag_branches", config_path)
        if not all(isinstance(b, str) and b for b in branches):
            raise ConfigurationError(
                "tag_branches must be a list of non-empty strings",
                config_path=config_path,
                option="tag_branches",
            )
        config.tag_branches = list(branches)

    for option in ("artifact_stores", "container_registries"):
        if option in section:
            overrides = _parse_tier_table(section[option], option, config_path)
            getattr(config, option).update(overrides)

    return config


def _expect_type(value: Any, expected: type, option: str, config_path: str) -> Any:
    if not isinstance(value, expected):
        raise ConfigurationError(
            f"{option} must be a {_TYPE_NAMES[expected]}, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    return value


_TYPE_NAMES = {bool: "boolean", str: "string", list: "list", dict: "table"}


def _parse_tier_table(value: Any, option: str, config_path: str) -> Dict[str, str]:
    """Validate a ``tier → name`` table."""
    table = _expect_type(value, dict, option, config_path)

    unknown = set(table) - set(TIERS)
    if unknown:
        raise ConfigurationError(
            f"Unknown tiers in {option}: {', '.join(sorted(unknown))}",
            config_path=config_path,
            option=option,
        )

    for tier, name in table.items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                f"{option}.{tier} must be a non-empty string",
                config_path=config_path,
                option=f"{option}.{tier}",
            )
    return dict(table)
