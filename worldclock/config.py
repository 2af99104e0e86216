"""
Configuration management for Worldclock.
Handles loading, validation, and defaults for all settings.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .options import OPTION_SCHEMA
from .timezones import LOCAL

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_CONFIG_PATHS = [
    "/etc/worldclock/config.yaml",
    os.path.expanduser("~/.config/worldclock/config.yaml"),
    "./config.yaml",
]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class ClockConfig:
    """Configuration for a single clock."""
    label: str = ""
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WindowConfig:
    """Window settings."""
    resolution: str = "800x480"  # WIDTHxHEIGHT or auto
    fullscreen: bool = False
    font_size: int = 96
    label_font_size: int = 24
    font_color: List[int] = field(default_factory=lambda: [255, 255, 255])
    label_color: List[int] = field(default_factory=lambda: [160, 160, 160])
    background_color: List[int] = field(default_factory=lambda: [0, 0, 0])
    fps: int = 30


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    directory: Optional[str] = None  # Also log to <directory>/worldclock.log


def _default_clocks() -> List[ClockConfig]:
    return [ClockConfig(label="Local", options={'timezone': LOCAL})]


@dataclass
class WorldclockConfig:
    """Main configuration class."""
    clocks: List[ClockConfig] = field(default_factory=_default_clocks)
    window: WindowConfig = field(default_factory=WindowConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime state (not persisted)
    config_path: Optional[str] = None


def _dict_to_dataclass(data: Dict[str, Any], cls: type) -> Any:
    """Convert a dictionary to a dataclass instance, ignoring unknown keys."""
    if data is None:
        return cls()

    field_names = set(cls.__dataclass_fields__)
    kwargs = {}

    for key, value in data.items():
        if key not in field_names:
            logger.warning(f"Ignoring unknown {cls.__name__} setting '{key}'")
            continue
        kwargs[key] = value

    return cls(**kwargs)


def _parse_clock(clock_data: Any) -> Optional[ClockConfig]:
    """Parse one entry of the clocks list (a zone name or a mapping)."""
    if isinstance(clock_data, str):
        return ClockConfig(label=clock_data, options={'timezone': clock_data})
    if isinstance(clock_data, dict):
        options = clock_data.get('options')
        if options is None:
            options = {}
        label = clock_data.get('label')
        if not label and isinstance(options, dict):
            label = options.get('timezone', '')
        return ClockConfig(label=str(label or ''), options=options)

    logger.warning(f"Ignoring clock entry of unexpected type: {clock_data!r}")
    return None


def load_config(config_path: Optional[str] = None) -> WorldclockConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, searches default locations.

    Returns:
        WorldclockConfig instance with loaded or default values.
    """
    # Find config file
    if config_path:
        paths_to_try = [config_path]
    else:
        paths_to_try = DEFAULT_CONFIG_PATHS

    config_data = {}
    found_path = None

    for path in paths_to_try:
        expanded_path = os.path.expanduser(path)
        if os.path.exists(expanded_path):
            try:
                with open(expanded_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
                found_path = expanded_path
                logger.info(f"Loaded config from {expanded_path}")
                break
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {expanded_path}: {e}")

    if not found_path:
        logger.info("No config file found, using defaults")

    # Parse clocks
    clocks = []
    for clock_data in config_data.get('clocks') or []:
        clock = _parse_clock(clock_data)
        if clock is not None:
            clocks.append(clock)
    if not clocks:
        clocks = _default_clocks()

    config = WorldclockConfig(
        clocks=clocks,
        window=_dict_to_dataclass(config_data.get('window'), WindowConfig),
        logging=_dict_to_dataclass(config_data.get('logging'), LoggingConfig),
        config_path=found_path,
    )

    if config.logging.directory:
        config.logging.directory = os.path.expanduser(config.logging.directory)

    return config


def _is_color(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(isinstance(c, int) and 0 <= c <= 255 for c in value)
    )


def validate_config(config: WorldclockConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Option values are not checked here: clocks fall back to defaults for
    invalid values when they are created.

    Returns:
        List of error messages. Empty if valid.
    """
    errors = []

    # Check clocks
    if not config.clocks:
        errors.append("No clocks configured.")

    for i, clock in enumerate(config.clocks):
        if not isinstance(clock.options, dict):
            errors.append(f"Clock {i+1} options must be a mapping of option names to values.")
            continue
        for name in clock.options:
            if name not in OPTION_SCHEMA:
                errors.append(
                    f"Clock {i+1} has unknown option '{name}'. "
                    f"Valid options: {sorted(OPTION_SCHEMA)}"
                )

        zone = clock.options.get('timezone')
        if zone is not None and not OPTION_SCHEMA['timezone'].validator(zone):
            errors.append(
                f"Clock {i+1} has unknown timezone '{zone}'. "
                f"Use an IANA name such as 'Europe/Berlin', or '{LOCAL}'"
            )

    # Check window settings
    window = config.window
    if window.resolution != "auto" and not re.fullmatch(r"\d+x\d+", str(window.resolution).lower()):
        errors.append("Window resolution must be 'auto' or WIDTHxHEIGHT (e.g. 800x480)")

    if not isinstance(window.fps, int) or not (1 <= window.fps <= 120):
        errors.append("Window fps must be between 1 and 120")

    if not isinstance(window.font_size, int) or window.font_size <= 0:
        errors.append("Window font_size must be a positive integer")

    if not isinstance(window.label_font_size, int) or window.label_font_size < 0:
        errors.append("Window label_font_size must be zero (no labels) or a positive integer")

    for name in ('font_color', 'label_color', 'background_color'):
        if not _is_color(getattr(window, name)):
            errors.append(f"Window {name} must be [R, G, B] with values 0-255")

    # Check logging settings
    if str(config.logging.level).upper() not in LOG_LEVELS:
        errors.append(f"Logging level must be one of: {LOG_LEVELS}")

    return errors
