"""Load Dude configuration"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import toml

from .config_classes import LoggingConfig, TaskListConfig
from .exceptions import ConfigError

LOG = logging.getLogger(__name__)

DEFAULT_CONFIG_FILEPATH = Path("thedude.toml")
CONFIG_ENV_VAR = "THEDUDE_CONFIG"


@dataclass
class Config:
    config_file: Union[Path, None] = None
    tasklist: TaskListConfig = field(default_factory=TaskListConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load(path: Union[str, Path, None] = None) -> Config:
    """Load the configuration

    Without an explicit path, THEDUDE_CONFIG or thedude.toml is used, and a
    missing file just means the defaults.
    """
    explicit = path is not None or CONFIG_ENV_VAR in os.environ
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILEPATH)
    config_file = Path(path)

    try:
        data = toml.load(config_file)
    except FileNotFoundError:
        if explicit:
            raise ConfigError(
                f"{config_file} not found",
                f"Create it, or unset {CONFIG_ENV_VAR} to use the defaults.",
            )
        LOG.debug("No %s, using the default configuration", config_file)
        return Config()
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"{config_file} is not valid TOML", str(exc)) from exc

    config = Config(
        config_file=config_file,
        tasklist=_section(config_file, data, "tasklist", TaskListConfig),
        logging=_section(config_file, data, "logging", LoggingConfig),
    )
    LOG.info("Loaded %s", config_file)
    return config


def _section(config_file, data: dict, name: str, cls):
    """Build the config class for one [section] of the file"""
    values = data.get(name, {})
    if not isinstance(values, dict):
        raise ConfigError(
            f"`{name}' in {config_file} must be a section",
            f"Write it as a [{name}] table.",
        )
    try:
        return cls(**values)
    except TypeError as exc:
        raise ConfigError(
            f"Bad [{name}] section in {config_file}",
            f"Check the option names ({exc}).",
        ) from exc
