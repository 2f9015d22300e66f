"""
Configuration management for funcy_invoke.

Loads ``$FUNCY_HOME/config.yaml`` (default ``~/.config/funcy``):

    modules:
      - mypackage.functions
    logging:
      level: INFO
      format: pretty
    env_file: ~/.config/funcy/.env
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from funcy_invoke.errors import ConfigError

LOG_FORMATS = ("pretty", "structured")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_funcy_home() -> Path:
    """Config directory: $FUNCY_HOME, else ~/.config/funcy."""
    home = os.environ.get("FUNCY_HOME")
    if home:
        return Path(home).expanduser()
    return Path("~/.config/funcy").expanduser()


@dataclass(frozen=True)
class FuncyConfig:
    """
    Startup configuration.

    Attributes:
        modules: Registration modules imported at startup
        log_level: Logging level name
        log_format: "pretty" (rich console) or "structured" (JSON lines)
        log_file: Optional file receiving log output as well
        env_file: Optional dotenv file loaded before modules are imported
    """
    modules: tuple[str, ...] = ()
    log_level: str = "INFO"
    log_format: str = "pretty"
    log_file: Optional[str] = None
    env_file: Optional[str] = None
    source: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self):
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(
                f"logging.format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"logging.level is not a valid level: {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Optional[Path] = None) -> "FuncyConfig":
        """Build a config from parsed YAML."""
        modules = data.get("modules") or []
        if not isinstance(modules, list) or not all(isinstance(m, str) for m in modules):
            raise ConfigError("modules must be a list of module names")

        logging_cfg = data.get("logging") or {}
        if not isinstance(logging_cfg, dict):
            raise ConfigError("logging must be a mapping")

        return cls(
            modules=tuple(modules),
            log_level=str(logging_cfg.get("level", "INFO")).upper(),
            log_format=logging_cfg.get("format", "pretty"),
            log_file=logging_cfg.get("file"),
            env_file=data.get("env_file"),
            source=source,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "modules": list(self.modules),
            "logging": {
                "level": self.log_level,
                "format": self.log_format,
                "file": self.log_file,
            },
            "env_file": self.env_file,
        }


def load_config(config_path: Optional[Path] = None) -> FuncyConfig:
    """
    Load configuration from YAML.

    Args:
        config_path: Explicit config file. Defaults to $FUNCY_HOME/config.yaml,
            and to built-in defaults when that file does not exist.

    Returns:
        FuncyConfig instance

    Raises:
        ConfigError: If an explicit file is missing, or the YAML is invalid
    """
    explicit = config_path is not None
    path = Path(config_path).expanduser() if explicit else get_funcy_home() / "config.yaml"

    if not path.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {path}")
        return FuncyConfig()

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")

    config = FuncyConfig.from_dict(data, source=path)

    if config.env_file:
        env_path = Path(config.env_file).expanduser()
        if env_path.exists():
            load_dotenv(env_path)

    return config
