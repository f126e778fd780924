"""
Configuration management for mpc-display
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6600
DEFAULT_FORMAT = ["title", "artist", "album"]


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""

    pass


@dataclass
class ServerConfig:
    """Connection settings for the MPD server."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: Optional[str] = None
    timeout: Optional[float] = 10.0  # Connect/command timeout (idle never times out)
    keepalive_interval: float = 60.0

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class DisplayConfig:
    """Configuration for the live display."""

    format: List[str] = field(default_factory=lambda: list(DEFAULT_FORMAT))
    verbose: bool = False  # Never hide tags repeated on every queue row
    ratings: bool = False  # Show the rating sticker as hearts
    progress: bool = False  # Show a progress bar under the header
    grades: bool = False  # Show the rating sticker as a letter grade


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/mpc-display/mpc-display.log)
    )
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration object."""

    server: ServerConfig = field(default_factory=ServerConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "mpc-display"
    return Path.home() / ".config" / "mpc-display"


def get_config_path(explicit: Optional[str] = None) -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Path given on the command line
    2. Current working directory
    3. XDG_CONFIG_HOME/mpc-display (or ~/.config/mpc-display)
    """
    if explicit:
        return Path(explicit).expanduser()

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "mpc-display"
    return Path.home() / ".local" / "share" / "mpc-display"


def parse_format(value: str) -> List[str]:
    """Split a comma-separated tag list, dropping empty entries."""
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _parse_sections(toml_data: dict) -> Config:
    config = Config()

    if "server" in toml_data:
        server_data = toml_data["server"]
        config.server = ServerConfig(
            host=server_data.get("host", config.server.host),
            port=int(server_data.get("port", config.server.port)),
            password=server_data.get("password"),
            timeout=server_data.get("timeout", config.server.timeout),
            keepalive_interval=server_data.get(
                "keepalive_interval", config.server.keepalive_interval
            ),
        )

    if "display" in toml_data:
        display_data = toml_data["display"]
        fmt = display_data.get("format", config.display.format)
        if isinstance(fmt, str):
            fmt = parse_format(fmt)
        config.display = DisplayConfig(
            format=list(fmt),
            verbose=display_data.get("verbose", config.display.verbose),
            ratings=display_data.get("ratings", config.display.ratings),
            progress=display_data.get("progress", config.display.progress),
            grades=display_data.get("grades", config.display.grades),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level),
            log_file=logging_data.get("log_file"),
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get(
                "backup_count", config.logging.backup_count
            ),
        )

    return config


def apply_env_overrides(config: Config) -> Config:
    """Apply MPD_HOST / MPD_PORT / MPD_PASSWORD from the environment.

    Raises:
        ConfigError: If MPD_PORT is not a valid port number
    """
    host = os.environ.get("MPD_HOST")
    if host:
        # MPD convention: MPD_HOST=password@host
        if "@" in host and not host.startswith("@"):
            password, host = host.split("@", 1)
            config.server.password = password
        config.server.host = host

    port = os.environ.get("MPD_PORT")
    if port:
        try:
            config.server.port = int(port)
        except ValueError:
            raise ConfigError(f"invalid value for MPD_PORT: {port!r}") from None

    password = os.environ.get("MPD_PASSWORD")
    if password:
        config.server.password = password

    return config


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - MPD_HOST (optionally ``password@host``)
    - MPD_PORT
    - MPD_PASSWORD
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path(path)

    if not config_path.exists():
        return apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
        config = _parse_sections(toml_data)
    except (tomllib.TOMLDecodeError, ValueError, TypeError) as e:
        logger.warning(f"Invalid configuration in {config_path}: {e}")
        config = Config()

    return apply_env_overrides(config)
