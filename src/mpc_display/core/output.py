"""
Logging setup using Loguru.

The terminal belongs to the renderer, so log records only ever go to a file.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "mpc-display.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> Path:
    """
    Configure loguru for file-only logging.

    Args:
        log_file: Path to log file (default: ~/.local/share/mpc-display/mpc-display.log)
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Rotate the file once it reaches this size
        backup_count: Number of rotated files to keep

    Returns:
        Path of the log file in use
    """
    log_file = log_file if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default stderr handler, it would tear the display
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")
    return log_file


def setup_from_config(config: LoggingConfig) -> Path:
    """Configure logging from the ``[logging]`` config section."""
    log_file = Path(config.log_file).expanduser() if config.log_file else None
    return setup_loguru(
        log_file,
        level=config.level,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
    )
