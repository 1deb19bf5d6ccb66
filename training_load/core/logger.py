"""Loguru setup shared by the API process and the CLI.

Both entry points log to stderr only, so CLI stdout stays clean for --json
output. The API process may add a rotating file sink via LOG_FILE.
"""

import sys
from pathlib import Path

from loguru import logger

API_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
CLI_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{file.name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    *,
    console_format: str = API_CONSOLE_FORMAT,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with a stderr sink and an optional file sink.

    Args:
        level: Minimum level for every sink (already validated by Settings)
        log_file: Rotating file to also write to; parent directories are created
        console_format: API_CONSOLE_FORMAT or CLI_CONSOLE_FORMAT
        rotation: File rotation trigger, e.g. "10 MB"
        retention: How long rotated files are kept, e.g. "7 days"
    """
    logger.remove()
    logger.add(sys.stderr, format=console_format, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            diagnose=False,
        )

    logger.debug(f"[LOGGING] level={level}, file={log_file or '-'}")
