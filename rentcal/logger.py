import sys
import os
from loguru import logger

# Custom levels, below DEBUG: per-lane and per-order traces
LANES = "LANES"
ORDERS = "ORDERS"


def _ensure_level(name: str, *, no: int, icon: str, color: str) -> None:
    # loguru refuses to redefine the severity of an existing level
    try:
        logger.level(name)
    except ValueError:
        logger.level(name, no=no, icon=icon, color=color)


_ensure_level(LANES, no=8, icon="🛤", color="<magenta>")
_ensure_level(ORDERS, no=9, icon="📅", color="<magenta>")


def configure_logging(
    *,
    level: str = "INFO",
    colorize: bool = True,
    format=(
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <7}</level> | "
        "{message}"
    ),
):
    """
    Parameters:
    - level: minimum log level to output (e.g., "DEBUG", "INFO", "LANES").
    - colorize: whether to use ANSI colors in the console.
    - format: Loguru format string for console output.
    """
    env_level = os.getenv("APP_LOG_LEVEL", "").upper()
    env_colorize = os.getenv("APP_LOG_COLORIZE", "").lower()
    env_format = os.getenv("APP_LOG_FORMAT", "")

    effective_level = env_level if env_level else (level or "INFO")
    effective_colorize = env_colorize in ("1", "true", "yes") if env_colorize else colorize
    effective_format = env_format if env_format else format

    logger.remove()

    logger.add(
        sys.stdout,
        level=effective_level,
        colorize=effective_colorize,
        format=effective_format,
        enqueue=True,
    )
