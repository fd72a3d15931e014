import sys

from loguru import logger

_LOGGER_CONFIGURED = False

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def setup_logging(level: str = "INFO", force: bool = False) -> None:
    """
    Configure the global loguru logger once per process.

    Streamlit re-runs the script on every interaction, so repeated calls are
    no-ops unless ``force`` is set.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        backtrace=True,
        diagnose=False,
    )
    _LOGGER_CONFIGURED = True
    logger.debug("Logger initialized (level={})", level.upper())
