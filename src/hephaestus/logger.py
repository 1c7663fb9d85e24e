import logging
from typing import Iterable, Optional

from hephaestus.settings import settings as api_settings

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# SDK loggers that flood the output below WARNING
_NOISY_LOGGERS = ("boto3", "botocore", "urllib3")

_configured = False


def setup_global_logging(level: str = "INFO", quiet: Iterable[str] = _NOISY_LOGGERS) -> None:
    """Configure the root logger once in a standardized format.

    The AWS SDK loggers named in `quiet` are held at WARNING so that
    DEBUG output shows the query requests rather than every HTTP hop.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
        quiet: Logger names to cap at WARNING
    """
    global _configured
    if _configured:
        return
    lvl = _LEVELS.get(level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for name in quiet:
        logging.getLogger(name).setLevel(max(lvl, logging.WARNING))
    _configured = True


def get_logger(name: Optional[str] = None) -> "Logger":
    """Return a module/class logger. Ensures global logging is configured.

    Args:
        name: Logger name, usually __name__
    """
    return Logger(name or __name__)


class Logger:
    """Thin wrapper over standard logging.

    - Configures the root logger from `LOG_LEVEL` on first use.
    - `.message(text)` logs at the configured level, so routine progress lines
      (pages fetched, items returned) show up without forcing DEBUG.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(name or __name__)

    @property
    def name(self) -> str:
        return self._logger.name

    def enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        level = (api_settings.LOG_LEVEL or "").upper()
        if level == "DEBUG":
            self.debug(msg, *args, **kwargs)
        elif level in ("INFO", ""):
            self.info(msg, *args, **kwargs)
        else:
            self._logger.log(_LEVELS.get(level, logging.INFO), msg, *args, **kwargs)
