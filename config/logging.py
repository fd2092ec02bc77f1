import logging.config
import sys
from datetime import datetime, timezone
from typing import Any
import structlog

#
# --- helpers --------------------------------------------------------------
#
def _add_timestamp(_, __, event: dict[str, Any]):
    event["timestamp"] = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    return event


def _tail(console: bool) -> list:
    # ConsoleRenderer formata as exceções sozinho
    if console:
        return [structlog.dev.ConsoleRenderer()]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


#
# --- API pública ----------------------------------------------------------
#
def configure_logging(level: str = "INFO", console: bool | None = None) -> None:
    """
    JSON por linha por padrão; saída legível quando o stdout é um terminal.
    """
    if console is None:
        console = sys.stdout.isatty()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"plain": {"format": "%(message)s"}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {"": {"handlers": ["default"], "level": level}},
        }
    )

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.CallsiteParameterAdder(
                [structlog.processors.CallsiteParameter.FILENAME,
                 structlog.processors.CallsiteParameter.LINENO]
            ),
            _add_timestamp,
            structlog.processors.StackInfoRenderer(),
            *_tail(console),
        ],
    )
