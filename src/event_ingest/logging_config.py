"""structlog setup shared by the API process and the CLI.

Both ``structlog.get_logger()`` and stdlib ``logging`` records go through
one ``ProcessorFormatter``: JSON lines when deployed, coloured console
output for local CLI runs.
"""

import logging
import sys

import structlog

# httpx logs every request URL at INFO, and the Discovery API key travels
# in the query string.
_NOISY_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(json_output: bool = True, log_level: str = "INFO") -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: Render JSON lines when ``True``, otherwise use
            structlog's console renderer.
        log_level: Root log level name (``"DEBUG"``, ``"INFO"``, ...).
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))

    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, root.level))
