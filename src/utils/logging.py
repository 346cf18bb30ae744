"""structlog setup for the vidseek server.

Modules keep logging through `logging.getLogger(__name__)`; their records are
rendered by structlog together with native structlog events, and carry the
`search_id` of the search they belong to.
"""

import logging
import sys

import structlog

NOISY_LOGGERS = ("httpx", "httpcore", "python_multipart")


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Route stdlib and structlog output through one renderer.

    Args:
        log_level: Root logging level name
        json_output: Render JSON lines instead of colored console output
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_search_context(search_id: str) -> None:
    """Tag every log event of the current task with `search_id`."""
    structlog.contextvars.bind_contextvars(search_id=search_id)


def clear_search_context() -> None:
    structlog.contextvars.unbind_contextvars("search_id")
