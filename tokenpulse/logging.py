"""
TokenPulse - Structured Logging

structlog setup shared by the API, the analysis pipeline, the market-data
client and the client-side controller. Every event names the component
that emitted it; an analysis run also binds its token address so the
stage events of one request can be grepped together.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from tokenpulse.config import settings

COMPONENTS = ("api", "agents", "ingestion", "client")

# Request lines from these duplicate our own provider events
QUIET_LOGGERS = ("httpx", "httpcore", "groq", "werkzeug")


def _add_environment(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("env", settings.env)
    return event_dict


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name; defaults to ``TOKENPULSE_LOG_LEVEL``
        json_output: Force JSON lines on or off; by default local debug
            runs get the console renderer and everything else gets JSON
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    if json_output is None:
        json_output = not (settings.debug and settings.is_local)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_environment,
    ]

    if json_output:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a bound logger with optional initial context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def get_component_logger(component: str, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get the logger for one of the known components.

    Raises:
        ValueError: if ``component`` is not one of COMPONENTS
    """
    if component not in COMPONENTS:
        raise ValueError(f"Unknown log component: {component}")
    return get_logger(f"tokenpulse.{component}", component=component, **initial_context)


def get_api_logger() -> structlog.BoundLogger:
    return get_component_logger("api")


def get_agent_logger() -> structlog.BoundLogger:
    return get_component_logger("agents")


def get_ingestion_logger(provider: str) -> structlog.BoundLogger:
    return get_component_logger("ingestion", provider=provider)


def get_client_logger() -> structlog.BoundLogger:
    return get_component_logger("client")


@contextmanager
def token_context(token_address: str) -> Iterator[None]:
    """Bind ``token_address`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(token_address=token_address):
        yield
