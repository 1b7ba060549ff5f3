"""Structured logging for the indexer, built on structlog.

Every event goes through one processor chain.  The chain merges contextvars,
adds the level, masks credentials and adds an ISO timestamp.  It ends in
either a coloured console renderer or a JSON renderer.  JSON is used when
``APP_ENV`` is ``production`` or the caller asks for it.

The indexer holds three kinds of credential: the Graph client secret, the
embedding and search API keys, and the bearer tokens sent to Graph.
:func:`redact_credentials` masks them in every event, including the records
that httpx, uvicorn and the Azure/OpenAI SDKs emit through stdlib
``logging``.  Those records reach the same renderer through
``ProcessorFormatter``.

:func:`bind_run_context` scopes per-run keys, such as the file URL of the
current pipeline run, so concurrent runs keep their own log context.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

import structlog

REDACTED = "[REDACTED]"

# Event keys whose values are never written out.
CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "api_key",
        "authorization",
        "access_token",
        "client_secret",
        "password",
        "azure_openai_key",
        "azure_search_key",
        "graph_client_secret",
    }
)

# Per-request INFO lines from the HTTP stack and SDKs; RequestLoggingMiddleware
# already logs one line per API request.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "openai", "chromadb", "uvicorn.access")


def redact_credentials(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: replace credential values and bearer tokens."""
    for key, value in event_dict.items():
        if key.lower() in CREDENTIAL_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, str) and "Bearer " in value:
            prefix, _, _ = value.partition("Bearer ")
            event_dict[key] = f"{prefix}Bearer {REDACTED}"
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    # contextvars first so run-scoped keys are redacted and rendered too.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        redact_credentials,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output or os.environ.get("APP_ENV", "development") == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def _route_stdlib_logging(
    processors: list[structlog.types.Processor],
    renderer: structlog.types.Processor,
    level: str,
) -> None:
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *processors,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and stdlib logging for the API, CLI and worker.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON lines.  When False, JSON is still used if
                     ``APP_ENV`` is ``production``.

    Returns:
        A configured structlog BoundLogger.
    """
    level = log_level.upper()
    processors = _shared_processors()
    renderer = _renderer(json_output)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # sys.stdout can be swapped after first use (pytest capture).
        cache_logger_on_first_use=False,
    )
    _route_stdlib_logging(processors, renderer, level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named logger; configures defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)


@contextmanager
def bind_run_context(**values: Any) -> Iterator[None]:
    """Bind *values* into structlog contextvars for the duration of the block."""
    tokens = structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
