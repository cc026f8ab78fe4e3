"""Structured logging configuration using structlog.

Call ``configure_logging()`` once at process startup. Library modules log
through the stdlib API; the :class:`~archive_aggregator.core.archive.Archive`
facade uses structlog for key/value events:

Stdlib usage::

    import logging
    logger = logging.getLogger(__name__)
    logger.warning("cache: read error for %s: %s", key, exc)

Structlog usage::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("archive_fetch_completed", domain="example.com", page_count=12)

Every ``Archive.fetch_snapshots`` call sets :data:`fetch_id_var`, so all
records emitted while that call runs (provider HTTP logs, cache warnings)
carry the same ``fetch_id``.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

from archive_aggregator.config.settings import get_settings

# ---------------------------------------------------------------------------
# Context variable set by Archive.fetch_snapshots, read by the log processor
# ---------------------------------------------------------------------------

fetch_id_var: ContextVar[str | None] = ContextVar("fetch_id", default=None)
"""Identifier of the facade call currently running in this context."""


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "password",
    "secret",
    "token",
    "authorization",
    "bearer",
})
"""Lower-cased substrings that identify log event-dict keys whose values
must be redacted before the record reaches any renderer."""


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with a redaction marker.

    Top-level keys and the keys of nested ``dict`` values one level deep are
    matched case-insensitively against :data:`_SECRET_SUBSTRINGS`. Perma.cc
    API keys travel in request options, so this matters whenever options are
    logged.

    Returns:
        The event dict with sensitive values replaced by ``"[REDACTED]"``.
    """
    redacted = "[REDACTED]"
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in _SECRET_SUBSTRINGS):
            event_dict[key] = redacted
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            event_dict[key] = {
                nested_key: (
                    redacted
                    if any(secret in str(nested_key).lower() for secret in _SECRET_SUBSTRINGS)
                    else nested_val
                )
                for nested_key, nested_val in val.items()
            }
    return event_dict


def _inject_fetch_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add the current ``fetch_id`` to the event dict if one is set."""
    fid = fetch_id_var.get()
    if fid is not None and "fetch_id" not in event_dict:
        event_dict["fetch_id"] = fid
    return event_dict


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Outside DEBUG the output is newline-delimited JSON. At DEBUG level
    structlog's ``ConsoleRenderer`` is used instead.

    Standard fields added to every log record:

    - ``timestamp``: ISO 8601 string.
    - ``level``: Log level name.
    - ``logger``: Module name that emitted the record.
    - ``fetch_id``: Current facade call (omitted outside one).
    - ``event``: The log message string.

    Safe to call more than once; previous handlers are replaced.

    Args:
        log_level: ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` or
            ``"CRITICAL"``. Case-insensitive. Defaults to
            ``Settings.log_level``.
    """
    level_upper = (log_level or get_settings().log_level).upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_fetch_id,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # httpx logs every request at INFO.
    if not is_development:
        for noisy_logger in ("httpx", "httpcore"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
