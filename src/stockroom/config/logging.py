"""Logging setup for stockroom.

Services log through plain ``logging.getLogger(__name__)`` and attach
structured fields with ``extra=``. ``ProductService`` tags every rejection
with ``op`` and ``code``, and successful writes with ``op`` and
``product_id``. Those fields are lifted into the structlog event dict, so
JSON output carries them as top-level keys:

    {"event": "register_new_product rejected [ALREADY_REGISTERED]: ...",
     "op": "register_new_product", "code": "ALREADY_REGISTERED", ...}
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

PACKAGE_LOGGER = "stockroom"

# Record attributes promoted to event keys.
SERVICE_FIELDS = ("op", "code", "product_id")

QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def _pre_chain() -> list[Processor]:
    """Processors run on every event, structlog-native or stdlib."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(allow=SERVICE_FIELDS),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _formatter(log_json: bool) -> structlog.stdlib.ProcessorFormatter:
    if log_json:
        tail: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        tail = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route stockroom logs to stderr through structlog.

    Replaces any handlers already on the root logger, so calling it twice
    leaves one handler. ``verbose`` drops the ``stockroom`` logger to DEBUG;
    otherwise only warnings and errors are emitted.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(log_json))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
