"""Structured logging helpers for the service layer.

Every service logs through a logger under the ``gestio.services`` namespace
and reports operations as ``"<operation>: <outcome>"`` messages. Context
values travel on the LogRecord through ``extra``, so handlers and tests can
read them as attributes.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="import_stage",
        outcome="success",
        entity="Supplier",
        inserted=12,
        updated=3,
    )

    # Per-row diagnostics go to DEBUG
    log_operation(
        logger,
        operation="import_row",
        outcome="error",
        level=logging.DEBUG,
        entity="Contract",
        row_number=7,
        error="Client 'C999' not found",
    )
"""

import logging
from typing import Any

SERVICE_LOGGER_PREFIX = "gestio.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Logger for a service module.

    Only the last dotted component of ``name`` is kept, so
    ``src.services.package_exchange.stages`` becomes
    ``gestio.services.stages``.
    """
    return logging.getLogger(f"{SERVICE_LOGGER_PREFIX}.{name.rsplit('.', 1)[-1]}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Emit one structured entry for a service operation.

    Args:
        logger: Service logger
        operation: Operation name ("export_package", "import_stage", ...)
        outcome: "success", "skipped", "error", "unresolved", ...
        level: Log level; per-row entries use DEBUG
        **context: Extra record attributes such as entity, package_file,
            row_number, the stage counters or error. Keys must not clash
            with LogRecord attributes ("filename", "module", "name").
    """
    logger.log(
        level,
        f"{operation}: {outcome}",
        extra={"operation": operation, "outcome": outcome, **context},
    )
