"""
Logging Configuration
=====================
The kernel only emits records through module loggers under the ``procmesh``
namespace; :mod:`procmesh` attaches a ``NullHandler`` so nothing is printed
unless the embedding application asks for it.

``setup_logging`` is that request. Besides the usual level and optional log
file, it can trace selected operators: their debug summaries (faces split,
vertices created, ...) go through while the rest of the kernel stays at
``level``.
"""
from __future__ import annotations

import logging
import pkgutil
import sys
from collections.abc import Iterable

import procmesh.operators
from procmesh.config import LOG_DATE_FORMAT, LOG_FORMAT, LOGGER_NAME

OPERATORS_LOGGER_NAME = f"{LOGGER_NAME}.operators"


def operator_names() -> list[str]:
    """Names of the operator modules that can be traced."""
    return sorted(module.name for module in pkgutil.iter_modules(procmesh.operators.__path__))


class OperatorTraceFilter(logging.Filter):
    """
    Let records through at ``level``, or at any level for traced operators.

    Attributes:
        level: Threshold for records outside the traced operators.
        traced: Full logger names of the traced operator modules.
    """
    def __init__(self, level: int, operators: Iterable[str]) -> None:
        super().__init__()
        self.level = level
        self.traced = frozenset(f"{OPERATORS_LOGGER_NAME}.{name}" for name in operators)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.level or record.name in self.traced


def setup_logging(
    level: int = logging.INFO,
    log_file: str | None = None,
    operators: Iterable[str] = (),
) -> logging.Logger:
    """
    Print the kernel's log records to stdout and optionally to a file.

    Repeated calls replace the handlers installed by the previous call; the
    package ``NullHandler`` is kept.

    Args:
        level: Threshold for every record not coming from a traced operator.
        log_file: Optional path of a log file, overwritten on each call.
        operators: Operator modules (e.g. ``"extrude"``, ``"subdivide"``)
            whose debug records are shown regardless of ``level``.

    Raises:
        ValueError: If an operator name is unknown.

    Returns:
        The ``procmesh`` logger.
    """
    operators = sorted(set(operators))
    unknown = set(operators) - set(operator_names())
    if unknown:
        raise ValueError(f"Unknown operators {sorted(unknown)}; expected some of {operator_names()}.")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if operators else level)

    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    trace_filter = OperatorTraceFilter(level, operators)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(trace_filter)
        logger.addHandler(handler)

    traced = ", ".join(operators) if operators else "none"
    logger.info(f"Logging to {len(handlers)} handler(s) at {logging.getLevelName(level)}; traced operators: {traced}.")
    return logger
