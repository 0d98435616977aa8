"""structlog setup shared by the CLI and library callers.

Entries are rendered as JSON lines on stderr (or a colored console format
for local runs) so stdout stays free for extracted text.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from tieredpdf.observability.context import current_document_id


def add_document_id(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag entries written inside a document_scope with its id."""
    document_id = current_document_id()
    if document_id is not None:
        event_dict.setdefault("document_id", document_id)
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, human readable console otherwise
    """
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        add_document_id,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: Optional[str] = None, **initial_context: Any) -> Any:
    """structlog logger, optionally bound to a component name."""
    logger = structlog.get_logger()
    if component:
        initial_context["component"] = component
    return logger.bind(**initial_context) if initial_context else logger
