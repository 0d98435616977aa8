"""Per-document logging scope.

While a document is extracted, its id lives in a ContextVar and is bound into
structlog's contextvars. Both survive task boundaries, so log lines written
by vision batch workers carry the same document_id as the orchestrator's.

Usage:
    from tieredpdf.observability.context import document_scope

    with document_scope(file_name="report.pdf") as document_id:
        ...
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

import structlog

_current_document: ContextVar[Optional[str]] = ContextVar(
    "current_document", default=None
)


def current_document_id() -> Optional[str]:
    """Id of the document being extracted in this context, if any."""
    return _current_document.get()


@contextmanager
def document_scope(
    document_id: Optional[str] = None, **fields: Any
) -> Iterator[str]:
    """Mark everything inside the block as work on one document.

    A fresh UUID4 is used when no id is given. Extra ``fields`` are bound to
    every log entry written inside the block. Nested scopes restore the
    outer document on exit.
    """
    document_id = document_id or str(uuid.uuid4())
    token = _current_document.set(document_id)
    try:
        with structlog.contextvars.bound_contextvars(**fields):
            yield document_id
    finally:
        _current_document.reset(token)
