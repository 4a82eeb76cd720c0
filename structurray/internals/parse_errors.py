"""Shared exception handling for the pipeline and CLI."""
from __future__ import annotations

import sys
from typing import Optional

from lark import UnexpectedInput

from structurray.internals.report import Reporter, Span
from structurray.semantics.exceptions import ExpansionError


def improve_parse_error(e: UnexpectedInput) -> str:
    """First line of a lark error, which carries the position and the token."""
    error_text = str(e).strip()
    return error_text.splitlines()[0] if error_text else type(e).__name__


def handle_parse_exception(exc: Exception, reporter: Reporter, span: Optional[Span] = None,
                           source_path=None) -> bool:
    """Handle an expansion or parse exception by emitting a diagnostic.

    Args:
        exc: The exception to handle.
        reporter: Reporter for error/warning collection.
        span: Location to report; defaults to the exception's own span.
        source_path: Optional path for context in UnexpectedInput errors.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from structurray.internals import errors as er

    if isinstance(exc, ExpansionError):
        er.emit(reporter, er.ERR[exc.code], span or exc.span, **exc.params)
        return True

    if isinstance(exc, UnexpectedInput):
        if source_path:
            print(f"Parse error in {source_path}:", file=sys.stderr)
        er.emit(reporter, er.ERR.CE2004, span, detail=improve_parse_error(exc))
        return True

    return False
