"""Exceptions raised while expanding a faux_array declaration.

Each class maps to one code in ``internals.errors``; the message is formatted
from the registered template so the CLI and library callers see the same text.
"""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from structurray.internals.errors import format_message

if TYPE_CHECKING:
    from structurray.internals.report import Span


class ExpansionError(Exception):
    """Base class for every error that aborts a single expansion."""
    code: str = ""

    def __init__(self, span: Optional['Span'] = None, **params):
        self.params = params
        self.span = span
        self.message = format_message(self.code, **params)
        super().__init__(f"{self.code}: {self.message}")

    @property
    def kind(self) -> str:
        return type(self).__name__


class MissingTypeArgument(ExpansionError):
    """The argument list is empty."""
    code = "CE1001"


class MissingCountArgument(ExpansionError):
    """Only one argument segment is present."""
    code = "CE1002"

    def __init__(self, text: str, span: Optional['Span'] = None):
        super().__init__(span, text=text)
        self.text = text


class InvalidTypeArgument(ExpansionError):
    """The first argument does not parse as a type expression."""
    code = "CE1003"

    def __init__(self, text: str, span: Optional['Span'] = None):
        super().__init__(span, text=text)
        self.text = text


class InvalidCountArgument(ExpansionError):
    """The second argument is not a decimal integer fitting in a u32."""
    code = "CE1004"

    def __init__(self, text: str, max_count: int, span: Optional['Span'] = None):
        super().__init__(span, text=text, max_count=max_count)
        self.text = text


class CountConversionOverflow(ExpansionError):
    """A valid u32 count does not fit the platform size type."""
    code = "CE1005"

    def __init__(self, count: int, size_max: int, span: Optional['Span'] = None):
        super().__init__(span, count=count, size_max=size_max)
        self.count = count


class NotAStruct(ExpansionError):
    """The annotated item is not a struct definition."""
    code = "CE2001"

    def __init__(self, kind: str, name: str, span: Optional['Span'] = None):
        super().__init__(span, kind=kind, name=name)
        self.item_kind = kind
        self.name = name


class SerializationCapabilityMissing(ExpansionError):
    """The struct neither derives nor implements serde serialization."""
    code = "CE2002"

    def __init__(self, name: str, span: Optional['Span'] = None):
        super().__init__(span, name=name)
        self.name = name


class PreexistingFields(ExpansionError):
    """The skeleton already declares fields."""
    code = "CE2003"

    def __init__(self, name: str, fields: list[str], span: Optional['Span'] = None):
        super().__init__(span, name=name, count=len(fields), fields=", ".join(fields))
        self.name = name
        self.fields = fields


class DeclarationSyntaxError(ExpansionError):
    """The annotated item could not be parsed at all."""
    code = "CE2004"

    def __init__(self, detail: str, span: Optional['Span'] = None):
        super().__init__(span, detail=detail)
        self.detail = detail


class DuplicateFauxArray(ExpansionError):
    """A second faux_array attribute sits on the same item."""
    code = "CE2005"
