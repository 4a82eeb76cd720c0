"""Field synthesis: one descriptor per index, named by base62."""
from __future__ import annotations

from typing import Iterator, List, Tuple

from structurray.internals.errors import raise_internal_error
from structurray.semantics.ast import FieldDescriptor, TypeRef
from structurray.semantics import base62

IDENTIFIER_PREFIX = "_"


def field_name(index: int) -> Tuple[str, str]:
    """Return (identifier, external_key) for one index.

    The prefix keeps the identifier legal when the key starts with a digit.
    """
    key = base62.encode(index)
    return IDENTIFIER_PREFIX + key, key


def field_names(field_count: int) -> Iterator[Tuple[str, str]]:
    """Lazily yield (identifier, external_key) for indices 0..field_count-1."""
    for index in range(field_count):
        yield field_name(index)


def synthesize(field_type: TypeRef, field_count: int) -> List[FieldDescriptor]:
    """Build field_count descriptors in ascending index order.

    Position i of the result always holds the field for index i.
    """
    # Pre-sized from the validated count
    fields: List[FieldDescriptor] = [None] * field_count  # type: ignore[list-item]
    for index, (identifier, key) in enumerate(field_names(field_count)):
        fields[index] = FieldDescriptor(identifier=identifier, external_key=key, ty=field_type)

    _check_distinct(fields)
    return fields


def _check_distinct(fields: List[FieldDescriptor]) -> None:
    identifiers = {f.identifier for f in fields}
    keys = {f.external_key for f in fields}
    if len(identifiers) != len(fields) or len(keys) != len(fields):
        raise_internal_error("CE0001", count=len(fields), distinct=min(len(identifiers), len(keys)))
