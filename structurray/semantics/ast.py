# semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Literal

from lark import Tree

from structurray.internals.report import Span

# === Core node base ===

@dataclass
class Node:
    loc: Optional[Span]

# === Values shared by every field of an invocation ===

@dataclass(frozen=True)
class TypeRef:
    """Parsed type expression; immutable, so one instance is shared by all fields."""
    text: str                                   # Whitespace-normalized source, e.g. "Vec<u8>"
    tree: Optional[Tree] = field(default=None, compare=False, repr=False)
    loc: Optional[Span] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.text

@dataclass
class Arguments(Node):
    field_type: TypeRef
    field_count: int                            # 0 <= field_count < 2**32

@dataclass(frozen=True)
class FieldDescriptor:
    identifier: str                             # Rust field name, e.g. "_1a"
    external_key: str                           # serde key, e.g. "1a"
    ty: TypeRef

# === Declaration pieces ===

@dataclass
class Attribute(Node):
    text: str                                   # Source text, kept verbatim
    path: str                                   # "derive", "serde", "doc", ...
    names: List[str] = field(default_factory=list)  # Identifiers inside the attribute input
    cfg: Optional[str] = None                   # cfg_attr predicate, e.g. 'feature = "serde"'
    gated: List[Attribute] = field(default_factory=list)  # Attributes applied under `cfg`

    def derives(self, trait: str) -> bool:
        if self.path in ("derive", "core::prelude::v1::derive"):
            return trait in self.names
        return any(attr.derives(trait) for attr in self.gated)

@dataclass
class Visibility(Node):
    text: str                                   # "pub", "pub(crate)", "pub(in a::b)"

@dataclass
class GenericParam(Node):
    kind: Literal["lifetime", "type", "const"]
    name: str                                   # "'a", "T", "N"
    text: str                                   # "T: Clone = u8"

@dataclass
class StructSkeleton(Node):
    """A struct declaration: the caller's skeleton, or the assembled result."""
    name: str
    attributes: List[Attribute] = field(default_factory=list)
    visibility: Optional[Visibility] = None
    generics: List[GenericParam] = field(default_factory=list)
    where_clause: Optional[str] = None          # "where T: Clone" without the trailing comma
    fields: List[FieldDescriptor] = field(default_factory=list)
    style: Literal["braced", "tuple", "unit"] = "braced"
    serde_cfg: Optional[str] = None             # cfg predicate the rename attributes need

    @property
    def generics_text(self) -> str:
        if not self.generics:
            return ""
        return "<" + ", ".join(p.text for p in self.generics) + ">"

    def derives(self, trait: str) -> bool:
        return any(attr.derives(trait) for attr in self.attributes)
