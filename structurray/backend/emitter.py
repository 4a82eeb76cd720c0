"""Render assembled declarations back to Rust source."""
from __future__ import annotations

from typing import List, Optional

from structurray.semantics.ast import FieldDescriptor, StructSkeleton

INDENT = "    "


def rename_attribute(field: FieldDescriptor, cfg: Optional[str] = None) -> str:
    """serde instruction mapping the field to its external key.

    With `cfg`, the instruction is gated the same way as the serde derive.
    """
    rename = f'serde(rename = "{field.external_key}")'
    if cfg is not None:
        return f"#[cfg_attr({cfg}, {rename})]"
    return f"#[{rename}]"


def struct_header(skeleton: StructSkeleton) -> str:
    parts = []
    if skeleton.visibility is not None:
        parts.append(skeleton.visibility.text)
    parts.append(f"struct {skeleton.name}{skeleton.generics_text}")
    if skeleton.where_clause:
        parts.append(skeleton.where_clause)
    return " ".join(parts)


def render_lines(skeleton: StructSkeleton) -> List[str]:
    lines: List[str] = []
    for attr in skeleton.attributes:
        # Multi-line attributes keep their continuation indentation as written
        lines.append(attr.text)

    header = struct_header(skeleton)
    if not skeleton.fields:
        lines.append(f"{header} {{}}")
        return lines

    lines.append(f"{header} {{")
    for field in skeleton.fields:
        lines.append(f"{INDENT}{rename_attribute(field, skeleton.serde_cfg)}")
        lines.append(f"{INDENT}{field.identifier}: {field.ty.text},")
    lines.append("}")
    return lines


def render_struct(skeleton: StructSkeleton, indent: str = "", newline: str = "\n") -> str:
    """Render a braced struct.

    `indent` is applied to every line but the first, so the result can
    replace an item that starts mid-line at that indentation. `newline`
    should match the line endings of the surrounding file.
    """
    return f"{newline}{indent}".join(render_lines(skeleton))
