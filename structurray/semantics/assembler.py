"""Merge synthesized fields into the caller's struct skeleton."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional

from structurray.semantics.ast import Attribute, FieldDescriptor, StructSkeleton
from structurray.semantics.exceptions import PreexistingFields, SerializationCapabilityMissing

SERIALIZATION_TRAITS = ("Serialize", "Deserialize")


def _derives_serde(attr: Attribute) -> bool:
    return any(attr.derives(trait) for trait in SERIALIZATION_TRAITS)


def has_serialization_capability(skeleton: StructSkeleton, serialize_impls: Iterable[str] = ()) -> bool:
    """True if the struct derives serde traits or has a hand-written impl.

    A derive wrapped in ``cfg_attr`` counts; see serialization_cfg.
    """
    if any(skeleton.derives(trait) for trait in SERIALIZATION_TRAITS):
        return True
    return skeleton.name in set(serialize_impls)


def serialization_cfg(skeleton: StructSkeleton, serialize_impls: Iterable[str] = ()) -> Optional[str]:
    """The cfg predicate under which the struct is serde-aware.

    None when serde support is unconditional: a plain derive or a
    hand-written impl. Several gated derives combine into ``any(...)``.
    """
    if skeleton.name in set(serialize_impls):
        return None
    if any(attr.cfg is None and _derives_serde(attr) for attr in skeleton.attributes):
        return None

    predicates: List[str] = []
    for attr in skeleton.attributes:
        if attr.cfg is not None and _derives_serde(attr) and attr.cfg not in predicates:
            predicates.append(attr.cfg)
    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]
    return f"any({', '.join(predicates)})"


def check_skeleton(skeleton: StructSkeleton, serialize_impls: Iterable[str] = ()) -> None:
    """Validate a skeleton before any field is synthesized.

    Raises:
        PreexistingFields: the skeleton already declares fields.
        SerializationCapabilityMissing: nothing makes the struct serde-aware.
    """
    if skeleton.fields:
        raise PreexistingFields(
            skeleton.name,
            [f.identifier for f in skeleton.fields],
            span=skeleton.loc,
        )
    if not has_serialization_capability(skeleton, serialize_impls):
        raise SerializationCapabilityMissing(skeleton.name, span=skeleton.loc)


def assemble(skeleton: StructSkeleton, fields: List[FieldDescriptor], *,
             serialize_impls: Iterable[str] = (), validate: bool = True) -> StructSkeleton:
    """Return a copy of `skeleton` whose body is exactly `fields`.

    Attributes, visibility, name, generics and where clause are carried over
    unchanged; the result is always a braced struct.

    Args:
        skeleton: Field-less declaration the attribute was attached to.
        fields: Synthesized descriptors in index order.
        serialize_impls: Names of structs with a hand-written serde impl
            elsewhere in the same source.
        validate: Run check_skeleton first. Callers that already ran it
            pass False.

    Raises:
        PreexistingFields: the skeleton already declares fields.
        SerializationCapabilityMissing: nothing makes the struct serde-aware.
    """
    serialize_impls = frozenset(serialize_impls)
    if validate:
        check_skeleton(skeleton, serialize_impls)

    return replace(
        skeleton,
        attributes=list(skeleton.attributes),
        generics=list(skeleton.generics),
        fields=list(fields),
        style="braced",
        serde_cfg=serialization_cfg(skeleton, serialize_impls),
    )
