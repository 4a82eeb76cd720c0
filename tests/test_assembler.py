import pytest

from structurray.semantics.arguments import parse_type
from structurray.semantics.assembler import (
    assemble,
    check_skeleton,
    has_serialization_capability,
    serialization_cfg,
)
from structurray.semantics.ast_builder import parse_skeleton
from structurray.semantics.exceptions import PreexistingFields, SerializationCapabilityMissing
from structurray.semantics.synthesizer import synthesize


def fields(count: int, ty: str = "T"):
    return synthesize(parse_type(ty), count)


def test_preserves_everything_but_the_body():
    skeleton = parse_skeleton(
        "/// Lazily filled.\n"
        "#[derive(Serialize, Deserialize)]\n"
        "pub struct Lazyrray<T: Clone> where T: Default {}"
    )
    result = assemble(skeleton, fields(3))

    assert result.name == "Lazyrray"
    assert result.visibility.text == "pub"
    assert [a.text for a in result.attributes] == [a.text for a in skeleton.attributes]
    assert result.generics == skeleton.generics
    assert result.where_clause == "where T: Default"
    assert [f.identifier for f in result.fields] == ["_0", "_1", "_2"]
    assert [f.external_key for f in result.fields] == ["0", "1", "2"]


def test_skeleton_is_not_mutated():
    skeleton = parse_skeleton("#[derive(Serialize)]\nstruct A {}")
    assemble(skeleton, fields(2))
    assert skeleton.fields == []


@pytest.mark.parametrize("source", ["#[derive(Serialize)]\nstruct A;", "#[derive(Serialize)]\nstruct A();"])
def test_unit_and_tuple_skeletons_become_braced(source):
    result = assemble(parse_skeleton(source), fields(1))
    assert result.style == "braced"
    assert len(result.fields) == 1


def test_zero_fields():
    result = assemble(parse_skeleton("#[derive(Serialize)]\nstruct A {}"), fields(0))
    assert result.fields == []


def test_missing_serialization():
    skeleton = parse_skeleton("#[derive(Debug, Clone)]\nstruct Plain {}")
    with pytest.raises(SerializationCapabilityMissing) as info:
        assemble(skeleton, fields(3, "u8"))
    assert info.value.name == "Plain"
    assert "Plain" in info.value.message


def test_derive_through_a_path():
    skeleton = parse_skeleton("#[derive(serde::Serialize)]\nstruct A {}")
    assert has_serialization_capability(skeleton)


def test_serde_attribute_alone_is_not_enough():
    skeleton = parse_skeleton('#[serde(rename_all = "camelCase")]\nstruct A {}')
    assert not has_serialization_capability(skeleton)


def test_hand_written_impl_counts():
    skeleton = parse_skeleton("struct Manual {}")
    assert has_serialization_capability(skeleton, serialize_impls={"Manual"})
    result = assemble(skeleton, fields(2), serialize_impls=["Manual"])
    assert len(result.fields) == 2


def test_preexisting_fields_are_rejected():
    skeleton = parse_skeleton("#[derive(Serialize)]\nstruct A { a: u8, b: u8 }")
    with pytest.raises(PreexistingFields) as info:
        check_skeleton(skeleton)
    assert info.value.fields == ["a", "b"]
    assert "a, b" in info.value.message


def test_preexisting_fields_checked_before_serialization():
    skeleton = parse_skeleton("struct A(u8);")
    with pytest.raises(PreexistingFields):
        assemble(skeleton, fields(1))


def test_cfg_gated_derive_counts():
    skeleton = parse_skeleton('#[cfg_attr(feature = "serde", derive(Serialize))]\nstruct A {}')
    assert has_serialization_capability(skeleton)
    result = assemble(skeleton, fields(1))
    assert result.serde_cfg == 'feature = "serde"'


def test_plain_derive_needs_no_cfg():
    skeleton = parse_skeleton(
        '#[cfg_attr(feature = "serde", derive(Deserialize))]\n'
        "#[derive(Serialize)]\n"
        "struct A {}"
    )
    assert serialization_cfg(skeleton) is None
    assert assemble(skeleton, fields(1)).serde_cfg is None


def test_hand_written_impl_needs_no_cfg():
    skeleton = parse_skeleton('#[cfg_attr(feature = "serde", derive(Serialize))]\nstruct A {}')
    assert serialization_cfg(skeleton, serialize_impls={"A"}) is None


def test_several_gates_are_combined():
    skeleton = parse_skeleton(
        '#[cfg_attr(feature = "json", derive(Serialize))]\n'
        '#[cfg_attr(feature = "cbor", derive(Serialize))]\n'
        '#[cfg_attr(feature = "json", derive(Deserialize))]\n'
        "struct A {}"
    )
    assert serialization_cfg(skeleton) == 'any(feature = "json", feature = "cbor")'


def test_cfg_attr_without_serde_derive_is_not_enough():
    skeleton = parse_skeleton('#[cfg_attr(test, derive(Debug))]\nstruct A {}')
    with pytest.raises(SerializationCapabilityMissing):
        assemble(skeleton, fields(1))


def test_validation_can_be_skipped():
    skeleton = parse_skeleton("struct Plain {}")
    result = assemble(skeleton, fields(2), validate=False)
    assert len(result.fields) == 2
