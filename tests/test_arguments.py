import pytest

from structurray.semantics import arguments
from structurray.semantics.arguments import parse_arguments, split_top_level
from structurray.semantics.base62 import U32_MAX
from structurray.semantics.exceptions import (
    CountConversionOverflow,
    InvalidCountArgument,
    InvalidTypeArgument,
    MissingCountArgument,
    MissingTypeArgument,
)


def test_simple_arguments():
    args = parse_arguments("u8, 100")
    assert args.field_type.text == "u8"
    assert args.field_count == 100


def test_generic_type_keeps_its_comma():
    args = parse_arguments("HashMap<String, u8>, 4")
    assert args.field_type.text == "HashMap<String, u8>"
    assert args.field_count == 4


@pytest.mark.parametrize("raw, type_text", [
    ("Vec<Option<u8>>, 2", "Vec<Option<u8>>"),
    ("(u8, String), 2", "(u8, String)"),
    ("[u8; 4], 2", "[u8; 4]"),
    ("&'static str, 2", "&'static str"),
    ("fn(u8, u8) -> u8, 2", "fn(u8, u8) -> u8"),
    ("std::collections::BTreeMap<u32, Vec<u8>>, 2", "std::collections::BTreeMap<u32, Vec<u8>>"),
    ("T, 2", "T"),
    ("<T as Iterator>::Item, 2", "<T as Iterator>::Item"),
    ("<Vec<u8> as IntoIterator>::IntoIter, 2", "<Vec<u8> as IntoIterator>::IntoIter"),
    ("Vec<<T as Trait>::Out>, 2", "Vec<<T as Trait>::Out>"),
    ("Tag<'x'>, 2", "Tag<'x'>"),
    ("Offset<-1>, 2", "Offset<-1>"),
])
def test_type_expressions(raw, type_text):
    args = parse_arguments(raw)
    assert args.field_type.text == type_text
    assert args.field_count == 2


def test_type_text_is_whitespace_normalized():
    args = parse_arguments("  Vec<\n    u8>  ,  7 ")
    assert args.field_type.text == "Vec< u8>"
    assert args.field_count == 7


def test_split_ignores_arrow():
    assert split_top_level("fn() -> u8, 3") == ["fn() -> u8", " 3"]
    assert split_top_level("HashMap<String, u8>, 4") == ["HashMap<String, u8>", " 4"]
    assert split_top_level("u8") == ["u8"]


@pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
def test_empty_arguments(raw):
    with pytest.raises(MissingTypeArgument):
        parse_arguments(raw)


def test_blank_type_segment():
    with pytest.raises(MissingTypeArgument):
        parse_arguments(", 3")


def test_single_argument():
    with pytest.raises(MissingCountArgument) as info:
        parse_arguments("u8")
    assert info.value.text == "u8"
    assert info.value.code == "CE1002"


def test_generic_type_without_count():
    with pytest.raises(MissingCountArgument):
        parse_arguments("HashMap<String, u8>")


@pytest.mark.parametrize("raw", ["NotAType!!, 3", "3, 3", "u8 u8, 3", "u8>, 3"])
def test_invalid_type(raw):
    with pytest.raises(InvalidTypeArgument):
        parse_arguments(raw)


@pytest.mark.parametrize("count", ["-1", "abc", "1.5", "0x10", "", "1_000", "4294967296"])
def test_invalid_count(count):
    with pytest.raises(InvalidCountArgument) as info:
        parse_arguments(f"u8, {count}")
    assert info.value.text == count
    assert str(U32_MAX) in info.value.message


def test_count_boundaries():
    assert parse_arguments("u8, 0").field_count == 0
    assert parse_arguments("u8, +5").field_count == 5
    assert parse_arguments("u8, 007").field_count == 7
    assert parse_arguments(f"u8, {U32_MAX}").field_count == U32_MAX


def test_very_long_count_is_rejected():
    with pytest.raises(InvalidCountArgument):
        parse_arguments("u8, " + "9" * 5000)


def test_zero_padded_count():
    assert parse_arguments("u8, " + "0" * 5000 + "3").field_count == 3
    assert parse_arguments("u8, +" + "0" * 20).field_count == 0


def test_extra_segments_are_ignored():
    assert parse_arguments("u8, 3, whatever").field_count == 3


def test_count_above_platform_size(monkeypatch):
    monkeypatch.setattr(arguments, "SIZE_MAX", 10)
    assert parse_arguments("u8, 10").field_count == 10
    with pytest.raises(CountConversionOverflow) as info:
        parse_arguments("u8, 11")
    assert info.value.count == 11
    assert info.value.code == "CE1005"


def test_messages_name_the_expected_shape():
    with pytest.raises(MissingTypeArgument) as info:
        parse_arguments("")
    assert "#[faux_array(u8, 100)]" in info.value.message
