import pytest

from structurray.semantics.arguments import parse_type
from structurray.semantics.synthesizer import field_name, field_names, synthesize


@pytest.fixture
def u8():
    return parse_type("u8")


@pytest.mark.parametrize("count", [0, 1, 3, 62, 63, 10_000])
def test_cardinality_and_order(u8, count):
    fields = synthesize(u8, count)
    assert len(fields) == count
    assert len({f.identifier for f in fields}) == count
    assert len({f.external_key for f in fields}) == count
    for index, f in enumerate(fields):
        assert (f.identifier, f.external_key) == field_name(index)
        assert f.identifier == "_" + f.external_key


def test_every_field_shares_the_type(u8):
    fields = synthesize(u8, 5)
    assert all(f.ty is u8 for f in fields)


def test_deterministic(u8):
    assert synthesize(u8, 100) == synthesize(u8, 100)


def test_base62_rollover(u8):
    fields = synthesize(u8, 64)
    assert (fields[0].identifier, fields[0].external_key) == ("_0", "0")
    assert (fields[61].identifier, fields[61].external_key) == ("_Z", "Z")
    assert (fields[62].identifier, fields[62].external_key) == ("_10", "10")
    assert (fields[63].identifier, fields[63].external_key) == ("_11", "11")


def test_field_names_is_lazy():
    names = field_names(3)
    assert next(names) == ("_0", "0")
    assert list(names) == [("_1", "1"), ("_2", "2")]
