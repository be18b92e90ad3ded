import struct

import pytest
from pydantic import ValidationError

from nbtree.models.common import TagId
from nbtree.models.tag import (
    ByteTag, CompoundTag, EndTag, FloatTag, IntArrayTag, IntTag, ListTag, NamedTag,
    StringTag, compound, list_of, named,
)


def test_type_ids():
    assert EndTag().type_id == 0
    assert ByteTag(value=1).type_id == 1
    assert CompoundTag().type_id == 10
    assert IntArrayTag().type_id == 11


def test_named_reports_wrapped_id():
    assert named("a", IntTag(value=5)).type_id == TagId.INT
    assert named("a", compound()).type_id == TagId.COMPOUND


def test_default_compound_is_just_end():
    assert CompoundTag().tags == [EndTag()]
    assert compound() == CompoundTag()


def test_compound_must_end_with_end():
    with pytest.raises(ValidationError):
        CompoundTag(tags=[named("a", IntTag(value=1))])
    with pytest.raises(ValidationError):
        CompoundTag(tags=[])


def test_compound_children_must_be_named():
    with pytest.raises(ValidationError):
        CompoundTag(tags=[IntTag(value=1), EndTag()])


def test_compound_lookup_keeps_file_order():
    c = compound(named("b", IntTag(value=1)), named("a", IntTag(value=2)), named("b", IntTag(value=3)))
    assert c.names() == ["b", "a", "b"]
    assert c.get("b") == IntTag(value=1)
    assert c.get("missing") is None
    assert len(c.entries) == 3


def test_scalar_ranges_are_enforced():
    with pytest.raises(ValidationError):
        ByteTag(value=128)
    with pytest.raises(ValidationError):
        IntArrayTag(value=[2**31])


def test_tags_are_frozen():
    t = IntTag(value=1)
    with pytest.raises(ValidationError):
        t.value = 2


def test_empty_list_keeps_element_id():
    tag = list_of(TagId.STRING)
    assert tag.items == []
    assert tag.element_id == TagId.STRING
    assert tag != list_of(TagId.INT)


def test_list_accepts_tags_as_given():
    tag = ListTag(element_id=TagId.BYTE, items=[ByteTag(value=1)])
    assert isinstance(tag.items[0], ByteTag)


def test_equality_is_structural():
    assert named("x", StringTag(value="y")) == NamedTag(name=StringTag(value="x"), value=StringTag(value="y"))
    assert IntTag(value=1) != ByteTag(value=1)


def test_float_is_stored_at_single_precision():
    assert FloatTag(value=0.1).value == struct.unpack(">f", struct.pack(">f", 0.1))[0]
    assert FloatTag(value=0.1) == FloatTag(value=struct.unpack(">f", struct.pack(">f", 0.1))[0])
    assert FloatTag(value=float("inf")).value == float("inf")


def test_float_beyond_f32_range_is_rejected():
    with pytest.raises(ValidationError):
        FloatTag(value=1e40)
