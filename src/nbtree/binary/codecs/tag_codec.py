from __future__ import annotations
import struct
from typing import List

from .bytecursor import Cursor
from .errors import (
    InvalidEncoding,
    LengthOverflow,
    MalformedLength,
    MalformedList,
    NestingTooDeep,
    OutOfBounds,
    UnknownTagId,
    ValueOutOfRange,
)
from nbtree.models.common import TagId, MAX_DEPTH, INT16_MAX, INT32_MAX
from nbtree.models.tag import (
    Tag,
    EndTag, ByteTag, ShortTag, IntTag, LongTag, FloatTag, DoubleTag,
    ByteArrayTag, StringTag, ListTag, CompoundTag, IntArrayTag, LongArrayTag,
    NamedTag,
)

_VALID_IDS = frozenset(int(t) for t in TagId)


# -----------------------------
# Decoding
# -----------------------------

def parse(data: bytes | bytearray | memoryview, *, max_depth: int = MAX_DEPTH) -> Tag:
    """Read one named tag from the start of `data`. Trailing bytes are not consumed."""
    return read_named_tag(Cursor(data), max_depth=max_depth)


def read_named_tag(cur: Cursor, *, depth: int = 0, max_depth: int = MAX_DEPTH) -> Tag:
    """
    Type id byte, then (unless End) a String payload for the name and the
    payload for that id. The name carries no id byte of its own.
    """
    at = cur.tell()
    tag_id = cur.u8()
    if tag_id == TagId.END:
        return EndTag()
    if tag_id not in _VALID_IDS:
        raise UnknownTagId(tag_id, at)

    name = read_tag_payload(cur, TagId.STRING)
    value = read_tag_payload(cur, tag_id, depth=depth, max_depth=max_depth)
    return NamedTag(name=name, value=value)


def _read_count(cur: Cursor, width: int) -> int:
    at = cur.tell()
    n = cur.s16() if width == 2 else cur.s32()
    if n < 0:
        raise MalformedLength(at, n, cur.remaining())
    return n


def _read_string(cur: Cursor) -> StringTag:
    n = _read_count(cur, 2)
    at = cur.tell()
    raw = cur.take(n)
    try:
        return StringTag(value=raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise InvalidEncoding(e.reason, offset=at + e.start) from e


def _read_array(cur: Cursor, code: str, width: int) -> List[int]:
    n = _read_count(cur, 4)
    # One take for the whole block: an oversized count fails before any allocation.
    raw = cur.take(n * width)
    return list(struct.unpack(f">{n}{code}", raw))


def read_tag_payload(cur: Cursor, tag_id: int, *, depth: int = 0, max_depth: int = MAX_DEPTH) -> Tag:
    """Decode a bare payload (no name, no id byte) for `tag_id`."""
    if tag_id == TagId.END:
        return EndTag()
    if tag_id == TagId.BYTE:
        return ByteTag(value=cur.s8())
    if tag_id == TagId.SHORT:
        return ShortTag(value=cur.s16())
    if tag_id == TagId.INT:
        return IntTag(value=cur.s32())
    if tag_id == TagId.LONG:
        return LongTag(value=cur.s64())
    if tag_id == TagId.FLOAT:
        return FloatTag(value=cur.f32())
    if tag_id == TagId.DOUBLE:
        return DoubleTag(value=cur.f64())
    if tag_id == TagId.BYTE_ARRAY:
        return ByteArrayTag(value=cur.take(_read_count(cur, 4)))
    if tag_id == TagId.STRING:
        return _read_string(cur)
    if tag_id == TagId.LIST:
        return _read_list(cur, depth=depth + 1, max_depth=max_depth)
    if tag_id == TagId.COMPOUND:
        return read_compound(cur, depth=depth + 1, max_depth=max_depth)
    if tag_id == TagId.INT_ARRAY:
        return IntArrayTag(value=_read_array(cur, "i", 4))
    if tag_id == TagId.LONG_ARRAY:
        return LongArrayTag(value=_read_array(cur, "q", 8))
    raise UnknownTagId(tag_id, cur.tell())


def _read_list(cur: Cursor, *, depth: int, max_depth: int) -> ListTag:
    start = cur.tell()
    if depth > max_depth:
        raise NestingTooDeep(depth, offset=start)

    element_id = cur.u8()
    if element_id not in _VALID_IDS:
        raise UnknownTagId(element_id, start)
    count = _read_count(cur, 4)
    if count == 0:
        return ListTag(element_id=element_id, items=[])
    if element_id == TagId.END:
        raise MalformedList(element_id, f"{count} End elements", offset=start)
    # Every non-End payload is at least one byte long.
    if count > cur.remaining():
        raise OutOfBounds(cur.tell(), count, cur.remaining())

    # Elements carry no id of their own, so each is decoded as the declared type.
    items = []
    for _ in range(count):
        items.append(read_tag_payload(cur, element_id, depth=depth, max_depth=max_depth))
    return ListTag(element_id=element_id, items=items)


def read_compound(cur: Cursor, *, depth: int = 1, max_depth: int = MAX_DEPTH) -> CompoundTag:
    """Named children until a zero byte; the terminator is kept as a trailing EndTag."""
    if depth > max_depth:
        raise NestingTooDeep(depth, offset=cur.tell())

    tags: List[Tag] = []
    while cur.peek_u8() != TagId.END:
        tags.append(read_named_tag(cur, depth=depth, max_depth=max_depth))
    cur.u8()  # consume TAG_End
    tags.append(EndTag())
    return CompoundTag(tags=tags)


# -----------------------------
# Encoding
# -----------------------------

def to_bytes(tag: Tag, *, max_depth: int = MAX_DEPTH) -> bytes:
    """
    Serialize `tag` exactly as `parse` would have read it: NamedTag emits its
    id byte and name, every other variant emits its bare payload.
    """
    out = bytearray()
    _encode(tag, out, 0, max_depth)
    return bytes(out)


def _count(what: str, n: int, limit: int) -> int:
    if n > limit:
        raise LengthOverflow(what, n, limit)
    return n


_SCALAR_FORMATS = {
    TagId.BYTE: ">b",
    TagId.SHORT: ">h",
    TagId.INT: ">i",
    TagId.LONG: ">q",
    TagId.FLOAT: ">f",
    TagId.DOUBLE: ">d",
}


def _pack_scalar(tag: Tag) -> bytes:
    # Models validate ranges; this catches instances built with model_construct.
    try:
        return struct.pack(_SCALAR_FORMATS[tag.type_id], tag.value)
    except (struct.error, OverflowError) as e:
        raise ValueOutOfRange(tag.kind, tag.value) from e


def _encode(tag: Tag, out: bytearray, depth: int, max_depth: int) -> None:
    if isinstance(tag, NamedTag):
        out.append(tag.type_id)
        _encode(tag.name, out, depth, max_depth)
        _encode(tag.value, out, depth, max_depth)
    elif isinstance(tag, EndTag):
        out.append(0)
    elif isinstance(tag, (ByteTag, ShortTag, IntTag, LongTag, FloatTag, DoubleTag)):
        out += _pack_scalar(tag)
    elif isinstance(tag, ByteArrayTag):
        out += struct.pack(">i", _count("byte array", len(tag.value), INT32_MAX))
        out += tag.value
    elif isinstance(tag, StringTag):
        try:
            raw = tag.value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidEncoding(e.reason) from e
        out += struct.pack(">h", _count("string", len(raw), INT16_MAX))
        out += raw
    elif isinstance(tag, IntArrayTag):
        n = _count("int array", len(tag.value), INT32_MAX)
        out += struct.pack(f">i{n}i", n, *tag.value)
    elif isinstance(tag, LongArrayTag):
        n = _count("long array", len(tag.value), INT32_MAX)
        out += struct.pack(f">i{n}q", n, *tag.value)
    elif isinstance(tag, ListTag):
        depth += 1
        if depth > max_depth:
            raise NestingTooDeep(depth)
        _check_list(tag)
        out.append(tag.element_id)
        out += struct.pack(">i", _count("list", len(tag.items), INT32_MAX))
        for item in tag.items:
            _encode(item, out, depth, max_depth)
    elif isinstance(tag, CompoundTag):
        depth += 1
        if depth > max_depth:
            raise NestingTooDeep(depth)
        for child in tag.tags:
            _encode(child, out, depth, max_depth)
    else:
        raise TypeError(f"not a tag: {type(tag).__name__}")


def _check_list(tag: ListTag) -> None:
    if tag.element_id == TagId.END and tag.items:
        raise MalformedList(tag.element_id, f"{len(tag.items)} End elements")
    for i, item in enumerate(tag.items):
        if isinstance(item, NamedTag):
            raise MalformedList(tag.element_id, f"item[{i}] is a named tag")
        if item.type_id != tag.element_id:
            raise MalformedList(tag.element_id, f"item[{i}] has id {item.type_id}")
