from __future__ import annotations
import base64
import json
from typing import Any, Union
from ..binary.codecs.errors import NbtError, NestingTooDeep
from ..binary.reader import ParseError
from ..models.common import MAX_DEPTH
from ..models.file import NbtFile
from ..models.tag import (
    Tag, EndTag, ByteTag, ShortTag, IntTag, LongTag, FloatTag, DoubleTag,
    ByteArrayTag, StringTag, ListTag, CompoundTag, IntArrayTag, LongArrayTag,
    NamedTag,
)

_LEAVES = {
    cls.model_fields["kind"].default: cls
    for cls in (EndTag, ByteTag, ShortTag, IntTag, LongTag, FloatTag, DoubleTag,
                StringTag, IntArrayTag, LongArrayTag)
}


def tag_from_json(obj: Any, *, depth: int = 0, max_depth: int = MAX_DEPTH) -> Tag:
    """Inverse of `tag_to_json`. Children are built first, so each model validates one level."""
    kind = obj["kind"]
    if kind == "named":
        return NamedTag(
            name=StringTag.model_validate(obj["name"]),
            value=tag_from_json(obj["value"], depth=depth, max_depth=max_depth),
        )
    if kind in ("compound", "list"):
        depth += 1
        if depth > max_depth:
            raise NestingTooDeep(depth)
        children = []
        for child in obj["tags" if kind == "compound" else "items"]:
            children.append(tag_from_json(child, depth=depth, max_depth=max_depth))
        if kind == "compound":
            return CompoundTag(tags=children)
        return ListTag(element_id=obj["element_id"], items=children)
    if kind == "byte_array":
        return ByteArrayTag(value=base64.b64decode(obj["value"], validate=True))
    return _LEAVES[kind].model_validate(obj)


def read_json_file(src: Union[str, bytes], *, max_depth: int = MAX_DEPTH) -> NbtFile:
    """Rebuild an NbtFile from the JSON produced by `write_json_file`.
    Byte arrays are expected base64-encoded.
    """
    try:
        doc = json.loads(src)
        return NbtFile(
            root=tag_from_json(doc["root"], max_depth=max_depth),
            compressed=doc.get("compressed", False),
        )
    except NbtError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        # ValueError covers JSONDecodeError, binascii.Error and pydantic's ValidationError
        raise ParseError(f"invalid NBT JSON document: {e}") from e
