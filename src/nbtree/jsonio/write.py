from __future__ import annotations
import json
from typing import Any, Dict
from ..models.file import NbtFile
from ..models.tag import Tag, NamedTag, CompoundTag, ListTag, FloatTag, DoubleTag

def tag_to_json(tag: Tag) -> Dict[str, Any]:
    """Plain-dict form of a tag, `kind` discriminators included.

    Containers are walked here rather than by pydantic so nesting up to
    MAX_DEPTH is not cut short by pydantic-core's recursion guard.
    Floats are passed through as-is so json.dumps writes NaN/Infinity;
    other leaves use their own model_dump (base64 bytes).
    """
    if isinstance(tag, NamedTag):
        return {"kind": tag.kind, "name": tag.name.model_dump(mode="json"), "value": tag_to_json(tag.value)}
    if isinstance(tag, CompoundTag):
        tags = []
        for child in tag.tags:
            tags.append(tag_to_json(child))
        return {"kind": tag.kind, "tags": tags}
    if isinstance(tag, ListTag):
        items = []
        for item in tag.items:
            items.append(tag_to_json(item))
        return {"kind": tag.kind, "element_id": int(tag.element_id), "items": items}
    if isinstance(tag, (FloatTag, DoubleTag)):
        return {"kind": tag.kind, "value": tag.value}
    return tag.model_dump(mode="json")

def write_json_file(file: NbtFile, *, pretty: bool = True) -> str:
    """Lossless JSON form of the whole document. NaN/Infinity are written as JSON constants."""
    doc = {"root": tag_to_json(file.root), "compressed": file.compressed}
    return json.dumps(doc, indent=2 if pretty else None)
