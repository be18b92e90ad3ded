from __future__ import annotations
from typing import Any, List, Optional
from .models.common import TagId
from .models.tag import (
    Tag, NamedTag, EndTag, CompoundTag, ListTag,
    ByteArrayTag, IntArrayTag, LongArrayTag, StringTag,
)

_TAG_NAMES = {
    TagId.END: "TAG_End",
    TagId.BYTE: "TAG_Byte",
    TagId.SHORT: "TAG_Short",
    TagId.INT: "TAG_Int",
    TagId.LONG: "TAG_Long",
    TagId.FLOAT: "TAG_Float",
    TagId.DOUBLE: "TAG_Double",
    TagId.BYTE_ARRAY: "TAG_Byte_Array",
    TagId.STRING: "TAG_String",
    TagId.LIST: "TAG_List",
    TagId.COMPOUND: "TAG_Compound",
    TagId.INT_ARRAY: "TAG_Int_Array",
    TagId.LONG_ARRAY: "TAG_Long_Array",
}


def tag_name(tag_id: int) -> str:
    return _TAG_NAMES.get(tag_id, f"TAG_Unknown({tag_id})")


def _entries(n: int) -> str:
    return f"{n} entry" if n == 1 else f"{n} entries"


def format_tree(tag: Tag, *, indent: str = "  ") -> str:
    """
    Render a tree in the classic NBT listing style, e.g.

        TAG_Compound('hello world'): 1 entry
        {
          TAG_String('name'): 'Bananrama'
        }
    """
    lines: List[str] = []
    _format(tag, None, 0, indent, lines)
    return "\n".join(lines)


def _format(tag: Tag, name: Optional[str], level: int, indent: str, lines: List[str]) -> None:
    if isinstance(tag, NamedTag):
        _format(tag.value, tag.name.value, level, indent, lines)
        return

    pad = indent * level
    head = f"{pad}{tag_name(tag.type_id)}({name!r})" if name is not None else f"{pad}{tag_name(tag.type_id)}"

    if isinstance(tag, CompoundTag):
        children = tag.entries
        lines.append(f"{head}: {_entries(len(children))}")
        lines.append(pad + "{")
        for child in children:
            _format(child, None, level + 1, indent, lines)
        lines.append(pad + "}")
    elif isinstance(tag, ListTag):
        lines.append(f"{head}: {_entries(len(tag.items))} of {tag_name(tag.element_id)}")
        lines.append(pad + "{")
        for item in tag.items:
            _format(item, None, level + 1, indent, lines)
        lines.append(pad + "}")
    elif isinstance(tag, ByteArrayTag):
        lines.append(f"{head}: [{len(tag.value)} bytes]")
    elif isinstance(tag, (IntArrayTag, LongArrayTag)):
        lines.append(f"{head}: {tag.value}")
    elif isinstance(tag, StringTag):
        lines.append(f"{head}: {tag.value!r}")
    elif isinstance(tag, EndTag):
        lines.append(head)
    else:
        lines.append(f"{head}: {tag.value}")


def to_plain(tag: Tag) -> Any:
    """Drop type information: compounds become dicts (file order kept), lists become lists."""
    if isinstance(tag, NamedTag):
        return {tag.name.value: to_plain(tag.value)}
    if isinstance(tag, CompoundTag):
        return {child.name.value: to_plain(child.value) for child in tag.entries}
    if isinstance(tag, ListTag):
        return [to_plain(item) for item in tag.items]
    if isinstance(tag, EndTag):
        return None
    if isinstance(tag, (IntArrayTag, LongArrayTag)):
        return list(tag.value)
    return tag.value
