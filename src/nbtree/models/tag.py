from __future__ import annotations
import struct
from typing import Annotated, ClassVar, Iterable, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .common import (
    TagId,
    INT8_MIN, INT8_MAX,
    INT16_MIN, INT16_MAX,
    INT32_MIN, INT32_MAX,
    INT64_MIN, INT64_MAX,
)

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class _TagBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    TYPE_ID: ClassVar[TagId]

    @property
    def type_id(self) -> int:
        return self.TYPE_ID


class EndTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.END
    kind: Literal["end"] = "end"

class ByteTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.BYTE
    kind: Literal["byte"] = "byte"
    value: int = Field(..., ge=INT8_MIN, le=INT8_MAX)

class ShortTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.SHORT
    kind: Literal["short"] = "short"
    value: int = Field(..., ge=INT16_MIN, le=INT16_MAX)

class IntTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.INT
    kind: Literal["int"] = "int"
    value: Int32

class LongTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.LONG
    kind: Literal["long"] = "long"
    value: Int64

class FloatTag(_TagBase):
    model_config = ConfigDict(ser_json_inf_nan="constants")
    TYPE_ID: ClassVar[TagId] = TagId.FLOAT
    kind: Literal["float"] = "float"
    value: float

    @field_validator("value")
    @classmethod
    def _single_precision(cls, v: float) -> float:
        # Stored already rounded to f32 so an encode/decode cycle is exact.
        try:
            return struct.unpack(">f", struct.pack(">f", v))[0]
        except OverflowError:
            raise ValueError(f"{v!r} does not fit a 32-bit float") from None

class DoubleTag(_TagBase):
    model_config = ConfigDict(ser_json_inf_nan="constants")
    TYPE_ID: ClassVar[TagId] = TagId.DOUBLE
    kind: Literal["double"] = "double"
    value: float

class ByteArrayTag(_TagBase):
    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")
    TYPE_ID: ClassVar[TagId] = TagId.BYTE_ARRAY
    kind: Literal["byte_array"] = "byte_array"
    value: bytes = b""

class StringTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.STRING
    kind: Literal["string"] = "string"
    value: str = ""

class IntArrayTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.INT_ARRAY
    kind: Literal["int_array"] = "int_array"
    value: List[Int32] = Field(default_factory=list)

class LongArrayTag(_TagBase):
    TYPE_ID: ClassVar[TagId] = TagId.LONG_ARRAY
    kind: Literal["long_array"] = "long_array"
    value: List[Int64] = Field(default_factory=list)


class ListTag(_TagBase):
    """Homogeneous sequence of bare payloads. `element_id` is kept even when empty.

    Homogeneity is checked by the encoder, not here.
    """
    TYPE_ID: ClassVar[TagId] = TagId.LIST
    kind: Literal["list"] = "list"
    element_id: TagId = TagId.END
    items: List["Tag"] = Field(default_factory=list)


class CompoundTag(_TagBase):
    """Named children in file order, always closed by a trailing EndTag."""
    TYPE_ID: ClassVar[TagId] = TagId.COMPOUND
    kind: Literal["compound"] = "compound"
    tags: List["Tag"] = Field(default_factory=lambda: [EndTag()])

    @field_validator("tags")
    @classmethod
    def _end_terminated(cls, tags):
        if not tags or not isinstance(tags[-1], EndTag):
            raise ValueError("compound must end with an End tag")
        for t in tags[:-1]:
            if not isinstance(t, NamedTag):
                raise ValueError(f"compound child must be a named tag, got {t.kind!r}")
        return tags

    @property
    def entries(self) -> List["NamedTag"]:
        return list(self.tags[:-1])

    def names(self) -> List[str]:
        return [t.name.value for t in self.entries]

    def get(self, name: str, default: Optional["Tag"] = None) -> Optional["Tag"]:
        # First match wins; duplicate names are legal on the wire.
        for t in self.entries:
            if t.name.value == name:
                return t.value
        return default


class NamedTag(_TagBase):
    kind: Literal["named"] = "named"
    name: StringTag
    value: "Tag"

    @property
    def type_id(self) -> int:
        return self.value.type_id


Tag = Annotated[
    Union[
        EndTag, ByteTag, ShortTag, IntTag, LongTag, FloatTag, DoubleTag,
        ByteArrayTag, StringTag, ListTag, CompoundTag, IntArrayTag, LongArrayTag,
        NamedTag,
    ],
    Field(discriminator="kind"),
]

ListTag.model_rebuild()
CompoundTag.model_rebuild()
NamedTag.model_rebuild()


# Builders
def named(name: str, value: Tag) -> NamedTag:
    return NamedTag(name=StringTag(value=name), value=value)

def compound(*entries: NamedTag) -> CompoundTag:
    return CompoundTag(tags=[*entries, EndTag()])

def list_of(element_id: int, items: Iterable[Tag] = ()) -> ListTag:
    return ListTag(element_id=element_id, items=list(items))
