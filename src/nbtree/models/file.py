from __future__ import annotations
from pathlib import Path
from pydantic import BaseModel, ConfigDict
from typing import Union
from .tag import NamedTag

class NbtFile(BaseModel):
    # Whole-document dumps use this model's setting, not the nested FloatTag/DoubleTag ones.
    model_config = ConfigDict(ser_json_inf_nan="constants")

    root: NamedTag
    compressed: bool = False

    @classmethod
    def from_binary(cls, data: Union[bytes, str, Path]) -> "NbtFile":
        from ..binary.reader import parse_file
        return parse_file(data)

    def to_binary(self) -> bytes:
        from ..binary.writer import write_file
        return write_file(self)

    @classmethod
    def from_json(cls, src: Union[str, bytes]) -> "NbtFile":
        from ..jsonio.read import read_json_file
        return read_json_file(src)

    def to_json(self, *, pretty: bool = True) -> str:
        from ..jsonio.write import write_json_file
        return write_json_file(self, pretty=pretty)
