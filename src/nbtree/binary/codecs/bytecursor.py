from __future__ import annotations
import struct

from .errors import MalformedLength, OutOfBounds

class Cursor:
    """Forward-only reader over an in-memory buffer. Position never moves back."""

    __slots__ = ("buf", "pos")

    def __init__(self, data: bytes | bytearray | memoryview):
        self.buf = memoryview(data)
        self.pos = 0

    def remaining(self) -> int: return len(self.buf) - self.pos
    def tell(self) -> int: return self.pos

    def _need(self, n: int) -> None:
        if n < 0: raise MalformedLength(self.pos, n, self.remaining())
        if n > self.remaining(): raise OutOfBounds(self.pos, n, self.remaining())

    def take(self, n: int) -> bytes:
        self._need(n)
        end = self.pos + n
        out = self.buf[self.pos:end].tobytes()
        self.pos = end
        return out

    # byte-aligned big-endian reads
    def _unpack(self, fmt: str, n: int):
        return struct.unpack(fmt, self.take(n))[0]
    def u8(self) -> int:  return self._unpack(">B", 1)
    def s8(self) -> int:  return self._unpack(">b", 1)
    def s16(self) -> int: return self._unpack(">h", 2)
    def s32(self) -> int: return self._unpack(">i", 4)
    def s64(self) -> int: return self._unpack(">q", 8)
    def f32(self) -> float: return self._unpack(">f", 4)
    def f64(self) -> float: return self._unpack(">d", 8)

    def peek_u8(self) -> int:
        self._need(1)
        return self.buf[self.pos]
