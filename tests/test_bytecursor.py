import math
import struct

import pytest

from nbtree.binary.codecs.bytecursor import Cursor
from nbtree.binary.codecs.errors import MalformedLength, OutOfBounds


def test_fixed_width_reads_advance_by_width():
    data = (
        b"\xff"
        + struct.pack(">h", -2)
        + struct.pack(">i", 70000)
        + struct.pack(">q", -(2**40))
        + struct.pack(">f", 1.5)
        + struct.pack(">d", math.pi)
    )
    cur = Cursor(data)
    assert cur.s8() == -1 and cur.tell() == 1
    assert cur.s16() == -2 and cur.tell() == 3
    assert cur.s32() == 70000 and cur.tell() == 7
    assert cur.s64() == -(2**40) and cur.tell() == 15
    assert cur.f32() == 1.5 and cur.tell() == 19
    assert cur.f64() == math.pi and cur.tell() == 27
    assert cur.remaining() == 0


def test_u8_is_unsigned():
    assert Cursor(b"\xff").u8() == 255


def test_peek_does_not_advance():
    cur = Cursor(b"\x0a\x00")
    assert cur.peek_u8() == 0x0A
    assert cur.peek_u8() == 0x0A
    assert cur.tell() == 0
    assert cur.u8() == 0x0A
    assert cur.peek_u8() == 0x00


def test_peek_at_end_is_out_of_bounds():
    cur = Cursor(b"\x01")
    cur.u8()
    with pytest.raises(OutOfBounds):
        cur.peek_u8()


def test_truncated_int_fails_without_moving():
    cur = Cursor(b"\x00\x00\x01")
    with pytest.raises(OutOfBounds) as ei:
        cur.s32()
    assert ei.value.offset == 0
    assert ei.value.needed == 4
    assert ei.value.remaining == 3
    assert cur.tell() == 0


def test_take_negative_is_malformed_length():
    with pytest.raises(MalformedLength):
        Cursor(b"abc").take(-1)
