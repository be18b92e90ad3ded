from __future__ import annotations


class NbtError(ValueError):
    """Base class for every tag decode/encode failure.

    `offset` is the byte position in the input where the problem was found
    (None for encode-side errors, which have no input buffer).
    """

    def __init__(self, msg: str, *, offset: int | None = None) -> None:
        super().__init__(msg if offset is None else f"{msg} (at offset {offset})")
        self.offset = offset


class OutOfBounds(NbtError):
    def __init__(self, offset: int, needed: int, remaining: int) -> None:
        super().__init__(f"underrun: need {needed} bytes, {remaining} left", offset=offset)
        self.needed = needed
        self.remaining = remaining


class MalformedLength(OutOfBounds):
    """A length prefix decoded to a negative count."""

    def __init__(self, offset: int, length: int, remaining: int) -> None:
        NbtError.__init__(self, f"negative length prefix {length}", offset=offset)
        self.length = length
        self.needed = length
        self.remaining = remaining


class UnknownTagId(NbtError):
    def __init__(self, tag_id: int, offset: int) -> None:
        super().__init__(f"unknown tag id {tag_id}", offset=offset)
        self.tag_id = tag_id


class InvalidEncoding(NbtError):
    def __init__(self, reason: str, *, offset: int | None = None) -> None:
        super().__init__(f"invalid string encoding: {reason}", offset=offset)
        self.reason = reason


class MalformedList(NbtError):
    def __init__(self, element_id: int, detail: str, *, offset: int | None = None) -> None:
        super().__init__(f"malformed list of id {element_id}: {detail}", offset=offset)
        self.element_id = element_id


class NestingTooDeep(NbtError):
    def __init__(self, depth: int, *, offset: int | None = None) -> None:
        super().__init__(f"nesting depth {depth} exceeds limit", offset=offset)
        self.depth = depth


class LengthOverflow(NbtError):
    """A count or byte length does not fit the width of its prefix."""

    def __init__(self, what: str, length: int, limit: int) -> None:
        super().__init__(f"{what} length {length} exceeds prefix limit {limit}")
        self.what = what
        self.length = length
        self.limit = limit


class ValueOutOfRange(NbtError):
    """A scalar does not fit its fixed wire width (e.g. a float beyond f32 range)."""

    def __init__(self, what: str, value) -> None:
        super().__init__(f"{what} value {value!r} does not fit its wire width")
        self.what = what
        self.value = value
