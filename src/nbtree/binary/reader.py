from __future__ import annotations

import gzip
import logging
import zlib
from collections import Counter
from pathlib import Path
from typing import Dict, Tuple, Union

from pydantic import BaseModel, Field

from .codecs.tag_codec import read_named_tag
from .codecs.bytecursor import Cursor
from nbtree.models.common import MAX_DEPTH
from nbtree.models.file import NbtFile
from nbtree.models.tag import Tag, CompoundTag, ListTag, NamedTag

logger = logging.getLogger(__name__)

BytesLike = Union[str, Path, bytes, bytearray, memoryview]

GZIP_MAGIC = b"\x1f\x8b\x08"


class ParseError(ValueError):
    pass


# -----------------------------
# Helpers
# -----------------------------

def _load_bytes(inp: BytesLike) -> bytes:
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    p = Path(str(inp))
    return p.read_bytes()


def strip_gzip(raw: bytes) -> Tuple[bytes, bool]:
    """Return (payload, was_compressed). Only the gzip container is recognised."""
    if not raw.startswith(GZIP_MAGIC):
        return raw, False
    try:
        out = gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as e:
        raise ParseError(f"corrupt gzip container: {e}") from e
    logger.debug("gzip container: %d -> %d bytes", len(raw), len(out))
    return out, True


# -----------------------------
# Full parse
# -----------------------------

def parse_file(data: BytesLike, *, max_depth: int = MAX_DEPTH) -> NbtFile:
    """
    Load an NBT document (plain or gzip-wrapped) and decode its root named tag.
    """
    raw, compressed = strip_gzip(_load_bytes(data))
    cur = Cursor(raw)
    root = read_named_tag(cur, max_depth=max_depth)
    if not isinstance(root, NamedTag):
        raise ParseError("document has no root tag (starts with TAG_End)")

    if cur.remaining():
        logger.warning("ignoring %d trailing bytes after root tag at offset %d",
                       cur.remaining(), cur.tell())
    logger.debug("decoded root %r (id %d) from %d bytes",
                 root.name.value, root.type_id, len(raw))
    return NbtFile(root=root, compressed=compressed)


# -----------------------------
# Summary
# -----------------------------

class TreeSummary(BaseModel):
    root_name: str
    root_kind: str
    tag_count: int = Field(..., ge=0)
    max_depth: int = Field(..., ge=0)
    kinds: Dict[str, int] = Field(default_factory=dict)
    compressed: bool = False
    payload_bytes: int = Field(0, ge=0)


def _walk(tag: Tag, depth: int, kinds: Counter) -> int:
    """Count `tag` and its descendants into `kinds`; return the deepest level reached."""
    if isinstance(tag, NamedTag):
        return _walk(tag.value, depth, kinds)
    kinds[tag.kind] += 1
    if isinstance(tag, CompoundTag):
        children = tag.entries
    elif isinstance(tag, ListTag):
        children = tag.items
    else:
        return depth
    return max([depth + 1] + [_walk(c, depth + 1, kinds) for c in children])


def summarize_file(data: BytesLike, *, max_depth: int = MAX_DEPTH) -> TreeSummary:
    """
    Parse a document and count its tags by kind. Compound terminators are not counted.
    """
    raw, compressed = strip_gzip(_load_bytes(data))
    f = parse_file(raw, max_depth=max_depth)
    kinds: Counter = Counter()
    deepest = _walk(f.root, 0, kinds)
    return TreeSummary(
        root_name=f.root.name.value,
        root_kind=f.root.value.kind,
        tag_count=sum(kinds.values()),
        max_depth=deepest,
        kinds=dict(sorted(kinds.items())),
        compressed=compressed,
        payload_bytes=len(raw),
    )
