from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Union

from .codecs.tag_codec import to_bytes
from ..models.file import NbtFile

logger = logging.getLogger(__name__)


def write_file(file: NbtFile) -> bytes:
    """Encode the root tag; gzip-wrap it (mtime 0, reproducible) when `file.compressed`."""
    data = to_bytes(file.root)
    if file.compressed:
        data = gzip.compress(data, mtime=0)
    return data


def save_file(file: NbtFile, path: Union[str, Path]) -> int:
    data = write_file(file)
    Path(path).write_bytes(data)
    logger.debug("wrote %d bytes to %s", len(data), path)
    return len(data)
