#!/usr/bin/env python3
# tools/roundtrip_scan.py
from pathlib import Path
from nbtree.binary.reader import ParseError, _load_bytes, strip_gzip
from nbtree.binary.codecs.tag_codec import parse, to_bytes
from nbtree.binary.codecs.errors import NbtError

PATTERNS = ("*.nbt", "*.dat", "*.schematic", "*.schem")

def main(root: Path) -> int:
    bad = 0
    files = sorted(p for pat in PATTERNS for p in root.rglob(pat))
    for p in files:
        try:
            raw, gz = strip_gzip(_load_bytes(p))
            tag = parse(raw)
        except (NbtError, ParseError) as e:
            print(f"FAIL {p}: {e}"); bad += 1; continue
        again = to_bytes(tag)
        if again != raw[:len(again)]:
            print(f"DIFF {p} gz={gz} in={len(raw)} out={len(again)}"); bad += 1; continue
        trailing = len(raw) - len(again)
        print(f"ok   {p} gz={gz} bytes={len(raw)}" + (f" trailing={trailing}" if trailing else ""))
    print(f"{len(files)} files, {bad} problems")
    return 1 if bad else 0

if __name__ == "__main__":
    import sys
    raise SystemExit(main(Path(sys.argv[1] if len(sys.argv) > 1 else ".")))
