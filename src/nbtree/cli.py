from __future__ import annotations
import argparse, json, logging, sys
from .binary.codecs.errors import NbtError
from .binary.reader import ParseError
from .models.common import MAX_DEPTH
from .models.file import NbtFile

logger = logging.getLogger("nbtree")

def _load(args) -> NbtFile:
    from .binary.reader import parse_file
    return parse_file(args.input, max_depth=args.max_depth)

def cmd_show(args):
    from .render import format_tree
    print(format_tree(_load(args).root))

def cmd_info(args):
    # Summary: counts only
    if args.summary:
        from .binary.reader import summarize_file
        s = summarize_file(args.input, max_depth=args.max_depth)
        print(f"root={s.root_name!r} kind={s.root_kind} tags={s.tag_count} depth={s.max_depth} "
              f"bytes={s.payload_bytes} gzip={'yes' if s.compressed else 'no'}")
        return

    f = _load(args)
    print(f.to_json(pretty=True))

def _plain_default(o):
    if isinstance(o, (bytes, bytearray)):
        return list(o)
    raise TypeError(f"not JSON serializable: {type(o).__name__}")

def cmd_to_json(args):
    f = _load(args)
    with open(args.output, "w", encoding="utf-8") as out:
        if args.plain:
            from .render import to_plain
            json.dump(to_plain(f.root), out, indent=2, default=_plain_default)
        else:
            out.write(f.to_json(pretty=True))

def cmd_from_json(args):
    from .binary.writer import save_file
    with open(args.input, "r", encoding="utf-8") as src:
        f = NbtFile.from_json(src.read())
    if args.gzip is not None:
        f = f.model_copy(update={"compressed": args.gzip})
    n = save_file(f, args.output)
    logger.info("wrote %s (%d bytes, gzip=%s)", args.output, n, f.compressed)

def cmd_roundtrip(args):
    from .binary.reader import _load_bytes, strip_gzip
    from .binary.codecs.tag_codec import to_bytes
    raw, _ = strip_gzip(_load_bytes(args.input))
    f = _load(args)
    again = to_bytes(f.root, max_depth=args.max_depth)
    if again == raw:
        print(f"ok: {len(raw)} bytes re-encode identically")
        return 0
    # First differing offset, or the shorter length when one is a prefix of the other
    diff = next((i for i, (a, b) in enumerate(zip(raw, again)) if a != b), min(len(raw), len(again)))
    print(f"mismatch at offset {diff}: input {len(raw)} bytes, re-encoded {len(again)} bytes")
    return 1

def build_parser():
    p = argparse.ArgumentParser(prog="nbtree", description="Named Binary Tag (NBT) utilities")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--max-depth", type=int, default=MAX_DEPTH,
                   help=f"Reject lists/compounds nested deeper than this (default {MAX_DEPTH})")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("show", help="print the tag tree")
    sp.add_argument("input", help="Path to an NBT file (plain or gzip)")
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("info", help="print parsed model as JSON or a fast summary")
    sp.add_argument("input")
    sp.add_argument("--summary", action="store_true", help="Print tag counts and depth only")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("to-json", help="convert binary to JSON")
    sp.add_argument("input")
    sp.add_argument("output")
    sp.add_argument("--plain", action="store_true", help="Untyped values only (not reversible)")
    sp.set_defaults(func=cmd_to_json)

    sp = sub.add_parser("from-json", help="convert JSON to binary")
    sp.add_argument("input")
    sp.add_argument("output")
    g = sp.add_mutually_exclusive_group()
    g.add_argument("--gzip", dest="gzip", action="store_true", default=None, help="Force gzip output")
    g.add_argument("--no-gzip", dest="gzip", action="store_false", help="Force uncompressed output")
    sp.set_defaults(func=cmd_from_json, gzip=None)

    sp = sub.add_parser("roundtrip", help="check that decode+encode reproduces the input bytes")
    sp.add_argument("input")
    sp.set_defaults(func=cmd_roundtrip)

    return p

def main(argv=None):
    p = build_parser()
    ns = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return ns.func(ns) or 0
    except (NbtError, ParseError) as e:
        print(f"nbtree: error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"nbtree: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
