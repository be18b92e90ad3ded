import gzip
import json

from nbtree.binary.codecs.tag_codec import to_bytes
from nbtree.cli import main
from nbtree.models.common import TagId
from nbtree.models.file import NbtFile
from nbtree.models.tag import (
    ByteArrayTag, IntArrayTag, IntTag, StringTag, compound, list_of, named,
)
from nbtree.render import format_tree, tag_name, to_plain

ROOT = named("hello world", compound(
    named("name", StringTag(value="Bananrama")),
    named("nums", list_of(TagId.INT, [IntTag(value=1), IntTag(value=2)])),
    named("raw", ByteArrayTag(value=b"\x01\x02")),
))


def test_format_tree():
    text = format_tree(ROOT)
    assert text.splitlines() == [
        "TAG_Compound('hello world'): 3 entries",
        "{",
        "  TAG_String('name'): 'Bananrama'",
        "  TAG_List('nums'): 2 entries of TAG_Int",
        "  {",
        "    TAG_Int: 1",
        "    TAG_Int: 2",
        "  }",
        "  TAG_Byte_Array('raw'): [2 bytes]",
        "}",
    ]


def test_tag_name_unknown():
    assert tag_name(42) == "TAG_Unknown(42)"


def test_to_plain():
    assert to_plain(ROOT) == {"hello world": {"name": "Bananrama", "nums": [1, 2], "raw": b"\x01\x02"}}
    assert to_plain(IntArrayTag(value=[3])) == [3]


def test_cli_show(tmp_path, capsys):
    p = tmp_path / "hello.nbt"
    p.write_bytes(gzip.compress(to_bytes(ROOT)))
    assert main(["show", str(p)]) == 0
    assert "TAG_String('name'): 'Bananrama'" in capsys.readouterr().out


def test_cli_info_summary(tmp_path, capsys):
    p = tmp_path / "hello.nbt"
    p.write_bytes(to_bytes(ROOT))
    assert main(["info", str(p), "--summary"]) == 0
    out = capsys.readouterr().out
    assert "root='hello world'" in out
    assert "gzip=no" in out


def test_cli_json_roundtrip(tmp_path):
    src = tmp_path / "in.nbt"
    src.write_bytes(gzip.compress(to_bytes(ROOT)))
    js = tmp_path / "out.json"
    back = tmp_path / "back.nbt"
    assert main(["to-json", str(src), str(js)]) == 0
    assert main(["from-json", str(js), str(back), "--no-gzip"]) == 0
    assert back.read_bytes() == to_bytes(ROOT)
    assert NbtFile.from_binary(back).compressed is False


def test_cli_plain_json(tmp_path):
    src = tmp_path / "in.nbt"
    src.write_bytes(to_bytes(ROOT))
    js = tmp_path / "plain.json"
    assert main(["to-json", str(src), str(js), "--plain"]) == 0
    assert json.loads(js.read_text())["hello world"]["raw"] == [1, 2]


def test_cli_roundtrip(tmp_path, capsys):
    p = tmp_path / "a.nbt"
    p.write_bytes(to_bytes(ROOT))
    assert main(["roundtrip", str(p)]) == 0
    p.write_bytes(to_bytes(ROOT) + b"\x00")
    assert main(["roundtrip", str(p)]) == 1
    assert "mismatch" in capsys.readouterr().out


def test_cli_reports_decode_errors(tmp_path, capsys):
    p = tmp_path / "bad.nbt"
    p.write_bytes(b"\x63\x00\x00")
    assert main(["show", str(p)]) == 2
    assert "unknown tag id 99" in capsys.readouterr().err


def test_cli_max_depth(tmp_path, capsys):
    p = tmp_path / "deep.nbt"
    p.write_bytes(to_bytes(ROOT))
    assert main(["--max-depth", "1", "show", str(p)]) == 2
    assert "nesting depth" in capsys.readouterr().err
