import importlib.util
from pathlib import Path

from nbtree.binary.codecs.tag_codec import to_bytes
from nbtree.models.tag import IntTag, compound, named

TOOL = Path(__file__).resolve().parents[1] / "tools" / "roundtrip_scan.py"
spec = importlib.util.spec_from_file_location("roundtrip_scan", TOOL)
roundtrip_scan = importlib.util.module_from_spec(spec)
spec.loader.exec_module(roundtrip_scan)


def test_corrupt_gzip_is_reported_and_scan_continues(tmp_path, capsys):
    (tmp_path / "bad.nbt").write_bytes(b"\x1f\x8b\x08" + b"\x00" * 16)
    (tmp_path / "good.nbt").write_bytes(to_bytes(named("r", compound(named("a", IntTag(value=1))))))
    assert roundtrip_scan.main(tmp_path) == 1
    out = capsys.readouterr().out
    assert "FAIL" in out and "bad.nbt" in out
    assert "ok   " in out and "good.nbt" in out
    assert "2 files, 1 problems" in out


def test_clean_tree_scans_clean(tmp_path, capsys):
    (tmp_path / "level.dat").write_bytes(to_bytes(named("", compound())))
    assert roundtrip_scan.main(tmp_path) == 0
    assert "1 files, 0 problems" in capsys.readouterr().out
