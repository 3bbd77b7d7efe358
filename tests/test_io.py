from pathlib import Path

from vbsfmt.io import atomic_write_text, backup_file, read_text_strict


def test_backup_and_tmp_names_keep_suffix(tmp_path: Path) -> None:
    target = tmp_path / "demo.vbs.old.vbs"
    target.write_text("old\n", encoding="utf-8")

    bak = backup_file(target)
    assert bak.name.startswith("demo.vbs.old.bak.")
    assert bak.name.endswith(".vbs")
    assert bak.read_text(encoding="utf-8") == "old\n"

    atomic_write_text(target, text="new\n", encoding="utf-8")
    assert target.read_text(encoding="utf-8") == "new\n"
    assert list(tmp_path.glob("*.tmp.*.vbs")) == []


def test_crlf_survives_read_and_write(tmp_path: Path) -> None:
    target = tmp_path / "page.asp"
    target.write_bytes(b"x = 1\r\ny = 2\r\n")

    text = read_text_strict(target, encoding="utf-8")
    assert text == "x = 1\r\ny = 2\r\n"

    atomic_write_text(target, text=text.upper(), encoding="utf-8")
    assert target.read_bytes() == b"X = 1\r\nY = 2\r\n"
