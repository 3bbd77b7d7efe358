from pathlib import Path

from vbsfmt.fs import DiscoverOptions, collect_script_files, expand_targets, is_excluded


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x = 1\n", encoding="utf-8")
    return path


def test_collect_picks_script_suffixes(tmp_path: Path) -> None:
    vbs = _touch(tmp_path / "a.vbs")
    asp = _touch(tmp_path / "sub" / "page.ASP")
    inc = _touch(tmp_path / "sub" / "lib.inc")
    _touch(tmp_path / "readme.txt")
    _touch(tmp_path / "a.bak.20240101-000000.vbs")

    files = collect_script_files(tmp_path, DiscoverOptions())
    assert files == sorted([vbs.resolve(), asp.resolve(), inc.resolve()])


def test_collect_non_recursive(tmp_path: Path) -> None:
    top = _touch(tmp_path / "top.vbs")
    _touch(tmp_path / "deep" / "inner.vbs")

    files = collect_script_files(tmp_path, DiscoverOptions(recursive=False))
    assert files == [top.resolve()]


def test_user_exclude(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    assert is_excluded(root / "vendor" / "x.asp", root, ["**/vendor/**"])
    assert not is_excluded(root / "app" / "x.asp", root, ["**/vendor/**"])


def test_expand_targets_reports_missing(tmp_path: Path) -> None:
    explicit = _touch(tmp_path / "notes.txt")
    missing = tmp_path / "nope.vbs"

    files, absent = expand_targets([explicit, missing], DiscoverOptions())
    assert files == [explicit]
    assert absent == [missing]
