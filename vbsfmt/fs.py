"""File discovery (expand directories into script files, apply exclude rules)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import fnmatch

SCRIPT_SUFFIXES = (".vbs", ".asp", ".inc")

# 默认排除规则（避免处理自己生成的备份/临时文件）
DEFAULT_EXCLUDES = [
    "**/.git/**",
    "**/*.bak.*",
    "**/*.tmp.*",
]


@dataclass(frozen=True)
class DiscoverOptions:
    recursive: bool = True
    excludes: tuple[str, ...] = tuple(DEFAULT_EXCLUDES)
    suffixes: tuple[str, ...] = SCRIPT_SUFFIXES


def _normalize_relpath(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def is_excluded(path: Path, root: Path, patterns: list[str]) -> bool:
    rel = _normalize_relpath(path, root)
    # also match with a leading '**/' convenience
    for pat in patterns:
        p = pat.strip()
        if not p:
            continue
        if fnmatch.fnmatch(rel, p) or fnmatch.fnmatch("/" + rel, p) or fnmatch.fnmatch(rel, p.lstrip("./")):
            return True
    return False


def collect_script_files(root: Path, options: DiscoverOptions) -> list[Path]:
    root = root.resolve()
    patterns = list(options.excludes)
    suffixes = {s.lower() for s in options.suffixes}

    it = root.rglob("*") if options.recursive else root.glob("*")

    files: list[Path] = []
    for p in it:
        if p.is_dir() or p.suffix.lower() not in suffixes:
            continue
        if is_excluded(p, root, patterns):
            continue
        files.append(p)

    files.sort()
    return files


def expand_targets(paths: list[Path], options: DiscoverOptions) -> tuple[list[Path], list[Path]]:
    """Split CLI paths into (files to format, paths that do not exist).

    Files named explicitly are taken regardless of suffix; directories are
    scanned with ``collect_script_files``.
    """

    files: list[Path] = []
    missing: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(collect_script_files(path, options))
        elif path.is_file():
            files.append(path)
        else:
            missing.append(path)
    return files, missing
