"""Alignment engine: line up ``=`` signs and trailing comments.

Notes
-----
- Candidates are grouped into blocks: neighbours must be adjacent or have
  exactly one blank / comment-only line between them. Blocks of one line are
  left alone.
- Columns are measured on the restored text (placeholders expanded to their
  literals), using console display width (full-width characters count 2).
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

from .regions import COMMENT_TOKEN, Regions

ASSIGNMENT = "assignment"
COMMENT = "comment"

# [Set] target = ...   (target is one token, may hold a string placeholder: d("k") = 1;
# lines starting with a placeholder are comments or markup)
ASSIGNMENT_RE = re.compile(r"^[ \t]*(?!\x00)(?:set[ \t]+)?[^\s=]+[ \t]*=", re.IGNORECASE)


@dataclass
class AlignmentBlock:
    kind: str
    indices: list[int]


def vis_width(s: str) -> int:
    """估算控制台等宽字体下的显示宽度：中文/全角算 2，组合字符算 0，其它算 1。"""

    w = 0
    for ch in s:
        if unicodedata.combining(ch):
            continue
        ea = unicodedata.east_asian_width(ch)
        w += 2 if ea in ("W", "F") else 1
    return w


def is_gap_line(line: str) -> bool:
    s = line.strip()
    return s == "" or s == COMMENT_TOKEN


def find_blocks(kind: str, candidates: list[int], lines: list[str]) -> list[AlignmentBlock]:
    blocks: list[AlignmentBlock] = []
    current: list[int] = []

    def flush() -> None:
        if len(current) >= 2:
            blocks.append(AlignmentBlock(kind, list(current)))

    for idx in candidates:
        if current and (
            idx == current[-1] + 1
            or (idx == current[-1] + 2 and is_gap_line(lines[idx - 1]))
        ):
            current.append(idx)
            continue
        flush()
        current = [idx]
    flush()
    return blocks


def measure_columns(lines: list[str], cuts: dict[int, int], regions: Regions) -> dict[int, int]:
    """Display column of ``lines[i][:cuts[i]]`` after restoration, per cut line.

    Every line is fed through one expander in order so each placeholder is
    paired with the literal the restorer will put there.
    """

    expander = regions.expander()
    columns: dict[int, int] = {}
    for i, line in enumerate(lines):
        cut = cuts.get(i)
        if cut is None:
            expander.expand(line)
            continue
        head = expander.expand(line[:cut])
        expander.expand(line[cut:])
        columns[i] = vis_width(head.rsplit("\n", 1)[-1])
    return columns


def _count_blocks(blocks: list[AlignmentBlock], stats: dict | None) -> None:
    if stats is None:
        return
    for block in blocks:
        key = f"{block.kind}_blocks"
        stats[key] = stats.get(key, 0) + 1


def align_assignments(lines: list[str], regions: Regions, stats: dict | None = None) -> list[str]:
    cuts = {i: line.index("=") for i, line in enumerate(lines) if ASSIGNMENT_RE.match(line)}
    blocks = find_blocks(ASSIGNMENT, sorted(cuts), lines)
    if not blocks:
        return list(lines)

    columns = measure_columns(lines, cuts, regions)
    out = list(lines)
    for block in blocks:
        target = max(columns[i] for i in block.indices)
        for i in block.indices:
            cut = cuts[i]
            out[i] = lines[i][:cut] + " " * (target - columns[i]) + lines[i][cut:]
    _count_blocks(blocks, stats)
    return out


def align_comments(lines: list[str], regions: Regions, stats: dict | None = None) -> list[str]:
    cuts: dict[int, int] = {}
    for i, line in enumerate(lines):
        pos = line.find(COMMENT_TOKEN)
        if pos == -1 or line.strip() == COMMENT_TOKEN:
            continue
        cuts[i] = len(line[:pos].rstrip())
    blocks = find_blocks(COMMENT, sorted(cuts), lines)
    if not blocks:
        return list(lines)

    columns = measure_columns(lines, cuts, regions)
    out = list(lines)
    for block in blocks:
        target = max(columns[i] for i in block.indices)
        for i in block.indices:
            cut = cuts[i]
            pad = " " * (target - columns[i] + 1)
            out[i] = lines[i][:cut] + pad + lines[i][cut:].lstrip()
    _count_blocks(blocks, stats)
    return out
