"""Indent engine: keyword-driven depth counter and line re-indentation.

Notes
-----
- There is no parser: each code line is scanned for block keywords and the
  signed deltas from ``keywords.INDENT_RULES`` move one running ``depth``.
- Closing deltas apply before the line is indented (``End If`` outdents
  itself), opening deltas after (``If`` indents the following lines).
- ``depth`` is clamped at zero, so surplus closers cannot go negative.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .keywords import ORDERED_RULES
from .regions import COMMENT_TOKEN, HTML_TOKEN

logger = logging.getLogger(__name__)

# "If c Then stmt" on one line: from If to end of line, unless Then is followed
# only by a comment or a markup placeholder (<% If c Then %>). "Then _" is single-line.
SINGLE_LINE_IF_RE = re.compile(
    r"\bif\b.*?\bthen\b(?![ \t]*(?:$|%s|%s)).*"
    % (re.escape(COMMENT_TOKEN), re.escape(HTML_TOKEN)),
    re.IGNORECASE,
)

# 过程声明（其上方的注释行保持紧贴）
PROC_DECL_RE = re.compile(
    r"^(?:(?:public|private)\s+(?:default\s+)?)?(?:function|sub)\b", re.IGNORECASE
)


@dataclass
class LineRecord:
    index: int
    text: str
    depth: int = 0
    comment_only: bool = False
    block_delta: int = 0
    single_delta: int = 0


def is_comment_only(text: str) -> bool:
    """空行或只有注释占位符的行。"""
    return text.replace(COMMENT_TOKEN, "").strip() == ""


def measure(line: str) -> tuple[int, int]:
    """Return ``(block_delta, single_delta)`` for one code line.

    Phrases are matched longest first and blanked out once counted, so
    ``End If`` is not also seen as ``If``. Every occurrence counts.
    """

    work = SINGLE_LINE_IF_RE.sub(" ", line)
    block = 0
    single = 0
    for rule, pattern in ORDERED_RULES:
        work, n = pattern.subn(" ", work)
        if not n:
            continue
        if rule.singleline:
            single += rule.delta * n
        else:
            block += rule.delta * n
    return block, single


def analyze(lines: list[str]) -> list[LineRecord]:
    records: list[LineRecord] = []
    depth = 0
    for i, line in enumerate(lines):
        rec = LineRecord(index=i, text=line.strip())
        if is_comment_only(rec.text):
            # 注释行继承当前层级，不参与计数
            rec.comment_only = True
            rec.depth = depth
            records.append(rec)
            continue

        rec.block_delta, rec.single_delta = measure(rec.text)
        if rec.block_delta < 0:
            depth = max(0, depth + rec.block_delta)
        rec.depth = max(0, depth + rec.single_delta)
        if rec.block_delta > 0:
            depth += rec.block_delta
        records.append(rec)

    if depth:
        logger.debug("文档结束时仍有 %d 层未闭合", depth)
    return records


def _tidy_blank_lines(lines: list[str]) -> list[str]:
    out: list[str] = []
    for line in lines:
        if line == "":
            if out and out[-1] != "":
                out.append(line)
            continue
        if (
            len(out) >= 2
            and out[-1] == ""
            and out[-2].strip() == COMMENT_TOKEN
            and PROC_DECL_RE.match(line.lstrip())
        ):
            out.pop()
        out.append(line)
    while out and out[-1] == "":
        out.pop()
    return out


def render(records: list[LineRecord], unit: str) -> list[str]:
    out: list[str] = []
    for rec in records:
        if rec.text == "":
            out.append("")
            continue
        if rec.block_delta > 0:
            out.append("")
        # 以 %> 开头的行回到宿主 HTML，不缩进
        prefix = "" if rec.text.startswith(HTML_TOKEN) else unit * rec.depth
        out.append(prefix + rec.text)
        if rec.block_delta < 0:
            out.append("")
    return _tidy_blank_lines(out)


def reindent(lines: list[str], unit: str, stats: dict | None = None) -> list[str]:
    records = analyze(lines)
    if stats is not None:
        stats["max_depth"] = max((r.depth for r in records), default=0)
    return render(records, unit)
