"""Protected regions: literals swapped for placeholders while the passes run.

Notes
-----
- Everything the formatter must reproduce byte for byte (host markup,
  ``<!--``/``-->``, string literals, comments, ``On Error Resume Next``) is
  replaced by a placeholder ``"\\x00<kind>\\x00"`` before the text passes run.
- Placeholders hold no whitespace, operators, commas or VBScript keywords, so
  the spacing/keyword/indent passes leave them alone.
- Extraction order: client script tags, markup, client comments, quoted
  strings, comments, ``On Error Resume Next``. Restoration is the exact
  reverse; within one kind literals come back first-in, first-out.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .errors import RegionMismatchError, UnbalancedDelimitersError

SENTINEL = "\x00"

CLIENT_SCRIPT = "clientscript"
HTML = "html"
CLIENT_COMMENT = "clientcomment"
QUOTED = "quoted"
COMMENT = "comment"
RESUME_NEXT = "resumenext"

RESUME_NEXT_PHRASE = "On Error Resume Next"


def placeholder(kind: str) -> str:
    return f"{SENTINEL}{kind}{SENTINEL}"


HTML_TOKEN = placeholder(HTML)
COMMENT_TOKEN = placeholder(COMMENT)
QUOTED_TOKEN = placeholder(QUOTED)

# 客户端 <script language="vbscript"> 块的边界：伪装成 <% %>，让 markup 提取把块外内容当作 HTML
CLIENT_SCRIPT_OPEN = placeholder(CLIENT_SCRIPT) + "<%"
CLIENT_SCRIPT_CLOSE = "%>" + placeholder(CLIENT_SCRIPT)

# Opening tag: "script" then "vbscript" before the closing ">" (case-insensitive).
CLIENT_SCRIPT_OPEN_RE = re.compile(r"<\s*script\b[^>]*?vbscript[^>]*>", re.IGNORECASE)
CLIENT_SCRIPT_CLOSE_RE = re.compile(r"<\s*/\s*script\s*>", re.IGNORECASE)

# Restoring a boundary absorbs the blanks and one line break next to it.
_OPEN_RESTORE_RE = re.compile(re.escape(CLIENT_SCRIPT_OPEN) + r"[ \t]*(?:\r?\n)?")
_CLOSE_RESTORE_RE = re.compile(r"(?:\r?\n)?[ \t]*" + re.escape(CLIENT_SCRIPT_CLOSE))

CLIENT_COMMENT_RE = re.compile(r"<!--|-->")

# Non-greedy: each "..." pair is its own literal; "" escapes split into adjacent literals.
QUOTED_RE = re.compile(r'"[^"\r\n]*"')

RESUME_NEXT_RE = re.compile(r"\bon[ \t]+error[ \t]+resume[ \t]+next\b", re.IGNORECASE)


@dataclass
class RegionStore:
    """按提取顺序保存某一类受保护文本（FIFO）。"""

    kind: str
    extracted: list[str] = field(default_factory=list)

    @property
    def token(self) -> str:
        return placeholder(self.kind)

    def stash(self, literal: str) -> str:
        self.extracted.append(literal)
        return self.token

    def cursor(self) -> RegionCursor:
        return RegionCursor(self)


@dataclass
class RegionCursor:
    """Explicit read position into one store's literals."""

    store: RegionStore
    position: int = 0

    @property
    def remaining(self) -> int:
        return len(self.store.extracted) - self.position

    def take(self) -> str:
        if self.remaining <= 0:
            raise RegionMismatchError(
                self.store.kind, len(self.store.extracted), self.position + 1
            )
        literal = self.store.extracted[self.position]
        self.position += 1
        return literal

    def expand(self, text: str) -> str:
        """Replace each placeholder in ``text`` with the next literal, left to right."""
        token = self.store.token
        if token not in text:
            return text
        pieces = text.split(token)
        out = [pieces[0]]
        for piece in pieces[1:]:
            out.append(self.take())
            out.append(piece)
        return "".join(out)


@dataclass
class Regions:
    """All protected text of one formatting call."""

    html: RegionStore = field(default_factory=lambda: RegionStore(HTML))
    client_comment: RegionStore = field(default_factory=lambda: RegionStore(CLIENT_COMMENT))
    quoted: RegionStore = field(default_factory=lambda: RegionStore(QUOTED))
    comment: RegionStore = field(default_factory=lambda: RegionStore(COMMENT))
    resume_next: RegionStore = field(default_factory=lambda: RegionStore(RESUME_NEXT))

    def restore_order(self) -> tuple[RegionStore, ...]:
        return (self.resume_next, self.comment, self.quoted, self.client_comment, self.html)

    def counts(self) -> dict[str, int]:
        return {store.kind: len(store.extracted) for store in self.restore_order()}

    def expander(self) -> LineExpander:
        return LineExpander(self)


class LineExpander:
    """Expands placeholders segment by segment, in document order.

    Feeding every segment of every line through ``expand`` in order yields
    the same literals the restorer puts there, so callers can measure the
    real width of a line prefix.
    """

    def __init__(self, regions: Regions) -> None:
        self._cursors = [store.cursor() for store in regions.restore_order()]

    def expand(self, segment: str) -> str:
        for cursor in self._cursors:
            segment = cursor.expand(segment)
        return segment


# =========================
# 提取（按流水线顺序）
# =========================


def _inside_quotes(text: str, pos: int) -> bool:
    line_start = text.rfind("\n", 0, pos) + 1
    return text.count('"', line_start, pos) % 2 == 1


def _search_unquoted(pattern: re.Pattern[str], text: str, pos: int):
    m = pattern.search(text, pos)
    while m is not None and _inside_quotes(text, m.start()):
        m = pattern.search(text, m.end())
    return m


def mark_client_scripts(text: str) -> str:
    """给客户端 VBScript 块的开始/结束标签插入边界标记。"""

    out: list[str] = []
    pos = 0
    opening = True
    while True:
        pattern = CLIENT_SCRIPT_OPEN_RE if opening else CLIENT_SCRIPT_CLOSE_RE
        m = _search_unquoted(pattern, text, pos)
        if m is None:
            break
        if opening:
            out.append(text[pos : m.end()])
            out.append(CLIENT_SCRIPT_OPEN)
        else:
            out.append(text[pos : m.start()])
            out.append(CLIENT_SCRIPT_CLOSE)
            out.append(m.group(0))
        pos = m.end()
        opening = not opening
    out.append(text[pos:])
    return "".join(out)


def extract_markup(text: str, store: RegionStore) -> str:
    """Replace host markup outside ``<% ... %>`` with placeholders.

    Captured runs: the document head through the first ``<%``, every
    ``%> ... <%`` run, and the tail from the last ``%>``. A document with
    neither delimiter is pure script and comes back unchanged.
    """

    if "<%" not in text and "%>" not in text:
        return text

    out: list[str] = []
    pos = 0
    first_open = text.find("<%")
    first_close = text.find("%>")
    if first_open != -1 and (first_close == -1 or first_open < first_close):
        pos = first_open + 2
        out.append(store.stash(text[:pos]))

    while pos < len(text):
        close = text.find("%>", pos)
        if close == -1:
            out.append(text[pos:])
            break
        out.append(text[pos:close])
        reopen = text.find("<%", close + 2)
        end = len(text) if reopen == -1 else reopen + 2
        out.append(store.stash(text[close:end]))
        pos = end

    return "".join(out)


def extract_client_comments(text: str, store: RegionStore) -> str:
    text = CLIENT_COMMENT_RE.sub(lambda m: store.stash(m.group(0)), text)
    if len(store.extracted) % 2 != 0:
        raise UnbalancedDelimitersError(len(store.extracted))
    return text


def _is_rem_at(line: str, i: int) -> bool:
    if line[i : i + 3].lower() != "rem":
        return False
    if i + 3 < len(line) and not line[i + 3].isspace():
        return False
    head = line[:i].rstrip()
    return head == "" or head.endswith(":") or head.endswith(HTML_TOKEN)


def find_comment_start(line: str) -> int | None:
    """找到引号外的 ' （或语句开头的 Rem）位置；找不到返回 None。"""

    in_quote = False
    for i, ch in enumerate(line):
        if ch == '"':
            in_quote = not in_quote
            continue
        if in_quote:
            continue
        if ch == "'":
            return i
        if ch in "rR" and _is_rem_at(line, i):
            return i
    return None


def extract_quoted(lines: list[str], store: RegionStore) -> list[str]:
    """Replace string literals in the code part of each line."""

    out: list[str] = []
    for line in lines:
        cut = find_comment_start(line)
        code, rest = (line, "") if cut is None else (line[:cut], line[cut:])
        out.append(QUOTED_RE.sub(lambda m: store.stash(m.group(0)), code) + rest)
    return out


def extract_comments(lines: list[str], store: RegionStore) -> list[str]:
    out: list[str] = []
    for line in lines:
        # 字符串已被替换成占位符，引号配对不变，切分位置与原始行一致
        cut = find_comment_start(line)
        if cut is None:
            out.append(line)
        else:
            out.append(line[:cut] + store.stash(line[cut:]))
    return out


def extract_resume_next(lines: list[str], store: RegionStore) -> list[str]:
    return [RESUME_NEXT_RE.sub(lambda m: store.stash(RESUME_NEXT_PHRASE), line) for line in lines]


# =========================
# 还原（与提取顺序相反）
# =========================


def restore(store: RegionStore, text: str) -> str:
    found = text.count(store.token)
    if found != len(store.extracted):
        raise RegionMismatchError(store.kind, len(store.extracted), found)
    return store.cursor().expand(text)


def _pad_before_close(code: str) -> str:
    tail = code.rsplit("\n", 1)[-1]
    if tail.strip() == "":
        return code
    return code.rstrip(" \t") + " "


def _pad_after_open(code: str) -> str:
    head = code.split("\n", 1)[0]
    stripped = code.lstrip(" \t")
    if head.strip() == "":
        return stripped
    if stripped.startswith(("=", "@")):
        # <%= 内联表达式 / <%@ 页面指令
        return stripped
    return " " + stripped


def restore_markup(text: str, store: RegionStore) -> str:
    """Put markup back, leaving one space between a delimiter and adjacent code."""

    found = text.count(store.token)
    if found != len(store.extracted):
        raise RegionMismatchError(store.kind, len(store.extracted), found)
    if not found:
        return text

    cursor = store.cursor()
    pieces = text.split(store.token)
    out = [pieces[0]]
    for after in pieces[1:]:
        literal = cursor.take()
        if literal.startswith("%>"):
            out[-1] = _pad_before_close(out[-1])
        out.append(literal)
        out.append(_pad_after_open(after) if literal.endswith("<%") else after)
    return "".join(out)


def unmark_client_scripts(text: str, newline: str = "\n") -> str:
    text = _OPEN_RESTORE_RE.sub(lambda m: newline, text)
    return _CLOSE_RESTORE_RE.sub(lambda m: newline, text)
