"""Line-level passes: Dim splitting, operator spacing, keyword case."""

from __future__ import annotations

import re

from .keywords import KEYWORDS
from .regions import COMMENT_TOKEN, HTML_TOKEN

KEYWORD_CASES = ("proper", "upper", "lower", "unchanged")

# "Dim" as a statement keyword; ReDim and obj.Dim are not declarations.
DIM_RE = re.compile(r"(?<![.\w])dim\b", re.IGNORECASE)

# Compound operators first; blanks inside them ("< >") are dropped.
OPERATOR_RE = re.compile(r"<[ \t]*>|<[ \t]*=|=[ \t]*<|>[ \t]*=|=[ \t]*>|![ \t]*=|[=<>&+\-]")
WS_RE = re.compile(r"[ \t]+")

# Mantissa right before a sign: 1E-5, 2.5e+3
EXPONENT_RE = re.compile(r"(?:^|[^\w.])\d*\.?\d+[eE]$")
# &HFF, &O17, &HFF& (hex/octal literals)
RADIX_LITERAL_RE = re.compile(r"[hH][0-9a-fA-F]+&?(?!\w)|[oO][0-7]+&?(?!\w)")

CONTINUATION_RE = re.compile(r"[ \t]+_$")

# 这些关键字之后的 + / - 是一元符号（如 Step -1）
UNARY_AFTER_WORDS = {
    "and", "or", "not", "xor", "eqv", "imp", "mod", "is",
    "to", "step", "then", "else", "elseif", "if", "case",
    "while", "until", "return", "call",
}
UNARY_AFTER_CHARS = "(,=<>&+-*/\\^:"

_KEYWORD_RE = re.compile(
    r"\b(?:%s)\b" % "|".join(sorted(KEYWORDS, key=len, reverse=True)), re.IGNORECASE
)
_CANONICAL = {k.lower(): k for k in KEYWORDS}


# =========================
# Dim 拆分
# =========================


def _split_top_level(s: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(s):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            parts.append(s[start:i])
            start = i + 1
    parts.append(s[start:])
    return parts


def _statement_end(line: str, start: int) -> int:
    ends = [i for i in (line.find(":", start), line.find(COMMENT_TOKEN, start), line.find(HTML_TOKEN, start)) if i != -1]
    return min(ends) if ends else len(line)


def split_declaration(line: str) -> list[str]:
    """``Dim a, b`` -> ``["Dim a", "Dim b"]``; other lines come back as-is."""

    m = DIM_RE.search(line)
    if m is None:
        return [line]
    end = _statement_end(line, m.end())
    names = [n.strip() for n in _split_top_level(line[m.end() : end])]
    names = [n for n in names if n]
    if len(names) < 2:
        return [line]

    keyword = m.group(0)
    out = [line[: m.start()] + keyword + " " + names[0]]
    out.extend(keyword + " " + name for name in names[1:])
    out[-1] += line[end:]
    return out


def split_declarations(lines: list[str], stats: dict | None = None) -> list[str]:
    out: list[str] = []
    for line in lines:
        parts = split_declaration(line)
        if stats is not None and len(parts) > 1:
            stats["declarations_split"] = stats.get("declarations_split", 0) + 1
        out.extend(parts)
    return out


# =========================
# 空白规范化
# =========================


def _is_unary_position(prev: str) -> bool:
    if prev == "":
        return True
    if prev[-1] in UNARY_AFTER_CHARS:
        return True
    word = re.search(r"(\w+)$", prev)
    return word is not None and word.group(1).lower() in UNARY_AFTER_WORDS


def space_operators(code: str) -> str:
    """Put exactly one space on each side of binary operators.

    Scanning is left to right with the compound forms tried before single
    characters. Unary ``+``/``-`` keep no space after them, ``&H``/``&O``
    literals and exponent signs are left intact.
    """

    result = ""
    pos = 0
    glue = False  # 上一个运算符之后不留空格
    for m in OPERATOR_RE.finditer(code):
        before = code[pos : m.start()]
        if glue:
            before = before.lstrip(" \t")
        pos = m.end()
        op = WS_RE.sub("", m.group(0))
        prev = (result + before).rstrip(" \t")

        if op in "+-" and EXPONENT_RE.search(result + before):
            result += before + op
            glue = True
            continue
        radix = op == "&" and RADIX_LITERAL_RE.match(code, m.end()) is not None
        if radix or (op in "+-" and _is_unary_position(prev)):
            # 一元符号 / &H 字面量：前面保留一个空格，后面紧贴操作数
            lead = " " if prev and not prev.endswith("(") else ""
            result = prev + lead + op
            glue = True
            continue

        result = prev + " " + op + " " if prev else op + " "
        glue = True
    rest = code[pos:]
    if glue:
        rest = rest.lstrip(" \t")
    return (result + rest).rstrip(" \t")


def normalize_line(line: str) -> str:
    stripped = line.strip()
    if stripped == COMMENT_TOKEN or stripped == "":
        return stripped

    comment = ""
    if stripped.endswith(COMMENT_TOKEN):
        stripped = stripped[: -len(COMMENT_TOKEN)]
        comment = COMMENT_TOKEN

    code = space_operators(stripped.strip())
    code = CONTINUATION_RE.sub(" _", code)
    return code + " " + comment if comment else code


def normalize_whitespace(lines: list[str]) -> list[str]:
    return [normalize_line(line) for line in lines]


# =========================
# 关键字大小写
# =========================


def canonicalize_keywords(lines: list[str], keyword_case: str) -> list[str]:
    if keyword_case == "unchanged":
        return list(lines)
    if keyword_case == "upper":
        convert = str.upper
    elif keyword_case == "lower":
        convert = str.lower
    elif keyword_case == "proper":
        def convert(word: str) -> str:
            return word
    else:
        raise ValueError(f"keyword_case 只能是 {' / '.join(KEYWORD_CASES)}")

    def repl(m: re.Match[str]) -> str:
        return convert(_CANONICAL[m.group(0).lower()])

    return [_KEYWORD_RE.sub(repl, line) for line in lines]
