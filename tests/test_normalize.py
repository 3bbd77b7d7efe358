import pytest

from vbsfmt.normalize import (
    canonicalize_keywords,
    normalize_line,
    space_operators,
    split_declaration,
    split_declarations,
)
from vbsfmt.regions import COMMENT_TOKEN


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("Dim a, b", ["Dim a", "Dim b"]),
        ("dim x,y ,z", ["dim x", "dim y", "dim z"]),
        ("Dim arr(1, 2)", ["Dim arr(1, 2)"]),
        ("Dim grid(3, 3), n", ["Dim grid(3, 3)", "Dim n"]),
        ("ReDim a(2), b(3)", ["ReDim a(2), b(3)"]),
        ("Dim a, b: a = 1", ["Dim a", "Dim b: a = 1"]),
        ("x = 1", ["x = 1"]),
    ],
)
def test_split_declaration(line: str, expected: list[str]) -> None:
    assert split_declaration(line) == expected


def test_split_declaration_keeps_trailing_comment_on_last_line() -> None:
    assert split_declaration("Dim a, b " + COMMENT_TOKEN) == ["Dim a", "Dim b" + COMMENT_TOKEN]


def test_split_declarations_counts() -> None:
    stats: dict = {}
    out = split_declarations(["Dim a, b", "x = 1", "Dim c"], stats)
    assert out == ["Dim a", "Dim b", "x = 1", "Dim c"]
    assert stats == {"declarations_split": 1}


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("x=1", "x = 1"),
        ("If a<>b Then", "If a <> b Then"),
        ("If a < > b Then", "If a <> b Then"),
        ("a < = b", "a <= b"),
        ("a>=b", "a >= b"),
        ("s=a&b", "s = a & b"),
        ("y=a-1", "y = a - 1"),
        ("x = -1", "x = -1"),
        ("f(-x)", "f(-x)"),
        ("For i=10 To 1 Step -1", "For i = 10 To 1 Step -1"),
        ("n = &HFF", "n = &HFF"),
        ("n=&o17+1", "n = &o17 + 1"),
        ("x = 1.5E-3", "x = 1.5E-3"),
        ("x   =    y", "x = y"),
    ],
)
def test_space_operators(code: str, expected: str) -> None:
    assert space_operators(code) == expected


def test_normalize_line_comment_only() -> None:
    assert normalize_line("   " + COMMENT_TOKEN + "  ") == COMMENT_TOKEN


def test_normalize_line_trailing_comment() -> None:
    assert normalize_line("  x=1   " + COMMENT_TOKEN) == "x = 1 " + COMMENT_TOKEN


def test_normalize_line_continuation() -> None:
    assert normalize_line("s = a &   _") == "s = a & _"
    assert normalize_line("Call Foo(a,   _") == "Call Foo(a, _"


def test_canonicalize_proper() -> None:
    out = canonicalize_keywords(["dim x", "set fso = createobject(y)", "IF x THEN"], "proper")
    assert out == ["Dim x", "Set fso = CreateObject(y)", "If x Then"]


def test_canonicalize_whole_words_only() -> None:
    assert canonicalize_keywords(["endif = dimension"], "upper") == ["endif = dimension"]


def test_canonicalize_upper_and_lower() -> None:
    assert canonicalize_keywords(["Dim x"], "upper") == ["DIM x"]
    assert canonicalize_keywords(["Dim X"], "lower") == ["dim X"]


def test_canonicalize_unchanged_and_invalid() -> None:
    assert canonicalize_keywords(["dIm x"], "unchanged") == ["dIm x"]
    with pytest.raises(ValueError):
        canonicalize_keywords(["x"], "title")
