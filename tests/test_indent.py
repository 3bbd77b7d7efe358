import pytest

from vbsfmt.indent import analyze, measure, reindent
from vbsfmt.regions import COMMENT_TOKEN, HTML_TOKEN


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("If x Then", (1, 0)),
        ("End If", (-1, 0)),
        ("If x Then y = 1", (0, 0)),
        ("If x Then _", (0, 0)),
        ("If x Then " + COMMENT_TOKEN, (1, 0)),
        (HTML_TOKEN + " If x Then " + HTML_TOKEN, (1, 0)),
        ("Select Case x", (2, 0)),
        ("End Select", (-2, 0)),
        ("Case Else", (0, -1)),
        ("Case 1, 2", (0, -1)),
        ("ElseIf y Then", (0, -1)),
        ("Else", (0, -1)),
        ("Do While x", (1, 0)),
        ("Loop Until x", (-1, 0)),
        ("Exit For", (0, 0)),
        ("Exit Function", (0, 0)),
        ("For Each k In d: Next", (0, 0)),
        ("Private Sub Go()", (1, 0)),
        ("End Sub", (-1, 0)),
        ("x = 1", (0, 0)),
    ],
)
def test_measure(line: str, expected: tuple[int, int]) -> None:
    assert measure(line) == expected


def test_depth_never_negative() -> None:
    records = analyze(["End If", "Next", "Loop", "x = 1"])
    assert [r.depth for r in records] == [0, 0, 0, 0]


def test_comment_lines_inherit_depth() -> None:
    records = analyze(["If x Then", COMMENT_TOKEN, "y = 1", "End If", COMMENT_TOKEN])
    assert [r.depth for r in records] == [0, 1, 1, 0, 0]
    assert records[1].comment_only
    assert records[1].block_delta == 0


def test_reindent_nested_blocks() -> None:
    lines = ["For i = 1 To 3", "If i > 1 Then", "x = i", "Else", "x = 0", "End If", "Next"]
    stats: dict = {}
    out = reindent(lines, "  ", stats)
    assert out == [
        "For i = 1 To 3",
        "",
        "  If i > 1 Then",
        "    x = i",
        "  Else",
        "    x = 0",
        "  End If",
        "",
        "Next",
    ]
    assert stats["max_depth"] == 2


def test_reindent_select_case() -> None:
    lines = ["Select Case x", "Case 1", "y = 1", "Case Else", "y = 2", "End Select"]
    assert reindent(lines, "  ") == [
        "Select Case x",
        "  Case 1",
        "    y = 1",
        "  Case Else",
        "    y = 2",
        "End Select",
    ]


def test_reindent_collapses_blank_runs() -> None:
    out = reindent(["", "x = 1", "", "", "", "y = 2", ""], "    ")
    assert out == ["x = 1", "", "y = 2"]


def test_markup_lines_are_not_indented() -> None:
    lines = ["If x Then", HTML_TOKEN + " y " + HTML_TOKEN, "End If"]
    out = reindent(lines, "    ")
    assert out[1] == HTML_TOKEN + " y " + HTML_TOKEN


def test_comment_above_procedure_stays_attached() -> None:
    out = reindent(["x = 1", COMMENT_TOKEN, "Sub Go()", "End Sub"], "    ")
    assert out == ["x = 1", COMMENT_TOKEN, "Sub Go()", "End Sub"]
