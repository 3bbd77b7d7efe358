"""Static VBScript vocabulary: keyword spellings and block indent rules.

Both tables are read-only at run time and shared by every formatting call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# 关键字的标准写法（proper 模式下按此大小写输出）
KEYWORDS: tuple[str, ...] = (
    "Abs", "And", "Array", "Asc", "AtEndOfLine", "AtEndOfStream", "Atn",
    "Call", "Case", "CBool", "CByte", "CCur", "CDate", "CDbl", "Chr",
    "CInt", "Clear", "CLng", "Close", "CompareMode", "Const", "Cos",
    "Count", "CreateObject", "CreateTextFile", "CSng", "CStr", "Date",
    "DateAdd", "DateDiff", "DatePart", "DateSerial", "DateValue", "Day",
    "Description", "Dictionary", "Dim", "Do", "Each", "End", "Else",
    "ElseIf", "Empty", "Eqv", "Erase", "Err", "Error", "Escape", "Exists",
    "Exit", "Exp", "Explicit", "False", "FileSystemObject", "Fix", "For",
    "FormatCurrency", "FormatDateTime", "FormatNumber", "FormatPercent",
    "Function", "GetObject", "Hex", "HelpContext", "HelpFile", "Hour",
    "If", "Imp", "InputBox", "InStr", "InStrRev", "Int", "Is", "IsArray",
    "IsDate", "IsEmpty", "IsNull", "IsNumeric", "IsObject", "Item", "Items",
    "Join", "Keys", "LBound", "LCase", "Left", "Len", "LoadPicture", "Log",
    "Loop", "LTrim", "Mid", "Minute", "Mod", "Month", "MonthName", "MsgBox",
    "Next", "Not", "Now", "Nothing", "Null", "Number", "Oct", "On",
    "OpenTextFile", "Option", "Or", "Private", "Public", "Raise",
    "Randomize", "Read", "ReadAll", "ReadLine", "ReDim", "Rem", "Remove",
    "RemoveAll", "Replace", "Request", "Response", "Right", "Rnd", "Round",
    "RTrim", "ScriptEngine", "ScriptEngineBuildVersion", "ScriptEngineMajorVersion",
    "ScriptEngineMinorVersion", "Second", "Select", "Server", "Session",
    "Set", "Sgn", "Sin", "Skip", "SkipLine", "Source", "Space", "Split",
    "Sqr", "StrComp", "String", "StrReverse", "Sub", "Tan", "Then", "Time",
    "TextStream", "TimeSerial", "TimeValue", "To", "Trim", "True", "TypeName",
    "UBound", "UCase", "VarType", "Weekday", "WeekdayName", "Wend", "While",
    "With", "Write", "WriteBlankLines", "WriteLine", "Xor", "Year",
)


@dataclass(frozen=True)
class IndentRule:
    """A keyword phrase and the nesting change it causes.

    ``singleline`` rules (``Else``, ``Case`` ...) only shift the line they sit
    on; the others move the running depth for every following line.
    """

    phrase: str
    delta: int
    singleline: bool = False

    @property
    def word_count(self) -> int:
        return len(self.phrase.split())

    def compile(self) -> re.Pattern[str]:
        # 整词匹配、不区分大小写；多词短语之间允许任意空白
        words = [re.escape(w) for w in self.phrase.split()]
        return re.compile(r"\b" + r"\s+".join(words) + r"\b", re.IGNORECASE)


INDENT_RULES: tuple[IndentRule, ...] = (
    IndentRule("do while", 1),
    IndentRule("do until", 1),
    IndentRule("do", 1),
    IndentRule("loop while", -1),
    IndentRule("loop until", -1),
    IndentRule("loop", -1),
    IndentRule("while", 1),
    IndentRule("wend", -1),
    IndentRule("if", 1),
    IndentRule("end if", -1),
    IndentRule("for", 1),
    IndentRule("next", -1),
    IndentRule("function", 1),
    IndentRule("end function", -1),
    IndentRule("sub", 1),
    IndentRule("end sub", -1),
    IndentRule("property", 1),
    IndentRule("end property", -1),
    IndentRule("class", 1),
    IndentRule("end class", -1),
    IndentRule("with", 1),
    IndentRule("end with", -1),
    IndentRule("select case", 2),
    IndentRule("end select", -2),
    IndentRule("case else", -1, singleline=True),
    IndentRule("elseif", -1, singleline=True),
    IndentRule("else", -1, singleline=True),
    IndentRule("case", -1, singleline=True),
    IndentRule("exit do", 0),
    IndentRule("exit for", 0),
    IndentRule("exit function", 0),
    IndentRule("exit sub", 0),
    IndentRule("exit property", 0),
)

# Longest phrases first so "select case" wins over "case" and "end if" over "if".
# sorted() is stable: rules with the same word count keep table order.
ORDERED_RULES: tuple[tuple[IndentRule, re.Pattern[str]], ...] = tuple(
    (rule, rule.compile()) for rule in sorted(INDENT_RULES, key=lambda r: -r.word_count)
)
