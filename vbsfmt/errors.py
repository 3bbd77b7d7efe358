"""Errors raised while formatting a document.

Any ``FormatError`` aborts the whole document: no partial text is returned.
"""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for document-level formatting failures."""


class UnbalancedDelimitersError(FormatError):
    """客户端注释分隔符 ``<!--`` / ``-->`` 数量为奇数。"""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"客户端注释分隔符不成对（<!-- 与 --> 共 {count} 个）")


class RegionMismatchError(FormatError):
    """占位符数量与已提取的原文数量不一致（还原前的内部校验）。"""

    def __init__(self, kind: str, extracted: int, found: int) -> None:
        self.kind = kind
        self.extracted = extracted
        self.found = found
        super().__init__(f"占位符 {kind} 数量不一致：已提取 {extracted} 个，文本中 {found} 个")
