"""VBScript / ASP reformatter (pipeline).

Notes
-----
- Pure text-to-text: no I/O, no state shared between calls.
- Protected content (markup, strings, comments) is byte-identical in the
  output; only script whitespace, keyword case and line layout change.
- Any ``FormatError`` aborts the document; no partial text is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import regions as rg
from .align import align_assignments, align_comments
from .indent import reindent
from .normalize import (
    KEYWORD_CASES,
    canonicalize_keywords,
    normalize_whitespace,
    split_declarations,
)

logger = logging.getLogger(__name__)

# =========================
# 默认配置（可被 CLI 覆盖）
# =========================

INDENT_STYLE_DEFAULT = "spaces"  # spaces / tabs
INDENT_SIZE_DEFAULT = 4
KEYWORD_CASE_DEFAULT = "proper"  # proper / upper / lower / unchanged
SPLIT_DECLARATIONS_DEFAULT = True

INDENT_STYLES = ("spaces", "tabs")


@dataclass
class FormatOptions:
    indent_style: str = INDENT_STYLE_DEFAULT
    indent_size: int = INDENT_SIZE_DEFAULT
    keyword_case: str = KEYWORD_CASE_DEFAULT
    split_declarations: bool = SPLIT_DECLARATIONS_DEFAULT

    def indent_unit(self) -> str:
        if self.indent_style == "tabs":
            return "\t"
        if self.indent_style != "spaces":
            raise ValueError('indent_style 只能是 "spaces" 或 "tabs"')
        if self.indent_size < 1:
            raise ValueError("indent_size 必须大于 0")
        return " " * self.indent_size


@dataclass
class FormatResult:
    out_text: str
    changed: bool
    stats: dict = field(default_factory=dict)


def format_text(raw_text: str, *, options: FormatOptions | None = None) -> FormatResult:
    """格式化单个 VBScript/ASP 文本，返回格式化后的文本与统计。"""

    options = options or FormatOptions()
    unit = options.indent_unit()
    if options.keyword_case not in KEYWORD_CASES:
        raise ValueError(f"keyword_case 只能是 {' / '.join(KEYWORD_CASES)}")

    # 记录原始换行风格
    newline = "\r\n" if "\r\n" in raw_text else "\n"
    regions = rg.Regions()
    stats: dict = {"total_lines": len(raw_text.splitlines())}

    logger.debug("查找客户端 VBScript 块")
    text = rg.mark_client_scripts(raw_text)
    logger.debug("查找服务端 <%% %%> 分隔符（%d 个客户端块）", text.count(rg.CLIENT_SCRIPT_OPEN))
    text = rg.extract_markup(text, regions.html)
    logger.debug("查找客户端注释分隔符")
    text = rg.extract_client_comments(text, regions.client_comment)

    # 末尾换行以脚本部分为准（尾部 HTML 自带的换行已在占位符里）
    keep_final_newline = text.endswith("\n")
    lines = text.splitlines()

    logger.debug("提取字符串与注释")
    lines = rg.extract_quoted(lines, regions.quoted)
    lines = rg.extract_comments(lines, regions.comment)
    lines = rg.extract_resume_next(lines, regions.resume_next)

    if options.split_declarations:
        logger.debug("拆分 Dim 语句")
        lines = split_declarations(lines, stats)

    logger.debug("调整运算符两侧空格")
    lines = normalize_whitespace(lines)

    if options.keyword_case != "unchanged":
        logger.debug("修改关键字大小写: %s", options.keyword_case)
        lines = canonicalize_keywords(lines, options.keyword_case)

    logger.debug("处理缩进")
    lines = reindent(lines, unit, stats)

    logger.debug("对齐赋值语句与行尾注释")
    lines = align_assignments(lines, regions, stats)
    lines = align_comments(lines, regions, stats)

    text = newline.join(lines)
    if keep_final_newline and lines:
        text += newline

    logger.debug("还原受保护内容")
    text = rg.restore(regions.resume_next, text)
    text = rg.restore(regions.comment, text)
    text = rg.restore(regions.quoted, text)
    text = rg.restore(regions.client_comment, text)
    text = rg.restore_markup(text, regions.html)
    text = rg.unmark_client_scripts(text, newline)

    stats["regions"] = regions.counts()
    return FormatResult(out_text=text, changed=text != raw_text, stats=stats)
