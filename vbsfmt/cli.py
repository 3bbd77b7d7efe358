"""CLI entrypoint for vbsfmt.

Subcommand: format
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from . import __version__
from .errors import FormatError
from .fs import DiscoverOptions, expand_targets, DEFAULT_EXCLUDES
from .io import IOOptions, read_text_strict, backup_file, atomic_write_text
from .formatter import (
    FormatOptions,
    format_text,
    INDENT_STYLE_DEFAULT,
    INDENT_SIZE_DEFAULT,
    KEYWORD_CASE_DEFAULT,
    INDENT_STYLES,
)
from .normalize import KEYWORD_CASES


@dataclass
class FileResult:
    path: Path
    status: str  # OK / CHANGED / WOULD / FAILED
    message: str = ""


class VbsFmtArgumentParser(argparse.ArgumentParser):
    """中文化 argparse 错误输出。"""

    @staticmethod
    def _translate_error(message: str) -> str:
        required = re.match(r"the following arguments are required: (.+)", message)
        if required:
            return f"缺少必需参数: {required.group(1)}"

        unrecognized = re.match(r"unrecognized arguments: (.+)", message)
        if unrecognized:
            return f"无法识别的参数: {unrecognized.group(1)}"

        invalid_choice = re.match(r"argument (.+): invalid choice: (.+) \(choose from (.+)\)", message)
        if invalid_choice:
            return (
                f"参数 {invalid_choice.group(1)} 的取值无效: {invalid_choice.group(2)}，"
                f"可选值为 {invalid_choice.group(3)}"
            )

        return message

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        zh_message = self._translate_error(message)
        self.exit(
            2,
            f"错误: {zh_message}\n提示: 使用 `vbsfmt format --help` 查看完整帮助。\n",
        )


def _split_excludes(values: list[str] | None) -> list[str]:
    if not values:
        return []
    out: list[str] = []
    for v in values:
        parts = [p.strip() for p in v.split(",")]
        out.extend([p for p in parts if p])
    return out


def build_parser() -> argparse.ArgumentParser:
    p = VbsFmtArgumentParser(
        prog="vbsfmt",
        description="VBScript / ASP 源码格式化工具（缩进、运算符空格、关键字大小写、对齐；字符串/注释/HTML 原样保留）",
    )
    p._positionals.title = "位置参数"
    p._optionals.title = "通用选项"
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        title="子命令",
        description="可用子命令",
        metavar="CMD",
    )

    fmt = sub.add_parser(
        "format",
        help="格式化 .vbs/.asp/.inc 文件，或作为标准输入过滤器",
        description="批量格式化文件或目录；默认原地写回并先备份，支持 --check 只检查，-i 读标准输入写标准输出。",
        epilog=(
            "示例:\n"
            "  vbsfmt format script.vbs\n"
            "  vbsfmt format ./site --check\n"
            "  vbsfmt format ./site --exclude \"**/vendor/**\" -k upper\n"
            "  vbsfmt format -i --indent tabs < in.vbs > out.vbs"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    fmt._positionals.title = "位置参数"
    fmt._optionals.title = "通用选项"

    fmt.add_argument("paths", nargs="*", type=Path, metavar="PATH", help="要格式化的文件或目录")

    control = fmt.add_argument_group("处理控制")
    control.add_argument("-i", "--stdin", action="store_true", help="过滤模式：从标准输入读取，结果写到标准输出")
    control.add_argument("--no-recursive", action="store_true", help="目录仅处理当前层，不递归子目录")
    control.add_argument("--check", action="store_true", help="只检查，不写回；若有文件需要格式化则退出码为 1")
    control.add_argument("--dry-run", dest="check", action="store_true", help="等同于 --check")
    control.add_argument("--fail-fast", action="store_true", help="遇到第一个失败后立即退出")
    control.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="排除 glob 规则（可逗号分隔，也可重复传入）",
    )

    io_group = fmt.add_argument_group("输入输出")
    io_group.add_argument("--no-backup", action="store_true", help="关闭写回前备份（默认开启备份）")
    io_group.add_argument("--encoding", default="utf-8", help="读取/写入编码（默认 utf-8）")

    output = fmt.add_argument_group("输出控制")
    out_mode = output.add_mutually_exclusive_group()
    out_mode.add_argument("-q", "--quiet", action="store_true", help="简洁输出：仅显示失败项和汇总")
    out_mode.add_argument("-v", "--verbose", action="store_true", help="详细输出：显示统计与各处理步骤")

    fmt_group = fmt.add_argument_group("格式化参数")
    fmt_group.add_argument("--indent", choices=list(INDENT_STYLES), default=INDENT_STYLE_DEFAULT, help="缩进方式")
    fmt_group.add_argument("-s", "--indent-size", type=int, default=INDENT_SIZE_DEFAULT, help="每层缩进的空格数")
    fmt_group.add_argument(
        "-k",
        "--keyword-case",
        choices=list(KEYWORD_CASES),
        default=KEYWORD_CASE_DEFAULT,
        help="关键字大小写（unchanged 表示不修改）",
    )
    fmt_group.add_argument("-d", "--no-split-dim", action="store_true", help="不拆分 Dim a, b 语句")

    return p


def _format_options(args: argparse.Namespace) -> FormatOptions:
    return FormatOptions(
        indent_style=args.indent,
        indent_size=args.indent_size,
        keyword_case=args.keyword_case,
        split_declarations=not args.no_split_dim,
    )


def run_filter(args: argparse.Namespace, fmtopt: FormatOptions) -> int:
    raw = sys.stdin.read()
    try:
        fr = format_text(raw, options=fmtopt)
    except FormatError as e:
        print(f"错误: {e}", file=sys.stderr)
        return 2

    if args.verbose:
        print(f"信息      stats={fr.stats}", file=sys.stderr)
    if args.check:
        return 1 if fr.changed else 0
    sys.stdout.write(fr.out_text)
    return 0


def run_format(args: argparse.Namespace) -> int:
    try:
        fmtopt = _format_options(args)
        fmtopt.indent_unit()
    except ValueError as e:
        print(f"错误: {e}", file=sys.stderr)
        return 2

    if args.stdin:
        return run_filter(args, fmtopt)

    excludes = list(DEFAULT_EXCLUDES)
    excludes.extend(_split_excludes(args.exclude))

    discover = DiscoverOptions(recursive=not args.no_recursive, excludes=tuple(excludes))
    files, missing = expand_targets(args.paths, discover)
    ioopt = IOOptions(encoding=args.encoding, backup=not args.no_backup)
    if args.verbose:
        print(
            f"信息      paths={len(args.paths)} recursive={discover.recursive} files={len(files)} "
            f"encoding={ioopt.encoding} backup={ioopt.backup}"
        )

    results: list[FileResult] = [FileResult(m, "FAILED", "不存在") for m in missing]
    any_change_needed = False
    any_failed = bool(missing)

    for path in files:
        if any_failed and args.fail_fast:
            break
        try:
            raw = read_text_strict(path, encoding=ioopt.encoding)
            fr = format_text(raw, options=fmtopt)
            if args.verbose:
                print(f"信息      {path}  stats={fr.stats}")

            if not fr.changed:
                results.append(FileResult(path, "OK"))
                continue

            any_change_needed = True
            if args.check:
                results.append(FileResult(path, "WOULD"))
                continue

            if ioopt.backup:
                backup_file(path)

            atomic_write_text(path, text=fr.out_text, encoding=ioopt.encoding)
            results.append(FileResult(path, "CHANGED"))
        except (FormatError, OSError, UnicodeError) as e:
            any_failed = True
            results.append(FileResult(path, "FAILED", str(e)))

    # Print per-file lines
    for r in results:
        if args.quiet and r.status != "FAILED":
            continue
        if r.status == "OK":
            print(f"正常      {r.path}")
        elif r.status == "CHANGED":
            print(f"已修改    {r.path}")
        elif r.status == "WOULD":
            print(f"待修改    {r.path}")
        else:
            print(f"失败      {r.path}  ({r.message})")

    changed = sum(1 for r in results if r.status == "CHANGED")
    ok = sum(1 for r in results if r.status == "OK")
    would = sum(1 for r in results if r.status == "WOULD")
    failed = sum(1 for r in results if r.status == "FAILED")
    print(f"汇总: 已修改={changed} 正常={ok} 待修改={would} 失败={failed}")

    if any_failed:
        return 2
    if args.check and any_change_needed:
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "format" and not args.paths and not args.stdin:
        parser.error("the following arguments are required: PATH")

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "format":
        code = run_format(args)
    else:
        code = 2

    raise SystemExit(code)


if __name__ == "__main__":
    main()
