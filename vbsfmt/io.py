"""IO helpers (strict read, backup, atomic write)."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class IOOptions:
    encoding: str = "utf-8"
    backup: bool = True


def read_text_strict(path: Path, *, encoding: str) -> str:
    """Read text with strict decoding, keeping CRLF line endings as-is."""
    with path.open("r", encoding=encoding, errors="strict", newline="") as fh:
        return fh.read()


def atomic_write_text(path: Path, *, text: str, encoding: str) -> None:
    """Atomically replace file contents via a sibling ``<stem>.tmp.<pid><suffix>`` file."""
    pid = os.getpid()
    # 保留原扩展名，避免备份/临时文件再次被当作脚本扫描时混淆
    tmp_path = path.with_name(f"{path.stem}.tmp.{pid}{path.suffix}")
    with tmp_path.open("w", encoding=encoding, errors="strict", newline="") as fh:
        fh.write(text)
    os.replace(tmp_path, path)


def backup_file(path: Path) -> Path:
    """Create a timestamped backup next to the file, keeping its suffix."""
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    bak_path = path.with_name(f"{path.stem}.bak.{ts}{path.suffix}")
    shutil.copy2(path, bak_path)
    return bak_path
