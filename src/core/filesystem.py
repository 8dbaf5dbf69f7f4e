"""Filesystem utility helpers."""

from __future__ import annotations

import os
import tempfile


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_text(path: str, content: str, encoding: str = "utf-8") -> None:
    dir_part = os.path.dirname(path)
    if dir_part:
        ensure_dir(dir_part)
    with open(path, "w", encoding=encoding) as fh:
        fh.write(content)


def write_text_atomic(path: str, content: str, encoding: str = "utf-8") -> None:
    """Write via a temp file in the target directory, then ``os.replace``.

    Readers see either the old file or the complete new one.
    """
    dir_part = os.path.dirname(path) or "."
    ensure_dir(dir_part)
    fd, tmp = tempfile.mkstemp(dir=dir_part, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding=encoding) as fh:
            fh.write(content)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def read_text(path: str, encoding: str = "utf-8") -> str:
    with open(path, "r", encoding=encoding) as fh:
        return fh.read()
