"""
Чтение SQL-файлов и атомарная запись сгенерированной схемы.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Union

from ..core.exceptions import ConversionFileNotFoundError, FileSystemError

PathLike = Union[str, Path]


def read_sql_file(path: PathLike) -> str:
    p = Path(path)
    if not p.is_file():
        raise ConversionFileNotFoundError(str(p))
    try:
        with open(p, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"cannot read {p}: {e}", str(p), "read")


def write_schema_file(path: PathLike, content: str) -> Path:
    """
    Записывает content во временный файл рядом с path и переименовывает его.
    При ошибке существующий файл назначения не изменяется.
    """
    p = Path(path)
    directory = p.parent if str(p.parent) else Path(".")
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"cannot create directory {directory}: {e}", str(p), "write")

    fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(directory))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, p)
    except OSError as e:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise FileSystemError(f"cannot write {p}: {e}", str(p), "write")

    return p
