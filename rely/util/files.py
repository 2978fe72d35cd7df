"""File I/O helpers for prompts, uploads and exports."""
import json
import shutil
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Create directory (and parents) if it doesn't exist, then return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json(path: Path, data: dict) -> None:
    """Write a dict as pretty-printed JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def read_text(path: Path, limit: int | None = None) -> str:
    """Read a file as UTF-8 text, optionally keeping only the first `limit` characters."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read(limit) if limit else f.read()


def copy_file(src: Path, dst: Path) -> None:
    """Copy a file preserving metadata, creating destination directories as needed."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
