"""Filesystem helpers shared by the stores.

Writes go through a temporary sibling file that is renamed over the target,
so a reader never observes a half-written file. Concurrent writers to the
same path are not arbitrated: the last rename wins.
"""

import logging
import os
import tempfile
from pathlib import Path

from aycd.core.exceptions import PathTraversalError, StoreIOError

logger = logging.getLogger(__name__)


def validate_path(path: Path, base_path: Path) -> Path:
    """Resolve ``path`` and check that it stays inside ``base_path``.

    Returns the canonical path. Raises StoreIOError if either path does not
    exist, PathTraversalError if the resolved path escapes the base.
    """
    try:
        canonical = Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise StoreIOError(f"Failed to canonicalize path: {path}", path) from exc
    try:
        canonical_base = Path(base_path).resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise StoreIOError(
            f"Failed to canonicalize base path: {base_path}", base_path
        ) from exc

    if not canonical.is_relative_to(canonical_base):
        raise PathTraversalError(f"Path traversal attempt detected: {path}", path)
    return canonical


def ensure_dir(path: Path) -> None:
    """Create ``path`` and any missing parents."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreIOError(f"Failed to create directory: {path}", path) from exc


def read_file(path: Path) -> str:
    """Read a UTF-8 text file."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StoreIOError(f"Failed to read file: {path}", path) from exc


def write_file(path: Path, content: str) -> None:
    """Atomically replace ``path`` with ``content``."""
    try:
        fd, temp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise StoreIOError(f"Failed to create temp file for: {path}", path) from exc

    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(content)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise StoreIOError(f"Failed to write temp file: {temp_path}", path) from exc

    try:
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise StoreIOError(f"Failed to rename temp file to: {path}", path) from exc
    logger.debug("Wrote %s", path)


def delete_file(path: Path) -> None:
    """Remove ``path`` if it exists."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise StoreIOError(f"Failed to delete file: {path}", path) from exc


def _scan(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as exc:
        raise StoreIOError(f"Failed to read directory: {directory}", directory) from exc


def list_files(directory: Path) -> list[Path]:
    """Regular files directly inside ``directory``."""
    return [Path(entry.path) for entry in _scan(directory) if entry.is_file()]


def list_dirs(directory: Path) -> list[Path]:
    """Subdirectories directly inside ``directory``."""
    return [Path(entry.path) for entry in _scan(directory) if entry.is_dir()]
