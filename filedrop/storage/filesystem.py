"""
filedrop/storage/filesystem.py

Filesystem helpers for the upload core: destination directory creation,
destination naming rules and destination file creation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Union

from filedrop.core.constants import DIRECTORY_MODE, FILE_MODE
from filedrop.core.exceptions import (
    DirectoryCreateError,
    FileCreateError,
    UnsafeFileNameError,
)
from filedrop.core.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]

_SEPARATORS = ("/", "\\")


def ensure_directory(path: PathLike) -> Path:
    """
    Create ``path`` and any missing parents; succeed if it already exists.

    Returns:
        The directory as a Path.

    Raises:
        DirectoryCreateError: If the path exists but is not a directory,
                              or the filesystem refuses to create it.
    """
    directory = Path(path)
    try:
        directory.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateError(
            f"Could not create upload directory '{directory}': {exc}"
        ) from exc
    return directory


def extension_of(filename: str) -> str:
    """
    Return the extension of the final path component, leading dot included.

    "photo.tar.gz" → ".gz", "README" → "", ".bashrc" → "".
    """
    base = filename
    for sep in _SEPARATORS:
        base = base.rsplit(sep, 1)[-1]
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem:
        return ""
    return dot + ext


def check_safe_name(filename: str) -> str:
    """
    Validate a client-declared name for use as-is under the destination.

    Raises:
        UnsafeFileNameError: For empty names, '.', '..', or names holding a
                             path separator or a NUL byte.
    """
    if filename in ("", ".", ".."):
        raise UnsafeFileNameError(f"'{filename}' is not a usable file name.")
    if "\x00" in filename or any(sep in filename for sep in _SEPARATORS):
        raise UnsafeFileNameError(
            f"'{filename}' contains a path separator or NUL byte."
        )
    return filename


def create_destination(directory: Path, name: str, overwrite: bool = True) -> BinaryIO:
    """
    Open ``directory/name`` for binary writing with FILE_MODE permissions.

    With ``overwrite`` an existing file is truncated; without it an existing
    file makes the call fail.

    Raises:
        FileCreateError: If the file cannot be created.
    """
    flags = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0)
    if not overwrite:
        flags |= os.O_EXCL

    target = directory / name
    try:
        fd = os.open(target, flags, FILE_MODE)
    except FileExistsError as exc:
        raise FileCreateError(f"'{name}' already exists in '{directory}'.") from exc
    except OSError as exc:
        raise FileCreateError(f"Could not create '{target}': {exc}") from exc

    logger.debug("Opened destination '%s' (overwrite=%s).", target, overwrite)
    return os.fdopen(fd, "wb")


def discard(path: Path) -> None:
    """Remove a partially written destination file, if present."""
    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("Could not remove partial upload '%s': %s", path, exc)
