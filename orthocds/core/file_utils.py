# orthocds/core/file_utils.py
import os
import logging
import shutil
import tempfile
from contextlib import contextmanager
from typing import Optional, Any, Generator

from orthocds.exceptions import FileOperationError, InputNotFoundError, OutputExistsError

logger = logging.getLogger("orthocds.file_utils")

WRITE_MODES = ('w', 'wb', 'wt', 'w+', 'wb+')


@contextmanager
def atomic_write(file_path: str, mode: str = 'w', encoding: Optional[str] = None) -> Generator[Any, None, None]:
    """Write a file through a hidden temporary file in the same directory

    The target only appears, or is replaced, once the block exits without
    an exception, so readers never see a half-written FASTA or stats file.

    Raises:
        ValueError: If mode is not a truncating write mode
        FileOperationError: If the temporary file cannot be created
    """
    if mode not in WRITE_MODES:
        raise ValueError(f"atomic_write needs a write mode, got {mode!r}")

    target_dir = os.path.dirname(file_path) or '.'
    try:
        os.makedirs(target_dir, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=target_dir, prefix=f".{os.path.basename(file_path)}.")
        os.close(fd)
    except OSError as e:
        raise FileOperationError(f"Cannot write {file_path}: {e}", {"file_path": file_path}) from e

    try:
        with open(temp_path, mode, encoding=encoding) as handle:
            yield handle
        os.replace(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def ensure_dir(directory: str) -> str:
    """Create a directory (and parents) if needed and return it

    Raises:
        FileOperationError: If the directory cannot be created
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        raise FileOperationError(f"Cannot create directory {directory}: {e}",
                                 {"directory": directory}) from e
    return directory


def create_fresh_dir(directory: str) -> str:
    """Create a directory that must not exist yet

    Raises:
        OutputExistsError: If the directory is already there
    """
    if os.path.exists(directory):
        raise OutputExistsError(f"Output directory already exists: {directory}",
                                {"directory": directory})
    logger.debug(f"Creating {directory}")
    return ensure_dir(directory)


def has_content(file_path: Optional[str]) -> bool:
    """True when file_path names a regular file of at least one byte

    External tools signal failure by leaving their output missing or
    empty, so this is the success test for every wrapped tool.
    """
    if not file_path:
        return False
    try:
        return os.path.isfile(file_path) and os.path.getsize(file_path) > 0
    except OSError as e:
        logger.warning(f"Cannot stat {file_path}: {e}")
        return False


def require_file(file_path: Optional[str], description: str = "Input file") -> str:
    """Return the path if it names a non-empty file

    Raises:
        InputNotFoundError: If the file is missing or empty
    """
    if not has_content(file_path):
        raise InputNotFoundError(f"{description} not found or empty: {file_path}",
                                 {"file_path": file_path})
    return file_path


def remove_path(path: str) -> None:
    """Remove a file, symlink or directory tree; missing paths are ignored"""
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.unlink(path)
    except OSError as e:
        message = f"Error removing {path}: {e}"
        logger.error(message)
        raise FileOperationError(message, {"path": path}) from e
