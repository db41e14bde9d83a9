# ribotyper/core/file_utils.py
"""
File helpers for reading search output and writing result files.
"""
import os
import logging
import shutil
import tempfile
from contextlib import contextmanager
from typing import Optional, Any, Generator

from ribotyper.exceptions import FileOperationError

logger = logging.getLogger("ribotyper.file_utils")


def check_file_exists(file_path: str, min_size: int = 0) -> bool:
    """Check that a regular file exists and holds at least min_size bytes"""
    try:
        if not os.path.isfile(file_path):
            logger.debug(f"No such file: {file_path}")
            return False
        if min_size and os.path.getsize(file_path) < min_size:
            logger.debug(f"{file_path} is smaller than {min_size} bytes")
            return False
    except OSError as e:
        logger.warning(f"Cannot stat {file_path}: {e}")
        return False
    return True


def ensure_dir(directory: str) -> str:
    """Create a directory and its parents if needed

    Returns:
        The directory path

    Raises:
        FileOperationError: If the directory cannot be created
    """
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create directory {directory}: {e}")
        raise FileOperationError(f"Cannot create directory {directory}: {e}",
                                 {'path': directory}) from e
    return directory


@contextmanager
def safe_open(file_path: str, mode: str = 'r', encoding: Optional[str] = None) -> Generator[Any, None, None]:
    """Open a file, reporting failures as FileOperationError

    Parent directories are created for write and append modes.

    Args:
        file_path: Path to the file
        mode: File open mode
        encoding: File encoding

    Yields:
        Open file object
    """
    parent = os.path.dirname(file_path)
    if parent and any(flag in mode for flag in 'wax'):
        ensure_dir(parent)

    try:
        handle = open(file_path, mode, encoding=encoding)
    except OSError as e:
        logger.error(f"Cannot open {file_path}: {e}")
        raise FileOperationError(f"Cannot open {file_path}: {e}",
                                 {'path': file_path, 'mode': mode}) from e

    with handle:
        yield handle


@contextmanager
def atomic_write(file_path: str, mode: str = 'w', encoding: Optional[str] = None) -> Generator[Any, None, None]:
    """Write a file through a temporary sibling

    The target is replaced only when the block exits without error; on
    error the temporary file is removed and the exception re-raised.

    Args:
        file_path: Final path of the file
        mode: Write mode
        encoding: File encoding

    Yields:
        Open temporary file object
    """
    if 'w' not in mode:
        raise ValueError(f"atomic_write needs a write mode, got '{mode}'")

    directory = ensure_dir(os.path.dirname(file_path) or '.')
    try:
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix=f".{os.path.basename(file_path)}.")
        handle = os.fdopen(fd, mode, encoding=encoding)
    except OSError as e:
        logger.error(f"Cannot create temporary file for {file_path}: {e}")
        raise FileOperationError(f"Cannot create temporary file for {file_path}: {e}",
                                 {'path': file_path}) from e

    try:
        with handle:
            yield handle
        shutil.move(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    logger.debug(f"Wrote {file_path}")
