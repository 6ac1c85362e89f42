"""
File system utilities
"""
import os
import shutil
from pathlib import Path

from .logger import get_logger

log = get_logger(__name__)


def ensure_dir(directory):
    """
    Ensure directory exists, create if it doesn't.

    Args:
        directory: Directory path
    """
    os.makedirs(directory, exist_ok=True)


def remove_dir(directory) -> bool:
    """
    Recursively delete a directory if it exists.

    Args:
        directory: Directory path

    Returns:
        True if something was removed
    """
    path = Path(directory)
    if not path.is_dir():
        return False
    log.info("Removing %s...", path)
    shutil.rmtree(path)
    return True


def copy_dir_into(src, dest_parent) -> Path:
    """
    Copy directory *src* into *dest_parent*, keeping its name.

    An existing ``dest_parent/<name>`` is merged into, file by file.

    Args:
        src: Directory to copy
        dest_parent: Directory that receives the copy

    Returns:
        Path of the copied directory
    """
    src = Path(src)
    target = Path(dest_parent) / src.name
    shutil.copytree(src, target, dirs_exist_ok=True)
    return target


def size_in_mb(num_bytes: int, places: int = 3) -> float:
    """
    Convert a byte count to megabytes rounded to *places* decimals.

    Example:
        >>> size_in_mb(1572864)
        1.5
    """
    return round(num_bytes / 1024 / 1024, places)
