"""
File system utilities for NativeKit.

This module provides the primitive operations the install sequence builds on:
- Path containment checks (used to reject directory traversal)
- Safe directory deletion and creation
- Exclusive creation of marker files

Failures are reported as InstallIOError so callers see one error kind for
"the disk said no".
"""

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Optional, Union

from nativekit.core.exceptions import InstallIOError

logger = logging.getLogger(__name__)


def normalize_path(path: Union[str, Path]) -> Path:
    """
    Normalize a path for consistent comparison across platforms.

    Example:
        >>> normalize_path("./foo/../bar")
        PosixPath('/absolute/path/to/bar')
    """
    return Path(path).resolve().absolute()


def is_within(path: Union[str, Path], parent: Union[str, Path]) -> bool:
    """
    Check if path resolves to a location under (or equal to) parent.

    Example:
        >>> is_within("/home/user/project/file.txt", "/home/user")
        True
        >>> is_within("/home/user/../etc", "/home/user")
        False
    """
    return normalize_path(path).is_relative_to(normalize_path(parent))


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    A path that does not exist is not an error.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        InstallIOError: If the path is not a directory or deletion fails

    Example:
        >>> safe_rmtree('/tmp/build', require_prefix='/tmp')
        >>> safe_rmtree('/usr/bin', require_prefix='/home')  # ValueError
    """
    path = Path(path).resolve()

    if require_prefix is not None and not is_within(path, require_prefix):
        raise ValueError(
            f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
        )

    if not path.exists():
        return

    if not path.is_dir():
        raise InstallIOError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc):
        """Retry once after making a read-only entry writable."""
        if not os.access(failed_path, os.W_OK):
            os.chmod(failed_path, 0o700)
            func(failed_path)
        else:
            raise exc

    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(
                path, onerror=lambda f, p, info: handle_remove_readonly(f, p, info[1])
            )
    except OSError as e:
        raise InstallIOError(f"Failed to remove directory '{path}': {e}") from e

    logger.debug(f"Removed directory: {path}")


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory (and parents) if it does not exist.

    Raises:
        InstallIOError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallIOError(f"Could not create directory '{path}': {e}") from e
    return path


def create_marker(path: Union[str, Path]) -> Path:
    """
    Create an empty marker file that must not already exist.

    Args:
        path: Marker file to create

    Returns:
        Path to the created marker

    Raises:
        InstallIOError: If the marker exists or cannot be created
    """
    path = Path(path)
    try:
        with open(path, "x"):
            pass
    except OSError as e:
        raise InstallIOError(f"Could not create marker file '{path}': {e}") from e
    return path


def remove_file(path: Union[str, Path]) -> None:
    """
    Delete a file.

    Raises:
        InstallIOError: If the file exists but cannot be removed
    """
    path = Path(path)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise InstallIOError(f"Could not remove file '{path}': {e}") from e
