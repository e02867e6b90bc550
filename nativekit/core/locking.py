"""
Cross-process install guard for NativeKit.

Within one process, RuntimeBuilder already guarantees a single install per
builder. Two *processes* sharing an install directory are not coordinated by
default; this module provides the opt-in file lock used when a builder is
configured with ``process_lock=True``.

The lock file sits next to the install directory, never inside it, because
the install directory is wiped at the start of every fresh install.

Usage:
    from nativekit.core.locking import install_lock

    with install_lock(Path("jcef-bundle"), timeout=300):
        # Only one process at a time checks/installs into jcef-bundle
        ...
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

from nativekit.core.exceptions import BuildWaitInterrupted

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 600


def get_lock_path(install_dir: Union[str, Path]) -> Path:
    """
    Get the lock file guarding an install directory.

    Example:
        >>> get_lock_path(Path("/opt/app/jcef-bundle"))
        PosixPath('/opt/app/.jcef-bundle.nativekit.lock')
    """
    install_dir = Path(install_dir).absolute()
    return install_dir.parent / f".{install_dir.name}.nativekit.lock"


@contextmanager
def install_lock(install_dir: Union[str, Path], timeout: float = DEFAULT_LOCK_TIMEOUT):
    """
    Hold an inter-process lock for an install directory.

    Args:
        install_dir: Install directory to guard
        timeout: Maximum wait time in seconds (-1 waits forever)

    Yields:
        Path of the lock file

    Raises:
        BuildWaitInterrupted: If the lock can't be acquired within timeout
    """
    lock_path = get_lock_path(install_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired install lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released install lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire install lock after {timeout}s. "
            "Another process may be installing into the same directory."
        )
        raise BuildWaitInterrupted(
            f"Could not acquire install lock for {install_dir} after {timeout}s"
        ) from e
