"""
Streaming tar.gz extraction into an install directory.

The archive may come from the network, so every member is validated
before anything is written: names and link targets must stay inside the
destination directory.
"""

import logging
import sys
import tarfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Union

from nativekit.core.exceptions import ArchiveExtractionError, InsecureArchiveError
from nativekit.core.filesystem import is_within

logger = logging.getLogger(__name__)


def _validate_member(member: tarfile.TarInfo, destination: Path) -> None:
    """
    Reject members that would write or point outside ``destination``.

    Raises:
        InsecureArchiveError: If the member attempts directory traversal
    """
    name = PurePosixPath(member.name)
    if name.is_absolute() or Path(member.name).is_absolute():
        raise InsecureArchiveError(
            f"Archive member '{member.name}' has an absolute path. "
            "This is a security risk and extraction has been blocked."
        )

    target = destination / member.name
    if not is_within(target, destination):
        raise InsecureArchiveError(
            f"Archive member '{member.name}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )

    if member.issym():
        if PurePosixPath(member.linkname).is_absolute():
            raise InsecureArchiveError(
                f"Symlink '{member.name}' points to absolute path '{member.linkname}'"
            )
        if not is_within(target.parent / member.linkname, destination):
            raise InsecureArchiveError(
                f"Symlink '{member.name}' points outside the destination: "
                f"'{member.linkname}'"
            )
    elif member.islnk():
        if not is_within(destination / member.linkname, destination):
            raise InsecureArchiveError(
                f"Hard link '{member.name}' points outside the destination: "
                f"'{member.linkname}'"
            )


def extract_tar_gz(source: BinaryIO, destination: Union[str, Path]) -> int:
    """
    Extract a tar.gz stream into a directory.

    The stream is read sequentially, so it may be a network or zip member
    stream that cannot seek. Relative paths and executable bits are kept.
    Device and FIFO members are skipped.

    Args:
        source: Readable binary stream of gzip-compressed tar data
        destination: Directory to extract into (created if missing)

    Returns:
        Number of members extracted

    Raises:
        InsecureArchiveError: If a member would escape the destination
        ArchiveExtractionError: If the data is not a valid tar.gz or a
            write fails
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    root = destination.resolve()

    extracted = 0
    try:
        with tarfile.open(fileobj=source, mode="r|gz") as tar:
            for member in tar:
                if not (member.isfile() or member.isdir() or member.issym() or member.islnk()):
                    logger.debug(f"Skipping special archive member: {member.name}")
                    continue

                _validate_member(member, root)

                # Python 3.12+ applies its own traversal checks on top of ours
                if sys.version_info >= (3, 12):
                    tar.extract(member, root, filter="data")
                else:
                    tar.extract(member, root)
                extracted += 1
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract archive: {e}") from e

    logger.info(f"Extracted {extracted} entries to {destination}")
    return extracted


class Extractor:
    """Extractor collaborator used by RuntimeBuilder."""

    def extract(self, source: BinaryIO, destination: Union[str, Path]) -> int:
        return extract_tar_gz(source, destination)
