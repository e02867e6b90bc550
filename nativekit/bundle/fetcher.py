"""
Remote retrieval of native bundles.

Bundles are published as zip (jar) artifacts keyed by platform and release,
each wrapping a single ``.tar.gz`` holding the native files. Mirrors are
tried in order until one serves the artifact.
"""

import logging
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Sequence

from nativekit.bundle.build_info import BuildInfo
from nativekit.bundle.progress import NO_ESTIMATION
from nativekit.core.download import (
    DownloadError,
    DownloadProgress,
    RemoteNotFoundError,
    download_file,
)
from nativekit.core.exceptions import (
    ArtifactNotFoundError,
    DownloadedArtifactInvalidError,
)

logger = logging.getLogger(__name__)

INNER_ARCHIVE_SUFFIX = ".tar.gz"


def default_mirrors() -> List[str]:
    """
    Mirror URL templates used when none are configured.

    Templates may reference ``{artifact}``, ``{platform}``, ``{release_tag}``
    and ``{version}``. A fresh list is returned on every call.
    """
    return [
        "https://github.com/jcefmaven/jcefmaven/releases/download/{version}/"
        "{artifact}-{platform}-{release_tag}.jar",
        "https://repo.maven.apache.org/maven2/me/friwi/{artifact}-{platform}/"
        "{release_tag}/{artifact}-{platform}-{release_tag}.jar",
    ]


class BundleDownloader:
    """
    Downloads the bundle artifact for a platform from the first mirror
    that has it.

    Args:
        mirrors: URL templates, tried in order
        timeout: Per-request timeout in seconds
        max_retries: Attempts per mirror for transient network errors
    """

    def __init__(
        self,
        mirrors: Optional[Sequence[str]] = None,
        timeout: int = 30,
        max_retries: int = 3,
    ):
        self.mirrors = list(mirrors) if mirrors is not None else default_mirrors()
        self.timeout = timeout
        self.max_retries = max_retries

    def urls_for(self, build_info: BuildInfo, platform: str) -> List[str]:
        """Expand every mirror template for a release and platform."""
        values = {
            "artifact": build_info.artifact,
            "platform": platform,
            "release_tag": build_info.release_tag,
            "version": build_info.version,
        }
        return [mirror.format(**values) for mirror in self.mirrors]

    def download(
        self,
        build_info: BuildInfo,
        platform: str,
        destination: Path,
        progress_callback: Optional[Callable[[float], None]] = None,
    ) -> Path:
        """
        Download the artifact to ``destination``.

        Progress is reported as non-decreasing fractions in [0, 1], or
        NO_ESTIMATION while the size is unknown.

        Raises:
            ArtifactNotFoundError: If every mirror reported the artifact missing
            DownloadError: If no mirror served it and any failed otherwise
        """
        last_fraction = 0.0

        def on_progress(progress: DownloadProgress) -> None:
            nonlocal last_fraction
            if progress_callback is None:
                return
            fraction = progress.fraction
            if fraction is None:
                progress_callback(NO_ESTIMATION)
                return
            last_fraction = max(last_fraction, fraction)
            progress_callback(last_fraction)

        urls = self.urls_for(build_info, platform)
        last_error: Optional[DownloadError] = None
        for url in urls:
            try:
                return download_file(
                    url,
                    destination,
                    progress_callback=on_progress,
                    timeout=self.timeout,
                    max_retries=self.max_retries,
                )
            except RemoteNotFoundError:
                logger.info(f"Artifact not available at {url}")
            except DownloadError as e:
                logger.warning(f"Mirror failed: {e}")
                last_error = e

        if last_error is not None:
            raise DownloadError(
                f"Could not download {build_info.artifact}-{platform}: "
                f"no mirror served it and at least one failed ({last_error})"
            ) from last_error

        raise ArtifactNotFoundError(
            f"{build_info.artifact}-{platform}-{build_info.release_tag}",
            attempted=len(urls),
        )


@contextmanager
def open_inner_archive(
    artifact_path: Path, suffix: str = INNER_ARCHIVE_SUFFIX
) -> Iterator[BinaryIO]:
    """
    Open the tar.gz member wrapped inside a downloaded artifact.

    Yields:
        Binary stream of the inner archive

    Raises:
        DownloadedArtifactInvalidError: If the artifact is not a readable
            zip or does not hold exactly one member ending in ``suffix``
    """
    try:
        archive = zipfile.ZipFile(artifact_path)
    except (zipfile.BadZipFile, OSError) as e:
        raise DownloadedArtifactInvalidError(
            f"Downloaded artifact {artifact_path.name} is not a valid archive: {e}"
        ) from e

    with archive:
        members = [n for n in archive.namelist() if n.endswith(suffix)]
        if not members:
            raise DownloadedArtifactInvalidError(
                f"Downloaded artifact did not contain a {suffix} archive"
            )
        if len(members) > 1:
            raise DownloadedArtifactInvalidError(
                f"Downloaded artifact contains {len(members)} {suffix} archives: "
                f"{', '.join(members)}"
            )

        logger.debug(f"Using inner archive {members[0]}")
        with archive.open(members[0]) as stream:
            yield stream
