"""
Network download manager with progress tracking and retry logic.

This module provides the HTTP side of fetching native bundles:
- HTTP/HTTPS downloads with TLS verification
- Progress reporting (bytes, fraction, speed)
- Retry logic with exponential backoff
- Atomic placement: data is streamed to a '.part' file and renamed onto
  the destination only once the transfer completed
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException, Timeout, ConnectionError, HTTPError

from nativekit.core.exceptions import InstallIOError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROGRESS_INTERVAL = 0.5


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sent no content-length
    speed_bps: float  # bytes per second

    @property
    def fraction(self) -> Optional[float]:
        """Completed fraction in [0, 1], or None while the size is unknown."""
        if self.total_bytes <= 0:
            return None
        return min(self.bytes_downloaded / self.total_bytes, 1.0)


class DownloadError(InstallIOError):
    """Exception raised when download fails."""

    pass


class RemoteNotFoundError(DownloadError):
    """The server answered 404 for the requested URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Not found: {url}")


def partial_path(destination: Path) -> Path:
    """Path data is streamed to before it is moved onto ``destination``."""
    return destination.with_name(destination.name + ".part")


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts for transient failures

    Returns:
        Path to downloaded file

    Raises:
        RemoteNotFoundError: If the server reports 404 (never retried)
        DownloadError: If download fails after retries
        ValueError: If URL or destination is invalid

    Example:
        >>> def on_progress(progress):
        ...     print(f"{progress.bytes_downloaded} bytes")
        >>> download_file("https://example.com/natives.jar", Path("natives.jar"),
        ...               progress_callback=on_progress)
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download_with_progress(
                url=url,
                destination=destination,
                progress_callback=progress_callback,
                timeout=timeout,
            )
        except HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 404:
                raise RemoteNotFoundError(url) from e
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e
            _backoff(attempt, e)
        except (Timeout, ConnectionError, RequestException, OSError) as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e
            _backoff(attempt, e)

    raise DownloadError(f"Download failed: {url}")


def _backoff(attempt: int, error: Exception) -> None:
    backoff_seconds = 2**attempt
    logger.warning(
        f"Download attempt {attempt + 1} failed: {error}. "
        f"Retrying in {backoff_seconds}s..."
    )
    time.sleep(backoff_seconds)


def _download_with_progress(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> Path:
    """
    Perform download with streaming and progress updates.

    The body goes to ``<destination>.part``; on any failure the partial
    file is removed so nothing at ``destination`` can be mistaken for a
    complete download.
    """
    part = partial_path(destination)
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    try:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        start_time = time.monotonic()
        last_progress_time = start_time

        with open(part, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                current_time = time.monotonic()
                if progress_callback and (
                    current_time - last_progress_time >= PROGRESS_INTERVAL
                    or downloaded == total_size
                ):
                    elapsed = current_time - start_time
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size,
                            speed_bps=downloaded / elapsed if elapsed > 0 else 0.0,
                        )
                    )
                    last_progress_time = current_time
    except BaseException:
        part.unlink(missing_ok=True)
        raise
    finally:
        response.close()

    if total_size and downloaded < total_size:
        part.unlink(missing_ok=True)
        raise DownloadError(
            f"Incomplete download from {url}: got {downloaded} of {total_size} bytes"
        )

    part.replace(destination)
    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination
