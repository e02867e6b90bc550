"""
Runtime builder: installs the native bundle once and initializes the runtime.

RuntimeBuilder is the orchestrator of the install pipeline:
1. Return the published outcome if the build already finished
2. Otherwise let exactly one caller run the build; others wait
3. Check for a complete install (marker + structure + release)
4. If needed: wipe, locate a bundled archive or download one, extract,
   harden, write build metadata, write the install marker
5. Call the runtime initializer and publish the handle (or the error)
   to every waiting caller

Example:
    >>> builder = RuntimeBuilder(initialize_runtime)
    >>> builder.args.append("--disable-gpu")
    >>> builder.settings["windowless_rendering_enabled"] = False
    >>> runtime = builder.build()
"""

import copy
import logging
import threading
from contextlib import nullcontext
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO, Callable, List, Optional

from nativekit.bundle.arguments import prepare_arguments
from nativekit.bundle.build_info import BUILD_META_FILENAME, BuildInfo
from nativekit.bundle.checker import (
    INSTALL_MARKER,
    InstallationChecker,
    required_entries_for,
)
from nativekit.bundle.extractor import Extractor
from nativekit.bundle.fetcher import BundleDownloader, open_inner_archive
from nativekit.bundle.hardening import PlatformHardener, get_hardener
from nativekit.bundle.locator import BundleLocator
from nativekit.bundle.progress import NO_ESTIMATION, ProgressStage
from nativekit.config.parser import BuilderConfig
from nativekit.core.exceptions import (
    BuildWaitInterrupted,
    ConfigError,
    DownloadedArtifactInvalidError,
    InstallIOError,
    NativeKitError,
    RuntimeInitializationError,
)
from nativekit.core.filesystem import (
    create_marker,
    ensure_directory,
    remove_file,
    safe_rmtree,
)
from nativekit.core.locking import install_lock
from nativekit.core.platform import PlatformInfo, detect_platform, get_bundle_platform

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "download.zip.temp"

RuntimeInitializer = Callable[[Path, List[str], Any], Any]
"""initializer(install_dir, args, settings) -> runtime handle"""


class BuildState(Enum):
    """Lifecycle of a RuntimeBuilder. COMPLETED and FAILED are terminal."""

    IDLE = "idle"
    BUILDING = "building"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildOutcome:
    """
    Result cell published exactly once per builder.

    The error's traceback is captured at publication; every re-raise starts
    from it so repeated calls do not keep extending the shared exception.
    """

    handle: Any = None
    error: Optional[BaseException] = None
    traceback: Optional[TracebackType] = None

    @classmethod
    def failure(cls, error: BaseException) -> "BuildOutcome":
        return cls(error=error, traceback=error.__traceback__)

    def resolve(self) -> Any:
        if self.error is not None:
            raise self.error.with_traceback(self.traceback)
        return self.handle


class RuntimeBuilder:
    """
    Builds a native runtime handle at most once, from any number of threads.

    Args:
        initializer: Native runtime initialization routine
        config: Builder configuration; copied, so later changes to it
            (or to a shared default) do not affect this builder
        platform_info: Platform to install for (default: detected)
        build_info: Expected release (default: loaded from config.build_info
            or the packaged build_meta.json)
        checker, locator, downloader, extractor, hardener: Collaborators,
            created from config when not given

    A failed build is terminal: state becomes FAILED and every later call
    raises the same error. Create a new builder to retry.
    """

    def __init__(
        self,
        initializer: RuntimeInitializer,
        config: Optional[BuilderConfig] = None,
        *,
        platform_info: Optional[PlatformInfo] = None,
        build_info: Optional[BuildInfo] = None,
        checker: Optional[InstallationChecker] = None,
        locator: Optional[BundleLocator] = None,
        downloader: Optional[BundleDownloader] = None,
        extractor: Optional[Extractor] = None,
        hardener: Optional[PlatformHardener] = None,
    ):
        if initializer is None:
            raise ValueError("initializer cannot be None")

        config = (config or BuilderConfig()).copy()
        self.initializer = initializer
        self.install_dir = Path(config.install_dir)
        self.progress_handler = config.progress_handler
        self.args = config.args
        self.settings = config.settings
        self.config = config

        self.platform_info = platform_info
        self.build_info = build_info
        self.checker = checker
        self.locator = locator or BundleLocator(config.search_paths)
        self.downloader = downloader or BundleDownloader(config.mirrors)
        self.extractor = extractor or Extractor()
        self.hardener = hardener

        self._condition = threading.Condition()
        self._state = BuildState.IDLE
        self._outcome: Optional[BuildOutcome] = None

    @property
    def state(self) -> BuildState:
        with self._condition:
            return self._state

    def build(self, timeout: Optional[float] = None) -> Any:
        """
        Return the runtime handle, installing and initializing on first use.

        Thread-safe. The install/initialize sequence runs at most once per
        builder; concurrent callers block until it finishes and then get
        the same handle or the same error.

        Args:
            timeout: Maximum seconds to wait for a build running on another
                thread (None waits indefinitely). Does not limit the build
                performed by the calling thread itself.

        Raises:
            UnsupportedPlatformError: No bundle exists for this platform
            InstallIOError: Disk or network failure while installing
            DownloadedArtifactInvalidError: Downloaded artifact is corrupt
            ArchiveExtractionError: Bundle could not be extracted
            RuntimeInitializationError: The runtime rejected the install
            BuildWaitInterrupted: Waiting for another thread timed out
        """
        # A single reference read; the outcome is immutable once published
        outcome = self._outcome
        if outcome is not None:
            return outcome.resolve()

        with self._condition:
            if self._state is BuildState.IDLE:
                self._state = BuildState.BUILDING
            else:
                if not self._condition.wait_for(
                    lambda: self._outcome is not None, timeout=timeout
                ):
                    raise BuildWaitInterrupted(
                        f"Timed out after {timeout}s waiting for runtime build"
                    )
                return self._outcome.resolve()

        return self._build_once()

    def _build_once(self) -> Any:
        try:
            handle = self._install_and_initialize()
        except Exception as e:
            logger.error(f"Runtime build failed: {e}")
            self._publish(BuildOutcome.failure(e), BuildState.FAILED)
            raise
        except BaseException as e:
            interrupted = BuildWaitInterrupted("Runtime build was interrupted")
            interrupted.__cause__ = e
            self._publish(BuildOutcome.failure(interrupted), BuildState.FAILED)
            raise

        self._publish(BuildOutcome(handle=handle), BuildState.COMPLETED)
        return handle

    def _publish(self, outcome: BuildOutcome, state: BuildState) -> None:
        with self._condition:
            self._outcome = outcome
            self._state = state
            self._condition.notify_all()
            if state is BuildState.COMPLETED:
                # Waiters already have the handle
                try:
                    self._report(ProgressStage.INITIALIZED)
                except Exception as e:
                    logger.warning(f"Progress handler failed on completion: {e}")

    def _report(self, stage: ProgressStage, fraction: float = NO_ESTIMATION) -> None:
        self.progress_handler(stage, fraction)

    def _install_and_initialize(self) -> Any:
        self._report(ProgressStage.LOCATING)

        platform_info = self.platform_info or detect_platform()
        bundle_platform = get_bundle_platform(platform_info)
        build_info = self.build_info or BuildInfo.load(self.config.build_info)
        checker = self.checker or InstallationChecker(
            expected=build_info, required_entries=required_entries_for(platform_info)
        )

        guard = (
            install_lock(self.install_dir, timeout=self.config.lock_timeout)
            if self.config.process_lock
            else nullcontext()
        )
        with guard:
            if checker.check(self.install_dir):
                logger.info(f"Using existing install at {self.install_dir}")
            else:
                self._install(build_info, bundle_platform, platform_info, checker)

        self._report(ProgressStage.INITIALIZING)
        args = prepare_arguments(self.install_dir, self.args, platform_info)
        settings = copy.deepcopy(self.settings)

        try:
            handle = self.initializer(self.install_dir, args, settings)
        except NativeKitError:
            raise
        except Exception as e:
            raise RuntimeInitializationError(
                f"Runtime initialization failed for {self.install_dir}: {e}"
            ) from e

        if handle is None:
            raise RuntimeInitializationError("Runtime initializer returned no handle")

        logger.info("Runtime initialized")
        return handle

    def _install(
        self,
        build_info: BuildInfo,
        bundle_platform: str,
        platform_info: PlatformInfo,
        checker: InstallationChecker,
    ) -> None:
        logger.info(
            f"Installing {build_info.release_tag} ({bundle_platform}) "
            f"into {self.install_dir}"
        )
        safe_rmtree(self.install_dir)
        ensure_directory(self.install_dir)

        natives = self.locator.open_bundle(build_info, bundle_platform)
        if natives is not None:
            with natives:
                self._extract(natives)
        else:
            self._download_and_extract(build_info, bundle_platform)

        self._report(ProgressStage.INSTALLING)
        hardener = self.hardener or get_hardener(platform_info)
        if not hardener.harden(self.install_dir):
            logger.warning(f"Platform hardening did not complete for {self.install_dir}")

        self._record_build_info(build_info)

        missing = checker.missing_entries(self.install_dir)
        if missing:
            raise DownloadedArtifactInvalidError(
                f"Bundle for {bundle_platform} is missing: {', '.join(missing)}"
            )

        create_marker(self.install_dir / INSTALL_MARKER)
        logger.info(f"Install complete: {self.install_dir}")

    def _record_build_info(self, build_info: BuildInfo) -> None:
        """
        Check the bundle's own build metadata against the expected release,
        or write the expected metadata when the bundle ships none.
        """
        meta_path = self.install_dir / BUILD_META_FILENAME
        if meta_path.exists():
            try:
                shipped = BuildInfo.load(meta_path)
            except ConfigError as e:
                raise DownloadedArtifactInvalidError(
                    f"Bundle has unreadable build metadata: {e}"
                ) from e
            if shipped.release_tag != build_info.release_tag:
                raise DownloadedArtifactInvalidError(
                    f"Bundle is release {shipped.release_tag}, "
                    f"expected {build_info.release_tag}"
                )
            return

        try:
            build_info.write(meta_path)
        except OSError as e:
            raise InstallIOError(f"Could not write build metadata: {e}") from e

    def _download_and_extract(self, build_info: BuildInfo, bundle_platform: str) -> None:
        self._report(ProgressStage.DOWNLOADING)
        download = self.install_dir / DOWNLOAD_FILENAME

        self.downloader.download(
            build_info,
            bundle_platform,
            download,
            progress_callback=lambda f: self._report(ProgressStage.DOWNLOADING, f),
        )

        with open_inner_archive(download) as natives:
            self._extract(natives)

        remove_file(download)

    def _extract(self, natives: BinaryIO) -> None:
        self._report(ProgressStage.EXTRACTING)
        self.extractor.extract(natives, self.install_dir)
