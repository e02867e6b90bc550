"""
Locating native bundles shipped alongside the caller.

Applications may vendor the tar.gz bundle for their platform, either in a
directory or inside an installed ``nativekit_natives`` package. Finding one
avoids any network access. Not finding one is the normal trigger for a
download and is never an error.
"""

import importlib.resources
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

from nativekit.bundle.build_info import BuildInfo

logger = logging.getLogger(__name__)

NATIVES_PACKAGE = "nativekit_natives"


class BundleLocator:
    """
    Finds a bundled tar.gz for a platform without touching the network.

    Args:
        search_paths: Directories searched in order
        resource_package: Importable package whose resources are searched
            after the directories (None disables the lookup)
    """

    def __init__(
        self,
        search_paths: Iterable[Union[str, Path]] = (),
        resource_package: Optional[str] = NATIVES_PACKAGE,
    ):
        self.search_paths = [Path(p) for p in search_paths]
        self.resource_package = resource_package

    def find_bundle(self, build_info: BuildInfo, platform: str) -> Optional[Path]:
        """Return the path of a bundled archive on disk, if any."""
        name = build_info.bundle_name(platform)

        for directory in self.search_paths:
            candidate = directory / name
            if candidate.is_file():
                logger.info(f"Found bundled natives: {candidate}")
                return candidate
            logger.debug(f"No bundled natives at {candidate}")

        return None

    def open_bundle(self, build_info: BuildInfo, platform: str) -> Optional[BinaryIO]:
        """
        Open a bundled archive as a binary stream.

        Returns:
            Readable stream positioned at the start of the tar.gz data, or
            None if no bundle is available locally. The caller closes it.
        """
        path = self.find_bundle(build_info, platform)
        if path is not None:
            return open(path, "rb")

        return self._open_resource(build_info.bundle_name(platform))

    def _open_resource(self, name: str) -> Optional[BinaryIO]:
        if not self.resource_package:
            return None

        try:
            resource = importlib.resources.files(self.resource_package) / name
        except ModuleNotFoundError:
            logger.debug(f"Package {self.resource_package} is not installed")
            return None

        if not resource.is_file():
            logger.debug(f"No resource {name} in {self.resource_package}")
            return None

        logger.info(f"Found bundled natives in package {self.resource_package}: {name}")
        return resource.open("rb")
