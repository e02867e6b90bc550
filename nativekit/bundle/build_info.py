"""
Build metadata describing which native bundle release is expected.

The metadata ships as ``build_meta.json`` next to the package. A copy is
stored in every completed install so a later run can tell whether the
installed bundle still matches the release the caller expects.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from nativekit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

BUILD_META_FILENAME = "build_meta.json"


def get_default_build_meta_path() -> Path:
    """Path of the build_meta.json shipped inside the package."""
    return Path(__file__).parent.parent / "data" / BUILD_META_FILENAME


@dataclass(frozen=True)
class BuildInfo:
    """Release descriptor for a native bundle."""

    release_tag: str
    """Tag of the native release (e.g. 'jcef-1a2b3c4+cef-119.4.7')"""

    version: str
    """Version of the published artifacts that carry the bundle"""

    artifact: str = "jcef-natives"
    """Artifact base name, used to build bundle file names"""

    release_url: str = ""
    """Human-facing release page, informational only"""

    def __post_init__(self):
        if not self.release_tag:
            raise ConfigError("build info: release_tag cannot be empty")
        if not self.version:
            raise ConfigError("build info: version cannot be empty")

    def bundle_name(self, platform: str) -> str:
        """
        File name of the tar.gz bundle for a platform.

        Example:
            >>> BuildInfo("jcef-abc+cef-1", "1.0.0").bundle_name("linux-amd64")
            'jcef-natives-linux-amd64-jcef-abc+cef-1.tar.gz'
        """
        return f"{self.artifact}-{platform}-{self.release_tag}.tar.gz"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildInfo":
        if not isinstance(data, dict):
            raise ConfigError("build info must be a JSON object")
        known = {"release_tag", "version", "artifact", "release_url"}
        unknown = set(data) - known
        if unknown:
            logger.debug(f"Ignoring unknown build info keys: {sorted(unknown)}")
        try:
            return cls(**{k: str(v) for k, v in data.items() if k in known})
        except TypeError as e:
            raise ConfigError(f"Invalid build info: {e}") from e

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "BuildInfo":
        """
        Load build info from a build_meta.json file.

        Args:
            path: File to read. If None, uses the packaged build_meta.json.

        Raises:
            ConfigError: If the file is missing or malformed
        """
        path = Path(path) if path is not None else get_default_build_meta_path()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Build metadata not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read build metadata {path}: {e}") from e

        return cls.from_dict(data)

    def write(self, path: Path) -> Path:
        """Write this build info as JSON."""
        path = Path(path)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return path
