"""YAML configuration parser for NativeKit.

This module provides the builder configuration and parsing/validation for
nativekit.yaml configuration files.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from nativekit.bundle.progress import LoggingProgressHandler, ProgressHandler
from nativekit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "nativekit.yaml"
DEFAULT_INSTALL_DIR = "jcef-bundle"


def default_settings() -> Dict[str, Any]:
    """Fresh runtime settings; windowless (off-screen) rendering by default."""
    return {"windowless_rendering_enabled": True}


@dataclass
class BuilderConfig:
    """Complete configuration of a RuntimeBuilder."""

    install_dir: Path = field(default_factory=lambda: Path(DEFAULT_INSTALL_DIR))
    progress_handler: ProgressHandler = field(default_factory=LoggingProgressHandler)
    args: List[str] = field(default_factory=list)  # may contain spaces
    settings: Any = field(default_factory=default_settings)  # opaque, passed through
    mirrors: Optional[List[str]] = None  # None: built-in mirror list
    search_paths: List[Path] = field(default_factory=list)
    build_info: Optional[Path] = None  # None: packaged build_meta.json
    process_lock: bool = False
    lock_timeout: float = 600

    def copy(self) -> "BuilderConfig":
        """
        Independent copy; args, settings, mirrors and search paths are
        deep-copied so later changes to the source don't leak in.
        """
        return replace(
            self,
            args=list(self.args),
            settings=copy.deepcopy(self.settings),
            mirrors=list(self.mirrors) if self.mirrors is not None else None,
            search_paths=list(self.search_paths),
        )


def parse_config(config_path: Path) -> BuilderConfig:
    """
    Parse nativekit.yaml configuration file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        config_path: Path to nativekit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        data = {}

    return _parse_and_validate(data, config_path.parent)


def load_config(config_path: Optional[Path] = None, required: bool = False) -> BuilderConfig:
    """
    Load configuration, falling back to defaults.

    Args:
        config_path: File to read (default: ./nativekit.yaml)
        required: If True, a missing file is an error

    Raises:
        ConfigError: If the file is invalid, or missing while required
    """
    path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILENAME
    if not path.exists() and not required:
        logger.debug(f"Config file not found (optional): {path}")
        return BuilderConfig()

    return parse_config(path)


def _parse_and_validate(data: Any, base_dir: Path) -> BuilderConfig:
    """Parse and validate configuration data."""
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    known = {
        "install_dir",
        "args",
        "settings",
        "mirrors",
        "search_paths",
        "build_info",
        "process_lock",
        "lock_timeout",
    }
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    config = BuilderConfig()

    if "install_dir" in data:
        config.install_dir = _resolve(base_dir, _require_str(data, "install_dir"))

    if "args" in data:
        config.args = _require_str_list(data, "args")

    if "settings" in data:
        settings = data["settings"]
        if settings is not None and not isinstance(settings, dict):
            raise ConfigError("'settings' must be a mapping")
        config.settings = settings if settings is not None else {}

    if data.get("mirrors") is not None:
        config.mirrors = _require_str_list(data, "mirrors")

    if "search_paths" in data:
        config.search_paths = [
            _resolve(base_dir, p) for p in _require_str_list(data, "search_paths")
        ]

    if "build_info" in data:
        config.build_info = _resolve(base_dir, _require_str(data, "build_info"))

    if "process_lock" in data:
        if not isinstance(data["process_lock"], bool):
            raise ConfigError("'process_lock' must be true or false")
        config.process_lock = data["process_lock"]

    if "lock_timeout" in data:
        timeout = data["lock_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError("'lock_timeout' must be a number of seconds")
        config.lock_timeout = float(timeout)

    return config


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value


def _require_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data[key]
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)
