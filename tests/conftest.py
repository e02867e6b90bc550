"""
Pytest configuration and shared fixtures for NativeKit tests.
"""

import pytest

from nativekit.bundle.build_info import BuildInfo
from nativekit.core.platform import PlatformInfo, clear_platform_cache

from tests.utils import make_artifact_zip, make_tar_gz


@pytest.fixture(autouse=True)
def _fresh_platform_cache():
    """Platform detection is cached per process; isolate tests from it."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def build_info() -> BuildInfo:
    """Expected release used by most tests."""
    return BuildInfo(release_tag="jcef-test+cef-1.2.3", version="1.2.3")


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo("linux", "x64", "6.1.0")


@pytest.fixture
def macos_platform() -> PlatformInfo:
    return PlatformInfo("macos", "arm64", "14.1")


@pytest.fixture
def bundle_tar_gz() -> bytes:
    """A small but realistic native bundle."""
    return make_tar_gz(
        {
            "libjcef.so": b"\x7fELF-jcef",
            "jcef_helper": (b"#!/bin/sh\n", 0o755),
            "locales/en-US.pak": b"pak",
        },
        directories=("locales",),
    )


@pytest.fixture
def artifact_zip(bundle_tar_gz) -> bytes:
    """Downloadable artifact wrapping the bundle."""
    return make_artifact_zip(bundle_tar_gz)


@pytest.fixture
def install_dir(tmp_path):
    return tmp_path / "jcef-bundle"
