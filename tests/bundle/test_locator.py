"""
Tests for locating bundled natives.
"""

from pathlib import Path
from unittest.mock import patch

from nativekit.bundle.locator import BundleLocator


class TestBundleLocator:
    """Test BundleLocator."""

    def test_not_found_is_none(self, tmp_path, build_info):
        """Test absence of a bundle is not an error."""
        locator = BundleLocator([tmp_path], resource_package=None)

        assert locator.find_bundle(build_info, "linux-amd64") is None
        assert locator.open_bundle(build_info, "linux-amd64") is None

    def test_finds_in_search_path(self, tmp_path, build_info, bundle_tar_gz):
        """Test a bundle named after release and platform is found."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        bundle = second / build_info.bundle_name("linux-amd64")
        bundle.write_bytes(bundle_tar_gz)

        locator = BundleLocator([first, second], resource_package=None)

        assert locator.find_bundle(build_info, "linux-amd64") == bundle
        with locator.open_bundle(build_info, "linux-amd64") as stream:
            assert stream.read() == bundle_tar_gz

    def test_other_platform_not_matched(self, tmp_path, build_info, bundle_tar_gz):
        """Test a bundle for another platform is ignored."""
        (tmp_path / build_info.bundle_name("windows-amd64")).write_bytes(bundle_tar_gz)

        locator = BundleLocator([tmp_path], resource_package=None)

        assert locator.find_bundle(build_info, "linux-amd64") is None

    def test_missing_resource_package(self, build_info):
        """Test an uninstalled natives package is skipped."""
        locator = BundleLocator(resource_package="nativekit_missing_natives_pkg")

        assert locator.open_bundle(build_info, "linux-amd64") is None

    def test_opens_package_resource(self, tmp_path, build_info, bundle_tar_gz):
        """Test bundles shipped as package resources are opened."""
        (tmp_path / build_info.bundle_name("linux-amd64")).write_bytes(bundle_tar_gz)

        locator = BundleLocator(resource_package="vendored_natives")
        with patch(
            "nativekit.bundle.locator.importlib.resources.files",
            return_value=Path(tmp_path),
        ):
            stream = locator.open_bundle(build_info, "linux-amd64")

        with stream:
            assert stream.read() == bundle_tar_gz
