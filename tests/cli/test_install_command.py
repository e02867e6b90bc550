"""
Tests for install command.
"""

from unittest.mock import patch

import pytest

from nativekit.bundle.checker import INSTALL_MARKER
from nativekit.cli.commands import install
from nativekit.core.platform import PlatformInfo


@pytest.fixture
def vendored_config(tmp_path, build_info, bundle_tar_gz):
    """Config file pointing at a local bundle so nothing is downloaded."""
    vendor = tmp_path / "vendor"
    vendor.mkdir()
    (vendor / build_info.bundle_name("linux-amd64")).write_bytes(bundle_tar_gz)
    meta = build_info.write(tmp_path / "build_meta.json")

    config = tmp_path / "nativekit.yaml"
    config.write_text(
        "install_dir: jcef-bundle\n"
        "search_paths:\n"
        "  - vendor\n"
        f"build_info: {meta.name}\n"
        "mirrors: []\n"
    )
    return config


@pytest.fixture
def on_linux():
    with patch(
        "nativekit.bundle.builder.detect_platform",
        return_value=PlatformInfo("linux", "x64", "6.1.0"),
    ):
        yield


class TestInstallCommand:
    """Test install command functionality."""

    def test_installs_from_local_bundle(
        self, vendored_config, tmp_path, command_args, on_linux, capsys
    ):
        """Test a full install driven by the configuration file."""
        args = command_args(config=vendored_config, install_dir=None)

        result = install.run(args)

        install_dir = tmp_path / "jcef-bundle"
        assert result == 0
        assert (install_dir / INSTALL_MARKER).exists()
        assert (install_dir / "libjcef.so").exists()
        assert f"installed at {install_dir}" in capsys.readouterr().out

    def test_install_dir_override(
        self, vendored_config, tmp_path, command_args, on_linux
    ):
        """Test --install-dir wins over the configuration file."""
        target = tmp_path / "elsewhere"
        args = command_args(config=vendored_config, install_dir=target)

        assert install.run(args) == 0
        assert (target / INSTALL_MARKER).exists()

    def test_force_reinstalls(self, vendored_config, tmp_path, command_args, on_linux):
        """Test --force removes an existing install first."""
        args = command_args(config=vendored_config, install_dir=None)
        install.run(args)
        extra = tmp_path / "jcef-bundle" / "leftover.txt"
        extra.write_text("x")

        install.run(command_args(config=vendored_config, install_dir=None, force=True))

        assert not extra.exists()
        assert (tmp_path / "jcef-bundle" / INSTALL_MARKER).exists()

    def test_existing_install_kept(self, vendored_config, tmp_path, command_args, on_linux):
        """Test a complete install is left as is without --force."""
        install.run(command_args(config=vendored_config, install_dir=None))
        extra = tmp_path / "jcef-bundle" / "leftover.txt"
        extra.write_text("x")

        install.run(command_args(config=vendored_config, install_dir=None))

        assert extra.exists()

    def test_uses_console_progress(self, vendored_config, command_args, on_linux):
        """Test the progress bar is used unless disabled."""
        args = command_args(config=vendored_config, install_dir=None, quiet=False, no_progress=False)

        with patch("nativekit.cli.commands.install.ConsoleProgressHandler") as handler_cls:
            install.run(args)

        handler_cls.assert_called_once()
