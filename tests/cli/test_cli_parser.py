"""
Tests for CLI argument parser.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from nativekit.cli.parser import CLI
from nativekit.core.exceptions import ArtifactNotFoundError


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        """Test CLI can be created."""
        cli = CLI()
        assert cli.parser is not None

    def test_no_command_shows_help(self, capsys):
        """Test that running without command shows help."""
        result = CLI().run([])

        assert result == 1
        assert "usage:" in capsys.readouterr().out.lower()

    def test_version_flag(self, capsys):
        """Test --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])

        assert exc_info.value.code == 0
        assert "NativeKit" in capsys.readouterr().out

    def test_global_options(self):
        args = CLI().parse_args(["-v", "--config", "app/nativekit.yaml", "verify"])

        assert args.verbose is True
        assert args.config == Path("app/nativekit.yaml")
        assert args.command == "verify"


class TestCommandParsing:
    """Test subcommand parsing."""

    def test_install_defaults(self):
        args = CLI().parse_args(["install"])

        assert args.install_dir is None
        assert args.force is False
        assert args.no_progress is False

    def test_install_all_options(self):
        args = CLI().parse_args(
            ["install", "--install-dir", "/opt/jcef", "--force", "--no-progress"]
        )

        assert args.install_dir == Path("/opt/jcef")
        assert args.force is True
        assert args.no_progress is True

    def test_verify_install_dir(self):
        args = CLI().parse_args(["verify", "--install-dir", "bundle"])

        assert args.install_dir == Path("bundle")

    def test_clean(self):
        assert CLI().parse_args(["clean"]).command == "clean"

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["upgrade"])


class TestDispatch:
    """Test command dispatch and error handling."""

    @patch("nativekit.cli.commands.verify.run", return_value=0)
    def test_dispatches_to_command(self, mock_run):
        assert CLI().run(["verify"]) == 0
        mock_run.assert_called_once()

    @patch(
        "nativekit.cli.commands.install.run",
        side_effect=ArtifactNotFoundError("jcef-natives-linux-amd64-x", attempted=2),
    )
    def test_library_error_exit_code(self, mock_run):
        """Test NativeKitError is reported with exit code 1."""
        assert CLI().run(["-q", "install"]) == 1

    @patch("nativekit.cli.commands.clean.run", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_run):
        assert CLI().run(["clean"]) == 130
