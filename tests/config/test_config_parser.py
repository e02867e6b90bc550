"""
Tests for configuration parsing.
"""

import textwrap
from pathlib import Path

import pytest

from nativekit.bundle.progress import LoggingProgressHandler
from nativekit.config.parser import (
    BuilderConfig,
    load_config,
    parse_config,
)
from nativekit.core.exceptions import ConfigError


def write_config(tmp_path, content: str) -> Path:
    path = tmp_path / "nativekit.yaml"
    path.write_text(textwrap.dedent(content))
    return path


class TestBuilderConfig:
    """Test BuilderConfig defaults and copying."""

    def test_defaults(self):
        config = BuilderConfig()

        assert config.install_dir == Path("jcef-bundle")
        assert isinstance(config.progress_handler, LoggingProgressHandler)
        assert config.args == []
        assert config.settings == {"windowless_rendering_enabled": True}
        assert config.mirrors is None
        assert config.process_lock is False

    def test_defaults_are_not_shared(self):
        """Test each config gets its own mutable defaults."""
        first = BuilderConfig()
        second = BuilderConfig()
        first.args.append("--x")
        first.settings["windowless_rendering_enabled"] = False

        assert second.args == []
        assert second.settings["windowless_rendering_enabled"] is True

    def test_copy_is_deep(self):
        config = BuilderConfig(settings={"nested": {"a": 1}}, mirrors=["https://m"])
        copied = config.copy()

        copied.settings["nested"]["a"] = 2
        copied.mirrors.append("https://other")

        assert config.settings == {"nested": {"a": 1}}
        assert config.mirrors == ["https://m"]


class TestParseConfig:
    """Test parse_config."""

    def test_full_config(self, tmp_path):
        """Test every key is parsed."""
        path = write_config(
            tmp_path,
            """
            install_dir: natives/jcef
            args:
              - --disable-gpu
              - --user-agent=My App 1.0
            settings:
              windowless_rendering_enabled: false
              log_severity: warning
            mirrors:
              - https://mirror.example.com/{artifact}-{platform}-{release_tag}.jar
            search_paths:
              - vendor
              - /opt/natives
            build_info: meta/build_meta.json
            process_lock: true
            lock_timeout: 30
            """,
        )

        config = parse_config(path)

        assert config.install_dir == tmp_path / "natives" / "jcef"
        assert config.args == ["--disable-gpu", "--user-agent=My App 1.0"]
        assert config.settings == {
            "windowless_rendering_enabled": False,
            "log_severity": "warning",
        }
        assert config.mirrors == [
            "https://mirror.example.com/{artifact}-{platform}-{release_tag}.jar"
        ]
        assert config.search_paths == [tmp_path / "vendor", Path("/opt/natives")]
        assert config.build_info == tmp_path / "meta" / "build_meta.json"
        assert config.process_lock is True
        assert config.lock_timeout == 30.0

    def test_empty_file(self, tmp_path):
        """Test an empty file yields defaults."""
        config = parse_config(write_config(tmp_path, ""))

        assert config.install_dir == Path("jcef-bundle")

    def test_null_mirrors_keep_defaults(self, tmp_path):
        config = parse_config(write_config(tmp_path, "mirrors:\n"))

        assert config.mirrors is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "args: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config(path)

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(write_config(tmp_path, "- a\n- b\n"))

    def test_unknown_key(self, tmp_path):
        """Test typos are reported instead of ignored."""
        with pytest.raises(ConfigError, match="install_directory"):
            parse_config(write_config(tmp_path, "install_directory: x\n"))

    @pytest.mark.parametrize(
        "content, message",
        [
            ("install_dir: 5\n", "install_dir"),
            ("args: --disable-gpu\n", "args"),
            ("args: [1, 2]\n", "args"),
            ("settings: [a]\n", "settings"),
            ("process_lock: 'yes'\n", "process_lock"),
            ("lock_timeout: soon\n", "lock_timeout"),
            ("lock_timeout: true\n", "lock_timeout"),
        ],
    )
    def test_invalid_values(self, tmp_path, content, message):
        with pytest.raises(ConfigError, match=message):
            parse_config(write_config(tmp_path, content))


class TestLoadConfig:
    """Test load_config."""

    def test_missing_optional_file(self, tmp_path, monkeypatch):
        """Test defaults are used without a config file."""
        monkeypatch.chdir(tmp_path)

        assert load_config().install_dir == Path("jcef-bundle")

    def test_reads_file_in_cwd(self, tmp_path, monkeypatch):
        write_config(tmp_path, "install_dir: bundle\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().install_dir == tmp_path / "bundle"

    def test_missing_required_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml", required=True)
