"""
Fixtures for CLI tests.
"""

import logging
from unittest.mock import Mock

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """CLI.run reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def command_args(install_dir):
    """Parsed-argument stand-in for command modules."""

    def factory(**overrides):
        values = dict(
            config=None,
            install_dir=install_dir,
            verbose=False,
            quiet=True,
            force=False,
            no_progress=True,
        )
        values.update(overrides)
        return Mock(**values)

    return factory
