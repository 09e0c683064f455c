"""
Shared pytest fixtures for bundlewarn test suite.

Usage in tests:
    def test_something(ruby_env):
        engine = ruby_env.create_engine()

    def test_command(mock_cli):
        cmd = CheckCommand(mock_cli)
"""

import pytest

from bundlewarn.config import ConfigManager
from tests.factories import RubyInstallFactory


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the real user config and environment out of every test."""
    monkeypatch.setattr(
        ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / ".bundlewarn" / "config.yaml"
    )
    for var in ("BUNDLEWARN_RUBY", "BUNDLEWARN_BUNDLER", "BUNDLEWARN_WORKERS",
                "BUNDLEWARN_PROJECT_PATH", "BUNDLE_GEMFILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def ruby_factory(tmp_path):
    """Empty fake Ruby install (directories only)."""
    return RubyInstallFactory(tmp_path)


@pytest.fixture
def ruby_env(tmp_path):
    """
    Fake Ruby 3.3.0 install with a sample standard library:
    csv (+ csv/core, csv/parser), kconv, abbrev, base64, drb, set, json,
    getoptlong and native nkf, bigdecimal, etc, syslog.
    """
    return RubyInstallFactory(tmp_path).populate()


@pytest.fixture
def mock_cli(ruby_env):
    """Mock CLI backed by the sample install."""
    return ruby_env.create_cli_mock()
