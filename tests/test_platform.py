"""
Tests for PlatformProbe — RbConfig values from the target Ruby

All tests mock subprocess.run. No Ruby installation required.
"""

import subprocess
from unittest.mock import Mock, patch

import orjson
import pytest

from bundlewarn.core.errors import PlatformConfigError
from bundlewarn.services.platform import PlatformProbe, platform_from_settings

PROBE_OUTPUT = {
    "rubylibdir": "/opt/ruby/lib/ruby/3.3.0",
    "rubyarchdir": "/opt/ruby/lib/ruby/3.3.0/arm64-darwin23",
    "DLEXT": "bundle",
    "ruby_version": "3.3.6",
    "gem_path": ["/home/dev/.gem/ruby/3.3.0", "/opt/ruby/lib/ruby/gems/3.3.0"],
    "load_path": ["/opt/ruby/lib/ruby/site_ruby/3.3.0", "/opt/ruby/lib/ruby/3.3.0"],
}


def completed(stdout="", returncode=0, stderr=""):
    return Mock(stdout=stdout, returncode=returncode, stderr=stderr)


@pytest.fixture
def run():
    with patch("bundlewarn.services.platform.subprocess.run") as mocked:
        mocked.return_value = completed(orjson.dumps(PROBE_OUTPUT).decode())
        yield mocked


class TestProbe:
    """Running Ruby."""

    def test_parses_output(self, run):
        platform = PlatformProbe().load()

        assert platform.lib_dir == "/opt/ruby/lib/ruby/3.3.0/"
        assert platform.runtime_version == "3.3.6"
        assert platform.dlext == ("bundle", "so")
        assert platform.gem_paths[0] == "/home/dev/.gem/ruby/3.3.0"

    def test_runs_configured_executable(self, run):
        PlatformProbe(ruby="/opt/ruby/bin/ruby").probe()
        cmd = run.call_args[0][0]
        assert cmd[0] == "/opt/ruby/bin/ruby"
        assert cmd[1] == "-e"

    def test_missing_executable(self, run):
        run.side_effect = FileNotFoundError()
        with pytest.raises(PlatformConfigError, match="not found"):
            PlatformProbe(ruby="no-such-ruby").load()

    def test_timeout(self, run):
        run.side_effect = subprocess.TimeoutExpired(cmd="ruby", timeout=1)
        with pytest.raises(PlatformConfigError, match="timed out"):
            PlatformProbe(timeout=1).load()

    def test_non_zero_exit(self, run):
        run.return_value = completed(returncode=1, stderr="ruby: broken")
        with pytest.raises(PlatformConfigError, match="ruby: broken"):
            PlatformProbe().load()

    def test_malformed_output(self, run):
        run.return_value = completed("RUBY_VERSION=3.3.0")
        with pytest.raises(PlatformConfigError, match="malformed"):
            PlatformProbe().load()

    def test_non_object_output(self, run):
        run.return_value = completed("[1, 2]")
        with pytest.raises(PlatformConfigError, match="malformed"):
            PlatformProbe().load()

    def test_missing_directories(self, run):
        run.return_value = completed(orjson.dumps({"ruby_version": "3.3.0"}).decode())
        with pytest.raises(PlatformConfigError, match="library directories"):
            PlatformProbe().load()


class TestCache:
    """Probe cache."""

    def test_cache_written_and_reused(self, tmp_path, run):
        cache = tmp_path / ".bundlewarn" / "platform.json"
        first = PlatformProbe(cache_path=cache).load()
        assert cache.exists()

        run.side_effect = AssertionError("probe should not run")
        second = PlatformProbe(cache_path=cache).load()
        assert second == first

    def test_other_executable_ignores_cache(self, tmp_path, run):
        cache = tmp_path / "platform.json"
        PlatformProbe(ruby="ruby", cache_path=cache).load()
        PlatformProbe(ruby="ruby3.4", cache_path=cache).load()
        assert run.call_count == 2

    def test_refresh_ignores_cache(self, tmp_path, run):
        cache = tmp_path / "platform.json"
        PlatformProbe(cache_path=cache).load()
        PlatformProbe(cache_path=cache).load(refresh=True)
        assert run.call_count == 2

    def test_corrupt_cache_is_reprobed(self, tmp_path, run):
        cache = tmp_path / "platform.json"
        cache.write_text("{not json")
        platform = PlatformProbe(cache_path=cache).load()
        assert platform.runtime_version == "3.3.6"
        assert orjson.loads(cache.read_bytes())["ruby"] == "ruby"


class TestSettings:
    """Configured platform values."""

    def test_no_settings(self):
        assert platform_from_settings({}) is None
        assert platform_from_settings({"DLEXT": "so"}) is None

    def test_settings_build_platform(self):
        platform = platform_from_settings(PROBE_OUTPUT)
        assert platform.arch_dir.endswith("arm64-darwin23/")

    def test_incomplete_settings_raise(self):
        with pytest.raises(PlatformConfigError):
            platform_from_settings({"rubylibdir": "/opt/ruby/lib"})
