"""
Tests for Lockfile — installed specs and Bundler detection
"""

from bundlewarn.services.lockfile import (
    InstalledSpec,
    find_gemfile,
    load_installed_specs,
    lockfile_for,
    manifest_manager_active,
    parse_lockfile,
    read_lockfile,
)

LOCKFILE = """\
GEM
  remote: https://rubygems.org/
  specs:
    csv (3.3.0)
    nokogiri (1.16.0-x86_64-linux)
      racc (~> 1.4)
    racc (1.8.1)

PATH
  remote: .
  specs:
    myapp (0.1.0)
      csv

PLATFORMS
  x86_64-linux

DEPENDENCIES
  csv
  myapp!

BUNDLED WITH
   2.5.22
"""


class TestParse:
    """Lockfile parsing."""

    def test_specs_in_order(self):
        specs = parse_lockfile(LOCKFILE)
        assert [s.name for s in specs] == ["csv", "nokogiri", "racc", "myapp"]

    def test_versions(self):
        specs = {s.name: s.version for s in parse_lockfile(LOCKFILE)}
        assert specs["nokogiri"] == "1.16.0-x86_64-linux"
        assert specs["csv"] == "3.3.0"

    def test_dependency_lines_are_not_specs(self):
        """racc appears once even though nokogiri depends on it."""
        names = [s.name for s in parse_lockfile(LOCKFILE)]
        assert names.count("racc") == 1

    def test_top_level_sections_ignored(self):
        names = [s.name for s in parse_lockfile(LOCKFILE)]
        assert "x86_64-linux" not in names

    def test_empty(self):
        assert parse_lockfile("") == []

    def test_read_missing_file(self, tmp_path):
        assert read_lockfile(tmp_path / "Gemfile.lock") == []


class TestGemfile:
    """Gemfile discovery."""

    def test_gemfile(self, tmp_path):
        (tmp_path / "Gemfile").write_text("source 'https://rubygems.org'\n")
        assert find_gemfile(tmp_path) == tmp_path / "Gemfile"

    def test_gems_rb(self, tmp_path):
        (tmp_path / "gems.rb").write_text("")
        gemfile = find_gemfile(tmp_path)
        assert gemfile.name == "gems.rb"
        assert lockfile_for(gemfile).name == "gems.locked"

    def test_bundle_gemfile_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BUNDLE_GEMFILE", str(tmp_path / "custom" / "Gemfile.ci"))
        gemfile = find_gemfile(tmp_path)
        assert gemfile.name == "Gemfile.ci"
        assert lockfile_for(gemfile).name == "Gemfile.ci.lock"

    def test_no_gemfile(self, tmp_path):
        assert find_gemfile(tmp_path) is None

    def test_load_installed_specs(self, tmp_path):
        (tmp_path / "Gemfile").write_text("")
        (tmp_path / "Gemfile.lock").write_text(LOCKFILE)
        assert InstalledSpec("csv", "3.3.0") in load_installed_specs(tmp_path)

    def test_load_without_gemfile(self, tmp_path):
        (tmp_path / "Gemfile.lock").write_text(LOCKFILE)
        assert load_installed_specs(tmp_path) == []


class TestManifestActive:
    """audit.bundler setting."""

    def test_auto_detects_gemfile(self, tmp_path):
        assert manifest_manager_active(tmp_path) is False
        (tmp_path / "Gemfile").write_text("")
        assert manifest_manager_active(tmp_path) is True

    def test_forced(self, tmp_path):
        for value in ("true", "on", "yes", "1", "TRUE"):
            assert manifest_manager_active(tmp_path, value) is True

    def test_disabled(self, tmp_path):
        (tmp_path / "Gemfile").write_text("")
        for value in ("false", "off", "no", "0"):
            assert manifest_manager_active(tmp_path, value) is False
