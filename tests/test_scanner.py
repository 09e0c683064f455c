"""
Tests for RequireScanner — require sites from Ruby sources

Parsing tests need tree-sitter-language-pack and are skipped without it.
"""

import pytest

from bundlewarn.services.scanner import RequireScanner, RequireSite, iter_ruby_files

# Check if tree-sitter-language-pack is available
try:
    import tree_sitter_language_pack  # noqa: F401
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False

# Skip marker for tree-sitter dependent tests
requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE,
    reason="tree-sitter-language-pack not installed"
)

SOURCE = '''\
require "csv"
require_relative "helpers"
Kernel.require "base64"
require "a#{b}"
loader.require "nope"

def load_set
  require('set')
end

require name
'''


@requires_tree_sitter
class TestScanSource:
    """Require extraction."""

    def test_literal_requires(self):
        sites = RequireScanner().scan_source(SOURCE, "app.rb")
        assert [(s.line, s.feature) for s in sites] == [
            (1, "csv"),
            (3, "base64"),
            (8, "set"),
        ]

    def test_sites_carry_path(self):
        sites = RequireScanner().scan_source('require "csv"\n', "lib/x.rb")
        assert sites == [RequireSite(path="lib/x.rb", line=1, feature="csv")]

    def test_bytes_source(self):
        sites = RequireScanner().scan_source(b'require "kconv"\n')
        assert sites[0].feature == "kconv"

    def test_namespaced_feature(self):
        sites = RequireScanner().scan_source('require "csv/parser"\n')
        assert sites[0].feature == "csv/parser"

    def test_no_requires(self):
        assert RequireScanner().scan_source("puts 'hello'\n") == []

    def test_scan_file(self, tmp_path):
        path = tmp_path / "app.rb"
        path.write_text('\n\nrequire "abbrev"\n')
        sites = RequireScanner().scan(path)
        assert sites == [RequireSite(path=str(path), line=3, feature="abbrev")]


class TestScanFile:
    """File handling that needs no parser."""

    def test_missing_file(self, tmp_path):
        assert RequireScanner().scan(tmp_path / "missing.rb") == []

    def test_oversized_file(self, tmp_path):
        path = tmp_path / "big.rb"
        path.write_text('require "csv"\n' * 10)
        assert RequireScanner(max_file_size=10).scan(path) == []

    def test_site_to_dict(self):
        site = RequireSite(path="a.rb", line=2, feature="csv")
        assert site.to_dict() == {"path": "a.rb", "line": 2, "feature": "csv"}


class TestIterRubyFiles:
    """Project walking."""

    def test_ruby_files_sorted(self, tmp_path):
        for name in ("lib/b.rb", "lib/a.rb", "Rakefile", "tasks/db.rake",
                     "app.gemspec", "config.ru", "README.md", "lib/data.json"):
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        found = [p.relative_to(tmp_path).as_posix() for p in iter_ruby_files(tmp_path)]
        assert found == ["Rakefile", "app.gemspec", "config.ru", "lib/a.rb", "lib/b.rb", "tasks/db.rake"]

    def test_excluded_directories(self, tmp_path):
        for name in ("app.rb", "vendor/bundle/gems/x.rb", "lib/vendor/y.rb", ".bundle/z.rb"):
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        found = [p.relative_to(tmp_path).as_posix() for p in iter_ruby_files(tmp_path)]
        assert found == ["app.rb"]

    def test_custom_excludes(self, tmp_path):
        (tmp_path / "spec").mkdir()
        (tmp_path / "spec" / "a_spec.rb").write_text("")
        assert list(iter_ruby_files(tmp_path, exclude=["spec"])) == []

    def test_single_file(self, tmp_path):
        path = tmp_path / "script"
        path.write_text("")
        assert list(iter_ruby_files(path)) == [path]
