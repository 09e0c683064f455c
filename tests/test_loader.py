"""
Tests for FeatureResolver — load-path resolution
"""

from bundlewarn.services.loader import FeatureResolver


class TestCandidates:
    """File names tried for a feature."""

    def test_bare_feature_tries_rb_first(self):
        resolver = FeatureResolver([], dlext=("bundle", "so"))
        assert resolver.candidates("csv") == [
            ("rb", "csv.rb"), ("so", "csv.bundle"), ("so", "csv.so"),
        ]

    def test_explicit_suffix(self):
        resolver = FeatureResolver([], dlext=("so",))
        assert resolver.candidates("csv.rb") == [("rb", "csv.rb")]
        assert resolver.candidates("nkf.so") == [("so", "nkf.so")]


class TestResolve:
    """Resolution against a fake install."""

    def test_ruby_file(self, ruby_env):
        found = ruby_env.create_resolver().resolve_feature_path("csv")
        assert found.kind == "rb"
        assert found.path == str(ruby_env.lib_dir / "csv.rb")

    def test_nested_feature(self, ruby_env):
        found = ruby_env.create_resolver().resolve_feature_path("csv/parser")
        assert found.path == str(ruby_env.lib_dir / "csv" / "parser.rb")

    def test_native_extension(self, ruby_env):
        found = ruby_env.create_resolver().resolve_feature_path("nkf")
        assert found.kind == "so"
        assert found.path == str(ruby_env.arch_dir / "nkf.so")

    def test_missing_feature(self, ruby_env):
        assert ruby_env.create_resolver().resolve_feature_path("rexml") is None
        assert ruby_env.create_resolver().resolve_feature_path("") is None

    def test_load_path_order(self, ruby_env):
        """Earlier directories shadow later ones."""
        override = ruby_env.tmp_path / "override"
        override.mkdir()
        (override / "csv.rb").write_text("")
        resolver = FeatureResolver.for_platform(ruby_env.platform, extra_paths=[str(override)])
        assert resolver.resolve_feature_path("csv").path == str(override / "csv.rb")

    def test_rb_before_native_in_same_directory(self, tmp_path):
        (tmp_path / "dual.rb").write_text("")
        (tmp_path / "dual.so").write_text("")
        found = FeatureResolver([str(tmp_path)]).resolve_feature_path("dual")
        assert found.kind == "rb"

    def test_absolute_path(self, ruby_env):
        path = str(ruby_env.lib_dir / "abbrev")
        found = ruby_env.create_resolver().resolve_feature_path(path)
        assert found.path == path + ".rb"

    def test_relative_path_uses_cwd(self, ruby_env, monkeypatch):
        ruby_env.project_file("lib/helper.rb")
        monkeypatch.chdir(ruby_env.project_dir)
        found = ruby_env.create_resolver().resolve_feature_path("./lib/helper")
        assert found.path == str(ruby_env.project_dir / "lib" / "helper.rb")

    def test_relative_path_not_searched_in_load_path(self, ruby_env, monkeypatch):
        monkeypatch.chdir(ruby_env.project_dir)
        assert ruby_env.create_resolver().resolve_feature_path("./csv") is None

    def test_fallback_to_library_dirs(self, ruby_env):
        """Without a probed load path, lib and arch dirs are searched."""
        platform = ruby_env.platform
        resolver = FeatureResolver([platform.lib_dir, platform.arch_dir], platform.dlext)
        assert resolver.resolve_feature_path("bigdecimal").kind == "so"
