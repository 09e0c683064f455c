"""
Tests for MessageBuilder — wording, tense and second-order attribution

These tests validate:
- Tense flips exactly at the unbundled version
- Registry guidance without Bundler, manifest guidance with it
- Attribution to an installed gem when the requester lives inside one
- First matching installation root is authoritative
"""

import pytest

from bundlewarn.core.frames import CallerFrame
from bundlewarn.core.message import MessageBuilder
from tests.factories import RubyInstallFactory


class TestTense:
    """Future vs present phrasing."""

    @pytest.mark.parametrize("runtime,tense", [
        ("3.3.0", "will no longer be"),
        ("3.3.9", "will no longer be"),
        ("3.4.0", "is not"),
        ("3.5.0", "is not"),
    ])
    def test_tense_boundary(self, tmp_path, runtime, tense):
        factory = RubyInstallFactory(tmp_path, runtime_version=runtime)
        message = MessageBuilder(factory.create_tables()).build("csv")
        assert message == (
            f" which {tense} part of the default gems since Ruby 3.4.0."
            " Install csv from RubyGems."
        )

    def test_unknown_gem_raises(self, ruby_env):
        with pytest.raises(KeyError):
            MessageBuilder(ruby_env.create_tables()).build("set")


class TestGuidance:
    """Remediation clause."""

    def test_manifest_guidance(self, ruby_env):
        builder = MessageBuilder(ruby_env.create_tables(), manifest_active=True)
        message = builder.build("csv")
        assert message.endswith(" Add csv to your Gemfile or gemspec.")
        assert "RubyGems" not in message

    def test_custom_labels(self, ruby_env):
        tables = ruby_env.create_tables(
            runtime_label="TruffleRuby", registry_label="the gem server", manifest_label="Gemfile"
        )
        assert "since TruffleRuby 3.4.0" in MessageBuilder(tables).build("csv")
        assert "Install csv from the gem server." in MessageBuilder(tables).build("csv")
        assert "Add csv to your Gemfile." in MessageBuilder(tables, manifest_active=True).build("csv")


class TestAttribution:
    """Second-order attribution."""

    def test_requester_inside_installed_gem(self, ruby_env):
        gem_dir = ruby_env.add_gem("mylib", "1.2.0")
        frame = CallerFrame.for_file(str(gem_dir / "lib" / "mylib.rb"))
        builder = MessageBuilder(ruby_env.create_tables(), manifest_active=True)

        assert builder.attribute(frame) == "mylib"
        assert builder.build("csv", frame).endswith(
            " Add csv to your Gemfile or gemspec."
            " Also contact author of mylib to add csv into its gemspec."
        )

    def test_platform_suffix_in_gem_dir(self, ruby_env):
        gem_dir = ruby_env.add_gem("nokogiri", "1.16.0-x86_64-linux")
        frame = CallerFrame.for_file(str(gem_dir / "lib" / "nokogiri.rb"))
        assert MessageBuilder(ruby_env.create_tables()).attribute(frame) == "nokogiri"

    def test_digit_after_dash_in_gem_name(self, ruby_env):
        gem_dir = ruby_env.add_gem("ruby-2captcha", "1.0.0")
        frame = CallerFrame.for_file(str(gem_dir / "lib" / "ruby-2captcha.rb"))
        assert MessageBuilder(ruby_env.create_tables()).attribute(frame) == "ruby-2captcha"

    @pytest.mark.parametrize("dirname, name", [
        ("foo-2-1.0.0", "foo-2"),
        ("grpc-1.60.0-universal-darwin-22", "grpc"),
        ("rails-7.1.0.rc1", "rails"),
    ])
    def test_gem_dir_names(self, ruby_env, dirname, name):
        path = ruby_env.gem_root / "gems" / dirname / "lib" / "x.rb"
        path.parent.mkdir(parents=True)
        path.write_text("")
        frame = CallerFrame.for_file(str(path))
        assert MessageBuilder(ruby_env.create_tables()).attribute(frame) == name

    def test_no_attribution_without_manifest(self, ruby_env):
        gem_dir = ruby_env.add_gem("mylib", "1.2.0")
        frame = CallerFrame.for_file(str(gem_dir / "lib" / "mylib.rb"))
        message = MessageBuilder(ruby_env.create_tables()).build("csv", frame)
        assert "contact author" not in message

    def test_project_requester_has_no_attribution(self, ruby_env):
        path = ruby_env.project_file("app.rb", 'require "csv"\n')
        builder = MessageBuilder(ruby_env.create_tables(), manifest_active=True)
        assert builder.attribute(CallerFrame.for_file(str(path))) is None

    def test_missing_file_has_no_attribution(self, ruby_env):
        frame = CallerFrame.for_file(str(ruby_env.gem_root / "gems" / "ghost-1.0" / "lib" / "ghost.rb"))
        assert MessageBuilder(ruby_env.create_tables()).attribute(frame) is None

    def test_unversioned_gem_dir(self, ruby_env):
        path = ruby_env.gem_root / "gems" / "scratch" / "x.rb"
        path.parent.mkdir(parents=True)
        path.write_text("")
        assert MessageBuilder(ruby_env.create_tables()).attribute(CallerFrame.for_file(str(path))) is None

    def test_no_frame(self, ruby_env):
        assert MessageBuilder(ruby_env.create_tables()).attribute(None) is None

    def test_first_matching_root_is_authoritative(self, ruby_env):
        """An outer root that also matches the path wins when listed first."""
        gem_dir = ruby_env.add_gem("mylib", "1.2.0")
        frame = CallerFrame.for_file(str(gem_dir / "lib" / "mylib.rb"))
        outer = str(ruby_env.ruby_root / "lib" / "ruby")
        inner = str(ruby_env.gem_root)
        tables = ruby_env.create_tables()

        assert MessageBuilder(tables, gem_roots=[inner, outer]).attribute(frame) == "mylib"
        # outer matches ".../ruby/gems/3.3.0", which is not a gem directory
        assert MessageBuilder(tables, gem_roots=[outer, inner]).attribute(frame) is None
