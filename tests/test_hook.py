"""
Tests for LoadHook — engine results surfaced through the warnings module
"""

import warnings

import pytest

from bundlewarn.core.hook import LoadHook, UnbundledGemWarning


class TestBeforeLoad:
    """Load-time warnings."""

    def test_emits_once(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine())

        with pytest.warns(UnbundledGemWarning, match="csv which will no longer be part"):
            assert hook.before_load("csv")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            assert hook.before_load("csv") is None
        assert caught == []

    def test_untracked_is_silent(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine())
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            assert hook.before_load("set") is None
        assert caught == []

    def test_warning_points_at_the_caller(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine())
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            hook.before_load("abbrev")
        assert len(caught) == 1
        assert caught[0].filename == __file__

    def test_custom_category(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine(), category=DeprecationWarning)
        with pytest.warns(DeprecationWarning, match="kconv is found in nkf"):
            hook.before_load("kconv")

    def test_category_is_shown_by_default(self):
        """UserWarning subclasses aren't hidden outside __main__."""
        assert issubclass(UnbundledGemWarning, UserWarning)


class TestOnLoadError:
    """Failed-load explanations."""

    def test_explains_missing_gem(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine())
        with pytest.warns(UnbundledGemWarning, match="rexml which is not part"):
            assert hook.on_load_error("rexml")

    def test_silent_with_bundler(self, ruby_env):
        hook = LoadHook(ruby_env.create_engine(manifest_active=True))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            assert hook.on_load_error("rexml") is None
        assert caught == []
