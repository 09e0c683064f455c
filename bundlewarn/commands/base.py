"""
BaseCommand — Shared foundation for all CLI commands

Provides access to CLI resources via composition.
Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..cli import BundleWarnCLI
    from ..output import OutputSpec


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reinitialize resources — they access them via the CLI
    instance, which builds each one lazily on first use.
    """

    def __init__(self, cli: 'BundleWarnCLI'):
        self._cli = cli

    # -------------------------------------------------------------------------
    # Core resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    # -------------------------------------------------------------------------
    # Ruby resources (probed on first access)
    # -------------------------------------------------------------------------

    @property
    def platform(self):
        """PlatformConfig of the target Ruby."""
        return self._cli.platform

    @property
    def tables(self):
        """Classification tables for the target Ruby."""
        return self._cli.tables

    @property
    def resolver(self):
        """Feature resolver over the target Ruby's load path."""
        return self._cli.resolver

    @property
    def specs(self):
        """Installed specs from the project's lockfile."""
        return self._cli.specs

    def engine(self, bundler: Optional[str] = None):
        """Fresh warning engine (one ledger per command run)."""
        return self._cli.make_engine(bundler)

    def render(self, spec: 'OutputSpec', format: Optional[str] = None) -> str:
        """Render with the configured format unless one is given."""
        return self._cli.render(spec, format=format)
