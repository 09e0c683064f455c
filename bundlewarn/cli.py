"""
CLI -- Command interface

Audits a Ruby project for requires of gems that left (or are leaving) the
default gem set, using the same rules Ruby applies at load time.

Resources are built lazily: `bundlewarn config` never starts Ruby, and the
platform probe runs once per project (cached in .bundlewarn/platform.json).
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .core.engine import WarningEngine
from .core.errors import BundleWarnError
from .core.tables import ClassificationTables, PlatformConfig
from .output import OutputSpec, render as output_render
from .presentation.symbols import get_symbols
from .services.loader import FeatureResolver
from .services.lockfile import load_installed_specs, manifest_manager_active
from .services.platform import PlatformProbe, platform_from_settings
from .commands.check import CheckCommand
from .commands.explain import ExplainCommand
from .commands.gems import GemsCommand
from .commands.platform_cmd import PlatformCommand
from .commands.config_cmd import ConfigCommand
from . import __version__

logger = logging.getLogger(__name__)


class BundleWarnCLI:
    """Command-line interface for bundled-gem audits."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir).resolve()
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        error = self.config.validate()
        if error:
            raise BundleWarnError(f"Invalid configuration: {error}")

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        # Ruby resources (lazy init on first use)
        self._platform: Optional[PlatformConfig] = None
        self._tables: Optional[ClassificationTables] = None
        self._resolver: Optional[FeatureResolver] = None
        self._specs = None
        self.platform_source = "not loaded"

        # Initialize command handlers
        self._check_cmd = CheckCommand(self)
        self._explain_cmd = ExplainCommand(self)
        self._gems_cmd = GemsCommand(self)
        self._platform_cmd = PlatformCommand(self)
        self._config_cmd = ConfigCommand(self)

    # =========================================================================
    # Lazy resources
    # =========================================================================

    @property
    def platform(self) -> PlatformConfig:
        """
        Platform values of the target Ruby.

        Configured values (ruby.platform) win; otherwise Ruby is probed.
        """
        if self._platform is None:
            configured = platform_from_settings(self.config.ruby.platform)
            if configured is not None:
                self._platform = configured
                self.platform_source = "configuration (ruby.platform)"
            else:
                self._platform = self._probe().load()
                self.platform_source = f"probe of {self.config.ruby.executable}"
        return self._platform

    def refresh_platform(self) -> PlatformConfig:
        """Probe again, bypassing and rewriting the cache."""
        self._platform = self._probe().load(refresh=True)
        self.platform_source = f"probe of {self.config.ruby.executable} (refreshed)"
        self._tables = None
        self._resolver = None
        return self._platform

    def _probe(self) -> PlatformProbe:
        return PlatformProbe(
            ruby=self.config.ruby.executable,
            cache_path=self.config_manager.platform_cache_path,
        )

    @property
    def tables(self) -> ClassificationTables:
        if self._tables is None:
            extra = self.config.tables
            self._tables = ClassificationTables.build(
                self.platform,
                since=extra.since,
                exact=extra.exact,
                prefixed=extra.prefixed,
            )
        return self._tables

    @property
    def resolver(self) -> FeatureResolver:
        if self._resolver is None:
            self._resolver = FeatureResolver.for_platform(self.platform)
        return self._resolver

    @property
    def specs(self):
        if self._specs is None:
            self._specs = load_installed_specs(self.project_dir)
        return self._specs

    def make_engine(self, bundler: Optional[str] = None) -> WarningEngine:
        """
        Build a warning engine with a fresh ledger.

        Args:
            bundler: Override audit.bundler ("auto", "on", "off", ...)
        """
        setting = bundler or self.config.audit.bundler
        active = manifest_manager_active(self.project_dir, setting)
        logger.debug("bundler setting %s -> active=%s", setting, active)
        return WarningEngine(self.tables, self.resolver, manifest_active=active)

    def render(self, spec: OutputSpec, format: Optional[str] = None, full: bool = False) -> str:
        """
        Render OutputSpec with the configured symbols and format.

        Centralized render method for all command output.
        """
        return output_render(
            spec,
            format=format or self.config.display.format,
            symbols=self.symbols,
            full=full
        )


def configure_logging(verbose: bool = False) -> None:
    """Root logging setup: WARNING by default, DEBUG with -v."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    """
    Main entry point for bundlewarn CLI.

    Uses command registry pattern for modular command handling.
    Parser definitions and dispatch logic are in individual command modules.

    Returns:
        Exit status: 0 clean, 1 findings, 2 errors
    """
    parser = argparse.ArgumentParser(
        prog="bundlewarn",
        description="bundlewarn -- Find requires of gems that are no longer bundled with Ruby",
        epilog="Add the reported gems to your Gemfile or gemspec."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("BUNDLEWARN_PROJECT_PATH", "."),
        help='Project directory (default: BUNDLEWARN_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'bundlewarn {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    try:
        cli = BundleWarnCLI(Path(args.project))
        return dispatch(args.command, cli, args) or 0
    except BundleWarnError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
