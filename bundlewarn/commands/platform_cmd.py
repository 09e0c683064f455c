"""
PlatformCommand — Show the target Ruby's platform values

Values come from ruby.platform in configuration when set, otherwise from
the cached probe (.bundlewarn/platform.json). --refresh probes again.
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..output import OutputSpec
from ..presentation.symbols import safe_print


class PlatformCommand(BaseCommand):
    """Command for platform inspection."""

    def show(self, refresh: bool = False, output_format: Optional[str] = None) -> int:
        if refresh:
            self._cli.refresh_platform()
        platform = self.platform

        if (output_format or self.config.display.format) == "json":
            safe_print(self.render(OutputSpec(data=platform.to_dict()), format="json"))
            return 0

        rows = [
            {"key": "ruby", "value": self.config.ruby.executable},
            {"key": "ruby_version", "value": platform.runtime_version},
            {"key": "rubylibdir", "value": platform.lib_dir},
            {"key": "rubyarchdir", "value": platform.arch_dir},
            {"key": "DLEXT", "value": platform.dlext},
            {"key": "gem_path", "value": platform.gem_paths},
            {"key": "load_path", "value": f"{len(platform.load_path)} dir(s)"},
        ]
        spec = OutputSpec(
            data={"rows": rows, "summary": f"Source: {self._cli.platform_source}"},
            shape="table",
            columns=["Key", "Value"],
            column_keys=["key", "value"],
        )
        safe_print(self.render(spec, format=output_format))
        return 0


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

COMMAND_NAME = 'platform'


def register_parser(subparsers):
    """Register platform command parser."""
    p = subparsers.add_parser('platform', help='Show the target Ruby platform values')
    p.add_argument('--refresh', action='store_true',
                   help='Probe Ruby again instead of using the cache')
    p.add_argument('--format', '-f', dest='output_format',
                   choices=['auto', 'table', 'list', 'json'],
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    """Handle platform command dispatch."""
    return cli._platform_cmd.show(refresh=args.refresh, output_format=args.output_format)
