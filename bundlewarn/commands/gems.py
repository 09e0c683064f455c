"""
GemsCommand — List tracked bundled gems for the target Ruby
"""

from typing import Dict, List, Optional

from ..commands.base import BaseCommand
from ..core.tables import version_older_than
from ..output import OutputSpec
from ..presentation.symbols import safe_print


class GemsCommand(BaseCommand):
    """Command for listing the classification tables."""

    def list_gems(self, output_format: Optional[str] = None) -> int:
        runtime = self.platform.runtime_version
        rows = self.rows()
        removed = sum(1 for row in rows if row["status"] == "removed")

        spec = OutputSpec(
            data={
                "rows": rows,
                "summary": f"{len(rows)} tracked name(s), {removed} no longer default gems on Ruby {runtime}",
            },
            shape="table",
            title=f"Bundled gems (Ruby {runtime})",
            columns=["Name", "Gem", "Since", "Match", "Status"],
            column_keys=["name", "gem", "since", "match", "status"],
            empty_message="No tracked gems.",
        )
        safe_print(self.render(spec, format=output_format))
        return 0

    def rows(self) -> List[Dict]:
        """One row per tracked name, sorted by name."""
        runtime = self.platform.runtime_version
        rows = []
        for name in self.tables.names():
            record = self.tables.get(name)
            since = self.tables.since(name)
            if since is None:
                status = "unknown"
            elif version_older_than(runtime, since):
                status = "deprecated"
            else:
                status = "removed"
            rows.append({
                "name": name,
                "gem": record.gem,
                "since": since,
                "match": record.match_strategy.value,
                "status": status,
            })
        return rows


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

def register_parser(subparsers):
    """Register gems command parser."""
    p = subparsers.add_parser('gems', help='List tracked bundled gems and their status')
    p.add_argument('--format', '-f', dest='output_format',
                   choices=['auto', 'table', 'list', 'json'],
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    """Handle gems command dispatch."""
    return cli._gems_cmd.list_gems(output_format=args.output_format)
