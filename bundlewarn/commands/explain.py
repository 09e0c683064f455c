"""
ExplainCommand — Explain what loading one feature would report

Runs a single feature through the warning engine as a top-level require.
A feature that no longer resolves gets the missing-gem explanation; a name
the tables don't know gets "did you mean" suggestions.
"""

from typing import List, Optional

from rapidfuzz import fuzz, process

from ..commands.base import BaseCommand
from ..core.engine import normalize_feature
from ..output import OutputSpec
from ..presentation.symbols import safe_print

SUGGESTION_LIMIT = 3
SUGGESTION_CUTOFF = 60  # rapidfuzz score, 0-100


class ExplainCommand(BaseCommand):
    """Command for single-feature explanations."""

    def explain(self, feature: str, output_format: Optional[str] = None) -> int:
        """
        Explain one feature.

        Returns:
            1 when a warning or explanation applies, else 0
        """
        symbols = self.symbols
        name = self.platform.strip_library_suffix(normalize_feature(feature))
        engine = self.engine()

        message = engine.evaluate_load(feature, self.specs)
        status = "warning"
        if message is None and not engine.resolver.resolve_feature_path(feature):
            message = engine.explain_missing(name)
            status = "missing"

        if message:
            data = {"feature": name, "status": status, "message": message}
            text = f"{symbols.check_warn} {message}"
        else:
            data = {"feature": name, "status": "ok", "message": self._clean_reason(name)}
            suggestions = self.suggest(name)
            if suggestions:
                data["suggestions"] = suggestions
            text = f"{symbols.check_pass} {data['message']}"
            if suggestions:
                text += f"\nDid you mean: {', '.join(suggestions)}?"

        if (output_format or self.config.display.format) == "json":
            safe_print(self.render(OutputSpec(data=data), format="json"))
        else:
            safe_print(text)
        return 1 if message else 0

    def suggest(self, name: str) -> List[str]:
        """Close table names for a name the tables don't track."""
        if self.tables.get(name) is not None:
            return []
        matches = process.extract(
            name,
            self.tables.names(),
            scorer=fuzz.ratio,
            limit=SUGGESTION_LIMIT,
            score_cutoff=SUGGESTION_CUTOFF,
        )
        return [match[0] for match in matches]

    def _clean_reason(self, name: str) -> str:
        if any(getattr(spec, "name", spec) == name for spec in self.specs):
            return f"{name} is provided by an installed gem."
        if self.tables.get(name) is None:
            return f"{name} is not a tracked bundled gem."
        return f"{name} loads without a warning on Ruby {self.platform.runtime_version}."


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

def register_parser(subparsers):
    """Register explain command parser."""
    p = subparsers.add_parser('explain', help='Explain the warning for one feature')
    p.add_argument('feature', help='Feature name (e.g., csv, csv/parser, kconv)')
    p.add_argument('--format', '-f', dest='output_format',
                   choices=['auto', 'list', 'json'],
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    """Handle explain command dispatch."""
    return cli._explain_cmd.explain(args.feature, output_format=args.output_format)
