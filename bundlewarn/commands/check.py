"""
CheckCommand — Audit a project for requires of unbundled gems

Scans Ruby sources with tree-sitter, resolves every literal require
against the target Ruby and reports each gem at most once, at its first
require site (path, then line order).
"""

from pathlib import Path
from typing import List, Optional

from ..commands.base import BaseCommand
from ..core.errors import BundleWarnError
from ..output import OutputSpec
from ..presentation.symbols import safe_print
from ..services.audit import AuditService, AuditReport
from ..services.scanner import RequireScanner, iter_ruby_files


class CheckCommand(BaseCommand):
    """Command for project audits."""

    def check(
        self,
        paths: Optional[List[str]] = None,
        output_format: Optional[str] = None,
        bundler: Optional[str] = None
    ) -> int:
        """
        Audit paths (default: the project directory).

        Args:
            paths: Files or directories to audit
            output_format: Override display.format
            bundler: Override audit.bundler ("auto", "on", "off")

        Returns:
            1 when findings exist, else 0
        """
        scanner = RequireScanner()
        if not scanner.is_available:
            raise BundleWarnError(
                "Ruby grammar unavailable: install tree-sitter-language-pack"
            )

        files = self.collect_files(paths)
        service = AuditService(
            self.engine(bundler),
            specs=self.specs,
            scanner=scanner,
            workers=self.config.audit.workers,
        )
        report = service.audit(files)

        safe_print(self.render(self.report_spec(report), format=output_format))
        return 1 if report.has_findings else 0

    def collect_files(self, paths: Optional[List[str]] = None) -> List[Path]:
        """Ruby files under the given paths, relative paths anchored at the project."""
        roots = [Path(p) for p in paths] if paths else [self.project_dir]
        files: List[Path] = []
        seen = set()
        for root in roots:
            if not root.is_absolute():
                root = self.project_dir / root
            if not root.exists():
                raise BundleWarnError(f"No such file or directory: {root}")
            for path in iter_ruby_files(root, self.config.audit.exclude):
                if path not in seen:
                    seen.add(path)
                    files.append(path)
        return files

    def report_spec(self, report: AuditReport) -> OutputSpec:
        symbols = self.symbols
        count = len(report.findings)
        if count:
            summary = (
                f"{symbols.check_fail} {count} unbundled gem require(s) "
                f"in {report.files_scanned} file(s)"
            )
        else:
            summary = (
                f"{symbols.check_pass} No unbundled gem requires "
                f"({report.requires_seen} require(s) in {report.files_scanned} file(s))"
            )

        data = report.to_dict()
        data["items"] = data.pop("findings")
        data["summary"] = summary
        return OutputSpec(
            data=data,
            shape="list",
            columns=["Path", "Line", "Feature", "Message"],
            column_keys=["path", "line", "feature", "message"],
            empty_message="No findings.",
        )


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

def register_parser(subparsers):
    """Register check command parser."""
    p = subparsers.add_parser('check', help='Audit Ruby sources for requires of unbundled gems')
    p.add_argument('paths', nargs='*',
                   help='Files or directories to audit (default: project directory)')
    p.add_argument('--format', '-f', dest='output_format',
                   choices=['auto', 'table', 'list', 'json'],
                   help='Output format (default: display.format)')
    p.add_argument('--bundler', choices=['auto', 'on', 'off'],
                   help='Treat the project as using Bundler (default: audit.bundler)')
    return p


def handle(cli, args):
    """Handle check command dispatch."""
    return cli._check_cmd.check(
        paths=args.paths,
        output_format=args.output_format,
        bundler=args.bundler
    )
