"""
Audit Service — Run the warning engine over a whole project

Two phases:
1. Scan: parse every Ruby file for require sites (thread pool, I/O and
   tree-sitter parsing)
2. Evaluate: feed each site to the engine in path/line order, with the
   requiring file as the caller frame

Evaluation is ordered so the same project always attributes a warning to
the same (first) require site; the engine's ledger makes every gem warn at
most once per audit.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.engine import WarningEngine
from ..core.frames import CallerFrame, RecordedCallerStack
from .scanner import RequireScanner, RequireSite

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


@dataclass(frozen=True)
class Finding:
    """A require site that produced a warning."""
    site: RequireSite
    message: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.site.to_dict()
        data["message"] = self.message
        return data


@dataclass
class AuditReport:
    """Result of one audit run."""
    findings: List[Finding] = field(default_factory=list)
    files_scanned: int = 0
    requires_seen: int = 0

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "requires_seen": self.requires_seen,
            "findings": [f.to_dict() for f in self.findings],
        }


class AuditService:
    """
    Audits Ruby files for requires of unbundled gems.

    Args:
        engine: Warning engine (its ledger is shared by the whole audit)
        specs: Installed specs from the lockfile
        scanner: Require scanner (a default one if None)
        workers: Scan threads; 1 scans sequentially
    """

    def __init__(
        self,
        engine: WarningEngine,
        specs: Sequence[Any] = (),
        scanner: Optional[RequireScanner] = None,
        workers: int = DEFAULT_WORKERS
    ):
        self.engine = engine
        self.specs = list(specs)
        self.scanner = scanner or RequireScanner()
        self.workers = max(1, int(workers))

    def audit(self, files: Iterable[Path]) -> AuditReport:
        """Audit the given files."""
        files = list(files)
        sites = self.scan(files)

        report = AuditReport(files_scanned=len(files), requires_seen=len(sites))
        for site in sites:
            message = self.evaluate(site)
            if message:
                report.findings.append(Finding(site=site, message=message))

        logger.info(
            "audited %d file(s), %d require(s), %d finding(s)",
            report.files_scanned, report.requires_seen, len(report.findings)
        )
        return report

    def scan(self, files: List[Path]) -> List[RequireSite]:
        """Collect require sites from all files, sorted by path and line."""
        if self.workers == 1 or len(files) <= 1:
            per_file = [self.scanner.scan(path) for path in files]
        else:
            with ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="bundlewarn-scan-"
            ) as pool:
                per_file = list(pool.map(self.scanner.scan, files))

        sites = [site for file_sites in per_file for site in file_sites]
        sites.sort(key=lambda s: (s.path, s.line))
        return sites

    def evaluate(self, site: RequireSite) -> Optional[str]:
        """Evaluate one require site with its file as the requester."""
        stack = RecordedCallerStack([CallerFrame.for_file(site.path, site.line)])
        return self.engine.evaluate_load(site.feature, self.specs, stack)
