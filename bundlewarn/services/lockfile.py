"""
Lockfile — Installed specs and manifest-manager detection

Reads Gemfile.lock. Spec lines sit under a "specs:" heading, indented four
spaces:

    GEM
      remote: https://rubygems.org/
      specs:
        csv (3.3.0)
        nokogiri (1.16.0-x86_64-linux)
          racc (~> 1.4)

Six-space lines are dependency constraints, not installed specs.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

_SPEC_LINE = re.compile(r"^    (?P<name>[^\s(]+)(?: \((?P<version>[^)]*)\))?\s*$")

BUNDLER_SETTINGS = ("auto", "true", "false")


@dataclass(frozen=True)
class InstalledSpec:
    """A dependency already satisfied by the package manager."""
    name: str
    version: Optional[str] = None


def parse_lockfile(text: str) -> List[InstalledSpec]:
    """Parse Gemfile.lock content into installed specs (in file order, unique)."""
    specs: List[InstalledSpec] = []
    seen = set()
    in_specs = False

    for line in text.splitlines():
        if not line.strip():
            in_specs = False
            continue
        if not line.startswith(" "):
            in_specs = False
            continue
        if line.strip() == "specs:":
            in_specs = True
            continue
        if not in_specs:
            continue

        match = _SPEC_LINE.match(line)
        if match and match.group("name") not in seen:
            seen.add(match.group("name"))
            specs.append(InstalledSpec(match.group("name"), match.group("version")))

    return specs


def read_lockfile(path: Union[str, Path]) -> List[InstalledSpec]:
    """Read installed specs from a lockfile; a missing file has none."""
    path = Path(path)
    if not path.exists():
        return []
    return parse_lockfile(path.read_text(encoding="utf-8"))


def find_gemfile(project_dir: Union[str, Path]) -> Optional[Path]:
    """Gemfile in use: BUNDLE_GEMFILE, else Gemfile/gems.rb in the project."""
    override = os.environ.get("BUNDLE_GEMFILE")
    if override:
        return Path(override)
    project_dir = Path(project_dir)
    for name in ("Gemfile", "gems.rb"):
        candidate = project_dir / name
        if candidate.exists():
            return candidate
    return None


def lockfile_for(gemfile: Path) -> Path:
    """Lockfile that belongs to a Gemfile ("Gemfile" -> "Gemfile.lock", "gems.rb" -> "gems.locked")."""
    if gemfile.name == "gems.rb":
        return gemfile.with_name("gems.locked")
    return gemfile.with_name(gemfile.name + ".lock")


def manifest_manager_active(project_dir: Union[str, Path], setting: str = "auto") -> bool:
    """
    Whether Bundler counts as active for this project.

    Args:
        project_dir: Project root
        setting: "true" / "false" force it; "auto" detects a Gemfile
    """
    setting = str(setting).lower()
    if setting in ("true", "on", "yes", "1"):
        return True
    if setting in ("false", "off", "no", "0"):
        return False
    return find_gemfile(project_dir) is not None


def load_installed_specs(project_dir: Union[str, Path]) -> List[InstalledSpec]:
    """Installed specs for a project, from the lockfile next to its Gemfile."""
    gemfile = find_gemfile(project_dir)
    if gemfile is None:
        return []
    return read_lockfile(lockfile_for(gemfile))
