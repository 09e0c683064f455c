"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.bundlewarn/config.yaml)
  3. User config (~/.bundlewarn/config.yaml)
  4. Defaults

Platform values (ruby.platform) are optional: when unset, the target Ruby
is probed once and the result cached in .bundlewarn/platform.json.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .presentation.symbols import get_symbols
from .services.lockfile import BUNDLER_SETTINGS
from .services.scanner import DEFAULT_EXCLUDES


DEFAULT_WORKERS = 4
VALID_SYMBOLS = ("unicode", "ascii", "auto")
VALID_FORMATS = ("auto", "table", "list", "json")

# Keys accepted under ruby.platform
PLATFORM_KEYS = ("rubylibdir", "rubyarchdir", "DLEXT", "ruby_version", "gem_path", "load_path")


@dataclass
class RubyConfig:
    """Target Ruby."""
    executable: str = "ruby"
    platform: Dict[str, Any] = field(default_factory=dict)  # Explicit RbConfig values

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.executable:
            return "Ruby executable must not be empty"
        unknown = [k for k in self.platform if k not in PLATFORM_KEYS]
        if unknown:
            return f"Unknown platform key(s): {', '.join(unknown)}. Valid: {', '.join(PLATFORM_KEYS)}"
        for key in ("gem_path", "load_path"):
            value = self.platform.get(key)
            if value is None or isinstance(value, str):
                continue
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                return f"ruby.platform.{key} must be a directory or a list of directories"
        return None


@dataclass
class AuditConfig:
    """Project audit preferences."""
    bundler: str = "auto"  # "auto" | "true" | "false"
    workers: int = DEFAULT_WORKERS
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.bundler not in BUNDLER_SETTINGS:
            return f"Unknown bundler setting '{self.bundler}'. Valid: {', '.join(BUNDLER_SETTINGS)}"
        if self.workers < 1:
            return "audit.workers must be >= 1"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "auto"   # "auto" | "table" | "list" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.symbols not in VALID_SYMBOLS:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(VALID_SYMBOLS)}"
        if self.format not in VALID_FORMATS:
            return f"Unknown format '{self.format}'. Valid: {', '.join(VALID_FORMATS)}"
        return None


@dataclass
class TablesConfig:
    """Additions to the built-in bundled-gem tables."""
    since: Dict[str, str] = field(default_factory=dict)
    exact: Dict[str, Any] = field(default_factory=dict)
    prefixed: List[str] = field(default_factory=list)


@dataclass
class Config:
    """Application configuration."""
    ruby: RubyConfig = field(default_factory=RubyConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    tables: TablesConfig = field(default_factory=TablesConfig)

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.ruby, self.audit, self.display):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "ruby": {
                "executable": self.ruby.executable,
                "platform": dict(self.ruby.platform),
            },
            "audit": {
                "bundler": self.audit.bundler,
                "workers": self.audit.workers,
                "exclude": list(self.audit.exclude),
            },
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format,
            },
            "tables": {
                "since": dict(self.tables.since),
                "exact": dict(self.tables.exact),
                "prefixed": list(self.tables.prefixed),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        ruby_data = data.get("ruby") or {}
        audit_data = data.get("audit") or {}
        display_data = data.get("display") or {}
        tables_data = data.get("tables") or {}

        return cls(
            ruby=RubyConfig(
                executable=ruby_data.get("executable") or "ruby",
                platform=dict(ruby_data.get("platform") or {}),
            ),
            audit=AuditConfig(
                bundler=_bundler_setting(audit_data.get("bundler", "auto")),
                workers=int(audit_data.get("workers", DEFAULT_WORKERS)),
                exclude=list(audit_data.get("exclude") or DEFAULT_EXCLUDES),
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "auto"),
            ),
            tables=TablesConfig(
                since={str(k): str(v) for k, v in (tables_data.get("since") or {}).items()},
                exact=dict(tables_data.get("exact") or {}),
                prefixed=[str(p) for p in tables_data.get("prefixed") or []],
            ),
        )


def _bundler_setting(value: Any) -> str:
    """YAML turns true/false into booleans; keep the setting a string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).lower()


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (BUNDLEWARN_RUBY, BUNDLEWARN_BUNDLER, BUNDLEWARN_WORKERS)
      2. Project config (.bundlewarn/config.yaml)
      3. User config (~/.bundlewarn/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".bundlewarn"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".bundlewarn"
    PROJECT_CONFIG_FILE = "config.yaml"
    PLATFORM_CACHE_FILE = "platform.json"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    @property
    def platform_cache_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PLATFORM_CACHE_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("BUNDLEWARN_RUBY"):
            config_data.setdefault("ruby", {})["executable"] = os.environ["BUNDLEWARN_RUBY"]
        if os.environ.get("BUNDLEWARN_BUNDLER"):
            config_data.setdefault("audit", {})["bundler"] = os.environ["BUNDLEWARN_BUNDLER"]
        if os.environ.get("BUNDLEWARN_WORKERS"):
            try:
                config_data.setdefault("audit", {})["workers"] = int(os.environ["BUNDLEWARN_WORKERS"])
            except ValueError:
                pass  # Non-numeric override: keep file/default value

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        """Read one config layer. Missing or malformed files contribute nothing."""
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore malformed config
        return data if isinstance(data, dict) else {}

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "audit.bundler")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'audit.bundler')"

        section, setting = parts

        if section == "ruby":
            if setting == "executable":
                config.ruby.executable = value
            else:
                return f"Unknown ruby setting: {setting}. Valid: executable"
            error = config.ruby.validate()

        elif section == "audit":
            if setting == "bundler":
                config.audit.bundler = value.lower()
            elif setting == "workers":
                try:
                    config.audit.workers = int(value)
                except ValueError:
                    return f"audit.workers must be a number, got '{value}'"
            else:
                return f"Unknown audit setting: {setting}. Valid: bundler, workers"
            error = config.audit.validate()

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            elif setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols, format"
            error = config.display.validate()

        else:
            return f"Unknown section: {section}. Valid: ruby, audit, display"

        if error:
            self._config = None  # Drop the rejected in-memory change
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "ruby" and setting == "executable":
            return config.ruby.executable
        if section == "audit":
            if setting == "bundler":
                return config.audit.bundler
            if setting == "workers":
                return str(config.audit.workers)
        if section == "display":
            if setting == "symbols":
                return config.display.symbols
            if setting == "format":
                return config.display.format

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        platform_status = (
            f"{symbols.check_pass} Configured" if config.ruby.platform
            else f"Probed from {config.ruby.executable}"
        )
        lines = [
            "Ruby:",
            f"  Executable: {config.ruby.executable}",
            f"  Platform: {platform_status}",
            "",
            "Audit:",
            f"  Bundler: {config.audit.bundler}",
            f"  Workers: {config.audit.workers}",
            f"  Exclude: {', '.join(config.audit.exclude)}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
        ]

        extra = len(config.tables.since) + len(config.tables.exact) + len(config.tables.prefixed)
        if extra:
            lines.extend(["", f"Tables: {extra} custom entr{'y' if extra == 1 else 'ies'}"])

        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
