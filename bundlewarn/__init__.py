"""
bundlewarn — Bundled-gem deprecation warnings for Ruby projects

Finds requires of libraries that left Ruby's default gem set and says
which gem to add to the Gemfile or gemspec.

Usage:
    bundlewarn check
    bundlewarn check lib/ --format json
    bundlewarn explain csv/parser
    bundlewarn gems
    bundlewarn platform --refresh
    bundlewarn config --set audit.bundler=true
"""

__version__ = "0.1.0"

# Core layer (rules)
from .core.errors import BundleWarnError, PlatformConfigError, TablesError
from .core.tables import ClassificationTables, LibraryRecord, MatchStrategy, PlatformConfig
from .core.classifier import PathClassifier, classify
from .core.ledger import WarnedLedger
from .core.frames import CallerFrame, RecordedCallerStack
from .core.engine import WarningEngine
from .core.hook import LoadHook, UnbundledGemWarning

# Services layer (Ruby-facing)
from .services.platform import PlatformProbe
from .services.loader import FeatureResolver
from .services.audit import AuditService, AuditReport

# Config
from .config import Config, ConfigManager, get_config

__all__ = [
    '__version__',
    'BundleWarnError', 'PlatformConfigError', 'TablesError',
    'ClassificationTables', 'LibraryRecord', 'MatchStrategy', 'PlatformConfig',
    'PathClassifier', 'classify',
    'WarnedLedger',
    'CallerFrame', 'RecordedCallerStack',
    'WarningEngine',
    'LoadHook', 'UnbundledGemWarning',
    'PlatformProbe', 'FeatureResolver', 'AuditService', 'AuditReport',
    'Config', 'ConfigManager', 'get_config',
]
