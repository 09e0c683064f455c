"""
Core — Classification tables, path classifier and warning engine

Pure library code: no subprocesses, no file parsing. Host collaborators
(loader, caller frames, installed specs) are injected.
"""

from .errors import BundleWarnError, PlatformConfigError, TablesError
from .tables import (
    ClassificationTables,
    LibraryRecord,
    MatchStrategy,
    PlatformConfig,
    parse_version,
    version_older_than,
)
from .classifier import Classification, PathClassifier, classify
from .ledger import WarnedLedger
from .frames import CallerFrame, CallerStack, RecordedCallerStack
from .message import MessageBuilder
from .engine import ResolvedFeature, WarningEngine, normalize_feature
from .hook import LoadHook, UnbundledGemWarning

__all__ = [
    'BundleWarnError', 'PlatformConfigError', 'TablesError',
    'ClassificationTables', 'LibraryRecord', 'MatchStrategy', 'PlatformConfig',
    'parse_version', 'version_older_than',
    'Classification', 'PathClassifier', 'classify',
    'WarnedLedger',
    'CallerFrame', 'CallerStack', 'RecordedCallerStack',
    'MessageBuilder',
    'ResolvedFeature', 'WarningEngine', 'normalize_feature',
    'LoadHook', 'UnbundledGemWarning',
]
