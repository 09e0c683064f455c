"""
Services — Host-side collaborators for the warning engine

- platform: probe RbConfig from the target Ruby
- loader: resolve features against a load path
- lockfile: installed specs and Bundler detection
- scanner: tree-sitter require extraction
- audit: scan + evaluate a whole project
"""

from .platform import PlatformProbe, platform_from_settings
from .loader import FeatureResolver
from .lockfile import (
    InstalledSpec,
    parse_lockfile,
    read_lockfile,
    load_installed_specs,
    manifest_manager_active,
)
from .scanner import RequireScanner, RequireSite, iter_ruby_files
from .audit import AuditService, AuditReport, Finding

__all__ = [
    'PlatformProbe', 'platform_from_settings',
    'FeatureResolver',
    'InstalledSpec', 'parse_lockfile', 'read_lockfile', 'load_installed_specs',
    'manifest_manager_active',
    'RequireScanner', 'RequireSite', 'iter_ruby_files',
    'AuditService', 'AuditReport', 'Finding',
]
