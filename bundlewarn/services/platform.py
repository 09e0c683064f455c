"""
Platform Probe — Read RbConfig from the target Ruby, once

Runs the Ruby executable with a short script that prints the values the
classifier needs (library directories, DLEXT, RUBY_VERSION, Gem.path,
$LOAD_PATH) as JSON. The result is cached next to the project config so
later runs skip the subprocess.

Any failure here is fatal: without library directories every later
classification would be meaningless.
"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

from ..core.errors import PlatformConfigError
from ..core.tables import PlatformConfig

logger = logging.getLogger(__name__)


PROBE_SCRIPT = (
    'require "rbconfig"; require "json"; '
    'c = RbConfig::CONFIG; '
    'print JSON.generate({'
    '"rubylibdir" => c["rubylibdir"], '
    '"rubyarchdir" => c["rubyarchdir"], '
    '"DLEXT" => c["DLEXT"], '
    '"ruby_version" => RUBY_VERSION, '
    '"gem_path" => Gem.path, '
    '"load_path" => $LOAD_PATH'
    '})'
)

PROBE_TIMEOUT = 30.0  # seconds


class PlatformProbe:
    """
    Loads PlatformConfig for a Ruby executable.

    Args:
        ruby: Ruby executable name or path
        cache_path: JSON cache file (no caching if None)
        timeout: Subprocess timeout in seconds
    """

    def __init__(
        self,
        ruby: str = "ruby",
        cache_path: Optional[Path] = None,
        timeout: float = PROBE_TIMEOUT
    ):
        self.ruby = ruby
        self.cache_path = Path(cache_path) if cache_path else None
        self.timeout = timeout

    def load(self, refresh: bool = False) -> PlatformConfig:
        """
        Return the platform configuration.

        Args:
            refresh: Ignore the cache and probe again

        Raises:
            PlatformConfigError: If Ruby cannot be probed or reports no
                library directories
        """
        if not refresh:
            cached = self._read_cache()
            if cached is not None:
                return cached

        data = self.probe()
        platform = PlatformConfig.from_dict(data)
        self._write_cache(platform)
        return platform

    def probe(self) -> Dict[str, Any]:
        """Run Ruby and return the raw RbConfig values."""
        cmd = [self.ruby, "-e", PROBE_SCRIPT]
        logger.debug("probing platform: %s", self.ruby)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise PlatformConfigError(f"Ruby executable not found: {self.ruby}") from e
        except subprocess.TimeoutExpired as e:
            raise PlatformConfigError(f"Ruby probe timed out after {self.timeout}s") from e

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise PlatformConfigError(f"Ruby probe failed: {detail}")

        try:
            data = orjson.loads(result.stdout)
        except orjson.JSONDecodeError as e:
            raise PlatformConfigError(f"Ruby probe returned malformed output: {e}") from e

        if not isinstance(data, dict):
            raise PlatformConfigError("Ruby probe returned malformed output")
        return data

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    def _read_cache(self) -> Optional[PlatformConfig]:
        if self.cache_path is None or not self.cache_path.exists():
            return None
        try:
            payload = orjson.loads(self.cache_path.read_bytes())
            if payload.get("ruby") != self.ruby:
                return None
            platform = PlatformConfig.from_dict(payload["platform"])
        except (orjson.JSONDecodeError, KeyError, AttributeError, PlatformConfigError) as e:
            logger.warning("ignoring unreadable platform cache %s: %s", self.cache_path, e)
            return None
        logger.info("platform loaded from cache %s", self.cache_path)
        return platform

    def _write_cache(self, platform: PlatformConfig) -> None:
        if self.cache_path is None:
            return
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"ruby": self.ruby, "platform": platform.to_dict()}
        self.cache_path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))


def platform_from_settings(settings: Dict[str, Any]) -> Optional[PlatformConfig]:
    """
    Build PlatformConfig from explicit config values, if any are set.

    Returns None when no platform values are configured (use the probe).
    """
    if not settings:
        return None
    if not any(settings.get(key) for key in ("rubylibdir", "rubyarchdir", "ruby_version")):
        return None
    return PlatformConfig.from_dict(settings)
