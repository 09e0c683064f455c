"""
Message Builder — Render the deprecation message for one gem

    "<name> which will no longer be part of the default gems since Ruby 3.4.0."
    "<name> which is not part of the default gems since Ruby 3.4.0."

followed by guidance: add the gem to the manifest when a manifest manager
(Bundler) is active, otherwise install it from the registry. With Bundler,
a requester living inside another installed gem also gets a clause naming
that gem, so its author can add the dependency to its gemspec.
"""

import os
import re
from typing import Optional, Sequence

from .frames import CallerFrame
from .tables import ClassificationTables, version_older_than

# Installed gem directory name: "<name>-<version>[-<platform>]". Versions are
# dotted numbers with optional tags (1.0.0.rc1), platforms start with a letter
_GEM_DIR = re.compile(
    r"^(?P<name>.+?)-(?P<version>\d+(?:\.[0-9A-Za-z]+)*)(?:-(?P<platform>[A-Za-z_][\w.\-]*))?$"
)


class MessageBuilder:
    """
    Builds messages from the classification tables.

    Args:
        tables: Classification tables (versions, labels, platform)
        manifest_active: True when a manifest manager (Bundler) is in use
        gem_roots: Package-installation roots for second-order attribution;
            defaults to the platform's gem paths
    """

    def __init__(
        self,
        tables: ClassificationTables,
        manifest_active: bool = False,
        gem_roots: Optional[Sequence[str]] = None
    ):
        self.tables = tables
        self.manifest_active = manifest_active
        if gem_roots is None:
            gem_roots = tables.platform.gem_paths
        self.gem_roots = [str(root).replace("\\", "/").rstrip("/") for root in gem_roots]

    def build(self, gem: str, attribution: Optional[CallerFrame] = None) -> str:
        """
        Render the message tail for `gem`.

        Args:
            gem: Gem name (must have an unbundled version in the tables)
            attribution: Frame used for second-order attribution, if any

        Returns:
            Message starting with " which ..." (the caller prepends the name)
        """
        tables = self.tables
        since = tables.since(gem)
        if since is None:
            raise KeyError(f"No unbundled version recorded for {gem!r}")

        current = tables.platform.runtime_version
        tense = "will no longer be" if version_older_than(current, since) else "is not"
        msg = f" which {tense} part of the default gems since {tables.runtime_label} {since}."

        if self.manifest_active:
            msg += f" Add {gem} to your {tables.manifest_label}."
            caller_gem = self.attribute(attribution)
            if caller_gem:
                msg += f" Also contact author of {caller_gem} to add {gem} into its gemspec."
        else:
            msg += f" Install {gem} from {tables.registry_label}."

        return msg

    def attribute(self, frame: Optional[CallerFrame]) -> Optional[str]:
        """
        Name of the installed gem whose file made the request, if any.

        Best effort: the frame must point at an existing file outside the
        standard library, under "<root>/gems/<name>-<version>/". The first
        matching root wins.
        """
        if frame is None:
            return None
        location = frame.location
        if not location or not os.path.isfile(location):
            return None

        location = str(location).replace("\\", "/")
        if location.startswith(self.tables.platform.lib_dir):
            return None

        for root in self.gem_roots:
            match = re.search(re.escape(root) + r"/gems/([\w\-.]+)", location)
            if not match:
                continue
            dir_match = _GEM_DIR.match(match.group(1))
            return dir_match.group("name") if dir_match else None
        return None
