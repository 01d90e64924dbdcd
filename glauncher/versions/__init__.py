"""Version management module."""

from .manager import VersionManager
from .download_manager import DownloadManager
from .resolver import VersionResolver, merge_descriptors
from .assets import AssetSynchronizer
from .rules import rules_allow
from .models import VersionManifest, VersionInfo, VersionDescriptor, VersionSummary, LaunchPlan

__all__ = [
    "VersionManager", "DownloadManager", "VersionResolver", "merge_descriptors", "AssetSynchronizer",
    "rules_allow", "VersionManifest", "VersionInfo", "VersionDescriptor", "VersionSummary", "LaunchPlan",
]
