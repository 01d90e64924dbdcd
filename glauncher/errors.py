"""Launcher error taxonomy."""

from typing import List, Optional


class LauncherError(Exception):
    """Base class for every failure that aborts a launch attempt."""


class ManifestFetchError(LauncherError):
    pass


class VersionNotFoundError(LauncherError):
    def __init__(self, version_id: str):
        super().__init__(f"Version {version_id} is neither installed nor listed in the version manifest")
        self.version_id = version_id


class CyclicInheritanceError(LauncherError):
    def __init__(self, chain: List[str]):
        super().__init__("Cyclic inheritsFrom chain: " + " -> ".join(chain))
        self.chain = chain


class VersionParseError(LauncherError):
    pass


class DownloadError(LauncherError):
    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class ExtractionError(LauncherError):
    pass


class LaunchSpawnError(LauncherError):
    pass
