"""Launcher configuration."""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .utils.platform import current_arch, current_os


class LauncherConfig(BaseModel):
    """Every tunable of the launcher core. All storage lives below ``data_dir``."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".minecraft")
    manifest_url: str = "https://launchermeta.mojang.com/mc/game/version_manifest.json"
    resources_url: str = "https://resources.download.minecraft.net"

    launcher_name: str = "GLauncher"
    launcher_version: str = "1.2.0"
    client_id: str = "GLauncher_ClientID"

    concurrent_downloads: int = 8
    download_retries: int = 2
    retry_backoff: float = 0.5
    progress_interval: float = 0.5

    java_path: Optional[str] = None
    extra_jvm_args: List[str] = Field(default_factory=list)

    os_name: str = Field(default_factory=current_os)
    arch: str = Field(default_factory=current_arch)

    @classmethod
    def from_env(cls, **overrides) -> "LauncherConfig":
        """Build a config from ``GLAUNCHER_*`` environment variables."""
        values = {}
        if os.environ.get("GLAUNCHER_DATA_DIR"):
            values["data_dir"] = Path(os.environ["GLAUNCHER_DATA_DIR"]).expanduser()
        if os.environ.get("GLAUNCHER_JAVA"):
            values["java_path"] = os.environ["GLAUNCHER_JAVA"]
        if os.environ.get("GLAUNCHER_CONCURRENT_DOWNLOADS"):
            values["concurrent_downloads"] = int(os.environ["GLAUNCHER_CONCURRENT_DOWNLOADS"])
        values.update(overrides)
        return cls(**values)

    @property
    def versions_dir(self) -> Path:
        return self.data_dir / "versions"

    @property
    def libraries_dir(self) -> Path:
        return self.data_dir / "libraries"

    @property
    def assets_dir(self) -> Path:
        return self.data_dir / "assets"

    def natives_dir(self, version_id: str) -> Path:
        return self.data_dir / "natives" / version_id

    def version_json_path(self, version_id: str) -> Path:
        return self.versions_dir / version_id / f"{version_id}.json"

    def version_jar_path(self, version_id: str) -> Path:
        return self.versions_dir / version_id / f"{version_id}.jar"
