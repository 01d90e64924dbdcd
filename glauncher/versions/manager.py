"""Version manifest service: remote catalog merged with locally installed versions."""

import asyncio
import json
import logging
from typing import List, Optional

import aiofiles
import aiohttp
from pydantic import ValidationError

from ..config import LauncherConfig
from ..errors import ManifestFetchError
from ..utils.async_http import AsyncHTTPClient
from .models import VersionManifest, VersionInfo, VersionSummary

logger = logging.getLogger(__name__)


class VersionManager:
    def __init__(self, config: LauncherConfig, http: Optional[AsyncHTTPClient] = None):
        self.config = config
        self.http = http or AsyncHTTPClient()
        self._owns_http = http is None
        self._manifest: Optional[VersionManifest] = None

    async def __aenter__(self):
        if self._owns_http:
            await self.http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._owns_http:
            await self.http.__aexit__(exc_type, exc, tb)

    async def fetch_manifest(self) -> VersionManifest:
        """Fetch the launcher version manifest, once per manager."""
        if self._manifest is not None:
            return self._manifest
        try:
            data = await self.http.get_json(self.config.manifest_url)
            self._manifest = VersionManifest(**data)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, TypeError) as e:
            # pydantic's ValidationError is a ValueError
            raise ManifestFetchError(f"Could not fetch version manifest from {self.config.manifest_url}: {e}") from e
        return self._manifest

    async def get_version_info(self, version_id: str) -> Optional[VersionInfo]:
        """Get the manifest entry of a specific version."""
        manifest = await self.fetch_manifest()
        return manifest.find(version_id)

    async def list_versions(self) -> List[VersionSummary]:
        """All remote versions plus installed ones the catalog does not know, newest first."""
        manifest = await self.fetch_manifest()
        versions = [
            VersionSummary(id=v.id, type=v.type, releaseTime=v.releaseTime, url=v.url)
            for v in manifest.versions
        ]
        known = {v.id for v in versions}
        versions.extend(await self.scan_local_versions(known))
        versions.sort(key=lambda v: v.sort_key, reverse=True)
        return versions

    async def scan_local_versions(self, known: set) -> List[VersionSummary]:
        """Installed versions whose ids are not in ``known``. Never writes."""
        versions_dir = self.config.versions_dir
        if not versions_dir.is_dir():
            return []

        local = []
        for entry in sorted(versions_dir.iterdir()):
            if not entry.is_dir() or entry.name in known:
                continue
            json_path = entry / f"{entry.name}.json"
            if not json_path.is_file():
                continue
            try:
                async with aiofiles.open(json_path, 'r', encoding='utf-8') as f:
                    data = json.loads(await f.read())
                summary = {"id": entry.name, "type": data.get("type") or "local"}
                if data.get("releaseTime"):
                    summary["releaseTime"] = data["releaseTime"]
                local.append(VersionSummary(**summary))
            except (OSError, ValueError, AttributeError, ValidationError) as e:
                logger.warning("Skipping unreadable local version %s: %s", entry.name, e)
        return local
