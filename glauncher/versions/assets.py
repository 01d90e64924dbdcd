"""Asset synchronization: asset index plus content-addressed objects."""

import asyncio
import json
import logging
from collections import Counter
from typing import Optional

import aiofiles
from pydantic import ValidationError

from ..config import LauncherConfig
from ..errors import DownloadError
from ..events import EventSink
from .download_manager import DownloadManager
from .models import AssetIndex, VersionDescriptor

logger = logging.getLogger(__name__)


class AssetSynchronizer:
    def __init__(self, config: LauncherConfig, downloads: DownloadManager, events: Optional[EventSink] = None):
        self.config = config
        self.downloads = downloads
        self.events = events or downloads.events

    async def load_index(self, descriptor: VersionDescriptor) -> AssetIndex:
        ref = descriptor.assetIndex
        index_path = self.config.assets_dir / "indexes" / f"{ref.id}.json"
        await self.downloads.fetch(ref.url, index_path)
        try:
            async with aiofiles.open(index_path, 'r', encoding='utf-8') as f:
                return AssetIndex(**json.loads(await f.read()))
        except (OSError, ValueError, ValidationError) as e:
            raise DownloadError(f"Asset index {ref.id} is unreadable: {e}", url=ref.url) from e

    async def sync_assets(self, descriptor: VersionDescriptor) -> int:
        """Download every missing asset object. Returns the number fetched."""
        if descriptor.assetIndex is None:
            self.events.log(f"Legacy assets for {descriptor.id}, asset download skipped.")
            return 0

        index = await self.load_index(descriptor)
        objects_dir = self.config.assets_dir / "objects"
        base_url = self.config.resources_url.rstrip("/")
        # Objects shared by several names are fetched once but count once per name.
        unique = {obj.hash: obj for obj in index.objects.values()}
        names_per_hash = Counter(obj.hash for obj in index.objects.values())
        total = len(index.objects)
        done = 0
        fetched = 0
        failures = []

        async def sync_one(obj):
            nonlocal done, fetched
            try:
                if await self.downloads.fetch(f"{base_url}/{obj.path}", objects_dir / obj.path):
                    fetched += 1
            except DownloadError as e:
                logger.error("%s", e)
                failures.append(e)
            done += names_per_hash[obj.hash]
            self.events.item_progress(done, total)

        self.events.status(f"Downloading assets... (0/{total})")
        await asyncio.gather(*(sync_one(obj) for obj in unique.values()))
        if failures:
            raise DownloadError(f"Failed to download {len(failures)} assets") from failures[0]

        self.events.status(f"Assets verified ({total}/{total}).")
        return fetched
