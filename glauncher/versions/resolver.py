"""Version resolution: flatten an ``inheritsFrom`` chain into one descriptor."""

import json
import logging
from functools import reduce
from typing import List, Optional

import aiofiles
from pydantic import ValidationError

from ..config import LauncherConfig
from ..errors import CyclicInheritanceError, VersionNotFoundError, VersionParseError
from .download_manager import DownloadManager
from .manager import VersionManager
from .models import Arguments, VersionDescriptor, VersionDownloads

logger = logging.getLogger(__name__)


class VersionResolver:
    """Loads version JSONs (downloading missing ones) and merges parents into children.

    The merged result is never cached: every call re-reads the JSONs on disk
    so local edits take effect on the next launch.
    """

    def __init__(self, config: LauncherConfig, versions: VersionManager, downloads: DownloadManager):
        self.config = config
        self.versions = versions
        self.downloads = downloads

    async def resolve(self, version_id: str) -> VersionDescriptor:
        chain = await self.load_chain(version_id)
        # chain is child-first; fold from the root down
        merged = reduce(merge_descriptors, reversed(chain))
        logger.debug("Resolved %s through %s", version_id, " -> ".join(d.id for d in chain))
        return merged

    async def load_chain(self, version_id: str) -> List[VersionDescriptor]:
        """``[version, parent, grandparent, ...]``, failing on a repeated id."""
        chain: List[VersionDescriptor] = []
        seen: List[str] = []
        current = version_id
        while current:
            if current in seen:
                raise CyclicInheritanceError(seen + [current])
            seen.append(current)
            descriptor = await self.load(current)
            chain.append(descriptor)
            current = descriptor.inheritsFrom
        return chain

    async def load(self, version_id: str) -> VersionDescriptor:
        """Read one version JSON, downloading it from the catalog if not installed."""
        path = self.config.version_json_path(version_id)
        if not path.exists():
            info = await self.versions.get_version_info(version_id)
            if info is None:
                raise VersionNotFoundError(version_id)
            self.downloads.events.status(f"{version_id}.json not installed, downloading...")
            await self.downloads.fetch(info.url, path, show_progress=True)

        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                data = json.loads(await f.read())
            return VersionDescriptor(**data)
        except (OSError, ValueError, TypeError, ValidationError) as e:
            raise VersionParseError(f"Invalid version file {path}: {e}") from e


def merge_descriptors(parent: VersionDescriptor, child: VersionDescriptor) -> VersionDescriptor:
    """Overlay ``child`` on ``parent``. Libraries and arguments concatenate parent first."""
    arguments = None
    if parent.arguments is not None or child.arguments is not None:
        parent_args = parent.arguments or Arguments()
        child_args = child.arguments or Arguments()
        arguments = Arguments(
            jvm=parent_args.jvm + child_args.jvm,
            game=parent_args.game + child_args.game,
        )

    return child.model_copy(update={
        "inheritsFrom": None,
        "libraries": parent.libraries + child.libraries,
        "mainClass": child.mainClass or parent.mainClass,
        "assetIndex": child.assetIndex or parent.assetIndex,
        "assets": child.assets or parent.assets,
        "downloads": _merge_downloads(parent.downloads, child.downloads),
        "minecraftArguments": child.minecraftArguments or parent.minecraftArguments,
        "arguments": arguments,
        "jar": child.jar or (child.id if _has_client(child) else parent.jar_id),
        "type": child.type or parent.type,
    })


def _has_client(descriptor: VersionDescriptor) -> bool:
    return bool(descriptor.downloads and descriptor.downloads.client and descriptor.downloads.client.url)


def _merge_downloads(parent: Optional[VersionDownloads], child: Optional[VersionDownloads]) -> Optional[VersionDownloads]:
    """Per-entry fallback: a child declaring only a server jar keeps the parent's client."""
    if parent is None or child is None:
        return child or parent
    return VersionDownloads(
        client=child.client or parent.client,
        server=child.server or parent.server,
    )
