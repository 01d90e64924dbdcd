"""End-to-end launch pipeline."""

import asyncio
import logging
from typing import List, Optional

from ..config import LauncherConfig
from ..errors import LauncherError
from ..events import EventSink
from ..runtime.natives import NativeExtractor
from ..utils.async_http import AsyncHTTPClient
from ..versions.assets import AssetSynchronizer
from ..versions.download_manager import DownloadManager
from ..versions.manager import VersionManager
from ..versions.models import LaunchPlan, VersionSummary
from ..versions.resolver import VersionResolver
from .game_launcher import GameLauncher

logger = logging.getLogger(__name__)

RELAY_CHUNK = 64 * 1024


class Launcher:
    """Resolve, acquire, synthesize and spawn.

    Usage::

        async with Launcher(config, events) as launcher:
            exit_code = await launcher.launch("Steve", "1.20.1")
    """

    def __init__(self, config: Optional[LauncherConfig] = None, events: Optional[EventSink] = None):
        self.config = config or LauncherConfig()
        self.events = events or EventSink()
        self.http = AsyncHTTPClient()
        self.downloads = DownloadManager(self.config, self.events)
        self.versions = VersionManager(self.config, self.http)
        self.resolver = VersionResolver(self.config, self.versions, self.downloads)
        self.natives = NativeExtractor(self.config, self.downloads)
        self.assets = AssetSynchronizer(self.config, self.downloads, self.events)
        self.game = GameLauncher(self.config)

    async def __aenter__(self):
        await self.http.__aenter__()
        await self.downloads.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.downloads.__aexit__(exc_type, exc, tb)
        await self.http.__aexit__(exc_type, exc, tb)

    async def list_versions(self) -> List[VersionSummary]:
        self.events.status("Fetching version manifest...")
        versions = await self.versions.list_versions()
        self.events.status(f"{len(versions)} versions available.")
        return versions

    async def prepare(self, username: str, version_id: str) -> LaunchPlan:
        """Everything short of spawning: the returned plan is ready to run."""
        self.config.data_dir.mkdir(parents=True, exist_ok=True)

        self.events.status(f"Resolving version {version_id}...")
        descriptor = await self.resolver.resolve(version_id)

        self.events.status("Downloading client jar...")
        client_jar = await self.downloads.download_client_jar(descriptor)

        self.events.status("Downloading libraries...")
        await self.downloads.download_libraries(descriptor)

        self.events.status("Extracting natives...")
        natives_dir = self.config.natives_dir(version_id)
        await self.natives.extract_natives(descriptor, natives_dir)

        self.events.status("Downloading assets...")
        await self.assets.sync_assets(descriptor)

        self.events.status("Building launch command...")
        return self.game.synthesize(descriptor, username, client_jar, natives_dir)

    async def launch(self, username: str, version_id: str) -> int:
        """Launch ``version_id`` and wait for the game to exit. Returns its exit code."""
        self.events.log(f"Launching '{version_id}' for '{username}'...")
        try:
            plan = await self.prepare(username, version_id)
            self.events.status("Starting game...")
            self.events.log(f"Command: {' '.join(plan.command)}")
            process = await self.game.launch_game(plan)
        except LauncherError as e:
            logger.debug("Launch of %s failed", version_id, exc_info=True)
            self.events.failed(f"Launch failed: {e}")
            raise

        try:
            await asyncio.gather(
                self._relay(process.stdout, "[MC] "),
                self._relay(process.stderr, "[MC ERR] "),
            )
        finally:
            exit_code = await process.wait()
            self.events.log(f"Minecraft process exited with code {exit_code}.")
            self.events.game_closed(exit_code)
        return exit_code

    async def _relay(self, stream: Optional[asyncio.StreamReader], prefix: str):
        if stream is None:
            return
        # Lines of any length; StreamReader.readline caps them at 64 KiB
        pending = b""
        while True:
            chunk = await stream.read(RELAY_CHUNK)
            if not chunk:
                break
            *lines, pending = (pending + chunk).split(b"\n")
            for line in lines:
                self._emit_line(prefix, line)
        if pending:
            self._emit_line(prefix, pending)

    def _emit_line(self, prefix: str, line: bytes):
        self.events.log(prefix + line.decode("utf-8", errors="replace").rstrip())
