"""Download manager for version files, libraries and client jars."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import aiofiles
import aiofiles.os
import aiohttp

from ..config import LauncherConfig
from ..errors import DownloadError
from ..events import DownloadProgress, EventSink
from .models import VersionDescriptor
from .rules import rules_allow

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class DownloadManager:
    """Idempotent streaming downloader.

    A destination that already exists is never fetched again; existence is
    the only check, nothing is re-hashed. Bytes go to ``<dest>.part`` first
    and are moved into place once complete, so an interrupted transfer never
    looks like a finished one.
    """

    def __init__(self, config: LauncherConfig, events: Optional[EventSink] = None):
        self.config = config
        self.events = events or EventSink()
        self.session: Optional[aiohttp.ClientSession] = None
        self.semaphore = asyncio.Semaphore(config.concurrent_downloads)
        self._locks: Dict[Path, asyncio.Lock] = {}
        # Tasks holding or waiting on each lock; the lock is dropped at zero
        self._lock_users: Dict[Path, int] = {}

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()

    async def fetch(self, url: Optional[str], dest: Path, show_progress: bool = False) -> bool:
        """Download ``url`` to ``dest`` unless ``dest`` exists.

        Returns True if a transfer happened, False if the file was present.
        """
        if await aiofiles.os.path.exists(dest):
            return False

        lock = self._locks.setdefault(dest, asyncio.Lock())
        self._lock_users[dest] = self._lock_users.get(dest, 0) + 1
        try:
            async with lock:
                return await self._fetch_missing(url, dest, show_progress)
        finally:
            self._lock_users[dest] -= 1
            if not self._lock_users[dest]:
                del self._lock_users[dest]
                del self._locks[dest]

    async def _fetch_missing(self, url: Optional[str], dest: Path, show_progress: bool) -> bool:
        # Another task may have finished the same file while we waited.
        if await aiofiles.os.path.exists(dest):
            return False
        if not url:
            raise DownloadError(f"No download URL for missing file {dest}")

        retries = self.config.download_retries
        for attempt in range(retries + 1):
            try:
                async with self.semaphore:
                    await self._stream(url, dest, show_progress)
                return True
            except DownloadError as e:
                if not _is_transient(e) or attempt >= retries:
                    raise
                delay = self.config.retry_backoff * (2 ** attempt)
                logger.warning("Retrying %s in %.1fs after: %s", url, delay, e)
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")

    async def _stream(self, url: str, dest: Path, show_progress: bool):
        if not self.session:
            self.session = aiohttp.ClientSession()

        part = dest.with_name(dest.name + ".part")
        logger.debug("Downloading %s -> %s", url, dest)
        if show_progress:
            self.events.status(f"Downloading {dest.name}...")

        try:
            await aiofiles.os.makedirs(dest.parent, exist_ok=True)
            async with self.session.get(url) as resp:
                if resp.status >= 400:
                    raise DownloadError(f"Failed to download {url}: HTTP {resp.status}",
                                        url=url, status=resp.status)
                total = resp.content_length or 0
                downloaded = 0
                last_time = time.monotonic()
                last_downloaded = 0

                async with aiofiles.open(part, 'wb') as f:
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        await f.write(chunk)
                        downloaded += len(chunk)
                        if show_progress:
                            now = time.monotonic()
                            if now - last_time >= self.config.progress_interval:
                                self.events.progress(
                                    _sample(downloaded, total, downloaded - last_downloaded, now - last_time))
                                last_time = now
                                last_downloaded = downloaded

                if show_progress:
                    now = time.monotonic()
                    self.events.progress(
                        _sample(downloaded, total, downloaded - last_downloaded, now - last_time))

            await aiofiles.os.replace(part, dest)
        except DownloadError:
            await _discard(part)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await _discard(part)
            raise DownloadError(f"Failed to download {url}: {e}", url=url) from e

    async def download_many(self, jobs: List[Tuple[Optional[str], Path]], what: str) -> int:
        """Fetch every (url, dest) pair; any failure is fatal once all have settled."""
        results = await asyncio.gather(*(self.fetch(url, dest) for url, dest in jobs),
                                       return_exceptions=True)
        failed = [r for r in results if isinstance(r, BaseException)]
        for error in failed:
            logger.error("%s", error)
        if failed:
            raise DownloadError(f"Failed to download {len(failed)} {what}") from failed[0]
        return sum(1 for r in results if r is True)

    async def download_libraries(self, descriptor: VersionDescriptor) -> int:
        """Download every rule-allowed library jar. Returns the number fetched."""
        jobs = []
        for lib in descriptor.libraries:
            if not rules_allow(lib.rules, self.config.os_name):
                continue
            artifact = lib.artifact
            if artifact is None or not artifact.path:
                continue
            jobs.append((artifact.url, self.config.libraries_dir / artifact.path))

        fetched = await self.download_many(jobs, "libraries")
        logger.info("Libraries ready for %s (%d downloaded, %d total)", descriptor.id, fetched, len(jobs))
        return fetched

    async def download_client_jar(self, descriptor: VersionDescriptor) -> Path:
        """Ensure the client jar of the chain root exists and return its path."""
        dest = self.config.version_jar_path(descriptor.jar_id)
        client = descriptor.downloads.client if descriptor.downloads else None
        url = client.url if client else None
        if not url and not await aiofiles.os.path.exists(dest):
            raise DownloadError(f"Version {descriptor.jar_id} declares no client download and no jar is installed")
        await self.fetch(url, dest, show_progress=True)
        return dest


def _sample(downloaded: int, total: int, delta: int, elapsed: float) -> DownloadProgress:
    speed = delta / elapsed if elapsed > 0 else 0.0
    percentage = downloaded / total * 100 if total else None
    eta = None
    if total and speed > 0:
        eta = max(total - downloaded, 0) / speed
    return DownloadProgress(percentage=percentage, speed=speed, eta=eta,
                            downloaded=downloaded, total=total)


def _is_transient(error: DownloadError) -> bool:
    """HTTP 5xx, connection failures and timeouts. Local file errors are not retried."""
    if error.status is not None:
        return error.status >= 500
    return isinstance(error.__cause__, (aiohttp.ClientError, asyncio.TimeoutError))


async def _discard(path: Path):
    try:
        await aiofiles.os.remove(path)
    except (FileNotFoundError, NotADirectoryError):
        pass
