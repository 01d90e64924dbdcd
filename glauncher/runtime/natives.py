"""Native library extraction."""

import asyncio
import logging
import shutil
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import LauncherConfig
from ..errors import ExtractionError
from ..versions.download_manager import DownloadManager
from ..versions.models import Artifact, Library, VersionDescriptor
from ..versions.rules import rules_allow

logger = logging.getLogger(__name__)


class NativeExtractor:
    def __init__(self, config: LauncherConfig, downloads: DownloadManager):
        self.config = config
        self.downloads = downloads

    def native_artifact(self, lib: Library) -> Optional[Artifact]:
        """Classifier artifact of ``lib`` for this OS/arch, or None if it has none."""
        if not lib.natives or not rules_allow(lib.rules, self.config.os_name):
            return None
        key = lib.natives.get(self.config.os_name)
        if not key:
            return None
        return lib.classifier(key.replace("${arch}", self.config.arch))

    async def extract_natives(self, descriptor: VersionDescriptor, target_dir: Path) -> int:
        """Replace ``target_dir`` with the natives of ``descriptor``.

        Everything is unpacked into a staging directory first, which is then
        swapped in, so ``target_dir`` never holds a partial set.
        """
        jobs: List[Tuple[Path, List[str]]] = []
        for lib in descriptor.libraries:
            artifact = self.native_artifact(lib)
            if artifact is None or not artifact.path:
                continue
            jar_path = self.config.libraries_dir / artifact.path
            await self.downloads.fetch(artifact.url, jar_path)
            jobs.append((jar_path, lib.extract.exclude if lib.extract else []))

        staging = target_dir.with_name(target_dir.name + ".staging")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _populate, staging, target_dir, jobs)
        logger.info("Extracted %d native archives into %s", len(jobs), target_dir)
        return len(jobs)


def _populate(staging: Path, target_dir: Path, jobs: List[Tuple[Path, List[str]]]):
    shutil.rmtree(staging, ignore_errors=True)
    staging.mkdir(parents=True)
    try:
        for jar_path, exclude in jobs:
            _extract_zip(jar_path, staging, exclude)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    shutil.rmtree(target_dir, ignore_errors=True)
    staging.rename(target_dir)


def _extract_zip(jar_path: Path, dest: Path, exclude: List[str]):
    try:
        with zipfile.ZipFile(jar_path, 'r') as zip_ref:
            for member in zip_ref.infolist():
                if any(member.filename.startswith(prefix) for prefix in exclude):
                    continue
                zip_ref.extract(member, dest)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Could not extract natives from {jar_path.name}: {e}") from e
