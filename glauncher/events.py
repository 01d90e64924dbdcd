"""Structured launcher events.

The core never talks to a UI. It reports everything through an
:class:`EventSink`; the default implementation forwards events to
:mod:`logging`, and a UI layer subclasses it to render them.
"""

import logging
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger("glauncher.events")


class DownloadProgress(BaseModel):
    """Byte-level progress sample of a single download."""
    percentage: Optional[float] = None
    speed: float = 0.0
    eta: Optional[float] = None
    downloaded: int = 0
    total: int = 0


class EventSink:
    def log(self, message: str):
        logger.info(message)

    def status(self, message: str):
        logger.info("Status: %s", message)

    def progress(self, progress: DownloadProgress):
        logger.debug("Progress: %s", progress)

    def item_progress(self, done: int, total: int):
        logger.debug("Items: %d/%d", done, total)

    def failed(self, message: str):
        logger.error(message)

    def game_closed(self, exit_code: int):
        logger.info("Game process exited with code %s", exit_code)
