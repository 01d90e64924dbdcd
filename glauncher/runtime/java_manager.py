"""Java runtime discovery."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from ..config import LauncherConfig

logger = logging.getLogger(__name__)


class JavaManager:
    def __init__(self, config: LauncherConfig):
        self.config = config

    @property
    def executable_name(self) -> str:
        return "java.exe" if self.config.os_name == "windows" else "java"

    def get_java_home_java(self) -> Optional[Path]:
        """Java binary below ``$JAVA_HOME``, if that points at a JDK/JRE."""
        java_home = os.environ.get("JAVA_HOME")
        if not java_home:
            return None
        java_bin = Path(java_home) / "bin" / self.executable_name
        return java_bin if java_bin.exists() else None

    def find_java(self) -> str:
        """Configured java, else ``$JAVA_HOME``'s, else whatever ``java`` is on PATH."""
        if self.config.java_path:
            return self.config.java_path

        java_bin = self.get_java_home_java()
        if java_bin:
            return str(java_bin)

        on_path = shutil.which("java")
        if on_path is None:
            logger.warning("No Java runtime found on PATH or in JAVA_HOME, trying plain 'java'")
        return on_path or "java"
