"""Runtime helpers: Java discovery and native libraries."""

from .java_manager import JavaManager
from .natives import NativeExtractor

__all__ = ["JavaManager", "NativeExtractor"]
