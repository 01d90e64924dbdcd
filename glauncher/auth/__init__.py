"""Authentication module for Minecraft accounts."""

from .offline import OfflineAuthenticator, OfflineProfile, offline_uuid

__all__ = ["OfflineAuthenticator", "OfflineProfile", "offline_uuid"]
