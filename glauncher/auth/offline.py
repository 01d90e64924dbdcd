"""Offline authentication for Minecraft."""

import hashlib

from pydantic import BaseModel


class OfflineProfile(BaseModel):
    name: str
    uuid: str
    access_token: str
    user_type: str = "legacy"


def offline_uuid(username: str) -> str:
    """Deterministic name-based (version 3) UUID the vanilla server assigns offline players."""
    digest = bytearray(hashlib.md5(("OfflinePlayer:" + username).encode("utf-8")).digest())
    digest[6] = (digest[6] & 0x0F) | 0x30
    digest[8] = (digest[8] & 0x3F) | 0x80
    h = digest.hex()
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


class OfflineAuthenticator:
    """Offline mode authenticator with username only."""

    @staticmethod
    async def authenticate(username: str) -> OfflineProfile:
        """Authenticate offline with given username."""
        if not username or len(username) > 16:
            raise ValueError("Invalid username for offline mode")

        uuid = offline_uuid(username)
        # Offline sessions reuse the uuid as access token
        return OfflineProfile(name=username, uuid=uuid, access_token=uuid)
