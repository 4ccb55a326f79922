"""
Media store — rehosted images in the S3 bucket.

Uploads get a time-derived unique key; the key doubles as the cleanup
handle released once the Shopify mutation that references the URL has
succeeded (Shopify copies the file, so the bucket object is temporary).
Version: 1.0.0
"""

import logging
import time
import uuid
from typing import Iterable, Tuple

from partsync.core.constants.catalog import IMAGE_CONTENT_TYPES, MEDIA_KEY_PREFIX
from partsync.clients.s3_client import S3Client

logger = logging.getLogger("media_store")


class MediaStore:
    def __init__(self, s3_client: S3Client) -> None:
        self._s3 = s3_client

    @staticmethod
    def build_key(file_name: str) -> str:
        stamp = int(time.time() * 1000)
        return f"{MEDIA_KEY_PREFIX}/{stamp}-{uuid.uuid4().hex[:8]}-{file_name}"

    async def upload(self, file_name: str, body: bytes, extension: str) -> Tuple[str, str]:
        """Store bytes and return (public_url, key)."""
        key = self.build_key(file_name)
        content_type = IMAGE_CONTENT_TYPES.get(extension.lower(), "application/octet-stream")
        await self._s3.put_object(key, body, content_type)
        return self._s3.public_url(key), key

    async def release(self, handles: Iterable[str]) -> int:
        keys = sorted(set(handles))
        if not keys:
            return 0
        deleted = await self._s3.delete_objects(keys)
        logger.info("media released requested=%d deleted=%d", len(keys), deleted)
        return deleted

    async def purge_all(self) -> int:
        """Delete every object in the bucket, one listing page at a time."""
        total = 0
        token = None
        while True:
            listing = await self._s3.list_objects(token)
            keys = listing["keys"]
            if not keys:
                break
            total += await self._s3.delete_objects(keys)
            if not listing["is_truncated"]:
                break
            token = listing["next_token"]
        logger.info("media bucket purged deleted=%d", total)
        return total
