"""
Media resolver — turns a part's photo references into Shopify media input.

Classification is by file extension of the URL path (case-insensitive):
raster extensions (jpg, jpeg, png) are downloaded through the browser
fetcher and re-uploaded to the media bucket; every other reference,
including one without an extension, is passed to Shopify unchanged.
MEDIA_REHOST_INVERTED flips that rule.

All rehosts for one part run concurrently and succeed or fail together.
Version: 1.0.0
"""
import asyncio
import logging
import posixpath
from typing import List, Sequence, Tuple, Union
from urllib.parse import unquote, urlsplit

from partsync.clients.browser_fetcher import BrowserFetcher
from partsync.core.constants.catalog import RASTER_EXTENSIONS
from partsync.core.exceptions import MediaFetchError
from partsync.db.media_store import MediaStore
from partsync.schemas.parts import MediaDescriptor, ResolvedMedia

logger = logging.getLogger("media_resolver")


def split_file_name(ref: str) -> Tuple[str, str]:
    """Return (file_name with lowercased extension, extension) for a URL."""
    path = unquote(urlsplit(ref).path) or ref
    base = posixpath.basename(path.rstrip("/"))
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem:
        return base, ""
    ext = ext.lower()
    return f"{stem}.{ext}", ext


def needs_rehost(ref: str, inverted: bool = False) -> bool:
    _, ext = split_file_name(ref)
    is_raster = ext in RASTER_EXTENSIONS
    return not is_raster if inverted else is_raster


class MediaResolver:
    def __init__(self, fetcher: BrowserFetcher, media_store: MediaStore, inverted: bool = False) -> None:
        self._fetcher = fetcher
        self._media_store = media_store
        self._inverted = inverted

    async def _rehost(self, ref: str) -> Tuple[str, str]:
        file_name, ext = split_file_name(ref)
        body = await self._fetcher.fetch_remote_bytes(ref)
        if not body:
            raise MediaFetchError(ref, "empty body")
        return await self._media_store.upload(file_name, body, ext)

    async def resolve(self, photo_refs: Union[str, Sequence[str]]) -> ResolvedMedia:
        """Descriptors in reference order plus the bucket keys to release later.

        Any single rehost failure releases the uploads that did succeed and
        re-raises, so the caller can skip the part.
        """
        refs: List[str] = [photo_refs] if isinstance(photo_refs, str) else list(photo_refs)
        refs = [r for r in refs if r]
        if not refs:
            return ResolvedMedia()

        rehost_idx = [i for i, r in enumerate(refs) if needs_rehost(r, self._inverted)]
        results = await asyncio.gather(
            *(self._rehost(refs[i]) for i in rehost_idx), return_exceptions=True
        )

        uploaded = {}
        first_error = None
        for i, res in zip(rehost_idx, results):
            if isinstance(res, BaseException):
                first_error = first_error or res
            else:
                uploaded[i] = res

        if first_error is not None:
            handles = [key for _, key in uploaded.values()]
            if handles:
                try:
                    await self._media_store.release(handles)
                except Exception as e:
                    logger.warning("media release after failed batch errored: %s", e)
            raise first_error

        descriptors = []
        for i, ref in enumerate(refs):
            source = uploaded[i][0] if i in uploaded else ref
            descriptors.append(MediaDescriptor(originalSource=source))

        logger.info("media resolved refs=%d rehosted=%d", len(refs), len(uploaded))
        return ResolvedMedia(
            descriptors=descriptors,
            cleanup_handles={key for _, key in uploaded.values()},
        )
