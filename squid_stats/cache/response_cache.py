"""TTL-governed disk cache for raw HTTP response bodies."""

import hashlib
import logging
import time
from collections.abc import Callable
from pathlib import Path

import httpx

from ..errors import FetchFailed
from .files import atomic_write_text

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    Caches GET response bodies on disk, keyed by the MD5 of the URL.

    Files live at `<root>/<hash[:2]>/<hash>.txt` and their modification time
    is the freshness clock. A stale entry is still served when the network
    is unavailable, since finalized chain data does not change.
    """

    def __init__(
        self,
        root: str | Path,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.root = Path(root)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        """Close the HTTP client if this cache created it."""
        if self._owns_client:
            await self._client.aclose()

    def path_for(self, url: str) -> Path:
        digest = hashlib.md5(url.encode("utf-8")).hexdigest()
        return self.root / digest[:2] / f"{digest}.txt"

    async def get(
        self,
        url: str,
        ttl_seconds: float,
        cacheable: Callable[[str], bool] | None = None,
    ) -> str:
        """
        Return the body for `url`, downloading it unless a fresh copy is cached.

        A downloaded body is written to disk only if `cacheable` accepts it,
        so transient error answers are fetched again next time.

        Raises:
            FetchFailed: if the download fails and nothing is cached
        """
        path = self.path_for(url)
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.exists():
            age = time.time() - path.stat().st_mtime
            if age < ttl_seconds:
                logger.debug(f"Cache hit for {url} ({age:.0f}s old)")
                return path.read_text(encoding="utf-8")

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            if path.exists():
                logger.warning(f"Fetch of {url} failed ({e}), serving stale cache entry")
                return path.read_text(encoding="utf-8")
            raise FetchFailed(url, str(e)) from e

        body = response.text
        if cacheable is not None and not cacheable(body):
            logger.debug(f"Not caching response for {url}")
            return body
        atomic_write_text(path, body)
        return body
