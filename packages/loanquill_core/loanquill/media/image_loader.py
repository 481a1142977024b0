"""
Asynchronous image reference resolution.

A reference is a ``data:`` URL, an ``http(s)`` URL or a local file path.
Each resolution is one suspension point of a render; decoding runs in a
worker thread so the event loop stays free for concurrent renders.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError

from ..exceptions import AssetLoadError

logger = logging.getLogger(__name__)


def decode_data_url(reference: str) -> bytes:
    """Return the payload of a ``data:`` URL.

    Raises:
        AssetLoadError: If the URL is malformed or its base64 payload is invalid
    """
    header, sep, payload = reference.partition(",")
    if not sep:
        raise AssetLoadError(reference, "data URL has no payload")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetLoadError(reference, f"invalid base64 payload: {exc}") from exc
    return unquote_to_bytes(payload)


def decode_image(data: bytes, reference: str = "<bytes>") -> Image.Image:
    """Decode image bytes fully (lazy Pillow loading would defer errors)."""
    if not data:
        raise AssetLoadError(reference, "empty image data")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise AssetLoadError(reference, f"cannot decode image: {exc}") from exc
    return image


class ImageLoader:
    """
    Resolves image references to decoded Pillow images.

    The loader owns its HTTP client unless one is passed in. There is no
    timeout unless ``timeout`` is given; callers bound renders externally.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        base_dir: Optional[Path] = None,
    ):
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout
        self.base_dir = Path(base_dir) if base_dir else None

    async def __aenter__(self) -> "ImageLoader":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
        return self._client

    async def _read_bytes(self, reference: str) -> bytes:
        if reference.startswith("data:"):
            return decode_data_url(reference)

        if reference.startswith(("http://", "https://")):
            try:
                response = await self._http_client().get(reference)
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise AssetLoadError(reference, f"HTTP request failed: {exc}") from exc
            return response.content

        path = Path(reference)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (OSError, ValueError) as exc:
            raise AssetLoadError(reference, f"cannot read file: {exc}") from exc

    async def fetch(self, reference: str) -> Image.Image:
        """
        Fetch and decode one reference.

        Args:
            reference: data URL, http(s) URL or file path

        Returns:
            Decoded image

        Raises:
            AssetLoadError: If the reference cannot be read or decoded
        """
        if not reference or not reference.strip():
            raise AssetLoadError(reference or "", "empty image reference")
        data = await self._read_bytes(reference.strip())
        return await asyncio.to_thread(decode_image, data, reference)

    async def load(self, reference: Optional[str], layer: str = "image") -> Optional[Image.Image]:
        """Fetch a reference, logging and returning None on failure."""
        if not reference:
            return None
        try:
            image = await self.fetch(reference)
        except AssetLoadError as exc:
            logger.warning("Skipping %s layer: %s", layer, exc)
            return None
        logger.debug("Loaded %s layer (%dx%d)", layer, image.width, image.height)
        return image
