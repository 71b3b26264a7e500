"""
Asset Storage

Narrow upload interface to the object storage collaborator. Images and
narration are uploaded the same way; the backend returns a public URL.

Object names follow ``{kind}_scene{index}_{timestamp}.{ext}``, placed in
an owner folder when an owner identifier is known.
"""

import base64
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import httpx

from shorts_factory.config import StorageConfig
from shorts_factory.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


def asset_filename(kind: str, index: int, ext: str, timestamp_ms: Optional[int] = None) -> str:
    """Build a scene asset filename, e.g. ``image_scene2_1718000000000.png``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{kind}_scene{index}_{timestamp_ms}.{ext}"


def object_path(filename: str, owner_id: Optional[str] = None) -> str:
    return f"{owner_id}/{filename}" if owner_id else filename


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Inline fallback used when an upload fails (usable by previews only)."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class StorageBackend(ABC):
    """Upload interface used by the asset generator."""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: Optional[str] = None,
    ) -> str:
        """Upload ``data`` and return its public URL.

        Raises:
            StorageError: If the upload fails
        """
        pass


class SupabaseStorage(StorageBackend):
    """Supabase Storage over its REST API.

    Uploads never overwrite an existing object (``x-upsert: false``) and are
    cached for one hour by the CDN.
    """

    def __init__(
        self,
        url: str,
        key: str,
        bucket: str = "video-assets",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not url or not key:
            raise ConfigurationError(
                "Supabase storage requires SUPABASE_URL and SUPABASE_KEY."
            )
        self.url = url.rstrip("/")
        self.key = key
        self.bucket = bucket
        self.timeout = timeout
        self._transport = transport

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(self, data, filename, content_type, owner_id=None):
        path = object_path(filename, owner_id)
        headers = {
            "Authorization": f"Bearer {self.key}",
            "apikey": self.key,
            "Content-Type": content_type,
            "x-upsert": "false",
            "cache-control": "max-age=3600",
        }
        endpoint = f"{self.url}/storage/v1/object/{self.bucket}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(endpoint, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to upload {filename}: {e}") from e

        if response.status_code >= 400:
            raise StorageError(
                f"Failed to upload {filename}: {response.status_code} {response.text}"
            )

        url = self.public_url(path)
        logger.info(f"Uploaded {path} ({len(data)} bytes)")
        return url


class LocalStorage(StorageBackend):
    """Filesystem-backed storage for local runs.

    Returns ``file://`` URLs unless a public base URL is configured (for
    instance when the directory is served by a static file server).
    """

    def __init__(self, directory, public_base_url: Optional[str] = None):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    async def upload(self, data, filename, content_type, owner_id=None):
        path = object_path(filename, owner_id)
        target = self.directory / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {target}: {e}") from e

        logger.debug(f"Stored {target} ({content_type})")
        if self.public_base_url:
            return f"{self.public_base_url}/{path}"
        return target.resolve().as_uri()


def create_storage(config: StorageConfig) -> StorageBackend:
    """Instantiate the configured storage backend."""
    if config.backend == "supabase":
        return SupabaseStorage(config.supabase_url, config.supabase_key, config.bucket)
    if config.backend == "local":
        return LocalStorage(config.local_dir, config.public_base_url)
    raise ConfigurationError(
        f"Unknown storage backend '{config.backend}'. Use 'supabase' or 'local'."
    )
