"""File storage backends for uploaded documents and videos.

Two interchangeable backends:

- ``LocalFileStorage`` writes under ``settings.UPLOAD_DIR`` and hands out
  ``/files/<relative path>`` URLs served by the files router.
- ``SupabaseFileStorage`` pushes bytes to a Supabase storage bucket over its
  HTTP API and hands out absolute object URLs.
"""

import logging
import uuid
from pathlib import Path, PurePosixPath

import httpx

from lms.config import settings
from lms.core.exceptions import BadRequestError, StorageError

logger = logging.getLogger(__name__)

FILES_PREFIX = "/files/"


def safe_name(filename: str | None) -> str:
    """Strip any directory component a client put into the filename."""
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    return name or "upload"


class FileStorage:
    """Interface shared by the storage backends."""

    def upload(
        self,
        filename: str | None,
        content: bytes,
        content_type: str | None,
        directory: str | None = None,
    ) -> str:
        """Store *content* and return the public URL of the stored file."""
        raise NotImplementedError

    def delete(self, file_url: str) -> bool:
        """Remove the file behind *file_url*; False when nothing was removed."""
        raise NotImplementedError

    def resolve(self, relative_path: str) -> Path | None:
        """Map a ``/files/...`` path to a readable local file, if this backend has one."""
        return None


# ── Local disk ────────────────────────────────────────────────────────────────


class LocalFileStorage(FileStorage):
    def __init__(self, root: str | Path = settings.UPLOAD_DIR) -> None:
        self.root = Path(root).resolve()

    def upload(self, filename, content, content_type, directory=None) -> str:
        if not content:
            raise BadRequestError("Failed to store empty file")

        suffix = Path(safe_name(filename)).suffix
        unique_name = f"{uuid.uuid4()}{suffix}"
        relative = f"{directory}/{unique_name}" if directory else unique_name

        target = self._within_root(relative)
        if target is None:
            raise BadRequestError(f"Invalid storage directory: {directory}")
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            target.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Failed to store file {unique_name}: {exc}") from exc

        logger.info("File saved: %s (%d bytes)", target, len(content))
        return FILES_PREFIX + relative

    def delete(self, file_url: str) -> bool:
        if not file_url:
            return False
        relative = file_url[len(FILES_PREFIX):] if file_url.startswith(FILES_PREFIX) else file_url
        path = self._within_root(relative)
        if path is None or not path.is_file():
            logger.warning("File to delete not found: %s", file_url)
            return False
        try:
            path.unlink()
        except OSError as exc:
            logger.error("Error deleting file %s: %s", path, exc)
            return False
        return True

    def resolve(self, relative_path: str) -> Path | None:
        path = self._within_root(relative_path)
        if path is None or not path.is_file():
            return None
        return path

    def _within_root(self, relative: str) -> Path | None:
        candidate = (self.root / relative).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            return None
        return candidate


# ── Supabase object storage ──────────────────────────────────────────────────


class SupabaseFileStorage(FileStorage):
    """Thin wrapper around the Supabase storage object API."""

    def __init__(
        self,
        base_url: str = settings.SUPABASE_URL,
        api_key: str = settings.SUPABASE_KEY,
        bucket: str = settings.SUPABASE_BUCKET,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._bucket = bucket
        self._http = httpx.Client(
            timeout=60.0,
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
        )

    @property
    def _bucket_url(self) -> str:
        return f"{self._base}/{self._bucket}/"

    def upload(self, filename, content, content_type, directory=None) -> str:
        if not content:
            raise BadRequestError("Failed to store empty file")

        unique_name = f"{uuid.uuid4()}-{safe_name(filename)}"
        path = f"{directory}/{unique_name}" if directory else unique_name
        url = self._bucket_url + path
        logger.info("Uploading file to: %s", url)
        try:
            r = self._http.post(
                url,
                content=content,
                headers={
                    "Content-Type": content_type or "application/octet-stream",
                    "x-upsert": "true",
                },
            )
            r.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error uploading file to Supabase: %s", exc)
            raise StorageError(f"Error uploading file to Supabase: {exc}") from exc
        return url

    def delete(self, file_url: str) -> bool:
        if not file_url:
            return False
        path = file_url.replace(self._bucket_url, "")
        url = self._bucket_url + path
        logger.info("Deleting file from: %s", url)
        try:
            r = self._http.delete(url)
        except httpx.HTTPError as exc:
            logger.error("Error deleting file from Supabase: %s", exc)
            return False
        if r.status_code not in (200, 204):
            logger.warning("Failed to delete file %s: %s", url, r.text)
            return False
        return True

    def close(self) -> None:
        self._http.close()


# ── singleton accessor ────────────────────────────────────────────────────────

_instance: FileStorage | None = None


def get_file_storage() -> FileStorage:
    """FastAPI dependency returning the configured backend."""
    global _instance
    if _instance is None:
        if settings.FILE_STORAGE_BACKEND == "supabase":
            _instance = SupabaseFileStorage()
        else:
            _instance = LocalFileStorage()
        logger.info("File storage initialised → %s", type(_instance).__name__)
    return _instance
