"""
Supabase publisher: uploads redacted PDFs and queues them for review.
"""

import asyncio
import logging
import re
import time
from typing import Protocol

from supabase import Client, create_client

from app.config import settings
from app.enums import QueueStatus
from app.exceptions import PublishError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
OBJECT_PREFIX = "SECURE_"

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9.]")


class Publisher(Protocol):
    async def publish(self, filename: str, data: bytes) -> tuple[str, str]: ...


def sanitize_filename(name: str | None) -> str:
    """Replace everything except letters, digits and dots with underscores."""
    return _UNSAFE_FILENAME_RE.sub("_", name or "document.pdf")


def build_object_name(filename: str, timestamp_ms: int | None = None) -> str:
    """Storage object name: SECURE_<epoch millis>_<sanitized filename>."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{OBJECT_PREFIX}{timestamp_ms}_{sanitize_filename(filename)}"


def create_supabase_client() -> Client:
    """Create a Supabase client from settings."""
    if not settings.supabase_url or not settings.supabase_key:
        raise PublishError("SUPABASE_URL and SUPABASE_KEY must be set for storage operations")
    return create_client(settings.supabase_url, settings.supabase_key)


class SupabasePublisher:
    """Upload to a public bucket, then insert a pending queue record."""

    def __init__(
        self,
        client: Client,
        bucket: str | None = None,
        table: str | None = None,
        base_url: str | None = None,
    ):
        self.client = client
        self.bucket = bucket or settings.storage_bucket
        self.table = table or settings.queue_table
        self.base_url = (base_url or settings.supabase_url).rstrip("/")

    def public_url(self, object_name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{object_name}"

    def _upload(self, object_name: str, data: bytes) -> None:
        self.client.storage.from_(self.bucket).upload(
            path=object_name,
            file=data,
            file_options={"content-type": PDF_CONTENT_TYPE, "upsert": "true"},
        )

    def _enqueue(self, filename: str, file_url: str) -> None:
        self.client.table(self.table).insert(
            {
                "filename": filename,
                "file_url": file_url,
                "status": QueueStatus.PENDING.value,
                "ai_result": {},
            }
        ).execute()

    async def publish(self, filename: str, data: bytes) -> tuple[str, str]:
        """
        Persist rendered bytes and record the job.

        Args:
            filename: Original display filename
            data: Rendered PDF bytes

        Returns:
            Tuple of (public URL, object name)

        Raises:
            PublishError: If the upload or the queue insert is rejected
        """
        object_name = build_object_name(filename)

        try:
            await asyncio.to_thread(self._upload, object_name, data)
        except Exception as e:
            logger.error(f"Upload of {object_name} failed: {e}", extra={"bucket": self.bucket})
            raise PublishError(f"Upload failed: {e}") from e
        logger.info(f"Uploaded {len(data)} bytes to {self.bucket}/{object_name}")

        file_url = self.public_url(object_name)
        try:
            await asyncio.to_thread(self._enqueue, filename, file_url)
        except Exception as e:
            logger.error(f"Queue insert for {object_name} failed: {e}", extra={"table": self.table})
            raise PublishError(f"Queue insert failed: {e}") from e

        return file_url, object_name
