"""
Module attachment storage backed by a Supabase Storage bucket.
"""
import logging
import mimetypes
import os
import uuid
from typing import Optional

from fastapi import UploadFile
from supabase import Client, create_client

from mini_lms.core.config import settings
from mini_lms.core.exceptions import DependencyFailure

logger = logging.getLogger(__name__)

_client: Optional[Client] = None

_UNSAFE_CHARS = ("#", "%", "&")


def get_storage_client() -> Client:
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise DependencyFailure("Attachment storage is not configured (SUPABASE_URL / SUPABASE_KEY).")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def build_object_key(filename: str) -> str:
    """'my file#1.pdf' -> '<uuid>_my_file1.pdf'"""
    stem, ext = os.path.splitext(os.path.basename(filename or "attachment"))
    stem = stem.replace(" ", "_")
    for ch in _UNSAFE_CHARS:
        stem = stem.replace(ch, "")
    return f"{uuid.uuid4()}_{stem or 'attachment'}{ext}"


def upload(file_bytes: bytes, filename: str, content_type: Optional[str] = None) -> str:
    """Uploads the bytes and returns the public URL to store as Module.file_path."""
    key = build_object_key(filename)
    content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    bucket_name = settings.SUPABASE_ATTACHMENTS_BUCKET

    try:
        bucket = get_storage_client().storage.from_(bucket_name)
        bucket.upload(path=key, file=file_bytes, file_options={"content-type": content_type})
        url = bucket.get_public_url(key)
    except DependencyFailure:
        raise
    except Exception as e:
        logger.error(f"Upload of '{filename}' to bucket '{bucket_name}' failed: {e}", exc_info=True)
        raise DependencyFailure(f"Attachment upload failed for '{filename}'.") from e

    logger.info(f"Uploaded attachment '{filename}' as {bucket_name}/{key}")
    return url


class Attachment:
    """An uploaded file read into memory, detached from the request stream."""

    def __init__(self, filename: str, content: bytes, content_type: Optional[str] = None):
        self.filename = filename
        self.content = content
        self.content_type = content_type

    @classmethod
    async def from_upload(cls, file: Optional[UploadFile]) -> Optional["Attachment"]:
        if file is None or not file.filename:
            return None
        return cls(filename=file.filename, content=await file.read(), content_type=file.content_type)

    def store(self) -> str:
        return upload(self.content, self.filename, self.content_type)
