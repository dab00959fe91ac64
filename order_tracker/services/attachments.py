# order_tracker/services/attachments.py
"""
Attachment upload for orders (receipts, screenshots, photos).
Files land under orders/ in the attachments bucket with a unique key.
"""

import logging
import mimetypes
import re
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .api_client import SupabaseClient, UploadError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jpg"
DEFAULT_CONTENT_TYPE = "image/jpeg"
CACHE_CONTROL = "3600"


@dataclass
class AttachmentFile:
    name: str
    data: bytes
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path) -> "AttachmentFile":
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as e:
            raise UploadError(f"Could not read attachment {p.name}: {e}")
        content_type, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, data=data, content_type=content_type)


def attachment_extension(filename: str) -> str:
    ext = (filename or "").rsplit(".", 1)[-1].lower()
    ext = re.sub(r"[^a-z0-9]", "", ext)
    return ext or DEFAULT_EXTENSION


def build_storage_path(filename: str, now_ms: Optional[int] = None, token: Optional[str] = None) -> str:
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    token = token or uuid.uuid4().hex[:12]
    return f"orders/{now_ms}_{token}.{attachment_extension(filename)}"


class AttachmentUploader:
    def __init__(self, client: SupabaseClient, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload_attachment(self, file: Optional[AttachmentFile]) -> Optional[str]:
        """
        Upload `file` and return its public URL.
        No file means nothing to do (None). Upload failures raise UploadError.
        """
        if file is None:
            return None

        path = build_storage_path(file.name)
        logger.info(f"Uploading attachment {file.name} to {self.bucket}/{path}")
        self.client.upload(
            self.bucket,
            path,
            file.data,
            cache_control=CACHE_CONTROL,
            upsert=False,
            content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        )
        return self.client.get_public_url(self.bucket, path) or None
