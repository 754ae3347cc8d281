"""
SupabaseStorageClient - Supabase Storage REST uploads for one bucket.

Objects are written with ``x-upsert`` so a retried upload overwrites instead
of failing, and served from the bucket's public URL.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import quote

import requests

from ..core.config import settings

logger = logging.getLogger(__name__)


class SupabaseStorageClient:
    """Uploads bytes to a single Supabase Storage bucket."""

    def __init__(self, bucket: str) -> None:
        if not settings.supabase_configured:
            raise RuntimeError("Supabase configuration is missing; check supabase_* settings")

        self.bucket = bucket
        self.base_url = settings.supabase_url.rstrip("/")
        self.service_key = settings.supabase_service_key.get_secret_value()
        self.timeout = settings.upload_timeout_seconds
        self.name = f"supabase:{bucket}"

    def _object_path(self, object_key: str) -> str:
        return f"{quote(self.bucket, safe='')}/{quote(object_key, safe='/-_.~')}"

    def public_url(self, object_key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self._object_path(object_key)}"

    def upload_bytes(
        self, object_key: str, data: bytes, content_type: str
    ) -> Tuple[bool, Optional[int]]:
        url = f"{self.base_url}/storage/v1/object/{self._object_path(object_key)}"
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        try:
            resp = requests.post(url, data=data, headers=headers, timeout=self.timeout)
            if not 200 <= resp.status_code < 300:
                logger.error(
                    f"Supabase upload of {object_key} to {self.bucket} failed: "
                    f"status={resp.status_code}"
                )
            return (200 <= resp.status_code < 300, resp.status_code)
        except requests.RequestException as e:
            logger.error(f"Failed to upload {object_key} to Supabase bucket {self.bucket}: {e}")
            return (False, None)
