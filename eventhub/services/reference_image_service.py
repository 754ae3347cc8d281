# eventhub/services/reference_image_service.py
"""
Reference image ingestion for booking requests.

Clients send reference images as base64 data URLs. Each image is decoded and
offered to an ordered list of storage strategies (Supabase buckets, then S3,
then the local disk outside production) until one accepts it. Failures are
per image: a bad or unstorable image is skipped and the rest still upload.
"""

import base64
import binascii
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
import logging
import re
import secrets
import time
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from ..core.config import settings
from ..core.constants import (
    REFERENCE_IMAGE_FILE_PREFIX,
    REFERENCE_IMAGE_FOLDER,
    REFERENCE_IMAGE_PATTERN,
)
from ..monitoring.prometheus_metrics import prometheus_metrics
from .local_storage_client import LocalStorageClient
from .s3_storage_client import S3StorageClient
from .supabase_storage_client import SupabaseStorageClient

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(REFERENCE_IMAGE_PATTERN, re.DOTALL)
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

# Executor for time-bounded upload attempts
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="reference-image-upload")


class StorageClient(Protocol):
    name: str

    def upload_bytes(
        self, object_key: str, data: bytes, content_type: str
    ) -> Tuple[bool, Optional[int]]:
        ...

    def public_url(self, object_key: str) -> str:
        ...


def build_default_strategies() -> List[StorageClient]:
    """Upload strategies in the order they are tried, from settings."""
    if settings.local_uploads_only:
        return [LocalStorageClient()]

    strategies: List[StorageClient] = []
    if settings.supabase_configured:
        strategies.extend(SupabaseStorageClient(bucket) for bucket in settings.supabase_buckets)
    if settings.s3_configured:
        strategies.append(S3StorageClient())
    if not settings.is_production:
        strategies.append(LocalStorageClient())

    if not strategies:
        logger.warning("No reference image storage configured; uploads will be skipped")
    return strategies


def generate_object_key(ext: str) -> str:
    """``booking/request_booking_<epoch ms>_<random base36>.<ext>``"""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{REFERENCE_IMAGE_FOLDER}/{REFERENCE_IMAGE_FILE_PREFIX}_{millis}_{suffix}.{ext}"


def decode_data_url(payload: str) -> Optional[Tuple[bytes, str]]:
    """Return (bytes, extension) for a valid image data URL, else None."""
    match = _DATA_URL.match(payload.strip())
    if not match:
        return None
    ext, encoded = match.group(1), match.group(2)
    try:
        data = base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError):
        return None
    if not data:
        return None
    return data, ext


def _content_type(ext: str) -> str:
    return "image/jpeg" if ext in ("jpg", "jpeg") else f"image/{ext}"


class ReferenceImageService:
    """Best-effort upload of base64 reference images."""

    def __init__(
        self,
        strategies: Optional[Sequence[StorageClient]] = None,
        *,
        timeout_seconds: Optional[float] = None,
        delay_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._strategies = list(strategies) if strategies is not None else None
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.upload_timeout_seconds
        )
        self.delay_seconds = (
            delay_seconds if delay_seconds is not None else settings.upload_delay_seconds
        )
        self._sleep = sleep
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def strategies(self) -> List[StorageClient]:
        if self._strategies is None:
            self._strategies = build_default_strategies()
        return self._strategies

    def ingest(self, images: Optional[Sequence[str]]) -> List[str]:
        """
        Upload every valid image and return the public URLs that succeeded.

        Never raises for a single image; the result never contains empty
        entries and is empty when nothing could be stored.
        """
        if not images:
            return []

        total = len(images)
        uploaded: List[str] = []
        for index, payload in enumerate(images, start=1):
            if not payload or not isinstance(payload, str):
                self.logger.info(f"Skipping image {index}/{total}: empty payload")
                prometheus_metrics.record_image_upload("none", "skipped")
                continue

            decoded = decode_data_url(payload)
            if decoded is None:
                self.logger.warning(f"Skipping image {index}/{total}: invalid base64 image format")
                prometheus_metrics.record_image_upload("none", "skipped")
                continue

            data, ext = decoded
            url = self._store(data, ext, label=f"{index}/{total}")
            if url:
                uploaded.append(url)
            else:
                self.logger.error(f"Image {index}/{total}: all upload strategies failed")

            # Throttle between uploads to stay under provider rate limits
            if index < total and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)

        self.logger.info(f"Uploaded {len(uploaded)} of {total} reference images")
        return [url for url in uploaded if url and url.strip()]

    def _store(self, data: bytes, ext: str, label: str) -> Optional[str]:
        object_key = generate_object_key(ext)
        content_type = _content_type(ext)
        for strategy in self.strategies:
            if self._attempt(strategy, object_key, data, content_type, label):
                prometheus_metrics.record_image_upload(strategy.name, "success")
                return strategy.public_url(object_key)
            prometheus_metrics.record_image_upload(strategy.name, "error")
        return None

    def _attempt(
        self,
        strategy: StorageClient,
        object_key: str,
        data: bytes,
        content_type: str,
        label: str,
    ) -> bool:
        future = _executor.submit(strategy.upload_bytes, object_key, data, content_type)
        try:
            ok, status_code = future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            self.logger.warning(
                f"Image {label}: {strategy.name} upload timed out after {self.timeout_seconds}s"
            )
            return False
        except Exception as e:
            self.logger.warning(f"Image {label}: {strategy.name} upload raised {e!r}")
            return False

        if not ok:
            self.logger.warning(
                f"Image {label}: {strategy.name} upload failed (status={status_code})"
            )
        return bool(ok)
