"""
S3StorageClient - minimal S3-compatible client for reference-image uploads

Provides SigV4 presigned PUT URLs and an upload helper without requiring boto3.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
import hmac
import logging
from typing import Dict, Optional, Tuple
from urllib.parse import quote

import requests

from ..core.config import settings

logger = logging.getLogger(__name__)


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def _canonical_query(params: Dict[str, str]) -> str:
    return "&".join(
        f"{quote(k, safe='-_.~')}={quote(str(params[k]), safe='-_.~')}" for k in sorted(params)
    )


@dataclass
class PresignedUrl:
    url: str
    headers: Dict[str, str]
    expires_at: str


class S3StorageClient:
    """
    Minimal SigV4 signer for S3-compatible PUT requests.

    Uses query-string authentication with UNSIGNED-PAYLOAD. Without an
    endpoint override the bucket is addressed virtual-host style on AWS;
    with one, path style on the given host.
    """

    name = "s3"

    def __init__(self) -> None:
        if not settings.s3_configured:
            raise RuntimeError("S3 configuration is missing; check s3_* settings")

        self.access_key_id = settings.s3_access_key_id
        self.secret_key = settings.s3_secret_access_key.get_secret_value()
        self.bucket_name = settings.s3_bucket_name
        self.folder = settings.s3_bucket_folder.strip("/")
        self.region = settings.s3_region
        self.service = "s3"
        self.algorithm = "AWS4-HMAC-SHA256"
        self.timeout = settings.upload_timeout_seconds

        if settings.s3_endpoint_host:
            self.host = settings.s3_endpoint_host
            self.path_prefix = f"/{self.bucket_name}"
        else:
            self.host = f"{self.bucket_name}.s3.{self.region}.amazonaws.com"
            self.path_prefix = ""
        self.public_base_url = (
            settings.s3_public_base_url.rstrip("/") or f"https://{self.host}{self.path_prefix}"
        )

    def _full_key(self, object_key: str) -> str:
        return f"{self.folder}/{object_key}" if self.folder else object_key

    def generate_presigned_put(
        self, object_key: str, content_type: str, expires_seconds: int = 300
    ) -> PresignedUrl:
        now = datetime.now(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        datestamp = now.strftime("%Y%m%d")

        canonical_uri = f"{self.path_prefix}/{quote(self._full_key(object_key), safe='/-_.~')}"
        signed_headers = "host"
        credential_scope = f"{datestamp}/{self.region}/{self.service}/aws4_request"

        params: Dict[str, str] = {
            "X-Amz-Algorithm": self.algorithm,
            "X-Amz-Credential": f"{self.access_key_id}/{credential_scope}",
            "X-Amz-Date": amz_date,
            "X-Amz-Expires": str(expires_seconds),
            "X-Amz-SignedHeaders": signed_headers,
            "X-Amz-Content-Sha256": "UNSIGNED-PAYLOAD",
        }

        canonical_querystring = _canonical_query(params)
        canonical_request = "\n".join(
            [
                "PUT",
                canonical_uri,
                canonical_querystring,
                f"host:{self.host}\n",
                signed_headers,
                "UNSIGNED-PAYLOAD",
            ]
        )

        string_to_sign = "\n".join(
            [
                self.algorithm,
                amz_date,
                credential_scope,
                hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
            ]
        )

        k_date = _hmac(("AWS4" + self.secret_key).encode("utf-8"), datestamp)
        k_region = _hmac(k_date, self.region)
        k_service = _hmac(k_region, self.service)
        k_signing = _hmac(k_service, "aws4_request")
        signature = hmac.new(k_signing, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        url = (
            f"https://{self.host}{canonical_uri}"
            f"?{canonical_querystring}&X-Amz-Signature={signature}"
        )
        return PresignedUrl(
            url=url,
            headers={"Content-Type": content_type},
            expires_at=now.replace(microsecond=0).isoformat(),
        )

    def public_url(self, object_key: str) -> str:
        return f"{self.public_base_url}/{self._full_key(object_key)}"

    def upload_bytes(
        self, object_key: str, data: bytes, content_type: str
    ) -> Tuple[bool, Optional[int]]:
        try:
            pre = self.generate_presigned_put(object_key, content_type)
            resp = requests.put(pre.url, data=data, headers=pre.headers, timeout=self.timeout)
            if not 200 <= resp.status_code < 300:
                logger.error(f"S3 upload of {object_key} failed: status={resp.status_code}")
            return (200 <= resp.status_code < 300, resp.status_code)
        except requests.RequestException as e:
            logger.error(f"Failed to upload {object_key} to S3: {e}")
            return (False, None)
