"""LocalStorageClient - writes uploads under the local uploads directory (non-production)."""

import logging
from pathlib import Path
from typing import Optional, Tuple

from ..core.config import settings
from ..core.constants import LOCAL_UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)


class LocalStorageClient:
    name = "local"

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else Path(settings.uploads_dir)

    def public_url(self, object_key: str) -> str:
        return f"{LOCAL_UPLOADS_URL_PREFIX}/{object_key}"

    def upload_bytes(
        self, object_key: str, data: bytes, content_type: str
    ) -> Tuple[bool, Optional[int]]:
        target = self.root / object_key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            return (True, None)
        except OSError as e:
            logger.error(f"Failed to write {object_key} under {self.root}: {e}")
            return (False, None)
