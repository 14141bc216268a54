import logging
from dataclasses import dataclass

from catalog_admin.domain.errors import UploadError
from catalog_admin.ports.assets import AssetHostPort
from catalog_admin.rules.models import UploadsRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingFile:
    """A local file picked in a form and not yet pushed to the asset host."""

    filename: str
    content_type: str
    data: bytes


class UploadService:
    def __init__(self, host: AssetHostPort, rules: UploadsRules):
        self.host = host
        self.rules = rules

    def upload(self, pending: PendingFile) -> str:
        """
        Validates a pending file and pushes it to the asset host.
        Returns the public URL. Raises UploadError.
        """
        if not pending.data:
            raise UploadError(f"File '{pending.filename}' is empty.")

        if len(pending.data) > self.rules.max_upload_bytes:
            raise UploadError(
                f"File '{pending.filename}' exceeds limit ({self.rules.max_upload_bytes} bytes)."
            )

        if pending.content_type not in self.rules.allowlist_mime_types:
            raise UploadError(f"MIME type '{pending.content_type}' is not allowed.")

        url = self.host.upload(pending.filename, pending.data, pending.content_type)
        logger.info("Asset %s stored at %s", pending.filename, url)
        return url
