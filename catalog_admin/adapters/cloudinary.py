import logging

import requests

from catalog_admin.domain.errors import UploadError

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class CloudinaryAssetHost:
    """Unsigned uploads through a Cloudinary upload preset."""

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.url = UPLOAD_URL.format(cloud_name=cloud_name)
        self.upload_preset = upload_preset
        self.timeout = timeout
        self._session = session or requests.Session()

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        try:
            resp = self._session.post(
                self.url,
                data={"upload_preset": self.upload_preset},
                files={"file": (filename, data, content_type)},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise UploadError(f"Upload of '{filename}' timed out") from e
        except requests.exceptions.RequestException as e:
            raise UploadError(f"Upload of '{filename}' failed: {e}") from e

        try:
            url = resp.json()["secure_url"]
        except (ValueError, KeyError) as e:
            raise UploadError(f"Asset host returned no URL for '{filename}'") from e
        logger.info("Uploaded %s (%d bytes)", filename, len(data))
        return str(url)
