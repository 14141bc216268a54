import os
from pathlib import Path
from uuid import uuid4

from catalog_admin.domain.errors import UploadError


class LocalAssetHost:
    """Writes uploads under base_path and serves them from base_url."""

    def __init__(self, base_path: str, base_url: str = "/assets"):
        self.base_path = Path(base_path).resolve()
        self.base_url = base_url.rstrip("/")
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, path: str) -> Path:
        # Prevent traversal
        target = (self.base_path / path).resolve()
        if not str(target).startswith(str(self.base_path)):
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        ext = Path(filename).suffix.lower()
        target = self._safe_path(f"{uuid4().hex}{ext}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            raise UploadError(f"Could not store '{filename}': {e}") from e
        return f"{self.base_url}/{target.relative_to(self.base_path)}"

    def get(self, name: str) -> bytes:
        """Retrieve bytes by stored name. Raises FileNotFoundError."""
        target = self._safe_path(name)
        if not target.exists():
            raise FileNotFoundError(f"File not found: {name}")
        with open(target, "rb") as f:
            return f.read()
