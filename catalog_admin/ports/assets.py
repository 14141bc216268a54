from typing import Protocol


class AssetHostPort(Protocol):
    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        """Store the bytes and return a stable public URL. Raises UploadError."""
        ...
