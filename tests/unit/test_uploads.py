from unittest.mock import Mock

import pytest

from catalog_admin.domain.errors import UploadError
from catalog_admin.rules.models import UploadsRules
from catalog_admin.services.uploads import PendingFile, UploadService


@pytest.fixture
def host():
    host = Mock()
    host.upload.return_value = "https://cdn.example.com/a.png"
    return host


@pytest.fixture
def service(host):
    return UploadService(host, UploadsRules(max_upload_bytes=10, allowlist_mime_types=["image/png"]))


def test_valid_file_is_pushed(service, host):
    url = service.upload(PendingFile("a.png", "image/png", b"12345"))

    assert url == "https://cdn.example.com/a.png"
    host.upload.assert_called_once_with("a.png", b"12345", "image/png")


@pytest.mark.parametrize(
    "pending,message",
    [
        (PendingFile("a.png", "image/png", b""), "empty"),
        (PendingFile("a.png", "image/png", b"x" * 11), "exceeds"),
        (PendingFile("a.pdf", "application/pdf", b"x"), "not allowed"),
    ],
)
def test_rejected_files_never_reach_host(service, host, pending, message):
    with pytest.raises(UploadError, match=message):
        service.upload(pending)
    host.upload.assert_not_called()
