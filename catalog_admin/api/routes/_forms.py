"""Helpers shared by the multipart record routes."""

from typing import TypeVar

from fastapi import UploadFile
from pydantic import BaseModel, ValidationError

from catalog_admin.components.records import RecordValidationError
from catalog_admin.services.uploads import PendingFile

P = TypeVar("P", bound=BaseModel)


def pending_file(upload: UploadFile | None) -> PendingFile | None:
    """A form file part as a pending upload; an absent or unnamed part is no file."""
    if upload is None or not upload.filename:
        return None
    return PendingFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=upload.file.read(),
    )


def parse_payload(model: type[P], raw: str) -> tuple[P | None, list[RecordValidationError]]:
    try:
        return model.model_validate_json(raw), []
    except ValidationError as e:
        errors = [
            RecordValidationError(
                code="INVALID_PAYLOAD",
                message=err["msg"],
                field=".".join(str(p) for p in err["loc"]) or "payload",
            )
            for err in e.errors()
        ]
        return None, errors
