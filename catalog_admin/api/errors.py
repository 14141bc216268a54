"""Mapping of component error records to HTTP responses."""

from typing import Any, Protocol

from fastapi import status
from fastapi.responses import JSONResponse

from catalog_admin.api.schemas import ErrorResponse, ValidationErrorResponse


class ErrorRecord(Protocol):
    field: str
    code: str
    message: str


STATUS_BY_CODE = {
    "UPLOAD_FAILURE": status.HTTP_502_BAD_GATEWAY,
    "STORE_WRITE_FAILURE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "RECORD_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SECTION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}

DETAIL_BY_STATUS = {
    status.HTTP_502_BAD_GATEWAY: "Upload failed",
    status.HTTP_503_SERVICE_UNAVAILABLE: "Store unavailable",
    status.HTTP_404_NOT_FOUND: "Not found",
}


def status_for(errors: list[Any]) -> int:
    """The most severe status among the errors; anything unmapped is a 400."""
    codes = [STATUS_BY_CODE.get(e.code, status.HTTP_400_BAD_REQUEST) for e in errors]
    return max(codes, default=status.HTTP_400_BAD_REQUEST)


def error_response(errors: list[ErrorRecord]) -> JSONResponse:
    status_code = status_for(errors)
    body = ErrorResponse(
        detail=DETAIL_BY_STATUS.get(status_code, "Validation failed"),
        errors=[ValidationErrorResponse(field=e.field, code=e.code, message=e.message) for e in errors],
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())
