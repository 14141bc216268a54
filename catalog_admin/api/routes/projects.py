"""
Project API routes.

Same multipart shape as products: a `payload` JSON field plus optional
`main_image` and `logo` file parts.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from catalog_admin.api.deps import get_records
from catalog_admin.api.errors import error_response
from catalog_admin.api.routes._forms import parse_payload, pending_file
from catalog_admin.api.schemas import ErrorResponse, ProjectPayload, ProjectResponse, SaveResponse
from catalog_admin.components.records import (
    DeleteRecordInput,
    GetRecordInput,
    ListRecordsInput,
    RecordsComponent,
    SaveProjectInput,
)
from catalog_admin.domain.entities import ProjectRecord

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def project_to_response(record: ProjectRecord) -> ProjectResponse:
    return ProjectResponse(
        id=record.id or "",
        title=record.title,
        details=record.details,
        website=record.website,
        main_image=record.main_image,
        logo=record.logo,
        status=record.status,
        created_at=record.created_at.isoformat() if record.created_at else None,
        updated_at=record.updated_at.isoformat() if record.updated_at else None,
    )


def _save(
    component: RecordsComponent,
    payload: str,
    main_image: UploadFile | None,
    logo: UploadFile | None,
    record_id: str | None = None,
) -> Any:
    form, errors = parse_payload(ProjectPayload, payload)
    if form is None:
        return error_response(errors)

    out = component.run(
        SaveProjectInput(
            title=form.title,
            details=form.details,
            website=form.website,
            status=form.status,
            main_image=pending_file(main_image),
            main_image_url=form.main_image_url,
            logo=pending_file(logo),
            logo_url=form.logo_url,
            record_id=record_id,
        )
    )
    if not out.success or out.record_id is None:
        return error_response(out.errors)
    return SaveResponse(id=out.record_id)


@router.get("", response_model=list[ProjectResponse], responses=ERROR_RESPONSES)
def list_projects(component: RecordsComponent = Depends(get_records)) -> Any:
    out = component.run(ListRecordsInput(kind="project"))
    if not out.success:
        return error_response(out.errors)
    return [project_to_response(r) for r in out.records]  # type: ignore[arg-type]


@router.get("/{record_id}", response_model=ProjectResponse, responses=ERROR_RESPONSES)
def get_project(record_id: str, component: RecordsComponent = Depends(get_records)) -> Any:
    out = component.run(GetRecordInput(kind="project", record_id=record_id))
    if not out.success:
        return error_response(out.errors)
    return project_to_response(out.records[0])  # type: ignore[arg-type]


@router.post(
    "",
    response_model=SaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_project(
    payload: str = Form(...),
    main_image: UploadFile | None = File(None),
    logo: UploadFile | None = File(None),
    component: RecordsComponent = Depends(get_records),
) -> Any:
    return _save(component, payload, main_image, logo)


@router.put("/{record_id}", response_model=SaveResponse, responses=ERROR_RESPONSES)
def update_project(
    record_id: str,
    payload: str = Form(...),
    main_image: UploadFile | None = File(None),
    logo: UploadFile | None = File(None),
    component: RecordsComponent = Depends(get_records),
) -> Any:
    return _save(component, payload, main_image, logo, record_id=record_id)


@router.delete("/{record_id}", responses=ERROR_RESPONSES)
def delete_project(record_id: str, component: RecordsComponent = Depends(get_records)) -> Any:
    out = component.run(DeleteRecordInput(kind="project", record_id=record_id))
    if not out.success:
        return error_response(out.errors)
    return {"ok": True}
