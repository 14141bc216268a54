"""
Custom section API routes.

Sections are shared by every tenant. Item additions are atomic array
unions, so concurrent additions from two admins both survive.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from catalog_admin.api.deps import get_taxonomy
from catalog_admin.api.errors import error_response
from catalog_admin.api.schemas import (
    ErrorResponse,
    SectionCreateRequest,
    SectionItemModel,
    SectionItemRequest,
    SectionResponse,
)
from catalog_admin.components.taxonomy import (
    AddSectionItemInput,
    CreateSectionInput,
    DeleteSectionInput,
    DeleteSectionItemInput,
    ListSectionsInput,
    SectionOutput,
    TaxonomyComponent,
)
from catalog_admin.domain.entities import CustomSection

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def section_to_response(section: CustomSection) -> SectionResponse:
    return SectionResponse(
        id=section.id,
        title=section.title,
        items=[SectionItemModel(id=i.id, name=i.name) for i in section.items],
        created_at=section.created_at.isoformat() if section.created_at else None,
    )


def _respond(out: SectionOutput) -> Any:
    if not out.success:
        return error_response(out.errors)
    if out.section is None:
        return {"ok": True, "changed": out.changed}
    return section_to_response(out.section)


@router.get("", response_model=list[SectionResponse], responses=ERROR_RESPONSES)
def list_sections(component: TaxonomyComponent = Depends(get_taxonomy)) -> Any:
    out = component.run(ListSectionsInput())
    if not out.success:
        return error_response(out.errors)
    return [section_to_response(s) for s in out.sections]


@router.post(
    "",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_section(
    request: SectionCreateRequest, component: TaxonomyComponent = Depends(get_taxonomy)
) -> Any:
    return _respond(component.run(CreateSectionInput(title=request.title)))


@router.delete("/{section_id}", responses=ERROR_RESPONSES)
def delete_section(section_id: str, component: TaxonomyComponent = Depends(get_taxonomy)) -> Any:
    return _respond(component.run(DeleteSectionInput(section_id=section_id)))


@router.post("/{section_id}/items", response_model=SectionResponse, responses=ERROR_RESPONSES)
def add_section_item(
    section_id: str,
    request: SectionItemRequest,
    component: TaxonomyComponent = Depends(get_taxonomy),
) -> Any:
    return _respond(
        component.run(AddSectionItemInput(section_id=section_id, raw_name=request.name))
    )


@router.delete(
    "/{section_id}/items/{item_id}", response_model=SectionResponse, responses=ERROR_RESPONSES
)
def delete_section_item(
    section_id: str, item_id: str, component: TaxonomyComponent = Depends(get_taxonomy)
) -> Any:
    return _respond(
        component.run(DeleteSectionItemInput(section_id=section_id, item_id=item_id))
    )
