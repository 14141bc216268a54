"""
Product API routes.

Create and edit take a multipart form: a `payload` JSON field with the form
state plus optional `main_image` and `gallery_image` file parts. A file part
wins over the matching `*_url` field of the payload.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from catalog_admin.api.deps import get_records
from catalog_admin.api.errors import error_response
from catalog_admin.api.routes._forms import parse_payload, pending_file
from catalog_admin.api.schemas import ErrorResponse, ProductPayload, ProductResponse, SaveResponse
from catalog_admin.components.records import (
    DeleteRecordInput,
    GetRecordInput,
    ListRecordsInput,
    PublishProductInput,
    RecordsComponent,
    SectionSelection,
)
from catalog_admin.domain.entities import ProductRecord

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def product_to_response(record: ProductRecord) -> ProductResponse:
    return ProductResponse(
        id=record.id or "",
        name=record.name,
        short_description=record.short_description,
        sku=record.sku,
        regular_price=record.regular_price,
        sale_price=record.sale_price,
        technical_specs=record.technical_specs,
        dynamic_specs=record.dynamic_specs,
        main_image=record.main_image,
        gallery_image=record.gallery_image,
        category=record.category,
        brand=record.brand,
        website=record.website,
        created_at=record.created_at.isoformat() if record.created_at else None,
        updated_at=record.updated_at.isoformat() if record.updated_at else None,
    )


def _publish(
    component: RecordsComponent,
    payload: str,
    main_image: UploadFile | None,
    gallery_image: UploadFile | None,
    record_id: str | None = None,
) -> Any:
    form, errors = parse_payload(ProductPayload, payload)
    if form is None:
        return error_response(errors)

    out = component.run(
        PublishProductInput(
            name=form.name,
            short_description=form.short_description,
            sku=form.sku,
            regular_price=form.regular_price,
            sale_price=form.sale_price,
            technical_specs=form.technical_specs,
            sections=[SectionSelection(title=s.title, selected=s.selected) for s in form.sections],
            categories=form.categories,
            brands=form.brands,
            websites=form.websites,
            main_image=pending_file(main_image),
            main_image_url=form.main_image_url,
            gallery_image=pending_file(gallery_image),
            gallery_image_url=form.gallery_image_url,
            record_id=record_id,
        )
    )
    if not out.success or out.record_id is None:
        return error_response(out.errors)
    return SaveResponse(id=out.record_id, reload=out.reload)


@router.get("", response_model=list[ProductResponse], responses=ERROR_RESPONSES)
def list_products(component: RecordsComponent = Depends(get_records)) -> Any:
    """Every product, newest first."""
    out = component.run(ListRecordsInput(kind="product"))
    if not out.success:
        return error_response(out.errors)
    return [product_to_response(r) for r in out.records]  # type: ignore[arg-type]


@router.get("/{record_id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
def get_product(record_id: str, component: RecordsComponent = Depends(get_records)) -> Any:
    out = component.run(GetRecordInput(kind="product", record_id=record_id))
    if not out.success:
        return error_response(out.errors)
    return product_to_response(out.records[0])  # type: ignore[arg-type]


@router.post(
    "",
    response_model=SaveResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def publish_product(
    payload: str = Form(...),
    main_image: UploadFile | None = File(None),
    gallery_image: UploadFile | None = File(None),
    component: RecordsComponent = Depends(get_records),
) -> Any:
    return _publish(component, payload, main_image, gallery_image)


@router.put("/{record_id}", response_model=SaveResponse, responses=ERROR_RESPONSES)
def update_product(
    record_id: str,
    payload: str = Form(...),
    main_image: UploadFile | None = File(None),
    gallery_image: UploadFile | None = File(None),
    component: RecordsComponent = Depends(get_records),
) -> Any:
    return _publish(component, payload, main_image, gallery_image, record_id=record_id)


@router.delete("/{record_id}", responses=ERROR_RESPONSES)
def delete_product(record_id: str, component: RecordsComponent = Depends(get_records)) -> Any:
    out = component.run(DeleteRecordInput(kind="product", record_id=record_id))
    if not out.success:
        return error_response(out.errors)
    return {"ok": True}
