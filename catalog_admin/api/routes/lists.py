"""Quick-add list API routes (categories, brands, websites)."""

from typing import Any

from fastapi import APIRouter, Depends, status

from catalog_admin.api.deps import get_store
from catalog_admin.api.errors import error_response
from catalog_admin.api.schemas import ErrorResponse, ListItemRequest, ListItemResponse
from catalog_admin.components.lists import (
    AddListItemInput,
    DeleteListItemInput,
    ListItemsInput,
    run_add,
    run_delete,
    run_list,
)
from catalog_admin.domain.entities import ListItem
from catalog_admin.ports.store import DocumentStorePort

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def item_to_response(item: ListItem) -> ListItemResponse:
    return ListItemResponse(
        id=item.id,
        name=item.name,
        created_at=item.created_at.isoformat() if item.created_at else None,
    )


@router.get("/{collection}", response_model=list[ListItemResponse], responses=ERROR_RESPONSES)
def list_items(collection: str, store: DocumentStorePort = Depends(get_store)) -> Any:
    out = run_list(ListItemsInput(collection=collection), store=store)
    if not out.success:
        return error_response(out.errors)
    return [item_to_response(i) for i in out.items]


@router.post(
    "/{collection}",
    response_model=ListItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def add_item(
    collection: str, request: ListItemRequest, store: DocumentStorePort = Depends(get_store)
) -> Any:
    out = run_add(AddListItemInput(collection=collection, raw_name=request.name), store=store)
    if not out.success or out.item is None:
        return error_response(out.errors)
    return item_to_response(out.item)


@router.delete("/{collection}/{item_id}", responses=ERROR_RESPONSES)
def delete_item(
    collection: str, item_id: str, store: DocumentStorePort = Depends(get_store)
) -> Any:
    out = run_delete(DeleteListItemInput(collection=collection, item_id=item_id), store=store)
    if not out.success:
        return error_response(out.errors)
    return {"ok": True}
