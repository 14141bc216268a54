"""
Taxonomy API routes.

Per-tenant brand and category options. Names are normalized by the
component, so the path and body values may use any case.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from catalog_admin.api.deps import get_taxonomy
from catalog_admin.api.errors import error_response
from catalog_admin.api.schemas import ErrorResponse, OptionRequest, TaxonomyResponse
from catalog_admin.components.taxonomy import (
    AddOptionInput,
    EnsureSeededInput,
    GetTaxonomyInput,
    RemoveOptionInput,
    TaxonomyComponent,
    TaxonomyOutput,
)

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def to_response(out: TaxonomyOutput) -> TaxonomyResponse:
    if out.taxonomy is None:
        raise HTTPException(status_code=500, detail="No taxonomy returned")
    return TaxonomyResponse(
        tenant=out.taxonomy.tenant,
        brands=out.taxonomy.brands,
        categories=out.taxonomy.categories,
        changed=out.changed,
        selected=out.selected,
    )


def _respond(out: TaxonomyOutput) -> Any:
    if not out.success:
        return error_response(out.errors)
    return to_response(out)


@router.get("/{tenant}", response_model=TaxonomyResponse, responses=ERROR_RESPONSES)
def get_taxonomy_set(
    tenant: str, component: TaxonomyComponent = Depends(get_taxonomy)
) -> Any:
    """Current brands and categories, seeding the tenant defaults on first access."""
    return _respond(component.run(GetTaxonomyInput(tenant=tenant)))


@router.post("/{tenant}/seed", response_model=TaxonomyResponse, responses=ERROR_RESPONSES)
def seed_taxonomy(tenant: str, component: TaxonomyComponent = Depends(get_taxonomy)) -> Any:
    return _respond(component.run(EnsureSeededInput(tenant=tenant)))


@router.post("/{tenant}/{kind}", response_model=TaxonomyResponse, responses=ERROR_RESPONSES)
def add_option(
    tenant: str,
    kind: str,
    request: OptionRequest,
    component: TaxonomyComponent = Depends(get_taxonomy),
) -> Any:
    return _respond(
        component.run(AddOptionInput(tenant=tenant, kind=kind, raw_name=request.name))  # type: ignore[arg-type]
    )


@router.delete("/{tenant}/{kind}/{name}", response_model=TaxonomyResponse, responses=ERROR_RESPONSES)
def remove_option(
    tenant: str,
    kind: str,
    name: str,
    selected: list[str] = Query(default=[]),
    component: TaxonomyComponent = Depends(get_taxonomy),
) -> Any:
    """
    Remove an option. Pass the form's checked values as `selected` to get
    them back with the removed name filtered out.
    """
    return _respond(
        component.run(
            RemoveOptionInput(tenant=tenant, kind=kind, name=name, selected=selected)  # type: ignore[arg-type]
        )
    )
