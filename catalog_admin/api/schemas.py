from typing import Any

from pydantic import BaseModel

from catalog_admin.domain.entities import DynamicSpec, SpecRow


# --- Errors ---
class ValidationErrorResponse(BaseModel):
    field: str
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response with validation errors."""

    detail: str
    errors: list[ValidationErrorResponse]


# --- Taxonomy ---
class TaxonomyResponse(BaseModel):
    tenant: str
    brands: list[str]
    categories: list[str]
    changed: bool = False
    selected: list[str] = []


class OptionRequest(BaseModel):
    name: str


# --- Sections ---
class SectionItemModel(BaseModel):
    id: str
    name: str


class SectionResponse(BaseModel):
    id: str
    title: str
    items: list[SectionItemModel]
    created_at: str | None = None


class SectionCreateRequest(BaseModel):
    title: str


class SectionItemRequest(BaseModel):
    name: str


# --- Lists ---
class ListItemResponse(BaseModel):
    id: str
    name: str
    created_at: str | None = None


class ListItemRequest(BaseModel):
    name: str


# --- Records ---
class SectionSelectionModel(BaseModel):
    title: str
    selected: list[str] = []


class ProductPayload(BaseModel):
    """JSON part of the multipart product form."""

    name: str = ""
    short_description: str = ""
    sku: str = ""
    regular_price: Any = ""
    sale_price: Any = ""
    technical_specs: list[SpecRow] = []
    sections: list[SectionSelectionModel] = []
    categories: list[str] = []
    brands: list[str] = []
    websites: list[str] = []
    main_image_url: str | None = None
    gallery_image_url: str | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    short_description: str
    sku: str
    regular_price: float
    sale_price: float
    technical_specs: list[SpecRow]
    dynamic_specs: list[DynamicSpec]
    main_image: str
    gallery_image: str
    category: str
    brand: str
    website: str
    created_at: str | None = None
    updated_at: str | None = None


class ProjectPayload(BaseModel):
    title: str = ""
    details: str = ""
    website: str = ""
    status: str = ""
    main_image_url: str | None = None
    logo_url: str | None = None


class ProjectResponse(BaseModel):
    id: str
    title: str
    details: str
    website: str
    main_image: str | None
    logo: str | None
    status: str
    created_at: str | None = None
    updated_at: str | None = None


class SaveResponse(BaseModel):
    id: str
    reload: bool = False
