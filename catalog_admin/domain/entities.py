"""
Catalog documents as they live in the document store.

Product and project records are denormalized snapshots: the category, brand,
website and custom-section values are copies of the option names at write
time, not references. Renaming or deleting an option later leaves existing
records untouched, and historical records rely on that.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
TaxonomyKind = Literal["brand", "category"]
ListCollection = Literal["categories", "brands", "websites"]

# --- Taxonomy ---

class TaxonomySet(BaseModel):
    tenant: str
    brands: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    def options(self, kind: TaxonomyKind) -> list[str]:
        return self.brands if kind == "brand" else self.categories

    def with_options(self, kind: TaxonomyKind, values: list[str]) -> "TaxonomySet":
        field = "brands" if kind == "brand" else "categories"
        return self.model_copy(update={field: values})

    def to_document(self) -> dict[str, Any]:
        return {"tenant": self.tenant, "brands": list(self.brands), "categories": list(self.categories)}


class SectionItem(BaseModel):
    id: str
    name: str


class CustomSection(BaseModel):
    id: str
    title: str
    items: list[SectionItem] = Field(default_factory=list)
    created_at: datetime | None = None


class ListItem(BaseModel):
    id: str
    name: str
    created_at: datetime | None = None

# --- Records ---

class SpecRow(BaseModel):
    key: str = ""
    value: str = ""


class DynamicSpec(BaseModel):
    title: str
    value: str


class ProductRecord(BaseModel):
    id: str | None = None
    name: str
    short_description: str = ""
    sku: str = ""
    regular_price: float = 0
    sale_price: float = 0
    technical_specs: list[SpecRow] = Field(default_factory=list)
    dynamic_specs: list[DynamicSpec] = Field(default_factory=list)
    main_image: str = ""
    gallery_image: str = ""
    category: str
    brand: str
    website: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})


class ProjectRecord(BaseModel):
    id: str | None = None
    title: str
    details: str = ""
    website: str
    main_image: str | None = None
    logo: str | None = None
    status: str = "Published"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
