"""Record builder models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field
from typing import Any, Literal

from catalog_admin.domain.entities import ProductRecord, ProjectRecord, SpecRow
from catalog_admin.services.uploads import PendingFile

RecordKind = Literal["product", "project"]


@dataclass(frozen=True)
class RecordValidationError:
    """Error details for record operations."""

    code: str
    message: str
    field: str


@dataclass(frozen=True)
class SectionSelection:
    """Checked items of one custom section, in the order they were checked."""

    title: str
    selected: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PublishProductInput:
    """Product form state. Set record_id to merge into an existing product."""

    name: str
    short_description: str = ""
    sku: str = ""
    regular_price: Any = ""
    sale_price: Any = ""
    technical_specs: list[SpecRow] = field(default_factory=list)
    sections: list[SectionSelection] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    brands: list[str] = field(default_factory=list)
    websites: list[str] = field(default_factory=list)
    main_image: PendingFile | None = None
    main_image_url: str | None = None
    gallery_image: PendingFile | None = None
    gallery_image_url: str | None = None
    record_id: str | None = None


@dataclass(frozen=True)
class PublishProductOutput:
    errors: list[RecordValidationError]
    success: bool
    record_id: str | None = None
    record: ProductRecord | None = None
    # Caller should drop its form state and wait for the live feed.
    reload: bool = False


@dataclass(frozen=True)
class SaveProjectInput:
    title: str
    details: str = ""
    website: str = ""
    status: str = ""
    main_image: PendingFile | None = None
    main_image_url: str | None = None
    logo: PendingFile | None = None
    logo_url: str | None = None
    record_id: str | None = None


@dataclass(frozen=True)
class SaveProjectOutput:
    errors: list[RecordValidationError]
    success: bool
    record_id: str | None = None
    record: ProjectRecord | None = None


@dataclass(frozen=True)
class GetRecordInput:
    kind: RecordKind
    record_id: str


@dataclass(frozen=True)
class ListRecordsInput:
    kind: RecordKind


@dataclass(frozen=True)
class DeleteRecordInput:
    kind: RecordKind
    record_id: str


@dataclass(frozen=True)
class RecordsOutput:
    errors: list[RecordValidationError]
    success: bool
    records: list[ProductRecord | ProjectRecord] = field(default_factory=list)
