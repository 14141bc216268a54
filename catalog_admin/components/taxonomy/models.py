"""Taxonomy component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field

from catalog_admin.domain.entities import CustomSection, TaxonomyKind, TaxonomySet


@dataclass(frozen=True)
class ValidationError:
    """Error details for taxonomy operations."""

    code: str
    message: str
    field: str


# --- Brand / category options ---


@dataclass(frozen=True)
class EnsureSeededInput:
    tenant: str


@dataclass(frozen=True)
class GetTaxonomyInput:
    tenant: str


@dataclass(frozen=True)
class AddOptionInput:
    tenant: str
    kind: TaxonomyKind
    raw_name: str


@dataclass(frozen=True)
class RemoveOptionInput:
    """Remove an option; `selected` is the caller's transient checkbox state."""

    tenant: str
    kind: TaxonomyKind
    name: str
    selected: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TaxonomyOutput:
    taxonomy: TaxonomySet | None
    errors: list[ValidationError]
    success: bool
    changed: bool = False
    selected: list[str] = field(default_factory=list)


# --- Custom sections ---


@dataclass(frozen=True)
class ListSectionsInput:
    pass


@dataclass(frozen=True)
class CreateSectionInput:
    title: str


@dataclass(frozen=True)
class AddSectionItemInput:
    section_id: str
    raw_name: str


@dataclass(frozen=True)
class DeleteSectionItemInput:
    section_id: str
    item_id: str


@dataclass(frozen=True)
class DeleteSectionInput:
    section_id: str


@dataclass(frozen=True)
class SectionOutput:
    section: CustomSection | None
    errors: list[ValidationError]
    success: bool
    changed: bool = False


@dataclass(frozen=True)
class ListSectionsOutput:
    sections: list[CustomSection]
    errors: list[ValidationError]
    success: bool
