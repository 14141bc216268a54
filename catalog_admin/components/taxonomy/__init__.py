"""Taxonomy component - per-tenant brand/category options and custom sections."""

from catalog_admin.components.taxonomy.component import TAXONOMY_KINDS, TaxonomyComponent
from catalog_admin.components.taxonomy.models import (
    AddOptionInput,
    AddSectionItemInput,
    CreateSectionInput,
    DeleteSectionInput,
    DeleteSectionItemInput,
    EnsureSeededInput,
    GetTaxonomyInput,
    ListSectionsInput,
    ListSectionsOutput,
    RemoveOptionInput,
    SectionOutput,
    TaxonomyOutput,
    ValidationError,
)
from catalog_admin.components.taxonomy.ports import TaxonomyStorePort

__all__ = [
    # Component
    "TaxonomyComponent",
    "TAXONOMY_KINDS",
    # Models
    "EnsureSeededInput",
    "GetTaxonomyInput",
    "AddOptionInput",
    "RemoveOptionInput",
    "TaxonomyOutput",
    "ListSectionsInput",
    "ListSectionsOutput",
    "CreateSectionInput",
    "AddSectionItemInput",
    "DeleteSectionItemInput",
    "DeleteSectionInput",
    "SectionOutput",
    "ValidationError",
    # Ports
    "TaxonomyStorePort",
]
