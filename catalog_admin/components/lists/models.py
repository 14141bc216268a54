"""
Catalog lists component input/output models.

The flat quick-add lists (categories, brands, websites) offered as
checkboxes on the product form.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catalog_admin.domain.entities import ListItem


@dataclass(frozen=True)
class ValidationError:
    """Validation error with actionable message."""

    field: str
    code: str
    message: str


@dataclass(frozen=True)
class ListItemsInput:
    collection: str


@dataclass(frozen=True)
class ListItemsOutput:
    items: list[ListItem] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class AddListItemInput:
    collection: str
    raw_name: str


@dataclass(frozen=True)
class DeleteListItemInput:
    collection: str
    item_id: str


@dataclass(frozen=True)
class ListItemOutput:
    item: ListItem | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
