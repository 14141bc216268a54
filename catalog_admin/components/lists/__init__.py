"""Catalog lists component - quick-add categories, brands and websites."""

from .component import run, run_add, run_delete, run_list
from .models import (
    AddListItemInput,
    DeleteListItemInput,
    ListItemOutput,
    ListItemsInput,
    ListItemsOutput,
    ValidationError,
)
from .ports import ListStorePort

__all__ = [
    # Component entry points
    "run",
    "run_list",
    "run_add",
    "run_delete",
    # Models
    "ListItemsInput",
    "ListItemsOutput",
    "AddListItemInput",
    "DeleteListItemInput",
    "ListItemOutput",
    "ValidationError",
    # Ports
    "ListStorePort",
]
