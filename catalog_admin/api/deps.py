import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from catalog_admin.components.records import RecordsComponent
from catalog_admin.components.taxonomy import TaxonomyComponent
from catalog_admin.ports.store import DocumentStorePort
from catalog_admin.rules.loader import load_rules
from catalog_admin.rules.models import Rules
from catalog_admin.services.context import ServiceContext


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = os.environ.get("CATALOG_DATA_DIR", "./data")
        self.rules_path = Path(os.environ.get("CATALOG_RULES_PATH", str(self.base_dir / "rules.yaml")))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Context ---
@lru_cache
def get_context() -> ServiceContext:
    """One store and asset host per process; live listeners hang off the store."""
    return ServiceContext.from_env(get_rules())


def get_store(ctx: ServiceContext = Depends(get_context)) -> DocumentStorePort:
    return ctx.store


# --- Component Services ---
def get_taxonomy(ctx: ServiceContext = Depends(get_context)) -> TaxonomyComponent:
    return ctx.taxonomy


def get_records(ctx: ServiceContext = Depends(get_context)) -> RecordsComponent:
    return ctx.records
