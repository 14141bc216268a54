from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from catalog_admin.adapters.cloudinary import CloudinaryAssetHost
from catalog_admin.adapters.fs.asset_host import LocalAssetHost
from catalog_admin.adapters.sqlite.document_store import SQLiteDocumentStore
from catalog_admin.adapters.sqlite.migrator import DEFAULT_MIGRATIONS_DIR, SQLiteMigrator
from catalog_admin.components.records import RecordsComponent
from catalog_admin.components.taxonomy import TaxonomyComponent
from catalog_admin.ports.assets import AssetHostPort
from catalog_admin.ports.store import DocumentStorePort
from catalog_admin.rules.models import Rules
from catalog_admin.services.feeds import LiveFeed, product_feed, project_feed, section_feed
from catalog_admin.services.uploads import UploadService

logger = logging.getLogger(__name__)

STORE_SQLITE = "sqlite"
STORE_FIRESTORE = "firestore"
HOST_LOCAL = "local"
HOST_CLOUDINARY = "cloudinary"


class ConfigurationError(RuntimeError):
    """Raised when the environment names an unknown or incomplete backend."""


@dataclass
class ServiceContext:
    store: DocumentStorePort
    asset_host: AssetHostPort
    uploads: UploadService
    taxonomy: TaxonomyComponent
    records: RecordsComponent
    rules: Rules

    @classmethod
    def create(
        cls,
        rules: Rules,
        *,
        data_dir: str | Path = "./data",
        store_kind: str = STORE_SQLITE,
        asset_host_kind: str = HOST_LOCAL,
        asset_base_url: str = "/assets",
        env: dict[str, str] | None = None,
    ) -> ServiceContext:
        env = dict(os.environ) if env is None else env
        data_path = Path(data_dir)

        store = _build_store(store_kind, data_path, env)
        asset_host = _build_asset_host(asset_host_kind, data_path, asset_base_url, env)
        uploads = UploadService(asset_host, rules.uploads)

        taxonomy = TaxonomyComponent(store=store, tenants=rules.tenants, rules=rules.taxonomy)
        records = RecordsComponent(
            store=store, uploader=uploads, tenants=rules.tenants, rules=rules.records
        )
        logger.info("Service context ready (store=%s, assets=%s)", store_kind, asset_host_kind)
        return cls(
            store=store,
            asset_host=asset_host,
            uploads=uploads,
            taxonomy=taxonomy,
            records=records,
            rules=rules,
        )

    @classmethod
    def from_env(cls, rules: Rules, env: dict[str, str] | None = None) -> ServiceContext:
        env = dict(os.environ) if env is None else env
        return cls.create(
            rules,
            data_dir=env.get("CATALOG_DATA_DIR", "./data"),
            store_kind=env.get("CATALOG_STORE", STORE_SQLITE),
            asset_host_kind=env.get("CATALOG_ASSET_HOST", HOST_LOCAL),
            asset_base_url=env.get("CATALOG_ASSET_BASE_URL", "/assets"),
            env=env,
        )

    # --- Live feeds ---

    def product_feed(self, **kwargs: Any) -> LiveFeed[Any]:
        return product_feed(self.store, **kwargs)

    def project_feed(self, **kwargs: Any) -> LiveFeed[Any]:
        return project_feed(self.store, **kwargs)

    def section_feed(self, **kwargs: Any) -> LiveFeed[Any]:
        return section_feed(self.store, **kwargs)


def _build_store(kind: str, data_path: Path, env: dict[str, str]) -> DocumentStorePort:
    if kind == STORE_SQLITE:
        data_path.mkdir(parents=True, exist_ok=True)
        db_path = str(data_path / "catalog.db")
        migrations_dir = env.get("CATALOG_MIGRATIONS_DIR", DEFAULT_MIGRATIONS_DIR)
        SQLiteMigrator(db_path, migrations_dir).run_migrations()
        return SQLiteDocumentStore(db_path)
    if kind == STORE_FIRESTORE:
        # Imported lazily so local runs do not need Google credentials
        from catalog_admin.adapters.firestore_store import FirestoreDocumentStore

        return FirestoreDocumentStore(project=env.get("GOOGLE_CLOUD_PROJECT"))
    raise ConfigurationError(f"Unknown CATALOG_STORE '{kind}'")


def _build_asset_host(
    kind: str, data_path: Path, base_url: str, env: dict[str, str]
) -> AssetHostPort:
    if kind == HOST_LOCAL:
        return LocalAssetHost(str(data_path / "assets"), base_url=base_url)
    if kind == HOST_CLOUDINARY:
        cloud_name = env.get("CLOUDINARY_CLOUD_NAME")
        preset = env.get("CLOUDINARY_UPLOAD_PRESET")
        if not cloud_name or not preset:
            raise ConfigurationError(
                "CLOUDINARY_CLOUD_NAME and CLOUDINARY_UPLOAD_PRESET are required"
            )
        return CloudinaryAssetHost(cloud_name, preset)
    raise ConfigurationError(f"Unknown CATALOG_ASSET_HOST '{kind}'")
