from pathlib import Path

import pytest

import catalog_admin.adapters.sqlite.migrator as migrator
from catalog_admin.adapters.fs.asset_host import LocalAssetHost
from catalog_admin.adapters.sqlite.document_store import SQLiteDocumentStore
from catalog_admin.app_shell.config import validate_ops_rules
from catalog_admin.services.context import ConfigurationError, ServiceContext


def test_context_defaults_to_sqlite_and_local_assets(rules, tmp_path):
    ctx = ServiceContext.from_env(rules, env={"CATALOG_DATA_DIR": str(tmp_path)})

    assert isinstance(ctx.store, SQLiteDocumentStore)
    assert isinstance(ctx.asset_host, LocalAssetHost)
    assert (tmp_path / "catalog.db").exists()


def test_migrations_ship_inside_the_package(rules, tmp_path, monkeypatch):
    package_dir = Path(migrator.__file__).parents[2]
    assert Path(migrator.DEFAULT_MIGRATIONS_DIR) == package_dir / "migrations"

    monkeypatch.chdir(tmp_path)
    ctx = ServiceContext.from_env(rules, env={"CATALOG_DATA_DIR": "data"})

    assert ctx.store.get("products", "missing") is None
    assert (tmp_path / "data" / "catalog.db").exists()


def test_migrations_dir_can_be_overridden(rules, tmp_path):
    custom = tmp_path / "sql"
    custom.mkdir()
    (custom / "0001_documents.sql").write_text(
        (Path(migrator.DEFAULT_MIGRATIONS_DIR) / "0001_documents.sql").read_text()
    )
    (custom / "0002_marker.sql").write_text("CREATE TABLE marker (id INTEGER);")
    data_dir = tmp_path / "data"

    ServiceContext.from_env(
        rules, env={"CATALOG_DATA_DIR": str(data_dir), "CATALOG_MIGRATIONS_DIR": str(custom)}
    )

    applied = migrator.SQLiteMigrator(str(data_dir / "catalog.db"), str(custom))
    assert applied.pending() == []


def test_unknown_store_rejected(rules, tmp_path):
    with pytest.raises(ConfigurationError, match="CATALOG_STORE"):
        ServiceContext.from_env(
            rules, env={"CATALOG_DATA_DIR": str(tmp_path), "CATALOG_STORE": "mongo"}
        )


def test_cloudinary_requires_credentials(rules, tmp_path):
    with pytest.raises(ConfigurationError, match="CLOUDINARY"):
        ServiceContext.from_env(
            rules, env={"CATALOG_DATA_DIR": str(tmp_path), "CATALOG_ASSET_HOST": "cloudinary"}
        )


def test_ops_rules_pass_with_defaults(rules):
    validate_ops_rules(rules, env={})


def test_ops_rules_report_required_env(rules):
    rules.ops.required_env.append("CATALOG_SECRET")

    with pytest.raises(ConfigurationError, match="CATALOG_SECRET"):
        validate_ops_rules(rules, env={})


def test_ops_rules_check_backend_env(rules):
    env = {"CATALOG_ASSET_HOST": "cloudinary", "CLOUDINARY_CLOUD_NAME": "demo"}

    with pytest.raises(ConfigurationError, match="CLOUDINARY_UPLOAD_PRESET"):
        validate_ops_rules(rules, env=env)
