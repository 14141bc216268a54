from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from catalog_admin.rules.loader import load_rules
from catalog_admin.rules.models import Rules
from catalog_admin.services.context import ServiceContext

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> Rules:
    """The real rules file from the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def test_data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def test_ctx(rules: Rules, test_data_dir: Path) -> ServiceContext:
    """
    A full ServiceContext backed by a migrated temporary SQLite store and a
    local asset directory.
    """
    return ServiceContext.create(rules, data_dir=test_data_dir, env={})


@pytest.fixture
def client(test_ctx: ServiceContext):
    from catalog_admin.api.deps import get_context
    from catalog_admin.api.main import app

    app.dependency_overrides[get_context] = lambda: test_ctx
    yield TestClient(app)
    app.dependency_overrides.clear()
