from pathlib import Path

import pytest

from catalog_admin.app_shell import cli
from catalog_admin.components.taxonomy import TaxonomyOutput

PROJECT_ROOT = Path(__file__).parents[2]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CATALOG_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CATALOG_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    monkeypatch.delenv("CATALOG_STORE", raising=False)
    monkeypatch.delenv("CATALOG_ASSET_HOST", raising=False)


def test_seed_all_tenants(capsys):
    assert cli.main(["seed"]) == 0

    out = capsys.readouterr().out
    assert "DISRUPTIVESOLUTIONSINC: seeded" in out
    assert "ECOSHIFTCORP: seeded" in out
    assert "VAH: seeded" in out

    assert cli.main(["seed", "--tenant", "VAH"]) == 0
    assert "VAH: already seeded" in capsys.readouterr().out


def test_add_then_remove_option(capsys):
    assert cli.main(["add-option", "VAH", "brand", "philips"]) == 0
    assert "brands:     PHILIPS, VAH" in capsys.readouterr().out

    assert cli.main(["remove-option", "VAH", "brand", "Philips"]) == 0
    assert "brands:     VAH" in capsys.readouterr().out


def test_unknown_tenant_fails():
    assert cli.main(["show", "ACME"]) == 1


def test_kind_is_validated_by_parser():
    with pytest.raises(SystemExit):
        cli.main(["add-option", "VAH", "colour", "red"])


def test_serve_runs_the_api_app(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert cli.main(["serve", "--port", "9000"]) == 0

    assert calls == [
        ("catalog_admin.api.main:app", {"host": "127.0.0.1", "port": 9000, "reload": False})
    ]


def test_report_without_taxonomy_fails():
    assert cli._report(TaxonomyOutput(taxonomy=None, errors=[], success=True)) == 1
