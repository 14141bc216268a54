from pathlib import Path

import pytest

from catalog_admin.rules.loader import load_rules

MINIMAL = """
project:
  slug: test
  rules_version: "1"
tenants:
  ACME:
    label: Acme
uploads:
  max_upload_bytes: 1024
  allowlist_mime_types: [image/png]
"""


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    return path


def test_project_rules_have_three_tenants(rules):
    assert list(rules.tenants) == ["DISRUPTIVESOLUTIONSINC", "ECOSHIFTCORP", "VAH"]
    assert rules.tenants["ECOSHIFTCORP"].brands == ["ECOSHIFT"]
    assert len(rules.tenants["ECOSHIFTCORP"].categories) == 10
    assert rules.taxonomy.write_mode == "versioned"


def test_minimal_rules_get_defaults(tmp_path):
    rules = load_rules(write(tmp_path, MINIMAL))

    assert rules.taxonomy.max_attempts == 3
    assert rules.records.fallback_category == "Uncategorized"
    assert rules.records.project_statuses == ["Published", "Draft", "Archived"]
    assert rules.ops.required_env == []


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(write(tmp_path, "project: [unclosed"))


def test_lower_case_tenant_key_rejected(tmp_path):
    with pytest.raises(ValueError, match="upper-case"):
        load_rules(write(tmp_path, MINIMAL.replace("ACME:", "acme:")))


def test_unknown_write_mode_rejected(tmp_path):
    text = MINIMAL + "taxonomy:\n  write_mode: optimistic\n"
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(write(tmp_path, text))
