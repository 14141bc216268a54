from typing import Literal

from pydantic import BaseModel, Field, field_validator

WriteMode = Literal["replace", "versioned"]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class TenantDefaults(BaseModel):
    label: str
    brands: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


class TaxonomyRules(BaseModel):
    write_mode: WriteMode = "versioned"
    max_attempts: int = Field(default=3, ge=1)


class RecordsRules(BaseModel):
    fallback_category: str = "Uncategorized"
    fallback_brand: str = "Generic"
    fallback_website: str = "N/A"
    project_statuses: list[str] = Field(default_factory=lambda: ["Published", "Draft", "Archived"])
    default_project_status: str = "Published"


class UploadsRules(BaseModel):
    max_upload_bytes: int
    allowlist_mime_types: list[str]


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    tenants: dict[str, TenantDefaults]
    taxonomy: TaxonomyRules = Field(default_factory=TaxonomyRules)
    records: RecordsRules = Field(default_factory=RecordsRules)
    uploads: UploadsRules
    ops: OpsRules = Field(default_factory=OpsRules)

    @field_validator("tenants")
    @classmethod
    def _tenant_keys_upper(cls, v: dict[str, TenantDefaults]) -> dict[str, TenantDefaults]:
        if not v:
            raise ValueError("at least one tenant must be configured")
        for key in v:
            if key != key.strip().upper() or " " in key:
                raise ValueError(f"tenant key '{key}' must be upper-case without spaces")
        return v
