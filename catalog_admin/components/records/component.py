"""
Record builder - assembles product and project snapshots and writes them once.

Pending files are uploaded before anything is written; an upload failure
aborts the whole operation. Files already uploaded by then stay on the asset
host unreferenced.
"""

from __future__ import annotations

import logging
from typing import Any

from catalog_admin.components.records.models import (
    DeleteRecordInput,
    GetRecordInput,
    ListRecordsInput,
    PublishProductInput,
    PublishProductOutput,
    RecordKind,
    RecordsOutput,
    RecordValidationError,
    SaveProjectInput,
    SaveProjectOutput,
    SectionSelection,
)
from catalog_admin.components.records.ports import RecordStorePort, UploaderPort
from catalog_admin.domain.collections import COLLECTION_PRODUCTS, COLLECTION_PROJECTS
from catalog_admin.domain.entities import DynamicSpec, ProductRecord, ProjectRecord
from catalog_admin.domain.errors import StoreError, UploadError
from catalog_admin.domain.normalize import normalize_option, parse_price
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document
from catalog_admin.rules.models import RecordsRules, TenantDefaults
from catalog_admin.services.uploads import PendingFile

logger = logging.getLogger(__name__)

RecordsInput = (
    PublishProductInput | SaveProjectInput | GetRecordInput | ListRecordsInput | DeleteRecordInput
)
RecordsResult = PublishProductOutput | SaveProjectOutput | RecordsOutput

COLLECTIONS: dict[str, str] = {"product": COLLECTION_PRODUCTS, "project": COLLECTION_PROJECTS}


def collect_dynamic_specs(sections: list[SectionSelection]) -> list[DynamicSpec]:
    """One value per section: the first checked item. Unchecked sections are skipped."""
    return [
        DynamicSpec(title=s.title, value=s.selected[0]) for s in sections if s.selected
    ]


def _missing(field: str, label: str) -> RecordValidationError:
    return RecordValidationError(
        code="MISSING_REQUIRED_FIELD", message=f"{label} is required", field=field
    )


class _Uploads:
    """Uploads pending files in order and remembers what went through."""

    def __init__(self, uploader: UploaderPort) -> None:
        self._uploader = uploader
        self.done: list[str] = []

    def resolve(self, pending: PendingFile | None, existing: str | None) -> str | None:
        if pending is None:
            return existing
        url = self._uploader.upload(pending)
        self.done.append(url)
        return url


class RecordsComponent:
    """Validates form state, resolves uploads and writes denormalized records."""

    def __init__(
        self,
        store: RecordStorePort,
        uploader: UploaderPort,
        tenants: dict[str, TenantDefaults],
        rules: RecordsRules | None = None,
    ) -> None:
        self._store = store
        self._uploader = uploader
        self._tenants = tenants
        self._rules = rules or RecordsRules()

    def run(self, input_data: RecordsInput) -> RecordsResult:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, PublishProductInput):
            return self.run_publish_product(input_data)
        elif isinstance(input_data, SaveProjectInput):
            return self.run_save_project(input_data)
        elif isinstance(input_data, GetRecordInput):
            return self.run_get(input_data)
        elif isinstance(input_data, ListRecordsInput):
            return self.run_list(input_data)
        elif isinstance(input_data, DeleteRecordInput):
            return self.run_delete(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Products ---

    def run_publish_product(self, input_data: PublishProductInput) -> PublishProductOutput:
        errors: list[RecordValidationError] = []
        name = input_data.name.strip()
        if not name:
            errors.append(_missing("name", "Product name"))
        if input_data.main_image is None and not input_data.main_image_url:
            errors.append(_missing("main_image", "Featured image"))
        if errors:
            return PublishProductOutput(errors=errors, success=False)

        uploads = _Uploads(self._uploader)
        try:
            main_url = uploads.resolve(input_data.main_image, input_data.main_image_url)
            gallery_url = uploads.resolve(input_data.gallery_image, input_data.gallery_image_url)
        except UploadError as e:
            self._log_orphans(uploads.done)
            logger.warning("Publishing %s aborted: %s", name, e)
            return PublishProductOutput(
                errors=[RecordValidationError(code="UPLOAD_FAILURE", message=str(e), field="images")],
                success=False,
            )

        record = ProductRecord(
            name=name,
            short_description=input_data.short_description,
            sku=input_data.sku.strip(),
            regular_price=parse_price(input_data.regular_price),
            sale_price=parse_price(input_data.sale_price),
            technical_specs=list(input_data.technical_specs),
            dynamic_specs=collect_dynamic_specs(input_data.sections),
            main_image=main_url or "",
            gallery_image=gallery_url or "",
            category=self._first(input_data.categories, self._rules.fallback_category),
            brand=self._first(input_data.brands, self._rules.fallback_brand),
            website=self._first(input_data.websites, self._rules.fallback_website),
        )

        try:
            record_id = self._write(COLLECTION_PRODUCTS, input_data.record_id, record.to_document())
        except StoreError as e:
            self._log_orphans(uploads.done)
            logger.exception("Publishing product %s failed", name)
            return PublishProductOutput(
                errors=[
                    RecordValidationError(
                        code="STORE_WRITE_FAILURE", message=f"Publishing failed: {e}", field="_store"
                    )
                ],
                success=False,
            )

        logger.info("Published product %s (%s)", name, record_id)
        return PublishProductOutput(
            errors=[],
            success=True,
            record_id=record_id,
            record=record.model_copy(update={"id": record_id}),
            reload=True,
        )

    # --- Projects ---

    def run_save_project(self, input_data: SaveProjectInput) -> SaveProjectOutput:
        title = input_data.title.strip()
        if not title:
            return SaveProjectOutput(errors=[_missing("title", "Project title")], success=False)

        errors: list[RecordValidationError] = []
        website = self._resolve_website(input_data.website)
        if website is None:
            errors.append(
                RecordValidationError(
                    code="UNKNOWN_TENANT",
                    message=f"Unknown website '{input_data.website}'",
                    field="website",
                )
            )
        status = input_data.status or self._rules.default_project_status
        if status not in self._rules.project_statuses:
            errors.append(
                RecordValidationError(
                    code="INVALID_STATUS",
                    message=f"Status must be one of: {', '.join(self._rules.project_statuses)}",
                    field="status",
                )
            )
        if errors:
            return SaveProjectOutput(errors=errors, success=False)

        uploads = _Uploads(self._uploader)
        try:
            main_url = uploads.resolve(input_data.main_image, input_data.main_image_url)
            logo_url = uploads.resolve(input_data.logo, input_data.logo_url)
        except UploadError as e:
            self._log_orphans(uploads.done)
            logger.warning("Saving project %s aborted: %s", title, e)
            return SaveProjectOutput(
                errors=[RecordValidationError(code="UPLOAD_FAILURE", message=str(e), field="images")],
                success=False,
            )

        record = ProjectRecord(
            title=title,
            details=input_data.details,
            website=website or "",
            main_image=main_url,
            logo=logo_url,
            status=status,
        )

        try:
            record_id = self._write(COLLECTION_PROJECTS, input_data.record_id, record.to_document())
        except StoreError as e:
            self._log_orphans(uploads.done)
            logger.exception("Saving project %s failed", title)
            return SaveProjectOutput(
                errors=[
                    RecordValidationError(
                        code="STORE_WRITE_FAILURE", message=f"Error saving project: {e}", field="_store"
                    )
                ],
                success=False,
            )

        logger.info("Saved project %s (%s)", title, record_id)
        return SaveProjectOutput(
            errors=[], success=True, record_id=record_id, record=record.model_copy(update={"id": record_id})
        )

    # --- Shared ---

    def run_get(self, input_data: GetRecordInput) -> RecordsOutput:
        try:
            doc = self._store.get(COLLECTIONS[input_data.kind], input_data.record_id)
        except StoreError as e:
            logger.exception("Reading %s %s failed", input_data.kind, input_data.record_id)
            return RecordsOutput(errors=[self._store_failure(e)], success=False)
        if doc is None:
            return RecordsOutput(
                errors=[
                    RecordValidationError(
                        code="RECORD_NOT_FOUND",
                        message=f"{input_data.kind.capitalize()} not found",
                        field="record_id",
                    )
                ],
                success=False,
            )
        return RecordsOutput(errors=[], success=True, records=[self._parse(input_data.kind, doc)])

    def run_list(self, input_data: ListRecordsInput) -> RecordsOutput:
        """Newest first, matching the admin list views."""
        try:
            docs = self._store.list(COLLECTIONS[input_data.kind], descending=True)
        except StoreError as e:
            logger.exception("Listing %ss failed", input_data.kind)
            return RecordsOutput(errors=[self._store_failure(e)], success=False)
        return RecordsOutput(
            errors=[], success=True, records=[self._parse(input_data.kind, d) for d in docs]
        )

    def run_delete(self, input_data: DeleteRecordInput) -> RecordsOutput:
        try:
            self._store.delete(COLLECTIONS[input_data.kind], input_data.record_id)
        except StoreError as e:
            logger.exception("Deleting %s %s failed", input_data.kind, input_data.record_id)
            return RecordsOutput(errors=[self._store_failure(e)], success=False)
        logger.info("Deleted %s %s", input_data.kind, input_data.record_id)
        return RecordsOutput(errors=[], success=True)

    # --- Internals ---

    def _write(self, collection: str, record_id: str | None, data: dict[str, Any]) -> str:
        if record_id:
            self._store.update(collection, record_id, {**data, "updated_at": SERVER_TIMESTAMP})
            return record_id
        return self._store.create(
            collection,
            {**data, "created_at": SERVER_TIMESTAMP, "updated_at": SERVER_TIMESTAMP},
        )

    def _first(self, selected: list[str], fallback: str) -> str:
        for value in selected:
            if value.strip():
                return value.strip()
        return fallback

    def _resolve_website(self, raw: str) -> str | None:
        """Map a tenant key or label to the stored label; blank picks the first tenant."""
        if not raw.strip():
            first = next(iter(self._tenants.values()), None)
            return first.label if first else None
        wanted = normalize_option(raw)
        for key, tenant in self._tenants.items():
            if wanted in (key, normalize_option(tenant.label)):
                return tenant.label
        return None

    def _parse(self, kind: RecordKind, doc: Document) -> ProductRecord | ProjectRecord:
        model = ProductRecord if kind == "product" else ProjectRecord
        return model.model_validate({**doc.data, "id": doc.id})

    def _store_failure(self, exc: StoreError) -> RecordValidationError:
        return RecordValidationError(code="STORE_WRITE_FAILURE", message=str(exc), field="_store")

    def _log_orphans(self, urls: list[str]) -> None:
        for url in urls:
            logger.warning("Uploaded asset left unreferenced: %s", url)
