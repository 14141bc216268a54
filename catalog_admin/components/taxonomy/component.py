"""
Taxonomy component - per-tenant brand/category options and custom sections.

Brand and category lists are stored as one document per tenant in
`classifications/{tenant}` and rewritten whole on every change. In
"replace" mode the rewrite is unconditional, so two sessions editing the
same tenant concurrently can lose an update. In "versioned" mode the write
is conditioned on the version read and re-applied to a fresh read when it
loses, up to `max_attempts` times.

Custom-section items are appended with the store's atomic array union and are
safe under concurrent writers. Deleting an item rewrites the whole list.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from uuid import uuid4

from catalog_admin.components.taxonomy.models import (
    AddOptionInput,
    AddSectionItemInput,
    CreateSectionInput,
    DeleteSectionInput,
    DeleteSectionItemInput,
    EnsureSeededInput,
    GetTaxonomyInput,
    ListSectionsInput,
    ListSectionsOutput,
    RemoveOptionInput,
    SectionOutput,
    TaxonomyOutput,
    ValidationError,
)
from catalog_admin.components.taxonomy.ports import TaxonomyStorePort
from catalog_admin.domain.collections import COLLECTION_CLASSIFICATIONS, COLLECTION_CUSTOM_SECTIONS
from catalog_admin.domain.entities import CustomSection, SectionItem, TaxonomySet
from catalog_admin.domain.errors import StoreError, VersionConflict
from catalog_admin.domain.normalize import (
    clean_label,
    dedupe_normalized,
    normalize_option,
    normalize_title,
    union_ordered,
)
from catalog_admin.ports.store import SERVER_TIMESTAMP, Document
from catalog_admin.rules.models import TaxonomyRules, TenantDefaults

logger = logging.getLogger(__name__)

TAXONOMY_KINDS = ("brand", "category")

TaxonomyInput = (
    EnsureSeededInput
    | GetTaxonomyInput
    | AddOptionInput
    | RemoveOptionInput
    | ListSectionsInput
    | CreateSectionInput
    | AddSectionItemInput
    | DeleteSectionItemInput
    | DeleteSectionInput
)
TaxonomyResult = TaxonomyOutput | SectionOutput | ListSectionsOutput

# Returns the new set, or None when the mutation is a no-op.
Mutation = Callable[[TaxonomySet], TaxonomySet | None]


def _store_error(action: str, exc: Exception) -> ValidationError:
    return ValidationError(
        code="STORE_WRITE_FAILURE",
        message=f"Could not {action}: {exc}",
        field="_store",
    )


class TaxonomyComponent:
    """Keeps tenant option lists and custom sections consistent across sessions."""

    def __init__(
        self,
        store: TaxonomyStorePort,
        tenants: dict[str, TenantDefaults],
        rules: TaxonomyRules | None = None,
    ) -> None:
        self._store = store
        self._tenants = tenants
        self._rules = rules or TaxonomyRules()

    def run(self, input_data: TaxonomyInput) -> TaxonomyResult:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, EnsureSeededInput):
            return self.run_ensure_seeded(input_data)
        elif isinstance(input_data, GetTaxonomyInput):
            return self.run_get(input_data)
        elif isinstance(input_data, AddOptionInput):
            return self.run_add_option(input_data)
        elif isinstance(input_data, RemoveOptionInput):
            return self.run_remove_option(input_data)
        elif isinstance(input_data, ListSectionsInput):
            return self.run_list_sections(input_data)
        elif isinstance(input_data, CreateSectionInput):
            return self.run_create_section(input_data)
        elif isinstance(input_data, AddSectionItemInput):
            return self.run_add_section_item(input_data)
        elif isinstance(input_data, DeleteSectionItemInput):
            return self.run_delete_section_item(input_data)
        elif isinstance(input_data, DeleteSectionInput):
            return self.run_delete_section(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Brand / category options ---

    def run_ensure_seeded(self, input_data: EnsureSeededInput) -> TaxonomyOutput:
        """Create the tenant's set from defaults, or merge missing defaults into it."""
        errors = self._check_tenant(input_data.tenant)
        if errors:
            return TaxonomyOutput(taxonomy=None, errors=errors, success=False)

        defaults = self._default_set(input_data.tenant)
        try:
            existed = self._store.get(COLLECTION_CLASSIFICATIONS, input_data.tenant) is not None
        except StoreError as e:
            logger.exception("Loading taxonomy for %s failed", input_data.tenant)
            return TaxonomyOutput(
                taxonomy=None, errors=[_store_error("load taxonomy", e)], success=False
            )

        def merge_defaults(current: TaxonomySet) -> TaxonomySet | None:
            brands = union_ordered(current.brands, defaults.brands)
            categories = union_ordered(current.categories, defaults.categories)
            if brands == current.brands and categories == current.categories:
                return None
            return current.model_copy(update={"brands": brands, "categories": categories})

        output = self._mutate(input_data.tenant, merge_defaults, "seed taxonomy")
        if output.success and not existed:
            return replace(output, changed=True)
        return output

    def run_get(self, input_data: GetTaxonomyInput) -> TaxonomyOutput:
        errors = self._check_tenant(input_data.tenant)
        if errors:
            return TaxonomyOutput(taxonomy=None, errors=errors, success=False)
        try:
            taxonomy, _ = self._load(input_data.tenant)
        except StoreError as e:
            logger.exception("Loading taxonomy for %s failed", input_data.tenant)
            return TaxonomyOutput(
                taxonomy=None, errors=[_store_error("load taxonomy", e)], success=False
            )
        return TaxonomyOutput(taxonomy=taxonomy, errors=[], success=True)

    def run_add_option(self, input_data: AddOptionInput) -> TaxonomyOutput:
        """Prepend a normalized option; duplicates and blanks are no-ops."""
        errors = self._check_tenant(input_data.tenant) + self._check_kind(input_data.kind)
        if errors:
            return TaxonomyOutput(taxonomy=None, errors=errors, success=False)

        name = normalize_option(input_data.raw_name)
        if not name:
            logger.warning("Ignoring empty %s for %s", input_data.kind, input_data.tenant)
            return TaxonomyOutput(
                taxonomy=None,
                errors=[
                    ValidationError(
                        code="VALIDATION_EMPTY",
                        message=f"A {input_data.kind} name is required",
                        field="raw_name",
                    )
                ],
                success=False,
            )

        def prepend(current: TaxonomySet) -> TaxonomySet | None:
            options = current.options(input_data.kind)
            if name in options:
                return None
            return current.with_options(input_data.kind, [name, *options])

        return self._mutate(input_data.tenant, prepend, f"add {input_data.kind}")

    def run_remove_option(self, input_data: RemoveOptionInput) -> TaxonomyOutput:
        errors = self._check_tenant(input_data.tenant) + self._check_kind(input_data.kind)
        if errors:
            return TaxonomyOutput(
                taxonomy=None, errors=errors, success=False, selected=list(input_data.selected)
            )

        name = normalize_option(input_data.name)

        def drop(current: TaxonomySet) -> TaxonomySet | None:
            options = current.options(input_data.kind)
            if name not in options:
                return None
            return current.with_options(input_data.kind, [o for o in options if o != name])

        output = self._mutate(input_data.tenant, drop, f"remove {input_data.kind}")
        if not output.success:
            # Leave the caller's selection as it was so the action can be retried.
            return replace(output, selected=list(input_data.selected))
        selected = [s for s in input_data.selected if normalize_option(s) != name]
        return replace(output, selected=selected)

    # --- Custom sections ---

    def run_list_sections(self, input_data: ListSectionsInput) -> ListSectionsOutput:
        _ = input_data
        try:
            docs = self._store.list(COLLECTION_CUSTOM_SECTIONS, descending=False)
        except StoreError as e:
            logger.exception("Listing custom sections failed")
            return ListSectionsOutput(
                sections=[], errors=[_store_error("list sections", e)], success=False
            )
        return ListSectionsOutput(
            sections=[self._parse_section(d) for d in docs], errors=[], success=True
        )

    def run_create_section(self, input_data: CreateSectionInput) -> SectionOutput:
        title = normalize_title(input_data.title)
        if not title:
            logger.warning("Ignoring custom section with empty title")
            return SectionOutput(
                section=None,
                errors=[
                    ValidationError(
                        code="VALIDATION_EMPTY",
                        message="Section title is required",
                        field="title",
                    )
                ],
                success=False,
            )

        try:
            section_id = self._store.create(
                COLLECTION_CUSTOM_SECTIONS,
                {"title": title, "items": [], "created_at": SERVER_TIMESTAMP},
            )
            section = self._get_section(section_id)
        except StoreError as e:
            logger.exception("Creating custom section %s failed", title)
            return SectionOutput(
                section=None, errors=[_store_error("create section", e)], success=False
            )

        logger.info("Created custom section %s (%s)", title, section_id)
        return SectionOutput(section=section, errors=[], success=True, changed=True)

    def run_add_section_item(self, input_data: AddSectionItemInput) -> SectionOutput:
        """Append an item atomically. Names are kept as typed and may repeat."""
        name = clean_label(input_data.raw_name)
        if not name:
            logger.warning("Ignoring empty item for section %s", input_data.section_id)
            return SectionOutput(
                section=None,
                errors=[
                    ValidationError(
                        code="VALIDATION_EMPTY",
                        message="Item name is required",
                        field="raw_name",
                    )
                ],
                success=False,
            )

        try:
            if self._store.get(COLLECTION_CUSTOM_SECTIONS, input_data.section_id) is None:
                return self._section_not_found(input_data.section_id)
            item = SectionItem(id=uuid4().hex, name=name)
            self._store.array_union(
                COLLECTION_CUSTOM_SECTIONS, input_data.section_id, "items", [item.model_dump()]
            )
            section = self._get_section(input_data.section_id)
        except StoreError as e:
            logger.exception("Adding item to section %s failed", input_data.section_id)
            return SectionOutput(
                section=None, errors=[_store_error("add section item", e)], success=False
            )

        return SectionOutput(section=section, errors=[], success=True, changed=True)

    def run_delete_section_item(self, input_data: DeleteSectionItemInput) -> SectionOutput:
        try:
            doc = self._store.get(COLLECTION_CUSTOM_SECTIONS, input_data.section_id)
            if doc is None:
                return self._section_not_found(input_data.section_id)
            section = self._parse_section(doc)
            remaining = [i for i in section.items if i.id != input_data.item_id]
            if len(remaining) == len(section.items):
                return SectionOutput(section=section, errors=[], success=True)

            self._store.update(
                COLLECTION_CUSTOM_SECTIONS,
                input_data.section_id,
                {"items": [i.model_dump() for i in remaining]},
            )
        except StoreError as e:
            logger.exception("Deleting item from section %s failed", input_data.section_id)
            return SectionOutput(
                section=None, errors=[_store_error("delete section item", e)], success=False
            )

        return SectionOutput(
            section=section.model_copy(update={"items": remaining}),
            errors=[],
            success=True,
            changed=True,
        )

    def run_delete_section(self, input_data: DeleteSectionInput) -> SectionOutput:
        """Delete the section. Products keep the values they copied from it."""
        try:
            self._store.delete(COLLECTION_CUSTOM_SECTIONS, input_data.section_id)
        except StoreError as e:
            logger.exception("Deleting section %s failed", input_data.section_id)
            return SectionOutput(
                section=None, errors=[_store_error("delete section", e)], success=False
            )
        logger.info("Deleted custom section %s", input_data.section_id)
        return SectionOutput(section=None, errors=[], success=True, changed=True)

    # --- Internals ---

    def _check_tenant(self, tenant: str) -> list[ValidationError]:
        if tenant in self._tenants:
            return []
        return [
            ValidationError(
                code="UNKNOWN_TENANT",
                message=f"Unknown website '{tenant}'",
                field="tenant",
            )
        ]

    def _check_kind(self, kind: str) -> list[ValidationError]:
        if kind in TAXONOMY_KINDS:
            return []
        return [
            ValidationError(
                code="UNKNOWN_KIND",
                message=f"Kind must be one of: {', '.join(TAXONOMY_KINDS)}",
                field="kind",
            )
        ]

    def _default_set(self, tenant: str) -> TaxonomySet:
        defaults = self._tenants[tenant]
        return TaxonomySet(
            tenant=tenant,
            brands=dedupe_normalized(defaults.brands),
            categories=dedupe_normalized(defaults.categories),
        )

    def _to_document(self, taxonomy: TaxonomySet) -> dict[str, object]:
        return {**taxonomy.to_document(), "updated_at": SERVER_TIMESTAMP}

    def _load(self, tenant: str) -> tuple[TaxonomySet, str | None]:
        """Read the tenant's set, seeding it from defaults on first access."""
        doc = self._store.get(COLLECTION_CLASSIFICATIONS, tenant)
        if doc is None:
            try:
                self._store.create(
                    COLLECTION_CLASSIFICATIONS,
                    self._to_document(self._default_set(tenant)),
                    doc_id=tenant,
                )
                logger.info("Seeded taxonomy for %s", tenant)
            except VersionConflict:
                logger.info("Taxonomy for %s was seeded by another session", tenant)
            doc = self._store.get(COLLECTION_CLASSIFICATIONS, tenant)
            if doc is None:
                raise StoreError(f"Taxonomy for {tenant} missing after seeding")
        return TaxonomySet.model_validate({**doc.data, "tenant": tenant}), doc.version

    def _mutate(self, tenant: str, mutation: Mutation, action: str) -> TaxonomyOutput:
        versioned = self._rules.write_mode == "versioned"
        attempts = self._rules.max_attempts if versioned else 1
        try:
            for attempt in range(1, attempts + 1):
                current, version = self._load(tenant)
                updated = mutation(current)
                if updated is None:
                    return TaxonomyOutput(taxonomy=current, errors=[], success=True)
                try:
                    self._store.set(
                        COLLECTION_CLASSIFICATIONS,
                        tenant,
                        self._to_document(updated),
                        if_version=version if versioned else None,
                    )
                except VersionConflict:
                    logger.info(
                        "Taxonomy for %s changed concurrently (%d/%d)", tenant, attempt, attempts
                    )
                    continue
                logger.info("%s on %s committed", action, tenant)
                return TaxonomyOutput(taxonomy=updated, errors=[], success=True, changed=True)
            raise VersionConflict(f"Taxonomy for {tenant} kept changing, gave up")
        except StoreError as e:
            logger.exception("Could not %s for %s", action, tenant)
            return TaxonomyOutput(taxonomy=None, errors=[_store_error(action, e)], success=False)

    def _parse_section(self, doc: Document) -> CustomSection:
        return CustomSection.model_validate({**doc.data, "id": doc.id})

    def _get_section(self, section_id: str) -> CustomSection:
        doc = self._store.get(COLLECTION_CUSTOM_SECTIONS, section_id)
        if doc is None:
            raise StoreError(f"Section {section_id} not found")
        return self._parse_section(doc)

    def _section_not_found(self, section_id: str) -> SectionOutput:
        return SectionOutput(
            section=None,
            errors=[
                ValidationError(
                    code="SECTION_NOT_FOUND",
                    message=f"Section {section_id} not found",
                    field="section_id",
                )
            ],
            success=False,
        )
