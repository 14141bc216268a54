"""
End-to-end flows through the components on the SQLite store.
"""

from __future__ import annotations

import threading

from catalog_admin.components.lists import AddListItemInput, ListItemsInput, run
from catalog_admin.components.records import (
    GetRecordInput,
    PublishProductInput,
    SectionSelection,
)
from catalog_admin.components.taxonomy import (
    AddOptionInput,
    AddSectionItemInput,
    CreateSectionInput,
    DeleteSectionInput,
    EnsureSeededInput,
    GetTaxonomyInput,
    ListSectionsInput,
    RemoveOptionInput,
    TaxonomyComponent,
)
from catalog_admin.rules.models import TaxonomyRules
from catalog_admin.services.context import ServiceContext
from catalog_admin.services.uploads import PendingFile

PNG = PendingFile(filename="bulb.png", content_type="image/png", data=b"\x89PNG")


def test_ecoshift_catalog_end_to_end(test_ctx: ServiceContext) -> None:
    taxonomy = test_ctx.taxonomy

    seeded = taxonomy.run(EnsureSeededInput(tenant="ECOSHIFTCORP"))
    assert seeded.taxonomy.brands == ["ECOSHIFT"]
    assert len(seeded.taxonomy.categories) == 10

    taxonomy.run(AddOptionInput(tenant="ECOSHIFTCORP", kind="brand", raw_name=" philips "))
    taxonomy.run(AddOptionInput(tenant="ECOSHIFTCORP", kind="brand", raw_name="PHILIPS"))
    current = taxonomy.run(GetTaxonomyInput(tenant="ECOSHIFTCORP")).taxonomy
    assert current.brands == ["PHILIPS", "ECOSHIFT"]

    section = taxonomy.run(CreateSectionInput(title="colors")).section
    section = taxonomy.run(AddSectionItemInput(section_id=section.id, raw_name="Red")).section
    assert section.title == "COLORS"
    assert [i.name for i in section.items] == ["Red"]

    published = test_ctx.records.run(
        PublishProductInput(
            name="LED Bulb 9W",
            regular_price="199",
            sections=[SectionSelection(title=section.title, selected=["Red"])],
            categories=["LED BULBS"],
            brands=["PHILIPS"],
            websites=["Ecoshift Corp"],
            main_image=PNG,
        )
    )
    assert published.success

    # Later taxonomy edits leave the snapshot alone
    taxonomy.run(RemoveOptionInput(tenant="ECOSHIFTCORP", kind="brand", name="PHILIPS"))
    taxonomy.run(DeleteSectionInput(section_id=section.id))

    product = test_ctx.records.run(
        GetRecordInput(kind="product", record_id=published.record_id)
    ).records[0]
    assert product.brand == "PHILIPS"
    assert [(s.title, s.value) for s in product.dynamic_specs] == [("COLORS", "Red")]
    assert product.regular_price == 199
    assert product.main_image.startswith("/assets/")
    assert taxonomy.run(ListSectionsInput()).sections == []


def test_seeding_is_shared_between_sessions(test_ctx: ServiceContext) -> None:
    other = TaxonomyComponent(store=test_ctx.store, tenants=test_ctx.rules.tenants)

    test_ctx.taxonomy.run(AddOptionInput(tenant="VAH", kind="category", raw_name="Pumps"))

    assert other.run(GetTaxonomyInput(tenant="VAH")).taxonomy.categories == ["PUMPS"]


def test_concurrent_additions_survive_in_versioned_mode(test_ctx: ServiceContext) -> None:
    taxonomy = TaxonomyComponent(
        store=test_ctx.store,
        tenants=test_ctx.rules.tenants,
        rules=TaxonomyRules(write_mode="versioned", max_attempts=50),
    )
    taxonomy.run(EnsureSeededInput(tenant="VAH"))
    names = [f"BRAND {i}" for i in range(8)]

    threads = [
        threading.Thread(
            target=taxonomy.run,
            args=(AddOptionInput(tenant="VAH", kind="brand", raw_name=name),),
        )
        for name in names
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    brands = taxonomy.run(GetTaxonomyInput(tenant="VAH")).taxonomy.brands
    assert sorted(brands) == sorted(names + ["VAH"])


def test_concurrent_section_items_all_survive(test_ctx: ServiceContext) -> None:
    section = test_ctx.taxonomy.run(CreateSectionInput(title="sizes")).section
    names = [f"Size {i}" for i in range(8)]

    threads = [
        threading.Thread(
            target=test_ctx.taxonomy.run,
            args=(AddSectionItemInput(section_id=section.id, raw_name=name),),
        )
        for name in names
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    sections = test_ctx.taxonomy.run(ListSectionsInput()).sections
    assert sorted(i.name for i in sections[0].items) == names


def test_quick_add_lists(test_ctx: ServiceContext) -> None:
    run(AddListItemInput(collection="categories", raw_name="Solar"), store=test_ctx.store)
    run(AddListItemInput(collection="categories", raw_name="Outdoor"), store=test_ctx.store)

    out = run(ListItemsInput(collection="categories"), store=test_ctx.store)

    assert [i.name for i in out.items] == ["Solar", "Outdoor"]
