from decimal import Decimal

import pytest

from storefront.storage import (
    EntityKind,
    ForeignKeyError,
    InMemoryStorage,
    IntegrityViolationError,
    RecordNotFoundError,
    UniqueConstraintError,
    UnknownFieldError,
)


async def make_category(storage, slug="tools", name="Tools"):
    return await storage.create(EntityKind.CATEGORY, {"name": name, "slug": slug})


async def make_product(storage, category_id, name="Hammer", price="12.50", stock=3):
    return await storage.create(EntityKind.PRODUCT, {
        "name": name,
        "price": Decimal(price),
        "stock": stock,
        "category_id": category_id,
    })


async def test_create_fills_generated_fields(storage):
    category = await make_category(storage)

    assert isinstance(category.id, str) and category.id
    assert category.description is None
    assert category.created_at is not None
    assert await storage.find_unique(EntityKind.CATEGORY, category.id) is not None


async def test_duplicate_slug_is_rejected(storage):
    await make_category(storage, slug="tools")

    with pytest.raises(UniqueConstraintError):
        await make_category(storage, slug="tools", name="Other tools")


async def test_product_must_reference_existing_category(storage):
    with pytest.raises(ForeignKeyError):
        await make_product(storage, "missing-category")


async def test_find_many_filters(storage):
    tools = await make_category(storage, slug="tools")
    garden = await make_category(storage, slug="garden", name="Garden")
    await make_product(storage, tools.id, name="Claw Hammer", stock=0)
    await make_product(storage, tools.id, name="Screwdriver", stock=7)
    await make_product(storage, garden.id, name="Rake", stock=2)

    empty = await storage.find_many(EntityKind.PRODUCT, {"stock": {"lt": 1}})
    assert [p.name for p in empty] == ["Claw Hammer"]

    in_tools = await storage.find_many(EntityKind.PRODUCT, {"category_id": tools.id}, order_by="name")
    assert [p.name for p in in_tools] == ["Claw Hammer", "Screwdriver"]

    hammers = await storage.find_many(EntityKind.PRODUCT, {"name": {"contains": "HAMMER"}})
    assert len(hammers) == 1

    either = await storage.find_many(
        EntityKind.PRODUCT, {"category_id": {"in": [garden.id]}, "stock": {"gte": 2}}
    )
    assert [p.name for p in either] == ["Rake"]

    by_stock = await storage.find_many(EntityKind.PRODUCT, order_by="-stock")
    assert [p.stock for p in by_stock] == [7, 2, 0]


async def test_find_unique_missing_returns_none(storage):
    assert await storage.find_unique(EntityKind.PRODUCT, "nope") is None


async def test_update(storage):
    category = await make_category(storage)
    product = await make_product(storage, category.id)

    updated = await storage.update(EntityKind.PRODUCT, product.id, {"price": Decimal("15.00"), "stock": 4})

    assert updated.price == Decimal("15.00")
    assert updated.stock == 4
    assert updated.name == "Hammer"

    with pytest.raises(RecordNotFoundError):
        await storage.update(EntityKind.PRODUCT, "nope", {"stock": 1})


async def test_unknown_fields_are_rejected(storage):
    with pytest.raises(UnknownFieldError):
        await storage.create(EntityKind.CATEGORY, {"name": "x", "slug": "x", "colour": "red"})

    with pytest.raises(UnknownFieldError):
        await storage.find_many(EntityKind.PRODUCT, {"colour": "red"})

    with pytest.raises(UnknownFieldError):
        await storage.find_many(EntityKind.PRODUCT, {"stock": {"between": [1, 2]}})


async def test_order_is_created_with_its_items(storage):
    category = await make_category(storage)
    hammer = await make_product(storage, category.id, price="12.50")
    nails = await make_product(storage, category.id, name="Nails", price="0.10")

    order = await storage.create(EntityKind.ORDER, {
        "client_name": "Ada",
        "client_phone": "555",
        "client_address": "1 Main St",
        "total_amount": Decimal("13.50"),
        "order_items": [
            {"product_id": hammer.id, "quantity": 1, "price_at_time": Decimal("12.50")},
            {"product_id": nails.id, "quantity": 10, "price_at_time": Decimal("0.10")},
        ],
    })

    assert order.status == "pending"
    assert [item.product_id for item in order.order_items] == [hammer.id, nails.id]
    assert all(item.order_id == order.id for item in order.order_items)

    [stored] = await storage.find_many(EntityKind.ORDER)
    assert len(stored.order_items) == 2
    assert stored.total_amount == Decimal("13.50")


async def test_order_with_unknown_product_writes_nothing(storage):
    with pytest.raises(ForeignKeyError):
        await storage.create(EntityKind.ORDER, {
            "client_name": "Ada",
            "client_phone": "555",
            "client_address": "1 Main St",
            "total_amount": Decimal("1.00"),
            "order_items": [{"product_id": "missing", "quantity": 1, "price_at_time": Decimal("1.00")}],
        })

    assert await storage.find_many(EntityKind.ORDER) == []
    assert await storage.find_many(EntityKind.ORDER_ITEM) == []


async def test_delete(storage):
    category = await make_category(storage)
    product = await make_product(storage, category.id)

    with pytest.raises(ForeignKeyError):
        await storage.delete(EntityKind.CATEGORY, category.id)

    await storage.delete(EntityKind.PRODUCT, product.id)
    assert await storage.find_unique(EntityKind.PRODUCT, product.id) is None

    with pytest.raises(RecordNotFoundError):
        await storage.delete(EntityKind.PRODUCT, product.id)


async def test_delete_many_returns_count(storage):
    await make_category(storage, slug="a")
    await make_category(storage, slug="b")

    assert await storage.delete_many(EntityKind.CATEGORY) == 2
    assert await storage.find_many(EntityKind.CATEGORY) == []


async def test_sqlite_enforces_check_constraints(sqlite_storage):
    category = await make_category(sqlite_storage)

    with pytest.raises(IntegrityViolationError):
        await make_product(sqlite_storage, category.id, stock=-1)


async def test_memory_storage_skips_check_constraints(memory_storage):
    category = await make_category(memory_storage)

    product = await make_product(memory_storage, category.id, stock=-1)

    assert product.stock == -1


async def test_memory_storage_can_relax_foreign_keys():
    storage = InMemoryStorage(enforce_foreign_keys=False)

    product = await make_product(storage, "orphaned")

    assert product.category_id == "orphaned"
    assert product.category is None


async def test_memory_storage_coerces_money_to_decimal(memory_storage):
    category = await make_category(memory_storage)

    product = await make_product(memory_storage, category.id, price="9.999")
    from_float = await memory_storage.create(EntityKind.PRODUCT, {
        "name": "Float", "price": 49.99, "stock": 1, "category_id": category.id,
    })

    assert product.price == Decimal("10.00")
    assert from_float.price == Decimal("49.99")


async def test_memory_storage_returns_fresh_instances(memory_storage):
    category = await make_category(memory_storage)
    category.name = "Changed locally"

    stored = await memory_storage.find_unique(EntityKind.CATEGORY, category.id)

    assert stored.name == "Tools"


async def test_create_with_existing_id_is_rejected(storage):
    first = await make_category(storage, slug="tools")

    with pytest.raises(UniqueConstraintError):
        await storage.create(EntityKind.CATEGORY, {"id": first.id, "name": "Other", "slug": "other"})

    [stored] = await storage.find_many(EntityKind.CATEGORY)
    assert stored.slug == "tools"


async def test_update_does_not_collide_with_itself(storage):
    category = await make_category(storage, slug="tools")

    updated = await storage.update(EntityKind.CATEGORY, category.id, {"slug": "tools", "name": "Hand tools"})

    assert updated.name == "Hand tools"


async def test_contains_treats_wildcards_literally(storage):
    tools = await make_category(storage, slug="tools")
    await make_product(storage, tools.id, name="Claw Hammer")
    await make_product(storage, tools.id, name="Tape 50%_off")

    assert await storage.find_many(EntityKind.PRODUCT, {"name": {"contains": "c_aw"}}) == []
    assert await storage.find_many(EntityKind.PRODUCT, {"name": {"contains": "%"}}) != []
    underscored = await storage.find_many(EntityKind.PRODUCT, {"name": {"contains": "_"}})
    assert [p.name for p in underscored] == ["Tape 50%_off"]


async def test_product_is_loaded_with_its_category(storage):
    tools = await make_category(storage, slug="tools")
    created = await make_product(storage, tools.id)
    garden = await make_category(storage, slug="garden", name="Garden")

    assert created.category.slug == "tools"
    [listed] = await storage.find_many(EntityKind.PRODUCT)
    assert listed.category.id == tools.id

    moved = await storage.update(EntityKind.PRODUCT, created.id, {"category_id": garden.id})
    assert moved.category.slug == "garden"
    assert (await storage.find_unique(EntityKind.PRODUCT, created.id)).category.name == "Garden"
