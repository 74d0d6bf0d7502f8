import pytest

from storefront.integration import check, seed
from storefront.integration.fixtures import create_test_data
from storefront.storage import EntityKind, InMemoryStorage, UniqueConstraintError


class BrokenStorage(InMemoryStorage):
    async def create(self, kind, fields):
        raise UniqueConstraintError("UNIQUE constraint failed: categories.slug")


async def test_seed_builds_fixtures_and_disconnects(memory_storage, factory_for, capsys):
    fixtures = await seed.main(factory_for(memory_storage))

    out = capsys.readouterr().out
    assert "Seeding test data..." in out
    assert "Seeding completed." in out
    assert fixtures.order.total_amount is not None
    assert len(await memory_storage.find_many(EntityKind.PRODUCT)) == 2
    assert memory_storage.disconnected


async def test_seed_failure_still_disconnects(factory_for, capsys):
    storage = BrokenStorage()

    with pytest.raises(UniqueConstraintError):
        await seed.main(factory_for(storage))

    assert storage.disconnected
    assert "Seeding completed." not in capsys.readouterr().out


def test_seed_run_exits_non_zero_on_failure(monkeypatch, factory_for):
    storage = BrokenStorage()
    monkeypatch.setattr(seed, "open_storage", factory_for(storage))

    with pytest.raises(SystemExit) as exc_info:
        seed.run()

    assert exc_info.value.code == 1
    assert storage.disconnected


def test_seed_run_succeeds(monkeypatch, factory_for):
    storage = InMemoryStorage()
    monkeypatch.setattr(seed, "open_storage", factory_for(storage))

    seed.run()

    assert storage.disconnected


async def test_check_reports_pass(memory_storage, factory_for, capsys):
    await create_test_data(memory_storage)

    assert await check.main(factory_for(memory_storage)) is True
    assert capsys.readouterr().out.count("PASS") == 3


async def test_check_reports_failure(memory_storage, factory_for, capsys):
    category = await memory_storage.create(EntityKind.CATEGORY, {"name": "Toys", "slug": "toys"})
    bad = await memory_storage.create(EntityKind.PRODUCT, {
        "name": "Yo-yo", "price": "3.00", "stock": -4, "category_id": category.id,
    })

    assert await check.main(factory_for(memory_storage)) is False
    out = capsys.readouterr().out
    assert "FAIL" in out
    assert bad.id in out


def test_check_run_exit_codes(monkeypatch, factory_for):
    storage = InMemoryStorage()
    monkeypatch.setattr(check, "open_storage", factory_for(storage))

    with pytest.raises(SystemExit) as exc_info:
        check.run()

    assert exc_info.value.code == 0
