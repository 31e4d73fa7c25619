import asyncio
import json
from pathlib import Path

from catalog_service.data.records import ProductRecord
from catalog_service.service.persistence import JsonFileStorage, StoreSaver, load_store
from catalog_service.service.product_store import ProductStore


def test_save_then_load_roundtrip(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "products.json")
    records = [
        ProductRecord(id="1", name="Widget", description="d", price=12.34, category="c", picture_url="u"),
        ProductRecord(id="2", name="Staged", price=0.0, status="pending"),
    ]

    assert storage.save([record.to_dict() for record in records])

    assert storage.load() == records


def test_file_is_pretty_printed_array(tmp_path: Path) -> None:
    path = tmp_path / "products.json"
    JsonFileStorage(path).save([ProductRecord(id="1", name="Widget").to_dict()])

    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert json.loads(text)[0]["pictureUrl"] == ""


def test_missing_file_is_created_empty(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "products.json"

    assert JsonFileStorage(path).load() == []
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_corrupt_file_loads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "products.json"
    path.write_text("{not json", encoding="utf-8")

    assert JsonFileStorage(path).load() == []


def test_write_failure_is_reported_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    assert JsonFileStorage(blocker / "products.json").save([]) is False


def test_load_store_seeds_defaults_when_empty(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "products.json")

    store = load_store(storage)

    assert [record.id for record in store.list_products()] == ["1", "2"]
    assert store.revision == 1
    assert len(load_store(storage, seed_defaults=False)) == 0


def test_saver_skips_already_persisted_revision(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "products.json")
    store = ProductStore()
    saver = StoreSaver(store, storage)
    saver.mark_clean()

    assert saver.save_if_dirty() is False
    store.create({"name": "A"})
    assert saver.save_if_dirty() is True
    assert saver.save_if_dirty() is False
    assert saver.writes == 1


def test_coalesced_saves_write_latest_state(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "products.json")
    store = ProductStore()
    saver = StoreSaver(store, storage)
    saver.mark_clean()

    async def mutate_then_save() -> list:
        store.create({"name": "A"})
        store.create({"name": "B"})
        store.update("1", {"price": 3})
        return await asyncio.gather(saver.save_in_background(), saver.save_in_background())

    outcomes = asyncio.run(mutate_then_save())

    assert sorted(outcomes) == [False, True]
    assert saver.writes == 1
    assert storage.load() == store.list_products()
    assert storage.load()[0].price == 3.0
