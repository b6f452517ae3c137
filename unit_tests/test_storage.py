import asyncio
import json

from gastro_hero.models import Recipe
from gastro_hero.storage import INDEX_KEY, JsonFileStore, SavedRecipeIndex, snapshot_key

def _recipe(rid):
    return Recipe(id=rid, title=f"Recipe {rid}", ingredients=["a"], instructions=["b"], minutes=20)

def test_save_offline_writes_snapshot_and_index(tmp_path):
    path = tmp_path / "store.json"

    async def run():
        idx = SavedRecipeIndex(JsonFileStore(str(path)))
        await idx.load()
        ok = await idx.save_offline(_recipe("42"))
        return idx, ok

    idx, ok = asyncio.run(run())
    assert ok
    assert idx.is_saved("42")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert json.loads(data[INDEX_KEY]) == ["42"]
    assert json.loads(data[snapshot_key("42")])["title"] == "Recipe 42"

def test_index_is_reloaded_and_snapshot_restored(tmp_path):
    path = str(tmp_path / "store.json")

    async def run():
        first = SavedRecipeIndex(JsonFileStore(path))
        await first.save_offline(_recipe("7"))
        second = SavedRecipeIndex(JsonFileStore(path))
        ids = await second.load()
        snap = await second.get_snapshot("7")
        return ids, snap

    ids, snap = asyncio.run(run())
    assert ids == frozenset({"7"})
    assert snap == _recipe("7")

def test_concurrent_saves_do_not_lose_updates(tmp_path):
    path = str(tmp_path / "store.json")

    async def run():
        idx = SavedRecipeIndex(JsonFileStore(path))
        await idx.load()
        await asyncio.gather(*(idx.save_offline(_recipe(str(i))) for i in range(5)))
        reloaded = SavedRecipeIndex(JsonFileStore(path))
        return idx.ids, await reloaded.load()

    in_memory, persisted = asyncio.run(run())
    assert in_memory == frozenset({"0", "1", "2", "3", "4"})
    assert persisted == in_memory

def test_write_failure_is_absorbed():
    class FailingStore:
        async def get_item(self, key):
            return None

        async def set_item(self, key, value):
            raise OSError("disk full")

    async def run():
        idx = SavedRecipeIndex(FailingStore())
        await idx.load()
        return idx, await idx.save_offline(_recipe("1"))

    idx, ok = asyncio.run(run())
    assert ok is False
    assert idx.ids == frozenset()

def test_corrupt_store_loads_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    async def run():
        idx = SavedRecipeIndex(JsonFileStore(str(path)))
        ids = await idx.load()
        snap = await idx.get_snapshot("1")
        return ids, snap

    ids, snap = asyncio.run(run())
    assert ids == frozenset()
    assert snap is None
