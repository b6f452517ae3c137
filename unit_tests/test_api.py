from fastapi.testclient import TestClient

from apps.api import app as api
from gastro_hero.models import Recipe
from gastro_hero.storage import JsonFileStore, SavedRecipeIndex

def _fake_recipes():
    return [
        Recipe(id="1", title="Pasta Feta", ingredients=["pasta", "feta"], instructions=["Bake"]),
        Recipe(id="2", title="Tomato Salad", cuisine="Greek"),
    ]

def setup_function(_function):
    async def _fake_acquire(batch_size, fallback_size, settings=None):
        return _fake_recipes()[:batch_size]

    api.acquire = _fake_acquire
    api._index = None

def _client(tmp_path):
    api._index = SavedRecipeIndex(JsonFileStore(str(tmp_path / "store.json")))
    return TestClient(api.app)

def test_health(tmp_path):
    r = _client(tmp_path).get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_recipes_returns_items_in_order(tmp_path):
    r = _client(tmp_path).get("/recipes", params={"batch_size": 2, "fallback_size": 0})
    assert r.status_code == 200
    items = r.json()["items"]
    assert [i["id"] for i in items] == ["1", "2"]
    assert items[1]["cuisine"] == "Greek"
    assert items[1]["category"] == "dinner"

def test_recipes_rejects_invalid_batch_size(tmp_path):
    r = _client(tmp_path).get("/recipes", params={"batch_size": 0})
    assert r.status_code == 422

def test_save_and_read_back(tmp_path):
    client = _client(tmp_path)
    recipe = _fake_recipes()[0].model_dump()

    r = client.post("/saved", json=recipe)
    assert r.status_code == 200
    assert r.json() == {"saved": True, "ids": ["1"]}

    assert client.get("/saved").json() == {"ids": ["1"]}
    snap = client.get("/saved/1")
    assert snap.status_code == 200
    assert snap.json()["title"] == "Pasta Feta"

def test_unknown_saved_recipe_is_404(tmp_path):
    assert _client(tmp_path).get("/saved/999").status_code == 404

def test_concurrent_first_saves_share_one_index(tmp_path, monkeypatch):
    import asyncio

    import httpx

    monkeypatch.setattr(api, "settings", api.settings.model_copy(update={"store_path": str(tmp_path / "store.json")}))
    monkeypatch.setattr(api, "_index_lock", asyncio.Lock())
    api._index = None

    def body(rid):
        return Recipe(id=rid, title=f"Recipe {rid}").model_dump()

    async def run():
        transport = httpx.ASGITransport(app=api.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            await asyncio.gather(client.post("/saved", json=body("a")), client.post("/saved", json=body("b")))
            last = await client.post("/saved", json=body("c"))
            return last.json()

    out = asyncio.run(run())
    assert out == {"saved": True, "ids": ["a", "b", "c"]}

def test_lifespan_loads_index_at_startup(tmp_path, monkeypatch):
    path = str(tmp_path / "store.json")
    monkeypatch.setattr(api, "settings", api.settings.model_copy(update={"store_path": path}))
    api._index = None

    with TestClient(api.app) as client:
        assert api._index is not None
        assert client.get("/saved").json() == {"ids": []}
