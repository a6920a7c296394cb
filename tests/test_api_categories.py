import pytest

from tabletmenu.core.config import CategoryDeletePolicy
from tabletmenu.main import settings


async def category_ids(http):
    r = await http.get("/api/categories")
    assert r.status_code == 200, r.text
    return [c["id"] for c in r.json()]


async def test_new_categories_are_appended(create):
    first = await create("/api/categories", {"name": "Quyuq Taomlar"})
    second = await create("/api/categories", {"name": "Ichimliklar", "view_type": "list"})

    assert first["sort_order"] == 1
    assert second["sort_order"] == 2
    assert first["view_type"] == "grid"
    assert second["view_type"] == "list"


async def test_list_orders_by_sort_order_then_id(http, create):
    a = await create("/api/categories", {"name": "A", "sort_order": 5})
    b = await create("/api/categories", {"name": "B", "sort_order": 5})
    c = await create("/api/categories", {"name": "C", "sort_order": 1})

    assert await category_ids(http) == [c["id"], a["id"], b["id"]]


async def test_reorder_applies_whole_batch(http, create):
    a = await create("/api/categories", {"name": "A"})
    b = await create("/api/categories", {"name": "B"})
    c = await create("/api/categories", {"name": "C"})

    r = await http.put("/api/categories/reorder", json={"categories": [
        {"id": c["id"], "sort_order": 1},
        {"id": a["id"], "sort_order": 2},
        {"id": b["id"], "sort_order": 3},
    ]})

    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "updated": 3}
    assert await category_ids(http) == [c["id"], a["id"], b["id"]]


async def test_reorder_with_unknown_id_changes_nothing(http, create):
    a = await create("/api/categories", {"name": "A"})
    b = await create("/api/categories", {"name": "B"})

    r = await http.put("/api/categories/reorder", json={"categories": [
        {"id": b["id"], "sort_order": 1},
        {"id": 999, "sort_order": 2},
        {"id": a["id"], "sort_order": 3},
    ]})

    assert r.status_code == 400
    assert "999" in r.json()["detail"]
    assert await category_ids(http) == [a["id"], b["id"]]


async def test_reorder_rejects_duplicate_ids(http, create):
    a = await create("/api/categories", {"name": "A"})

    r = await http.put("/api/categories/reorder", json={"categories": [
        {"id": a["id"], "sort_order": 1},
        {"id": a["id"], "sort_order": 2},
    ]})

    assert r.status_code == 400


async def test_reorder_rejects_empty_batch(http):
    r = await http.put("/api/categories/reorder", json={"categories": []})
    assert r.status_code == 422


async def test_update_category(http, create):
    category = await create("/api/categories", {"name": "Salat"})

    r = await http.put(f"/api/categories/{category['id']}", json={"name": "Salatlar", "view_type": "list"})

    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Salatlar"
    assert r.json()["view_type"] == "list"
    assert r.json()["sort_order"] == category["sort_order"]


async def test_update_missing_category_is_404(http):
    r = await http.put("/api/categories/42", json={"name": "Ghost"})
    assert r.status_code == 404


async def test_delete_cascades_to_dishes(http, create):
    doomed = await create("/api/categories", {"name": "Doomed"})
    kept = await create("/api/categories", {"name": "Kept"})
    await create("/api/products", {"category_id": doomed["id"], "name": "Gone", "price": 1})
    survivor = await create("/api/products", {"category_id": kept["id"], "name": "Stays", "price": 1})

    r = await http.delete(f"/api/categories/{doomed['id']}")
    assert r.status_code == 204

    products = (await http.get("/api/products")).json()
    assert [p["id"] for p in products] == [survivor["id"]]
    assert await category_ids(http) == [kept["id"]]


async def test_delete_restricted_while_dishes_remain(http, create, monkeypatch):
    monkeypatch.setattr(settings, "category_delete_policy", CategoryDeletePolicy.RESTRICT)
    category = await create("/api/categories", {"name": "Busy"})
    await create("/api/products", {"category_id": category["id"], "name": "Dish", "price": 1})

    r = await http.delete(f"/api/categories/{category['id']}")

    assert r.status_code == 400
    assert "still has 1 dishes" in r.json()["detail"]
    assert await category_ids(http) == [category["id"]]


async def test_delete_restricted_allows_empty_category(http, create, monkeypatch):
    monkeypatch.setattr(settings, "category_delete_policy", CategoryDeletePolicy.RESTRICT)
    category = await create("/api/categories", {"name": "Empty"})

    r = await http.delete(f"/api/categories/{category['id']}")

    assert r.status_code == 204
    assert await category_ids(http) == []


@pytest.mark.parametrize("payload", [{"name": ""}, {"name": "X", "view_type": "carousel"}])
async def test_create_category_validation(http, payload):
    r = await http.post("/api/categories", json=payload)
    assert r.status_code == 422
