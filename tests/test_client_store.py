import pytest

from tabletmenu.client import CategoryDeleteRejected, MenuApiClient, MenuStore, ToastType, ViewType
from tabletmenu.core.config import CategoryDeletePolicy
from tabletmenu.main import settings
from tabletmenu.services.ordering import MoveDirection


async def reloaded(http):
    fresh = MenuStore(MenuApiClient(client=http), notify=lambda message, kind: None)
    await fresh.load()
    return fresh


def orders(store, category_id):
    return [(d.name, d.sort_order) for d in store.dishes_in_category(category_id)]


async def test_initial_load(store):
    assert store.is_loaded
    assert not store.is_loading
    assert not store.has_error
    assert store.branches == []
    assert store.categories == []
    assert store.branding.restaurant_name == settings.default_restaurant_name


async def test_add_category_appends(store, toasts):
    soups = await store.add_category("Suyuq Taomlar")
    drinks = await store.add_category("Ichimliklar", ViewType.LIST)

    assert (soups.sort_order, drinks.sort_order) == (1, 2)
    assert drinks.view_type == ViewType.LIST
    assert [c.id for c in store.sorted_categories] == [soups.id, drinks.id]
    assert toasts[-1] == ("Category added", ToastType.SUCCESS)


async def test_add_dish_appends_and_merges(store):
    category = await store.add_category("Quyuq Taomlar")

    d1 = await store.add_dish({"categoryId": category.id, "name": "d1", "price": 10})
    d2 = await store.add_dish({
        "categoryId": category.id, "name": "d2",
        "variants": [{"name": "S", "price": 12}, {"name": "L", "price": 10}],
    })

    assert (d1.sort_order, d2.sort_order) == (1, 2)
    assert d2.price == 10
    assert store.get_dish(d2.id) == d2


async def test_add_dish_requires_category(store):
    with pytest.raises(ValueError):
        await store.add_dish({"name": "Orphan", "price": 1})


async def test_move_dish_down_swaps_and_persists(store, http):
    category = await store.add_category("Quyuq Taomlar")
    await store.add_dish({"categoryId": category.id, "name": "d1", "price": 1})
    await store.add_dish({"categoryId": category.id, "name": "d2", "price": 1})
    d1 = store.dishes[0]

    assert await store.move_dish(d1.id, MoveDirection.DOWN) is True

    assert orders(store, category.id) == [("d2", 1), ("d1", 2)]
    assert orders(await reloaded(http), category.id) == [("d2", 1), ("d1", 2)]


async def test_move_up_then_down_restores_order(store, http):
    category = await store.add_category("C")
    for name in ("a", "b", "c"):
        await store.add_dish({"categoryId": category.id, "name": name, "price": 1})
    b = next(d for d in store.dishes if d.name == "b")

    await store.move_dish(b.id, "up")
    assert [name for name, _ in orders(store, category.id)] == ["b", "a", "c"]

    await store.move_dish(b.id, "down")
    assert orders(store, category.id) == [("a", 1), ("b", 2), ("c", 3)]
    assert orders(await reloaded(http), category.id) == [("a", 1), ("b", 2), ("c", 3)]


async def test_move_at_edges_is_a_silent_noop(store, toasts):
    category = await store.add_category("C")
    first = await store.add_dish({"categoryId": category.id, "name": "first", "price": 1})
    last = await store.add_dish({"categoryId": category.id, "name": "last", "price": 1})
    toasts.clear()

    assert await store.move_dish(first.id, MoveDirection.UP) is False
    assert await store.move_dish(last.id, MoveDirection.DOWN) is False
    assert await store.move_dish("does-not-exist", MoveDirection.DOWN) is False

    assert orders(store, category.id) == [("first", 1), ("last", 2)]
    assert toasts == []


async def test_move_dish_stays_inside_its_category(store):
    mains = await store.add_category("Mains")
    drinks = await store.add_category("Drinks")
    await store.add_dish({"categoryId": mains.id, "name": "main", "price": 1})
    drink = await store.add_dish({"categoryId": drinks.id, "name": "drink", "price": 1})

    assert await store.move_dish(drink.id, MoveDirection.UP) is False


async def test_reorder_dishes(store, http):
    category = await store.add_category("C")
    ids = [
        (await store.add_dish({"categoryId": category.id, "name": name, "price": 1})).id
        for name in ("x", "y", "z")
    ]

    assert await store.reorder_dishes([ids[2], ids[0], ids[1]]) is True

    expected = [("z", 1), ("x", 2), ("y", 3)]
    assert orders(store, category.id) == expected
    assert orders(await reloaded(http), category.id) == expected


async def test_reorder_dishes_rejects_unknown_ids(store):
    with pytest.raises(ValueError):
        await store.reorder_dishes(["nope"])


async def test_reorder_and_move_categories(store, http):
    a = await store.add_category("A")
    b = await store.add_category("B")
    c = await store.add_category("C")

    await store.reorder_categories([c.id, a.id, b.id])
    assert [x.name for x in store.sorted_categories] == ["C", "A", "B"]

    await store.move_category(b.id, MoveDirection.UP)
    assert [x.name for x in store.sorted_categories] == ["C", "B", "A"]

    assert await store.move_category(c.id, MoveDirection.UP) is False
    assert [x.name for x in (await reloaded(http)).sorted_categories] == ["C", "B", "A"]


async def test_update_dish_merges_server_copy(store):
    category = await store.add_category("C")
    dish = await store.add_dish({"categoryId": category.id, "name": "Cola", "price": 7000})

    updated = await store.update_dish(dish.id, {"isFeatured": True, "imageUrls": ["https://img/c.jpg"]})

    assert updated.is_featured
    assert store.get_dish(dish.id).primary_image == "https://img/c.jpg"
    assert len(store.dishes) == 1


async def test_delete_dish(store):
    category = await store.add_category("C")
    dish = await store.add_dish({"categoryId": category.id, "name": "D", "price": 1})

    await store.delete_dish(dish.id)

    assert store.get_dish(dish.id) is None


async def test_delete_category_drops_its_dishes(store, http):
    doomed = await store.add_category("Doomed")
    kept = await store.add_category("Kept")
    await store.add_dish({"categoryId": doomed.id, "name": "gone", "price": 1})
    await store.add_dish({"categoryId": kept.id, "name": "stays", "price": 1})

    await store.delete_category(doomed.id)

    assert store.get_category(doomed.id) is None
    assert [d.name for d in store.dishes] == ["stays"]
    assert [d.name for d in (await reloaded(http)).dishes] == ["stays"]


async def test_delete_category_rejected_under_restrict(store, toasts, monkeypatch):
    monkeypatch.setattr(settings, "category_delete_policy", CategoryDeletePolicy.RESTRICT)
    category = await store.add_category("Busy")
    await store.add_dish({"categoryId": category.id, "name": "d", "price": 1})

    with pytest.raises(CategoryDeleteRejected) as exc_info:
        await store.delete_category(category.id)

    assert exc_info.value.category_id == category.id
    assert store.get_category(category.id) is not None
    assert len(store.dishes) == 1
    assert store.has_error
    assert toasts[-1][1] == ToastType.ERROR


async def test_customer_menu_per_branch(store):
    chilonzor = await store.add_branch({"name": "Chilonzor Filiali"})
    markaziy = await store.add_branch({"name": "Markaziy Filial", "customColor": "#DC2626"})
    category = await store.add_category("Quyuq Taomlar")
    await store.add_dish({"categoryId": category.id, "name": "Osh", "price": 45000})
    await store.add_dish({
        "categoryId": category.id, "name": "Qozon Kabob", "price": 65000,
        "availableBranchIds": [markaziy.id],
    })
    await store.add_dish({"categoryId": category.id, "name": "Norin", "price": 50000, "isActive": False})

    assert [d.name for d in store.get_dishes_by_category(category.id, chilonzor.id)] == ["Osh"]
    assert [d.name for d in store.get_dishes_by_category(category.id, markaziy.id)] == ["Osh", "Qozon Kabob"]
    assert len(store.dishes_in_category(category.id)) == 3

    assert store.branch_theme_color(markaziy.id) == "#DC2626"
    assert store.branch_theme_color(chilonzor.id) == store.branding.primary_color


async def test_branch_updates_and_local_reorder(store):
    a = await store.add_branch({"name": "A"})
    b = await store.add_branch({"name": "B"})

    await store.update_branch(a.id, {"phone": "+998"})
    assert store.get_branch(a.id).phone == "+998"

    store.reorder_branches([b.id, a.id])
    assert [x.name for x in store.branches] == ["B", "A"]

    with pytest.raises(ValueError):
        store.reorder_branches([a.id])

    await store.delete_branch(b.id)
    assert [x.name for x in store.branches] == ["A"]


async def test_update_branding(store, http):
    await store.update_branding({"restaurantName": "Lazzat", "primaryColor": "#111111"})

    assert store.branding.restaurant_name == "Lazzat"
    fresh = await reloaded(http)
    assert fresh.branding.primary_color == "#111111"
    assert fresh.branding.card_color == "#FFFFFF"


async def test_empty_reorder_is_a_successful_noop(store, toasts):
    category = await store.add_category("Empty")
    toasts.clear()

    assert await store.reorder_dishes([]) is True
    assert await store.reorder_categories([]) is True

    assert not store.has_error
    assert toasts == []
    assert store.get_category(category.id).sort_order == 1
