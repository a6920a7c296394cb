"""
Store ⇄ Client Field Mapping

The one place where client naming (camelCase payloads, string ids, a list
of image URLs) meets store naming (snake_case columns, integer keys, a
single ``image_url``). Every field of every entity is listed exactly once.

Outbound (``*_to_store``) takes a full or partial camelCase payload as built
by the admin UI. Inbound (``*_from_store``) takes a store row (JSON object)
and returns a client entity.

Only the first image URL survives a round-trip: the store keeps one.
"""

from typing import Any, Callable, Mapping, Optional

from tabletmenu.client.types import Branch, Branding, Category, Dish, DishVariant, ViewType


# Client key → store key
BRANCH_FIELDS = {
    "name": "name",
    "address": "address",
    "phone": "phone",
    "customColor": "custom_color",
    "logoUrl": "logo_url",
}

CATEGORY_FIELDS = {
    "name": "name",
    "sortOrder": "sort_order",
    "viewType": "view_type",
}

DISH_FIELDS = {
    "categoryId": "category_id",
    "name": "name",
    "description": "description",
    "price": "price",
    "imageUrls": "image_url",
    "variants": "variants",
    "badges": "badges",
    "isActive": "is_active",
    "isFeatured": "is_featured",
    "availableBranchIds": "available_branch_ids",
    "sortOrder": "sort_order",
}

BRANDING_FIELDS = {
    "restaurantName": "restaurant_name",
    "logoUrl": "logo_url",
    "backgroundImageUrl": "background_image_url",
    "headerImageUrl": "header_image_url",
    "primaryColor": "primary_color",
    "backgroundColor": "background_color",
    "cardColor": "card_color",
    "textColor": "text_color",
    "mutedColor": "muted_color",
}


# =============================================================================
# IDENTIFIERS
# =============================================================================

def to_client_id(value: Any) -> str:
    """Store keys (integers here) become opaque strings."""
    if value is None:
        raise ValueError("Entity without an id")
    return str(value)


def to_store_id(value: Any) -> Any:
    """Numeric string ids go back to the store's integer keys; others pass through."""
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


# =============================================================================
# OUTBOUND (client → store)
# =============================================================================

def _first_image(urls: Optional[list]) -> Optional[str]:
    return urls[0] if urls else None


def _variants_out(variants: Optional[list]) -> list[dict]:
    out = []
    for v in variants or []:
        if isinstance(v, DishVariant):
            out.append(v.to_dict())
        else:
            out.append({"name": v["name"], "price": float(v["price"])})
    return out


def _view_type_out(value: Any) -> str:
    return ViewType(value).value


def _id_list_out(ids: Optional[list]) -> list[str]:
    return [str(i) for i in ids or []]


DISH_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "categoryId": to_store_id,
    "imageUrls": _first_image,
    "variants": _variants_out,
    "badges": lambda badges: list(badges or []),
    "availableBranchIds": _id_list_out,
}

CATEGORY_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "viewType": _view_type_out,
}


def _to_store(
    entity: str,
    fields: Mapping[str, str],
    payload: Mapping[str, Any],
    converters: Optional[Mapping[str, Callable[[Any], Any]]] = None,
) -> dict:
    converters = converters or {}
    out = {}
    for key, value in payload.items():
        if key == "id":
            continue
        if key not in fields:
            raise ValueError(f"Unknown {entity} field: {key!r}")
        convert = converters.get(key)
        out[fields[key]] = convert(value) if convert else value
    return out


def branch_to_store(payload: Mapping[str, Any]) -> dict:
    return _to_store("branch", BRANCH_FIELDS, payload)


def category_to_store(payload: Mapping[str, Any]) -> dict:
    return _to_store("category", CATEGORY_FIELDS, payload, CATEGORY_CONVERTERS)


def dish_to_store(payload: Mapping[str, Any]) -> dict:
    """
    Map a dish payload. With variants present the price sent is the cheapest
    variant, whatever ``price`` the payload carried.
    """
    out = _to_store("dish", DISH_FIELDS, payload, DISH_CONVERTERS)
    if out.get("variants"):
        out["price"] = min(v["price"] for v in out["variants"])
    return out


def branding_to_store(payload: Mapping[str, Any]) -> dict:
    return _to_store("branding", BRANDING_FIELDS, payload)


def sort_orders_to_store(entries: list[tuple[str, int]]) -> list[dict]:
    """Reorder batch entries in the store's ``{id, sort_order}`` form."""
    return [{"id": to_store_id(entry_id), "sort_order": order} for entry_id, order in entries]


# =============================================================================
# INBOUND (store → client)
# =============================================================================

def branch_from_store(row: Mapping[str, Any]) -> Branch:
    return Branch(
        id=to_client_id(row["id"]),
        name=row["name"],
        address=row.get("address") or "",
        phone=row.get("phone") or "",
        custom_color=row.get("custom_color"),
        logo_url=row.get("logo_url"),
    )


def category_from_store(row: Mapping[str, Any]) -> Category:
    return Category(
        id=to_client_id(row["id"]),
        name=row["name"],
        sort_order=int(row.get("sort_order") or 0),
        view_type=ViewType(row.get("view_type") or ViewType.GRID.value),
    )


def dish_from_store(row: Mapping[str, Any]) -> Dish:
    image_url = row.get("image_url")
    return Dish(
        id=to_client_id(row["id"]),
        category_id=to_client_id(row["category_id"]),
        name=row["name"],
        description=row.get("description") or "",
        price=float(row["price"]),
        image_urls=[image_url] if image_url else [],
        variants=[
            DishVariant(name=v["name"], price=float(v["price"]))
            for v in row.get("variants") or []
        ],
        badges=list(row.get("badges") or []),
        is_active=bool(row.get("is_active", True)),
        is_featured=bool(row.get("is_featured", False)),
        available_branch_ids=[str(b) for b in row.get("available_branch_ids") or []],
        sort_order=int(row.get("sort_order") or 0),
    )


def branding_from_store(row: Mapping[str, Any]) -> Branding:
    defaults = Branding()
    return Branding(**{
        attr: row.get(attr) if row.get(attr) is not None else getattr(defaults, attr)
        for attr in BRANDING_FIELDS.values()
    })
