"""
Demo Menu Seeder

Fills a running TabletMenu API with the demo chain (two branches, four
categories, eight dishes and the default branding) through the client
sync layer, exactly as the back-office would.

Run from project root: python scripts/seed_demo.py [--base-url URL]
"""

import argparse
import asyncio
import os
import sys
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tabletmenu.client import MenuApiClient, MenuApiError, MenuStore, ViewType

BRANDING = {
    "restaurantName": "Lazzat Milliy Taomlar",
    "logoUrl": "https://picsum.photos/id/1060/200/200",
    "backgroundImageUrl": "https://images.unsplash.com/photo-1559339352-11d035aa65de?q=80&w=1000&auto=format&fit=crop",
    "headerImageUrl": "https://images.unsplash.com/photo-1504674900247-0877df9cc836?q=80&w=2000&auto=format&fit=crop",
    "primaryColor": "#F97316",
    "backgroundColor": "#F8F9FC",
    "cardColor": "#FFFFFF",
    "textColor": "#111827",
    "mutedColor": "#6B7280",
}

# Keys are local labels used by the dish allowlists below
BRANCHES = {
    "chilonzor": {
        "name": "Chilonzor Filiali",
        "address": "Chilonzor ko'chasi, 5-uy",
        "phone": "+998 90 123 45 67",
    },
    "markaziy": {
        "name": "Markaziy Filial",
        "address": "Amir Temur ko'chasi, 10-uy",
        "phone": "+998 99 987 65 43",
        "customColor": "#DC2626",
    },
}

CATEGORIES = [
    ("quyuq", "Quyuq Taomlar", ViewType.GRID),
    ("suyuq", "Suyuq Taomlar", ViewType.GRID),
    ("salat", "Salatlar", ViewType.GRID),
    ("ichimlik", "Ichimliklar", ViewType.LIST),
]

DISHES: list[dict[str, Any]] = [
    {
        "category": "quyuq",
        "name": "To'y Oshi (Maxsus)",
        "description": "An'anaviy to'y oshi, mol go'shti, qazi va bedana tuxum bilan. Katta laganda.",
        "imageUrls": ["https://picsum.photos/seed/palov/800/400"],
        "variants": [
            {"name": "0.7 Portsiya", "price": 35000},
            {"name": "1 Portsiya", "price": 45000},
            {"name": "1.5 Portsiya (Double)", "price": 65000},
        ],
        "badges": [
            "https://cdn-icons-png.flaticon.com/128/6469/6469034.png",
            "https://cdn-icons-png.flaticon.com/128/2396/2396713.png",
        ],
        "isFeatured": True,
    },
    {
        "category": "quyuq",
        "name": "Qozon Kabob",
        "description": "Yumshoq pishirilgan qo'y go'shti va kartoshka.",
        "price": 65000,
        "imageUrls": ["https://picsum.photos/seed/qozon/600/400"],
        "branches": ["markaziy"],
    },
    {
        "category": "quyuq",
        "name": "Norin",
        "description": "Ot go'shtidan tayyorlangan maxsus xamirli taom.",
        "price": 50000,
        "imageUrls": ["https://picsum.photos/seed/norin/600/400"],
        "badges": ["https://cdn-icons-png.flaticon.com/128/1993/1993257.png"],
        "isActive": False,
    },
    {
        "category": "suyuq",
        "name": "Mastava",
        "description": "Qatiq bilan tortiladigan guruchli sho'rva.",
        "price": 30000,
        "imageUrls": ["https://picsum.photos/seed/mastava/600/400"],
    },
    {
        "category": "salat",
        "name": "Achichuk",
        "description": "Pomidor, piyoz va achchiq qalampir.",
        "price": 15000,
        "imageUrls": ["https://picsum.photos/seed/achichuk/600/400"],
        "badges": ["https://cdn-icons-png.flaticon.com/128/603/603222.png"],
    },
    {
        "category": "ichimlik",
        "name": "Coca-Cola",
        "description": "Muzdek ichimlik.",
        "imageUrls": ["https://picsum.photos/seed/coke/600/400"],
        "variants": [
            {"name": "0.5L", "price": 7000},
            {"name": "1L", "price": 12000},
            {"name": "1.5L", "price": 16000},
        ],
    },
    {
        "category": "ichimlik",
        "name": "Fanta",
        "description": "Apelsin ta'mli gazli ichimlik.",
        "imageUrls": ["https://picsum.photos/seed/fanta/600/400"],
        "variants": [
            {"name": "0.5L", "price": 7000},
            {"name": "1L", "price": 12000},
        ],
    },
    {
        "category": "ichimlik",
        "name": "Kompot",
        "description": "Mevali sharbat (stakan).",
        "price": 5000,
    },
]


async def seed(base_url: str) -> bool:
    """Create the demo chain through the sync layer."""
    print("=" * 60)
    print(f"🌱 SEEDING DEMO MENU → {base_url}")
    print("=" * 60)

    async with MenuApiClient(base_url) as api:
        store = MenuStore(api, notify=lambda message, kind: None)

        try:
            await store.load()
        except MenuApiError as e:
            print(f"\n❌ Could not load the current menu: {e.message}")
            return False

        if store.categories or store.dishes:
            print("\n⚠️ Menu already has categories; nothing seeded.")
            return False

        await store.update_branding(BRANDING)
        print(f"\n✅ Branding: {store.branding.restaurant_name}")

        branch_ids = {}
        for label, data in BRANCHES.items():
            branch = await store.add_branch(data)
            branch_ids[label] = branch.id
            print(f"✅ Branch #{branch.id}: {branch.name}")

        category_ids = {}
        for label, name, view_type in CATEGORIES:
            category = await store.add_category(name, view_type)
            category_ids[label] = category.id
            print(f"✅ Category #{category.id}: {category.name} ({view_type.value})")

        for data in DISHES:
            payload = {k: v for k, v in data.items() if k not in ("category", "branches")}
            payload["categoryId"] = category_ids[data["category"]]
            payload["availableBranchIds"] = [branch_ids[b] for b in data.get("branches", [])]
            dish = await store.add_dish(payload)
            print(f"   🍽️ {dish.name}: {dish.display_price:,.0f} (position {dish.sort_order})")

    print("\n" + "=" * 60)
    print("✅ SEEDING COMPLETE")
    print("=" * 60)
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the demo menu")
    parser.add_argument("--base-url", default="http://localhost:3001", help="API base URL")
    args = parser.parse_args()

    ok = asyncio.run(seed(args.base_url))
    sys.exit(0 if ok else 1)
