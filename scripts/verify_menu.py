"""
Menu Verification Script

Loads the whole menu through the sync layer and prints, branch by branch,
what the customer tablet would show. Also flags ordering problems
(duplicate sort_order values inside a category).

Run from project root: python scripts/verify_menu.py [--base-url URL]
"""

import argparse
import asyncio
import os
import sys
from collections import Counter
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tabletmenu.client import MenuApiClient, MenuApiError, MenuStore


async def verify_menu(base_url: str) -> bool:
    """Print each branch's visible menu and report ordering ties."""

    print("=" * 60)
    print("🔍 MENU VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🌐 API: {base_url}")
    print("=" * 60)

    async with MenuApiClient(base_url) as api:
        store = MenuStore(api, notify=lambda message, kind: None)
        try:
            await store.load()
        except MenuApiError as e:
            print(f"\n❌ Could not load menu: {e.message}")
            return False

    print(f"\n📊 STATISTICS:")
    print(f"   Restaurant: {store.branding.restaurant_name}")
    print(f"   Branches: {len(store.branches)}")
    print(f"   Categories: {len(store.categories)}")
    print(f"   Dishes: {len(store.dishes)} ({sum(not d.is_active for d in store.dishes)} hidden)")

    healthy = True
    for category in store.sorted_categories:
        orders = Counter(d.sort_order for d in store.dishes_in_category(category.id))
        ties = sorted(order for order, count in orders.items() if count > 1)
        if ties:
            healthy = False
            print(f"\n⚠️ {category.name}: shared sort_order values {ties}")
    if healthy:
        print(f"\n✅ No sort_order ties")

    for branch in store.branches:
        print(f"\n📋 {branch.name.upper()} (theme {store.branch_theme_color(branch.id)})")
        print("-" * 60)
        for category in store.sorted_categories:
            dishes = store.get_dishes_by_category(category.id, branch.id)
            if not dishes:
                continue
            print(f"   {category.name} [{category.view_type.value}]")
            for dish in dishes:
                star = "★ " if dish.is_featured else "  "
                print(f"     {star}{dish.name:<28} {dish.display_price:>10,.0f}")

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE")
    print("=" * 60)

    return healthy


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Menu Verification Script")
    parser.add_argument("--base-url", default="http://localhost:3001", help="API base URL")
    args = parser.parse_args()

    ok = asyncio.run(verify_menu(args.base_url))
    sys.exit(0 if ok else 1)
