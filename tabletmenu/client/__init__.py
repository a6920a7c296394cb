"""
Sync/Fetch Layer

Client-side access to the TabletMenu API for tablets and the back-office.

Usage:
    from tabletmenu.client import MenuApiClient, MenuStore

    async with MenuApiClient() as api:
        store = MenuStore(api)
        await store.load()
"""

from tabletmenu.client.api import MenuApiClient
from tabletmenu.client.errors import CategoryDeleteRejected, ErrorKind, MenuApiError
from tabletmenu.client.store import MenuStore
from tabletmenu.client.types import (
    Branch,
    Branding,
    Category,
    Dish,
    DishVariant,
    ToastType,
    ViewType,
)

__all__ = [
    "MenuApiClient",
    "MenuStore",
    "MenuApiError",
    "CategoryDeleteRejected",
    "ErrorKind",
    "Branch",
    "Branding",
    "Category",
    "Dish",
    "DishVariant",
    "ToastType",
    "ViewType",
]
