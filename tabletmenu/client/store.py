"""
Menu Store (client-side mirror)

Owns an in-memory copy of every menu entity, filled by one bulk fetch and
kept in step with the server after each mutation:

    - create/update/delete: the remote call goes first; on success the
      server's canonical entity is merged by id, on failure the mirror is
      left untouched and the error is re-raised
    - reorder/move: the new order is applied to the mirror immediately and
      then persisted; a failed persist is logged and notified but NOT
      rolled back (call ``refresh()`` to reconcile with the server)

Everything runs on one event loop; each call is awaited before the next.

Example:
    >>> store = MenuStore(MenuApiClient())
    >>> await store.load()
    >>> for category in store.sorted_categories:
    ...     dishes = store.get_dishes_by_category(category.id, branch_id="1")
"""

import dataclasses
import logging
from typing import Any, Awaitable, Iterable, Mapping, Optional, Sequence, TypeVar

from tabletmenu.client.api import MenuApiClient
from tabletmenu.client.errors import MenuApiError
from tabletmenu.client.types import (
    Branch,
    Branding,
    Category,
    Dish,
    Notifier,
    ToastType,
    ViewType,
)
from tabletmenu.services.ordering import (
    MoveDirection,
    next_category_sort_order,
    next_sort_order,
    plan_reorder,
    plan_swap,
    sorted_by_order,
)
from tabletmenu.services.visibility import dishes_for_branch

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# MERGE HELPERS
# =============================================================================

def merge_by_id(items: Sequence[T], entity: T) -> list[T]:
    """Replace the item sharing ``entity.id``, or append the entity."""
    merged = []
    replaced = False
    for item in items:
        if item.id == entity.id:
            merged.append(entity)
            replaced = True
        else:
            merged.append(item)
    if not replaced:
        merged.append(entity)
    return merged


def remove_by_id(items: Sequence[T], entity_id: str) -> list[T]:
    return [item for item in items if item.id != entity_id]


def apply_sort_orders(items: Sequence[T], plan: Iterable[tuple[str, int]]) -> list[T]:
    """Copy of ``items`` with the planned ``sort_order`` values set."""
    new_orders = dict(plan)
    return [
        dataclasses.replace(item, sort_order=new_orders[item.id]) if item.id in new_orders else item
        for item in items
    ]


def _log_notification(message: str, toast_type: ToastType) -> None:
    level = logging.WARNING if toast_type == ToastType.ERROR else logging.INFO
    logger.log(level, f"[{toast_type.value}] {message}")


class MenuStore:
    """
    Client-side repository of branches, categories, dishes and branding.

    Attributes:
        branding: Current theme
        branches: Branches in display order
        categories: Categories as received (see ``sorted_categories``)
        dishes: Every dish of every category
        is_loading: True while ``load()`` runs
        is_loaded: True once a bulk load has succeeded
        error: Message of the most recent failure, None after a success
    """

    def __init__(self, api: MenuApiClient, notify: Optional[Notifier] = None):
        self.api = api
        self._notify = notify or _log_notification

        self.branding = Branding()
        self.branches: list[Branch] = []
        self.categories: list[Category] = []
        self.dishes: list[Dish] = []

        self.is_loading = False
        self.is_loaded = False
        self.error: Optional[str] = None

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def load_failed(self) -> bool:
        """The initial load failed: the session cannot continue until reload."""
        return self.has_error and not self.is_loaded

    def notify(self, message: str, toast_type: ToastType = ToastType.SUCCESS) -> None:
        self._notify(message, toast_type)

    async def load(self) -> None:
        """
        Bulk-fetch every entity and replace the mirror.

        Raises:
            MenuApiError: The mirror is unusable; ``error`` holds the message
        """
        self.is_loading = True
        try:
            branding = await self.api.get_branding()
            branches = await self.api.list_branches()
            categories = await self.api.list_categories()
            dishes = await self.api.list_dishes()
        except MenuApiError as e:
            self.error = e.message
            logger.error(f"Menu load failed: {e.message}")
            raise
        finally:
            self.is_loading = False

        self.branding = branding
        self.branches = branches
        self.categories = categories
        self.dishes = dishes
        self.is_loaded = True
        self.error = None

        logger.info(
            f"Menu loaded: {len(branches)} branches, {len(categories)} categories, "
            f"{len(dishes)} dishes"
        )

    async def refresh(self) -> None:
        """Discard local state and reload from the server."""
        await self.load()

    async def _remote(self, call: Awaitable[T], success_message: Optional[str] = None) -> T:
        """
        Await a mutating call; notify and re-raise on failure.
        """
        try:
            result = await call
        except MenuApiError as e:
            self.error = e.message
            logger.error(f"Menu mutation failed: {e.message}")
            self.notify(e.message, ToastType.ERROR)
            raise

        self.error = None
        if success_message:
            self.notify(success_message)
        return result

    async def _persist_order(self, call: Awaitable[Any], what: str) -> bool:
        """
        Persist an order already applied to the mirror.

        Failure is logged and notified; the optimistic local order stays.
        """
        try:
            await call
        except MenuApiError as e:
            self.error = e.message
            logger.warning(f"{what} order not saved, local order kept: {e.message}")
            self.notify(e.message, ToastType.ERROR)
            return False

        self.error = None
        self.notify("Order updated")
        return True

    # =========================================================================
    # BRANDING
    # =========================================================================

    async def update_branding(self, changes: Mapping[str, Any]) -> Branding:
        self.branding = await self._remote(self.api.update_branding(changes), "Branding saved")
        return self.branding

    # =========================================================================
    # BRANCHES
    # =========================================================================

    def get_branch(self, branch_id: str) -> Optional[Branch]:
        return next((b for b in self.branches if b.id == branch_id), None)

    def branch_theme_color(self, branch_id: str) -> str:
        """Branch accent color, falling back to the branding primary color."""
        branch = self.get_branch(branch_id)
        if branch and branch.custom_color:
            return branch.custom_color
        return self.branding.primary_color

    async def add_branch(self, data: Mapping[str, Any]) -> Branch:
        branch = await self._remote(self.api.create_branch(data), "Branch added")
        self.branches = merge_by_id(self.branches, branch)
        return branch

    async def update_branch(self, branch_id: str, changes: Mapping[str, Any]) -> Branch:
        branch = await self._remote(self.api.update_branch(branch_id, changes), "Branch updated")
        self.branches = merge_by_id(self.branches, branch)
        return branch

    async def delete_branch(self, branch_id: str) -> None:
        await self._remote(self.api.delete_branch(branch_id), "Branch deleted")
        self.branches = remove_by_id(self.branches, branch_id)

    def reorder_branches(self, ordered_ids: Sequence[str]) -> None:
        """
        Rearrange branches for display. Branches carry no stored order, so
        this only affects the mirror.
        """
        by_id = {b.id: b for b in self.branches}
        if set(ordered_ids) != set(by_id) or len(ordered_ids) != len(by_id):
            raise ValueError("Branch order must list every branch exactly once")
        self.branches = [by_id[branch_id] for branch_id in ordered_ids]

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    @property
    def sorted_categories(self) -> list[Category]:
        return sorted_by_order(self.categories)

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    async def add_category(self, name: str, view_type: ViewType | str = ViewType.GRID) -> Category:
        """Create a category at the end of the list."""
        payload = {
            "name": name,
            "viewType": ViewType(view_type).value,
            "sortOrder": next_category_sort_order(len(self.categories)),
        }
        category = await self._remote(self.api.create_category(payload), "Category added")
        self.categories = merge_by_id(self.categories, category)
        return category

    async def update_category(self, category_id: str, changes: Mapping[str, Any]) -> Category:
        category = await self._remote(
            self.api.update_category(category_id, changes), "Category updated"
        )
        self.categories = merge_by_id(self.categories, category)
        return category

    async def delete_category(self, category_id: str) -> None:
        """
        Delete a category and drop its dishes from the mirror.

        Raises:
            CategoryDeleteRejected: The store refused; nothing changed locally
        """
        await self._remote(self.api.delete_category(category_id), "Category deleted")
        self.categories = remove_by_id(self.categories, category_id)
        self.dishes = [d for d in self.dishes if d.category_id != category_id]

    async def reorder_categories(self, ordered_ids: Sequence[str]) -> bool:
        """
        Apply a complete category order (index + 1) and persist it.

        Returns:
            False when the order could not be saved (kept locally anyway)
        """
        if not ordered_ids:
            return True

        known = {c.id for c in self.categories}
        unknown = [cid for cid in ordered_ids if cid not in known]
        if unknown:
            raise ValueError(f"Unknown category ids: {unknown}")

        plan = plan_reorder(ordered_ids)
        self.categories = apply_sort_orders(self.categories, plan)
        return await self._persist_order(self.api.reorder_categories(plan), "Category")

    async def move_category(self, category_id: str, direction: MoveDirection | str) -> bool:
        """
        Swap a category with its neighbour. At either end of the list this
        is a silent no-op.

        Returns:
            True when the order changed and was saved
        """
        plan = plan_swap(self.categories, category_id, direction)
        if plan is None:
            return False

        self.categories = apply_sort_orders(self.categories, plan)
        return await self._persist_order(self.api.reorder_categories(plan), "Category")

    # =========================================================================
    # DISHES
    # =========================================================================

    def get_dish(self, dish_id: str) -> Optional[Dish]:
        return next((d for d in self.dishes if d.id == dish_id), None)

    def dishes_in_category(self, category_id: str) -> list[Dish]:
        """Admin listing: every dish of the category, active or not, in order."""
        return sorted_by_order(d for d in self.dishes if d.category_id == category_id)

    def get_dishes_by_category(self, category_id: str, branch_id: str) -> list[Dish]:
        """Customer listing: active dishes of the category offered at the branch."""
        return dishes_for_branch(self.dishes, category_id, branch_id)

    async def add_dish(self, data: Mapping[str, Any]) -> Dish:
        """
        Create a dish at the end of its category.

        Args:
            data: camelCase dish payload; ``categoryId`` is required
        """
        category_id = data.get("categoryId")
        if not category_id:
            raise ValueError("A dish needs a categoryId")

        payload = dict(data)
        payload["sortOrder"] = next_sort_order(
            d.sort_order for d in self.dishes if d.category_id == category_id
        )

        dish = await self._remote(self.api.create_dish(payload), "Dish added")
        self.dishes = merge_by_id(self.dishes, dish)
        return dish

    async def update_dish(self, dish_id: str, changes: Mapping[str, Any]) -> Dish:
        dish = await self._remote(self.api.update_dish(dish_id, changes), "Dish updated")
        self.dishes = merge_by_id(self.dishes, dish)
        return dish

    async def delete_dish(self, dish_id: str) -> None:
        await self._remote(self.api.delete_dish(dish_id), "Dish deleted")
        self.dishes = remove_by_id(self.dishes, dish_id)

    async def reorder_dishes(self, ordered_ids: Sequence[str]) -> bool:
        """
        Apply a reordered sequence of dishes (normally one whole category,
        e.g. after a drag and drop) as sort_order = index + 1, then persist.

        Returns:
            False when the order could not be saved (kept locally anyway)
        """
        if not ordered_ids:
            return True

        known = {d.id for d in self.dishes}
        unknown = [did for did in ordered_ids if did not in known]
        if unknown:
            raise ValueError(f"Unknown dish ids: {unknown}")

        plan = plan_reorder(ordered_ids)
        self.dishes = apply_sort_orders(self.dishes, plan)
        return await self._persist_order(self.api.reorder_dishes(plan), "Dish")

    async def move_dish(self, dish_id: str, direction: MoveDirection | str) -> bool:
        """
        Swap a dish with its neighbour inside its category. Unknown dishes
        and moves past either end are silent no-ops.

        Returns:
            True when the order changed and was saved
        """
        dish = self.get_dish(dish_id)
        if dish is None:
            return False

        same_category = [d for d in self.dishes if d.category_id == dish.category_id]
        plan = plan_swap(same_category, dish_id, direction)
        if plan is None:
            return False

        self.dishes = apply_sort_orders(self.dishes, plan)
        return await self._persist_order(self.api.reorder_dishes(plan), "Dish")
