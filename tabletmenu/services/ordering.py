"""
Ordering Engine

Computes ``sort_order`` integers for categories and dishes:

    - append: a new dish goes after the last dish of its category, a new
      category after the last category
    - move: swap a dish (or category) with its neighbour in the sorted list
    - reorder: renumber a caller-supplied sequence as 1..n

The planning functions are pure and work on any objects exposing ``id`` and
``sort_order`` (ORM rows and client entities alike). ``persist_sort_orders``
writes a reorder batch to the store in a single statement.

Example:
    >>> plan = plan_reorder(["d3", "d1", "d2"])
    >>> plan
    [('d3', 1), ('d1', 2), ('d2', 3)]
"""

import logging
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class UnknownIdsError(LookupError):
    """Raised when a reorder batch names rows that do not exist."""

    def __init__(self, missing: Iterable[Any]):
        self.missing = sorted(missing, key=str)
        super().__init__(f"Unknown ids in reorder batch: {self.missing}")


def next_sort_order(sort_orders: Iterable[Optional[int]]) -> int:
    """Append position: one past the current maximum, or 1 for an empty scope."""
    return max((s for s in sort_orders if s is not None), default=0) + 1


def next_category_sort_order(category_count: int) -> int:
    return category_count + 1


def sort_key(item: Any) -> int:
    """
    Display order: ``sort_order`` ascending.

    Python's sort is stable, so items sharing a ``sort_order`` keep the order
    they arrived in (insertion/id order from the store).
    """
    return item.sort_order


def sorted_by_order(items: Iterable[Any]) -> list:
    return sorted(items, key=sort_key)


def plan_swap(
    items: Sequence[Any],
    item_id: Any,
    direction: MoveDirection | str,
) -> Optional[list[tuple[Any, int]]]:
    """
    Plan a move-by-one inside one ordering scope.

    Args:
        items: Every item of the scope (all dishes of one category, or all
            categories), in any order
        item_id: Id of the item to move
        direction: "up" moves towards the start of the list

    Returns:
        ``[(item_id, new_order), (neighbour_id, new_order)]``, or None when the
        item is unknown or already at the edge of the list
    """
    direction = MoveDirection(direction)
    ordered = sorted_by_order(items)

    index = next((i for i, item in enumerate(ordered) if item.id == item_id), None)
    if index is None:
        return None

    target = index - 1 if direction == MoveDirection.UP else index + 1
    if target < 0 or target >= len(ordered):
        return None

    current, neighbour = ordered[index], ordered[target]
    return [
        (current.id, neighbour.sort_order),
        (neighbour.id, current.sort_order),
    ]


def plan_reorder(ordered_ids: Sequence[Any]) -> list[tuple[Any, int]]:
    """
    Renumber a complete, already-reordered sequence.

    Submission order wins: element ``i`` gets ``sort_order = i + 1``. The
    result depends only on the sequence, so resubmitting it is idempotent.

    Raises:
        ValueError: If the sequence names the same id twice
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValueError("Reorder sequence contains duplicate ids")
    return [(item_id, index + 1) for index, item_id in enumerate(ordered_ids)]


async def persist_sort_orders(
    db: AsyncSession,
    model: Any,
    entries: Sequence[tuple[int, int]],
) -> int:
    """
    Write a reorder batch atomically.

    Every id is checked first; then all rows are updated in one bulk UPDATE
    and committed together. On any failure the transaction is rolled back,
    so no partially applied order is ever visible.

    Args:
        db: Active session
        model: ORM class with ``id`` and ``sort_order`` columns
        entries: ``(id, sort_order)`` pairs

    Returns:
        Number of rows updated

    Raises:
        UnknownIdsError: If any id has no row
    """
    ids = [entry_id for entry_id, _ in entries]
    if len(set(ids)) != len(ids):
        raise ValueError("Reorder batch contains duplicate ids")

    try:
        result = await db.execute(select(model.id).where(model.id.in_(ids)))
        missing = set(ids) - set(result.scalars().all())
        if missing:
            raise UnknownIdsError(missing)

        await db.execute(
            update(model),
            [{"id": entry_id, "sort_order": order} for entry_id, order in entries],
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Reordered {len(entries)} {model.__tablename__} rows")
    return len(entries)
