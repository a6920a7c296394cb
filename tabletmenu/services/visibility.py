"""
Branch visibility rules for dishes.

A dish's ``available_branch_ids`` is an allowlist with an inverted default:
an empty (or missing) list means the dish is served at every branch,
including branches opened after the dish was created. The ``is_active``
flag is global and wins over the allowlist.

Works on any object with ``category_id``, ``is_active``,
``available_branch_ids`` and ``sort_order`` attributes, so the API and the
client mirror share one definition.
"""

from typing import Any, Iterable

from tabletmenu.services.ordering import sorted_by_order


def is_dish_visible_at_branch(dish: Any, branch_id: Any) -> bool:
    if not dish.is_active:
        return False

    allowed = dish.available_branch_ids
    if not allowed:
        return True

    return str(branch_id) in {str(b) for b in allowed}


def dishes_for_branch(dishes: Iterable[Any], category_id: Any, branch_id: Any) -> list:
    """
    Customer menu query: category, then active flag, then branch allowlist,
    then ``sort_order`` ascending.
    """
    in_category = [d for d in dishes if str(d.category_id) == str(category_id)]
    visible = [d for d in in_category if is_dish_visible_at_branch(d, branch_id)]
    return sorted_by_order(visible)
