"""
                        Services Module

Menu business logic shared by the API and the client sync layer.

Services:
    - ordering: sort_order planning and atomic reorder persistence
    - visibility: per-branch dish visibility
    - auth: pluggable back-office credential verification
"""

from tabletmenu.services.ordering import MoveDirection
from tabletmenu.services.visibility import is_dish_visible_at_branch, dishes_for_branch

__all__ = ["MoveDirection", "is_dish_visible_at_branch", "dishes_for_branch"]
