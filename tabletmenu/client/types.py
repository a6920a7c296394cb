"""
Client Entity Types

In-memory shapes of the menu entities as the tablet and back-office see
them. Identifiers are opaque strings whatever the store's key type is.
``to_dict()`` produces the camelCase form handed to the presentation layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class ViewType(str, Enum):
    GRID = "grid"
    LIST = "list"


class ToastType(str, Enum):
    """Severity of a transient notification."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


# Receives (message, type); the UI decides how to show it
Notifier = Callable[[str, ToastType], None]


@dataclass
class Branch:
    """
    A physical restaurant location.

    Attributes:
        id: Opaque identifier
        name: Display name
        address: Street address
        phone: Contact number
        custom_color: Accent color overriding the branding primary color
        logo_url: Logo overriding the branding logo
    """
    id: str
    name: str
    address: str = ""
    phone: str = ""
    custom_color: Optional[str] = None
    logo_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "customColor": self.custom_color,
            "logoUrl": self.logo_url,
        }


@dataclass
class Category:
    id: str
    name: str
    sort_order: int
    view_type: ViewType = ViewType.GRID

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sortOrder": self.sort_order,
            "viewType": self.view_type.value,
        }


@dataclass
class DishVariant:
    """A portion or type of a dish, e.g. "0.7 Portsiya" or "1L"."""
    name: str
    price: float

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price}


@dataclass
class Dish:
    """
    A sellable menu item.

    Attributes:
        id: Opaque identifier
        category_id: Owning category
        name: Display name
        description: Short description
        price: Base price; derived from variants when they exist
        image_urls: Image references, first one is the primary image
        variants: Priced portions/types, may be empty
        badges: Icon references (ingredients, spiciness, ...)
        is_active: Global visibility toggle
        is_featured: Occupies a double-width card in grid categories
        available_branch_ids: Branch allowlist; empty means every branch
        sort_order: Position within the category
    """
    id: str
    category_id: str
    name: str
    price: float
    sort_order: int
    description: str = ""
    image_urls: list[str] = field(default_factory=list)
    variants: list[DishVariant] = field(default_factory=list)
    badges: list[str] = field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False
    available_branch_ids: list[str] = field(default_factory=list)

    @property
    def display_price(self) -> float:
        """Cheapest variant when variants exist, otherwise the base price."""
        if self.variants:
            return min(v.price for v in self.variants)
        return self.price

    @property
    def primary_image(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "imageUrls": list(self.image_urls),
            "variants": [v.to_dict() for v in self.variants],
            "badges": list(self.badges),
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
            "availableBranchIds": list(self.available_branch_ids),
            "sortOrder": self.sort_order,
        }


@dataclass
class Branding:
    """Global theme of the restaurant chain."""
    restaurant_name: str = ""
    logo_url: str = ""
    background_image_url: Optional[str] = None
    header_image_url: Optional[str] = None
    primary_color: str = "#F97316"
    background_color: str = "#F8F9FC"
    card_color: str = "#FFFFFF"
    text_color: str = "#111827"
    muted_color: str = "#6B7280"

    def to_dict(self) -> dict:
        return {
            "restaurantName": self.restaurant_name,
            "logoUrl": self.logo_url,
            "backgroundImageUrl": self.background_image_url,
            "headerImageUrl": self.header_image_url,
            "primaryColor": self.primary_color,
            "backgroundColor": self.background_color,
            "cardColor": self.card_color,
            "textColor": self.text_color,
            "mutedColor": self.muted_color,
        }
