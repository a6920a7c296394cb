"""
Pydantic Schemas for Request/Response Validation

Field names follow the store (snake_case) convention; the client layer
translates them to its own naming at the boundary.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List, Any
from datetime import datetime

from tabletmenu.models import ViewType


def _string_ids(v: Any) -> List[str]:
    """Allowlists hold opaque branch ids; store them as strings."""
    if v is None:
        return []
    return [str(item) for item in v]


# =============================================================================
# BRANCHES
# =============================================================================

class BranchCreate(BaseModel):
    """Request schema for creating a branch."""
    name: str = Field(..., min_length=1, max_length=255, examples=["Chilonzor Filiali"])
    address: str = Field(default="", examples=["Chilonzor ko'chasi, 5-uy"])
    phone: str = Field(default="", max_length=100, examples=["+998 90 123 45 67"])
    custom_color: Optional[str] = Field(None, max_length=50, examples=["#DC2626"])
    logo_url: Optional[str] = None


class BranchUpdate(BaseModel):
    """Partial branch update; only supplied fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=100)
    custom_color: Optional[str] = Field(None, max_length=50)
    logo_url: Optional[str] = None


class BranchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    phone: str
    custom_color: Optional[str]
    logo_url: Optional[str]


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryCreate(BaseModel):
    """Request schema for creating a category. Omit sort_order to append."""
    name: str = Field(..., min_length=1, max_length=255, examples=["Quyuq Taomlar"])
    view_type: ViewType = Field(default=ViewType.GRID, examples=["grid"])
    sort_order: Optional[int] = Field(None, ge=0)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    view_type: Optional[ViewType] = None
    sort_order: Optional[int] = Field(None, ge=0)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    sort_order: int
    view_type: ViewType


# =============================================================================
# PRODUCTS (DISHES)
# =============================================================================

class VariantSchema(BaseModel):
    """A priced portion or type of a dish."""
    name: str = Field(..., min_length=1, max_length=100, examples=["0.7 Portsiya"])
    price: float = Field(..., ge=0, examples=[35000])


class ProductCreate(BaseModel):
    """
    Request schema for creating a dish.

    When variants are supplied the persisted price is the cheapest variant;
    otherwise an explicit price is required. Omit sort_order to append the
    dish to the end of its category.
    """
    category_id: int
    name: str = Field(..., min_length=1, max_length=255, examples=["Mastava"])
    description: str = Field(default="")
    price: Optional[float] = Field(None, ge=0, examples=[30000])
    image_url: Optional[str] = None
    variants: List[VariantSchema] = Field(default_factory=list)
    badges: List[str] = Field(default_factory=list)
    is_active: bool = True
    is_featured: bool = False
    available_branch_ids: List[str] = Field(default_factory=list)
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("available_branch_ids", mode="before")
    @classmethod
    def normalize_branch_ids(cls, v: Any) -> List[str]:
        return _string_ids(v)

    @field_validator("variants", "badges", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def derive_price(self) -> "ProductCreate":
        if self.variants:
            self.price = min(v.price for v in self.variants)
        elif self.price is None:
            raise ValueError("price is required when the dish has no variants")
        return self


class ProductUpdate(BaseModel):
    """
    Partial dish update. Supplying a non-empty variant list re-derives the price.
    """
    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    variants: Optional[List[VariantSchema]] = None
    badges: Optional[List[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    available_branch_ids: Optional[List[str]] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("available_branch_ids", mode="before")
    @classmethod
    def normalize_branch_ids(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        return _string_ids(v)

    @model_validator(mode="after")
    def derive_price(self) -> "ProductUpdate":
        if self.variants:
            self.price = min(v.price for v in self.variants)
        return self


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: int
    name: str
    description: str
    price: float
    image_url: Optional[str]
    variants: List[VariantSchema]
    badges: List[str]
    is_active: bool
    is_featured: bool
    available_branch_ids: List[str]
    sort_order: int

    @field_validator("variants", "badges", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("available_branch_ids", mode="before")
    @classmethod
    def normalize_branch_ids(cls, v: Any) -> List[str]:
        return _string_ids(v)


# =============================================================================
# REORDERING
# =============================================================================

class SortOrderEntry(BaseModel):
    """One element of a reorder batch."""
    id: int
    sort_order: int = Field(..., ge=0)


class CategoryReorderRequest(BaseModel):
    categories: List[SortOrderEntry] = Field(..., min_length=1)


class ProductReorderRequest(BaseModel):
    products: List[SortOrderEntry] = Field(..., min_length=1)


class ReorderResponse(BaseModel):
    success: bool = True
    updated: int


# =============================================================================
# BRANDING
# =============================================================================

class BrandingUpdate(BaseModel):
    """Partial branding update; last write wins."""
    restaurant_name: Optional[str] = Field(None, max_length=255)
    logo_url: Optional[str] = None
    background_image_url: Optional[str] = None
    header_image_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, max_length=50)
    background_color: Optional[str] = Field(None, max_length=50)
    card_color: Optional[str] = Field(None, max_length=50)
    text_color: Optional[str] = Field(None, max_length=50)
    muted_color: Optional[str] = Field(None, max_length=50)


class BrandingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    restaurant_name: str
    logo_url: str
    background_image_url: Optional[str]
    header_image_url: Optional[str]
    primary_color: str
    background_color: str
    card_color: str
    text_color: str
    muted_color: str


# =============================================================================
# AUTH / SYSTEM
# =============================================================================

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, examples=["admin"])
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    authenticated: bool
    username: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    credential_backend: str
    timestamp: datetime
