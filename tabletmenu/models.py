"""
SQLAlchemy Database Models

Tables behind the digital menu:
- Branches (physical restaurant locations)
- Categories (ordered dish groupings with a rendering hint)
- Products (dishes, ordered within their category)
- Branding (singleton theme row)
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func
from tabletmenu.database import Base
import enum


BRANDING_ID = 1


class ViewType(str, enum.Enum):
    """How a category's dishes are rendered on the tablet."""
    GRID = "grid"
    LIST = "list"


class Branch(Base):
    """
    A physical restaurant location.

    Dishes reference branches through their allowlist only; deleting a
    branch leaves stale ids in allowlists, which simply never match.
    """
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False, default="")
    phone = Column(String(100), nullable=False, default="")
    custom_color = Column(String(50), nullable=True)
    logo_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Branch #{self.id} - {self.name}>"


class Category(Base):
    """
    Menu category. ``sort_order`` is global across categories.
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    view_type = Column(
        Enum(ViewType, name="view_type", values_callable=lambda e: [m.value for m in e]),
        default=ViewType.GRID,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Category #{self.id} - {self.name} ({self.sort_order})>"


class Product(Base):
    """
    A dish on the menu.

    ``sort_order`` is only meaningful among products sharing ``category_id``.
    An empty ``available_branch_ids`` list means the dish is offered at
    every branch.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    image_url = Column(Text, nullable=True)

    variants = Column(JSON, nullable=False, default=list)  # [{"name": ..., "price": ...}]
    badges = Column(JSON, nullable=False, default=list)  # icon references
    available_branch_ids = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Product #{self.id} - {self.name} (category {self.category_id}, {self.sort_order})>"


class Branding(Base):
    """
    Global theme. Exactly one row, pinned to ``BRANDING_ID``.
    """
    __tablename__ = "branding"
    __table_args__ = (
        CheckConstraint(f"id = {BRANDING_ID}", name="branding_singleton"),
    )

    id = Column(Integer, primary_key=True, default=BRANDING_ID)

    restaurant_name = Column(String(255), nullable=False, default="")
    logo_url = Column(Text, nullable=False, default="")
    background_image_url = Column(Text, nullable=True)
    header_image_url = Column(Text, nullable=True)

    primary_color = Column(String(50), nullable=False, default="#F97316")
    background_color = Column(String(50), nullable=False, default="#F8F9FC")
    card_color = Column(String(50), nullable=False, default="#FFFFFF")
    text_color = Column(String(50), nullable=False, default="#111827")
    muted_color = Column(String(50), nullable=False, default="#6B7280")

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Branding {self.restaurant_name!r}>"
