"""
FastAPI Application Entry Point

TabletMenu - digital menu for a restaurant chain.
Serves the customer tablets and the admin back-office over one REST API.

Endpoints:
    - /api/categories: list, create, update, delete, reorder
    - /api/products: list (optionally per category and branch), create,
      update, delete, reorder
    - /api/branches: list, create, update, delete
    - /api/branding: read and update the singleton theme
    - POST /api/auth/login: back-office credential check
    - GET /api/health: system health check
"""

import logging
from datetime import datetime
from typing import Any, List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, func, select

from tabletmenu.core.config import get_settings, setup_logging
from tabletmenu.database import async_session_maker, get_db, init_db, seed_defaults, engine
from tabletmenu.models import Branch, Branding, Category, Product, BRANDING_ID
from tabletmenu.schemas import (
    BranchCreate,
    BranchResponse,
    BranchUpdate,
    BrandingResponse,
    BrandingUpdate,
    CategoryCreate,
    CategoryReorderRequest,
    CategoryResponse,
    CategoryUpdate,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    ProductCreate,
    ProductReorderRequest,
    ProductResponse,
    ProductUpdate,
    ReorderResponse,
)
from tabletmenu.services.auth import get_credential_verifier
from tabletmenu.services.ordering import (
    UnknownIdsError,
    next_category_sort_order,
    next_sort_order,
    persist_sort_orders,
)
from tabletmenu.services.visibility import is_dish_visible_at_branch

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update
NON_NULLABLE_PRODUCT_FIELDS = {
    "category_id", "name", "description", "price", "variants", "badges",
    "is_active", "is_featured", "available_branch_ids", "sort_order",
}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Category delete policy: {settings.category_delete_policy.value}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    if settings.seed_defaults:
        async with async_session_maker() as session:
            await seed_defaults(session)

    verifier = get_credential_verifier()
    logger.info(f"✅ Credential backend: {verifier.backend_name}")

    problems = settings.validate_production_config()
    if problems:
        logger.warning(f"⚠️ Insecure production config: {problems}")

    yield  # Application runs

    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Digital menu platform: branches, categories, dishes and branding "
        "for customer tablets and the admin back-office."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

async def get_or_404(db: AsyncSession, model: Any, entity_id: int, label: str) -> Any:
    """Load a row by primary key or answer 404."""
    row = await db.get(model, entity_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"{label} #{entity_id} not found")
    return row


async def ensure_category_exists(db: AsyncSession, category_id: int) -> None:
    if await db.get(Category, category_id) is None:
        raise HTTPException(
            status_code=400,
            detail=f"Category #{category_id} does not exist"
        )


async def append_position(db: AsyncSession, category_id: int) -> int:
    """sort_order for a dish appended to the end of a category."""
    result = await db.execute(
        select(Product.sort_order).where(Product.category_id == category_id)
    )
    return next_sort_order(result.scalars().all())


async def get_or_create_branding(db: AsyncSession) -> Branding:
    """Fetch the singleton branding row, creating the default on first use."""
    branding = await db.get(Branding, BRANDING_ID)
    if branding is None:
        branding = Branding(id=BRANDING_ID, restaurant_name=settings.default_restaurant_name)
        db.add(branding)
        await db.commit()
        await db.refresh(branding)
        logger.info("Default branding created")
    return branding


# =============================================================================
# HEALTH & AUTH ENDPOINTS
# =============================================================================

@app.get(
    "/api/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify the database is reachable."""

    db_status = "healthy"
    try:
        await db.execute(select(1))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="ok" if db_status == "healthy" else "degraded",
        database=db_status,
        credential_backend=get_credential_verifier().backend_name,
        timestamp=datetime.now(),
    )


@app.post(
    "/api/auth/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
    summary="Back-office Login",
)
async def login(body: LoginRequest) -> LoginResponse:
    """Check admin credentials with the configured verifier."""
    result = get_credential_verifier().verify(body.username, body.password)

    if not result.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error_message or "Invalid credentials",
        )

    return LoginResponse(authenticated=True, username=result.username)


# =============================================================================
# BRANCH ENDPOINTS
# =============================================================================

@app.get("/api/branches", response_model=List[BranchResponse], tags=["Branches"])
async def list_branches(db: AsyncSession = Depends(get_db)) -> List[BranchResponse]:
    result = await db.execute(select(Branch).order_by(Branch.id))
    return [BranchResponse.model_validate(b) for b in result.scalars().all()]


@app.post(
    "/api/branches",
    response_model=BranchResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Branches"],
)
async def create_branch(
    body: BranchCreate,
    db: AsyncSession = Depends(get_db),
) -> BranchResponse:
    branch = Branch(**body.model_dump())
    db.add(branch)
    await db.commit()
    await db.refresh(branch)

    logger.info(f"Branch #{branch.id} created: {branch.name}")
    return BranchResponse.model_validate(branch)


@app.put("/api/branches/{branch_id}", response_model=BranchResponse, tags=["Branches"])
async def update_branch(
    branch_id: int,
    body: BranchUpdate,
    db: AsyncSession = Depends(get_db),
) -> BranchResponse:
    branch = await get_or_404(db, Branch, branch_id, "Branch")

    for field, value in body.model_dump(exclude_unset=True).items():
        # Only the optional overrides can be cleared
        if value is None and field not in ("custom_color", "logo_url"):
            continue
        setattr(branch, field, value)

    await db.commit()
    await db.refresh(branch)
    return BranchResponse.model_validate(branch)


@app.delete(
    "/api/branches/{branch_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Branches"],
)
async def delete_branch(
    branch_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    branch = await get_or_404(db, Branch, branch_id, "Branch")
    await db.delete(branch)
    await db.commit()

    logger.info(f"Branch #{branch_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# CATEGORY ENDPOINTS
# =============================================================================

@app.get("/api/categories", response_model=List[CategoryResponse], tags=["Categories"])
async def list_categories(db: AsyncSession = Depends(get_db)) -> List[CategoryResponse]:
    result = await db.execute(select(Category).order_by(Category.sort_order, Category.id))
    return [CategoryResponse.model_validate(c) for c in result.scalars().all()]


@app.post(
    "/api/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Categories"],
)
async def create_category(
    body: CategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Create a category; without an explicit sort_order it goes last."""
    sort_order = body.sort_order
    if sort_order is None:
        count = await db.scalar(select(func.count(Category.id)))
        sort_order = next_category_sort_order(count or 0)

    category = Category(name=body.name, view_type=body.view_type, sort_order=sort_order)
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info(f"Category #{category.id} created: {category.name} (position {sort_order})")
    return CategoryResponse.model_validate(category)


# Declared before /{category_id} so "reorder" is never read as an id
@app.put(
    "/api/categories/reorder",
    response_model=ReorderResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Categories"],
)
async def reorder_categories(
    body: CategoryReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> ReorderResponse:
    """Apply a full category order in one transaction."""
    entries = [(e.id, e.sort_order) for e in body.categories]
    try:
        updated = await persist_sort_orders(db, Category, entries)
    except (UnknownIdsError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ReorderResponse(updated=updated)


@app.put("/api/categories/{category_id}", response_model=CategoryResponse, tags=["Categories"])
async def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    category = await get_or_404(db, Category, category_id, "Category")

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@app.delete(
    "/api/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}},
    tags=["Categories"],
)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Delete a category.

    Under the cascade policy its dishes are deleted in the same transaction;
    under the restrict policy the delete is refused while dishes remain.
    """
    category = await get_or_404(db, Category, category_id, "Category")

    dish_count = await db.scalar(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    ) or 0

    if dish_count and not settings.cascade_category_delete:
        raise HTTPException(
            status_code=400,
            detail=f"Category #{category_id} still has {dish_count} dishes"
        )

    try:
        await db.execute(delete(Product).where(Product.category_id == category_id))
        await db.delete(category)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Category #{category_id} deleted with {dish_count} dishes")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# PRODUCT (DISH) ENDPOINTS
# =============================================================================

@app.get("/api/products", response_model=List[ProductResponse], tags=["Products"])
async def list_products(
    category_id: Optional[int] = Query(None),
    branch_id: Optional[str] = Query(None, description="Only dishes visible at this branch"),
    db: AsyncSession = Depends(get_db),
) -> List[ProductResponse]:
    """
    List dishes ordered by sort_order.

    With ``branch_id`` the customer-menu rule applies: inactive dishes and
    dishes whose allowlist excludes the branch are left out.
    """
    query = select(Product).order_by(Product.sort_order, Product.id)
    if category_id is not None:
        query = query.where(Product.category_id == category_id)

    result = await db.execute(query)
    products = result.scalars().all()

    if branch_id is not None:
        products = [p for p in products if is_dish_visible_at_branch(p, branch_id)]

    return [ProductResponse.model_validate(p) for p in products]


@app.post(
    "/api/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    tags=["Products"],
)
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """Create a dish; without an explicit sort_order it goes last in its category."""
    await ensure_category_exists(db, body.category_id)

    data = body.model_dump()
    if data["sort_order"] is None:
        data["sort_order"] = await append_position(db, body.category_id)

    product = Product(**data)
    db.add(product)
    await db.commit()
    await db.refresh(product)

    logger.info(
        f"Product #{product.id} created in category #{product.category_id} "
        f"(position {product.sort_order})"
    )
    return ProductResponse.model_validate(product)


# Declared before /{product_id} so "reorder" is never read as an id
@app.put(
    "/api/products/reorder",
    response_model=ReorderResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Products"],
)
async def reorder_products(
    body: ProductReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> ReorderResponse:
    """Apply a dish reorder batch in one transaction."""
    entries = [(e.id, e.sort_order) for e in body.products]
    try:
        updated = await persist_sort_orders(db, Product, entries)
    except (UnknownIdsError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ReorderResponse(updated=updated)


@app.put(
    "/api/products/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Products"],
)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProductResponse:
    """
    Update a dish. Moving it to another category without an explicit
    sort_order appends it to the end of the new category.
    """
    product = await get_or_404(db, Product, product_id, "Product")
    changes = body.model_dump(exclude_unset=True)

    new_category = changes.get("category_id")
    if new_category is not None and new_category != product.category_id:
        await ensure_category_exists(db, new_category)
        if changes.get("sort_order") is None:
            changes["sort_order"] = await append_position(db, new_category)

    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_PRODUCT_FIELDS:
            continue
        setattr(product, field, value)

    # The cheapest variant always wins over a stored or supplied price
    if product.variants:
        product.price = min(v["price"] for v in product.variants)

    await db.commit()
    await db.refresh(product)
    return ProductResponse.model_validate(product)


@app.delete(
    "/api/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Products"],
)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    product = await get_or_404(db, Product, product_id, "Product")
    await db.delete(product)
    await db.commit()

    logger.info(f"Product #{product_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# BRANDING ENDPOINTS
# =============================================================================

@app.get("/api/branding", response_model=BrandingResponse, tags=["Branding"])
async def get_branding(db: AsyncSession = Depends(get_db)) -> BrandingResponse:
    branding = await get_or_create_branding(db)
    return BrandingResponse.model_validate(branding)


@app.put("/api/branding", response_model=BrandingResponse, tags=["Branding"])
async def update_branding(
    body: BrandingUpdate,
    db: AsyncSession = Depends(get_db),
) -> BrandingResponse:
    """Merge the supplied fields into the singleton branding row."""
    branding = await get_or_create_branding(db)

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field not in ("background_image_url", "header_image_url"):
            continue
        setattr(branding, field, value)

    await db.commit()
    await db.refresh(branding)

    logger.info("Branding updated")
    return BrandingResponse.model_validate(branding)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tabletmenu.main:app", host=settings.api_host, port=settings.api_port)
