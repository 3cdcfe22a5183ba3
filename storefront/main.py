"""
FastAPI Application Entry Point

Restaurant Storefront - catalog API for customers and a protected
back-office API for administrators.

Endpoints:
    - GET  /api/categories, /api/menu-items, /api/banners, /api/settings: Storefront reads
    - POST /api/auth/login, /api/auth/logout, GET /api/auth/me: Admin session
    - /api/admin/...: Category, menu item, banner and settings management
    - GET  /health: System health check

Run: uvicorn storefront.main:app --port 8001

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.sessions import SessionMiddleware

# Internal imports
from storefront import database
from storefront.core.config import get_settings, setup_logging
from storefront.core.security import (
    authenticate,
    ensure_admin_user,
    get_current_user,
    login_session,
    logout_session,
    require_admin,
)
from storefront.database import get_db, init_db, dispose_db
from storefront.models import User
from storefront.schemas import (
    AuthResponse,
    BannerCreate,
    BannerResponse,
    BannerUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    ReorderBannersRequest,
    ReorderCategoriesRequest,
    SettingsResponse,
    SettingsUpdate,
    SuccessResponse,
    UserResponse,
)
from storefront.storage import CatalogStorage, ReorderError

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    logger.info("✅ Database initialized")

    async with database.async_session_maker() as session:
        await ensure_admin_user(CatalogStorage(session))

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await dispose_db()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant storefront: menu browsing for customers, WhatsApp order "
        "hand-off, and a back office for categories, menu items, banners and settings."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signed cookie session for the back office
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    max_age=settings.session_max_age_seconds,
    same_site="lax",
    https_only=settings.is_production,
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_storage(db: AsyncSession = Depends(get_db)) -> CatalogStorage:
    return CatalogStorage(db)


def default_settings() -> SettingsResponse:
    """Settings served when no row has been saved yet."""
    return SettingsResponse(
        whatsapp_number="",
        restaurant_name=settings.default_restaurant_name,
        currency=settings.default_currency,
    )


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity} not found")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍔 Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
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
        await db.execute(select(func.count()).select_from(User))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        version=settings.app_version,
        timestamp=datetime.now(),
    )


# =============================================================================
# STOREFRONT ENDPOINTS
# =============================================================================

@app.get(
    "/api/categories",
    response_model=list[CategoryResponse],
    tags=["Storefront"],
)
async def list_categories(storage: CatalogStorage = Depends(get_storage)):
    """Categories in display order."""
    return await storage.list_categories()


@app.get(
    "/api/menu-items",
    response_model=list[MenuItemResponse],
    tags=["Storefront"],
)
async def list_menu_items(storage: CatalogStorage = Depends(get_storage)):
    """Menu items visible to customers (hidden items removed)."""
    return await storage.list_menu_items()


@app.get(
    "/api/menu-items/category/{category_id}",
    response_model=list[MenuItemResponse],
    tags=["Storefront"],
)
async def list_menu_items_by_category(
    category_id: str,
    storage: CatalogStorage = Depends(get_storage),
):
    return await storage.list_menu_items(category_id=category_id)


@app.get(
    "/api/banners",
    response_model=list[BannerResponse],
    tags=["Storefront"],
)
async def list_banners(storage: CatalogStorage = Depends(get_storage)):
    """Active banners in display order."""
    return await storage.list_banners(active_only=True)


@app.get(
    "/api/settings",
    response_model=SettingsResponse,
    response_model_exclude_none=True,
    tags=["Storefront"],
)
async def get_restaurant_settings(storage: CatalogStorage = Depends(get_storage)):
    """Restaurant settings, or the configured defaults when none are saved."""
    row = await storage.get_settings()
    if row is None:
        return default_settings()
    return row


# =============================================================================
# AUTH ENDPOINTS
# =============================================================================

@app.post(
    "/api/auth/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def login(
    credentials: LoginRequest,
    request: Request,
    storage: CatalogStorage = Depends(get_storage),
) -> AuthResponse:
    user = await authenticate(storage, credentials.username, credentials.password)
    if user is None:
        logger.warning(f"Failed login for '{credentials.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    login_session(request, user)
    logger.info(f"User '{user.username}' logged in")
    return AuthResponse(user=UserResponse.model_validate(user))


@app.post("/api/auth/logout", response_model=SuccessResponse, tags=["Auth"])
async def logout(request: Request) -> SuccessResponse:
    logout_session(request)
    return SuccessResponse()


@app.get(
    "/api/auth/me",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Auth"],
)
async def me(user: Optional[User] = Depends(get_current_user)) -> AuthResponse:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return AuthResponse(user=UserResponse.model_validate(user))


# =============================================================================
# ADMIN: CATEGORIES
# =============================================================================

@app.get(
    "/api/admin/categories",
    response_model=list[CategoryResponse],
    tags=["Admin: Categories"],
)
async def admin_list_categories(
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    return await storage.list_categories()


@app.post(
    "/api/admin/categories",
    response_model=CategoryResponse,
    tags=["Admin: Categories"],
)
async def admin_create_category(
    data: CategoryCreate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    category = await storage.create_category(data)
    logger.info(f"Category created: {category.name} (order {category.order})")
    return category


@app.put(
    "/api/admin/categories/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Categories"],
)
async def admin_update_category(
    category_id: str,
    data: CategoryUpdate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    category = await storage.update_category(category_id, data.model_dump(exclude_unset=True))
    if category is None:
        raise not_found("Category")
    return category


@app.delete(
    "/api/admin/categories/{category_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Categories"],
)
async def admin_delete_category(
    category_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> SuccessResponse:
    if not await storage.delete_category(category_id):
        raise not_found("Category")
    logger.info(f"Category {category_id} deleted")
    return SuccessResponse()


@app.post(
    "/api/admin/categories/reorder",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Admin: Categories"],
)
async def admin_reorder_categories(
    data: ReorderCategoriesRequest,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> SuccessResponse:
    """Rewrite every category's order as its position in ``categoryIds``."""
    try:
        await storage.reorder_categories(data.category_ids)
    except ReorderError as e:
        raise HTTPException(status_code=400, detail=f"Invalid reorder data: {e}")
    return SuccessResponse()


# =============================================================================
# ADMIN: MENU ITEMS
# =============================================================================

@app.get(
    "/api/admin/menu-items",
    response_model=list[MenuItemResponse],
    tags=["Admin: Menu Items"],
)
async def admin_list_menu_items(
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    """All menu items, hidden ones included."""
    return await storage.list_menu_items(include_hidden=True)


@app.post(
    "/api/admin/menu-items",
    response_model=MenuItemResponse,
    tags=["Admin: Menu Items"],
)
async def admin_create_menu_item(
    data: MenuItemCreate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    item = await storage.create_menu_item(data)
    logger.info(f"Menu item created: {item.name}")
    return item


@app.put(
    "/api/admin/menu-items/{item_id}",
    response_model=MenuItemResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Menu Items"],
)
async def admin_update_menu_item(
    item_id: str,
    data: MenuItemUpdate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    item = await storage.update_menu_item(item_id, data.model_dump(exclude_unset=True))
    if item is None:
        raise not_found("Menu item")
    return item


@app.delete(
    "/api/admin/menu-items/{item_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Menu Items"],
)
async def admin_delete_menu_item(
    item_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> SuccessResponse:
    if not await storage.delete_menu_item(item_id):
        raise not_found("Menu item")
    return SuccessResponse()


@app.post(
    "/api/admin/menu-items/{item_id}/toggle-availability",
    response_model=MenuItemResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Menu Items"],
)
async def admin_toggle_availability(
    item_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    item = await storage.toggle_item_availability(item_id)
    if item is None:
        raise not_found("Menu item")
    return item


@app.post(
    "/api/admin/menu-items/{item_id}/toggle-visibility",
    response_model=MenuItemResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Menu Items"],
)
async def admin_toggle_visibility(
    item_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    item = await storage.toggle_item_visibility(item_id)
    if item is None:
        raise not_found("Menu item")
    return item


# =============================================================================
# ADMIN: BANNERS
# =============================================================================

@app.get(
    "/api/admin/banners",
    response_model=list[BannerResponse],
    tags=["Admin: Banners"],
)
async def admin_list_banners(
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    """All banners, inactive ones included."""
    return await storage.list_banners()


@app.post(
    "/api/admin/banners",
    response_model=BannerResponse,
    tags=["Admin: Banners"],
)
async def admin_create_banner(
    data: BannerCreate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    return await storage.create_banner(data)


@app.put(
    "/api/admin/banners/{banner_id}",
    response_model=BannerResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Banners"],
)
async def admin_update_banner(
    banner_id: str,
    data: BannerUpdate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    banner = await storage.update_banner(banner_id, data.model_dump(exclude_unset=True))
    if banner is None:
        raise not_found("Banner")
    return banner


@app.delete(
    "/api/admin/banners/{banner_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Banners"],
)
async def admin_delete_banner(
    banner_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> SuccessResponse:
    if not await storage.delete_banner(banner_id):
        raise not_found("Banner")
    return SuccessResponse()


@app.post(
    "/api/admin/banners/{banner_id}/toggle-active",
    response_model=BannerResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Admin: Banners"],
)
async def admin_toggle_banner(
    banner_id: str,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    banner = await storage.toggle_banner_active(banner_id)
    if banner is None:
        raise not_found("Banner")
    return banner


@app.post(
    "/api/admin/banners/reorder",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Admin: Banners"],
)
async def admin_reorder_banners(
    data: ReorderBannersRequest,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
) -> SuccessResponse:
    """Rewrite every banner's order as its position in ``bannerIds``."""
    try:
        await storage.reorder_banners(data.banner_ids)
    except ReorderError as e:
        raise HTTPException(status_code=400, detail=f"Invalid reorder data: {e}")
    return SuccessResponse()


# =============================================================================
# ADMIN: SETTINGS
# =============================================================================

@app.put(
    "/api/admin/settings",
    response_model=SettingsResponse,
    tags=["Admin: Settings"],
)
async def admin_update_settings(
    data: SettingsUpdate,
    storage: CatalogStorage = Depends(get_storage),
    _: User = Depends(require_admin),
):
    defaults = default_settings().model_dump(exclude_none=True)
    row = await storage.update_settings(data.model_dump(exclude_unset=True), defaults)
    logger.info(f"Settings updated: {sorted(data.model_dump(exclude_unset=True))}")
    return row


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
