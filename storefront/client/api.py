"""
Storefront API Client

Async HTTP client for the storefront and back-office REST API, built on
``httpx.AsyncClient``. The admin session cookie set by ``login`` is kept by
the underlying client and sent on every later request.

Usage:
    async with StorefrontAPIClient("http://localhost:8001") as api:
        categories = await api.get_categories()
        await api.login("admin", "secret")
        await api.reorder_categories([c.id for c in reversed(categories)])
"""

import logging
from typing import Any, Optional

import httpx
from pydantic.alias_generators import to_camel

from storefront.client.store_settings import StoreSettings
from storefront.core.config import get_settings
from storefront.schemas import (
    BannerResponse,
    CategoryResponse,
    MenuItemResponse,
    SettingsResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)


class StorefrontAPIError(Exception):
    """
    A request failed.

    Attributes:
        status_code: HTTP status, or None for transport failures
        detail: Server-provided error detail or transport error text
    """

    def __init__(self, status_code: Optional[int], detail: Any):
        self.status_code = status_code
        self.detail = detail
        prefix = f"HTTP {status_code}" if status_code is not None else "Transport error"
        super().__init__(f"{prefix}: {detail}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_validation_error(self) -> bool:
        return self.status_code in (400, 422)


class StorefrontAPIClient:
    """Client for the storefront REST surface."""

    # Reorder endpoint and body field per collection
    REORDER_PATHS = {
        "categories": ("/api/admin/categories/reorder", "categoryIds"),
        "banners": ("/api/admin/banners/reorder", "bannerIds"),
    }

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "StorefrontAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise StorefrontAPIError(None, str(e)) from e

        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.debug(f"{method} {path} -> {response.status_code}: {detail}")
            raise StorefrontAPIError(response.status_code, detail)

        return response.json()

    # =========================================================================
    # STOREFRONT
    # =========================================================================

    async def get_categories(self) -> list[CategoryResponse]:
        data = await self._request("GET", "/api/categories")
        return [CategoryResponse.model_validate(c) for c in data]

    async def get_menu_items(self, category_id: Optional[str] = None) -> list[MenuItemResponse]:
        path = "/api/menu-items" if category_id is None else f"/api/menu-items/category/{category_id}"
        data = await self._request("GET", path)
        return [MenuItemResponse.model_validate(i) for i in data]

    async def get_banners(self) -> list[BannerResponse]:
        data = await self._request("GET", "/api/banners")
        return [BannerResponse.model_validate(b) for b in data]

    async def get_settings(self) -> StoreSettings:
        """Restaurant settings with defaults resolved."""
        return StoreSettings.resolve(await self._request("GET", "/api/settings"))

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, username: str, password: str) -> UserResponse:
        data = await self._request("POST", "/api/auth/login", {"username": username, "password": password})
        return UserResponse.model_validate(data["user"])

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")

    async def me(self) -> Optional[UserResponse]:
        try:
            data = await self._request("GET", "/api/auth/me")
        except StorefrontAPIError as e:
            if e.status_code == 401:
                return None
            raise
        return UserResponse.model_validate(data["user"])

    # =========================================================================
    # ADMIN: CATEGORIES
    # =========================================================================

    async def admin_categories(self) -> list[CategoryResponse]:
        data = await self._request("GET", "/api/admin/categories")
        return [CategoryResponse.model_validate(c) for c in data]

    async def create_category(self, name: str, order: Optional[int] = None) -> CategoryResponse:
        body: dict[str, Any] = {"name": name}
        if order is not None:
            body["order"] = order
        return CategoryResponse.model_validate(await self._request("POST", "/api/admin/categories", body))

    async def update_category(self, category_id: str, name: str) -> CategoryResponse:
        data = await self._request("PUT", f"/api/admin/categories/{category_id}", {"name": name})
        return CategoryResponse.model_validate(data)

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", f"/api/admin/categories/{category_id}")

    async def reorder_categories(self, category_ids: list[str]) -> None:
        await self.reorder("categories", category_ids)

    # =========================================================================
    # ADMIN: MENU ITEMS
    # =========================================================================

    async def admin_menu_items(self) -> list[MenuItemResponse]:
        data = await self._request("GET", "/api/admin/menu-items")
        return [MenuItemResponse.model_validate(i) for i in data]

    async def create_menu_item(self, **fields: Any) -> MenuItemResponse:
        data = await self._request("POST", "/api/admin/menu-items", _camel(fields))
        return MenuItemResponse.model_validate(data)

    async def update_menu_item(self, item_id: str, **fields: Any) -> MenuItemResponse:
        data = await self._request("PUT", f"/api/admin/menu-items/{item_id}", _camel(fields))
        return MenuItemResponse.model_validate(data)

    async def delete_menu_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/api/admin/menu-items/{item_id}")

    async def toggle_item_availability(self, item_id: str) -> MenuItemResponse:
        data = await self._request("POST", f"/api/admin/menu-items/{item_id}/toggle-availability")
        return MenuItemResponse.model_validate(data)

    async def toggle_item_visibility(self, item_id: str) -> MenuItemResponse:
        data = await self._request("POST", f"/api/admin/menu-items/{item_id}/toggle-visibility")
        return MenuItemResponse.model_validate(data)

    # =========================================================================
    # ADMIN: BANNERS
    # =========================================================================

    async def admin_banners(self) -> list[BannerResponse]:
        data = await self._request("GET", "/api/admin/banners")
        return [BannerResponse.model_validate(b) for b in data]

    async def create_banner(
        self,
        image_url: str,
        is_active: bool = True,
        order: Optional[int] = None,
    ) -> BannerResponse:
        body: dict[str, Any] = {"imageUrl": image_url, "isActive": is_active}
        if order is not None:
            body["order"] = order
        return BannerResponse.model_validate(await self._request("POST", "/api/admin/banners", body))

    async def update_banner(self, banner_id: str, **fields: Any) -> BannerResponse:
        data = await self._request("PUT", f"/api/admin/banners/{banner_id}", _camel(fields))
        return BannerResponse.model_validate(data)

    async def delete_banner(self, banner_id: str) -> None:
        await self._request("DELETE", f"/api/admin/banners/{banner_id}")

    async def toggle_banner_active(self, banner_id: str) -> BannerResponse:
        data = await self._request("POST", f"/api/admin/banners/{banner_id}/toggle-active")
        return BannerResponse.model_validate(data)

    async def reorder_banners(self, banner_ids: list[str]) -> None:
        await self.reorder("banners", banner_ids)

    # =========================================================================
    # ADMIN: SHARED
    # =========================================================================

    async def admin_list(self, collection: str) -> list:
        """Full ordered list of a reorderable collection."""
        if collection == "categories":
            return await self.admin_categories()
        if collection == "banners":
            return await self.admin_banners()
        raise ValueError(f"Unknown collection: {collection}")

    async def reorder(self, collection: str, ids: list[str]) -> None:
        """Submit the complete id sequence of a collection."""
        try:
            path, field_name = self.REORDER_PATHS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}")
        await self._request("POST", path, {field_name: list(ids)})

    async def update_settings(self, **fields: Any) -> SettingsResponse:
        data = await self._request("PUT", "/api/admin/settings", _camel(fields))
        return SettingsResponse.model_validate(data)


def _camel(fields: dict[str, Any]) -> dict[str, Any]:
    """snake_case keyword arguments to the camelCase wire format."""
    return {to_camel(key): value for key, value in fields.items()}
