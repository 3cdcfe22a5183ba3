"""
Catalog Storage

Repository over the async SQLAlchemy session. Route handlers call into
``CatalogStorage`` rather than building queries themselves.

Ordered collections (categories, banners) keep ``order`` contiguous from 0:
inserts shift later rows, deletes close the gap, and a reorder rewrites every
row's position from the submitted id sequence in a single transaction.

Version: 1.0.0
"""

import logging
from typing import Any, Optional, Sequence, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models import Banner, Category, MenuItem, RestaurantSettings, User
from storefront.schemas import BannerCreate, CategoryCreate, MenuItemCreate

logger = logging.getLogger(__name__)

OrderedModel = Union[Type[Category], Type[Banner]]


class ReorderError(ValueError):
    """Submitted id sequence does not match the collection exactly."""

    def __init__(self, missing: Sequence[str], unknown: Sequence[str]):
        self.missing = list(missing)
        self.unknown = list(unknown)
        parts = []
        if self.missing:
            parts.append(f"missing ids: {self.missing}")
        if self.unknown:
            parts.append(f"unknown ids: {self.unknown}")
        super().__init__("; ".join(parts))


class CatalogStorage:
    """Data access for users, categories, menu items, banners and settings."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # ORDERED COLLECTION HELPERS
    # =========================================================================

    async def _ordered(self, model: OrderedModel) -> list:
        result = await self.session.execute(select(model).order_by(model.order, model.id))
        return list(result.scalars().all())

    @staticmethod
    def _renumber(rows: list) -> None:
        for position, row in enumerate(rows):
            if row.order != position:
                row.order = position

    async def _insert_ordered(self, model: OrderedModel, row, position: Optional[int]):
        rows = await self._ordered(model)
        if position is None or position > len(rows):
            position = len(rows)
        rows.insert(position, row)
        self.session.add(row)
        self._renumber(rows)
        await self.session.commit()
        await self.session.refresh(row)
        return row

    async def _delete_ordered(self, model: OrderedModel, row_id: str) -> bool:
        rows = await self._ordered(model)
        target = next((row for row in rows if row.id == row_id), None)
        if target is None:
            return False
        rows.remove(target)
        await self.session.delete(target)
        self._renumber(rows)
        await self.session.commit()
        return True

    async def _reorder(self, model: OrderedModel, ids: Sequence[str]) -> None:
        rows = await self._ordered(model)
        by_id = {row.id: row for row in rows}
        submitted = set(ids)

        missing = [row.id for row in rows if row.id not in submitted]
        unknown = [i for i in ids if i not in by_id]
        if missing or unknown:
            raise ReorderError(missing, unknown)

        for position, row_id in enumerate(ids):
            by_id[row_id].order = position
        await self.session.commit()
        logger.info(f"Reordered {model.__tablename__}: {len(ids)} rows")

    async def _update(self, row, fields: dict[str, Any]):
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.commit()
        await self.session.refresh(row)
        return row

    # =========================================================================
    # USERS
    # =========================================================================

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create_user(self, username: str, password_hash: str) -> User:
        user = User(username=username, password=password_hash)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def list_categories(self) -> list[Category]:
        return await self._ordered(Category)

    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self.session.get(Category, category_id)

    async def create_category(self, data: CategoryCreate) -> Category:
        return await self._insert_ordered(Category, Category(name=data.name), data.order)

    async def update_category(self, category_id: str, fields: dict[str, Any]) -> Optional[Category]:
        category = await self.get_category(category_id)
        if category is None:
            return None
        return await self._update(category, fields)

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category. Its menu items are kept with a dangling category id."""
        return await self._delete_ordered(Category, category_id)

    async def reorder_categories(self, category_ids: Sequence[str]) -> None:
        await self._reorder(Category, category_ids)

    # =========================================================================
    # MENU ITEMS
    # =========================================================================

    async def list_menu_items(
        self,
        category_id: Optional[str] = None,
        include_hidden: bool = False,
    ) -> list[MenuItem]:
        query = select(MenuItem).order_by(MenuItem.name)
        if category_id is not None:
            query = query.where(MenuItem.category_id == category_id)
        if not include_hidden:
            query = query.where(MenuItem.is_hidden.is_(False))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_menu_item(self, item_id: str) -> Optional[MenuItem]:
        return await self.session.get(MenuItem, item_id)

    async def create_menu_item(self, data: MenuItemCreate) -> MenuItem:
        item = MenuItem(**data.model_dump())
        self.session.add(item)
        await self.session.commit()
        await self.session.refresh(item)
        return item

    async def update_menu_item(self, item_id: str, fields: dict[str, Any]) -> Optional[MenuItem]:
        item = await self.get_menu_item(item_id)
        if item is None:
            return None
        return await self._update(item, fields)

    async def delete_menu_item(self, item_id: str) -> bool:
        item = await self.get_menu_item(item_id)
        if item is None:
            return False
        await self.session.delete(item)
        await self.session.commit()
        return True

    async def toggle_item_availability(self, item_id: str) -> Optional[MenuItem]:
        item = await self.get_menu_item(item_id)
        if item is None:
            return None
        return await self._update(item, {"is_available": not item.is_available})

    async def toggle_item_visibility(self, item_id: str) -> Optional[MenuItem]:
        item = await self.get_menu_item(item_id)
        if item is None:
            return None
        return await self._update(item, {"is_hidden": not item.is_hidden})

    # =========================================================================
    # BANNERS
    # =========================================================================

    async def list_banners(self, active_only: bool = False) -> list[Banner]:
        banners = await self._ordered(Banner)
        if active_only:
            return [banner for banner in banners if banner.is_active]
        return banners

    async def get_banner(self, banner_id: str) -> Optional[Banner]:
        return await self.session.get(Banner, banner_id)

    async def create_banner(self, data: BannerCreate) -> Banner:
        banner = Banner(image_url=data.image_url, is_active=data.is_active)
        return await self._insert_ordered(Banner, banner, data.order)

    async def update_banner(self, banner_id: str, fields: dict[str, Any]) -> Optional[Banner]:
        banner = await self.get_banner(banner_id)
        if banner is None:
            return None
        return await self._update(banner, fields)

    async def delete_banner(self, banner_id: str) -> bool:
        return await self._delete_ordered(Banner, banner_id)

    async def toggle_banner_active(self, banner_id: str) -> Optional[Banner]:
        banner = await self.get_banner(banner_id)
        if banner is None:
            return None
        return await self._update(banner, {"is_active": not banner.is_active})

    async def reorder_banners(self, banner_ids: Sequence[str]) -> None:
        await self._reorder(Banner, banner_ids)

    # =========================================================================
    # SETTINGS
    # =========================================================================

    async def get_settings(self) -> Optional[RestaurantSettings]:
        result = await self.session.execute(select(RestaurantSettings).limit(1))
        return result.scalar_one_or_none()

    async def update_settings(
        self,
        fields: dict[str, Any],
        defaults: dict[str, Any],
    ) -> RestaurantSettings:
        """
        Upsert the settings singleton.

        When no row exists yet, ``defaults`` fill the required columns the
        partial update leaves out.
        """
        existing = await self.get_settings()
        if existing is not None:
            return await self._update(existing, fields)

        row = RestaurantSettings(**{**defaults, **fields})
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        logger.info("Settings row created")
        return row
