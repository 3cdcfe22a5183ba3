"""
Pydantic Schemas for Request/Response Validation

The JSON wire format is camelCase (``categoryId``, ``isAvailable``, ...);
Python attributes stay snake_case. Every schema accepts either spelling on
input and emits camelCase on output.

Version: 1.0.0
"""

import re
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _unique_ids(ids: List[str]) -> List[str]:
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate ids: {duplicates}")
    return ids


def _not_null(v):
    if v is None:
        raise ValueError("Field may be omitted but not null")
    return v


# =============================================================================
# CATEGORY SCHEMAS
# =============================================================================

class CategoryCreate(CamelModel):
    """Request schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Burgers"])
    order: Optional[int] = Field(
        None, ge=0, description="Insert position; appended at the end when omitted"
    )


class CategoryUpdate(CamelModel):
    """Partial category update. Ordering changes go through the reorder endpoint."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> Optional[str]:
        return _not_null(v)


class CategoryResponse(CamelModel):
    id: str
    name: str
    order: int


class ReorderCategoriesRequest(CamelModel):
    """Full category sequence; each id's position becomes its order."""
    category_ids: List[str] = Field(..., min_length=1)

    @field_validator("category_ids")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        return _unique_ids(v)


# =============================================================================
# MENU ITEM SCHEMAS
# =============================================================================

class MenuItemCreate(CamelModel):
    """Request schema for creating a menu item."""
    category_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200, examples=["Classic Mini Burger"])
    description: str = Field(..., max_length=1000)
    price: int = Field(..., ge=0, description="Price in minor units (cents)", examples=[899])
    image_url: Optional[str] = Field(None)
    is_available: bool = True
    is_hidden: bool = False


class MenuItemUpdate(CamelModel):
    category_id: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    is_hidden: Optional[bool] = None

    @field_validator("category_id", "name", "description", "price", "is_available", "is_hidden")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)


class MenuItemResponse(CamelModel):
    """A menu item as served to clients; also the snapshot stored in a cart line."""
    id: str
    category_id: str
    name: str
    description: str
    price: int = Field(..., ge=0)
    image_url: Optional[str] = None
    is_available: bool = True
    is_hidden: bool = False


# =============================================================================
# BANNER SCHEMAS
# =============================================================================

class BannerCreate(CamelModel):
    image_url: str = Field(..., min_length=1)
    is_active: bool = True
    order: Optional[int] = Field(None, ge=0)


class BannerUpdate(CamelModel):
    image_url: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None

    @field_validator("image_url", "is_active")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)


class BannerResponse(CamelModel):
    id: str
    image_url: str
    order: int
    is_active: bool


class ReorderBannersRequest(CamelModel):
    """Full banner sequence; each id's position becomes its order."""
    banner_ids: List[str] = Field(..., min_length=1)

    @field_validator("banner_ids")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        return _unique_ids(v)


# =============================================================================
# SETTINGS SCHEMAS
# =============================================================================

class SettingsUpdate(CamelModel):
    """Partial update of the settings singleton."""
    restaurant_name: Optional[str] = Field(None, min_length=1, max_length=200)
    whatsapp_number: Optional[str] = Field(None, min_length=1, max_length=30)
    currency: Optional[str] = Field(None, min_length=1, max_length=10)
    logo_url: Optional[str] = None
    footer_text: Optional[str] = Field(None, max_length=500)
    contact_phone: Optional[str] = Field(None, max_length=50)
    contact_email: Optional[str] = None
    contact_address: Optional[str] = Field(None, max_length=500)
    contact_address_link: Optional[str] = None

    @field_validator("restaurant_name", "whatsapp_number", "currency")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> Optional[str]:
        return _not_null(v)

    @field_validator("whatsapp_number")
    @classmethod
    def validate_whatsapp(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if len(re.sub(r"[^\d]", "", v)) < 7:
            raise ValueError("WhatsApp number must include the country code")
        return v

    @field_validator("logo_url", "contact_address_link")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return v
        if not re.match(r"^https?://\S+$", v):
            raise ValueError("Must be a valid URL")
        return v

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return v
        if not re.match(r"^[\w\.+-]+@[\w\.-]+\.\w+$", v):
            raise ValueError("Must be a valid email")
        return v


class SettingsResponse(CamelModel):
    """Settings singleton; ``id`` is absent when defaults are served."""
    id: Optional[str] = None
    restaurant_name: str
    whatsapp_number: str
    currency: str = "$"
    logo_url: Optional[str] = None
    footer_text: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    contact_address: Optional[str] = None
    contact_address_link: Optional[str] = None


# =============================================================================
# AUTH SCHEMAS
# =============================================================================

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """User without the password hash."""
    id: str
    username: str


class AuthResponse(BaseModel):
    user: UserResponse


# =============================================================================
# CART SCHEMAS (client side, never persisted on the server)
# =============================================================================

class CartItem(CamelModel):
    """One cart line: a menu item snapshot, a quantity and an optional note."""
    menu_item: MenuItemResponse
    quantity: int = Field(..., ge=1)
    note: Optional[str] = None

    @property
    def line_total(self) -> int:
        return self.menu_item.price * self.quantity


# =============================================================================
# GENERIC RESPONSES
# =============================================================================

class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    version: str
    timestamp: datetime
