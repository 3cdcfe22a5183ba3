"""
SQLAlchemy Database Models

Catalog tables for the storefront:
- Categories and banners carry a contiguous 0-based display order
- Menu item prices are stored as integer minor units (cents)
- Settings is a singleton row

Version: 1.0.0
"""

import uuid

from sqlalchemy import Column, Integer, String, Text, Boolean

from storefront.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Back-office administrator."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash

    def __repr__(self):
        return f"<User {self.username}>"


class Category(Base):
    """
    Menu category.

    ``order`` defines the display sequence and is kept contiguous from 0
    across the whole table.
    """
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(Text, nullable=False)
    order = Column(Integer, nullable=False, default=0, index=True)

    def __repr__(self):
        return f"<Category {self.order}: {self.name}>"


class MenuItem(Base):
    """
    Orderable dish.

    ``category_id`` is not a foreign key: deleting a category leaves its
    items in place with a dangling reference.
    """
    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    category_id = Column(String(36), nullable=False, index=True)

    # =========================================================================
    # DISPLAY
    # =========================================================================
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)

    # =========================================================================
    # PRICING (minor currency units)
    # =========================================================================
    price = Column(Integer, nullable=False)

    # =========================================================================
    # FLAGS
    # =========================================================================
    is_available = Column(Boolean, nullable=False, default=True)
    is_hidden = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<MenuItem {self.name} - {self.price}>"


class Banner(Base):
    """Promotional banner shown in the storefront carousel."""
    __tablename__ = "banners"

    id = Column(String(36), primary_key=True, default=generate_id)
    image_url = Column(Text, nullable=False)
    order = Column(Integer, nullable=False, default=0, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Banner {self.order} - {'active' if self.is_active else 'inactive'}>"


class RestaurantSettings(Base):
    """
    Restaurant settings singleton.

    At most one row exists; the read path falls back to configured
    defaults when the table is empty.
    """
    __tablename__ = "settings"

    id = Column(String(36), primary_key=True, default=generate_id)

    # =========================================================================
    # ORDERING
    # =========================================================================
    restaurant_name = Column(Text, nullable=False)
    whatsapp_number = Column(Text, nullable=False)
    currency = Column(Text, nullable=False, default="$")

    # =========================================================================
    # BRANDING
    # =========================================================================
    logo_url = Column(Text, nullable=True)
    footer_text = Column(Text, nullable=True)

    # =========================================================================
    # CONTACT
    # =========================================================================
    contact_phone = Column(Text, nullable=True)
    contact_email = Column(Text, nullable=True)
    contact_address = Column(Text, nullable=True)
    contact_address_link = Column(Text, nullable=True)

    def __repr__(self):
        return f"<RestaurantSettings {self.restaurant_name}>"
