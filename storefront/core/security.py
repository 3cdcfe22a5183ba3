"""
Admin Authentication

Password hashing with bcrypt and a session-cookie dependency that guards
the ``/api/admin`` routes. The session itself is managed by Starlette's
``SessionMiddleware`` (signed cookie); only the user id is stored in it.
"""

import logging
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import get_settings
from storefront.database import get_db
from storefront.models import User
from storefront.storage import CatalogStorage

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def authenticate(storage: CatalogStorage, username: str, password: str) -> Optional[User]:
    user = await storage.get_user_by_username(username)
    if user is None or not verify_password(password, user.password):
        return None
    return user


def login_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Resolve the logged-in user from the session cookie, or ``None``."""
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    user = await CatalogStorage(db).get_user(user_id)
    if user is None:
        # Account removed after login
        request.session.clear()
    return user


async def require_admin(user: Optional[User] = Depends(get_current_user)) -> User:
    """Dependency for protected routes."""
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def ensure_admin_user(storage: CatalogStorage) -> Optional[User]:
    """
    Create the bootstrap admin account when ``ADMIN_PASSWORD`` is configured.

    An existing account with the same username is left untouched.
    """
    settings = get_settings()
    if not settings.admin_password:
        return None

    existing = await storage.get_user_by_username(settings.admin_username)
    if existing is not None:
        return existing

    user = await storage.create_user(settings.admin_username, hash_password(settings.admin_password))
    logger.info(f"Admin user '{user.username}' created")
    return user
