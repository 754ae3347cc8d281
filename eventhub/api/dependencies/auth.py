# eventhub/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The bearer token identifies the user by id; the user row supplies role and
active flag. Admin endpoints require one of ``ADMIN_ROLES``.
"""

import asyncio
import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user_id
from ...core.constants import ADMIN_ROLES
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the token subject to a user row.

    Raises:
        HTTPException: If user not found
    """
    repository = RepositoryFactory.create_user_repository(db)
    user = await asyncio.to_thread(repository.get_by_id, user_id)
    if not user:
        logger.warning(f"Authenticated subject {user_id} has no user record")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current active user.

    Raises:
        HTTPException: If user is not active
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


async def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Require an admin or enterprise role."""
    if (current_user.role or "").lower() not in ADMIN_ROLES:
        logger.info(f"User {current_user.id} denied admin booking access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
