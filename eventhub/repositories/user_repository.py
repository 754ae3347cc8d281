# eventhub/repositories/user_repository.py
"""User Repository for identity lookups (requester display and auth)."""

from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)
