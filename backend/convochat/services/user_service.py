from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError

from convochat.core.security import get_password_hash, verify_password
from convochat.models.user import User
from convochat.db.database import utcnow
from convochat.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class UserExistsError(Exception):
    """Username or email is already registered"""


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a new user with a bcrypt-hashed password"""
        if await self.repository.get_by_username(username):
            raise UserExistsError("Username already exists")
        if await self.repository.get_by_email(email):
            raise UserExistsError("Email already exists")

        now = utcnow()
        user = User(
            username=username,
            email=email,
            hashed_password=get_password_hash(password),
            created_at=now,
            updated_at=now,
        )
        try:
            user = await self.repository.add(user)
        except IntegrityError as e:
            await self.repository.rollback()
            raise UserExistsError("Username or email already exists") from e

        logger.info(f"User registered: {username}")
        return user

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, else None"""
        user = await self.repository.get_by_username(username)
        if user and verify_password(password, user.hashed_password):
            logger.info(f"User authenticated: {username}")
            return user

        logger.warning(f"Authentication failed for user: {username}")
        return None

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.repository.get_by_id(user_id)
