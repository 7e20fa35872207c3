"""
Guest identity used when a request carries no bearer token.
"""
import logging

from convochat.core.config import settings
from convochat.models.user import User
from convochat.services.user_service import UserExistsError, UserService

logger = logging.getLogger(__name__)


class IdentityResolver:
    def __init__(
        self,
        user_service: UserService,
        username: str = None,
        email: str = None,
        password: str = None
    ):
        self.user_service = user_service
        self.username = username or settings.GUEST_USERNAME
        self.email = email or settings.GUEST_EMAIL
        self.password = password or settings.GUEST_PASSWORD

    async def resolve_or_create_guest(self) -> User:
        """
        Get or create the guest account.

        Safe under concurrent first use: when another request registers the
        guest between our lookup and our insert, the existing row is re-read
        and returned instead of surfacing the uniqueness failure.
        """
        repository = self.user_service.repository
        guest = await repository.get_by_username(self.username)
        if guest is not None:
            return guest

        try:
            guest = await self.user_service.register(self.username, self.email, self.password)
            logger.info(f"Created guest account '{self.username}' (id={guest.id})")
            return guest
        except UserExistsError:
            logger.warning(f"Guest account '{self.username}' was created concurrently; re-reading it")
            guest = await repository.get_by_username(self.username)
            if guest is None:
                # Only the email collided with a non-guest account
                raise
            return guest
