"""User registry that owns users and counts outstanding handles."""

from typing import Iterator

from classifieds.exceptions import (
    EntityInUseError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from classifieds.logging import get_logger
from classifieds.models.user import User, UserHandle

logger = get_logger(__name__)


class UserRegistry:
    """Owns every ``User`` and tracks how many handles point at each."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._refcounts: dict[str, int] = {}

    def add(self, user: User) -> None:
        """Register a user."""
        if user.user_id in self._users:
            raise InvalidEntityStateError(f"User {user.user_id} already registered")
        self._users[user.user_id] = user
        self._refcounts[user.user_id] = 0

    def get(self, user_id: str) -> User:
        """Return the user with the given id."""
        try:
            return self._users[user_id]
        except KeyError:
            raise EntityNotFoundError(f"User {user_id} not found") from None

    def acquire(self, user_id: str) -> UserHandle:
        """Hand out a new counted reference to a registered user."""
        if user_id not in self._users:
            raise ReferentialIntegrityError(f"User {user_id} not found")
        self._refcounts[user_id] += 1
        return UserHandle(self, user_id)

    def refcount(self, user_id: str) -> int:
        """Number of live handles pointing at the user."""
        if user_id not in self._users:
            raise EntityNotFoundError(f"User {user_id} not found")
        return self._refcounts[user_id]

    def remove(self, user_id: str) -> User:
        """Remove a user nobody references any more."""
        count = self.refcount(user_id)
        if count > 0:
            logger.warning(
                "Refusing to remove user %s: %d live references",
                user_id,
                count,
                extra={"user_id": user_id},
            )
            raise EntityInUseError(f"User {user_id} is still referenced ({count} handles)")
        del self._refcounts[user_id]
        return self._users.pop(user_id)

    def _decref(self, user_id: str) -> None:
        # The refcount guard in remove() keeps the entry alive while handles exist
        self._refcounts[user_id] -= 1

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[User]:
        return iter(list(self._users.values()))
