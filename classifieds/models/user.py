"""User model and the reference-counted handle advertisements hold."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from classifieds.exceptions import InvalidEntityStateError
from classifieds.models.base import Location

if TYPE_CHECKING:
    from classifieds.store.registry import UserRegistry


@dataclass
class User:
    """Marketplace member.

    A user keeps no references to the advertisements they posted; that
    relationship is a query over the store.
    """

    user_id: str
    name: str
    email: str
    phone: str
    location: Location
    created_at: datetime
    transaction_count: int = 0
    last_transaction_at: datetime | None = None

    def record_transaction(self, when: datetime) -> None:
        """Count a completed deal and remember when it happened."""
        self.transaction_count += 1
        self.last_transaction_at = when


class UserHandle:
    """Non-owning, counted reference to a user held in a ``UserRegistry``.

    Handles are created by ``UserRegistry.acquire``. Each live handle
    adds one to the user's refcount, and the registry refuses to remove
    a user whose refcount is above zero, so a live handle always
    resolves. ``release`` gives the reference back; it is idempotent.
    """

    __slots__ = ("_registry", "_user_id", "_released")

    def __init__(self, registry: UserRegistry, user_id: str) -> None:
        self._registry = registry
        self._user_id = user_id
        self._released = False

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def registry(self) -> UserRegistry:
        return self._registry

    @property
    def released(self) -> bool:
        return self._released

    @property
    def user(self) -> User:
        """Resolve the handle to the user it points at."""
        if self._released:
            raise InvalidEntityStateError(f"Handle to user {self._user_id} was released")
        return self._registry.get(self._user_id)

    @property
    def name(self) -> str:
        return self.user.name

    def release(self) -> None:
        """Drop this reference. Calling it again has no effect."""
        if self._released:
            return
        self._released = True
        self._registry._decref(self._user_id)

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"UserHandle({self._user_id!r}, {state})"
