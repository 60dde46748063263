"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from classifieds.models import Location, User
from classifieds.store import MarketplaceStore, UserRegistry


def make_user(user_id: str, name: str | None = None) -> User:
    """Build a user with throwaway contact details."""
    return User(
        user_id=user_id,
        name=name or user_id.title(),
        email=f"{user_id}@example.com",
        phone="+351 912 345 678",
        location=Location(city="Porto", region="Porto"),
        created_at=datetime(2024, 1, 1, 12, 0),
    )


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def registry() -> UserRegistry:
    """Registry holding alice (ad owner) and bidders ana, bruno and carla."""
    reg = UserRegistry()
    for user_id in ("alice", "ana", "bruno", "carla"):
        reg.add(make_user(user_id))
    return reg


@pytest.fixture
def store() -> MarketplaceStore:
    """Store with the same four users."""
    s = MarketplaceStore()
    for user_id in ("alice", "ana", "bruno", "carla"):
        s.add_user(make_user(user_id))
    return s


@pytest.fixture
def new_user():
    """Factory for users not yet in any registry."""
    return make_user
