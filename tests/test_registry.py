"""Tests for UserRegistry and UserHandle lifetime rules."""

import pytest

from classifieds.exceptions import (
    EntityInUseError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from classifieds.store import UserRegistry


class TestUserRegistry:
    """Tests for registering and looking up users."""

    def test_add_and_get(self, new_user) -> None:
        registry = UserRegistry()
        user = new_user("rita")

        registry.add(user)

        assert registry.get("rita") is user
        assert "rita" in registry
        assert len(registry) == 1
        assert list(registry) == [user]

    def test_duplicate_id_rejected(self, registry: UserRegistry, new_user) -> None:
        with pytest.raises(InvalidEntityStateError):
            registry.add(new_user("alice"))

    def test_get_missing(self, registry: UserRegistry) -> None:
        with pytest.raises(EntityNotFoundError):
            registry.get("nobody")

    def test_acquire_missing(self, registry: UserRegistry) -> None:
        with pytest.raises(ReferentialIntegrityError):
            registry.acquire("nobody")

    def test_remove_unreferenced(self, registry: UserRegistry) -> None:
        removed = registry.remove("carla")

        assert removed.user_id == "carla"
        assert "carla" not in registry

    def test_refcount_of_missing_user(self, registry: UserRegistry) -> None:
        with pytest.raises(EntityNotFoundError):
            registry.refcount("nobody")


class TestUserHandle:
    """Tests for counted user references."""

    def test_acquire_counts(self, registry: UserRegistry) -> None:
        first = registry.acquire("alice")
        second = registry.acquire("alice")

        assert registry.refcount("alice") == 2
        assert first is not second

    def test_resolves_to_user(self, registry: UserRegistry) -> None:
        handle = registry.acquire("alice")

        assert handle.user is registry.get("alice")
        assert handle.name == "Alice"
        assert handle.user_id == "alice"
        assert handle.registry is registry

    def test_referenced_user_cannot_be_removed(self, registry: UserRegistry) -> None:
        handle = registry.acquire("alice")

        with pytest.raises(EntityInUseError):
            registry.remove("alice")

        assert handle.user.user_id == "alice"

    def test_release_allows_removal(self, registry: UserRegistry) -> None:
        handle = registry.acquire("alice")

        handle.release()
        registry.remove("alice")

        assert "alice" not in registry

    def test_release_is_idempotent(self, registry: UserRegistry) -> None:
        kept = registry.acquire("alice")
        dropped = registry.acquire("alice")

        dropped.release()
        dropped.release()

        assert registry.refcount("alice") == 1
        assert not kept.released
        assert dropped.released

    def test_released_handle_does_not_resolve(self, registry: UserRegistry) -> None:
        handle = registry.acquire("alice")
        handle.release()

        with pytest.raises(InvalidEntityStateError):
            handle.user

        assert handle.user_id == "alice"

    def test_repr_shows_state(self, registry: UserRegistry) -> None:
        handle = registry.acquire("alice")
        assert repr(handle) == "UserHandle('alice', live)"

        handle.release()
        assert repr(handle) == "UserHandle('alice', released)"
