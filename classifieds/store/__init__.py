"""In-memory stores for marketplace entities and their relationships."""

from classifieds.store.marketplace import MarketplaceStore
from classifieds.store.registry import UserRegistry

__all__ = ["MarketplaceStore", "UserRegistry"]
