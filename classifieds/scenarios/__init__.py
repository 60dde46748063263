"""Scenarios for building demo marketplaces."""

from classifieds.scenarios.marketplace import MarketplaceScenario

__all__ = ["MarketplaceScenario"]
