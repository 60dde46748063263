"""Synthetic data generators for demo marketplaces."""

from classifieds.generators.marketplace import (
    AdvertisementGenerator,
    ProposalGenerator,
    UserGenerator,
)

__all__ = [
    "AdvertisementGenerator",
    "ProposalGenerator",
    "UserGenerator",
]
