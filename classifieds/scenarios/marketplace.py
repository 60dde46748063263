"""Demo marketplace scenario: members, listings and open negotiations."""

import random

from classifieds.generators import AdvertisementGenerator, ProposalGenerator, UserGenerator
from classifieds.logging import get_logger
from classifieds.store.marketplace import MarketplaceStore

logger = get_logger(__name__)


class MarketplaceScenario:
    """Populate a store with users, their ads and competing proposals.

    Every ad receives up to ``proposals_per_ad`` proposals from other
    users; nobody bids on their own ad.
    """

    def __init__(
        self,
        num_users: int = 10,
        ads_per_user: int = 2,
        proposals_per_ad: int = 3,
        sale_ratio: float = 0.5,
        highlight_days: int = 7,
        seed: int | None = None,
        locale: str = "en_US",
    ) -> None:
        """Initialize marketplace scenario.

        Parameters
        ----------
        num_users : int
            Number of users to generate.
        ads_per_user : int
            Advertisements posted by each user.
        proposals_per_ad : int
            Proposals submitted on each advertisement.
        sale_ratio : float
            Share of advertisements that are sale offers (0.0 to 1.0).
        highlight_days : int
            Base length of the highlight window for featured ads.
        seed : int | None
            Random seed for reproducibility.
        locale : str
            Faker locale.
        """
        self.num_users = num_users
        self.ads_per_user = ads_per_user
        self.proposals_per_ad = proposals_per_ad
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.store = MarketplaceStore()
        self._user_gen = UserGenerator(seed=seed, locale=locale)
        self._ad_gen = AdvertisementGenerator(
            seed=seed, locale=locale, sale_ratio=sale_ratio, highlight_days=highlight_days
        )
        self._proposal_gen = ProposalGenerator(seed=seed, locale=locale)

    def generate(self) -> MarketplaceStore:
        """Generate all data for the scenario.

        Returns
        -------
        MarketplaceStore
            Store containing all generated data.
        """
        logger.info(
            "Starting marketplace scenario: %d users, %d ads each, %d proposals per ad",
            self.num_users,
            self.ads_per_user,
            self.proposals_per_ad,
        )

        for user in self._user_gen.generate_batch(self.num_users):
            self.store.add_user(user)

        user_ids = [user.user_id for user in self.store.users]
        for owner_id in user_ids:
            for _ in range(self.ads_per_user):
                ad = self._ad_gen.generate(self.store.users, owner_id)
                self.store.add_advertisement(ad)

        logger.info("Generated %d advertisements", len(self.store.advertisements))

        for ad in self.store.advertisements.values():
            candidates = [uid for uid in user_ids if uid != ad.owner_id]
            if not candidates:
                continue
            for proposer_id in random.choices(candidates, k=self.proposals_per_ad):
                proposal = self._proposal_gen.generate(self.store.users, ad, proposer_id)
                ad.add_proposal(proposal)

        logger.info("Scenario complete: %s", self.store.summary())
        return self.store
