"""Marketplace data store with referential integrity."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from classifieds.exceptions import EntityNotFoundError, ReferentialIntegrityError
from classifieds.logging import get_logger
from classifieds.models import (
    AdType,
    Advertisement,
    Category,
    NegotiationOutcome,
    NegotiationResult,
    Proposal,
    Purchase,
    Sale,
    Transaction,
    User,
)
from classifieds.models.negotiation import Chooser, Reporter
from classifieds.store.registry import UserRegistry

logger = get_logger(__name__)


@dataclass
class MarketplaceStore:
    """In-memory store for users, advertisements and transactions.

    Users never point back at their ads or deals. Ads by a user are
    found by scanning each ad's current owner, so an ownership change
    through ``Advertisement.set_owner`` needs no bookkeeping here. Deals
    are indexed per party, since a deal outlives both ad and users.
    """

    users: UserRegistry = field(default_factory=UserRegistry)
    advertisements: dict[int, Advertisement] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)

    # Relationship index
    _user_transactions: dict[str, list[int]] = field(default_factory=dict)

    # --- Users ---

    def add_user(self, user: User) -> None:
        """Add a user to the store."""
        self.users.add(user)
        self._user_transactions[user.user_id] = []

    def get_user(self, user_id: str) -> User:
        return self.users.get(user_id)

    def remove_user(self, user_id: str) -> User:
        """Remove a user that no advertisement or proposal references.

        Past transactions keep the user's id and name.
        """
        user = self.users.remove(user_id)
        logger.info("Removed user %s", user_id, extra={"user_id": user_id})
        return user

    # --- Advertisements ---

    def add_advertisement(self, ad: Advertisement) -> None:
        """Register an advertisement built elsewhere."""
        if ad.owner.registry is not self.users:
            raise ReferentialIntegrityError(
                f"Owner {ad.owner.user_id} of ad {ad.id} belongs to another registry"
            )
        self.advertisements[ad.id] = ad
        logger.info(
            "Posted %s ad %d: %s",
            ad.get_type().name.lower(),
            ad.id,
            ad.title,
            extra={"ad_id": ad.id, "user_id": ad.owner_id, "price": ad.price},
        )

    def post_purchase(
        self,
        owner_id: str,
        title: str,
        category: Category,
        description: str,
        price: Decimal | int | str,
        negotiable: bool = False,
    ) -> Purchase:
        """Create and register a purchase request."""
        return self._post(Purchase, owner_id, title, category, description, price, negotiable)

    def post_sale(
        self,
        owner_id: str,
        title: str,
        category: Category,
        description: str,
        price: Decimal | int | str,
        negotiable: bool = False,
    ) -> Sale:
        """Create and register a sale offer."""
        return self._post(Sale, owner_id, title, category, description, price, negotiable)

    def _post(self, ad_class, owner_id, title, category, description, price, negotiable):
        handle = self.users.acquire(owner_id)
        try:
            ad = ad_class(
                owner=handle,
                title=title,
                category=category,
                description=description,
                price=price,
                negotiable=negotiable,
            )
        except Exception:
            handle.release()
            raise
        self.add_advertisement(ad)
        return ad

    def get_advertisement(self, ad_id: int) -> Advertisement:
        try:
            return self.advertisements[ad_id]
        except KeyError:
            raise EntityNotFoundError(f"Advertisement {ad_id} not found") from None

    def view_advertisement(self, ad_id: int) -> Advertisement:
        """Fetch an ad for display, counting the view."""
        ad = self.get_advertisement(ad_id)
        ad.increment_views()
        return ad

    def remove_advertisement(self, ad_id: int) -> list[Proposal]:
        """Take an ad off the marketplace.

        Pending proposals are withdrawn and returned; every user handle
        the ad held is released.
        """
        ad = self.get_advertisement(ad_id)
        owner_id = ad.owner_id
        withdrawn = ad.close()
        del self.advertisements[ad_id]
        logger.info(
            "Removed ad %d (%d proposals withdrawn)",
            ad_id,
            len(withdrawn),
            extra={"ad_id": ad_id, "user_id": owner_id},
        )
        return withdrawn

    # --- Negotiation ---

    def submit_proposal(self, ad_id: int, proposer_id: str, price: Decimal | int | str) -> Proposal:
        """Offer ``price`` on an advertisement on behalf of a user."""
        ad = self.get_advertisement(ad_id)
        handle = self.users.acquire(proposer_id)
        try:
            proposal = Proposal(price=price, owner=handle)
            ad.add_proposal(proposal)
        except Exception:
            handle.release()
            raise
        logger.info(
            "User %s offered %s on ad %d",
            proposer_id,
            proposal.price,
            ad_id,
            extra={"ad_id": ad_id, "user_id": proposer_id, "price": proposal.price},
        )
        return proposal

    def negotiate(
        self,
        ad_id: int,
        chooser: Chooser,
        report: Reporter = print,
    ) -> NegotiationResult:
        """Run one review step on an ad and record any resulting deal."""
        result = self.get_advertisement(ad_id).negotiate(chooser, report)
        if result.outcome is NegotiationOutcome.ACCEPTED and result.transaction is not None:
            self.record_transaction(result.transaction)
        return result

    def record_transaction(self, transaction: Transaction) -> None:
        """Append a deal to the history of both parties.

        Both users get their transaction counter bumped. A party that has
        since left the marketplace is skipped.
        """
        idx = len(self.transactions)
        self.transactions.append(transaction)
        for user_id in transaction.party_ids:
            self._user_transactions.setdefault(user_id, []).append(idx)
            if user_id in self.users:
                self.users.get(user_id).record_transaction(transaction.created_at)

    # --- Queries ---

    def get_user_advertisements(self, user_id: str) -> list[Advertisement]:
        """Advertisements the user currently owns."""
        if user_id not in self.users:
            raise EntityNotFoundError(f"User {user_id} not found")
        return [ad for ad in self.advertisements.values() if ad.owner_id == user_id]

    def get_user_transactions(self, user_id: str) -> list[Transaction]:
        """Get every deal a user took part in, on either side."""
        indices = self._user_transactions.get(user_id, [])
        return [self.transactions[i] for i in indices]

    def search(self, text: str, case_sensitive: bool = False) -> list[Advertisement]:
        """Advertisements whose title or description contains ``text``."""
        return [
            ad
            for ad in self.advertisements.values()
            if ad.search_for_text(text, case_sensitive=case_sensitive)
        ]

    def featured(self, on: date | None = None) -> list[Advertisement]:
        """Advertisements whose highlight window covers ``on``."""
        return [ad for ad in self.advertisements.values() if ad.is_highlighted(on)]

    def find_duplicates(self, ad: Advertisement) -> list[Advertisement]:
        """Other advertisements that share this one's title."""
        return [
            other
            for other in self.advertisements.values()
            if other.id != ad.id and other == ad
        ]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        ads = list(self.advertisements.values())
        return {
            "users": len(self.users),
            "advertisements": len(ads),
            "purchases": sum(1 for ad in ads if ad.get_type() is AdType.PURCHASE),
            "sales": sum(1 for ad in ads if ad.get_type() is AdType.SALE),
            "pending_proposals": sum(ad.proposal_count for ad in ads),
            "transactions": len(self.transactions),
        }
