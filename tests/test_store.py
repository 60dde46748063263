"""Tests for the marketplace store."""

from datetime import date
from decimal import Decimal

import pytest

from classifieds.exceptions import (
    EntityInUseError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidValueError,
    ReferentialIntegrityError,
)
from classifieds.models import Category, NegotiationChoice, NegotiationOutcome, Purchase
from classifieds.store import MarketplaceStore, UserRegistry


def _accept(proposal):
    return NegotiationChoice.ACCEPT


def _quiet(line: str) -> None:
    pass


class TestMarketplaceStore:
    """Tests for users and advertisements in the store."""

    def test_post_purchase(self, store: MarketplaceStore) -> None:
        ad = store.post_purchase("alice", "Looking for: kayak", Category.SPORTS, "Two seats", 300)

        assert store.get_advertisement(ad.id) is ad
        assert store.get_user_advertisements("alice") == [ad]
        assert store.users.refcount("alice") == 1

    def test_post_sale(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("bruno", "Kayak", Category.SPORTS, "Two seats", "280.50", negotiable=True)

        assert ad.price == Decimal("280.50")
        assert ad.negotiable is True
        assert ad.owner_id == "bruno"

    def test_post_for_unknown_user(self, store: MarketplaceStore) -> None:
        with pytest.raises(ReferentialIntegrityError):
            store.post_sale("nobody", "Kayak", Category.SPORTS, "", 1)

    def test_failed_post_releases_owner(self, store: MarketplaceStore) -> None:
        with pytest.raises(InvalidValueError):
            store.post_sale("alice", "Kayak", Category.SPORTS, "", -10)

        assert store.users.refcount("alice") == 0
        assert store.advertisements == {}

    def test_get_missing_advertisement(self, store: MarketplaceStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.get_advertisement(-1)

    def test_view_counts(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 100)

        store.view_advertisement(ad.id)
        store.view_advertisement(ad.id)

        assert ad.views == 2

    def test_foreign_registry_rejected(self, store: MarketplaceStore, registry: UserRegistry) -> None:
        ad = Purchase(
            owner=registry.acquire("alice"),
            title="Looking for: lamp",
            category=Category.HOME,
            description="",
            price=Decimal("5"),
        )

        with pytest.raises(ReferentialIntegrityError):
            store.add_advertisement(ad)

    def test_remove_advertisement_releases_handles(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 100, negotiable=True)
        store.submit_proposal(ad.id, "ana", 90)

        withdrawn = store.remove_advertisement(ad.id)

        assert [p.owner_id for p in withdrawn] == ["ana"]
        assert store.users.refcount("alice") == 0
        assert store.users.refcount("ana") == 0
        assert store.get_user_advertisements("alice") == []

        with pytest.raises(EntityNotFoundError):
            store.remove_advertisement(ad.id)

    def test_remove_user_blocked_while_referenced(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 100)

        with pytest.raises(EntityInUseError):
            store.remove_user("alice")
        assert store.get_user("alice").user_id == "alice"

        store.remove_advertisement(ad.id)
        store.remove_user("alice")

        assert "alice" not in store.users
        with pytest.raises(EntityNotFoundError):
            store.get_user_advertisements("alice")

    def test_remove_user_logs_refusal(
        self, store: MarketplaceStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level("WARNING", logger="classifieds")
        store.post_sale("alice", "Kayak", Category.SPORTS, "", 100)

        with pytest.raises(EntityInUseError):
            store.remove_user("alice")

        assert "Refusing to remove user alice" in caplog.text
        assert caplog.records[-1].user_id == "alice"

    def test_transferred_ad_listed_under_new_owner(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 100)

        ad.set_owner(store.users.acquire("bruno"))

        assert store.get_user_advertisements("bruno") == [ad]
        assert store.get_user_advertisements("alice") == []

    def test_remove_transferred_ad_releases_handles(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 100, negotiable=True)
        ad.set_owner(store.users.acquire("bruno"))
        store.submit_proposal(ad.id, "carla", 90)

        withdrawn = store.remove_advertisement(ad.id)

        assert [p.owner_id for p in withdrawn] == ["carla"]
        assert ad.id not in store.advertisements
        assert store.get_user_advertisements("bruno") == []
        for user_id in ("alice", "bruno", "carla"):
            assert store.users.refcount(user_id) == 0
        store.remove_user("bruno")
        store.remove_user("carla")


class TestProposals:
    """Tests for submitting and negotiating proposals through the store."""

    def test_submit_proposal(self, store: MarketplaceStore) -> None:
        ad = store.post_purchase("alice", "Looking for: kayak", Category.SPORTS, "", 300, negotiable=True)

        proposal = store.submit_proposal(ad.id, "bruno", "250")

        assert proposal.price == Decimal("250")
        assert ad.best_proposal() is proposal
        assert store.users.refcount("bruno") == 1

    def test_rejected_proposal_releases_handle(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)

        with pytest.raises(InvalidValueError):
            store.submit_proposal(ad.id, "bruno", 10)
        with pytest.raises(InvalidEntityStateError):
            store.submit_proposal(ad.id, "alice", 400)

        assert store.users.refcount("bruno") == 0
        assert store.users.refcount("alice") == 1

    def test_non_numeric_price_releases_handle(self, store: MarketplaceStore) -> None:
        ad = store.post_purchase("alice", "Looking for: kayak", Category.SPORTS, "", 300, negotiable=True)

        with pytest.raises(InvalidValueError):
            store.submit_proposal(ad.id, "ana", "abc")

        assert store.users.refcount("ana") == 0
        assert ad.proposal_count == 0
        store.remove_user("ana")

    def test_non_numeric_ad_price_releases_owner(self, store: MarketplaceStore) -> None:
        with pytest.raises(InvalidValueError):
            store.post_purchase("alice", "Looking for: kayak", Category.SPORTS, "", "lots")

        assert store.users.refcount("alice") == 0

    def test_negotiate_records_both_parties(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)
        store.submit_proposal(ad.id, "bruno", 300)

        result = store.negotiate(ad.id, _accept, _quiet)

        assert result.outcome is NegotiationOutcome.ACCEPTED
        assert store.transactions == [result.transaction]
        assert store.get_user_transactions("alice") == [result.transaction]
        assert store.get_user_transactions("bruno") == [result.transaction]
        assert store.get_user_transactions("carla") == []
        assert store.get_user("alice").transaction_count == 1
        assert store.get_user("bruno").transaction_count == 1
        assert store.get_user("bruno").last_transaction_at == result.transaction.created_at

    def test_negotiate_without_deal_records_nothing(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)

        result = store.negotiate(ad.id, _accept, _quiet)

        assert result.outcome is NegotiationOutcome.EMPTY
        assert store.transactions == []

    def test_history_survives_user_removal(self, store: MarketplaceStore) -> None:
        ad = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)
        store.submit_proposal(ad.id, "bruno", 300)
        store.negotiate(ad.id, _accept, _quiet)

        store.remove_user("bruno")

        transactions = store.get_user_transactions("bruno")
        assert len(transactions) == 1
        assert transactions[0].proposer_name == "Bruno"


class TestQueries:
    """Tests for search, featured listings and summaries."""

    def test_search(self, store: MarketplaceStore) -> None:
        kayak = store.post_sale("alice", "Kayak", Category.SPORTS, "Comes with paddles", 300)
        store.post_sale("bruno", "Sofa", Category.HOME, "Three seats", 120)

        assert store.search("PADDLES") == [kayak]
        assert store.search("PADDLES", case_sensitive=True) == []
        assert len(store.search("s")) == 2

    def test_featured(self, store: MarketplaceStore) -> None:
        kayak = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)
        store.post_sale("bruno", "Sofa", Category.HOME, "", 120)
        kayak.extend_duration_highlight(7, today=date(2024, 5, 1))

        assert store.featured(on=date(2024, 5, 3)) == [kayak]
        assert store.featured(on=date(2024, 6, 1)) == []

    def test_find_duplicates(self, store: MarketplaceStore) -> None:
        first = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)
        second = store.post_purchase("bruno", "Kayak", Category.SPORTS, "", 250)
        store.post_sale("carla", "Canoe", Category.SPORTS, "", 200)

        duplicates = store.find_duplicates(first)

        assert len(duplicates) == 1
        assert duplicates[0] is second

    def test_summary(self, store: MarketplaceStore) -> None:
        sale = store.post_sale("alice", "Kayak", Category.SPORTS, "", 300)
        store.post_purchase("bruno", "Looking for: tent", Category.SPORTS, "", 80, negotiable=True)
        store.submit_proposal(sale.id, "carla", 310)

        assert store.summary() == {
            "users": 4,
            "advertisements": 2,
            "purchases": 1,
            "sales": 1,
            "pending_proposals": 1,
            "transactions": 0,
        }
