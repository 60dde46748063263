"""Advertisement contract shared by purchase requests and sale offers."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from classifieds.exceptions import ConfigurationError, InvalidValueError
from classifieds.logging import get_logger
from classifieds.models.base import Location
from classifieds.models.enums import AdType, Category, NegotiationOutcome
from classifieds.models.negotiation import (
    Chooser,
    NegotiationResult,
    ProposalQueue,
    Reporter,
    make_prompt_chooser,
)
from classifieds.models.proposal import Proposal
from classifieds.models.transaction import Transaction
from classifieds.models.user import UserHandle

logger = get_logger(__name__)

DEFAULT_ID_START = 1


class IdSequence:
    """Process-wide, monotonically increasing advertisement ids.

    Starts at ``DEFAULT_ID_START``. ``advance_to`` can raise the next id
    (for example from configuration) but never lowers it, so no id is
    handed out twice.
    """

    def __init__(self, start: int = DEFAULT_ID_START) -> None:
        self._lock = threading.Lock()
        self._next = start

    def advance_to(self, start: int) -> None:
        if start < 0:
            raise ConfigurationError(f"Id start must be non-negative, got {start}")
        with self._lock:
            self._next = max(self._next, start)

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    @property
    def peek(self) -> int:
        return self._next


_ID_SEQUENCE = IdSequence()


def next_advertisement_id() -> int:
    """Atomically take the next advertisement id."""
    return _ID_SEQUENCE.next_id()


def configure_id_sequence(start: int) -> None:
    """Make sure the next id is at least ``start``.

    Used to apply ``MarketplaceConfig.id_start``. Ids already handed out
    are never reissued.
    """
    _ID_SEQUENCE.advance_to(start)


def _to_price(value: Any) -> Decimal:
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidValueError(f"Price is not a number: {value!r}") from None
    if price.is_nan() or price < 0:
        raise InvalidValueError(f"Price must be non-negative, got {price}")
    return price


@dataclass(eq=False)
class Advertisement(ABC):
    """Posted listing with an owner, a price and pending proposals.

    Two advertisements compare equal when their titles match, whatever
    their ids, owners or prices. This is used to spot duplicate titles
    and is not an identity check; use ``id`` for that.

    The owner is a ``UserHandle``: the advertisement never owns the user
    and gives the handle back in ``close``.
    """

    ad_type: ClassVar[AdType]

    owner: UserHandle
    title: str
    category: Category
    description: str
    price: Decimal
    negotiable: bool = False
    featured: bool = False
    highlight_end_date: date | None = None
    creation_date: date = field(default_factory=date.today)
    views: int = field(default=0, init=False)
    id: int = field(default_factory=next_advertisement_id, init=False)

    def __post_init__(self) -> None:
        self.price = _to_price(self.price)
        self.category = Category(self.category)
        self._proposals = ProposalQueue()

    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Advertisement):
            return NotImplemented
        return self.title == other.title

    def get_type(self) -> AdType:
        """Return ``AdType.PURCHASE`` ("P") or ``AdType.SALE`` ("S")."""
        return self.ad_type

    @property
    def location(self) -> Location:
        return self.owner.user.location

    @property
    def owner_id(self) -> str:
        return self.owner.user_id

    def set_owner(self, owner: UserHandle) -> None:
        """Point the ad at a new owner, releasing the previous handle."""
        previous = self.owner
        self.owner = owner
        if previous is not owner:
            previous.release()

    def set_price(self, price: Decimal | int | float | str) -> None:
        self.price = _to_price(price)

    def increment_views(self) -> None:
        self.views += 1

    def search_for_text(self, text: str, case_sensitive: bool = False) -> bool:
        """Return True if ``text`` occurs in the title or description.

        Matching ignores case by default (``str.casefold``).
        """
        if case_sensitive:
            return text in self.title or text in self.description
        needle = text.casefold()
        return needle in self.title.casefold() or needle in self.description.casefold()

    def extend_duration_highlight(self, days: int, today: date | None = None) -> date:
        """Push the end of the highlight window forward by ``days``.

        An ad that is not featured becomes featured, with the window
        starting ``today``. An expired window also restarts from today.
        """
        if days < 0:
            raise InvalidValueError(f"Highlight duration must be non-negative, got {days}")
        today = today or date.today()
        if not self.featured or self.highlight_end_date is None:
            self.featured = True
            start = today
        else:
            start = max(self.highlight_end_date, today)
        self.highlight_end_date = start + timedelta(days=days)
        logger.debug(
            "Ad %d highlighted until %s", self.id, self.highlight_end_date, extra={"ad_id": self.id}
        )
        return self.highlight_end_date

    def is_highlighted(self, on: date | None = None) -> bool:
        if not self.featured or self.highlight_end_date is None:
            return False
        return (on or date.today()) <= self.highlight_end_date

    # --- Proposals ---

    @property
    def proposal_count(self) -> int:
        return len(self._proposals)

    def pending_proposals(self) -> list[Proposal]:
        """Snapshot of pending proposals, best first."""
        return list(self._proposals)

    def best_proposal(self) -> Proposal | None:
        return self._proposals.peek()

    def withdraw_proposals(self) -> list[Proposal]:
        """Drop every pending proposal and release the proposers' handles."""
        withdrawn = self._proposals.drain()
        for proposal in withdrawn:
            proposal.owner.release()
        if withdrawn:
            logger.info(
                "Withdrew %d proposals from ad %d", len(withdrawn), self.id, extra={"ad_id": self.id}
            )
        return withdrawn

    def close(self) -> list[Proposal]:
        """Detach the ad from every user it references."""
        withdrawn = self.withdraw_proposals()
        self.owner.release()
        return withdrawn

    @abstractmethod
    def add_proposal(self, proposal: Proposal) -> None:
        """Queue a proposal for the owner to review."""

    @abstractmethod
    def negotiate(self, chooser: Chooser, report: Reporter = print) -> NegotiationResult:
        """Run one review step over the best pending proposal."""

    def view_proposals(
        self,
        chooser: Chooser | None = None,
        report: Reporter = print,
    ) -> Transaction | None:
        """Review the best proposal interactively.

        Returns the ``Transaction`` when the proposal is accepted and
        ``None`` otherwise.
        """
        return self.negotiate(chooser or make_prompt_chooser(output=report), report).transaction

    def _log_context(
        self, proposal: Proposal, outcome: NegotiationOutcome | None = None
    ) -> dict[str, Any]:
        return {
            "ad_id": self.id,
            "user_id": proposal.owner_id,
            "price": proposal.price,
            "outcome": outcome,
        }

    def _build_transaction(self, proposal: Proposal) -> Transaction:
        return Transaction(
            advertisement_id=self.id,
            advertisement_title=self.title,
            ad_type=self.ad_type,
            price=proposal.price,
            owner_id=self.owner.user_id,
            owner_name=self.owner.name,
            proposer_id=proposal.owner.user_id,
            proposer_name=proposal.owner.name,
        )

    def to_dict(self) -> dict[str, Any]:
        """Flat record of the advertisement's fields."""
        return {
            "id": self.id,
            "type": self.ad_type.value,
            "title": self.title,
            "category": self.category.value,
            "description": self.description,
            "creation_date": self.creation_date,
            "owner_id": self.owner.user_id,
            "price": self.price,
            "negotiable": self.negotiable,
            "featured": self.featured,
            "highlight_end_date": self.highlight_end_date,
            "views": self.views,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self.id}, title={self.title!r}, "
            f"price={self.price}, owner={self.owner.user_id!r})"
        )
