"""Sale offer: the owner sells and buyers bid."""

from dataclasses import dataclass, field
from typing import Any

from classifieds.exceptions import InvalidEntityStateError, InvalidValueError
from classifieds.logging import get_logger
from classifieds.models.advertisement import Advertisement
from classifieds.models.enums import AdType, NegotiationChoice, NegotiationOutcome
from classifieds.models.proposal import Proposal
from classifieds.models.negotiation import Chooser, NegotiationResult, Reporter, review

logger = get_logger(__name__)


@dataclass(eq=False, repr=False)
class Sale(Advertisement):
    """Advertisement offering an item, sold to the best bid.

    When the price is not negotiable, bids under the asking price are
    turned away. Accepting a bid sells the item: the remaining bids are
    withdrawn and no new ones are taken.
    """

    ad_type = AdType.SALE

    sold: bool = field(default=False, init=False)

    def add_proposal(self, proposal: Proposal) -> None:
        if self.sold:
            raise InvalidEntityStateError(f"Ad {self.id} is already sold")
        if proposal.owner.user_id == self.owner.user_id:
            raise InvalidEntityStateError(
                f"User {proposal.owner.user_id} cannot bid on their own ad {self.id}"
            )
        if not self.negotiable and proposal.price < self.price:
            raise InvalidValueError(
                f"Ad {self.id} is not negotiable: bid {proposal.price} is below {self.price}"
            )
        self._proposals.push(proposal)
        logger.debug(
            "Ad %d received bid %s from %s",
            self.id,
            proposal.price,
            proposal.owner_id,
            extra=self._log_context(proposal),
        )

    def negotiate(self, chooser: Chooser, report: Reporter = print) -> NegotiationResult:
        reviewed = review(self._proposals, chooser, report)
        if reviewed is None:
            return NegotiationResult(NegotiationOutcome.EMPTY)

        proposal, choice = reviewed
        if choice is NegotiationChoice.BACK:
            return NegotiationResult(NegotiationOutcome.BACK, proposal)

        self._proposals.pop()
        if choice is NegotiationChoice.REFUSE:
            proposal.owner.release()
            logger.info(
                "Ad %d refused bid %s from %s",
                self.id,
                proposal.price,
                proposal.owner_id,
                extra=self._log_context(proposal, NegotiationOutcome.REFUSED),
            )
            return NegotiationResult(NegotiationOutcome.REFUSED, proposal)

        transaction = self._build_transaction(proposal)
        proposal.owner.release()
        self.sold = True
        self.withdraw_proposals()
        logger.info(
            "Ad %d sold to %s for %s",
            self.id,
            transaction.proposer_id,
            proposal.price,
            extra=self._log_context(proposal, NegotiationOutcome.ACCEPTED),
        )
        return NegotiationResult(NegotiationOutcome.ACCEPTED, proposal, transaction)

    def to_dict(self) -> dict[str, Any]:
        record = super().to_dict()
        record["sold"] = self.sold
        return record
