"""Purchase request: the owner wants to buy and sellers bid."""

from dataclasses import dataclass

from classifieds.exceptions import InvalidEntityStateError
from classifieds.logging import get_logger
from classifieds.models.advertisement import Advertisement
from classifieds.models.enums import AdType, NegotiationChoice, NegotiationOutcome
from classifieds.models.proposal import Proposal
from classifieds.models.negotiation import Chooser, NegotiationResult, Reporter, review

logger = get_logger(__name__)


@dataclass(eq=False, repr=False)
class Purchase(Advertisement):
    """Advertisement asking for an item, negotiated best price first.

    Accepting the best proposal produces a ``Transaction`` and leaves the
    other proposals pending for a later review. Refusing discards only
    the best proposal. Going back changes nothing.
    """

    ad_type = AdType.PURCHASE

    def add_proposal(self, proposal: Proposal) -> None:
        if proposal.owner.user_id == self.owner.user_id:
            raise InvalidEntityStateError(
                f"User {proposal.owner.user_id} cannot bid on their own ad {self.id}"
            )
        self._proposals.push(proposal)
        logger.debug(
            "Ad %d received proposal %s from %s",
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
                "Ad %d refused %s from %s",
                self.id,
                proposal.price,
                proposal.owner_id,
                extra=self._log_context(proposal, NegotiationOutcome.REFUSED),
            )
            return NegotiationResult(NegotiationOutcome.REFUSED, proposal)

        transaction = self._build_transaction(proposal)
        proposal.owner.release()
        logger.info(
            "Ad %d accepted %s from %s (%d still pending)",
            self.id,
            proposal.price,
            transaction.proposer_id,
            len(self._proposals),
            extra=self._log_context(proposal, NegotiationOutcome.ACCEPTED),
        )
        return NegotiationResult(NegotiationOutcome.ACCEPTED, proposal, transaction)
