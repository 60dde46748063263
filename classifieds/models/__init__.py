"""Marketplace domain models."""

from classifieds.models.advertisement import (
    Advertisement,
    configure_id_sequence,
    next_advertisement_id,
)
from classifieds.models.base import Location
from classifieds.models.enums import AdType, Category, NegotiationChoice, NegotiationOutcome
from classifieds.models.negotiation import (
    NegotiationResult,
    ProposalQueue,
    make_prompt_chooser,
    prompt_choice,
)
from classifieds.models.proposal import Proposal
from classifieds.models.purchase import Purchase
from classifieds.models.sale import Sale
from classifieds.models.transaction import Transaction
from classifieds.models.user import User, UserHandle

__all__ = [
    "AdType",
    "Advertisement",
    "Category",
    "Location",
    "NegotiationChoice",
    "NegotiationOutcome",
    "NegotiationResult",
    "Proposal",
    "ProposalQueue",
    "Purchase",
    "Sale",
    "Transaction",
    "User",
    "UserHandle",
    "configure_id_sequence",
    "make_prompt_chooser",
    "next_advertisement_id",
    "prompt_choice",
]
