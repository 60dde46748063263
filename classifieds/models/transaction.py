"""Transaction model produced when a proposal is accepted."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from classifieds.models.enums import AdType


@dataclass(frozen=True)
class Transaction:
    """Completed deal between an advertisement owner and a proposer."""

    advertisement_id: int
    advertisement_title: str
    ad_type: AdType
    price: Decimal
    owner_id: str
    owner_name: str
    proposer_id: str
    proposer_name: str
    created_at: datetime = field(default_factory=datetime.now)
    transaction_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def buyer_id(self) -> str:
        # On a purchase request the owner is the one buying
        return self.owner_id if self.ad_type == AdType.PURCHASE else self.proposer_id

    @property
    def seller_id(self) -> str:
        return self.proposer_id if self.ad_type == AdType.PURCHASE else self.owner_id

    @property
    def party_ids(self) -> tuple[str, str]:
        return (self.owner_id, self.proposer_id)
