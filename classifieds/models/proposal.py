"""Proposal model: a price offered against an advertisement."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation

from classifieds.exceptions import InvalidValueError
from classifieds.models.user import UserHandle


@dataclass(frozen=True)
class Proposal:
    """Price offered by a user. Immutable once created."""

    price: Decimal
    owner: UserHandle
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        # Any numeric value is allowed, negatives included
        try:
            price = self.price if isinstance(self.price, Decimal) else Decimal(str(self.price))
        except InvalidOperation:
            price = None
        if price is None or price.is_nan():
            raise InvalidValueError(f"Proposal price is not a number: {self.price!r}")
        object.__setattr__(self, "price", price)

    @property
    def owner_id(self) -> str:
        return self.owner.user_id
