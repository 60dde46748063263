"""Enumeration types for marketplace entities."""

from enum import Enum, IntEnum


class Category(str, Enum):
    VEHICLES = "VEHICLES"
    REAL_ESTATE = "REAL_ESTATE"
    ELECTRONICS = "ELECTRONICS"
    HOME = "HOME"
    FASHION = "FASHION"
    SPORTS = "SPORTS"
    BOOKS = "BOOKS"
    SERVICES = "SERVICES"
    JOBS = "JOBS"
    OTHER = "OTHER"


class AdType(str, Enum):
    PURCHASE = "P"
    SALE = "S"


class NegotiationChoice(IntEnum):
    """Menu entries shown while reviewing a proposal."""

    ACCEPT = 1
    REFUSE = 2
    BACK = 3


class NegotiationOutcome(str, Enum):
    EMPTY = "EMPTY"
    ACCEPTED = "ACCEPTED"
    REFUSED = "REFUSED"
    BACK = "BACK"
