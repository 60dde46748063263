"""Generators for marketplace users, advertisements and proposals."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterator

from classifieds.generators.base import BaseGenerator
from classifieds.models import (
    AdType,
    Advertisement,
    Category,
    Location,
    Proposal,
    Purchase,
    Sale,
    User,
)
from classifieds.store.registry import UserRegistry


class UserGenerator(BaseGenerator):
    """Generate synthetic marketplace members.

    Regions come from ``Faker.state``, so the locale needs an address
    provider with states (``en_US`` does).
    """

    def generate(self) -> User:
        """Generate a single user."""
        days_ago = random.randint(0, 3 * 365)
        return User(
            user_id=self.fake.uuid4(),
            name=self.fake.name(),
            email=self.fake.email(),
            phone=self.fake.phone_number(),
            location=Location(
                city=self.fake.city(),
                region=self.fake.state(),
                country=self.locale.split("_")[-1],
            ),
            created_at=datetime.now() - timedelta(days=days_ago),
        )

    def generate_batch(self, count: int) -> Iterator[User]:
        """Generate multiple users.

        Parameters
        ----------
        count : int
            Number of users to generate.

        Yields
        ------
        User
            Generated users.
        """
        for _ in range(count):
            yield self.generate()


class AdvertisementGenerator(BaseGenerator):
    """Generate purchase requests and sale offers for registered users."""

    # Typical asking prices per category
    PRICE_RANGES: dict[Category, tuple[int, int]] = {
        Category.VEHICLES: (1500, 40000),
        Category.REAL_ESTATE: (50000, 600000),
        Category.ELECTRONICS: (20, 2500),
        Category.HOME: (10, 1500),
        Category.FASHION: (5, 400),
        Category.SPORTS: (10, 1200),
        Category.BOOKS: (2, 80),
        Category.SERVICES: (15, 500),
        Category.JOBS: (0, 0),
        Category.OTHER: (1, 500),
    }

    ITEMS: dict[Category, list[str]] = {
        Category.VEHICLES: ["Hatchback", "Scooter", "Estate car", "Motorbike", "Camper van"],
        Category.REAL_ESTATE: ["Studio flat", "Two-bedroom apartment", "Townhouse", "Plot of land"],
        Category.ELECTRONICS: ["Laptop", "Smartphone", "Games console", "Camera", "Monitor"],
        Category.HOME: ["Sofa", "Dining table", "Bookshelf", "Washing machine", "Armchair"],
        Category.FASHION: ["Leather jacket", "Trainers", "Handbag", "Winter coat"],
        Category.SPORTS: ["Road bike", "Surfboard", "Tennis racket", "Treadmill"],
        Category.BOOKS: ["Textbook", "Novel collection", "Comic series", "Cookbook"],
        Category.SERVICES: ["Maths tutoring", "House cleaning", "Removals", "Guitar lessons"],
        Category.JOBS: ["Part-time barista", "Weekend babysitter", "Delivery rider"],
        Category.OTHER: ["Board game", "Vinyl records", "Garden tools", "Aquarium"],
    }

    CONDITIONS = ["Like new", "Barely used", "Good condition", "Well kept", "Needs some work"]

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        sale_ratio: float = 0.5,
        highlight_days: int = 7,
    ) -> None:
        super().__init__(seed, locale)
        self.sale_ratio = sale_ratio
        self.highlight_days = highlight_days

    def generate(self, registry: UserRegistry, owner_id: str) -> Advertisement:
        """Generate one advertisement owned by ``owner_id``.

        A handle to the owner is acquired from ``registry``.
        """
        category = random.choice(list(Category))
        low, high = self.PRICE_RANGES[category]
        price = Decimal(random.randint(low, high))
        ad_class = Sale if random.random() < self.sale_ratio else Purchase

        item = random.choice(self.ITEMS[category])
        if ad_class is Sale:
            title = f"{random.choice(self.CONDITIONS)} {item.lower()}"
        else:
            title = f"Looking for: {item.lower()}"

        ad = ad_class(
            owner=registry.acquire(owner_id),
            title=title,
            category=category,
            description=self.fake.sentence(nb_words=12),
            price=price,
            negotiable=random.random() < 0.6,
            creation_date=date.today() - timedelta(days=random.randint(0, 90)),
        )
        if random.random() < 0.15:
            ad.extend_duration_highlight(self.highlight_days * random.randint(1, 4))
        ad.views = random.randint(0, 250)
        return ad


class ProposalGenerator(BaseGenerator):
    """Generate proposals priced around an advertisement's asking price."""

    def generate(self, registry: UserRegistry, ad: Advertisement, proposer_id: str) -> Proposal:
        """Generate one proposal from ``proposer_id`` on ``ad``.

        Bids on a non-negotiable sale never go under the asking price.
        """
        asking = float(ad.price) or 10.0
        if ad.get_type() is AdType.SALE and not ad.negotiable:
            factor = random.uniform(1.0, 1.15)
        else:
            factor = random.uniform(0.7, 1.15)
        price = Decimal(str(round(asking * factor, 2)))
        return Proposal(price=price, owner=registry.acquire(proposer_id))
