"""Value objects shared across marketplace entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """Where a user (and therefore their advertisements) is based.

    - city: town or city name
    - region: district, state or province
    - country: ISO 3166-1 alpha-2 code (default: ``"PT"``)
    """

    city: str
    region: str
    country: str = "PT"

    def __str__(self) -> str:
        return f"{self.city}, {self.region}, {self.country}"
