"""Line-oriented text form of advertisements.

Each advertisement is one line of JSON with sorted keys::

    {"category": "BOOKS", "creation_date": "2024-05-01", ..., "type": "P", "views": 3}

Fields: ``type`` ("P" or "S"), ``title``, ``category``, ``description``,
``creation_date``, ``owner_id``, ``price`` (decimal string),
``negotiable``, ``featured``, ``highlight_end_date`` (or null),
``views`` and, for sales, ``sold``.

The id is not written. Reading a line builds a new advertisement with a
fresh id, so ids stay unique within the process. Pending proposals are
not part of the text form either.
"""

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import IO, Any, Iterator

from classifieds.exceptions import ClassifiedsError, SerializationError
from classifieds.logging import get_logger
from classifieds.models import AdType, Advertisement, Category, Purchase, Sale
from classifieds.sinks.serialization import serialize_value
from classifieds.store.registry import UserRegistry

logger = get_logger(__name__)

_AD_CLASSES: dict[AdType, type[Advertisement]] = {
    AdType.PURCHASE: Purchase,
    AdType.SALE: Sale,
}

REQUIRED_FIELDS = (
    "type",
    "title",
    "category",
    "description",
    "creation_date",
    "owner_id",
    "price",
    "negotiable",
    "featured",
    "highlight_end_date",
    "views",
)


def advertisement_record(ad: Advertisement) -> dict[str, Any]:
    """Fields written for an advertisement, id excluded."""
    record = {k: serialize_value(v) for k, v in ad.to_dict().items()}
    del record["id"]
    return record


def dumps_advertisement(ad: Advertisement) -> str:
    """Render one advertisement as a single line (no trailing newline)."""
    return json.dumps(advertisement_record(ad), sort_keys=True, ensure_ascii=False)


def loads_advertisement(line: str, registry: UserRegistry) -> Advertisement:
    """Rebuild an advertisement from its text form.

    The owner is looked up in ``registry`` and a handle acquired for it.
    """
    try:
        record = json.loads(line)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Malformed advertisement line: {exc}") from exc
    if not isinstance(record, dict):
        raise SerializationError("Advertisement line must hold a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in record]
    if missing:
        raise SerializationError(f"Advertisement line is missing {', '.join(missing)}")

    try:
        ad_class = _AD_CLASSES[AdType(record["type"])]
        category = Category(record["category"])
        price = Decimal(record["price"])
        creation_date = date.fromisoformat(record["creation_date"])
        highlight = record["highlight_end_date"]
        highlight_end_date = date.fromisoformat(highlight) if highlight else None
        views = int(record["views"])
    except (ValueError, TypeError, InvalidOperation) as exc:
        raise SerializationError(f"Invalid advertisement field: {exc}") from exc

    handle = registry.acquire(record["owner_id"])
    try:
        ad = ad_class(
            owner=handle,
            title=record["title"],
            category=category,
            description=record["description"],
            price=price,
            negotiable=bool(record["negotiable"]),
            featured=bool(record["featured"]),
            highlight_end_date=highlight_end_date,
            creation_date=creation_date,
        )
    except ClassifiedsError as exc:
        handle.release()
        raise SerializationError(f"Invalid advertisement: {exc}") from exc

    ad.views = views
    if isinstance(ad, Sale):
        ad.sold = bool(record.get("sold", False))
    return ad


def write_advertisement(ad: Advertisement, stream: IO[str]) -> None:
    """Write one advertisement line to ``stream``."""
    stream.write(dumps_advertisement(ad))
    stream.write("\n")


def read_advertisement(stream: IO[str], registry: UserRegistry) -> Advertisement | None:
    """Read the next advertisement from ``stream``; ``None`` at end of input.

    Blank lines are skipped.
    """
    for line in stream:
        if line.strip():
            return loads_advertisement(line, registry)
    return None


def read_advertisements(stream: IO[str], registry: UserRegistry) -> Iterator[Advertisement]:
    """Yield every advertisement left in ``stream``."""
    count = 0
    while (ad := read_advertisement(stream, registry)) is not None:
        count += 1
        yield ad
    logger.debug("Read %d advertisements", count)
