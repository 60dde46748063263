"""Output sinks and text codecs for marketplace data."""

from classifieds.sinks.json_file import JsonFileSink
from classifieds.sinks.text import (
    dumps_advertisement,
    loads_advertisement,
    read_advertisement,
    read_advertisements,
    write_advertisement,
)

__all__ = [
    "JsonFileSink",
    "dumps_advertisement",
    "loads_advertisement",
    "read_advertisement",
    "read_advertisements",
    "write_advertisement",
]
