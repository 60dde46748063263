"""Classified-ads marketplace with proposal negotiation."""

__version__ = "0.1.0"
