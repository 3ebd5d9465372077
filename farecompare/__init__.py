"""Ride fare comparison backend: fare & surge pricing engine plus API."""

__version__ = "0.1.0"
