"""Aggregate application use cases."""

from . import notifications

__all__ = ["notifications"]
