"""Aggregate application use cases."""

from .orders import list_orders, place_order, update_order

__all__ = [
    "list_orders",
    "place_order",
    "update_order",
]
