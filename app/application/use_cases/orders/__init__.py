"""Use cases for storefront orders."""

from .list_orders import get_order, list_orders
from .place_order import generate_order_number, place_order
from .update_order import update_order

__all__ = [
    "generate_order_number",
    "get_order",
    "list_orders",
    "place_order",
    "update_order",
]
