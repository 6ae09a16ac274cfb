"""Utility script to place an order directly in the database.

Orders written by another process do not go through the service's change
feed, so a running instance announces them on its next reconciliation sync.
"""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.orders import place_order
from app.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for order placement."""

    parser = argparse.ArgumentParser(
        description="Place a storefront order to exercise the staff alerts.",
    )
    parser.add_argument(
        "--customer",
        default="Test Customer",
        help="Customer name (default: Test Customer)",
    )
    parser.add_argument(
        "--email",
        default="customer@example.com",
        help="Customer email (default: customer@example.com)",
    )
    parser.add_argument(
        "--amount",
        type=float,
        default=25.0,
        help="Order total in euro (default: 25.0)",
    )
    parser.add_argument(
        "--order-number",
        default=None,
        help="Order number. Generated when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    """Place an order using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        order = place_order(
            session,
            customer_name=args.customer,
            customer_email=args.email,
            total_amount=args.amount,
            order_number=args.order_number,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not place the order: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the order: {exc}") from exc
    else:
        print(
            "Order placed:\n"
            f"  ID: {order.id}\n"
            f"  Number: {order.order_number}\n"
            f"  Customer: {order.customer_name}\n"
            f"  Total: {order.total_amount:.2f}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
