# app/services/order_service.py
import logging
import uuid
from datetime import datetime
from typing import Iterable

from supabase import Client

from app.core.errors import NotFoundError, ValidationError
from app.models.order import ORDER_STATUSES, PAID_STATUSES, Order
from app.repositories.order_repo import OrderRepository
from app.schemas.order import OrderStats

logger = logging.getLogger(__name__)


def compute_order_stats(
    orders: Iterable[Order],
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> OrderStats:
    """
    Count orders per status and sum revenue inside an optional date range.

    Revenue uses total_amount, falling back to subtotal_amount for rows
    written before shipping was tracked. Paid revenue only counts
    paid / shipped / completed orders. Orders without created_at are
    always included.
    """
    counts: dict[str, int] = {}
    total_orders = 0
    all_revenue = 0.0
    paid_revenue = 0.0

    for order in orders:
        created = order.created_at
        if created is not None:
            if date_from is not None and _ts(created) < _ts(date_from):
                continue
            if date_to is not None and _ts(created) > _ts(date_to):
                continue

        total_orders += 1
        status = order.status or "pending"
        counts[status] = counts.get(status, 0) + 1

        amount = order.total_amount
        if amount is None:
            amount = order.subtotal_amount
        amount = float(amount or 0)

        all_revenue += amount
        if status.lower() in PAID_STATUSES:
            paid_revenue += amount

    return OrderStats(
        counts=counts,
        total_orders=total_orders,
        all_revenue=all_revenue,
        paid_revenue=paid_revenue,
        date_from=date_from,
        date_to=date_to,
    )


def _ts(value: datetime) -> float:
    # naive datetimes are taken as local time, like the admin date inputs
    return value.timestamp()


class OrderService:
    """
    Business logic for reading and administering orders.

    Orders are created by CheckoutService; this service only lists them
    and moves them through statuses.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    # -------- User-facing operations --------

    def list_user_orders(self, client: Client, user_id: uuid.UUID) -> list[Order]:
        """
        List orders for the given user, newest first.
        """
        return self.order_repo.list_for_user(client, user_id)

    # -------- Admin operations --------

    def list_all_orders(self, client: Client) -> list[Order]:
        return self.order_repo.list_all(client)

    def update_status(self, client: Client, order_id: uuid.UUID, status: str) -> Order:
        """
        Admin-only status update.

        The console lets the shop move an order to any status (payments are
        confirmed by hand), so only the value itself is validated.
        """
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Status tidak valid: {status}")

        order = self.order_repo.get_by_id(client, order_id)
        if not order:
            raise NotFoundError("Order tidak ditemukan.")

        if order.status != status:
            self.order_repo.update_status(client, order_id, status)
            logger.info("Order %s status %s -> %s", order_id, order.status, status)
            order.status = status
        return order

    def stats(
        self,
        client: Client,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> OrderStats:
        return compute_order_stats(self.order_repo.list_all(client), date_from, date_to)
