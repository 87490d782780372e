# src/order_domain/domain/services/order_assembler.py
"""Rules for which products and payments an order may hold."""

import logging
from typing import Any

from src.common.dtos.order_dtos import OrderStatus, PaymentDTO
from src.common.dtos.product_dtos import ProductStatus
from src.common.exceptions.custom_exceptions import (
    NotFoundError,
    ProductConflictError,
    ProductUnavailableError,
    ValidationError,
)
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)


def validate_order_status(status: int) -> None:
    if status not in {s.value for s in OrderStatus}:
        raise ValidationError("Invalid order status")


def product_status_for_order(order_status: int) -> ProductStatus:
    """Status a product takes when it joins an order in ``order_status``."""
    if order_status == OrderStatus.SHIPPED:
        return ProductStatus.SOLD
    return ProductStatus.RESERVED


def collect_unique_product_ids(product_ids: list[int]) -> list[int]:
    if not product_ids:
        raise ValidationError("Order must contain at least one product")

    seen: set[int] = set()
    for product_id in product_ids:
        if product_id <= 0:
            raise ValidationError("Invalid product ID")
        if product_id in seen:
            raise ValidationError(f"Duplicate product ID {product_id} in order")
        seen.add(product_id)
    return list(product_ids)


def validate_payments(payments: list[PaymentDTO], known_methods: set[str]) -> None:
    for payment in payments:
        if payment.method not in known_methods:
            raise ValidationError(f"Unknown payment method: {payment.method}")
        if payment.amount <= 0:
            raise ValidationError("Payment amount must be positive")


class OrderAssembler:
    """Checks a product selection against the current state of products and order links."""

    def __init__(self, product_repo: IProductRepository, order_repo: IOrderRepository) -> None:
        self.product_repo = product_repo
        self.order_repo = order_repo

    def validate_selection(self, tx: Any, order_id: int, product_ids: list[int], already_linked: set[int]) -> None:
        """Locks every selected product row and rejects the selection on the first offending product.

        ``order_id`` is 0 for an order that does not exist yet. Products already
        linked to this order stay allowed unless they were sold. Rows are locked
        in ascending id order, like article rows in the ledger.
        """
        for product_id in sorted(product_ids):
            status = self.product_repo.lock_product_status(tx, product_id)
            if status is None:
                raise NotFoundError("Product", product_id)

            if product_id in already_linked:
                if status == ProductStatus.SOLD:
                    raise ProductUnavailableError(f"Product {product_id} is already sold", product_id)
                continue

            linked_order_id = self.order_repo.get_linked_order_id(tx, product_id)
            if linked_order_id is not None and linked_order_id != order_id:
                raise ProductConflictError(
                    f"Product {product_id} is already linked to order {linked_order_id}", product_id
                )
            if status != ProductStatus.AVAILABLE:
                raise ProductUnavailableError(f"Product {product_id} is not available", product_id)
