# src/order_domain/domain/services/debt_calculator.py
"""Outstanding debt of orders: product prices minus payments received."""

import logging
from typing import Any

from src.common.dtos.order_dtos import PaymentDTO
from src.common.dtos.product_dtos import ProductDTO
from src.common.exceptions.custom_exceptions import NotFoundError
from src.common.utils.numeric_utils import parse_amount
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.order_domain.domain.repositories.payment_repository import IPaymentRepository
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)


def sum_product_prices(prices: list[tuple[int, str]]) -> float:
    """Sums discounted prices, logging and skipping the ones that do not parse."""
    total = 0.0
    for product_id, price in prices:
        try:
            total += parse_amount(price)
        except ValueError as e:
            logger.warning(f"Skipping unparsable price {price!r} of product {product_id}: {e}")
    return total


def total_paid(payments: list[PaymentDTO]) -> float:
    return sum(payment.amount for payment in payments)


def count_debt(products: list[ProductDTO], payments: list[PaymentDTO]) -> float:
    """Debt of an order given its loaded products and payments."""
    return sum_product_prices([(p.id, p.discounted_price) for p in products]) - total_paid(payments)


class DebtCalculator:
    """Re-derives stored order quantity and debt inside the caller's transaction."""

    def __init__(
        self,
        product_repo: IProductRepository,
        order_repo: IOrderRepository,
        payment_repo: IPaymentRepository,
    ) -> None:
        self.product_repo = product_repo
        self.order_repo = order_repo
        self.payment_repo = payment_repo

    def order_amount(self, tx: Any, product_ids: list[int]) -> float:
        prices = []
        for product_id in product_ids:
            price = self.product_repo.get_discounted_price(tx, product_id)
            if price is None:
                raise NotFoundError("Product", product_id)
            prices.append((product_id, price))
        return sum_product_prices(prices)

    def recalculate(self, tx: Any, order_id: int) -> float:
        """Rewrites quantity and debt of ``order_id`` from its persisted links and payments."""
        product_ids = self.order_repo.get_product_ids(tx, order_id)
        debt = self.order_amount(tx, product_ids) - self.payment_repo.sum_payments_for_order(tx, order_id)
        self.order_repo.update_order_totals(tx, order_id, len(product_ids), debt)
        logger.debug(f"Order {order_id} recalculated: {len(product_ids)} products")
        return debt
