# order_domain/application/order_service.py
"""Application services for Order domain."""

import logging
from typing import Any

from src.common.dtos.order_dtos import OrderDTO, OrderStatus, PaymentDTO
from src.common.dtos.product_dtos import ProductStatus
from src.common.exceptions.custom_exceptions import NotFoundError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.common.utils.date_utils import current_payment_datetime
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.order_domain.domain.repositories.payment_repository import IPaymentRepository
from src.order_domain.domain.services.debt_calculator import DebtCalculator, count_debt, total_paid
from src.order_domain.domain.services.order_assembler import (
    OrderAssembler,
    collect_unique_product_ids,
    product_status_for_order,
    validate_order_status,
    validate_payments,
)
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)


class OrderApplicationService:

    def __init__(
        self,
        uow: MySQLUnitOfWork,
        order_repo: IOrderRepository,
        payment_repo: IPaymentRepository,
        product_repo: IProductRepository,
        assembler: OrderAssembler,
        debt_calculator: DebtCalculator,
    ) -> None:
        self.uow = uow
        self.order_repo = order_repo
        self.payment_repo = payment_repo
        self.product_repo = product_repo
        self.assembler = assembler
        self.debt_calculator = debt_calculator

    def create_order(self, order: OrderDTO) -> OrderDTO:
        """Links the selected products, books the initial payments and stores the resulting debt."""
        validate_order_status(order.status)
        product_ids = collect_unique_product_ids(order.product_ids)

        with self.uow.transaction() as tx:
            validate_payments(order.payments, set(self.payment_repo.get_payment_methods(tx)))
            self.assembler.validate_selection(tx, 0, product_ids, set())

            order.quantity = 0
            order.debt = 0.0
            order.id = self.order_repo.insert_order(tx, order)

            target_status = product_status_for_order(order.status)
            for product_id in product_ids:
                self.product_repo.set_product_status(tx, product_id, target_status)
                self.order_repo.link_product(tx, order.id, product_id)

            paid_at = current_payment_datetime()
            for payment in order.payments:
                payment.date = paid_at
                payment.order_id = order.id
                payment.id = self.payment_repo.insert_payment(tx, payment)

            order.quantity = len(product_ids)
            order.debt = self.debt_calculator.order_amount(tx, product_ids) - total_paid(order.payments)
            self.order_repo.update_order_totals(tx, order.id, order.quantity, order.debt)

        order.product_ids = product_ids
        logger.info(f"Order {order.id} created with {order.quantity} products and {len(order.payments)} payments")
        return order

    def update_order(self, order_id: int, order: OrderDTO) -> OrderDTO:
        """Replaces the product selection and reconciles payments of an existing order.

        Products dropped from the order become available again, newly added ones
        take the status implied by the order status, and moving the order into
        SHIPPED marks every linked product as sold.
        """
        validate_order_status(order.status)
        product_ids = collect_unique_product_ids(order.product_ids)

        with self.uow.transaction() as tx:
            validate_payments(order.payments, set(self.payment_repo.get_payment_methods(tx)))

            old_status = self.order_repo.lock_order_status(tx, order_id)
            if old_status is None:
                raise NotFoundError("Order", order_id)
            old_product_ids = self.order_repo.get_product_ids(tx, order_id)

            self.assembler.validate_selection(tx, order_id, product_ids, set(old_product_ids))
            self._apply_product_statuses(tx, old_status, order.status, old_product_ids, product_ids)

            self.order_repo.unlink_all_products(tx, order_id)
            for product_id in product_ids:
                self.order_repo.link_product(tx, order_id, product_id)

            self._reconcile_payments(tx, order_id, order.payments)
            persisted_payments = self.payment_repo.get_payments_for_order(tx, order_id)

            order.quantity = len(product_ids)
            order.debt = self.debt_calculator.order_amount(tx, product_ids) - total_paid(persisted_payments)
            self.order_repo.update_order(tx, order_id, order)

        order.id = order_id
        order.product_ids = product_ids
        order.payments = persisted_payments
        logger.info(f"Order {order_id} updated (status {old_status} -> {order.status})")
        return order

    def _apply_product_statuses(
        self, tx: Any, old_status: int, new_status: int, old_product_ids: list[int], product_ids: list[int]
    ) -> None:
        selected = set(product_ids)
        previously_linked = set(old_product_ids)

        for product_id in old_product_ids:
            if product_id not in selected:
                self.product_repo.set_product_status(tx, product_id, ProductStatus.AVAILABLE)

        target_status = product_status_for_order(new_status)
        for product_id in product_ids:
            if product_id not in previously_linked:
                self.product_repo.set_product_status(tx, product_id, target_status)

        if old_status != OrderStatus.SHIPPED and new_status == OrderStatus.SHIPPED:
            for product_id in product_ids:
                self.product_repo.set_product_status(tx, product_id, ProductStatus.SOLD)

    def _reconcile_payments(self, tx: Any, order_id: int, payments: list[PaymentDTO]) -> None:
        """Makes the stored payments of ``order_id`` match ``payments``.

        Known payments keep their original date; unknown or foreign ids are
        inserted as new payments; stored payments absent from the list are deleted.
        """
        existing_ids = {payment.id for payment in self.payment_repo.get_payments_for_order(tx, order_id)}
        kept_ids: set[int] = set()
        paid_at = current_payment_datetime()

        for payment in payments:
            payment.order_id = order_id
            if payment.id and payment.id > 0:
                if self.payment_repo.update_payment(tx, payment.id, payment, owner_order_id=order_id) > 0:
                    kept_ids.add(payment.id)
                    continue
            payment.date = paid_at
            payment.id = self.payment_repo.insert_payment(tx, payment)
            kept_ids.add(payment.id)

        for stale_id in existing_ids - kept_ids:
            self.payment_repo.delete_payment(tx, stale_id, owner_order_id=order_id)

    def delete_order(self, order_id: int) -> None:
        """Deletes the order and makes all of its products available again; its payments stay, unlinked."""
        with self.uow.transaction() as tx:
            if self.order_repo.lock_order_status(tx, order_id) is None:
                raise NotFoundError("Order", order_id)

            for product_id in self.order_repo.get_product_ids(tx, order_id):
                self.product_repo.set_product_status(tx, product_id, ProductStatus.AVAILABLE)
            self.order_repo.delete_order(tx, order_id)

        logger.info(f"Order {order_id} deleted")

    def _load_details(self, tx: Any, order: OrderDTO) -> OrderDTO:
        order.product_ids = self.order_repo.get_product_ids(tx, order.id)
        order.components = []
        for product_id in order.product_ids:
            product = self.product_repo.get_product(tx, product_id)
            if product is not None:
                order.components.append(product)
        order.payments = self.payment_repo.get_payments_for_order(tx, order.id)
        order.debt = count_debt(order.components, order.payments)
        return order

    def get_order(self, order_id: int) -> OrderDTO:
        with self.uow.transaction() as tx:
            order = self.order_repo.get_order(tx, order_id)
            if order is None:
                raise NotFoundError("Order", order_id)
            return self._load_details(tx, order)

    def list_orders(self) -> list[OrderDTO]:
        with self.uow.transaction() as tx:
            return [self._load_details(tx, order) for order in self.order_repo.get_all_orders(tx)]
