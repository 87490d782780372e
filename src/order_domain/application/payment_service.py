# order_domain/application/payment_service.py
"""Application services for payments monitoring."""

import logging
from typing import Any, Optional

from src.common.dtos.order_dtos import PaymentDTO
from src.common.exceptions.custom_exceptions import NotFoundError, ValidationError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.common.utils.date_utils import expand_date_bound, normalize_payment_date_input
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.order_domain.domain.repositories.payment_repository import IPaymentRepository
from src.order_domain.domain.services.debt_calculator import DebtCalculator
from src.order_domain.domain.services.order_assembler import validate_payments

logger = logging.getLogger(__name__)


class PaymentApplicationService:

    def __init__(
        self,
        uow: MySQLUnitOfWork,
        payment_repo: IPaymentRepository,
        order_repo: IOrderRepository,
        debt_calculator: DebtCalculator,
    ) -> None:
        self.uow = uow
        self.payment_repo = payment_repo
        self.order_repo = order_repo
        self.debt_calculator = debt_calculator

    def list_payment_methods(self) -> list[str]:
        with self.uow.transaction() as tx:
            return self.payment_repo.get_payment_methods(tx)

    def list_payments(
        self, method: Optional[str] = None, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> list[PaymentDTO]:
        """Payments ordered by date; bare YYYY-MM-DD bounds cover the whole day."""
        date_from = expand_date_bound(date_from) if date_from and date_from.strip() else None
        date_to = expand_date_bound(date_to, end_of_day=True) if date_to and date_to.strip() else None
        with self.uow.transaction() as tx:
            return self.payment_repo.find_payments(tx, (method or "").strip() or None, date_from, date_to)

    def _prepare(self, tx: Any, payment: PaymentDTO) -> None:
        validate_payments([payment], set(self.payment_repo.get_payment_methods(tx)))
        try:
            payment.date = normalize_payment_date_input(payment.date)
        except ValueError as e:
            raise ValidationError(f"Invalid payment date format: {e}")
        if payment.order_id and self.order_repo.lock_order_status(tx, payment.order_id) is None:
            raise NotFoundError("Order", payment.order_id)

    def create_payment(self, payment: PaymentDTO) -> PaymentDTO:
        with self.uow.transaction() as tx:
            self._prepare(tx, payment)
            payment.id = self.payment_repo.insert_payment(tx, payment)
            if payment.order_id:
                self.debt_calculator.recalculate(tx, payment.order_id)

        logger.info(f"Payment {payment.id} created (order={payment.order_id})")
        return payment

    def update_payment(self, payment_id: int, payment: PaymentDTO) -> PaymentDTO:
        with self.uow.transaction() as tx:
            existing = self.payment_repo.get_payment(tx, payment_id)
            if existing is None:
                raise NotFoundError("Payment", payment_id)

            self._prepare(tx, payment)
            self.payment_repo.update_payment(tx, payment_id, payment)

            affected_orders = {order_id for order_id in (existing.order_id, payment.order_id) if order_id}
            for order_id in sorted(affected_orders):
                self.debt_calculator.recalculate(tx, order_id)

        payment.id = payment_id
        logger.info(f"Payment {payment_id} updated (order {existing.order_id} -> {payment.order_id})")
        return payment

    def delete_payment(self, payment_id: int) -> None:
        with self.uow.transaction() as tx:
            existing = self.payment_repo.get_payment(tx, payment_id)
            if existing is None:
                raise NotFoundError("Payment", payment_id)

            self.payment_repo.delete_payment(tx, payment_id)
            if existing.order_id:
                self.debt_calculator.recalculate(tx, existing.order_id)

        logger.info(f"Payment {payment_id} deleted")
