# src/order_domain/domain/repositories/payment_repository.py
"""Payment repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.order_dtos import PaymentDTO


class IPaymentRepository(ABC):

    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        """Creates the payment_methods and payments_monitoring tables."""
        pass

    @abstractmethod
    def seed_payment_methods(self, tx: Any, methods: list[str]) -> int:
        """Registers missing payment methods and returns how many were added."""
        pass

    @abstractmethod
    def get_payment_methods(self, tx: Any) -> list[str]:
        pass

    @abstractmethod
    def insert_payment(self, tx: Any, payment: PaymentDTO) -> int:
        pass

    @abstractmethod
    def update_payment(self, tx: Any, payment_id: int, payment: PaymentDTO, owner_order_id: Optional[int] = None) -> int:
        """Updates a payment; with ``owner_order_id`` only a payment of that order matches.

        Returns the number of matched rows.
        """
        pass

    @abstractmethod
    def delete_payment(self, tx: Any, payment_id: int, owner_order_id: Optional[int] = None) -> int:
        pass

    @abstractmethod
    def get_payment(self, tx: Any, payment_id: int) -> Optional[PaymentDTO]:
        pass

    @abstractmethod
    def get_payments_for_order(self, tx: Any, order_id: int) -> list[PaymentDTO]:
        pass

    @abstractmethod
    def sum_payments_for_order(self, tx: Any, order_id: int) -> float:
        pass

    @abstractmethod
    def find_payments(
        self, tx: Any, method: Optional[str] = None, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> list[PaymentDTO]:
        """Returns payments ordered by date, optionally filtered by method and an inclusive date range."""
        pass
