# src/order_domain/domain/repositories/order_repository.py
"""Order repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.order_dtos import OrderDTO


class IOrderRepository(ABC):

    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        """Creates the orders and order_products tables."""
        pass

    @abstractmethod
    def insert_order(self, tx: Any, order: OrderDTO) -> int:
        """Inserts the order row and returns its id."""
        pass

    @abstractmethod
    def update_order(self, tx: Any, order_id: int, order: OrderDTO) -> int:
        """Overwrites the order row including quantity and debt."""
        pass

    @abstractmethod
    def update_order_totals(self, tx: Any, order_id: int, quantity: int, debt: float) -> int:
        pass

    @abstractmethod
    def delete_order(self, tx: Any, order_id: int) -> int:
        pass

    @abstractmethod
    def lock_order_status(self, tx: Any, order_id: int) -> Optional[int]:
        """Locks the order row and returns its status, or None if absent."""
        pass

    @abstractmethod
    def get_order(self, tx: Any, order_id: int) -> Optional[OrderDTO]:
        """Retrieves the bare order row (no products or payments)."""
        pass

    @abstractmethod
    def get_all_orders(self, tx: Any) -> list[OrderDTO]:
        pass

    @abstractmethod
    def get_product_ids(self, tx: Any, order_id: int) -> list[int]:
        """Returns the ids of products linked to the order."""
        pass

    @abstractmethod
    def link_product(self, tx: Any, order_id: int, product_id: int) -> None:
        pass

    @abstractmethod
    def unlink_all_products(self, tx: Any, order_id: int) -> None:
        pass

    @abstractmethod
    def get_linked_order_id(self, tx: Any, product_id: int) -> Optional[int]:
        """Returns the order a product is linked to, or None."""
        pass

    @abstractmethod
    def get_order_ids_for_product(self, tx: Any, product_id: int) -> list[int]:
        pass
