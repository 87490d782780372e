# src/product_domain/domain/repositories/product_repository.py
"""Product repository interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.product_dtos import ArticleAllocationDTO, ProductDTO


class IProductRepository(ABC):

    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        """Creates the products and article_in_product tables."""
        pass

    @abstractmethod
    def insert_product(self, tx: Any, product: ProductDTO) -> int:
        """Inserts the product row and returns its id."""
        pass

    @abstractmethod
    def update_product(self, tx: Any, product_id: int, product: ProductDTO) -> int:
        """Overwrites the product row and returns the number of matched rows."""
        pass

    @abstractmethod
    def delete_product(self, tx: Any, product_id: int) -> int:
        """Deletes the product (allocations cascade) and returns the number of deleted rows."""
        pass

    @abstractmethod
    def lock_product_status(self, tx: Any, product_id: int) -> Optional[int]:
        """Locks the product row and returns its status, or None if absent."""
        pass

    @abstractmethod
    def set_product_status(self, tx: Any, product_id: int, status: int) -> None:
        """Sets the product status."""
        pass

    @abstractmethod
    def get_discounted_price(self, tx: Any, product_id: int) -> Optional[str]:
        """Returns the stored discounted price, or None if the product is absent."""
        pass

    @abstractmethod
    def get_product(self, tx: Any, product_id: int) -> Optional[ProductDTO]:
        """Retrieves a product together with its allocations."""
        pass

    @abstractmethod
    def get_all_products(self, tx: Any) -> list[ProductDTO]:
        """Retrieves all products together with their allocations."""
        pass

    @abstractmethod
    def get_allocations(self, tx: Any, product_id: int) -> list[ArticleAllocationDTO]:
        """Retrieves the allocation rows of a product."""
        pass

    @abstractmethod
    def insert_allocations(self, tx: Any, product_id: int, allocations: list[ArticleAllocationDTO]) -> None:
        """Inserts allocation rows, filling in their ids."""
        pass

    @abstractmethod
    def delete_allocations(self, tx: Any, product_id: int) -> None:
        """Deletes all allocation rows of a product."""
        pass
