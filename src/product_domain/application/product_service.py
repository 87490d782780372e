# product_domain/application/product_service.py
"""Application services for Product domain."""

import logging
import random
from typing import Optional

from src.article_domain.domain.services.article_ledger import ArticleLedger
from src.common.dtos.product_dtos import LotCardDTO, ProductDTO
from src.common.exceptions.custom_exceptions import ApplicationError, NotFoundError, ValidationError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.order_domain.domain.services.debt_calculator import DebtCalculator
from src.product_domain.domain.repositories.product_repository import IProductRepository
from src.product_domain.domain.services.product_composer import (
    collect_requested_quantities,
    compute_product_fields,
    generate_lot_code,
    validate_product,
)
from src.product_domain.infrastructure.api_clients.lot_catalog_api_client import LotCatalogApiClient

logger = logging.getLogger(__name__)

MAX_LOT_NAME_ATTEMPTS = 100


class ProductApplicationService:

    def __init__(
        self,
        uow: MySQLUnitOfWork,
        product_repo: IProductRepository,
        order_repo: IOrderRepository,
        ledger: ArticleLedger,
        debt_calculator: DebtCalculator,
        lot_client: Optional[LotCatalogApiClient] = None,
    ) -> None:
        self.uow = uow
        self.product_repo = product_repo
        self.order_repo = order_repo
        self.ledger = ledger
        self.debt_calculator = debt_calculator
        self.lot_client = lot_client

    def create_product(self, product: ProductDTO) -> ProductDTO:
        """Reserves article stock for every allocation and stores the product."""
        validate_product(product)
        requested = collect_requested_quantities(product.allocations)

        with self.uow.transaction() as tx:
            self.ledger.reserve(tx, requested)
            compute_product_fields(product)
            product.id = self.product_repo.insert_product(tx, product)
            self.product_repo.insert_allocations(tx, product.id, product.allocations)

        logger.info(f"Product {product.id} created with {len(product.allocations)} allocations")
        return product

    def update_product(self, product_id: int, product: ProductDTO) -> ProductDTO:
        """Swaps the product's allocations and refreshes the debt of orders holding it.

        The previous allocations are released before the new ones are reserved,
        so shrinking or reshuffling weights within the same article never fails
        on stock that the product itself was holding.
        """
        validate_product(product)
        requested = collect_requested_quantities(product.allocations)

        with self.uow.transaction() as tx:
            if self.product_repo.lock_product_status(tx, product_id) is None:
                raise NotFoundError("Product", product_id)

            existing = self.product_repo.get_allocations(tx, product_id)
            self.ledger.release(tx, collect_requested_quantities(existing))
            self.ledger.reserve(tx, requested)

            compute_product_fields(product)
            if self.product_repo.update_product(tx, product_id, product) == 0:
                raise NotFoundError("Product", product_id)
            self.product_repo.delete_allocations(tx, product_id)
            self.product_repo.insert_allocations(tx, product_id, product.allocations)

            order_ids = self.order_repo.get_order_ids_for_product(tx, product_id)
            for order_id in order_ids:
                self.debt_calculator.recalculate(tx, order_id)

        product.id = product_id
        logger.info(f"Product {product_id} updated; {len(order_ids)} linked orders recalculated")
        return product

    def delete_product(self, product_id: int) -> None:
        """Deletes the product and returns its allocated weight to article stock."""
        with self.uow.transaction() as tx:
            existing = self.product_repo.get_allocations(tx, product_id)
            self.ledger.release(tx, collect_requested_quantities(existing))

            order_ids = self.order_repo.get_order_ids_for_product(tx, product_id)
            if self.product_repo.delete_product(tx, product_id) == 0:
                raise NotFoundError("Product", product_id)
            # Links cascaded away with the product
            for order_id in order_ids:
                self.debt_calculator.recalculate(tx, order_id)

        logger.info(f"Product {product_id} deleted")

    def get_product(self, product_id: int) -> ProductDTO:
        with self.uow.transaction() as tx:
            product = self.product_repo.get_product(tx, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def list_products(self) -> list[ProductDTO]:
        with self.uow.transaction() as tx:
            return self.product_repo.get_all_products(tx)

    def generate_unique_lot_name(self, rng: Optional[random.Random] = None) -> str:
        """Returns a random lot code not yet published in the lot catalogue."""
        lot_client = self.lot_client or LotCatalogApiClient()
        for _ in range(MAX_LOT_NAME_ATTEMPTS):
            candidate = generate_lot_code(rng)
            if not lot_client.lot_exists(candidate):
                return candidate
            logger.debug(f"Lot code {candidate} already taken")
        raise ApplicationError(f"Could not generate a unique lot name in {MAX_LOT_NAME_ATTEMPTS} attempts")

    def find_catalogue_lot(self, name: str) -> LotCardDTO:
        """Looks a product name up in the lot catalogue and returns its latest card."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Lot name is required")

        lot_client = self.lot_client or LotCatalogApiClient()
        card = lot_client.find_lot_by_name(name)
        if card is None:
            raise NotFoundError("Lot", name)
        logger.debug(f"Catalogue lot {card.lot} found for {name!r}")
        return card
