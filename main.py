# main.py
"""Main application entry point: schema bootstrap and service wiring for the inventory backend."""

import logging
from dataclasses import dataclass

from src.article_domain.application.article_service import ArticleApplicationService
from src.article_domain.domain.services.article_ledger import ArticleLedger
from src.article_domain.infrastructure.persistence.mysql_article_repository import MySQLArticleRepository
from src.balance_domain.application.balance_service import BalanceApplicationService
from src.balance_domain.infrastructure.persistence.mysql_balance_repository import MySQLBalanceRepository
from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import ApplicationError, DatabaseError
from src.common.logger_config import setup_logging
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork
from src.logistics_domain.application.client_service import ClientApplicationService
from src.logistics_domain.application.shipment_service import ShipmentApplicationService
from src.logistics_domain.infrastructure.persistence.mysql_client_repository import MySQLClientRepository
from src.logistics_domain.infrastructure.persistence.mysql_shipment_repository import MySQLShipmentRepository
from src.order_domain.application.order_service import OrderApplicationService
from src.order_domain.application.payment_service import PaymentApplicationService
from src.order_domain.domain.services.debt_calculator import DebtCalculator
from src.order_domain.domain.services.order_assembler import OrderAssembler
from src.order_domain.infrastructure.persistence.mysql_order_repository import MySQLOrderRepository
from src.order_domain.infrastructure.persistence.mysql_payment_repository import (
    DEFAULT_PAYMENT_METHODS,
    MySQLPaymentRepository,
)
from src.product_domain.application.product_service import ProductApplicationService
from src.product_domain.infrastructure.api_clients.lot_catalog_api_client import LotCatalogApiClient
from src.product_domain.infrastructure.persistence.mysql_product_repository import MySQLProductRepository

logger = logging.getLogger(__name__)


@dataclass
class ApplicationServices:
    articles: ArticleApplicationService
    products: ProductApplicationService
    orders: OrderApplicationService
    payments: PaymentApplicationService
    balance: BalanceApplicationService
    clients: ClientApplicationService
    shipments: ShipmentApplicationService


def setup_dependencies(uow: MySQLUnitOfWork | None = None) -> ApplicationServices:
    """Initializes and wires up all domain dependencies around one shared connection pool."""
    uow = uow or MySQLUnitOfWork()
    article_repo = MySQLArticleRepository()
    product_repo = MySQLProductRepository()
    order_repo = MySQLOrderRepository()
    payment_repo = MySQLPaymentRepository()

    ledger = ArticleLedger(article_repo)
    debt_calculator = DebtCalculator(product_repo, order_repo, payment_repo)
    assembler = OrderAssembler(product_repo, order_repo)

    return ApplicationServices(
        articles=ArticleApplicationService(uow, article_repo),
        products=ProductApplicationService(
            uow, product_repo, order_repo, ledger, debt_calculator, lot_client=LotCatalogApiClient()
        ),
        orders=OrderApplicationService(uow, order_repo, payment_repo, product_repo, assembler, debt_calculator),
        payments=PaymentApplicationService(uow, payment_repo, order_repo, debt_calculator),
        balance=BalanceApplicationService(uow, MySQLBalanceRepository()),
        clients=ClientApplicationService(uow, MySQLClientRepository()),
        shipments=ShipmentApplicationService(uow, MySQLShipmentRepository()),
    )


def create_db_tables(uow: MySQLUnitOfWork) -> None:
    """Creates all tables in foreign key order and registers the default payment methods."""
    try:
        with uow.transaction() as tx:
            MySQLArticleRepository().create_tables(tx)
            MySQLProductRepository().create_tables(tx)
            MySQLOrderRepository().create_tables(tx)
            payment_repo = MySQLPaymentRepository()
            payment_repo.create_tables(tx)
            payment_repo.seed_payment_methods(tx, DEFAULT_PAYMENT_METHODS)
            MySQLClientRepository().create_tables(tx)
            MySQLShipmentRepository().create_tables(tx)
        logger.info("✅ Database tables created/verified successfully")
    except DatabaseError as e:
        logger.error(f"❌ Error creating database tables: {e}")
        raise


def log_balance_summary(services: ApplicationServices) -> None:
    """Logs a short stock overview after start-up."""
    try:
        rows = services.balance.get_balance()
        logger.info(f"📦 Articles on record: {len(rows)}")
        for row in rows[:5]:
            logger.info(
                f"   {row.article_id} {row.code}: balance {row.balance_kg} kg, "
                f"reserved {row.reserved_kg} kg, free {row.free_kg} kg"
            )
        if len(rows) > 5:
            logger.info(f"   ... and {len(rows) - 5} more articles")
    except ApplicationError as e:
        logger.error(f"⚠️  Error building balance summary: {e}")


if __name__ == "__main__":
    setup_logging()
    logger.info(f"🎯 Inventory backend bootstrap ({settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_DATABASE})")
    logger.info(f"Stock policy: {settings.STOCK_POLICY}")

    unit_of_work = MySQLUnitOfWork()
    create_db_tables(unit_of_work)
    log_balance_summary(setup_dependencies(unit_of_work))
