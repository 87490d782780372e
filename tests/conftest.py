# tests/conftest.py
import copy
from contextlib import contextmanager
from typing import Any, Optional
from unittest.mock import Mock

import pytest

from src.article_domain.application.article_service import ArticleApplicationService
from src.article_domain.domain.repositories.article_repository import IArticleRepository
from src.article_domain.domain.services.article_ledger import ArticleLedger
from src.balance_domain.application.balance_service import BalanceApplicationService
from src.balance_domain.domain.repositories.balance_repository import IBalanceRepository
from src.common.config.settings import settings
from src.common.dtos.article_dtos import ArticleDTO
from src.common.dtos.logistics_dtos import ClientDTO, ShipmentDTO, ShipmentNoteDTO
from src.common.dtos.order_dtos import OrderDTO, PaymentDTO
from src.common.dtos.product_dtos import ArticleAllocationDTO, ProductDTO, ProductStatus
from src.common.exceptions.custom_exceptions import ValidationError
from src.logistics_domain.application.client_service import ClientApplicationService
from src.logistics_domain.application.shipment_service import ShipmentApplicationService
from src.logistics_domain.domain.repositories.client_repository import IClientRepository
from src.logistics_domain.domain.repositories.shipment_repository import IShipmentRepository
from src.order_domain.application.order_service import OrderApplicationService
from src.order_domain.application.payment_service import PaymentApplicationService
from src.order_domain.domain.repositories.order_repository import IOrderRepository
from src.order_domain.domain.repositories.payment_repository import IPaymentRepository
from src.order_domain.domain.services.debt_calculator import DebtCalculator
from src.order_domain.domain.services.order_assembler import OrderAssembler
from src.product_domain.application.product_service import ProductApplicationService
from src.product_domain.domain.repositories.product_repository import IProductRepository
from src.product_domain.infrastructure.api_clients.lot_catalog_api_client import LotCatalogApiClient


class InMemoryDatabase:
    """Table state shared by the in-memory repositories; the transaction object handed to them."""

    def __init__(self) -> None:
        self.articles: dict[int, ArticleDTO] = {}
        self.products: dict[int, ProductDTO] = {}
        self.allocations: dict[int, list[ArticleAllocationDTO]] = {}
        self.orders: dict[int, OrderDTO] = {}
        self.order_products: list[tuple[int, int]] = []
        self.payments: dict[int, PaymentDTO] = {}
        self.payment_methods: list[str] = []
        self.clients: dict[int, ClientDTO] = {}
        self.shipments: dict[int, ShipmentDTO] = {}
        self.shipment_notes: dict[int, ShipmentNoteDTO] = {}
        self.sequences = {
            "article": 1,
            "product": 6000,
            "allocation": 1,
            "order": 1,
            "payment": 1,
            "client": 1,
            "shipment": 1,
            "shipment_note": 1,
        }

    def next_id(self, table: str) -> int:
        value = self.sequences[table]
        self.sequences[table] += 1
        return value


class InMemoryUnitOfWork:
    """Snapshots the database on entry and restores it when the block raises."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self.db.__dict__)
        try:
            yield self.db
            self.commits += 1
        except Exception:
            self.db.__dict__.clear()
            self.db.__dict__.update(snapshot)
            self.rollbacks += 1
            raise


class InMemoryArticleRepository(IArticleRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    def lock_article_stock(self, tx: InMemoryDatabase, service_id: int) -> Optional[float]:
        article = tx.articles.get(service_id)
        return article.kg if article else None

    def adjust_article_stock(self, tx: InMemoryDatabase, service_id: int, delta: float) -> int:
        article = tx.articles.get(service_id)
        if article is None:
            return 0
        article.kg += delta
        return 1

    def insert_article(self, tx: InMemoryDatabase, article: ArticleDTO) -> int:
        service_id = tx.next_id("article")
        stored = copy.deepcopy(article)
        stored.service_id = service_id
        tx.articles[service_id] = stored
        return service_id

    def bulk_insert_articles(self, tx: InMemoryDatabase, articles: list[ArticleDTO]) -> int:
        for article in articles:
            self.insert_article(tx, article)
        return len(articles)

    def update_article(self, tx: InMemoryDatabase, service_id: int, article: ArticleDTO) -> int:
        if service_id not in tx.articles:
            return 0
        stored = copy.deepcopy(article)
        stored.service_id = service_id
        stored.income_kg = tx.articles[service_id].income_kg
        tx.articles[service_id] = stored
        return 1

    @staticmethod
    def _referenced(tx: InMemoryDatabase, service_id: int) -> bool:
        return any(a.article == service_id for rows in tx.allocations.values() for a in rows)

    def delete_article(self, tx: InMemoryDatabase, service_id: int) -> int:
        if self._referenced(tx, service_id):
            raise ValidationError(f"Article {service_id} is allocated to products and cannot be deleted")
        return 1 if tx.articles.pop(service_id, None) else 0

    def delete_all_articles(self, tx: InMemoryDatabase) -> int:
        for service_id in tx.articles:
            if self._referenced(tx, service_id):
                raise ValidationError("Articles are allocated to products and cannot be deleted")
        removed = len(tx.articles)
        tx.articles.clear()
        return removed

    def get_article(self, tx: InMemoryDatabase, service_id: int) -> Optional[ArticleDTO]:
        return copy.deepcopy(tx.articles.get(service_id))

    def get_all_articles(self, tx: InMemoryDatabase) -> list[ArticleDTO]:
        return [copy.deepcopy(tx.articles[k]) for k in sorted(tx.articles)]


class InMemoryProductRepository(IProductRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    def insert_product(self, tx: InMemoryDatabase, product: ProductDTO) -> int:
        product_id = tx.next_id("product")
        stored = copy.deepcopy(product)
        stored.id = product_id
        stored.allocations = []
        tx.products[product_id] = stored
        tx.allocations[product_id] = []
        return product_id

    def update_product(self, tx: InMemoryDatabase, product_id: int, product: ProductDTO) -> int:
        if product_id not in tx.products:
            return 0
        stored = copy.deepcopy(product)
        stored.id = product_id
        stored.allocations = []
        tx.products[product_id] = stored
        return 1

    def delete_product(self, tx: InMemoryDatabase, product_id: int) -> int:
        if tx.products.pop(product_id, None) is None:
            return 0
        tx.allocations.pop(product_id, None)
        tx.order_products = [link for link in tx.order_products if link[1] != product_id]
        return 1

    def lock_product_status(self, tx: InMemoryDatabase, product_id: int) -> Optional[int]:
        product = tx.products.get(product_id)
        return product.status if product else None

    def set_product_status(self, tx: InMemoryDatabase, product_id: int, status: int) -> None:
        if product_id in tx.products:
            tx.products[product_id].status = int(status)

    def get_discounted_price(self, tx: InMemoryDatabase, product_id: int) -> Optional[str]:
        product = tx.products.get(product_id)
        return product.discounted_price if product else None

    def get_product(self, tx: InMemoryDatabase, product_id: int) -> Optional[ProductDTO]:
        if product_id not in tx.products:
            return None
        product = copy.deepcopy(tx.products[product_id])
        product.allocations = self.get_allocations(tx, product_id)
        return product

    def get_all_products(self, tx: InMemoryDatabase) -> list[ProductDTO]:
        return [self.get_product(tx, product_id) for product_id in sorted(tx.products)]

    def get_allocations(self, tx: InMemoryDatabase, product_id: int) -> list[ArticleAllocationDTO]:
        return copy.deepcopy(tx.allocations.get(product_id, []))

    def insert_allocations(
        self, tx: InMemoryDatabase, product_id: int, allocations: list[ArticleAllocationDTO]
    ) -> None:
        for allocation in allocations:
            allocation.id = tx.next_id("allocation")
            tx.allocations.setdefault(product_id, []).append(copy.deepcopy(allocation))

    def delete_allocations(self, tx: InMemoryDatabase, product_id: int) -> None:
        tx.allocations[product_id] = []


class InMemoryOrderRepository(IOrderRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    @staticmethod
    def _bare(order: OrderDTO, order_id: int) -> OrderDTO:
        stored = copy.deepcopy(order)
        stored.id = order_id
        stored.product_ids = []
        stored.payments = []
        stored.components = []
        return stored

    def insert_order(self, tx: InMemoryDatabase, order: OrderDTO) -> int:
        order_id = tx.next_id("order")
        tx.orders[order_id] = self._bare(order, order_id)
        return order_id

    def update_order(self, tx: InMemoryDatabase, order_id: int, order: OrderDTO) -> int:
        if order_id not in tx.orders:
            return 0
        tx.orders[order_id] = self._bare(order, order_id)
        return 1

    def update_order_totals(self, tx: InMemoryDatabase, order_id: int, quantity: int, debt: float) -> int:
        if order_id not in tx.orders:
            return 0
        tx.orders[order_id].quantity = quantity
        tx.orders[order_id].debt = debt
        return 1

    def delete_order(self, tx: InMemoryDatabase, order_id: int) -> int:
        if tx.orders.pop(order_id, None) is None:
            return 0
        tx.order_products = [link for link in tx.order_products if link[0] != order_id]
        for payment in tx.payments.values():
            if payment.order_id == order_id:
                payment.order_id = None
        return 1

    def lock_order_status(self, tx: InMemoryDatabase, order_id: int) -> Optional[int]:
        order = tx.orders.get(order_id)
        return order.status if order else None

    def get_order(self, tx: InMemoryDatabase, order_id: int) -> Optional[OrderDTO]:
        return copy.deepcopy(tx.orders.get(order_id))

    def get_all_orders(self, tx: InMemoryDatabase) -> list[OrderDTO]:
        return [copy.deepcopy(tx.orders[k]) for k in sorted(tx.orders)]

    def get_product_ids(self, tx: InMemoryDatabase, order_id: int) -> list[int]:
        return [product_id for linked_order, product_id in tx.order_products if linked_order == order_id]

    def link_product(self, tx: InMemoryDatabase, order_id: int, product_id: int) -> None:
        tx.order_products.append((order_id, product_id))

    def unlink_all_products(self, tx: InMemoryDatabase, order_id: int) -> None:
        tx.order_products = [link for link in tx.order_products if link[0] != order_id]

    def get_linked_order_id(self, tx: InMemoryDatabase, product_id: int) -> Optional[int]:
        for order_id, linked_product in tx.order_products:
            if linked_product == product_id:
                return order_id
        return None

    def get_order_ids_for_product(self, tx: InMemoryDatabase, product_id: int) -> list[int]:
        return sorted({order_id for order_id, linked in tx.order_products if linked == product_id})


class InMemoryPaymentRepository(IPaymentRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    def seed_payment_methods(self, tx: InMemoryDatabase, methods: list[str]) -> int:
        added = [method for method in methods if method not in tx.payment_methods]
        tx.payment_methods.extend(added)
        return len(added)

    def get_payment_methods(self, tx: InMemoryDatabase) -> list[str]:
        return sorted(tx.payment_methods)

    def insert_payment(self, tx: InMemoryDatabase, payment: PaymentDTO) -> int:
        payment_id = tx.next_id("payment")
        stored = copy.deepcopy(payment)
        stored.id = payment_id
        tx.payments[payment_id] = stored
        return payment_id

    def update_payment(
        self, tx: InMemoryDatabase, payment_id: int, payment: PaymentDTO, owner_order_id: Optional[int] = None
    ) -> int:
        stored = tx.payments.get(payment_id)
        if stored is None or (owner_order_id is not None and stored.order_id != owner_order_id):
            return 0
        stored.method = payment.method
        stored.amount = payment.amount
        stored.comment = payment.comment
        if owner_order_id is None:
            stored.date = payment.date
            stored.order_id = payment.order_id
        return 1

    def delete_payment(self, tx: InMemoryDatabase, payment_id: int, owner_order_id: Optional[int] = None) -> int:
        stored = tx.payments.get(payment_id)
        if stored is None or (owner_order_id is not None and stored.order_id != owner_order_id):
            return 0
        del tx.payments[payment_id]
        return 1

    def get_payment(self, tx: InMemoryDatabase, payment_id: int) -> Optional[PaymentDTO]:
        return copy.deepcopy(tx.payments.get(payment_id))

    def get_payments_for_order(self, tx: InMemoryDatabase, order_id: int) -> list[PaymentDTO]:
        return [copy.deepcopy(p) for k, p in sorted(tx.payments.items()) if p.order_id == order_id]

    def sum_payments_for_order(self, tx: InMemoryDatabase, order_id: int) -> float:
        return sum(p.amount for p in tx.payments.values() if p.order_id == order_id)

    def find_payments(
        self,
        tx: InMemoryDatabase,
        method: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[PaymentDTO]:
        result = []
        for payment in tx.payments.values():
            if payment.method not in tx.payment_methods:
                continue
            if method and payment.method != method:
                continue
            if date_from and payment.date < date_from:
                continue
            if date_to and payment.date > date_to:
                continue
            result.append(copy.deepcopy(payment))
        return sorted(result, key=lambda p: (p.date, p.id))


class InMemoryBalanceRepository(IBalanceRepository):
    def get_article_movements(self, tx: InMemoryDatabase) -> list[dict[str, Any]]:
        rows = []
        for service_id in sorted(tx.articles):
            article = tx.articles[service_id]
            sent = reserved = 0.0
            for product_id, allocations in tx.allocations.items():
                status = tx.products[product_id].status
                for allocation in allocations:
                    if allocation.article != service_id:
                        continue
                    if status == ProductStatus.SOLD:
                        sent += allocation.weight
                    elif status == ProductStatus.RESERVED:
                        reserved += allocation.weight
            rows.append(
                {
                    "service_id": service_id,
                    "id": article.id,
                    "code": article.code,
                    "description": article.description,
                    "income_kg": article.income_kg,
                    "sent_kg": sent,
                    "reserved_kg": reserved,
                }
            )
        return rows


class InMemoryClientRepository(IClientRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    def insert_client(self, tx: InMemoryDatabase, client: ClientDTO) -> int:
        client_id = tx.next_id("client")
        stored = copy.deepcopy(client)
        stored.id = client_id
        tx.clients[client_id] = stored
        return client_id

    def update_client(self, tx: InMemoryDatabase, client_id: int, client: ClientDTO) -> int:
        if client_id not in tx.clients:
            return 0
        stored = copy.deepcopy(client)
        stored.id = client_id
        tx.clients[client_id] = stored
        return 1

    def delete_client(self, tx: InMemoryDatabase, client_id: int) -> int:
        return 1 if tx.clients.pop(client_id, None) else 0

    def get_client(self, tx: InMemoryDatabase, client_id: int) -> Optional[ClientDTO]:
        return copy.deepcopy(tx.clients.get(client_id))

    def get_all_clients(self, tx: InMemoryDatabase) -> list[ClientDTO]:
        return [copy.deepcopy(tx.clients[k]) for k in sorted(tx.clients, reverse=True)]


class InMemoryShipmentRepository(IShipmentRepository):
    def create_tables(self, tx: InMemoryDatabase) -> None:
        pass

    @staticmethod
    def _store(table: dict, entity_id: int, entity: Any) -> None:
        stored = copy.deepcopy(entity)
        stored.id = entity_id
        table[entity_id] = stored

    @staticmethod
    def _by_day(table: dict, ship_date: Optional[str]) -> list:
        rows = [copy.deepcopy(row) for row in table.values() if not ship_date or row.ship_date == ship_date]
        return sorted(rows, key=lambda row: (row.ship_date, row.id), reverse=True)

    def insert_shipment(self, tx: InMemoryDatabase, shipment: ShipmentDTO) -> int:
        shipment_id = tx.next_id("shipment")
        self._store(tx.shipments, shipment_id, shipment)
        return shipment_id

    def update_shipment(self, tx: InMemoryDatabase, shipment_id: int, shipment: ShipmentDTO) -> int:
        if shipment_id not in tx.shipments:
            return 0
        self._store(tx.shipments, shipment_id, shipment)
        return 1

    def delete_shipment(self, tx: InMemoryDatabase, shipment_id: int) -> int:
        return 1 if tx.shipments.pop(shipment_id, None) else 0

    def find_shipments(self, tx: InMemoryDatabase, ship_date: Optional[str] = None) -> list[ShipmentDTO]:
        return self._by_day(tx.shipments, ship_date)

    def insert_note(self, tx: InMemoryDatabase, note: ShipmentNoteDTO) -> int:
        note_id = tx.next_id("shipment_note")
        self._store(tx.shipment_notes, note_id, note)
        tx.shipment_notes[note_id].created_at = "2024-03-05 12:00:00"
        return note_id

    def update_note(self, tx: InMemoryDatabase, note_id: int, note: ShipmentNoteDTO) -> int:
        stored = tx.shipment_notes.get(note_id)
        if stored is None:
            return 0
        stored.ship_date = note.ship_date
        stored.note = note.note
        return 1

    def delete_note(self, tx: InMemoryDatabase, note_id: int) -> int:
        return 1 if tx.shipment_notes.pop(note_id, None) else 0

    def find_notes(self, tx: InMemoryDatabase, ship_date: Optional[str] = None) -> list[ShipmentNoteDTO]:
        return self._by_day(tx.shipment_notes, ship_date)


@pytest.fixture(autouse=True)
def mock_settings_defaults(mocker) -> None:
    """Pins environment dependent settings for consistent testing."""
    mocker.patch.object(settings, "STOCK_POLICY", "strict")
    mocker.patch.object(settings, "TIMEZONE", "Europe/Moscow")
    mocker.patch.object(settings, "LOT_CATALOG_API_BASE_URL", "https://lots.example.test/api")
    mocker.patch.object(settings, "LOT_CATALOG_API_KEY", "test_key")


@pytest.fixture
def in_memory_db() -> InMemoryDatabase:
    db = InMemoryDatabase()
    db.payment_methods.extend(["нал", "втб", "альфа"])
    return db


@pytest.fixture
def uow(in_memory_db) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(in_memory_db)


@pytest.fixture
def article_repo() -> InMemoryArticleRepository:
    return InMemoryArticleRepository()


@pytest.fixture
def product_repo() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()


@pytest.fixture
def ledger(article_repo) -> ArticleLedger:
    return ArticleLedger(article_repo, policy="strict")


@pytest.fixture
def debt_calculator(product_repo, order_repo, payment_repo) -> DebtCalculator:
    return DebtCalculator(product_repo, order_repo, payment_repo)


@pytest.fixture
def mock_lot_client() -> Mock:
    """Mock for LotCatalogApiClient."""
    return Mock(spec=LotCatalogApiClient)


@pytest.fixture
def article_service(uow, article_repo) -> ArticleApplicationService:
    return ArticleApplicationService(uow, article_repo)


@pytest.fixture
def product_service(uow, product_repo, order_repo, ledger, debt_calculator, mock_lot_client) -> ProductApplicationService:
    return ProductApplicationService(uow, product_repo, order_repo, ledger, debt_calculator, lot_client=mock_lot_client)


@pytest.fixture
def order_service(uow, order_repo, payment_repo, product_repo, debt_calculator) -> OrderApplicationService:
    assembler = OrderAssembler(product_repo, order_repo)
    return OrderApplicationService(uow, order_repo, payment_repo, product_repo, assembler, debt_calculator)


@pytest.fixture
def payment_service(uow, payment_repo, order_repo, debt_calculator) -> PaymentApplicationService:
    return PaymentApplicationService(uow, payment_repo, order_repo, debt_calculator)


@pytest.fixture
def balance_service(uow) -> BalanceApplicationService:
    return BalanceApplicationService(uow, InMemoryBalanceRepository())


@pytest.fixture
def client_service(uow) -> ClientApplicationService:
    return ClientApplicationService(uow, InMemoryClientRepository())


@pytest.fixture
def shipment_service(uow) -> ShipmentApplicationService:
    return ShipmentApplicationService(uow, InMemoryShipmentRepository())


@pytest.fixture
def stocked_articles(in_memory_db) -> dict[str, int]:
    """Two articles received into stock: 100 kg of jeans and 50.5 kg of jackets."""
    jeans = ArticleDTO(id=101, no=1, code="JNS", description="Jeans mix", euro=2.5, kg=100.0, income_kg=100.0)
    jackets = ArticleDTO(id=102, no=2, code="JKT", description="Jackets", euro=4.0, kg=50.5, income_kg=50.5)
    ids = {}
    for key, article in (("jeans", jeans), ("jackets", jackets)):
        service_id = in_memory_db.next_id("article")
        article.service_id = service_id
        in_memory_db.articles[service_id] = article
        ids[key] = service_id
    return ids


@pytest.fixture
def priced_products(in_memory_db) -> list[int]:
    """Two available products with discounted totals 41957.00 and 38402.00."""
    ids = []
    for name, price in (("a0001", "41957.00"), ("b0002", "38402.00")):
        product_id = in_memory_db.next_id("product")
        in_memory_db.products[product_id] = ProductDTO(
            id=product_id, status=ProductStatus.AVAILABLE, name=name, discounted_price=price
        )
        in_memory_db.allocations[product_id] = []
        ids.append(product_id)
    return ids
