# src/product_domain/infrastructure/persistence/mysql_product_repository.py
"""MySQL implementation of Product repository."""

import logging
from typing import Optional

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.common.dtos.product_dtos import ArticleAllocationDTO, ProductDTO
from src.common.exceptions.custom_exceptions import DatabaseError
from src.common.utils.numeric_utils import format_money
from src.product_domain.domain.repositories.product_repository import IProductRepository

logger = logging.getLogger(__name__)

_PRODUCT_COLUMNS = "id, status, name, weight, discount, discounted_price, `count`, unit_price, video, description"
_ALLOCATION_COLUMNS = "id, product_id, article, curs_euro, price_euro, weight, `count`, sum_euro, sum_rub"


class MySQLProductRepository(IProductRepository):
    """MySQL implementation of the Product Repository."""

    def create_tables(self, tx: MySQLCursorDict) -> None:
        """Creates products (ids start at 6000) and the article allocation join table."""
        create_products_table_query = """
        CREATE TABLE IF NOT EXISTS products (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            status TINYINT UNSIGNED NOT NULL,
            name TEXT NOT NULL,
            weight DECIMAL(12, 3) NOT NULL DEFAULT 0,
            discount DECIMAL(5, 2) NOT NULL DEFAULT 0,
            discounted_price DECIMAL(14, 2) NOT NULL DEFAULT 0,
            `count` INT NOT NULL DEFAULT 0,
            unit_price DECIMAL(14, 2) NOT NULL DEFAULT 0,
            video TEXT,
            description TEXT,
            INDEX idx_products_status (status)
        ) ENGINE=InnoDB AUTO_INCREMENT=6000 DEFAULT CHARSET=utf8mb4;
        """
        create_allocations_table_query = """
        CREATE TABLE IF NOT EXISTS article_in_product (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            product_id BIGINT UNSIGNED NOT NULL,
            article BIGINT UNSIGNED NOT NULL,
            curs_euro DECIMAL(12, 4) NOT NULL DEFAULT 0,
            price_euro DECIMAL(12, 2) NOT NULL DEFAULT 0,
            weight DECIMAL(12, 3) NOT NULL DEFAULT 0,
            `count` INT NOT NULL DEFAULT 0,
            sum_euro DECIMAL(14, 2) NOT NULL DEFAULT 0,
            sum_rub DECIMAL(14, 2) NOT NULL DEFAULT 0,
            INDEX idx_article_in_product_product (product_id),
            INDEX idx_article_in_product_article (article),
            CONSTRAINT fk_article_in_product_product_id FOREIGN KEY (product_id)
                REFERENCES products(id) ON DELETE CASCADE,
            CONSTRAINT fk_article_in_product_article_id FOREIGN KEY (article)
                REFERENCES articles(service_id) ON UPDATE CASCADE ON DELETE RESTRICT
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_products_table_query)
            tx.execute(create_allocations_table_query)
            logger.info("Products and article_in_product tables checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating product tables: {e}", original_exception=e)

    def insert_product(self, tx: MySQLCursorDict, product: ProductDTO) -> int:
        insert_query = """
        INSERT INTO products (status, name, weight, discount, discounted_price, `count`, unit_price, video, description)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        try:
            tx.execute(insert_query, self._product_params(product))
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting product {product.name!r}: {e}", original_exception=e)

    def update_product(self, tx: MySQLCursorDict, product_id: int, product: ProductDTO) -> int:
        update_query = """
        UPDATE products
        SET status = %s, name = %s, weight = %s, discount = %s, discounted_price = %s, `count` = %s,
            unit_price = %s, video = %s, description = %s
        WHERE id = %s
        """
        try:
            tx.execute(update_query, self._product_params(product) + (product_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating product {product_id}: {e}", original_exception=e)

    def delete_product(self, tx: MySQLCursorDict, product_id: int) -> int:
        try:
            tx.execute("DELETE FROM products WHERE id = %s", (product_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting product {product_id}: {e}", original_exception=e)

    def lock_product_status(self, tx: MySQLCursorDict, product_id: int) -> Optional[int]:
        try:
            tx.execute("SELECT status FROM products WHERE id = %s FOR UPDATE", (product_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error locking product {product_id}: {e}", original_exception=e)
        return row["status"] if row else None

    def set_product_status(self, tx: MySQLCursorDict, product_id: int, status: int) -> None:
        try:
            tx.execute("UPDATE products SET status = %s WHERE id = %s", (status, product_id))
        except Error as e:
            raise DatabaseError(f"Error updating status of product {product_id}: {e}", original_exception=e)

    def get_discounted_price(self, tx: MySQLCursorDict, product_id: int) -> Optional[str]:
        try:
            tx.execute("SELECT discounted_price FROM products WHERE id = %s", (product_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching price of product {product_id}: {e}", original_exception=e)
        if row is None:
            return None
        return format_money(float(row["discounted_price"] or 0))

    def get_product(self, tx: MySQLCursorDict, product_id: int) -> Optional[ProductDTO]:
        try:
            tx.execute(f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = %s", (product_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching product {product_id}: {e}", original_exception=e)
        if row is None:
            return None

        product = ProductDTO.from_db_row(row)
        product.allocations = self.get_allocations(tx, product_id)
        return product

    def get_all_products(self, tx: MySQLCursorDict) -> list[ProductDTO]:
        try:
            tx.execute(f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY id")
            product_rows = tx.fetchall()
            tx.execute(f"SELECT {_ALLOCATION_COLUMNS} FROM article_in_product ORDER BY id")
            allocation_rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching products: {e}", original_exception=e)

        products = {row["id"]: ProductDTO.from_db_row(row) for row in product_rows}
        for row in allocation_rows:
            product = products.get(row["product_id"])
            if product is not None:
                product.allocations.append(ArticleAllocationDTO.from_db_row(row))
        return list(products.values())

    def get_allocations(self, tx: MySQLCursorDict, product_id: int) -> list[ArticleAllocationDTO]:
        try:
            tx.execute(
                f"SELECT {_ALLOCATION_COLUMNS} FROM article_in_product WHERE product_id = %s ORDER BY id",
                (product_id,),
            )
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching allocations of product {product_id}: {e}", original_exception=e)
        return [ArticleAllocationDTO.from_db_row(row) for row in rows]

    def insert_allocations(
        self, tx: MySQLCursorDict, product_id: int, allocations: list[ArticleAllocationDTO]
    ) -> None:
        insert_query = """
        INSERT INTO article_in_product
        (product_id, article, curs_euro, price_euro, weight, `count`, sum_euro, sum_rub)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        """
        for allocation in allocations:
            params = (
                product_id,
                allocation.article,
                allocation.curs_euro,
                allocation.price_euro,
                allocation.weight,
                allocation.count,
                allocation.sum_euro,
                allocation.sum_rub,
            )
            try:
                tx.execute(insert_query, params)
            except Error as e:
                raise DatabaseError(
                    f"Error inserting allocation of article {allocation.article} into product {product_id}: {e}",
                    original_exception=e,
                )
            allocation.id = tx.lastrowid

    def delete_allocations(self, tx: MySQLCursorDict, product_id: int) -> None:
        try:
            tx.execute("DELETE FROM article_in_product WHERE product_id = %s", (product_id,))
        except Error as e:
            raise DatabaseError(f"Error deleting allocations of product {product_id}: {e}", original_exception=e)

    @staticmethod
    def _product_params(product: ProductDTO) -> tuple:
        return (
            product.status,
            product.name,
            product.weight,
            product.discount,
            product.discounted_price,
            product.count,
            product.unit_price,
            product.video,
            product.description,
        )
