# src/order_domain/infrastructure/persistence/mysql_order_repository.py
"""MySQL implementation of Order repository."""

import logging
from typing import Optional

from mysql.connector import Error
from mysql.connector.cursor import MySQLCursorDict

from src.common.dtos.order_dtos import OrderDTO
from src.common.exceptions.custom_exceptions import DatabaseError
from src.order_domain.domain.repositories.order_repository import IOrderRepository

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = (
    "id, name, quantity, status, description, debt, "
    "ship_date, city, full_name, phone, passport_inn, tk, places, price, weight"
)


class MySQLOrderRepository(IOrderRepository):
    """MySQL implementation of the Order Repository."""

    def create_tables(self, tx: MySQLCursorDict) -> None:
        """Creates orders and the order_products link table (products must already exist)."""
        create_orders_table_query = """
        CREATE TABLE IF NOT EXISTS orders (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            name TEXT,
            quantity INT NOT NULL DEFAULT 0,
            status TINYINT UNSIGNED NOT NULL DEFAULT 0,
            description TEXT,
            debt DECIMAL(14, 2) NOT NULL DEFAULT 0,
            ship_date VARCHAR(32),
            city VARCHAR(255),
            full_name VARCHAR(255),
            phone VARCHAR(64),
            passport_inn VARCHAR(64),
            tk VARCHAR(255),
            places INT NOT NULL DEFAULT 0,
            price DECIMAL(14, 2) NOT NULL DEFAULT 0,
            weight DECIMAL(12, 3) NOT NULL DEFAULT 0,
            INDEX idx_orders_status (status),
            INDEX idx_orders_ship_date (ship_date)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        create_order_products_table_query = """
        CREATE TABLE IF NOT EXISTS order_products (
            id BIGINT UNSIGNED PRIMARY KEY AUTO_INCREMENT,
            order_id BIGINT UNSIGNED NOT NULL,
            product_id BIGINT UNSIGNED NOT NULL,
            INDEX idx_order_products_order (order_id),
            INDEX idx_order_products_product (product_id),
            CONSTRAINT fk_order_products_order_id FOREIGN KEY (order_id)
                REFERENCES orders(id) ON DELETE CASCADE,
            CONSTRAINT fk_order_products_product_id FOREIGN KEY (product_id)
                REFERENCES products(id) ON DELETE CASCADE
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
        try:
            tx.execute(create_orders_table_query)
            tx.execute(create_order_products_table_query)
            logger.info("Orders and order_products tables checked/created.")
        except Error as e:
            raise DatabaseError(f"Error creating order tables: {e}", original_exception=e)

    def insert_order(self, tx: MySQLCursorDict, order: OrderDTO) -> int:
        insert_query = """
        INSERT INTO orders
        (name, quantity, status, description, debt, ship_date, city, full_name, phone, passport_inn, tk, places, price, weight)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        """
        try:
            tx.execute(insert_query, self._order_params(order))
            return tx.lastrowid
        except Error as e:
            raise DatabaseError(f"Error inserting order {order.name!r}: {e}", original_exception=e)

    def update_order(self, tx: MySQLCursorDict, order_id: int, order: OrderDTO) -> int:
        update_query = """
        UPDATE orders
        SET name = %s, quantity = %s, status = %s, description = %s, debt = %s,
            ship_date = %s, city = %s, full_name = %s, phone = %s, passport_inn = %s,
            tk = %s, places = %s, price = %s, weight = %s
        WHERE id = %s
        """
        try:
            tx.execute(update_query, self._order_params(order) + (order_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating order {order_id}: {e}", original_exception=e)

    def update_order_totals(self, tx: MySQLCursorDict, order_id: int, quantity: int, debt: float) -> int:
        try:
            tx.execute("UPDATE orders SET quantity = %s, debt = %s WHERE id = %s", (quantity, debt, order_id))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error updating totals of order {order_id}: {e}", original_exception=e)

    def delete_order(self, tx: MySQLCursorDict, order_id: int) -> int:
        try:
            tx.execute("DELETE FROM orders WHERE id = %s", (order_id,))
            return tx.rowcount
        except Error as e:
            raise DatabaseError(f"Error deleting order {order_id}: {e}", original_exception=e)

    def lock_order_status(self, tx: MySQLCursorDict, order_id: int) -> Optional[int]:
        try:
            tx.execute("SELECT status FROM orders WHERE id = %s FOR UPDATE", (order_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error locking order {order_id}: {e}", original_exception=e)
        return row["status"] if row else None

    def get_order(self, tx: MySQLCursorDict, order_id: int) -> Optional[OrderDTO]:
        try:
            tx.execute(f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = %s", (order_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error fetching order {order_id}: {e}", original_exception=e)
        return OrderDTO.from_db_row(row) if row else None

    def get_all_orders(self, tx: MySQLCursorDict) -> list[OrderDTO]:
        try:
            tx.execute(f"SELECT {_ORDER_COLUMNS} FROM orders ORDER BY id")
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching orders: {e}", original_exception=e)
        return [OrderDTO.from_db_row(row) for row in rows]

    def get_product_ids(self, tx: MySQLCursorDict, order_id: int) -> list[int]:
        try:
            tx.execute("SELECT product_id FROM order_products WHERE order_id = %s ORDER BY id", (order_id,))
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching products of order {order_id}: {e}", original_exception=e)
        return [row["product_id"] for row in rows]

    def link_product(self, tx: MySQLCursorDict, order_id: int, product_id: int) -> None:
        try:
            tx.execute(
                "INSERT INTO order_products (order_id, product_id) VALUES (%s, %s)",
                (order_id, product_id),
            )
        except Error as e:
            raise DatabaseError(
                f"Error linking product {product_id} to order {order_id}: {e}", original_exception=e
            )

    def unlink_all_products(self, tx: MySQLCursorDict, order_id: int) -> None:
        try:
            tx.execute("DELETE FROM order_products WHERE order_id = %s", (order_id,))
        except Error as e:
            raise DatabaseError(f"Error unlinking products of order {order_id}: {e}", original_exception=e)

    def get_linked_order_id(self, tx: MySQLCursorDict, product_id: int) -> Optional[int]:
        try:
            tx.execute("SELECT order_id FROM order_products WHERE product_id = %s LIMIT 1", (product_id,))
            row = tx.fetchone()
        except Error as e:
            raise DatabaseError(f"Error checking order link of product {product_id}: {e}", original_exception=e)
        return row["order_id"] if row else None

    def get_order_ids_for_product(self, tx: MySQLCursorDict, product_id: int) -> list[int]:
        try:
            tx.execute(
                "SELECT DISTINCT order_id FROM order_products WHERE product_id = %s ORDER BY order_id",
                (product_id,),
            )
            rows = tx.fetchall()
        except Error as e:
            raise DatabaseError(f"Error fetching orders of product {product_id}: {e}", original_exception=e)
        return [row["order_id"] for row in rows]

    @staticmethod
    def _order_params(order: OrderDTO) -> tuple:
        return (
            order.name,
            order.quantity,
            order.status,
            order.description,
            order.debt,
            order.ship_date or None,
            order.city,
            order.full_name,
            order.phone,
            order.passport_inn,
            order.tk,
            order.places,
            order.price,
            order.weight,
        )
