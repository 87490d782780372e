"""Data Transfer Objects for Order and Payment data."""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from src.common.dtos.product_dtos import ProductDTO
from src.common.exceptions.custom_exceptions import ValidationError
from src.common.utils.numeric_utils import parse_flexible_float, parse_flexible_int

logger = logging.getLogger(__name__)


class OrderStatus(IntEnum):
    NEW = 0
    READY_TO_SHIP = 1
    SHIPPED = 2


@dataclass
class PaymentDTO:
    """Row of payments_monitoring."""

    method: str
    amount: float
    comment: str = ""
    date: Optional[str] = None
    order_id: Optional[int] = None
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "PaymentDTO":
        try:
            return cls(
                id=parse_flexible_int(data.get("id")),
                method=str(data.get("method") or "").strip(),
                amount=parse_flexible_float(data.get("amount")),
                comment=str(data.get("comment") or ""),
                date=data.get("date") or None,
                order_id=parse_flexible_int(data["order_id"]) if data.get("order_id") else None,
            )
        except ValueError as e:
            logger.warning(f"Rejected payment payload: {e}")
            raise ValidationError(f"Invalid payment payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "PaymentDTO":
        date = row.get("date")
        return cls(
            id=row["id"],
            method=row.get("method") or "",
            amount=float(row.get("amount") or 0),
            comment=row.get("comment") or "",
            date=date.strftime("%Y-%m-%d %H:%M:%S") if hasattr(date, "strftime") else date,
            order_id=row.get("order_id"),
        )


@dataclass
class OrderDTO:
    """Customer order. ``product_ids`` is the requested selection, ``components`` the loaded products."""

    name: str = ""
    status: int = OrderStatus.NEW
    product_ids: list[int] = field(default_factory=list)
    payments: list[PaymentDTO] = field(default_factory=list)
    components: list[ProductDTO] = field(default_factory=list)
    quantity: int = 0
    description: str = ""
    debt: float = 0.0
    # Shipment metadata
    ship_date: str = ""
    city: str = ""
    full_name: str = ""
    phone: str = ""
    passport_inn: str = ""
    tk: str = ""
    places: int = 0
    price: float = 0.0
    weight: float = 0.0
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "OrderDTO":
        """Creates OrderDTO from a request payload; components may be ids or objects with an id."""
        raw_components = data.get("components", data.get("product_ids")) or []
        try:
            product_ids = [
                parse_flexible_int(item.get("id") if isinstance(item, dict) else item) for item in raw_components
            ]
            return cls(
                id=parse_flexible_int(data["id"]) if data.get("id") else None,
                name=str(data.get("name") or ""),
                status=parse_flexible_int(data.get("status")),
                product_ids=product_ids,
                payments=[PaymentDTO.from_request(item) for item in data.get("payments") or []],
                description=str(data.get("description") or ""),
                ship_date=str(data.get("ship_date") or ""),
                city=str(data.get("city") or ""),
                full_name=str(data.get("full_name") or ""),
                phone=str(data.get("phone") or ""),
                passport_inn=str(data.get("passport_inn") or ""),
                tk=str(data.get("tk") or ""),
                places=parse_flexible_int(data.get("places")),
                price=parse_flexible_float(data.get("price")),
                weight=parse_flexible_float(data.get("weight")),
            )
        except ValueError as e:
            logger.warning(f"Rejected order payload: {e}")
            raise ValidationError(f"Invalid order payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "OrderDTO":
        ship_date = row.get("ship_date")
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            quantity=row.get("quantity") or 0,
            status=row.get("status") or 0,
            description=row.get("description") or "",
            debt=float(row.get("debt") or 0),
            ship_date=str(ship_date) if ship_date else "",
            city=row.get("city") or "",
            full_name=row.get("full_name") or "",
            phone=row.get("phone") or "",
            passport_inn=row.get("passport_inn") or "",
            tk=row.get("tk") or "",
            places=row.get("places") or 0,
            price=float(row.get("price") or 0),
            weight=float(row.get("weight") or 0),
        )
