"""Data Transfer Objects for the client registry and the shipping register."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.common.exceptions.custom_exceptions import ValidationError
from src.common.utils.numeric_utils import parse_flexible_float, parse_flexible_int, round_weight

logger = logging.getLogger(__name__)


def _text(data: dict[str, Any], key: str) -> str:
    return str(data.get(key) or "").strip()


def _day(value: Any) -> str:
    return value.strftime("%Y-%m-%d") if hasattr(value, "strftime") else (value or "")


@dataclass
class ClientDTO:
    """Row of clients."""

    full_name: str
    city: str = ""
    phone: str = ""
    passport_number: str = ""
    tk: str = ""
    comment: str = ""
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ClientDTO":
        try:
            return cls(
                id=parse_flexible_int(data.get("id")),
                full_name=_text(data, "full_name"),
                city=_text(data, "city"),
                phone=_text(data, "phone"),
                passport_number=_text(data, "passport_number"),
                tk=_text(data, "tk"),
                comment=str(data.get("comment") or ""),
            )
        except ValueError as e:
            logger.warning(f"Rejected client payload: {e}")
            raise ValidationError(f"Invalid client payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ClientDTO":
        return cls(
            id=row["id"],
            full_name=row.get("full_name") or "",
            city=row.get("city") or "",
            phone=row.get("phone") or "",
            passport_number=row.get("passport_number") or "",
            tk=row.get("tk") or "",
            comment=row.get("comment") or "",
        )


@dataclass
class ShipmentDTO:
    """Row of shipments: one parcel handed to a transport company (``tk``) on ``ship_date``."""

    ship_date: str
    full_name: str
    city: str = ""
    phone: str = ""
    passport_inn: str = ""
    tk: str = ""
    places: int = 0
    price: float = 0.0
    weight: float = 0.0
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ShipmentDTO":
        try:
            return cls(
                id=parse_flexible_int(data.get("id")),
                ship_date=_text(data, "ship_date"),
                full_name=_text(data, "full_name"),
                city=_text(data, "city"),
                phone=_text(data, "phone"),
                passport_inn=_text(data, "passport_inn"),
                tk=_text(data, "tk"),
                places=parse_flexible_int(data.get("places")),
                price=parse_flexible_float(data.get("price")),
                weight=round_weight(parse_flexible_float(data.get("weight"))),
            )
        except ValueError as e:
            logger.warning(f"Rejected shipment payload: {e}")
            raise ValidationError(f"Invalid shipment payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ShipmentDTO":
        return cls(
            id=row["id"],
            ship_date=_day(row.get("ship_date")),
            full_name=row.get("full_name") or "",
            city=row.get("city") or "",
            phone=row.get("phone") or "",
            passport_inn=row.get("passport_inn") or "",
            tk=row.get("tk") or "",
            places=int(row.get("places") or 0),
            price=float(row.get("price") or 0),
            weight=float(row.get("weight") or 0),
        )


@dataclass
class ShipmentNoteDTO:
    """Free-text remark attached to a dispatch day."""

    ship_date: str
    note: str
    created_at: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ShipmentNoteDTO":
        try:
            return cls(
                id=parse_flexible_int(data.get("id")),
                ship_date=_text(data, "ship_date"),
                note=_text(data, "note"),
            )
        except ValueError as e:
            logger.warning(f"Rejected shipment note payload: {e}")
            raise ValidationError(f"Invalid shipment note payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ShipmentNoteDTO":
        created_at = row.get("created_at")
        return cls(
            id=row["id"],
            ship_date=_day(row.get("ship_date")),
            note=row.get("note") or "",
            created_at=created_at.strftime("%Y-%m-%d %H:%M:%S") if hasattr(created_at, "strftime") else created_at,
        )
