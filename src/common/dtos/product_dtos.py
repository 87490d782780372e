"""Data Transfer Objects for Product data."""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from src.common.exceptions.custom_exceptions import ValidationError
from src.common.utils.numeric_utils import format_money, parse_flexible_float, parse_flexible_int, round_weight

logger = logging.getLogger(__name__)


class ProductStatus(IntEnum):
    AVAILABLE = 1
    RESERVED = 2
    SOLD = 3


@dataclass
class ArticleAllocationDTO:
    """Portion of one article's stock assigned into a product."""

    article: int  # articles.service_id
    curs_euro: float = 0.0
    price_euro: float = 0.0
    weight: float = 0.0
    count: int = 0
    sum_euro: str = "0.00"  # price_euro * weight
    sum_rub: str = "0.00"  # sum_euro * curs_euro
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ArticleAllocationDTO":
        return cls(
            article=parse_flexible_int(data.get("article")),
            curs_euro=parse_flexible_float(data.get("cursEvro", data.get("curs_euro"))),
            price_euro=parse_flexible_float(data.get("priceEvro", data.get("price_euro"))),
            weight=round_weight(parse_flexible_float(data.get("weight"))),
            count=parse_flexible_int(data.get("count")),
        )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ArticleAllocationDTO":
        return cls(
            id=row["id"],
            article=row["article"],
            curs_euro=float(row.get("curs_euro") or 0),
            price_euro=float(row.get("price_euro") or 0),
            weight=float(row.get("weight") or 0),
            count=row.get("count") or 0,
            sum_euro=format_money(float(row.get("sum_euro") or 0)),
            sum_rub=format_money(float(row.get("sum_rub") or 0)),
        )


@dataclass
class ProductDTO:
    """A sellable lot. Price and weight fields are derived from ``allocations``."""

    status: int
    name: str
    allocations: list[ArticleAllocationDTO] = field(default_factory=list)
    discount: float = 0.0
    discounted_price: str = "0.00"
    unit_price: str = "0.00"
    weight: str = "0.00"
    count: int = 0
    video: str = ""
    description: str = ""
    id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ProductDTO":
        """Creates ProductDTO from a request payload; derived fields are ignored and recomputed."""
        raw_allocations = data.get("articlesInProduct", data.get("allocations")) or []
        try:
            return cls(
                id=parse_flexible_int(data["id"]) if data.get("id") else None,
                status=parse_flexible_int(data.get("status")),
                name=str(data.get("name") or "").strip(),
                allocations=[ArticleAllocationDTO.from_request(item) for item in raw_allocations],
                discount=parse_flexible_float(data.get("skidka", data.get("discount"))),
                count=parse_flexible_int(data.get("count")),
                video=str(data.get("video") or ""),
                description=str(data.get("description") or ""),
            )
        except ValueError as e:
            logger.warning(f"Rejected product payload: {e}")
            raise ValidationError(f"Invalid product payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ProductDTO":
        return cls(
            id=row["id"],
            status=row["status"],
            name=row.get("name") or "",
            discount=float(row.get("discount") or 0),
            discounted_price=format_money(float(row.get("discounted_price") or 0)),
            unit_price=format_money(float(row.get("unit_price") or 0)),
            weight=format_money(float(row.get("weight") or 0)),
            count=row.get("count") or 0,
            video=row.get("video") or "",
            description=row.get("description") or "",
        )


@dataclass
class LotCardDTO:
    """A lot as published in the external lot catalogue."""

    lot: str
    name: str = ""
    category: str = ""
    url: str = ""
    status: str = ""
    weight: str = ""
    count: str = ""
    discount: str = ""
    euro_price: str = "0.00"
    rub_price: str = "0.00"
    discounted_rub_price: str = "0.00"
    price_per_kg_euro: str = "0.00"
    video_link: str = ""
    price_list_link: str = ""
