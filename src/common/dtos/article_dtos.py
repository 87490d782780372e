"""Data Transfer Objects for Article data."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.common.exceptions.custom_exceptions import ValidationError
from src.common.utils.numeric_utils import parse_flexible_float, parse_flexible_int

logger = logging.getLogger(__name__)


@dataclass
class ArticleDTO:
    """A stock-keeping unit. ``kg`` is the remaining stock, ``income_kg`` what was received."""

    id: int = 0
    no: int = 0
    code: str = ""
    description: str = ""
    euro: float = 0.0
    colli: float = 0.0
    kg: float = 0.0
    income_kg: float = 0.0
    value: float = 0.0
    service_id: Optional[int] = None

    @classmethod
    def from_request(cls, data: dict[str, Any]) -> "ArticleDTO":
        """Creates ArticleDTO from a request payload, accepting numbers sent as strings."""
        try:
            kg = parse_flexible_float(data.get("kg", data.get("weight")))
            income_kg = data.get("income_kg")
            return cls(
                id=parse_flexible_int(data.get("id")),
                no=parse_flexible_int(data.get("no")),
                code=str(data.get("code") or "").strip(),
                description=str(data.get("description") or "").strip(),
                euro=parse_flexible_float(data.get("euro")),
                colli=parse_flexible_float(data.get("colli")),
                kg=kg,
                income_kg=parse_flexible_float(income_kg) if income_kg is not None else kg,
                value=parse_flexible_float(data.get("value", data.get("price"))),
                service_id=parse_flexible_int(data["service_id"]) if data.get("service_id") else None,
            )
        except ValueError as e:
            logger.warning(f"Rejected article payload: {e}")
            raise ValidationError(f"Invalid article payload: {e}")

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "ArticleDTO":
        return cls(
            service_id=row["service_id"],
            id=row.get("id") or 0,
            no=row.get("no") or 0,
            code=row.get("code") or "",
            description=row.get("description") or "",
            euro=float(row.get("euro") or 0),
            colli=float(row.get("colli") or 0),
            kg=float(row.get("kg") or 0),
            income_kg=float(row.get("income_kg") or 0),
            value=float(row.get("value") or 0),
        )


@dataclass
class ImportArticlesResultDTO:
    """Outcome of a bulk article import."""

    inserted: int = 0
    skipped: int = 0
