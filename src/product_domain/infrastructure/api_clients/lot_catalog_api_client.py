"""Client for the external lot catalogue API."""

import json
import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.common.config.settings import settings
from src.common.dtos.product_dtos import LotCardDTO
from src.common.exceptions.custom_exceptions import APIError
from src.common.utils.numeric_utils import format_money, parse_numeric_input

logger = logging.getLogger(__name__)

LOT_STATUS_LABELS = {
    1: "В наличии",
    2: "Забронировано",
    3: "Продано",
}


class LotCatalogApiClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None) -> None:
        self.base_url = (base_url or settings.LOT_CATALOG_API_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.LOT_CATALOG_API_KEY

        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=1,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=5, pool_maxsize=5)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _get_product_data(self, params: dict[str, str]) -> list[dict[str, Any]]:
        if not self.api_key:
            raise APIError("LOT_CATALOG_API_KEY is not set in environment variables.")

        url = f"{self.base_url}/get_product.php"
        try:
            response = self.session.get(url, params={**params, "k": self.api_key}, timeout=30)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout as e:
            raise APIError(f"Lot catalogue request timed out: {e}", original_exception=e)
        except requests.exceptions.RequestException as e:
            status_code = e.response.status_code if e.response is not None else None
            raise APIError(f"Error fetching lot catalogue data: {e}", original_exception=e, status_code=status_code)
        except json.JSONDecodeError as e:
            raise APIError(f"Failed to decode lot catalogue response: {e}", original_exception=e)

        if payload.get("status") != "success":
            raise APIError(f"Lot catalogue returned status {payload.get('status')!r}")
        return payload.get("data") or []

    def get_lot_cards(self, lot: str) -> list[LotCardDTO]:
        """Fetches every catalogue card published under lot code ``lot``."""
        return [self.to_lot_card(item) for item in self._get_product_data({"lot": lot})]

    def find_lot_by_name(self, name: str) -> Optional[LotCardDTO]:
        cards = [self.to_lot_card(item) for item in self._get_product_data({"name": name})]
        return cards[-1] if cards else None

    def lot_exists(self, lot: str) -> bool:
        """True when the catalogue already has a card for ``lot``; lookup failures count as absent."""
        try:
            return len(self.get_lot_cards(lot)) > 0
        except APIError as e:
            logger.warning(f"Lot lookup for {lot!r} failed: {e}")
            return False

    @staticmethod
    def to_lot_card(data: dict[str, Any]) -> LotCardDTO:
        """Maps one catalogue record to a card, deriving euro and rouble totals from weight and price per kg."""
        price_per_kg_euro = parse_numeric_input(data.get("preur"))
        weight = parse_numeric_input(data.get("weight"))
        rate = parse_numeric_input(data.get("kurs"))
        raw_discount = str(data.get("skidka") or "").strip()
        try:
            discount = int(raw_discount) if raw_discount else 0
        except ValueError:
            logger.warning(f"Unparsable discount {raw_discount!r} for lot {data.get('lot')}")
            discount = 0

        total_euro = weight * price_per_kg_euro
        total_rub = total_euro * rate
        discounted_rub = total_rub / 100 * (100 - discount)

        return LotCardDTO(
            lot=str(data.get("lot") or ""),
            name=str(data.get("name") or ""),
            category=str(data.get("category") or ""),
            url=str(data.get("card_link") or ""),
            status=LOT_STATUS_LABELS.get(data.get("status"), ""),
            weight=str(data.get("weight") or ""),
            count=str(data.get("count") or ""),
            discount=raw_discount,
            euro_price=format_money(total_euro),
            rub_price=format_money(total_rub),
            discounted_rub_price=format_money(discounted_rub),
            price_per_kg_euro=format_money(price_per_kg_euro),
            video_link=str(data.get("link") or ""),
            price_list_link=str(data.get("pl_link") or ""),
        )

    def __del__(self) -> None:
        if hasattr(self, "session"):
            self.session.close()
