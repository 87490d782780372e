# src/balance_domain/domain/repositories/balance_repository.py
"""Balance repository interface."""
from abc import ABC, abstractmethod
from typing import Any


class IBalanceRepository(ABC):

    @abstractmethod
    def get_article_movements(self, tx: Any) -> list[dict[str, Any]]:
        """Returns one row per article with ``service_id``, ``id``, ``code``, ``description``,
        ``income_kg`` and the allocated weights ``sent_kg`` (sold products) and
        ``reserved_kg`` (reserved products)."""
        pass
