# src/article_domain/domain/services/article_ledger.py
"""Atomic reservation and release of article stock."""

import logging
from typing import Any

from src.article_domain.domain.repositories.article_repository import IArticleRepository
from src.common.config.settings import settings
from src.common.exceptions.custom_exceptions import (
    ApplicationError,
    ArticleNotFoundError,
    InsufficientStockError,
)
from src.common.utils.numeric_utils import round_weight

logger = logging.getLogger(__name__)

STRICT_STOCK_POLICY = "strict"
LENIENT_STOCK_POLICY = "lenient"

# kg columns hold three decimals; differences below this are float noise
_STOCK_EPSILON = 1e-6


class ArticleLedger:
    """Moves article stock in and out of products inside the caller's transaction.

    Row locks are taken in ascending service_id order so two writers touching
    the same set of articles cannot deadlock each other.
    """

    def __init__(self, article_repo: IArticleRepository, policy: str | None = None) -> None:
        self.article_repo = article_repo
        self.policy = (policy or settings.STOCK_POLICY).strip().lower()
        if self.policy not in (STRICT_STOCK_POLICY, LENIENT_STOCK_POLICY):
            raise ApplicationError(f"Unknown stock policy: {self.policy}")

    def reserve(self, tx: Any, requested: dict[int, float]) -> None:
        """Decrements stock for every article in ``requested``.

        Raises ArticleNotFoundError for a missing row and, under the strict
        policy, InsufficientStockError before touching an over-allocated row.
        """
        for service_id in sorted(requested):
            quantity = round_weight(requested[service_id])
            available = self.article_repo.lock_article_stock(tx, service_id)
            if available is None:
                raise ArticleNotFoundError(service_id)

            if self.policy == STRICT_STOCK_POLICY and available - quantity < -_STOCK_EPSILON:
                raise InsufficientStockError(service_id, available, quantity)

            self.article_repo.adjust_article_stock(tx, service_id, -quantity)
            logger.debug(f"Reserved {quantity} of article {service_id} (was {available})")

    def release(self, tx: Any, released: dict[int, float]) -> None:
        """Returns stock to every article in ``released``; a vanished row is fatal."""
        for service_id in sorted(released):
            quantity = round_weight(released[service_id])
            if quantity == 0:
                continue

            affected = self.article_repo.adjust_article_stock(tx, service_id, quantity)
            if affected == 0:
                raise ArticleNotFoundError(service_id, f"Article {service_id} not found while restoring stock")
            logger.debug(f"Released {quantity} of article {service_id}")
