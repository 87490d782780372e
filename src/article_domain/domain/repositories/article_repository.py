# article_domain/domain/repositories/article_repository.py
"""Article repository interface.

Every method takes ``tx``, the cursor of the caller's open transaction. The
repository never commits or rolls back.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.common.dtos.article_dtos import ArticleDTO


class IArticleRepository(ABC):
    @abstractmethod
    def create_tables(self, tx: Any) -> None:
        """Creates the articles table if it does not exist."""
        pass

    @abstractmethod
    def lock_article_stock(self, tx: Any, service_id: int) -> Optional[float]:
        """Locks the article row for update and returns its remaining stock, or None if absent."""
        pass

    @abstractmethod
    def adjust_article_stock(self, tx: Any, service_id: int, delta: float) -> int:
        """Adds ``delta`` to the article stock and returns the number of matched rows."""
        pass

    @abstractmethod
    def insert_article(self, tx: Any, article: ArticleDTO) -> int:
        """Inserts an article and returns its service_id."""
        pass

    @abstractmethod
    def bulk_insert_articles(self, tx: Any, articles: list[ArticleDTO]) -> int:
        """Inserts many articles at once and returns the inserted count."""
        pass

    @abstractmethod
    def update_article(self, tx: Any, service_id: int, article: ArticleDTO) -> int:
        """Overwrites an article except its received weight and returns the number of matched rows."""
        pass

    @abstractmethod
    def delete_article(self, tx: Any, service_id: int) -> int:
        """Deletes an article and returns the number of deleted rows."""
        pass

    @abstractmethod
    def delete_all_articles(self, tx: Any) -> int:
        """Removes every article ahead of a fresh bulk import."""
        pass

    @abstractmethod
    def get_article(self, tx: Any, service_id: int) -> Optional[ArticleDTO]:
        """Retrieves an article by its service_id."""
        pass

    @abstractmethod
    def get_all_articles(self, tx: Any) -> list[ArticleDTO]:
        """Retrieves all articles."""
        pass
