# article_domain/application/article_service.py
"""Application services for Article domain."""

import logging

from src.article_domain.domain.repositories.article_repository import IArticleRepository
from src.article_domain.infrastructure.importers.csv_article_reader import CsvArticleReader
from src.common.dtos.article_dtos import ArticleDTO, ImportArticlesResultDTO
from src.common.exceptions.custom_exceptions import ApplicationError, NotFoundError, ValidationError
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork

logger = logging.getLogger(__name__)


class ArticleApplicationService:

    def __init__(
        self,
        uow: MySQLUnitOfWork,
        article_repo: IArticleRepository,
        csv_reader: CsvArticleReader | None = None,
        batch_size: int = 500,
    ) -> None:
        self.uow = uow
        self.article_repo = article_repo
        self.csv_reader = csv_reader or CsvArticleReader()
        self.batch_size = batch_size

    @staticmethod
    def _validate(article: ArticleDTO) -> None:
        if article.id <= 0:
            raise ValidationError("Article id must be positive")
        if article.euro < 0:
            raise ValidationError("Article euro price cannot be negative")
        if article.kg < 0 or article.income_kg < 0:
            raise ValidationError("Article stock cannot be negative")

    def create_article(self, article: ArticleDTO) -> ArticleDTO:
        self._validate(article)
        with self.uow.transaction() as tx:
            article.service_id = self.article_repo.insert_article(tx, article)
        logger.info(f"Article {article.service_id} (id={article.id}, code={article.code}) created")
        return article

    def update_article(self, service_id: int, article: ArticleDTO) -> ArticleDTO:
        """Manual correction of an article, including a stock recount.

        The received weight is fixed at creation; ``article.income_kg`` is
        ignored and replaced with the stored value.
        """
        self._validate(article)
        with self.uow.transaction() as tx:
            # Serialize with ledger writers touching the same row
            if self.article_repo.lock_article_stock(tx, service_id) is None:
                raise NotFoundError("Article", service_id)
            self.article_repo.update_article(tx, service_id, article)
            article.income_kg = self.article_repo.get_article(tx, service_id).income_kg
        article.service_id = service_id
        logger.info(f"Article {service_id} updated")
        return article

    def delete_article(self, service_id: int) -> None:
        with self.uow.transaction() as tx:
            if self.article_repo.delete_article(tx, service_id) == 0:
                raise NotFoundError("Article", service_id)
        logger.info(f"Article {service_id} deleted")

    def get_article(self, service_id: int) -> ArticleDTO:
        with self.uow.transaction() as tx:
            article = self.article_repo.get_article(tx, service_id)
        if article is None:
            raise NotFoundError("Article", service_id)
        return article

    def list_articles(self) -> list[ArticleDTO]:
        with self.uow.transaction() as tx:
            return self.article_repo.get_all_articles(tx)

    def import_articles_from_csv(self, path: str, truncate: bool = False) -> ImportArticlesResultDTO:
        """Bulk loads a goods-receipt file in one transaction.

        Malformed rows are skipped and counted; any storage failure rolls back
        the whole file. Stock is loaded directly, not reserved through the ledger.
        """
        result = ImportArticlesResultDTO()
        logger.info(f"Starting article import from {path} (truncate={truncate})")

        try:
            with self.uow.transaction() as tx:
                if truncate:
                    removed = self.article_repo.delete_all_articles(tx)
                    logger.info(f"Articles table truncated ({removed} rows removed)")

                batch: list[ArticleDTO] = []
                for article in self.csv_reader.read(path):
                    batch.append(article)
                    if len(batch) >= self.batch_size:
                        result.inserted += self.article_repo.bulk_insert_articles(tx, batch)
                        batch = []
                if batch:
                    result.inserted += self.article_repo.bulk_insert_articles(tx, batch)
                result.skipped = self.csv_reader.skipped
        except FileNotFoundError as e:
            raise ApplicationError(f"Article import file not found at {path}", original_exception=e)

        logger.info(f"Import complete: inserted={result.inserted} skipped={result.skipped} file={path}")
        return result
