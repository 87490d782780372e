# import_articles_main.py
"""Command line entry point for loading a goods-receipt CSV into the articles table."""

import argparse
import logging
import sys

from src.article_domain.application.article_service import ArticleApplicationService
from src.article_domain.infrastructure.persistence.mysql_article_repository import MySQLArticleRepository
from src.common.exceptions.custom_exceptions import ApplicationError
from src.common.logger_config import setup_logging
from src.common.persistence.mysql_unit_of_work import MySQLUnitOfWork

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import articles from a goods-receipt CSV file.")
    parser.add_argument("--file", default="prihod.csv", help="path to the CSV file (default: prihod.csv)")
    parser.add_argument("--truncate", action="store_true", help="delete all articles before the import")
    parser.add_argument("--delimiter", default=",", help="CSV field delimiter")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()

    article_service = ArticleApplicationService(MySQLUnitOfWork(), MySQLArticleRepository())
    article_service.csv_reader.delimiter = args.delimiter
    try:
        result = article_service.import_articles_from_csv(args.file, truncate=args.truncate)
    except ApplicationError as e:
        logger.error(f"❌ Import failed: {e}")
        return 1

    logger.info(f"✅ Inserted {result.inserted} articles, skipped {result.skipped} lines")
    return 0


if __name__ == "__main__":
    sys.exit(main())
