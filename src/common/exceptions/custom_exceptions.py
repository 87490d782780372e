"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class APIError(ApplicationError):
    """Exception raised for errors during external API calls."""

    def __init__(
        self,
        message: str = "API call failed",
        original_exception: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, original_exception)
        self.status_code = status_code
        self.message = f"API Error: {message}"
        if status_code:
            self.message += f" (Status Code: {status_code})"


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class ValidationError(ApplicationError):
    """Caller input rejected before any mutation was attempted."""

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message)


class NotFoundError(ApplicationError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: int | str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class LedgerError(ApplicationError):
    """Base class for article stock reservation failures."""

    def __init__(self, message: str, article_id: int) -> None:
        super().__init__(message)
        self.article_id = article_id


class ArticleNotFoundError(LedgerError):
    """Article row is missing while reserving or releasing stock."""

    def __init__(self, article_id: int, message: str | None = None) -> None:
        super().__init__(message or f"Article {article_id} does not exist", article_id)


class InsufficientStockError(LedgerError):
    """Requested quantity exceeds the article's remaining stock."""

    def __init__(self, article_id: int, available: float, requested: float) -> None:
        super().__init__(
            f"Not enough stock for article {article_id}: available {available:.2f}, requested {requested:.2f}",
            article_id,
        )
        self.available = available
        self.requested = requested


class OrderAssemblyError(ApplicationError):
    """Base class for product selection failures while assembling an order."""

    def __init__(self, message: str, product_id: int) -> None:
        super().__init__(message)
        self.product_id = product_id


class ProductUnavailableError(OrderAssemblyError):
    """Product is sold or otherwise not available for the order."""


class ProductConflictError(OrderAssemblyError):
    """Product is already linked to a different order."""
