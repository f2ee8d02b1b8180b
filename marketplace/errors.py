from dataclasses import dataclass
from typing import ClassVar


@dataclass
class MarketplaceError(Exception):
    message: str
    error: str | None = None

    status_code: ClassVar[int] = 500

    def __str__(self) -> str:
        if self.error:
            return f"{self.message}: {self.error}"
        return self.message


class ValidationError(MarketplaceError):
    status_code: ClassVar[int] = 400

    def __init__(self, violations: list[str], message: str = "Validation failed") -> None:
        super().__init__(message=message, error="; ".join(violations))
        self.violations = list(violations)


class NotFoundError(MarketplaceError):
    status_code: ClassVar[int] = 404

    def __init__(self, resource: str, error: str | None = None) -> None:
        super().__init__(message=f"{resource} not found", error=error)


class DuplicateError(MarketplaceError):
    status_code: ClassVar[int] = 409

    def __init__(self, resource: str, error: str | None = None) -> None:
        super().__init__(message=f"{resource} already exists", error=error)


class StorageError(MarketplaceError):
    status_code: ClassVar[int] = 500


QueryError = StorageError
