from fastapi import status

from app.core.enums import StoreErrorKind


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreError(Exception):
    """Persistence failure, already classified by the store adapter."""

    def __init__(self, kind: StoreErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.kind == StoreErrorKind.TRANSIENT


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or too weak."""

    kind = StoreErrorKind.CONFIGURATION
