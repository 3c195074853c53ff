from enum import Enum


class ScanStatus(str, Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    INVALID = "invalid"
    INACTIVE = "inactive"


class ScannerRole(str, Enum):
    ADMIN = "admin"
    SCANNER = "scanner"


class StoreErrorKind(str, Enum):
    """Closed set of failures the persistence adapter reports to the services."""

    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    INTEGRITY_VIOLATION = "INTEGRITY_VIOLATION"
    TRANSIENT = "TRANSIENT"
    CONFIGURATION = "CONFIGURATION"
