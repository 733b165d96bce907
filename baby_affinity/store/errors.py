"""Domain exceptions for the name store.

This module defines a hierarchy of exceptions for the store layer,
separating infrastructure errors (database issues) from domain errors
(duplicate or missing names).
"""


class NameStoreError(Exception):
    """Base exception for all name store errors.

    All exceptions raised by the name store inherit from this class
    to enable consistent error handling by callers.
    """


class ConnectionError(NameStoreError):  # noqa: A001
    """Raised when the database connection is not established."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class PersistenceError(NameStoreError):
    """Raised when the database rejects or fails an operation.

    Wraps the underlying ``sqlite3.Error`` so callers can tell store
    failures apart from validation and duplicate errors.
    """

    def __init__(self, operation: str, message: str) -> None:
        """Initialize the persistence error.

        Args:
            operation: The store operation that failed.
            message: Human-readable error message.
        """
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")


class DuplicateNameError(NameStoreError):
    """Raised when inserting a name whose (text, category) already exists."""

    def __init__(self, text: str, category: str) -> None:
        """Initialize the error with the duplicate name.

        Args:
            text: Canonical name text.
            category: Category label.
        """
        self.text = text
        self.category = category
        super().__init__(f"text: {category} name {text!r} already exists")


class NameNotFoundError(NameStoreError):
    """Raised when an update targets a name that is not stored."""

    def __init__(self, identity: str) -> None:
        """Initialize the error with the missing identity.

        Args:
            identity: The record identity that was not found.
        """
        self.identity = identity
        super().__init__(f"Name not found: {identity}")


class MigrationError(NameStoreError):
    """Raised when a schema migration fails."""

    def __init__(self, version: int, message: str) -> None:
        """Initialize the migration error.

        Args:
            version: The migration version that failed.
            message: Human-readable error message.
        """
        self.version = version
        super().__init__(f"Migration {version} failed: {message}")
