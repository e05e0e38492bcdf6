"""Service-level exceptions."""


class PersistenceError(Exception):
    """Raised when the relational store rejects or fails a write."""

    def __init__(self, message: str, entity: str | None = None):
        super().__init__(message)
        self.entity = entity
