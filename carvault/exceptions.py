"""Errors raised by the document store layer."""


class StoreError(Exception):
    """Raised when a document store call fails."""


class RecordNotFoundError(StoreError):
    """Raised when an update or delete targets an id that does not exist."""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"No document '{record_id}' in collection '{collection}'")


class StoreNotReadyError(StoreError):
    """Raised when the store does not signal readiness in time."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Document store not ready after {timeout:g}s")
