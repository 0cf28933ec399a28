class InventoryError(Exception):
    """Base class for dashboard errors."""


class RemoteError(InventoryError):
    """A store operation failed (connection, validation or permission)."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class RecordNotFound(RemoteError):
    def __init__(self, operation: str, inspection_id: int):
        self.inspection_id = inspection_id
        super().__init__(operation, f"no inspection with id {inspection_id}")


class ValidationGap(InventoryError):
    """Nothing to act on, e.g. no row carries a request amount."""


class EditorStateError(InventoryError):
    """The record editor cannot perform this operation in its current state."""


class DashboardBusy(InventoryError):
    """Another store operation is still in flight."""
