from typing import Iterable


class InventoryError(Exception):
    """Base class for every error raised by the collections and the adapter."""


class ValidationError(InventoryError):
    """
    A required field was blank, or a numeric field was negative.
    Nothing is written when this is raised.
    """

    def __init__(self, fields: Iterable[str], message: str = ""):
        self.fields = tuple(fields)
        super().__init__(message or f"Invalid fields: {', '.join(self.fields)}")


class NotFoundError(InventoryError):
    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"No entity with id {entity_id!r}")


class StorageError(InventoryError):
    """The durable store refused a write (only raised in strict mode)."""


class ImportParseError(InventoryError):
    """The spreadsheet could not be opened or read at all."""
