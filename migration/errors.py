# migration/errors.py
from typing import List, Dict, Any


class MigrationError(Exception):
    """Base class for everything that can fail a migration run."""


class ConfigurationError(MigrationError):
    pass


class SourceConnectionError(MigrationError):
    """MongoDB unreachable, or the fetch itself failed."""


class SchemaInferenceError(MigrationError):
    pass


class RecordNormalizationError(MigrationError):
    pass


class TableReplaceError(MigrationError):
    """Deleting or re-creating the destination table failed."""


class InsertError(MigrationError):
    pass


class GenericInsertError(InsertError):
    """The whole batch was rejected."""


class PartialInsertError(InsertError):
    """
    Some rows of a batch were rejected.
    row_errors: list of {"row_id": str, "row": dict, "errors": [...]}, as reported by the destination.
    """
    def __init__(self, message: str, row_errors: List[Dict[str, Any]] = None):
        super().__init__(message)
        self.row_errors = row_errors or []
