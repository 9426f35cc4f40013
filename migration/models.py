# migration/models.py
from enum import Enum
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, Field


class MigrationState(str, Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    INFERRING = "INFERRING"
    REPLACING_TABLE = "REPLACING_TABLE"
    LOADING = "LOADING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class RowError(BaseModel):
    row_id: Optional[str] = None
    row: Dict[str, Any] = Field(default_factory=dict)
    errors: List[Any] = Field(default_factory=list)


class MigrationOutcome(BaseModel):
    status: str
    message: str
    error_type: Optional[str] = None
    failed_rows: List[RowError] = Field(default_factory=list)
    rows_loaded: int = 0
    batches_loaded: int = 0
    # last non-terminal state reached; only meaningful on failure
    state: Optional[MigrationState] = None

    @property
    def succeeded(self) -> bool:
        return self.status == MigrationState.SUCCEEDED.value

    @classmethod
    def success(cls, message: str, rows_loaded: int = 0, batches_loaded: int = 0):
        return cls(status=MigrationState.SUCCEEDED.value, message=message,
                   rows_loaded=rows_loaded, batches_loaded=batches_loaded)

    @classmethod
    def failure(cls, exc: Exception, state: MigrationState = None, rows_loaded: int = 0, batches_loaded: int = 0):
        failed_rows = [RowError(**r) for r in getattr(exc, "row_errors", [])]
        return cls(status=MigrationState.FAILED.value, message=str(exc), error_type=type(exc).__name__,
                   failed_rows=failed_rows, rows_loaded=rows_loaded, batches_loaded=batches_loaded, state=state)
