from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import List, Optional

from migration.models import RowError


class MigrateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_collection_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("source_collection_name", "mongoCollectionName")
    )
    destination_table_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("destination_table_name", "bigQueryTableName")
    )


class MigrateResponse(BaseModel):
    status: str
    message: str
    rows_loaded: int
    batches_loaded: int


class MigrateErrorDetail(BaseModel):
    error_short: str
    message: str
    error_id: str
    error_type: Optional[str] = None
    failed_rows: List[RowError] = []
    hint: str
