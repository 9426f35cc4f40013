# migration/type_mapper.py
import datetime
from typing import Any

STRING = "STRING"
FLOAT = "FLOAT"
BOOLEAN = "BOOLEAN"
TIMESTAMP = "TIMESTAMP"


def map_value_type(value: Any) -> str:
    """
    Map one sampled Mongo value to a BigQuery column type.
    Arrays and objects (ObjectId included) end up as STRING since they are
    stored in their JSON text form. Total: never raises.
    """
    if isinstance(value, (list, tuple)):
        return STRING
    if isinstance(value, datetime.datetime):
        return TIMESTAMP
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return FLOAT
    if isinstance(value, str):
        return STRING
    # nested documents, ObjectId, Decimal128, None, ...
    return STRING
