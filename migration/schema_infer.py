# migration/schema_infer.py
from typing import List, Dict, Any, Iterable

from migration.errors import SchemaInferenceError
from migration.type_mapper import map_value_type

_MISSING = object()


def collect_field_names(docs: Iterable[Dict[str, Any]]) -> List[str]:
    # dict keeps insertion order -> first-seen order across all docs
    seen = {}
    for d in docs:
        for k in d.keys():
            seen.setdefault(k, None)
    return list(seen)


def _first_sample(docs: List[Dict[str, Any]], field_name: str):
    for d in docs:
        if field_name in d:
            return d[field_name]
    return _MISSING


def infer_schema(docs: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Build the BigQuery schema for a document set: one {"name", "type"} entry per
    field name in first-seen order.
    The type comes from the first document carrying the field only; later
    documents never change it (a number column whose first value is a string
    stays STRING).
    """
    docs = list(docs)
    schema = []
    for name in collect_field_names(docs):
        sample = _first_sample(docs, name)
        if sample is _MISSING:
            raise SchemaInferenceError(f"no document contains field '{name}'")
        schema.append({"name": name, "type": map_value_type(sample)})
    return schema
