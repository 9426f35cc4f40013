# migration/transformer.py
import datetime
import math
from typing import List, Dict, Any

from bson import ObjectId, json_util
from dateutil import tz

from migration.errors import RecordNormalizationError

ID_FIELD = "_id"
EPOCH = datetime.datetime(1970, 1, 1, tzinfo=tz.UTC)
_PASSTHROUGH = (str, bool, int, float)


def to_epoch_seconds(val: datetime.datetime) -> int:
    """
    floor(milliseconds / 1000). Mongo dates carry millisecond precision, so
    microseconds are dropped first. Naive datetimes (pymongo default) are UTC.
    """
    if val.tzinfo is None:
        val = val.replace(tzinfo=tz.UTC)
    millis = (val - EPOCH) // datetime.timedelta(milliseconds=1)
    return millis // 1000


def to_json_text(val: Any) -> str:
    # relaxed extended JSON keeps ObjectId / dates / Decimal128 readable
    return json_util.dumps(val, separators=(",", ":"))


def _normalize_value(val: Any):
    if val is None:
        return None
    if isinstance(val, datetime.datetime):
        return to_epoch_seconds(val)
    if isinstance(val, float) and not math.isfinite(val):
        # NaN / Infinity are not valid JSON; BigQuery gets null
        return None
    if isinstance(val, _PASSTHROUGH):
        return val
    # nested documents, arrays, and any other BSON value
    return to_json_text(val)


def row_id_for(doc: Dict[str, Any]) -> str:
    if ID_FIELD not in doc:
        raise RecordNormalizationError(f"document has no '{ID_FIELD}' field")
    oid = doc[ID_FIELD]
    if not isinstance(oid, ObjectId):
        raise RecordNormalizationError(
            f"'{ID_FIELD}' must be an ObjectId, got {type(oid).__name__}"
        )
    return str(oid)


def normalize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn one Mongo document into {"id": <hex ObjectId>, "payload": {...}}.
    The payload has exactly the document's keys; `_id` holds the same string as
    the row id. The input document is not modified.
    """
    row_id = row_id_for(doc)
    payload = {}
    for k, v in doc.items():
        payload[k] = _normalize_value(v)
    payload[ID_FIELD] = row_id
    return {"id": row_id, "payload": payload}


def normalize_documents(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_document(d) for d in docs]
