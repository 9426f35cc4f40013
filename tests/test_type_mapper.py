import datetime

import pytest
from bson import ObjectId, Decimal128
from bson.int64 import Int64

from migration.type_mapper import map_value_type, STRING, FLOAT, BOOLEAN, TIMESTAMP


@pytest.mark.parametrize("value, expected", [
    ([1, 2, 3], STRING),
    ((), STRING),
    (datetime.datetime(2024, 1, 1), TIMESTAMP),
    (3, FLOAT),
    (Int64(7), FLOAT),
    (2.5, FLOAT),
    (True, BOOLEAN),
    (False, BOOLEAN),
    ("hello", STRING),
    ({"a": 1}, STRING),
    (ObjectId(), STRING),
    (Decimal128("1.5"), STRING),
    (None, STRING),
])
def test_map_value_type(value, expected):
    assert map_value_type(value) == expected


def test_array_of_dates_is_string():
    assert map_value_type([datetime.datetime(2024, 1, 1)]) == STRING
