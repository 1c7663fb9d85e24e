"""Utility functions for hephaestus.

Helpers shared by the query executor and the CLI: converting Python values
to DynamoDB wire values and back, continuation cursors, and projections.
"""

import base64
import binascii
import json
from decimal import Decimal, DecimalException
from typing import Any, Dict, List, Mapping, Optional, Sequence

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from .constants import PROJECTION_PLACEHOLDER
from .exceptions import InvalidCursorError, InvalidValueError
from .types import Item

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


# ===========================================================================
# Value conversion
# ===========================================================================


def to_dynamo_value(value: Any) -> Any:
    """Convert a Python value into something `TypeSerializer` accepts.

    Floats become `Decimal` (DynamoDB numbers are decimal); containers are
    converted recursively.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (list, tuple)):
        return [to_dynamo_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {to_dynamo_value(v) for v in value}
    if isinstance(value, dict):
        return {k: to_dynamo_value(v) for k, v in value.items()}
    return value


def serialize_values(values: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Serialize `:v0`-style placeholder values into low-level attribute values.

    Raises:
        InvalidValueError: a value has no attribute value form (e.g. `datetime`),
            or is a number outside DynamoDB's range or precision
    """
    serialized = {}
    for placeholder, value in values.items():
        try:
            serialized[placeholder] = _serializer.serialize(to_dynamo_value(value))
        except (TypeError, DecimalException) as e:
            raise InvalidValueError(
                placeholder=placeholder, value_type=type(value).__name__, stage="serialize", reason=str(e)
            ) from e
    return serialized


def deserialize_item(item: Item) -> Dict[str, Any]:
    """Turn one low-level item (`{"name": {"S": "x"}}`) into plain Python values."""
    return {name: _deserializer.deserialize(value) for name, value in item.items()}


def deserialize_items(items: Sequence[Item]) -> List[Dict[str, Any]]:
    return [deserialize_item(item) for item in items]


def json_default(value: Any) -> Any:
    """`json.dumps` fallback for values produced by `TypeDeserializer`."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, Binary):
        value = value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# ===========================================================================
# Continuation cursors
# ===========================================================================


def encode_cursor(last_evaluated_key: Optional[Item]) -> Optional[str]:
    """Encode a `LastEvaluatedKey` as a urlsafe base64 JSON string.

    Key attributes are S, N or B; binary values are base64 encoded inside
    the JSON so the cursor stays printable.
    """
    if not last_evaluated_key:
        return None
    payload = {}
    for name, value in last_evaluated_key.items():
        if "B" in value:
            payload[name] = {"B": base64.b64encode(bytes(value["B"])).decode("ascii")}
        else:
            payload[name] = dict(value)
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str) -> Item:
    """Decode a cursor made by `encode_cursor` back into an `ExclusiveStartKey`.

    Decoding is strict: characters outside the base64 alphabet are rejected
    rather than skipped, and an empty key map is not a valid start key.

    Raises:
        InvalidCursorError: the cursor is not base64 JSON of a non-empty attribute map
    """
    try:
        payload = json.loads(base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True))
        if not isinstance(payload, dict) or not all(isinstance(v, dict) for v in payload.values()):
            raise InvalidCursorError("invalid cursor", reason="not an attribute map")
        if not payload:
            raise InvalidCursorError("invalid cursor", reason="empty start key")
        start_key: Item = {}
        for name, value in payload.items():
            if "B" in value:
                start_key[name] = {"B": base64.b64decode(value["B"], validate=True)}
            else:
                start_key[name] = value
        return start_key
    except (binascii.Error, UnicodeError, TypeError, ValueError) as e:
        raise InvalidCursorError("invalid cursor", reason=str(e)) from e


# ===========================================================================
# Projection
# ===========================================================================


def build_projection(attributes: Sequence[str], names: Dict[str, str]) -> Optional[str]:
    """Build a ProjectionExpression, registering name placeholders in `names`.

    Dotted paths address nested map members; every segment gets its own
    placeholder so reserved words never need escaping.

    Example:
        >>> names = {}
        >>> build_projection(["title", "info.rating"], names)
        '#p0, #p1.#p2'
    """
    if not attributes:
        return None
    assigned: Dict[str, str] = {}
    paths = []
    for path in attributes:
        segments = []
        for segment in path.split("."):
            if segment not in assigned:
                assigned[segment] = f"{PROJECTION_PLACEHOLDER}{len(assigned)}"
                names[assigned[segment]] = segment
            segments.append(assigned[segment])
        paths.append(".".join(segments))
    return ", ".join(paths)
