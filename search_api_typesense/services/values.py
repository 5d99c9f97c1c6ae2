"""
Typesense data types and item value normalization
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable

from search_api_typesense.core.logging import logger

INT32_MASK = 0xFFFFFFFF

DATA_TYPE_PREFIX = "typesense_"

_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class FieldType(str, Enum):
    """Typesense field types supported by the backend"""

    AUTO = "auto"
    BOOL = "bool"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    BOOL_ARRAY = "bool[]"
    FLOAT_ARRAY = "float[]"
    INT32_ARRAY = "int32[]"
    INT64_ARRAY = "int64[]"
    STRING_ARRAY = "string[]"

    @property
    def is_array(self) -> bool:
        return self.value.endswith("[]")

    @property
    def element_type(self) -> "FieldType":
        """Scalar type of the array elements (the type itself for scalars)"""
        return FieldType(self.value[:-2]) if self.is_array else self


@dataclass(frozen=True)
class DataTypeInfo:
    """Host data type definition"""

    id: str
    label: str
    description: str
    fallback_type: str


DATA_TYPES: Dict[str, DataTypeInfo] = {
    info.id: info
    for info in [
        DataTypeInfo(
            "typesense_auto",
            "Typesense: auto",
            "Special type that automatically attempts to infer the data type based on the documents "
            "added to the collection. See automatic schema detection in the Typesense documentation.",
            "string",
        ),
        DataTypeInfo("typesense_bool", "Typesense: bool", "A boolean type.", "boolean"),
        DataTypeInfo("typesense_float", "Typesense: float", "Floating point / decimal numbers.", "decimal"),
        DataTypeInfo("typesense_int32", "Typesense: int32", "A 32 bit integer up to 2,147,483,647.", "integer"),
        DataTypeInfo("typesense_int64", "Typesense: int64", "A 64 bit integer.", "integer"),
        DataTypeInfo("typesense_string", "Typesense: string", "A string value.", "string"),
        DataTypeInfo("typesense_bool[]", "Typesense: bool[]", "An array of booleans.", "boolean"),
        DataTypeInfo("typesense_float[]", "Typesense: float[]", "An array of floating point numbers.", "decimal"),
        DataTypeInfo("typesense_int32[]", "Typesense: int32[]", "An array of 32 bit integers.", "integer"),
        DataTypeInfo("typesense_int64[]", "Typesense: int64[]", "An array of 64 bit integers.", "integer"),
        DataTypeInfo("typesense_string[]", "Typesense: string[]", "An array of strings.", "string"),
    ]
}

# Generic host data types and the Typesense type their values are sent as
HOST_TYPE_FALLBACKS: Dict[str, FieldType] = {
    "boolean": FieldType.BOOL,
    "decimal": FieldType.FLOAT,
    "integer": FieldType.INT32,
    "string": FieldType.STRING,
    "text": FieldType.STRING,
}

_EMPTY_VALUES: Dict[FieldType, Any] = {
    FieldType.AUTO: None,
    FieldType.BOOL: False,
    FieldType.FLOAT: 0.0,
    FieldType.INT32: 0,
    FieldType.INT64: 0,
    FieldType.STRING: "",
}


def resolve_field_type(host_type: str) -> FieldType:
    """
    Map a host data type id onto a Typesense field type.

    typesense_* ids map directly, generic host types through their fallback.
    Anything unknown is left to Typesense's automatic detection.
    """
    name = host_type[len(DATA_TYPE_PREFIX):] if host_type.startswith(DATA_TYPE_PREFIX) else host_type
    try:
        return FieldType(name)
    except ValueError:
        pass
    if name in HOST_TYPE_FALLBACKS:
        return HOST_TYPE_FALLBACKS[name]
    logger.debug(f"Unknown data type '{host_type}', sending values as auto")
    return FieldType.AUTO


def _numeric_prefix(text: str) -> float:
    # Leading number of a string, so "12abc" reads as 12
    match = _NUMERIC_PREFIX.match(text)
    return float(match.group()) if match else 0.0


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, (str, bytes)):
        text = value.decode(errors="replace") if isinstance(value, bytes) else value
        try:
            return int(text.strip())
        except ValueError:
            return _to_int(_to_float(text))
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (str, bytes)):
        text = value.decode(errors="replace") if isinstance(value, bytes) else value
        try:
            return float(text)
        except ValueError:
            return _numeric_prefix(text)
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def _to_bool(value: Any) -> bool:
    # "0" is the host's serialisation of FALSE
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return str(value)


def prepare_item_value(value: Any, field_type: FieldType) -> Any:
    """
    Coerce a single raw value to the representation Typesense expects.

    Coercion never fails; Typesense has the final say on validity.
    """
    field_type = field_type.element_type
    if field_type is FieldType.AUTO:
        return value
    if value is None:
        return _EMPTY_VALUES[field_type]
    if field_type is FieldType.BOOL:
        return _to_bool(value)
    if field_type is FieldType.FLOAT:
        return _to_float(value)
    if field_type is FieldType.INT32:
        # Wraps negative and oversized values into the unsigned 32 bit range
        return _to_int(value) & INT32_MASK
    if field_type is FieldType.INT64:
        return _to_int(value)
    return _to_string(value)


def normalize(values: Iterable[Any], field_type: FieldType) -> Any:
    """
    Normalize the raw values of one item field.

    An empty value list yields the type's empty value, never a missing
    field. Scalar types keep the last value; array types keep them all.
    """
    values = list(values)

    if field_type.is_array:
        return [prepare_item_value(value, field_type) for value in values]

    if not values:
        return _EMPTY_VALUES[field_type]

    if len(values) > 1:
        logger.debug(f"{len(values)} values for a single-valued {field_type.value} field, keeping the last")

    return prepare_item_value(values[-1], field_type)
