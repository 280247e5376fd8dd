"""
Variable values accepted by the expansion engine.

A binding is one of:
- undefined: missing, ``None``, an empty/all-undefined sequence or mapping
- scalar: anything else that is not a collection, rendered with ``str()``
  (booleans render as ``true``/``false``)
- sequence: any non-string iterable that is not a mapping
- mapping: any ``collections.abc.Mapping`` of key to value
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, List, Tuple


class ValueKind(str, Enum):
    """Shape of a bound value."""
    UNDEFINED = "undefined"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def is_sequence(value: Any) -> bool:
    return (
        isinstance(value, Iterable)
        and not isinstance(value, (str, bytes, bytearray, Mapping))
    )


def is_undefined(value: Any) -> bool:
    """Whether a value contributes nothing to an expansion."""
    if value is None:
        return True
    if isinstance(value, Mapping):
        return all(is_undefined(v) for v in value.values())
    if is_sequence(value):
        return all(is_undefined(item) for item in value)
    return False


def classify(value: Any) -> ValueKind:
    if is_undefined(value):
        return ValueKind.UNDEFINED
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if is_sequence(value):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def to_text(value: Any) -> str:
    """Render a scalar value as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def defined_items(value: Iterable) -> List[Any]:
    """Elements of a sequence that are not undefined."""
    return [item for item in value if not is_undefined(item)]


def defined_pairs(value: Mapping) -> List[Tuple[str, Any]]:
    """(key, value) pairs of a mapping whose value is not undefined."""
    return [(to_text(k), v) for k, v in value.items() if not is_undefined(v)]


def normalize(value: Any) -> Any:
    """
    Materialize one-shot iterables so a value can be inspected twice.

    Generators and iterators become lists, at any nesting depth; mappings
    holding them are copied into a dict. Values without one-shot parts are
    returned as-is.
    """
    if isinstance(value, Mapping):
        items = {k: normalize(v) for k, v in value.items()}
        if all(items[k] is v for k, v in value.items()):
            return value
        return items
    if is_sequence(value):
        if not isinstance(value, (list, tuple)):
            return [normalize(item) for item in value]
        items = [normalize(item) for item in value]
        if all(new is old for new, old in zip(items, value)):
            return value
        return items
    return value
