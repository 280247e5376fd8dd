"""
Variable bindings for ``uritpl expand``.

Bindings come from ``--var name=value`` options (repeating a name builds a
list) and from JSON or YAML files, which can also express maps.
"""

import json
from pathlib import Path
from typing import Any, Dict, Sequence

import yaml


class BindingsError(ValueError):
    """Raised when bindings cannot be read."""
    pass


def parse_assignments(assignments: Sequence[str]) -> Dict[str, Any]:
    """
    Turn ``name=value`` strings into bindings.

    Raises:
        BindingsError: an item has no ``=`` or an empty name
    """
    values: Dict[str, Any] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise BindingsError(f"Expected name=value, got '{item}'")

        if name not in values:
            values[name] = value
        elif isinstance(values[name], list):
            values[name].append(value)
        else:
            values[name] = [values[name], value]
    return values


def load_vars_file(path: Path) -> Dict[str, Any]:
    """
    Load bindings from a JSON or YAML file (chosen by suffix, JSON by default).

    Raises:
        BindingsError: unreadable file or a top-level value that is not a mapping
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        if Path(path).suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise BindingsError(f"Cannot read bindings from {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BindingsError(f"{path}: top-level value must be a mapping")
    return data
