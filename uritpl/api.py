"""
Module-level convenience API.

Template strings passed here are parsed through the global template cache,
so repeated calls with the same template parse it only once.
"""

from collections.abc import Mapping
from typing import Any, FrozenSet, Optional, Union

from .cache import compile_template
from .template import URITemplate

TemplateLike = Union[str, URITemplate]


def _as_template(template: TemplateLike) -> URITemplate:
    if isinstance(template, URITemplate):
        return template
    return compile_template(template)


def parse(template: str) -> URITemplate:
    """Parse a template string.

    :raises TemplateSyntaxError: the string is not a valid URI Template
    """
    return compile_template(template)


def expand(
    template: TemplateLike,
    values: Optional[Mapping] = None,
    *,
    strict: Optional[bool] = None,
    **kwargs: Any,
) -> str:
    """Expand the template with the given values.

    Example::

        expand("https://api.example.com{/end}", {"end": "users"})
        expand("https://api.example.com{/end}", end="gists")

    Values passed as keyword arguments override entries in ``values``.
    Variables named ``values`` or ``strict`` can only be bound through the
    mapping, since those keywords are taken by the parameters.
    """
    return _as_template(template).expand(values, strict=strict, **kwargs)


def variable_names(template: TemplateLike) -> FrozenSet[str]:
    """All distinct variable names referenced by the template."""
    return _as_template(template).variable_names


def to_string(template: TemplateLike) -> str:
    """Canonical rendering of the parsed template."""
    return _as_template(template).canonical()
