"""
URITemplate - parse once, expand many times.
"""

from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .compiler.ast_nodes import Expression, TemplateAST
from .compiler.parser import parse_template
from .config import get_settings
from .expander import expand_ast
from .validation import validate_uri_reference


class URITemplate:
    """
    A parsed URI Template.

    The template string is parsed on construction; a malformed template
    raises TemplateSyntaxError and no object is created. Instances are
    immutable and safe to expand from several threads at once.

    Example::

        t = URITemplate("https://api.example.com/users{/id}{?fields*}")
        t.expand(id=42, fields={"name": "n"})
        # 'https://api.example.com/users/42?name=n'
    """

    __slots__ = ("_template", "_ast")

    def __init__(self, template: str):
        self._template = template
        self._ast = parse_template(template)

    @property
    def template(self) -> str:
        """Original template text."""
        return self._template

    @property
    def ast(self) -> TemplateAST:
        return self._ast

    @property
    def expressions(self) -> Tuple[Expression, ...]:
        return self._ast.expressions

    @property
    def variable_names(self) -> FrozenSet[str]:
        """All distinct variable names referenced by the template."""
        return frozenset(self._ast.get_variable_names())

    def expand(
        self,
        values: Optional[Mapping] = None,
        *,
        strict: Optional[bool] = None,
        **kwargs: Any,
    ) -> str:
        """
        Expand the template.

        Args:
            values: Mapping of variable names to values
            strict: Validate the result as a URI reference (default from
                settings)
            **kwargs: Extra bindings, overriding entries in ``values``
                (variables named ``values`` or ``strict`` must go in the
                ``values`` mapping)

        Returns:
            Expanded string

        Raises:
            TemplateExpansionError: strict mode and the result is not a
                valid URI reference
        """
        bindings: Mapping = values if values is not None else {}
        if kwargs:
            bindings = {**bindings, **kwargs}

        result = expand_ast(self._ast, bindings)

        if strict is None:
            strict = get_settings().strict
        if strict:
            validate_uri_reference(result)
        return result

    def canonical(self) -> str:
        """Canonical re-serialization of the parsed structure."""
        return self._ast.canonical()

    def to_dict(self) -> Dict[str, Any]:
        return self._ast.to_dict()

    def __str__(self) -> str:
        return self._template

    def __repr__(self) -> str:
        return f"URITemplate({self._template!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URITemplate):
            return NotImplemented
        return self._template == other._template

    def __hash__(self) -> int:
        return hash(self._template)
