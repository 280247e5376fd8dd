"""
Template expansion engine.

Walks a parsed template, copying literal spans (reserved characters kept)
and expanding each expression according to its operator:

- the first defined variable is preceded by the operator prefix, later
  ones by the operator separator; undefined variables emit nothing
- named operators (``;`` ``?`` ``&``) render ``name=value``, query-style
  ones keep the ``=`` even for empty values
- ``+`` and ``#`` keep reserved characters, every other operator
  percent-encodes them

Expansion is a pure function of the AST and the bindings; each call uses
its own buffer so a single expander may be shared between threads.
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from .compiler.ast_nodes import Expression, Operator, TemplateAST, Variable
from .encoding import encode, encode_literal
from .values import (
    ValueKind,
    classify,
    defined_items,
    defined_pairs,
    normalize,
    to_text,
)


class TemplateExpander:
    """Expands parsed templates against variable bindings."""

    def expand(self, ast: TemplateAST, values: Optional[Mapping] = None) -> str:
        """
        Expand a template.

        Args:
            ast: Parsed template
            values: Mapping of variable name to value; unknown names and
                ``None`` values are undefined

        Returns:
            Expanded URI reference text
        """
        values = values if values is not None else {}

        if not ast.expressions:
            return encode_literal(ast.raw)

        buf: List[str] = []
        prev_end = 0
        for expr in ast.expressions:
            # Intervening literal characters
            buf.append(encode(ast.raw, True, prev_end, expr.start_index))
            self._expand_expression(buf, expr, values)
            prev_end = expr.end_index

        buf.append(encode(ast.raw, True, prev_end, len(ast.raw)))
        return "".join(buf)

    def expand_expression(self, expr: Expression, values: Mapping) -> str:
        """Expand a single expression on its own."""
        buf: List[str] = []
        self._expand_expression(buf, expr, values)
        return "".join(buf)

    def _expand_expression(self, buf: List[str], expr: Expression, values: Mapping):
        op = expr.operator
        first = True
        for var in expr.variables:
            value = normalize(values.get(var.name))
            kind = classify(value)
            if kind is ValueKind.UNDEFINED:
                continue

            buf.append(op.prefix if first else op.separator)
            first = False
            self._expand_variable(buf, op, var, value, kind)

    def _expand_variable(
        self, buf: List[str], op: Operator, var: Variable, value: Any, kind: ValueKind
    ):
        named = op.named
        query = op.query
        allow_reserved = op.allow_reserved
        separator = op.separator

        if kind is ValueKind.MAPPING:
            pairs = defined_pairs(value)
            if var.explode:
                force = query if named else True
                self._append_pairs(buf, pairs, "=", force, separator, allow_reserved)
            else:
                if named:
                    buf.append(encode_literal(var.name))
                    buf.append("=")
                self._append_pairs(buf, pairs, ",", True, ",", allow_reserved)

        elif kind is ValueKind.SEQUENCE:
            items = defined_items(value)
            if var.explode:
                name = var.name if named else None
                self._append_items(buf, items, name, query, separator, allow_reserved)
            else:
                if named:
                    buf.append(encode_literal(var.name))
                    buf.append("=")
                self._append_items(buf, items, None, False, ",", allow_reserved)

        else:
            text = to_text(value)
            if named:
                buf.append(encode_literal(var.name))
                if query or text:
                    buf.append("=")
            end = var.max_length if var.max_length > 0 else None
            buf.append(encode(text, allow_reserved, 0, end))

    @staticmethod
    def _append_items(
        buf: List[str],
        items: List[Any],
        name: Optional[str],
        force_equals: bool,
        separator: str,
        allow_reserved: bool,
    ):
        for i, item in enumerate(items):
            if i:
                buf.append(separator)
            text = to_text(item)
            if name is not None:
                buf.append(encode_literal(name))
                if force_equals or text:
                    buf.append("=")
            buf.append(encode(text, allow_reserved))

    @staticmethod
    def _append_pairs(
        buf: List[str],
        pairs: List[Tuple[str, Any]],
        value_separator: str,
        force_separator: bool,
        pair_separator: str,
        allow_reserved: bool,
    ):
        for i, (key, item) in enumerate(pairs):
            if i:
                buf.append(pair_separator)
            buf.append(encode(key, False))
            text = to_text(item)
            if force_separator or text:
                buf.append(value_separator)
            buf.append(encode(text, allow_reserved))


_default_expander = TemplateExpander()


def expand_ast(ast: TemplateAST, values: Optional[Mapping] = None) -> str:
    """Expand a parsed template with the shared expander."""
    return _default_expander.expand(ast, values)
