"""Compiler package for URI Templates."""

from .parser import TemplateParser, TemplateToken, parse_template
from .ast_nodes import *

__all__ = [
    "TemplateParser",
    "TemplateToken",
    "parse_template",
    "Operator",
    "ModifierKind",
    "Modifier",
    "Variable",
    "Expression",
    "TemplateAST",
    "Span",
]
