"""
uritpl - RFC 6570 URI Template parsing and expansion.

Provides:
- Formal grammar with a two-mode tokenizer and recursive-descent parser
- Immutable template AST (operators, variables, modifiers, spans)
- Expansion engine with explode/prefix modifiers and UTF-8 percent-encoding
- URI-reference validation of expansion results
- Thread-safe parsed-template cache
- Diagnostics with source spans and suggestions
"""

from .compiler.parser import TemplateParser, TemplateToken, Tokenizer, parse_template
from .compiler.ast_nodes import (
    Operator,
    ModifierKind,
    Modifier,
    Variable,
    Expression,
    TemplateAST,
    Span,
)
from .diagnostics.errors import (
    TemplateDiagnostic,
    TemplateSyntaxError,
    TemplateExpansionError,
)
from .charclass import is_unreserved, is_reserved, is_hex_digit
from .encoding import encode
from .expander import TemplateExpander, expand_ast
from .validation import validate_uri_reference, is_uri_reference
from .template import URITemplate
from .cache import TemplateCache, compile_template, get_global_cache, set_global_cache
from .config import Settings, SettingsLoader, ConfigError, get_settings, configure, reset_settings
from .api import parse, expand, variable_names, to_string

__version__ = "0.1.0"

__all__ = [
    # Parser
    "Tokenizer",
    "TemplateParser",
    "TemplateToken",
    "parse_template",
    # AST
    "Operator",
    "ModifierKind",
    "Modifier",
    "Variable",
    "Expression",
    "TemplateAST",
    "Span",
    # Diagnostics
    "TemplateDiagnostic",
    "TemplateSyntaxError",
    "TemplateExpansionError",
    # Encoding
    "is_unreserved",
    "is_reserved",
    "is_hex_digit",
    "encode",
    # Expansion
    "TemplateExpander",
    "expand_ast",
    "validate_uri_reference",
    "is_uri_reference",
    "URITemplate",
    # Caching
    "TemplateCache",
    "compile_template",
    "get_global_cache",
    "set_global_cache",
    # Settings
    "Settings",
    "SettingsLoader",
    "ConfigError",
    "get_settings",
    "configure",
    "reset_settings",
    # Convenience API
    "parse",
    "expand",
    "variable_names",
    "to_string",
]
