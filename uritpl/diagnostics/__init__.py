"""Diagnostics package."""

from .errors import (
    TemplateDiagnostic,
    TemplateSyntaxError,
    TemplateExpansionError,
)

__all__ = [
    "TemplateDiagnostic",
    "TemplateSyntaxError",
    "TemplateExpansionError",
]
