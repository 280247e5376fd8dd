"""
Errors raised while parsing and expanding URI Templates.

Both concrete errors are ``ValueError`` subclasses, so callers that only
care about "bad input" can catch that.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..compiler.ast_nodes import Span


@dataclass(eq=False)
class TemplateDiagnostic:
    """Base class for template errors: message, source span and hints."""
    message: str
    span: Optional[Span] = None
    template: Optional[str] = None
    suggestions: List[str] = None

    def __post_init__(self):
        if self.suggestions is None:
            self.suggestions = []

    def __str__(self) -> str:
        return self.message

    def _location_lines(self) -> List[str]:
        if self.span is None:
            return []
        lines = [f"  --> {self.span}"]
        if self.template is not None:
            # Caret under the first offending character of its line
            source = self.template.split("\n")[self.span.line - 1]
            lines.append(f"   | {source}")
            lines.append(f"   | {' ' * (self.span.column - 1)}^")
        return lines

    def _suggestion_lines(self) -> List[str]:
        if not self.suggestions:
            return []
        return ["\nSuggestions:"] + [
            f"  {n}) {text}" for n, text in enumerate(self.suggestions, 1)
        ]

    def format(self) -> str:
        """Multi-line rendering for terminals."""
        header = f"{type(self).__name__}: {self.message}"
        return "\n".join([header, *self._location_lines(), *self._suggestion_lines()])


class TemplateSyntaxError(TemplateDiagnostic, ValueError):
    """Template text does not match the URI Template grammar."""
    pass


class TemplateExpansionError(TemplateDiagnostic, ValueError):
    """Expanded result is not a valid URI reference."""

    def __init__(self, message: str, uri: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.uri = uri

    def _location_lines(self) -> List[str]:
        return [f"  Result: {self.uri}"]
