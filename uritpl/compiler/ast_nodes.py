"""
AST node definitions for URI Templates.

These nodes represent the parsed structure of a template. All of them are
immutable once the parser has built them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class Operator(Enum):
    """
    Expression operator.

    Each member carries the symbol that introduces it inside ``{...}``
    (empty for NONE) and the separator placed between expanded values.
    """
    NONE = ("", ",")
    RESERVED = ("+", ",")
    FRAGMENT = ("#", ",")
    LABEL = (".", ".")
    PATH = ("/", "/")
    MATRIX = (";", ";")
    QUERY = ("?", "&")
    QUERY_CONTINUATION = ("&", "&")

    def __init__(self, symbol: str, separator: str):
        self.symbol = symbol
        self.separator = separator

    @property
    def named(self) -> bool:
        """Values are emitted as ``name=value`` pairs."""
        return self in (Operator.MATRIX, Operator.QUERY, Operator.QUERY_CONTINUATION)

    @property
    def query(self) -> bool:
        """Form-style: an empty value still gets its ``=``."""
        return self in (Operator.QUERY, Operator.QUERY_CONTINUATION)

    @property
    def allow_reserved(self) -> bool:
        return self in (Operator.RESERVED, Operator.FRAGMENT)

    @property
    def prefix(self) -> str:
        """Text emitted before the first defined value."""
        if self in (Operator.NONE, Operator.RESERVED):
            return ""
        return self.symbol

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        for op in cls:
            if op.symbol and op.symbol == symbol:
                return op
        raise ValueError(f"Unknown operator symbol: {symbol!r}")


class ModifierKind(str, Enum):
    """Kind of variable modifier."""
    NONE = "none"
    EXPLODE = "explode"
    PREFIX = "prefix"


@dataclass(frozen=True)
class Span:
    """Source span for diagnostics, as a half-open [start, end) range."""
    start: int
    end: int
    line: int = 1
    column: int = 1

    def __repr__(self) -> str:
        return f"Line {self.line}:{self.column} (pos {self.start}-{self.end})"


@dataclass(frozen=True)
class Modifier:
    """Variable modifier: none, explode (``*``) or prefix (``:N``)."""
    kind: ModifierKind = ModifierKind.NONE
    max_length: int = 0

    @classmethod
    def prefix(cls, max_length: int) -> "Modifier":
        if max_length <= 0:
            raise ValueError(f"Prefix length must be positive, got {max_length}")
        return cls(ModifierKind.PREFIX, max_length)

    def __str__(self) -> str:
        if self.kind is ModifierKind.EXPLODE:
            return "*"
        if self.kind is ModifierKind.PREFIX:
            return f":{self.max_length}"
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "max_length": self.max_length,
        }


Modifier.NONE = Modifier(ModifierKind.NONE)
Modifier.EXPLODE = Modifier(ModifierKind.EXPLODE)


@dataclass(frozen=True)
class Variable:
    """A variable reference: name plus modifier."""
    name: str
    modifier: Modifier = Modifier.NONE

    def __post_init__(self):
        if not self.name:
            raise ValueError("Variable name must not be empty")

    @property
    def has_modifier(self) -> bool:
        return self.modifier.kind is not ModifierKind.NONE

    @property
    def explode(self) -> bool:
        return self.modifier.kind is ModifierKind.EXPLODE

    @property
    def max_length(self) -> int:
        """Prefix length, 0 when the value is not truncated."""
        return self.modifier.max_length

    def __str__(self) -> str:
        return f"{self.name}{self.modifier}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "modifier": self.modifier.to_dict(),
        }


@dataclass(frozen=True)
class Expression:
    """One ``{...}`` unit: operator plus a non-empty variable list."""
    operator: Operator
    variables: Tuple[Variable, ...]
    span: Optional[Span] = field(default=None, compare=False)

    @property
    def start_index(self) -> int:
        """Offset of the opening brace."""
        return self.span.start if self.span else 0

    @property
    def end_index(self) -> int:
        """Offset just past the closing brace."""
        return self.span.end if self.span else 0

    def __str__(self) -> str:
        specs = ",".join(str(var) for var in self.variables)
        return f"{{{self.operator.symbol}{specs}}}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operator": self.operator.name,
            "symbol": self.operator.symbol,
            "variables": [v.to_dict() for v in self.variables],
            "span": {"start": self.span.start, "end": self.span.end} if self.span else None,
        }


@dataclass(frozen=True)
class TemplateAST:
    """Complete AST for a URI template."""
    raw: str
    expressions: Tuple[Expression, ...] = ()

    def literal_spans(self) -> Iterator[Tuple[int, int]]:
        """Yield the [start, end) ranges of literal text, including empty ones."""
        prev_end = 0
        for expr in self.expressions:
            yield prev_end, expr.start_index
            prev_end = expr.end_index
        yield prev_end, len(self.raw)

    def get_variable_names(self) -> List[str]:
        """Distinct variable names in order of first appearance."""
        names: List[str] = []
        for expr in self.expressions:
            for var in expr.variables:
                if var.name not in names:
                    names.append(var.name)
        return names

    def canonical(self) -> str:
        """Re-serialize literals and expressions."""
        parts = []
        prev_end = 0
        for expr in self.expressions:
            parts.append(self.raw[prev_end:expr.start_index])
            parts.append(str(expr))
            prev_end = expr.end_index
        parts.append(self.raw[prev_end:])
        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "raw": self.raw,
            "expressions": [e.to_dict() for e in self.expressions],
            "variables": self.get_variable_names(),
        }
