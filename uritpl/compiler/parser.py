"""
Tokenizer and parser for URI Templates.

The tokenizer runs in two modes: literal text outside braces and
expression syntax inside them. The parser is a recursive descent over the
resulting token stream. Any mismatch aborts the whole parse with a single
TemplateSyntaxError; there is no error recovery.
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .ast_nodes import (
    Expression,
    Modifier,
    Operator,
    Span,
    TemplateAST,
    Variable,
)
from ..diagnostics.errors import TemplateSyntaxError
from ..grammar import (
    MAX_PREFIX_DIGITS,
    MAX_PREFIX_LENGTH,
    OPERATOR_SYMBOLS,
    RESERVED_OPERATORS,
)

logger = logging.getLogger("uritpl.parser")

VARCHARS = frozenset(string.ascii_letters + string.digits + "_")
HEXDIGITS = frozenset(string.hexdigits)


class TokenType(str, Enum):
    """Token types for the lexer."""
    LITERAL = "LITERAL"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    OPERATOR = "OPERATOR"
    VARNAME = "VARNAME"
    COMMA = "COMMA"
    STAR = "STAR"
    COLON = "COLON"
    NUMBER = "NUMBER"
    EOF = "EOF"


class LexMode(str, Enum):
    """Tokenizer mode."""
    LITERAL = "literal"
    EXPRESSION = "expression"


@dataclass
class TemplateToken:
    """A lexical token with position information."""
    type: TokenType
    value: Any
    span: Span

    def __repr__(self) -> str:
        return f"{self.type.value}('{self.value}') at {self.span}"


class Tokenizer:
    """Tokenizer for URI templates."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.mode = LexMode.LITERAL
        self.tokens: List[TemplateToken] = []
        self._expr_start: Optional[Span] = None

    def error(self, message: str, suggestions: Optional[List[str]] = None) -> TemplateSyntaxError:
        """Create syntax error at current position."""
        return TemplateSyntaxError(
            message=message,
            span=Span(self.pos, self.pos + 1, self.line, self.column),
            template=self.source,
            suggestions=suggestions,
        )

    def peek(self, offset: int = 0) -> Optional[str]:
        """Peek at character without consuming."""
        pos = self.pos + offset
        return self.source[pos] if pos < len(self.source) else None

    def advance(self) -> Optional[str]:
        """Consume and return next character."""
        if self.pos >= len(self.source):
            return None
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def emit(self, token_type: TokenType, value: Any, start: int, line: int, column: int):
        self.tokens.append(TemplateToken(
            token_type,
            value,
            Span(start, self.pos, line, column),
        ))

    def read_literal(self) -> str:
        """Read literal text up to the next opening brace."""
        start = self.pos
        while self.peek() is not None and self.peek() != "{":
            self.advance()
        return self.source[start:self.pos]

    def read_varchars(self) -> int:
        """Read varchar+ (letters, digits, underscore, pct-encoded)."""
        count = 0
        while True:
            ch = self.peek()
            if ch is not None and ch in VARCHARS:
                self.advance()
            elif ch == "%":
                if not (self.peek(1) in HEXDIGITS and self.peek(2) in HEXDIGITS):
                    raise self.error(
                        "Malformed percent-encoding in variable name",
                        ["Use '%' followed by two hex digits, e.g. %20"],
                    )
                self.advance()
                self.advance()
                self.advance()
            else:
                return count
            count += 1

    def read_varname(self) -> str:
        """Read varname: varchar+ ( "." varchar+ )*."""
        start = self.pos
        if not self.read_varchars():
            raise self.error("Expected variable name")

        while self.peek() == ".":
            self.advance()
            if not self.read_varchars():
                raise self.error(
                    "Dots in a variable name must separate name characters",
                    [f"Remove the stray '.' from '{self.source[start:self.pos]}'"],
                )

        return self.source[start:self.pos]

    def read_number(self) -> str:
        """Read a run of decimal digits."""
        start = self.pos
        while self.peek() is not None and self.peek() in string.digits:
            self.advance()
        return self.source[start:self.pos]

    def tokenize(self) -> List[TemplateToken]:
        """Tokenize the source into tokens."""
        self.tokens = []
        self.mode = LexMode.LITERAL
        expression_start = False

        while self.pos < len(self.source):
            start_pos = self.pos
            start_line = self.line
            start_col = self.column

            ch = self.peek()

            if self.mode is LexMode.LITERAL:
                if ch == "{":
                    self.advance()
                    self.emit(TokenType.LBRACE, "{", start_pos, start_line, start_col)
                    self._expr_start = self.tokens[-1].span
                    self.mode = LexMode.EXPRESSION
                    expression_start = True
                else:
                    value = self.read_literal()
                    self.emit(TokenType.LITERAL, value, start_pos, start_line, start_col)
                continue

            at_start, expression_start = expression_start, False

            if at_start and ch in OPERATOR_SYMBOLS:
                self.advance()
                self.emit(TokenType.OPERATOR, ch, start_pos, start_line, start_col)
            elif at_start and ch in RESERVED_OPERATORS:
                raise self.error(
                    f"Operator '{ch}' is reserved for future extensions",
                    [f"Use one of: {' '.join(OPERATOR_SYMBOLS)}"],
                )
            elif ch == "}":
                self.advance()
                self.emit(TokenType.RBRACE, "}", start_pos, start_line, start_col)
                self.mode = LexMode.LITERAL
            elif ch == ",":
                self.advance()
                self.emit(TokenType.COMMA, ",", start_pos, start_line, start_col)
            elif ch == "*":
                self.advance()
                self.emit(TokenType.STAR, "*", start_pos, start_line, start_col)
            elif ch == ":":
                self.advance()
                self.emit(TokenType.COLON, ":", start_pos, start_line, start_col)
                if self.peek() is not None and self.peek() in string.digits:
                    num_pos, num_line, num_col = self.pos, self.line, self.column
                    value = self.read_number()
                    self.emit(TokenType.NUMBER, value, num_pos, num_line, num_col)
            elif ch in VARCHARS or ch == "%":
                value = self.read_varname()
                self.emit(TokenType.VARNAME, value, start_pos, start_line, start_col)
            elif ch == "{":
                raise self.error("Nested '{' inside expression")
            elif ch in " \t\r\n":
                raise self.error("Whitespace is not allowed inside an expression")
            else:
                raise self.error(f"Unexpected character '{ch}' in expression")

        if self.mode is LexMode.EXPRESSION:
            span = self._expr_start
            raise TemplateSyntaxError(
                message="Unterminated expression",
                span=span,
                template=self.source,
                suggestions=["Add a closing '}'"],
            )

        # Add EOF token
        self.tokens.append(TemplateToken(
            TokenType.EOF,
            None,
            Span(self.pos, self.pos, self.line, self.column)
        ))

        return self.tokens


class TemplateParser:
    """Parser for URI templates following the RFC 6570 grammar."""

    def __init__(self, tokens: List[TemplateToken], source: Optional[str] = None):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def error(self, message: str, suggestions: Optional[List[str]] = None) -> TemplateSyntaxError:
        """Create syntax error at current token."""
        token = self.current()
        return TemplateSyntaxError(
            message=message,
            span=token.span,
            template=self.source,
            suggestions=suggestions,
        )

    def current(self) -> TemplateToken:
        """Get current token."""
        return self.tokens[self.pos] if self.pos < len(self.tokens) else self.tokens[-1]

    def advance(self) -> TemplateToken:
        """Consume and return current token."""
        token = self.current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def expect(self, token_type: TokenType, message: Optional[str] = None) -> TemplateToken:
        """Consume token of expected type or error."""
        token = self.current()
        if token.type != token_type:
            raise self.error(message or f"Expected {token_type.value}, got {token.type.value}")
        return self.advance()

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current().type in token_types

    def parse(self, raw: str) -> TemplateAST:
        """Parse tokens into AST."""
        expressions = []

        while not self.match(TokenType.EOF):
            if self.match(TokenType.LITERAL):
                self.advance()
            elif self.match(TokenType.LBRACE):
                expressions.append(self.parse_expression())
            else:
                raise self.error(f"Unexpected token: {self.current()}")

        return TemplateAST(raw=raw, expressions=tuple(expressions))

    def parse_expression(self) -> Expression:
        """Parse expression "{" [operator] variable-list "}"."""
        start = self.expect(TokenType.LBRACE).span

        operator = Operator.NONE
        if self.match(TokenType.OPERATOR):
            operator = Operator.from_symbol(self.advance().value)

        variables = self.parse_variable_list()

        end = self.expect(
            TokenType.RBRACE,
            f"Expected ',' or '}}' after variable, got {self.current().type.value}",
        ).span

        return Expression(
            operator=operator,
            variables=tuple(variables),
            span=Span(start.start, end.end, start.line, start.column),
        )

    def parse_variable_list(self) -> List[Variable]:
        """Parse comma-separated variable specifications."""
        if self.match(TokenType.RBRACE):
            raise self.error("Empty variable list", ["Name at least one variable, e.g. {var}"])

        variables = [self.parse_varspec()]
        while self.match(TokenType.COMMA):
            self.advance()
            variables.append(self.parse_varspec())

        return variables

    def parse_varspec(self) -> Variable:
        """Parse varname [ "*" | ":" max-length ]."""
        name = self.expect(TokenType.VARNAME, "Expected variable name").value

        if self.match(TokenType.STAR):
            self.advance()
            return Variable(name, Modifier.EXPLODE)

        if self.match(TokenType.COLON):
            self.advance()
            token = self.expect(TokenType.NUMBER, "Expected prefix length after ':'")
            digits = token.value
            if digits.startswith("0"):
                raise TemplateSyntaxError(
                    message=f"Prefix length must start with 1-9, got '{digits}'",
                    span=token.span,
                    template=self.source,
                )
            if len(digits) > MAX_PREFIX_DIGITS:
                raise TemplateSyntaxError(
                    message=f"Prefix length has more than {MAX_PREFIX_DIGITS} digits: '{digits}'",
                    span=token.span,
                    template=self.source,
                    suggestions=[f"Use a prefix length of at most {MAX_PREFIX_LENGTH}"],
                )
            return Variable(name, Modifier.prefix(int(digits)))

        return Variable(name)


def parse_template(source: str) -> TemplateAST:
    """Parse a URI template into an AST."""
    if not isinstance(source, str):
        raise TypeError(f"Template must be a string, got {type(source).__name__}")
    tokenizer = Tokenizer(source)
    tokens = tokenizer.tokenize()
    parser = TemplateParser(tokens, source)
    ast = parser.parse(source)
    logger.debug(f"Parsed template {source!r}: {len(ast.expressions)} expression(s)")
    return ast
