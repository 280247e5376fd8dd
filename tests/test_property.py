"""
Property-based tests for uritpl using Hypothesis.

Tests invariants that should hold for all inputs:
- Canonical rendering reparses to the same structure
- Well-formed percent triplets pass through the encoder
- Prefix modifiers count code points
- Undefined values leave no trace, wherever they sit
- The parser fails only with TemplateSyntaxError
"""

from urllib.parse import unquote

from hypothesis import given, settings, strategies as st

from uritpl.charclass import is_reserved, is_unreserved
from uritpl.compiler.parser import parse_template
from uritpl.diagnostics.errors import TemplateSyntaxError
from uritpl.encoding import encode
from uritpl.expander import expand_ast


# ============================================================================
# Strategy Definitions
# ============================================================================

UNRESERVED = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._~"

operators = st.sampled_from(["", "+", "#", ".", "/", ";", "?", "&"])

names = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_0123456789", min_size=1, max_size=8)

modifiers = st.one_of(
    st.just(""),
    st.just("*"),
    st.integers(min_value=1, max_value=9999).map(lambda n: f":{n}"),
)

varspecs = st.builds(lambda name, mod: name + mod, names, modifiers)

expressions = st.builds(
    lambda op, specs: "{" + op + ",".join(specs) + "}",
    operators,
    st.lists(varspecs, min_size=1, max_size=4),
)

literals = st.text(alphabet=UNRESERVED + ":/?#[]@!$&'()*+,;= %é", max_size=10)

templates = st.builds(
    lambda parts, tail: "".join(lit + expr for lit, expr in parts) + tail,
    st.lists(st.tuples(literals, expressions), max_size=4),
    literals,
)

triplets = st.builds(
    lambda a, b: "%" + a + b,
    st.sampled_from("0123456789ABCDEFabcdef"),
    st.sampled_from("0123456789ABCDEFabcdef"),
)

encoded_texts = st.lists(
    st.one_of(st.text(alphabet=UNRESERVED, min_size=1, max_size=5), triplets),
    max_size=8,
).map("".join)

undefined_values = st.sampled_from([None, [], {}, [None], {"k": None}])

defined_values = st.one_of(
    st.text(max_size=6),
    st.lists(st.text(min_size=1, max_size=4), min_size=1, max_size=3),
    st.dictionaries(names, st.text(min_size=1, max_size=4), min_size=1, max_size=3),
)


# ============================================================================
# Parsing
# ============================================================================

@given(templates)
@settings(max_examples=200)
def test_canonical_reparses_to_same_structure(template):
    """Parsing the canonical rendering gives an equal template."""
    ast = parse_template(template)
    reparsed = parse_template(ast.canonical())
    assert reparsed.expressions == ast.expressions
    assert reparsed.canonical() == ast.canonical()


@given(templates)
def test_literal_spans_cover_template(template):
    """Literal spans and expression spans tile the template text."""
    ast = parse_template(template)
    covered = 0
    spans = list(ast.literal_spans())
    for (start, end), expr in zip(spans, ast.expressions):
        assert start == covered
        assert end == expr.start_index
        covered = expr.end_index
    assert spans[-1] == (covered, len(template))


@given(st.text(max_size=30))
@settings(max_examples=300)
def test_parser_fails_only_with_syntax_error(text):
    """Arbitrary text either parses or raises TemplateSyntaxError."""
    try:
        parse_template(text)
    except TemplateSyntaxError as e:
        assert e.template == text
        assert e.span is not None


# ============================================================================
# Encoding
# ============================================================================

@given(encoded_texts, st.booleans())
def test_triplets_pass_through(text, allow_reserved):
    """Text made of unreserved characters and triplets is left untouched."""
    assert encode(text, allow_reserved) == text


@given(st.text(max_size=20), st.booleans())
def test_encoding_emits_uri_characters(text, allow_reserved):
    """Encoded output uses only unreserved, reserved and '%' characters."""
    for ch in encode(text, allow_reserved):
        assert is_unreserved(ord(ch)) or is_reserved(ord(ch)) or ch == "%"


@given(st.text(max_size=20))
def test_encoding_is_reversible(text):
    """Percent-decoding undoes encoding when the input has no '%'."""
    if "%" in text:
        text = text.replace("%", "")
    assert unquote(encode(text, False)) == text


# ============================================================================
# Expansion
# ============================================================================

@given(st.text(max_size=20), st.integers(min_value=1, max_value=25))
def test_prefix_counts_code_points(value, length):
    """A :N prefix takes the first N code points before encoding."""
    ast = parse_template("{v:%d}" % length)
    result = expand_ast(ast, {"v": value})
    assert result == encode(value[:length], False)
    if "%" not in value:
        assert unquote(result) == value[:length]


@given(
    operators,
    st.lists(st.tuples(st.booleans(), defined_values, undefined_values), min_size=1, max_size=5),
    st.booleans(),
)
def test_undefined_leaves_no_trace(op, slots, explode):
    """Dropping undefined variables from the template changes nothing."""
    values = {}
    all_specs = []
    defined_specs = []
    star = "*" if explode else ""
    for i, (is_defined, defined, undefined) in enumerate(slots):
        name = f"v{i}"
        all_specs.append(name + star)
        if is_defined:
            values[name] = defined
            defined_specs.append(name + star)
        else:
            values[name] = undefined

    full = expand_ast(parse_template("{" + op + ",".join(all_specs) + "}"), values)
    if defined_specs:
        expected = expand_ast(
            parse_template("{" + op + ",".join(defined_specs) + "}"), values
        )
    else:
        expected = ""
    assert full == expected
