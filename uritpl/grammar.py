"""
Formal grammar for URI Templates (RFC 6570, level 4).

Grammar Rules
=============

<template>      ::= ( <literals> | <expression> )*
<literals>      ::= any character except "{"
<expression>    ::= "{" [ <operator> ] <variable-list> "}"
<operator>      ::= "+" | "#" | "." | "/" | ";" | "?" | "&"
<variable-list> ::= <varspec> ( "," <varspec> )*
<varspec>       ::= <varname> [ <modifier> ]
<varname>       ::= <varchar> ( [ "." ] <varchar> )*
<varchar>       ::= ALPHA | DIGIT | "_" | <pct-encoded>
<modifier>      ::= <prefix> | <explode>
<prefix>        ::= ":" <max-length>
<max-length>    ::= %x31-39 0*3DIGIT
<explode>       ::= "*"

Operators
=========
  op    name                  first   sep   named   empty-value   allow
  ----  --------------------  ------  ----  ------  ------------  --------
  none  simple                ""      ","   no      ""            U
  +     reserved              ""      ","   no      ""            U+R
  #     fragment              "#"     ","   no      ""            U+R
  .     label                 "."     "."   no      ""            U
  /     path segment          "/"     "/"   no      ""            U
  ;     path-style parameter  ";"     ";"   yes     ""            U
  ?     form-style query      "?"     "&"   yes     "="           U
  &     query continuation    "&"     "&"   yes     "="           U

Template Examples
=================
{var}                         # value
{+path}/here                  # /foo/bar/here
{#x,hello,y}                  # #1024,Hello%20World!,768
X{.list*}                     # X.red.green.blue
{/var:1,var}                  # /v/value
{;x,y,empty}                  # ;x=1024;y=768;empty
{?x,y,empty}                  # ?x=1024&y=768&empty=
?fixed=yes{&x}                # ?fixed=yes&x=1024
"""

EBNF_GRAMMAR = """
template       = ( literals | expression )*
literals       = ? any character except "{" ?
expression     = "{" [ operator ] variable_list "}"
operator       = "+" | "#" | "." | "/" | ";" | "?" | "&"
variable_list  = varspec ( "," varspec )*
varspec        = varname [ modifier ]
varname        = varchar ( [ "." ] varchar )*
varchar        = ALPHA | DIGIT | "_" | pct_encoded
modifier       = prefix | explode
prefix         = ":" max_length
max_length     = %x31-39 0*3DIGIT
explode        = "*"
"""

# Token types for the lexer
TOKEN_TYPES = [
    "LITERAL",         # run of literal characters
    "LBRACE",          # {
    "RBRACE",          # }
    "OPERATOR",        # + # . / ; ? &
    "VARNAME",         # variable name
    "COMMA",           # ,
    "STAR",            # *
    "COLON",           # :
    "NUMBER",          # prefix length digits
    "EOF",             # end of input
]

# Operator symbols accepted after "{"
OPERATOR_SYMBOLS = "+#./;?&"

# Operator symbols RFC 6570 keeps for future extensions
RESERVED_OPERATORS = "=,!@|"

# Maximum number of digits in a prefix modifier
MAX_PREFIX_DIGITS = 4

# Largest prefix length the grammar can express
MAX_PREFIX_LENGTH = 10 ** MAX_PREFIX_DIGITS - 1
