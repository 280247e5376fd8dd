"""
Character classification for URI Template expansion.

RFC 3986 sets, looked up in O(1) through bitmask tables that cover the
contiguous ASCII range each set lives in. Code points outside a range are
simply not members of that set.
"""

from enum import Enum


class CharClass(str, Enum):
    """Classification of a single code point."""
    UNRESERVED = "unreserved"
    RESERVED = "reserved"
    OTHER = "other"


UNRESERVED_FIRST = 45   # "-"
UNRESERVED_LAST = 126   # "~"
UNRESERVED_MASK = (
    0xFFF01FFB,  # -.0123456789.......ABCDEFGHIJKL
    0xFFF43FFF,  # MNOPQRSTUVWXYZ...._.abcdefghijkl
    0x00023FFF,  # mnopqrstuvwxyz...~
)

RESERVED_FIRST = 33     # "!"
RESERVED_LAST = 93      # "]"
RESERVED_MASK = (
    0xD6004FED,  # !.#$.&'()*+,../..........:;.=.?@
    0x14000000,  # ..........................[.]
)

HEX_FIRST = 48          # "0"
HEX_LAST = 102          # "f"
HEX_MASK = (
    0x007E03FF,  # 0123456789.......ABCDEF
    0x007E0000,  # .................abcdef
)


def _check_mask(mask, index: int) -> bool:
    return (mask[index >> 5] >> (index & 31)) & 1 == 1


def is_unreserved(cp: int) -> bool:
    """ALPHA / DIGIT / "-" / "." / "_" / "~"."""
    return (
        UNRESERVED_FIRST <= cp <= UNRESERVED_LAST
        and _check_mask(UNRESERVED_MASK, cp - UNRESERVED_FIRST)
    )


def is_reserved(cp: int) -> bool:
    """gen-delims and sub-delims: ``:/?#[]@!$&'()*+,;=``."""
    return (
        RESERVED_FIRST <= cp <= RESERVED_LAST
        and _check_mask(RESERVED_MASK, cp - RESERVED_FIRST)
    )


def is_hex_digit(cp: int) -> bool:
    return HEX_FIRST <= cp <= HEX_LAST and _check_mask(HEX_MASK, cp - HEX_FIRST)


def classify(cp: int) -> CharClass:
    """Classify a code point as unreserved, reserved or neither."""
    if is_unreserved(cp):
        return CharClass.UNRESERVED
    if is_reserved(cp):
        return CharClass.RESERVED
    return CharClass.OTHER
