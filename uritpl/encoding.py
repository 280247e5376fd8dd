"""
Percent-encoding of expansion values and template literals.

Works over code points (Python ``str`` indexes), so prefix truncation and
the unreserved/reserved tests never see raw UTF-8 bytes. Bytes only appear
at the final escaping step.
"""

from typing import List, Optional

from .charclass import is_hex_digit, is_reserved, is_unreserved

HEX = "0123456789ABCDEF"

MAX_CODE_POINT = 0x10FFFF


def utf8_octets(cp: int) -> List[int]:
    """
    UTF-8 byte layout of a code point (1 to 4 octets).

    Surrogate code points get their plain 3-byte layout so that strings
    carrying lone surrogates still encode.

    Raises:
        ValueError: code point is negative or above U+10FFFF
    """
    if cp < 0 or cp > MAX_CODE_POINT:
        raise ValueError(f"Code point out of range: {cp:#x}")
    if cp < 0x80:
        return [cp]
    if cp < 0x800:
        return [0xC0 | (cp >> 6), 0x80 | (cp & 0x3F)]
    if cp < 0x10000:
        return [
            0xE0 | (cp >> 12),
            0x80 | ((cp >> 6) & 0x3F),
            0x80 | (cp & 0x3F),
        ]
    return [
        0xF0 | (cp >> 18),
        0x80 | ((cp >> 12) & 0x3F),
        0x80 | ((cp >> 6) & 0x3F),
        0x80 | (cp & 0x3F),
    ]


def pct_octet(octet: int) -> str:
    return "%" + HEX[octet >> 4] + HEX[octet & 15]


def _is_triplet(text: str, i: int, end: int) -> bool:
    return (
        text[i] == "%"
        and i + 2 < end
        and is_hex_digit(ord(text[i + 1]))
        and is_hex_digit(ord(text[i + 2]))
    )


def encode(
    text: str,
    allow_reserved: bool,
    start: int = 0,
    end: Optional[int] = None,
) -> str:
    """
    Percent-encode ``text[start:end]``.

    Unreserved characters (and reserved ones when ``allow_reserved``) are
    copied as-is, well-formed ``%XX`` triplets pass through unchanged and
    everything else becomes one ``%XX`` group per UTF-8 octet.

    Args:
        text: String to encode
        allow_reserved: Keep reserved characters literal
        start: First code point offset to encode
        end: Code point offset to stop at (default: end of text)

    Returns:
        Encoded string
    """
    if end is None or end > len(text):
        end = len(text)

    out: List[str] = []
    i = start
    while i < end:
        ch = text[i]
        cp = ord(ch)
        if is_unreserved(cp) or (allow_reserved and is_reserved(cp)):
            out.append(ch)
            i += 1
        elif _is_triplet(text, i, end):
            out.append(text[i:i + 3])
            i += 3
        else:
            out.extend(pct_octet(b) for b in utf8_octets(cp))
            i += 1
    return "".join(out)


def encode_literal(text: str) -> str:
    """Encode template literal text (reserved characters survive)."""
    return encode(text, True)
