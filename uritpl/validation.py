"""
URI-reference syntax validation (RFC 3986, section 4.1).

Used as the post-condition of strict expansion: every character the
encoder emits is legal somewhere in a URI, but literal template text can
still place reserved characters where the URI grammar forbids them
(a second ``#``, brackets outside an IP literal, a bad scheme, ...).
"""

import re
from typing import Optional

from .diagnostics.errors import TemplateExpansionError

# RFC 3986 appendix B
_SPLIT_RE = re.compile(
    r"^(?:(?P<scheme>[^:/?#]+):)?"
    r"(?://(?P<authority>[^/?#]*))?"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?$",
    re.DOTALL,
)

_UNRESERVED = r"A-Za-z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="
_PCT = r"%[0-9A-Fa-f]{2}"
_PCHAR = rf"(?:[{_UNRESERVED}{_SUB_DELIMS}:@]|{_PCT})"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_USERINFO_RE = re.compile(rf"^(?:[{_UNRESERVED}{_SUB_DELIMS}:]|{_PCT})*$")
_REG_NAME_RE = re.compile(rf"^(?:[{_UNRESERVED}{_SUB_DELIMS}]|{_PCT})*$")
_IP_LITERAL_RE = re.compile(
    rf"^\[(?:[0-9A-Fa-f:.]+|[vV][0-9A-Fa-f]+\.[{_UNRESERVED}{_SUB_DELIMS}:]+)\]$"
)
_PORT_RE = re.compile(r"^[0-9]*$")
_PATH_RE = re.compile(rf"^(?:{_PCHAR}|/)*$")
_QUERY_RE = re.compile(rf"^(?:{_PCHAR}|[/?])*$")


def _invalid(text: str, component: str, detail: Optional[str] = None) -> TemplateExpansionError:
    message = f"Expanded result is not a valid URI reference: invalid {component}"
    if detail:
        message += f" ({detail})"
    return TemplateExpansionError(message, uri=text)


def _check_authority(text: str, authority: str):
    userinfo, at, host_port = authority.partition("@")
    if not at:
        userinfo, host_port = "", authority
    elif not _USERINFO_RE.match(userinfo):
        raise _invalid(text, "userinfo", userinfo)

    if host_port.startswith("["):
        close = host_port.find("]")
        if close < 0:
            raise _invalid(text, "host", "unterminated IP literal")
        host, rest = host_port[:close + 1], host_port[close + 1:]
        if not _IP_LITERAL_RE.match(host):
            raise _invalid(text, "host", host)
        if rest and not rest.startswith(":"):
            raise _invalid(text, "authority", authority)
        port = rest[1:]
    else:
        host, _, port = host_port.partition(":")
        if not _REG_NAME_RE.match(host):
            raise _invalid(text, "host", host)

    if not _PORT_RE.match(port):
        raise _invalid(text, "port", port)


def validate_uri_reference(text: str) -> str:
    """
    Check that ``text`` is a URI reference.

    Returns:
        The text unchanged

    Raises:
        TemplateExpansionError: text violates RFC 3986 syntax
    """
    match = _SPLIT_RE.match(text)
    if match is None:
        raise _invalid(text, "structure")

    scheme = match.group("scheme")
    authority = match.group("authority")
    path = match.group("path")
    query = match.group("query")
    fragment = match.group("fragment")

    if scheme is not None and not _SCHEME_RE.match(scheme):
        raise _invalid(text, "scheme", scheme)

    if authority is not None:
        _check_authority(text, authority)

    if not _PATH_RE.match(path):
        raise _invalid(text, "path", path)

    if scheme is None and authority is None:
        first_segment = path.split("/", 1)[0]
        if ":" in first_segment:
            raise _invalid(text, "path", "':' in the first segment of a relative path")

    if query is not None and not _QUERY_RE.match(query):
        raise _invalid(text, "query", query)

    if fragment is not None and not _QUERY_RE.match(fragment):
        raise _invalid(text, "fragment", fragment)

    return text


def is_uri_reference(text: str) -> bool:
    try:
        validate_uri_reference(text)
    except TemplateExpansionError:
        return False
    return True
