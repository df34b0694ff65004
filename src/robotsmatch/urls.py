# SPDX-License-Identifier: BSD-3-Clause

"""
URL helpers: extracting the part of a URL that robots.txt rules apply to,
and normalizing the escaping of rule patterns.

URLs passed to this package are expected to be percent-encoded already,
as described in RFC 3986. Patterns in robots.txt are written by humans
though, so they are normalized before matching: see L{escape_pattern}.
"""

from __future__ import annotations

import re

_PATH_START = re.compile(r"[/?;]")
_NEEDS_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}|[^\x00-\x7f]")


def path_of(url: str) -> str:
    """
    Extracts the path, parameters and query of a URL.

    The scheme, authority and fragment are dropped. The result always
    starts with C{/}; if C{url} has no path or cannot be made sense of,
    the result is C{/}.

    This does not use L{urllib.parse.urlsplit}, since a scheme-less
    C{example.com/a} should give C{/a} rather than the whole string.
    """

    # Initial two slashes are ignored.
    search_start = 2 if url.startswith("//") else 0

    protocol_end = url.find("://", search_start)
    early_path = _PATH_START.search(url, search_start)
    if early_path is not None and early_path.start() < protocol_end:
        # A path, parameter or query starts before "://",
        # so it does not separate a scheme.
        protocol_end = -1
    protocol_end = search_start if protocol_end == -1 else protocol_end + 3

    path_match = _PATH_START.search(url, protocol_end)
    if path_match is None:
        return "/"
    path_start = path_match.start()

    hash_pos = url.find("#", search_start)
    if hash_pos != -1 and hash_pos < path_start:
        return "/"
    path = url[path_start:] if hash_pos == -1 else url[path_start:hash_pos]
    return path if path.startswith("/") else "/" + path


def _octets(char: str) -> bytes:
    codepoint = ord(char)
    if 0xDC80 <= codepoint <= 0xDCFF:
        # Undecodable byte smuggled through by the "surrogateescape" handler.
        return bytes((codepoint - 0xDC00,))
    return char.encode("utf-8", "surrogatepass")


def _escape(match: re.Match[str]) -> str:
    text = match.group()
    if len(text) == 3:
        return text.upper()
    return "".join(f"%{octet:02X}" for octet in _octets(text))


def escape_pattern(pattern: str) -> str:
    """
    Canonicalizes the escaping of an C{allow}/C{disallow} pattern.

    Existing percent escapes get upper case hex digits and every
    non-ASCII character is replaced by its percent-encoded UTF-8 octets.
    For example C{/SanJoséSellers} becomes C{/SanJos%C3%A9Sellers}
    and C{%aa} becomes C{%AA}.
    """
    return _NEEDS_ESCAPE.sub(_escape, pattern)
