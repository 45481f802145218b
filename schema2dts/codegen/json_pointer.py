"""JSON Pointer (RFC 6901) helpers used for sub-schema extraction.

Pointers carried in a URI fragment are percent-encoded. `to_fragment` and
`canonical_fragment` produce the single encoded form used in schema ids;
`parse` decodes it again before navigating.
"""

from typing import Any
from urllib.parse import quote, unquote

from schema2dts.exceptions import ParseError

__all__ = (
    'canonical_fragment',
    'encode_token',
    'escape',
    'get',
    'parse',
    'to_fragment',
    'to_pointer',
    'unescape',
)

# sub-delims and pchar extras RFC 3986 allows unencoded in a fragment
_FRAGMENT_SAFE = ":@!$&'()*+,;=?"


def escape(token: str) -> str:
    return token.replace('~', '~0').replace('/', '~1')


def unescape(token: str) -> str:
    return token.replace('~1', '/').replace('~0', '~')


def encode_token(token: Any) -> str:
    """Escape a reference token and percent-encode it for a URI fragment."""
    return quote(escape(str(token)), safe=_FRAGMENT_SAFE)


def canonical_fragment(fragment: str) -> str:
    """Re-encode a fragment so equivalent spellings compare equal.

    `Pet%20Store` and `Pet Store` both become `Pet%20Store`.
    """
    return quote(unquote(fragment), safe='/' + _FRAGMENT_SAFE)


def parse(pointer: str) -> list[str]:
    """Split a pointer into unescaped reference tokens.

    A leading `#` marks the URI fragment form, which is percent-decoded
    first. The empty pointer and `#` both address the whole document.

    Raises:
        ParseError: If a non-empty pointer does not start with `/`.
    """
    if pointer.startswith('#'):
        pointer = unquote(pointer[1:])
    if not pointer:
        return []
    if not pointer.startswith('/'):
        raise ParseError(pointer, 'pointer must start with "/"')
    return [unescape(token) for token in pointer[1:].split('/')]


def to_pointer(tokens: list[str]) -> str:
    return ''.join('/' + escape(str(token)) for token in tokens)


def to_fragment(tokens: list[str]) -> str:
    """Join tokens into a percent-encoded pointer for use after `#`."""
    return ''.join('/' + encode_token(token) for token in tokens)


def get(content: Any, tokens: list[str], pointer: str | None = None) -> Any:
    """Follow reference tokens into a parsed JSON tree.

    Args:
        content: The document (dicts, lists and scalars).
        tokens: Tokens as returned by `parse`.
        pointer: Original pointer text, used for error messages.

    Returns:
        The value located at the pointer.

    Raises:
        ParseError: If any token does not name an existing member or index.
    """
    pointer = pointer if pointer is not None else to_pointer(tokens)
    current = content
    for token in tokens:
        if isinstance(current, dict):
            if token not in current:
                raise ParseError(pointer, f"member '{token}' not found")
            current = current[token]
        elif isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError):
                raise ParseError(pointer, f"index '{token}' out of range")
        else:
            raise ParseError(pointer, f"cannot descend into '{token}'")
    return current
