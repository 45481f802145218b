import re
import unicodedata
from urllib.parse import urlparse

from schema2dts.exceptions import UnsupportedTypeError

__all__ = ('is_url', 'to_ts_type', 'to_type_name')

_IDENTIFIER = re.compile(r'^[A-Za-z_$][0-9A-Za-z_$]*$')
_WORD_START = re.compile(r'(?:^|[^A-Za-z0-9])([A-Za-z0-9])')

_PRIMITIVES = {
    'any': 'any',
    'null': 'null',
    'string': 'string',
    'integer': 'number',
    'number': 'number',
    'boolean': 'boolean',
}


def is_url(text):
    try:
        result = urlparse(text)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except ValueError:
        return False


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def to_type_name(name: str) -> str:
    """Convert an id segment into a declaration name.

    - Upper-case the first character of every alphanumeric run
    - Drop the separators between runs
    - Keep `$` as-is, it is a valid identifier character
    - Ensure it doesn't start with a digit
    """
    if not name:
        return name
    parts = remove_accents(name.strip()).split('$')
    converted = [
        re.sub(r'[^0-9A-Za-z_]', '', _WORD_START.sub(lambda m: m.group(1).upper(), part))
        for part in parts
    ]
    result = '$'.join(converted)
    if result and result[0].isdigit():
        result = '_' + result
    return result


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def to_ts_type(type_name: str, schema_id: str | None = None) -> str | None:
    """Map a JSON Schema primitive type to its TypeScript counterpart.

    Returns:
        The TypeScript type, or None for structural types (`object`, `array`)
        that the emitter expands itself.

    Raises:
        UnsupportedTypeError: If the type is not a JSON Schema type.
    """
    if type_name in _PRIMITIVES:
        return _PRIMITIVES[type_name]
    if type_name in ('object', 'array'):
        return None
    raise UnsupportedTypeError(str(type_name), schema_id)
