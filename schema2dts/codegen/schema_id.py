"""Canonical identifiers for schema nodes.

A SchemaId is the fully resolved absolute form of an `id`/`$id`/`$ref`
string. Two SchemaIds are equal iff their absolute ids are equal; the
absolute id doubles as the registry key and as the source of the
namespace path a schema is declared under.
"""

from collections.abc import Sequence
from urllib.parse import unquote, urljoin, urlparse

from schema2dts.codegen import json_pointer

__all__ = ['SchemaId']


class SchemaId:
    """An absolute schema identifier.

    Relative references are resolved against the chain of enclosing
    document ids. `parent_ids` is ordered from the outermost document to the
    nearest enclosing one; each id is resolved against the one before it so
    that a reference always resolves against its nearest enclosing scope.

    Example:
        >>> sid = SchemaId('#/definitions/pet', ['http://example.com/api.json'])
        >>> sid.absolute_id
        'http://example.com/api.json#/definitions/pet'
        >>> sid.to_names()
        ['example.com', 'api.json', 'definitions', 'pet']
    """

    __slots__ = ('absolute_id',)

    def __init__(self, input_id: str, parent_ids: Sequence[str] | None = None):
        base = ''
        for parent in parent_ids or ():
            if parent:
                base = urljoin(base, parent)
        absolute_id = urljoin(base, input_id) if base else input_id

        if '#' not in absolute_id:
            absolute_id += '#'
        if (
            '://' not in absolute_id
            and not absolute_id.startswith('/')
            and not absolute_id.startswith('#')
        ):
            absolute_id = '/' + absolute_id
        document, _, fragment = absolute_id.partition('#')
        self.absolute_id = document + '#' + json_pointer.canonical_fragment(fragment)

    @classmethod
    def empty(cls) -> 'SchemaId':
        return cls('')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaId):
            return NotImplemented
        return self.absolute_id == other.absolute_id

    def __hash__(self) -> int:
        return hash(self.absolute_id)

    def __repr__(self) -> str:
        return f'SchemaId({self.absolute_id!r})'

    def get_absolute_id(self) -> str:
        return self.absolute_id

    def is_empty(self) -> bool:
        return self.absolute_id == '#'

    def is_fetchable(self) -> bool:
        return self.absolute_id.startswith(('http://', 'https://'))

    def get_file_id(self) -> str:
        """The id of the document containing this node (fragment dropped)."""
        return self.absolute_id.split('#', 1)[0] + '#'

    def get_json_pointer_hash(self) -> str:
        """The fragment part, which is a JSON pointer for pointer-style ids."""
        return self.absolute_id.split('#', 1)[1]

    def to_names(self) -> list[str]:
        """Split the absolute id into namespace path segments.

        The host (if any) comes first, followed by the path segments and
        the fragment segments. Empty leading and trailing segments are
        dropped and every segment is percent-decoded.
        """
        parsed = urlparse(self.absolute_id)
        names: list[str] = []
        if parsed.netloc:
            names.append(unquote(parsed.netloc))
        for part in (parsed.path, parsed.fragment):
            if part:
                names.extend(_split_segments(part))
        return names

    def get_interface_name(self) -> str:
        names = self.to_names()
        return names[-1] if names else ''


def _split_segments(path: str) -> list[str]:
    segments = path.split('/')
    if len(segments) > 1 and segments[0] == '':
        segments.pop(0)
    if len(segments) > 1 and segments[-1] == '':
        segments.pop()
    return [json_pointer.unescape(unquote(s)) for s in segments if s]
