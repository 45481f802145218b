"""Schema model, dialect detection and sub-schema discovery.

This module provides:
- The `Schema` record shared by the resolver, the normalizer and the emitter
- `parse_document` for turning a parsed JSON/YAML tree into a `Schema`
- `sub_schema` for extracting a sub-document at a JSON pointer
- `search_all_sub_schema` for discovering every identified sub-schema and
  every `$ref` inside a document
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from schema2dts.codegen import json_pointer
from schema2dts.codegen.schema_id import SchemaId

logger = logging.getLogger(__name__)

__all__ = [
    'Dialect',
    'OperationContent',
    'Schema',
    'get_id',
    'parse_document',
    'search_all_sub_schema',
    'sub_schema',
]

HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

_DRAFT_PATTERN = re.compile(r'https?://json-schema\.org/draft-(\d+)/schema#?')
_OPENAPI3_PATTERN = re.compile(r'^3\.\d+\.\d+$')
_COMPONENT_OBJECT_PATTERN = re.compile(r'^/components/(?!schemas/)[^/]+/[^/]+$')


class Dialect(str, Enum):
    DRAFT04 = 'Draft04'
    DRAFT07 = 'Draft07'

    @property
    def id_keyword(self) -> str:
        return 'id' if self is Dialect.DRAFT04 else '$id'


class OperationContent(dict):
    """The content of an OpenAPI v3 operation.

    A plain copy of the operation object; the type itself marks the content
    as an operation. Its `$id` is pre-assigned by `parse_document`.
    """


@dataclass(frozen=True)
class Schema:
    """A schema document or sub-document.

    Attributes:
        dialect: The JSON Schema dialect governing keyword semantics.
        id: The canonical id of this schema.
        content: A boolean schema, a schema object, or an `OperationContent`.
        openapi_version: 2 or 3 for OpenAPI documents and their sub-schemas.
        root_schema: The enclosing schema this one was extracted from.
    """

    dialect: Dialect
    id: SchemaId
    content: Any
    openapi_version: int | None = None
    root_schema: 'Schema | None' = None

    @property
    def is_operation(self) -> bool:
        return isinstance(self.content, OperationContent)

    @property
    def is_openapi_document(self) -> bool:
        return self.openapi_version is not None and self.root_schema is None

    @property
    def is_openapi_component_object(self) -> bool:
        """Whether this is a non-schema entry under an OpenAPI `components` section."""
        if self.openapi_version != 3:
            return False
        return bool(_COMPONENT_OBJECT_PATTERN.match(self.id.get_json_pointer_hash()))

    def parent_ids(self) -> list[str]:
        """Absolute ids of this schema and its ancestors, outermost first."""
        ids = []
        current: Schema | None = self
        while current is not None:
            ids.append(current.id.absolute_id)
            current = current.root_schema
        ids.reverse()
        return ids

    def with_content(self, content: Any) -> 'Schema':
        return replace(self, content=content)


def get_id(dialect: Dialect, content: Any) -> str | None:
    if not isinstance(content, dict):
        return None
    value = content.get(dialect.id_keyword)
    return value if isinstance(value, str) and value else None


def parse_document(content: Any, source_url: str | None = None) -> Schema:
    """Build a root `Schema` from a parsed document.

    The dialect and OpenAPI version are taken from `$schema`, `swagger` or
    `openapi`. OpenAPI documents get synthetic ids pre-assigned to their
    named schemas and operations. If the document has no id of its own,
    `source_url` is used.

    Args:
        content: The parsed JSON/YAML tree.
        source_url: Where the document was loaded from, if remote.

    Returns:
        The root Schema of the document.
    """
    dialect, openapi_version = _select_dialect(content)
    if source_url is not None:
        _set_id(dialect, content, source_url)
    schema_id = get_id(dialect, content)
    logger.debug(
        f'parsed document: dialect={dialect.value}, openapi={openapi_version}, id={schema_id}'
    )
    return Schema(
        dialect=dialect,
        id=SchemaId(schema_id) if schema_id else SchemaId.empty(),
        content=content,
        openapi_version=openapi_version,
    )


def sub_schema(
    root_schema: Schema, pointer: str, schema_id: SchemaId | None = None
) -> Schema:
    """Extract the sub-document of `root_schema` located at `pointer`.

    The id is `schema_id` when given, otherwise the sub-content's own
    declared id (resolved against the parent chain), otherwise the pointer
    appended to the root schema's id.

    Raises:
        ParseError: If the pointer does not exist in the root content.
    """
    tokens = json_pointer.parse(pointer)
    content = json_pointer.get(root_schema.content, tokens, pointer)
    if schema_id is None:
        declared = get_id(root_schema.dialect, content)
        if declared:
            schema_id = SchemaId(declared, root_schema.parent_ids())
        else:
            schema_id = SchemaId(
                root_schema.id.absolute_id + json_pointer.to_fragment(tokens)
            )
    return Schema(
        dialect=root_schema.dialect,
        id=schema_id,
        content=content,
        openapi_version=root_schema.openapi_version,
        root_schema=root_schema,
    )


def search_all_sub_schema(
    schema: Schema,
    on_found_schema: Callable[[Schema], None],
    on_found_reference: Callable[[SchemaId], None],
) -> None:
    """Walk a document and report identified sub-schemas and references.

    Every `$ref` string found is rewritten in place to its canonical
    absolute form. The walk uses an explicit work list, so deeply nested or
    self-referencing documents do not grow the call stack.
    """
    root_parents = [p for p in schema.parent_ids() if p != '#']
    work: list[tuple[Any, list[str], bool]] = [(schema.content, root_parents, True)]

    while work:
        node, parent_ids, is_root = work.pop()
        if not isinstance(node, dict):
            continue

        if not is_root:
            declared = get_id(schema.dialect, node)
            if declared:
                found_id = SchemaId(declared, parent_ids)
                on_found_schema(
                    Schema(
                        dialect=schema.dialect,
                        id=found_id,
                        content=node,
                        openapi_version=schema.openapi_version,
                        root_schema=schema,
                    )
                )
                parent_ids = parent_ids + [found_id.absolute_id]

        ref = node.get('$ref')
        if isinstance(ref, str):
            ref_id = SchemaId(ref, parent_ids)
            node['$ref'] = ref_id.absolute_id
            on_found_reference(ref_id)

        children = list(_schema_children(schema, node))
        # reversed so the work list pops children in document order
        for child in reversed(children):
            work.append((child, parent_ids, False))
        if schema.openapi_version == 3 and is_root:
            for operation in reversed(_operations(schema, node)):
                work.append((operation, parent_ids, False))


def _schema_children(schema: Schema, node: dict):
    for key in ('allOf', 'anyOf', 'oneOf'):
        yield from _as_list(node.get(key))
    yield node.get('not')
    items = node.get('items')
    yield from items if isinstance(items, list) else [items]
    yield node.get('additionalItems')
    yield node.get('additionalProperties')
    for key in ('definitions', 'properties', 'patternProperties'):
        yield from _as_values(node.get(key))
    dependencies = node.get('dependencies')
    yield from _as_values(dependencies)

    if schema.dialect is Dialect.DRAFT07:
        for key in ('propertyNames', 'contains', 'if', 'then', 'else'):
            yield node.get(key)

    if schema.openapi_version == 3:
        components = node.get('components')
        if isinstance(components, dict):
            for section in components.values():
                yield from _as_values(section)
        for key in ('parameters', 'headers', 'requestBodies', 'responses', 'content'):
            value = node.get(key)
            yield from _as_list(value) if isinstance(value, list) else _as_values(value)
        yield node.get('schema')
        yield node.get('requestBody')


def _operations(schema: Schema, document: dict) -> list[OperationContent]:
    paths = document.get('paths')
    if not isinstance(paths, dict):
        return []
    operations = []
    for path_item in paths.values():
        if not isinstance(path_item, dict):
            continue
        shared = _as_list(path_item.get('parameters'))
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            content = OperationContent(operation)
            if shared:
                content['parameters'] = _merge_parameters(
                    shared, _as_list(operation.get('parameters'))
                )
            operations.append(content)
    return operations


def _merge_parameters(shared: list, own: list) -> list:
    def key(parameter):
        if isinstance(parameter, dict) and 'name' in parameter:
            return parameter.get('name'), parameter.get('in')
        return id(parameter)

    overridden = {key(p) for p in own}
    return [p for p in shared if key(p) not in overridden] + own


def _operation_namespaces(path: str, method: str, operation: dict) -> list[str]:
    operation_id = operation.get('operationId')
    if isinstance(operation_id, str) and operation_id:
        return ['paths', operation_id]
    segments = []
    for segment in path.split('/'):
        if not segment:
            continue
        match = re.fullmatch(r'\{(.*)\}', segment)
        segments.append('$' + match.group(1) if match else segment)
    return ['paths', *segments, method]


def _select_dialect(content: Any) -> tuple[Dialect, int | None]:
    if not isinstance(content, dict):
        return Dialect.DRAFT04, None

    declared = content.get('$schema')
    if isinstance(declared, str):
        match = _DRAFT_PATTERN.match(declared)
        if match:
            if int(match.group(1)) <= 4:
                return Dialect.DRAFT04, None
            return Dialect.DRAFT07, None

    if content.get('swagger') == '2.0':
        _set_sub_ids(content.get('definitions'), Dialect.DRAFT04, ['definitions'])
        return Dialect.DRAFT04, 2

    openapi = content.get('openapi')
    if isinstance(openapi, str) and _OPENAPI3_PATTERN.match(openapi):
        components = content.get('components')
        if isinstance(components, dict):
            _set_sub_ids(
                components.get('schemas'), Dialect.DRAFT07, ['components', 'schemas']
            )
        _set_operation_ids(content.get('paths'))
        return Dialect.DRAFT07, 3

    return Dialect.DRAFT04, None


def _set_id(dialect: Dialect, content: Any, value: str) -> None:
    if isinstance(content, dict) and content.get(dialect.id_keyword) is None:
        content[dialect.id_keyword] = value


def _set_sub_ids(entries: Any, dialect: Dialect, prefix: list[str]) -> None:
    for name, sub in _as_items(entries):
        _set_id(dialect, sub, '#' + json_pointer.to_fragment(prefix + [name]))


def _set_operation_ids(paths: Any) -> None:
    for path, path_item in _as_items(paths):
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                namespaces = _operation_namespaces(path, method, operation)
                _set_id(Dialect.DRAFT07, operation, '#' + json_pointer.to_fragment(namespaces))


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_values(value: Any) -> list:
    return list(value.values()) if isinstance(value, dict) else []


def _as_items(value: Any) -> list:
    return list(value.items()) if isinstance(value, dict) else []
