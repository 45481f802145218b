"""Schema normalization.

Normalization turns any schema content into a plain schema object the
emitter can dispatch on:

- boolean schemas become `{}` (true) or `{'not': {}}` (false)
- `allOf` members are folded into the node and `allOf` is removed
- a `type` array is reduced with a pipeline of pluggable rules
- a missing `type` becomes `object` when properties are declared

The stored registry content is never modified; normalized content is a
new top-level mapping.
"""

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from schema2dts.codegen.schema import Schema, sub_schema
from schema2dts.exceptions import SchemaError

if TYPE_CHECKING:
    from schema2dts.codegen.resolver import ReferenceResolver

logger = logging.getLogger(__name__)

__all__ = [
    'DEFAULT_TYPE_RULES',
    'DISTINCT_TYPE_RULES',
    'SchemaNormalizer',
    'TYPE_REDUCTION_RULES',
    'TypeRule',
    'distinct_types',
    'merge_schema',
    'number_subsumes_integer',
    'reduce_types',
]

TypeRule = Callable[[list[str]], list[str]]


def distinct_types(types: list[str]) -> list[str]:
    return list(dict.fromkeys(types))


def number_subsumes_integer(types: list[str]) -> list[str]:
    if 'number' in types and 'integer' in types:
        return [t for t in types if t != 'integer']
    return types


DEFAULT_TYPE_RULES: tuple[TypeRule, ...] = (distinct_types, number_subsumes_integer)
DISTINCT_TYPE_RULES: tuple[TypeRule, ...] = (distinct_types,)

TYPE_REDUCTION_RULES: dict[str, tuple[TypeRule, ...]] = {
    'merge-numeric': DEFAULT_TYPE_RULES,
    'distinct': DISTINCT_TYPE_RULES,
}


def reduce_types(
    types: list[str], rules: Sequence[TypeRule] = DEFAULT_TYPE_RULES
) -> list[str]:
    """Reduce a `type` array to its minimal set of distinct names."""
    reduced = list(types)
    for rule in rules:
        reduced = rule(reduced)
    return reduced


def merge_schema(target: dict, source: dict) -> dict:
    """Merge `source` into a copy of `target`.

    Object-valued keys are united by member name with `source` entries
    winning, array-valued keys are concatenated without duplicates, and
    every other key is taken from `source`.
    """
    result = dict(target)
    for key, value in source.items():
        current = result.get(key)
        if current is not None and type(current) is not type(value):
            logger.debug(f'merge_schema: type mismatch for key={key}')
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = {**current, **value}
        elif isinstance(value, list) and isinstance(current, list):
            merged = list(current)
            for item in value:
                if item not in merged:
                    merged.append(item)
            result[key] = merged
        else:
            result[key] = value
    return result


class SchemaNormalizer:
    """Normalizes schemas, dereferencing `allOf` members through a resolver.

    Example:
        >>> normalizer = SchemaNormalizer(resolver)
        >>> normalized = normalizer.normalize(schema)
        >>> prop = normalizer.normalize(normalized, '/properties/name')
    """

    def __init__(
        self,
        resolver: 'ReferenceResolver | None' = None,
        type_rules: Sequence[TypeRule] = DEFAULT_TYPE_RULES,
    ):
        self.resolver = resolver
        self.type_rules = tuple(type_rules)

    def normalize(self, schema: Schema, pointer: str | None = None) -> Schema:
        """Return a normalized copy of `schema`.

        Args:
            schema: The schema to normalize.
            pointer: If given, the sub-schema at this pointer is extracted
                first and normalized instead.

        Raises:
            ParseError: If `pointer` does not exist in the schema content.
            SchemaError: If `allOf` members reference each other in a cycle.
        """
        if pointer is not None:
            schema = sub_schema(schema, pointer)
        content = self._normalize_content(schema, schema.content, frozenset())
        return schema.with_content(content)

    def _normalize_content(
        self, schema: Schema, content: Any, seen: frozenset[str]
    ) -> dict:
        if isinstance(content, bool):
            return {} if content else {'not': {}}
        if not isinstance(content, dict):
            raise SchemaError(
                f"Schema content at '{schema.id.absolute_id}' is not an object"
            )

        content = dict(content)
        members = content.pop('allOf', None)
        if isinstance(members, list):
            for member in members:
                member_content = self._member_content(schema, member, seen)
                member_content.pop(schema.dialect.id_keyword, None)
                content = merge_schema(content, member_content)

        types = content.get('type')
        if types is None and (
            content.get('properties') is not None
            or content.get('additionalProperties') not in (None, False)
        ):
            content['type'] = 'object'
        elif isinstance(types, list):
            reduced = reduce_types(types, self.type_rules)
            if not reduced:
                del content['type']
            else:
                content['type'] = reduced[0] if len(reduced) == 1 else reduced
        return content

    def _member_content(self, schema: Schema, member: Any, seen: frozenset[str]) -> dict:
        if isinstance(member, dict) and isinstance(member.get('$ref'), str):
            ref = member['$ref']
            if ref in seen:
                raise SchemaError(f"Circular allOf reference '{ref}'")
            if self.resolver is None:
                raise SchemaError(f"Cannot dereference allOf member '{ref}'")
            target = self.resolver.dereference(ref)
            return self._normalize_content(target, target.content, seen | {ref})
        return self._normalize_content(schema, member, seen)
