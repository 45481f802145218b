"""Reference resolution and the schema registry.

The resolver registers every schema reachable from the input documents,
keyed by canonical absolute id, and tracks every id referenced by a
`$ref`. `resolve()` runs until no referenced id is left unregistered,
fetching additional documents through an external loader when a
reference points outside the registered documents.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from schema2dts.codegen.schema import (
    Schema,
    parse_document,
    search_all_sub_schema,
    sub_schema,
)
from schema2dts.codegen.schema_id import SchemaId
from schema2dts.exceptions import ResolutionError, SchemaError

logger = logging.getLogger(__name__)

__all__ = ['DocumentFetcher', 'ReferenceResolver']

DocumentFetcher = Callable[[str], Awaitable[Any]]


class ReferenceResolver:
    """Registry of schemas by canonical id plus the set of referenced ids.

    Registering a schema walks its content, registers every sub-schema
    that declares an id and records every `$ref` it finds. Registering an
    id a second time replaces the earlier entry.

    Example:
        >>> resolver = ReferenceResolver(fetcher=loader.load)
        >>> resolver.register_schema(parse_document(content))
        >>> await resolver.resolve()
        >>> pet = resolver.dereference('#/components/schemas/Pet')
    """

    def __init__(self, fetcher: DocumentFetcher | None = None):
        """Initialize an empty resolver.

        Args:
            fetcher: Coroutine function returning the parsed content of a
                remote document given its URL. Without one, references to
                unregistered remote documents fail to resolve.
        """
        self._fetcher = fetcher
        self._schemas: dict[str, Schema] = {}
        self._references: dict[str, Schema | None] = {}
        self._documents: dict[str, Schema] = {}

    def register_schema(self, schema: Schema) -> None:
        """Register a schema and everything discovered inside it."""
        logger.debug(f'register schema: schemaId={schema.id.absolute_id}')
        self.add_schema(schema)
        search_all_sub_schema(schema, self.add_schema, self.add_reference)

    def add_schema(self, schema: Schema) -> None:
        key = schema.id.absolute_id
        existing = self._schemas.get(key)
        if existing is not None and existing.content is not schema.content:
            logger.warning(f'schema superseded: schemaId={key}')
        self._schemas[key] = schema

    def add_reference(self, reference_id: SchemaId) -> None:
        key = reference_id.absolute_id
        if key not in self._references:
            self._references[key] = None

    def has_schema(self, schema_id: str) -> bool:
        return schema_id in self._schemas

    def get_all_registered_schema(self) -> Iterator[Schema]:
        return iter(list(self._schemas.values()))

    def pending_references(self) -> list[str]:
        """Referenced ids whose target has not been resolved yet."""
        return [key for key, schema in self._references.items() if schema is None]

    def dereference(self, ref_id: str) -> Schema:
        """Return the registered schema for a canonical id.

        Raises:
            ResolutionError: If the id was never registered.
        """
        key = SchemaId(ref_id).absolute_id
        schema = self._schemas.get(key) or self._references.get(key)
        if schema is None:
            raise ResolutionError(key, 'the $ref target is not registered')
        return schema

    async def resolve(self) -> int:
        """Register the target of every referenced id.

        Runs rounds until a round discovers no new unresolved reference.
        Remote documents needed by a round are fetched concurrently.

        Returns:
            The number of references resolved.

        Raises:
            ResolutionError: If any reference cannot be resolved. All
                failures of the round are reported together.
        """
        resolved = 0
        round_number = 0
        while True:
            pending = self.pending_references()
            if not pending:
                break
            round_number += 1
            logger.debug(
                f'resolve round {round_number}: {len(pending)} pending reference(s)'
            )

            errors = await self._fetch_documents(pending)
            failed = []
            for key in pending:
                try:
                    self._references[key] = self._resolve_one(SchemaId(key))
                    resolved += 1
                except SchemaError as e:
                    failed.append(key)
                    errors.append(e.message)

            if errors:
                raise ResolutionError(', '.join(failed or pending), '\n'.join(errors))
        return resolved

    async def _fetch_documents(self, pending: list[str]) -> list[str]:
        file_ids = []
        for key in pending:
            schema_id = SchemaId(key)
            file_id = schema_id.get_file_id()
            if (
                key not in self._schemas
                and file_id not in self._schemas
                and file_id not in self._documents
                and schema_id.is_fetchable()
                and file_id not in file_ids
            ):
                file_ids.append(file_id)
        if not file_ids:
            return []
        if self._fetcher is None:
            return [f'{file_id}: no document loader configured' for file_id in file_ids]

        urls = [file_id[:-1] for file_id in file_ids]
        results = await asyncio.gather(
            *(self._fetcher(url) for url in urls), return_exceptions=True
        )
        errors = []
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                errors.append(f'Fail to fetch the $ref target document {url}: {result}')
                continue
            logger.debug(f'fetched document: {url}')
            document = parse_document(result, url)
            self.register_schema(document)
            # the document may declare an id other than its URL
            self._documents[SchemaId(url).absolute_id] = document
        return errors

    def _resolve_one(self, schema_id: SchemaId) -> Schema:
        key = schema_id.absolute_id
        schema = self._schemas.get(key)
        if schema is not None:
            return schema

        document = self._documents.get(schema_id.get_file_id())
        if document is not None:
            parent, pointer = document, schema_id.get_json_pointer_hash()
        else:
            parent_key = self._search_parent_schema(key)
            if parent_key is None:
                raise ResolutionError(key, "the $ref target's document is not registered")
            parent, pointer = self._schemas[parent_key], key[len(parent_key):]
        if not pointer:
            return parent
        schema = sub_schema(parent, '#' + pointer, schema_id)
        self.register_schema(schema)
        return schema

    def _search_parent_schema(self, key: str) -> str | None:
        """Longest registered id that is a pointer prefix of `key`."""
        best = None
        for candidate in self._schemas:
            if not key.startswith(candidate) or candidate == key:
                continue
            rest = key[len(candidate):]
            if not candidate.endswith('#') and not rest.startswith('/'):
                continue
            if '#' not in candidate:
                continue
            if best is None or len(candidate) > len(best):
                best = candidate
        return best
