"""Synthesis of request and response schemas for OpenAPI v3 operations.

An operation is not a schema itself. Before declarations are emitted, each
registered operation is replaced by ordinary schemas describing its
parameters, request body and responses:

- `<operation>/<location>Parameter` for each parameter location in use
- `<operation>/[<media>]RequestBody` for each request body media type
- `<operation>/request` (or `<operation>/<media>Request`) wrapping them
- `<operation>/responses/[<media>]$<status>` for each response media type
"""

import copy
import logging
from typing import Any
from schema2dts.codegen import json_pointer
from schema2dts.codegen.resolver import ReferenceResolver
from schema2dts.codegen.schema import Schema
from schema2dts.codegen.schema_id import SchemaId

logger = logging.getLogger(__name__)

__all__ = [
    'PARAMETER_LOCATIONS',
    'OperationSynthesizer',
    'media_type_to_type_name_prefix',
]

PARAMETER_LOCATIONS = ('path', 'query', 'header', 'cookie')

_MEDIA_TYPE_PREFIXES = {
    'application/json': 'json',
    'application/xml': 'xml',
    'application/x-www-form-urlencoded': 'form',
    'text/plain': 'text',
}


def media_type_to_type_name_prefix(media_type: str) -> str:
    return _MEDIA_TYPE_PREFIXES.get(media_type, media_type)


class OperationSynthesizer:
    """Builds parameter, request body and response schemas for operations.

    Every synthesized schema is registered with the resolver and its id is
    marked as referenced, so the next `resolve()` round also picks up the
    references inside it.

    Example:
        >>> synthesizer = OperationSynthesizer(resolver)
        >>> schemas = synthesizer.synthesize(operation_schema)
    """

    def __init__(self, resolver: ReferenceResolver):
        self.resolver = resolver

    def synthesize(self, schema: Schema) -> list[Schema]:
        """Replace an operation schema with the schemas derived from it.

        Non-operation schemas are returned unchanged as a one-element list.
        """
        if not schema.is_operation:
            return [schema]

        logger.debug(f'synthesize operation: schemaId={schema.id.absolute_id}')
        operation = schema.content
        results: list[Schema] = []

        request: dict[str, Any] = {'type': 'object', 'properties': {}, 'required': []}
        self._add_parameter_groups(schema, operation, request, results)
        variants = self._add_request_bodies(schema, operation, request, results)
        if not variants and request['properties']:
            results.append(self._register(schema, 'request', request))
        self._add_responses(schema, operation, results)
        return results

    def _add_parameter_groups(
        self, schema: Schema, operation: dict, request: dict, results: list[Schema]
    ) -> None:
        parameters = [
            self._resolve_object(parameter)
            for parameter in operation.get('parameters') or []
        ]
        parameters = [p for p in parameters if isinstance(p, dict)]

        for location in PARAMETER_LOCATIONS:
            matched = [p for p in parameters if p.get('in') == location]
            if not matched:
                continue

            group: dict[str, Any] = {'type': 'object', 'properties': {}, 'required': []}
            for parameter in matched:
                name = parameter.get('name')
                if not isinstance(name, str):
                    continue
                group['properties'][name] = self._parameter_schema(parameter)
                if parameter.get('required') and name not in group['required']:
                    group['required'].append(name)

            group_schema = self._register(schema, f'{location}Parameter', group)
            results.append(group_schema)

            property_name = f'{location}Param'
            request['properties'][property_name] = {'$ref': group_schema.id.absolute_id}
            if group['required']:
                request['required'].append(property_name)

    def _add_request_bodies(
        self, schema: Schema, operation: dict, request: dict, results: list[Schema]
    ) -> int:
        request_body = operation.get('requestBody')
        if request_body is None:
            return 0
        request_body = self._resolve_object(request_body)
        if not isinstance(request_body, dict):
            return 0

        media = request_body.get('content')
        if not isinstance(media, dict):
            return 0
        single_media = len(media) == 1

        variants = 0
        for media_type, media_object in media.items():
            if not isinstance(media_object, dict) or media_object.get('schema') is None:
                continue
            body_content = media_object['schema']
            prefix = '' if single_media else _segment(media_type_to_type_name_prefix(media_type))

            body_schema = self._register(schema, f'{prefix}RequestBody', body_content)
            results.append(body_schema)

            variant = copy.deepcopy(request)
            variant['properties']['body'] = {'$ref': body_schema.id.absolute_id}
            if request_body.get('required') is True or self._has_required(body_content):
                variant['required'].append('body')
            name = 'request' if single_media else f'{prefix}Request'
            results.append(self._register(schema, name, variant))
            variants += 1
        return variants

    def _add_responses(
        self, schema: Schema, operation: dict, results: list[Schema]
    ) -> None:
        responses = operation.get('responses')
        if not isinstance(responses, dict):
            return
        for status, response in responses.items():
            response = self._resolve_object(response)
            media = response.get('content') if isinstance(response, dict) else None
            if not isinstance(media, dict):
                continue
            single_media = len(media) == 1
            for media_type, media_object in media.items():
                if not isinstance(media_object, dict) or media_object.get('schema') is None:
                    continue
                prefix = '' if single_media else _segment(media_type_to_type_name_prefix(media_type))
                name = f'responses/{prefix}${_segment(str(status))}'
                results.append(self._register(schema, name, media_object['schema']))

    def _parameter_schema(self, parameter: dict) -> dict:
        content = self._resolve_object(parameter.get('schema'))
        if not isinstance(content, dict):
            content = {'type': 'string'}
        content = dict(content)
        # a copied target must not shadow the registered original
        content.pop('$id', None)
        content.pop('id', None)
        if content.get('type') in ('object', 'array'):
            content['type'] = 'string'
        if 'description' not in content and parameter.get('description'):
            content['description'] = parameter['description']
        return content

    def _has_required(self, body_content: Any) -> bool:
        resolved = self._resolve_object(body_content)
        return isinstance(resolved, dict) and bool(resolved.get('required'))

    def _resolve_object(self, obj: Any) -> Any:
        if isinstance(obj, dict) and isinstance(obj.get('$ref'), str):
            return self.resolver.dereference(obj['$ref']).content
        return obj

    def _register(self, operation: Schema, name: str, content: Any) -> Schema:
        schema = Schema(
            dialect=operation.dialect,
            id=SchemaId(f'{operation.id.absolute_id}/{name}'),
            content=content,
            openapi_version=operation.openapi_version,
            root_schema=operation,
        )
        self.resolver.register_schema(schema)
        self.resolver.add_reference(schema.id)
        return schema


def _segment(name: str) -> str:
    return json_pointer.encode_token(name)
