"""Tests for the schema model, dialect detection and discovery."""

import copy

import pytest

from schema2dts.codegen.schema import (
    Dialect,
    OperationContent,
    Schema,
    parse_document,
    search_all_sub_schema,
    sub_schema,
)
from schema2dts.codegen.schema_id import SchemaId
from schema2dts.exceptions import ParseError
from schema2dts.tests.fixtures import PETSTORE_SPEC, SWAGGER_SPEC


def discover(schema):
    found, references = [], []
    search_all_sub_schema(schema, found.append, references.append)
    return found, references


class TestParseDocument:
    """Test dialect selection and id assignment."""

    @pytest.mark.parametrize(
        'schema_uri,expected',
        [
            ('http://json-schema.org/draft-04/schema#', Dialect.DRAFT04),
            ('http://json-schema.org/draft-06/schema#', Dialect.DRAFT07),
            ('http://json-schema.org/draft-07/schema#', Dialect.DRAFT07),
        ],
    )
    def test_dialect_from_schema_keyword(self, schema_uri, expected):
        """Test the draft number in `$schema` selects the dialect."""
        schema = parse_document({'$schema': schema_uri})
        assert schema.dialect is expected
        assert schema.openapi_version is None

    def test_unknown_document_defaults_to_draft04(self):
        """Test documents without markers are Draft-04."""
        assert parse_document({'type': 'string'}).dialect is Dialect.DRAFT04

    def test_swagger_document(self):
        """Test Swagger 2 definitions get path-derived ids."""
        content = copy.deepcopy(SWAGGER_SPEC)
        schema = parse_document(content)

        assert schema.dialect is Dialect.DRAFT04
        assert schema.openapi_version == 2
        assert schema.is_openapi_document
        assert content['definitions']['Error']['id'] == '#/definitions/Error'

    def test_openapi3_document(self):
        """Test OpenAPI 3 schemas and operations get path-derived ids."""
        content = copy.deepcopy(PETSTORE_SPEC)
        schema = parse_document(content)

        assert schema.dialect is Dialect.DRAFT07
        assert schema.openapi_version == 3
        assert content['components']['schemas']['Pet']['$id'] == '#/components/schemas/Pet'
        assert content['paths']['/pets']['get']['$id'] == '#/paths/listPets'
        assert content['paths']['/pets/{petId}']['delete']['$id'] == (
            '#/paths/pets/$petId/delete'
        )

    def test_openapi_version_must_be_semver(self):
        """Test a malformed openapi version is not treated as OpenAPI 3."""
        schema = parse_document({'openapi': '3.1'})
        assert schema.openapi_version is None

    def test_source_url_is_fallback_id(self):
        """Test the source URL identifies a document without an id."""
        schema = parse_document({'type': 'string'}, 'http://example.com/a.json')
        assert schema.id.absolute_id == 'http://example.com/a.json#'

    def test_declared_id_wins_over_source_url(self):
        """Test an own id is kept."""
        schema = parse_document({'id': '/mine'}, 'http://example.com/a.json')
        assert schema.id.absolute_id == '/mine#'

    def test_document_without_id(self):
        """Test a local document without an id has the empty id."""
        assert parse_document({'type': 'string'}).id.is_empty()


class TestSubSchema:
    """Test sub-document extraction."""

    @pytest.fixture
    def root(self):
        return parse_document(
            {
                '$schema': 'http://json-schema.org/draft-07/schema#',
                '$id': 'http://example.com/root.json',
                'definitions': {
                    'plain': {'type': 'string'},
                    'named': {'$id': 'named.json', 'type': 'number'},
                },
            }
        )

    def test_pointer_derived_id(self, root):
        """Test an id-less sub-schema is identified by its pointer."""
        sub = sub_schema(root, '/definitions/plain')
        assert sub.id.absolute_id == 'http://example.com/root.json#/definitions/plain'
        assert sub.content == {'type': 'string'}
        assert sub.root_schema is root

    def test_declared_id(self, root):
        """Test a sub-schema's own id is resolved against its parents."""
        sub = sub_schema(root, '/definitions/named')
        assert sub.id.absolute_id == 'http://example.com/named.json#'

    def test_explicit_id(self, root):
        """Test an explicit id overrides everything."""
        sub = sub_schema(root, '/definitions/named', SchemaId('/explicit'))
        assert sub.id.absolute_id == '/explicit#'

    def test_missing_pointer(self, root):
        """Test a pointer into nothing is a ParseError."""
        with pytest.raises(ParseError):
            sub_schema(root, '/definitions/missing')


class TestSearchAllSubSchema:
    """Test sub-schema discovery."""

    def test_finds_identified_sub_schemas_and_rewrites_refs(self):
        """Test ids are collected and refs become absolute."""
        content = {
            '$schema': 'http://json-schema.org/draft-07/schema#',
            '$id': 'http://example.com/root.json',
            'properties': {
                'a': {
                    '$id': 'a.json',
                    'properties': {'b': {'$ref': '#/definitions/x'}},
                },
                'c': {'$ref': 'other.json'},
            },
        }
        found, references = discover(parse_document(content))

        assert [s.id.absolute_id for s in found] == ['http://example.com/a.json#']
        assert {r.absolute_id for r in references} == {
            'http://example.com/a.json#/definitions/x',
            'http://example.com/other.json#',
        }
        assert content['properties']['a']['properties']['b']['$ref'] == (
            'http://example.com/a.json#/definitions/x'
        )
        assert content['properties']['c']['$ref'] == 'http://example.com/other.json#'

    def test_draft07_keywords_are_walked(self):
        """Test if/then/else are searched in Draft-07 documents."""
        content = {
            '$schema': 'http://json-schema.org/draft-07/schema#',
            '$id': '/root',
            'if': {'$ref': '#/definitions/a'},
            'then': {'$ref': '#/definitions/b'},
        }
        _, references = discover(parse_document(content))
        assert {r.absolute_id for r in references} == {'/root#/definitions/a', '/root#/definitions/b'}

    def test_draft04_ignores_draft07_keywords(self):
        """Test Draft-04 documents do not descend into if/then."""
        content = {'id': '/root', 'if': {'$ref': '#/definitions/a'}}
        _, references = discover(parse_document(content))
        assert references == []

    def test_self_reference_terminates(self):
        """Test a schema that references itself is walked once."""
        content = {'id': '/node', 'properties': {'next': {'$ref': '#'}}}
        _, references = discover(parse_document(content))
        assert [r.absolute_id for r in references] == ['/node#']

    def test_openapi_operations_are_found(self):
        """Test operations are reported under their pre-assigned ids."""
        schema = parse_document(copy.deepcopy(PETSTORE_SPEC))
        found, references = discover(schema)

        operations = {s.id.absolute_id: s for s in found if s.is_operation}
        assert set(operations) == {
            '#/paths/listPets',
            '#/paths/createPet',
            '#/paths/pets/$petId/delete',
        }
        assert operations['#/paths/listPets'].content['operationId'] == 'listPets'
        assert '#/components/schemas/Pet' in {s.id.absolute_id for s in found}
        assert '#/components/schemas/Pet' in {r.absolute_id for r in references}

    def test_path_parameters_are_merged(self):
        """Test path-level parameters are shared and overridden by name and location."""
        content = {
            'openapi': '3.0.0',
            'paths': {
                '/items/{id}': {
                    'parameters': [
                        {'name': 'id', 'in': 'path', 'description': 'shared'},
                        {'name': 'trace', 'in': 'header'},
                    ],
                    'get': {
                        'operationId': 'getItem',
                        'parameters': [
                            {'name': 'id', 'in': 'path', 'description': 'own'},
                            {'name': 'q', 'in': 'query'},
                        ],
                    },
                }
            },
        }
        found, _ = discover(parse_document(content))
        operation = next(s for s in found if s.is_operation)

        assert isinstance(operation.content, OperationContent)
        assert [(p['name'], p.get('description')) for p in operation.content['parameters']] == [
            ('trace', None),
            ('id', 'own'),
            ('q', None),
        ]


class TestSchemaFlags:
    """Test the classification properties used to filter declarations."""

    def test_component_objects(self):
        """Test non-schema component entries are recognized."""
        document = parse_document({'openapi': '3.0.0'})
        parameter = Schema(
            dialect=Dialect.DRAFT07,
            id=SchemaId('#/components/parameters/limit'),
            content={},
            openapi_version=3,
            root_schema=document,
        )
        named_schema = Schema(
            dialect=Dialect.DRAFT07,
            id=SchemaId('#/components/schemas/Pet'),
            content={},
            openapi_version=3,
            root_schema=document,
        )
        assert parameter.is_openapi_component_object
        assert not named_schema.is_openapi_component_object
        assert not parameter.is_openapi_document

    def test_parent_ids_are_outermost_first(self):
        """Test the parent chain order."""
        root = parse_document({'id': 'http://example.com/root.json', 'definitions': {'a': {}}})
        sub = sub_schema(root, '/definitions/a')
        assert sub.parent_ids() == [
            'http://example.com/root.json#',
            'http://example.com/root.json#/definitions/a',
        ]
