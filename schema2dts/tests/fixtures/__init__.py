"""Sample schema documents for schema2dts tests.

Parsing a document mutates it (ids are assigned and `$ref`s rewritten), so
tests take a `copy.deepcopy` of these before use.
"""

# Draft-04 object schema with one required property
SIMPLE_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-04/schema#',
    'id': '/simple',
    'type': 'object',
    'properties': {
        'name': {'type': 'string'},
        'age': {'type': 'integer'},
    },
    'required': ['name'],
}

# Draft-07 document whose definitions reference each other
CYCLIC_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    '$id': 'http://example.com/schemas/tree.json',
    'type': 'object',
    'properties': {
        'root': {'$ref': '#/definitions/a'},
    },
    'definitions': {
        'a': {
            'type': 'object',
            'properties': {'b': {'$ref': '#/definitions/b'}},
        },
        'b': {
            'type': 'object',
            'properties': {'a': {'$ref': '#/definitions/a'}},
        },
    },
}

# Draft-07 document with a reference to a missing definition
BROKEN_REF_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    '$id': 'http://example.com/schemas/broken.json',
    'type': 'object',
    'properties': {
        'missing': {'$ref': '#/definitions/missing'},
    },
}

# Draft-07 document referencing a definition in another remote document
REMOTE_REF_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    '$id': '/order',
    'type': 'object',
    'properties': {
        'customer': {'$ref': 'http://example.com/common.json#/definitions/customer'},
    },
}

COMMON_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'definitions': {
        'customer': {
            'type': 'object',
            'properties': {'email': {'type': 'string', 'format': 'email'}},
            'required': ['email'],
        },
    },
}

# Swagger 2.0 document with named definitions
SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Legacy API', 'version': '1.0.0'},
    'paths': {},
    'definitions': {
        'Error': {
            'type': 'object',
            'properties': {
                'code': {'type': 'integer'},
                'message': {'type': 'string'},
            },
            'required': ['code'],
        },
    },
}

# OpenAPI 3 petstore with query parameters and a two-media-type request body
PETSTORE_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Petstore API', 'version': '1.0.0'},
    'paths': {
        '/pets': {
            'get': {
                'operationId': 'listPets',
                'parameters': [
                    {
                        'name': 'limit',
                        'in': 'query',
                        'required': True,
                        'schema': {'type': 'integer'},
                    },
                    {'name': 'tag', 'in': 'query', 'schema': {'type': 'string'}},
                ],
                'responses': {
                    '200': {
                        'description': 'A list of pets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Pet'},
                                }
                            }
                        },
                    }
                },
            },
            'post': {
                'operationId': 'createPet',
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/Pet'}
                        },
                        'application/xml': {
                            'schema': {'$ref': '#/components/schemas/Pet'}
                        },
                    },
                },
                'responses': {'201': {'description': 'Created'}},
            },
        },
        '/pets/{petId}': {
            'parameters': [
                {
                    'name': 'petId',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string'},
                }
            ],
            'delete': {
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
    },
    'components': {
        'schemas': {
            'Pet': {
                'type': 'object',
                'required': ['id'],
                'properties': {
                    'id': {'type': 'integer'},
                    'name': {'type': 'string'},
                },
            }
        }
    },
}

PETSTORE_DECLARATIONS = '''\
declare namespace Components {
    namespace Schemas {
        export interface Pet {
            id: number;
            name?: string;
        }
    }
}
declare namespace Paths {
    namespace CreatePet {
        export interface JsonRequest {
            body: JsonRequestBody;
        }
        export type JsonRequestBody = Components.Schemas.Pet;
        export interface XmlRequest {
            body: XmlRequestBody;
        }
        export type XmlRequestBody = Components.Schemas.Pet;
    }
    namespace ListPets {
        export interface QueryParameter {
            limit: number;
            tag?: string;
        }
        export interface Request {
            queryParam: QueryParameter;
        }
        namespace Responses {
            export type $200 = Components.Schemas.Pet[];
        }
    }
    namespace Pets {
        namespace $PetId {
            namespace Delete {
                export interface PathParameter {
                    petId: string;
                }
                export interface Request {
                    pathParam: PathParameter;
                }
            }
        }
    }
}
'''
