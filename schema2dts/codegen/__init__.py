"""Declaration generation engine for schema2dts.

This module turns JSON Schema (Draft-04/Draft-07) and OpenAPI (v2/v3)
documents into TypeScript declaration text.

Main Components:
    - Codegen: Loads the configured sources and writes the declarations
    - DeclarationGenerator: Registers documents, resolves and emits
    - ReferenceResolver: Registry of schemas and `$ref` resolution
    - OperationSynthesizer: Request/response schemas for OpenAPI operations
    - SchemaNormalizer: Boolean schemas, `allOf` merge and type reduction
    - TypeEmitter: Writes declarations for a namespace tree

Example:
    >>> from schema2dts.codegen import Codegen
    >>> from schema2dts.config import GeneratorConfig
    >>>
    >>> config = GeneratorConfig(sources=['./schema.json'])
    >>> print(Codegen(config).generate())
"""

from schema2dts.codegen.codegen import Codegen
from schema2dts.codegen.emitter import TypeEmitter
from schema2dts.codegen.generator import (
    RESOLUTION_ROUNDS,
    DeclarationGenerator,
    ResolutionRound,
)
from schema2dts.codegen.normalizer import SchemaNormalizer
from schema2dts.codegen.openapi import OperationSynthesizer
from schema2dts.codegen.resolver import ReferenceResolver
from schema2dts.codegen.schema import Dialect, Schema, parse_document, sub_schema
from schema2dts.codegen.schema_id import SchemaId
from schema2dts.codegen.schema_loader import DocumentLoader
from schema2dts.codegen.tree import Leaf, Namespace, build_tree
from schema2dts.codegen.writer import DeclarationWriter

__all__ = [
    # Entry points
    'Codegen',
    'DeclarationGenerator',
    'ResolutionRound',
    'RESOLUTION_ROUNDS',
    # Schema model
    'Dialect',
    'Schema',
    'SchemaId',
    'parse_document',
    'sub_schema',
    # Resolution
    'DocumentLoader',
    'ReferenceResolver',
    'OperationSynthesizer',
    'SchemaNormalizer',
    # Emission
    'Leaf',
    'Namespace',
    'build_tree',
    'DeclarationWriter',
    'TypeEmitter',
]
