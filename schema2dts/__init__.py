"""schema2dts - Generate TypeScript declarations from JSON Schema and OpenAPI.

schema2dts reads JSON Schema (Draft-04/Draft-07) and OpenAPI (v2/v3)
documents, resolves every reference between them (fetching remote
documents when needed) and writes one deterministic `.d.ts` text with a
namespace per id segment.

Quick Start:
    >>> from schema2dts import Codegen, GeneratorConfig
    >>>
    >>> config = GeneratorConfig(
    ...     sources=['schemas/*.json', 'https://example.com/api.yaml'],
    ...     output='types/schema.d.ts',
    ... )
    >>> Codegen(config).generate()

CLI Usage:
    $ schema2dts generate schemas/*.json -o types/schema.d.ts
    $ schema2dts generate --config schema2dts.yaml
"""

from schema2dts._version import __version__
from schema2dts.codegen import Codegen, DeclarationGenerator, DocumentLoader
from schema2dts.config import GeneratorConfig, get_config
from schema2dts.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    DocumentLoadError,
    OutputError,
    ParseError,
    ResolutionError,
    Schema2DtsError,
    SchemaError,
    UnsupportedTypeError,
)

__all__ = [
    # Main classes
    'Codegen',
    'DeclarationGenerator',
    'DocumentLoader',
    # Configuration
    'GeneratorConfig',
    'get_config',
    # Exceptions
    'Schema2DtsError',
    'SchemaError',
    'ParseError',
    'DocumentLoadError',
    'ResolutionError',
    'CodeGenerationError',
    'UnsupportedTypeError',
    'ConfigurationError',
    'OutputError',
]
