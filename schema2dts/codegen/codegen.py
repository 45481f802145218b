"""Code generation entry point for schema2dts.

This module provides the Codegen class that ties configuration, document
loading, declaration generation and output writing together.
"""

import asyncio
import logging

from schema2dts.codegen.file_writer import DeclarationFileWriter
from schema2dts.codegen.generator import DeclarationGenerator
from schema2dts.codegen.normalizer import TYPE_REDUCTION_RULES
from schema2dts.codegen.schema_loader import DocumentLoader
from schema2dts.config import GeneratorConfig

logger = logging.getLogger(__name__)

__all__ = ['Codegen']


class Codegen:
    """Generates TypeScript declarations for the configured sources.

    Attributes:
        config: The GeneratorConfig for this run.
        loader: The DocumentLoader used for inputs and remote references.

    Example:
        >>> from schema2dts.config import GeneratorConfig
        >>> from schema2dts.codegen.codegen import Codegen
        >>>
        >>> config = GeneratorConfig(
        ...     sources=['schemas/*.json'],
        ...     output='types/schema.d.ts',
        ... )
        >>> Codegen(config).generate()
    """

    def __init__(
        self,
        config: GeneratorConfig,
        loader: DocumentLoader | None = None,
        file_writer: DeclarationFileWriter | None = None,
    ):
        self.config = config
        self.loader = loader or DocumentLoader(timeout=config.timeout)
        self.file_writer = file_writer or DeclarationFileWriter()

    def generate(self) -> str:
        """Generate declarations and write them to the configured output.

        Returns:
            The declaration text. When no output is configured nothing is
            written and the caller is expected to print it.

        Raises:
            Schema2DtsError: Any failure aborts the run without writing.
        """
        text = asyncio.run(self.generate_async())
        if self.config.output:
            self.file_writer.write(text, self.config.output)
            logger.info(f'declarations written to {self.config.output}')
        return text

    async def generate_async(self) -> str:
        inputs = await self.loader.load_inputs(self.config.sources)
        logger.info(f'loaded {len(inputs)} document(s)')
        generator = DeclarationGenerator(
            fetcher=self.loader.load,
            indent=self.config.indent,
            type_rules=TYPE_REDUCTION_RULES[self.config.type_reduction],
        )
        return await generator.generate(inputs)
