"""Generation pipeline: register, resolve in rounds, build the tree, emit.

Resolution runs as a fixed sequence of rounds. The first round resolves
every reference reachable from the input documents. The second round
first replaces OpenAPI operations with synthesized request and response
schemas and then resolves again, so references inside the synthesized
schemas are registered too. Each round ends when no referenced id is
left unregistered.
"""

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from schema2dts.codegen.emitter import TypeEmitter
from schema2dts.codegen.normalizer import DEFAULT_TYPE_RULES, SchemaNormalizer, TypeRule
from schema2dts.codegen.openapi import OperationSynthesizer
from schema2dts.codegen.resolver import DocumentFetcher, ReferenceResolver
from schema2dts.codegen.schema import Schema, parse_document
from schema2dts.codegen.tree import Namespace, build_tree
from schema2dts.codegen.writer import DeclarationWriter

logger = logging.getLogger(__name__)

__all__ = ['DeclarationGenerator', 'ResolutionRound', 'RESOLUTION_ROUNDS']


class ResolutionRound(Enum):
    DOCUMENTS = 'documents'
    SYNTHESIZED = 'synthesized'


RESOLUTION_ROUNDS: tuple[ResolutionRound, ...] = (
    ResolutionRound.DOCUMENTS,
    ResolutionRound.SYNTHESIZED,
)


class DeclarationGenerator:
    """Turns parsed schema documents into declaration text.

    A generator instance holds one registry and is meant for a single run.

    Example:
        >>> generator = DeclarationGenerator(fetcher=loader.load)
        >>> text = await generator.generate([(content, None)])
    """

    def __init__(
        self,
        fetcher: DocumentFetcher | None = None,
        indent: str = '    ',
        type_rules: Sequence[TypeRule] = DEFAULT_TYPE_RULES,
    ):
        self.resolver = ReferenceResolver(fetcher)
        self.normalizer = SchemaNormalizer(self.resolver, type_rules)
        self.synthesizer = OperationSynthesizer(self.resolver)
        self.indent = indent

    def add_document(self, content: Any, source_url: str | None = None) -> Schema:
        """Parse and register one input document."""
        schema = parse_document(content, source_url)
        self.resolver.register_schema(schema)
        return schema

    async def generate(self, inputs: Iterable[tuple[Any, str | None]] = ()) -> str:
        """Generate declarations for the given `(content, source_url)` pairs.

        Documents registered earlier through `add_document` are included.

        Returns:
            The declaration text.

        Raises:
            ResolutionError: If a referenced id cannot be resolved.
            SchemaError: If no declarable schema is found.
            UnsupportedTypeError: If an unknown `type` value is emitted.
        """
        for content, source_url in inputs:
            self.add_document(content, source_url)

        for resolution_round in RESOLUTION_ROUNDS:
            await self.run_round(resolution_round)

        tree = self.build_tree()
        logger.debug(f'namespace tree built: {tree.count_leaves()} declaration(s)')
        emitter = TypeEmitter(
            self.resolver, self.normalizer, DeclarationWriter(self.indent)
        )
        return emitter.emit(tree)

    async def run_round(self, resolution_round: ResolutionRound) -> int:
        """Run one resolution round and return the number of references resolved."""
        if resolution_round is ResolutionRound.SYNTHESIZED:
            synthesized = 0
            for schema in self.resolver.get_all_registered_schema():
                if schema.is_operation:
                    synthesized += len(self.synthesizer.synthesize(schema))
            logger.debug(f'synthesized {synthesized} operation schema(s)')
        resolved = await self.resolver.resolve()
        logger.debug(f'{resolution_round.value} round: {resolved} reference(s) resolved')
        return resolved

    def build_tree(self) -> Namespace:
        return build_tree(
            schema
            for schema in self.resolver.get_all_registered_schema()
            if is_declarable(schema)
        )


def is_declarable(schema: Schema) -> bool:
    """Whether a registered schema gets its own declaration.

    OpenAPI document roots, operations and non-schema component objects
    (parameters, responses, request bodies, headers) are registry entries
    only.
    """
    return not (
        schema.is_operation
        or schema.is_openapi_document
        or schema.is_openapi_component_object
    )
