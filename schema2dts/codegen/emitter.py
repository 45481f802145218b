"""Declaration emitter.

Walks a namespace tree in key order and writes one TypeScript declaration
per schema: an interface for object schemas and a type alias for
everything else. Property, array, union, enum, const and reference types
are rendered inline.
"""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any

from schema2dts.codegen import json_pointer
from schema2dts.codegen.normalizer import SchemaNormalizer
from schema2dts.codegen.resolver import ReferenceResolver
from schema2dts.codegen.schema import Schema, get_id
from schema2dts.codegen.tree import Namespace
from schema2dts.codegen.utils import to_ts_type, to_type_name
from schema2dts.codegen.writer import DeclarationWriter
from schema2dts.exceptions import ResolutionError

logger = logging.getLogger(__name__)

__all__ = ['TypeEmitter']


class TypeEmitter:
    """Turns a namespace tree into declaration text.

    Example:
        >>> emitter = TypeEmitter(resolver, SchemaNormalizer(resolver))
        >>> text = emitter.emit(build_tree(schemas))
    """

    def __init__(
        self,
        resolver: ReferenceResolver,
        normalizer: SchemaNormalizer,
        writer: DeclarationWriter | None = None,
    ):
        self.resolver = resolver
        self.normalizer = normalizer
        self.writer = writer or DeclarationWriter()
        self._current: Schema | None = None
        self._tree = Namespace(name='')

    def emit(self, tree: Namespace) -> str:
        """Emit declarations for every schema in the tree.

        Returns:
            The complete declaration text.
        """
        self.writer.clear()
        self._tree = tree
        self._walk(tree)
        return self.writer.to_definition()

    def _walk(self, node: Namespace) -> None:
        for child in node.sorted_children():
            if child.leaf is not None:
                schema = child.leaf.schema
                logger.debug(f'emit schema: schemaId={schema.id.absolute_id}')
                self._emit_schema(schema)
            if child.children:
                with self.writer.namespace(to_type_name(child.name)):
                    self._walk(child)

    def _emit_schema(self, schema: Schema) -> None:
        normalized = self.normalizer.normalize(schema)
        self._current = normalized
        self._output_comments(normalized)

        schema_type = normalized.content.get('type')
        if schema_type in ('object', 'any'):
            self._generate_type_model(normalized)
        elif schema_type == 'array':
            self.writer.type_alias(self._declaration_name(normalized))
            self._generate_array_type_property(normalized, terminate=True)
        else:
            self.writer.type_alias(self._declaration_name(normalized))
            self._generate_type_property(normalized, terminate=True)

    def _generate_type_model(self, schema: Schema) -> None:
        with self.writer.interface(self._declaration_name(schema)):
            if schema.content.get('type') == 'any':
                self.writer.output_line('[name: string]: any; // any')
            self._generate_properties(schema)

    def _generate_properties(self, base: Schema) -> None:
        content = base.content
        additional = content.get('additionalProperties')
        if additional is not None and additional is not False:
            self.writer.output('[name: string]: ')
            if additional is True:
                self._output_string_type_name(base.with_content({}), 'any', terminate=True)
            else:
                sub = self.normalizer.normalize(base, '/additionalProperties')
                self._generate_type_property(sub, terminate=True)

        properties = content.get('properties')
        if not isinstance(properties, dict):
            return
        required = content.get('required')
        required = required if isinstance(required, list) else []
        for name in properties:
            sub = self.normalizer.normalize(
                base, '/properties/' + json_pointer.escape(name)
            )
            self._output_comments(sub)
            if sub.content.get('readOnly') is True:
                self.writer.output('readonly ')
            self.writer.output_key(name, optional=name not in required).output(': ')
            self._generate_type_property(sub)

    def _generate_type_property(self, schema: Schema, terminate: bool = True) -> None:
        content = schema.content
        ref = content.get('$ref')
        if isinstance(ref, str):
            target = self.resolver.dereference(ref)
            self._output_type_id_name(target, terminate)
            return

        alternatives = [
            f'/{keyword}/{index}'
            for keyword in ('anyOf', 'oneOf')
            if isinstance(content.get(keyword), list)
            for index in range(len(content[keyword]))
        ]
        if alternatives:
            self._output_arrayed_type(
                schema,
                alternatives,
                lambda pointer, _: self._output_inline_or_reference(
                    self.normalizer.normalize(schema, pointer)
                ),
                terminate,
            )
            return

        if isinstance(content.get('enum'), list):
            self._output_arrayed_type(
                schema,
                content['enum'],
                lambda value, _: self.writer.output(_enum_literal(value)),
                terminate,
            )
        elif 'const' in content:
            numeric = content.get('type') == 'integer'
            self._output_string_type_name(
                schema, _literal(content['const'], numeric), terminate
            )
        else:
            self._generate_type(schema, terminate)

    def _output_inline_or_reference(self, schema: Schema) -> None:
        if get_id(schema.dialect, schema.content) and self.resolver.has_schema(
            schema.id.absolute_id
        ):
            self._output_type_id_name(schema, terminate=False)
        else:
            self._generate_type_property(schema, terminate=False)

    def _generate_array_type_property(self, schema: Schema, terminate: bool = True) -> None:
        items = schema.content.get('items')
        min_items = schema.content.get('minItems')
        if items is None or (isinstance(items, list) and not items and min_items is None):
            self._output_string_type_name(schema, 'any[]', terminate)
        elif not isinstance(items, list):
            self._generate_type_property(
                self.normalizer.normalize(schema, '/items'), terminate=False
            )
            self._output_string_type_name(schema, '[]', terminate)
        else:
            self._generate_tuple_union(schema, items, min_items, terminate)

    def _generate_tuple_union(
        self, schema: Schema, items: list, min_items: int | None, terminate: bool
    ) -> None:
        effective_max_items = 1 + max(min_items or 0, len(items))
        start = 1 if min_items is None else min_items
        for length in range(start, effective_max_items + 1):
            self.writer.output('[')
            for index in range(length):
                if index > 0:
                    self.writer.output(', ')
                if index < len(items):
                    self._output_inline_or_reference(
                        self.normalizer.normalize(schema, f'/items/{index}')
                    )
                elif index < effective_max_items - 1:
                    self.writer.output('object')
                else:
                    self.writer.output('any')
            self.writer.output(']')
            if length < effective_max_items:
                self.writer.output(' | ')
        self._output_string_type_name(schema, '', terminate)

    def _generate_type(
        self, schema: Schema, terminate: bool, output_optional: bool = True
    ) -> None:
        schema_type = schema.content.get('type')
        if schema_type is None:
            self._output_string_type_name(schema, 'any', terminate, output_optional)
        elif isinstance(schema_type, list):
            self._output_arrayed_type(
                schema,
                schema_type,
                lambda t, _: self._generate_type_name(schema, t, False, False),
                terminate,
            )
        else:
            self._generate_type_name(schema, schema_type, terminate, output_optional)

    def _generate_type_name(
        self, schema: Schema, schema_type: Any, terminate: bool, output_optional: bool = True
    ) -> None:
        ts_type = to_ts_type(schema_type, schema.id.absolute_id)
        if ts_type:
            self._output_string_type_name(schema, ts_type, terminate, output_optional)
        elif schema_type == 'object':
            with self.writer.type_literal(terminate):
                self._generate_properties(schema)
        else:
            self._generate_array_type_property(schema, terminate)

    def _output_arrayed_type(
        self,
        schema: Schema,
        values: Sequence[Any],
        output: Callable[[Any, int], None],
        terminate: bool,
    ) -> None:
        if not terminate:
            self.writer.output('(')
        for index, value in enumerate(values):
            output(value, index)
            if index < len(values) - 1:
                self.writer.output(' | ')
        if not terminate:
            self.writer.output(')')
        self._output_type_name_trailer(schema, terminate)

    def _output_type_id_name(self, target: Schema, terminate: bool) -> None:
        self.writer.output(self._relative_type_name(target))
        self._output_type_name_trailer(target, terminate)

    def _relative_type_name(self, target: Schema) -> str:
        """Name `target` relative to the namespaces enclosing the current schema.

        Leading segments shared with the enclosing namespaces are dropped,
        unless a nearer enclosing namespace declares the first remaining name;
        TypeScript would bind the reference there instead. When even the full
        path is captured it is qualified with `globalThis`.
        """
        names = target.id.to_names()
        if not names:
            raise ResolutionError(target.id.absolute_id, 'target referenced id is nothing')
        base = self._current.id.to_names()[:-1] if self._current else []
        shared = 0
        for segment in base:
            if shared < len(names) - 1 and names[shared] == segment:
                shared += 1
            else:
                break
        type_names = [to_type_name(name) for name in names]
        while shared > 0 and self._is_shadowed(type_names[shared], base, shared):
            shared -= 1
        relative = '.'.join(type_names[shared:])
        if shared == 0 and self._is_shadowed(type_names[0], base, 0):
            logger.debug(f'{relative} is shadowed in {".".join(base)}')
            return 'globalThis.' + relative
        return relative

    def _is_shadowed(self, name: str, base: list[str], depth: int) -> bool:
        """Whether a namespace nested deeper than `depth` in `base` declares `name`."""
        for level in range(depth + 1, len(base) + 1):
            node = self._tree.get_node(base[:level])
            if node is not None and any(
                to_type_name(child) == name for child in node.children
            ):
                return True
        return False

    def _output_string_type_name(
        self, schema: Schema, type_name: str, terminate: bool, output_optional: bool = True
    ) -> None:
        if type_name:
            self.writer.output(type_name)
        self._output_type_name_trailer(schema, terminate, output_optional)

    def _output_type_name_trailer(
        self, schema: Schema, terminate: bool, output_optional: bool = True
    ) -> None:
        if terminate:
            self.writer.output(';')
        if output_optional:
            self._output_optional_information(schema, terminate)
        if terminate:
            self.writer.output_line()

    def _output_optional_information(self, schema: Schema, terminate: bool) -> None:
        content = schema.content if isinstance(schema.content, dict) else {}
        notes = [
            ' '.join(str(content[key]).replace('*/', '*\\/').split())
            for key in ('format', 'pattern')
            if content.get(key)
        ]
        if not notes:
            return
        if terminate:
            self.writer.output(' // ' + ' '.join(notes))
        else:
            self.writer.output(' /* ' + ' '.join(notes) + ' */')

    def _output_comments(self, schema: Schema) -> None:
        content = schema.content
        comments: list[Any] = [
            content.get('$comment'),
            content.get('title'),
            content.get('description'),
        ]
        if 'example' in content or 'examples' in content:
            comments.append('example:')
            if 'example' in content:
                comments.append(content['example'])
            examples = content.get('examples')
            if isinstance(examples, list):
                comments.extend(examples)
        self.writer.output_jsdoc(*comments)

    def _declaration_name(self, schema: Schema) -> str:
        return to_type_name(schema.id.get_interface_name())


def _literal(value: Any, numeric: bool) -> str:
    if numeric and isinstance(value, (int, float)) and not isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, str):
        return json.dumps(value)
    return json.dumps(json.dumps(value))


def _enum_literal(value: Any) -> str:
    return _literal(value, numeric=True)
