"""Nesting-aware text writer for TypeScript declarations.

Nested blocks are entered through context managers so every opened block
is closed on every path out of it, including exceptions.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from schema2dts.codegen.utils import is_identifier

__all__ = ['DeclarationWriter']


class DeclarationWriter:
    """Accumulates declaration text with indentation tracking.

    Example:
        >>> writer = DeclarationWriter()
        >>> with writer.namespace('Components'):
        ...     writer.type_alias('Id')
        ...     writer.output_line('string;')
        >>> print(writer.to_definition())
        declare namespace Components {
            export type Id = string;
        }
    """

    def __init__(self, indent: str = '    '):
        self.indent = indent
        self.indent_level = 0
        self._parts: list[str] = []
        self._line_started = False

    def clear(self) -> None:
        self._parts = []
        self.indent_level = 0
        self._line_started = False

    def to_definition(self) -> str:
        return ''.join(self._parts)

    def output(self, text: str) -> 'DeclarationWriter':
        self._do_indent()
        self._parts.append(text)
        return self

    def output_line(self, text: str = '') -> 'DeclarationWriter':
        self._do_indent()
        if text:
            self._parts.append(text)
        self._parts.append('\n')
        self._line_started = False
        return self

    def output_key(self, name: str, optional: bool = False) -> 'DeclarationWriter':
        self.output(name if is_identifier(name) else json.dumps(name))
        if optional:
            self.output('?')
        return self

    def output_jsdoc(self, *comments: Any) -> None:
        """Write a `/** ... */` block; empty comments are skipped."""
        lines: list[str] = []
        for comment in comments:
            if comment is None or comment == '':
                continue
            text = comment if isinstance(comment, str) else json.dumps(comment)
            lines.extend(text.replace('*/', '*\\/').splitlines())
        if not lines:
            return
        self.output_line('/**')
        for line in lines:
            self.output_line(f' * {line}'.rstrip())
        self.output_line(' */')

    def declaration_prefix(self) -> str:
        return 'declare ' if self.indent_level == 0 else 'export '

    def type_alias(self, name: str) -> None:
        self.output(self.declaration_prefix()).output('type ').output(name).output(' = ')

    @contextmanager
    def nested(self) -> Iterator[None]:
        self.indent_level += 1
        try:
            yield
        finally:
            self.indent_level -= 1

    @contextmanager
    def namespace(self, name: str) -> Iterator[None]:
        if self.indent_level == 0:
            self.output('declare ')
        self.output('namespace ').output(name).output_line(' {')
        with self.nested():
            yield
        self.output_line('}')

    @contextmanager
    def interface(self, name: str) -> Iterator[None]:
        self.output(self.declaration_prefix()).output('interface ').output(name).output(' ')
        with self.type_literal(terminate=False):
            yield
        self.output_line()

    @contextmanager
    def type_literal(self, terminate: bool) -> Iterator[None]:
        self.output_line('{')
        with self.nested():
            yield
        self.output('}')
        if terminate:
            self.output_line(';')

    def _do_indent(self) -> None:
        if not self._line_started:
            self._parts.append(self.indent * self.indent_level)
            self._line_started = True
