"""Namespace tree built from the registered schemas.

Every schema is placed at the path given by its id segments. A node may
hold a schema (its `leaf`), child namespaces, or both.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from schema2dts.codegen.schema import Schema
from schema2dts.exceptions import SchemaError

logger = logging.getLogger(__name__)

__all__ = ['Leaf', 'Namespace', 'build_tree']


@dataclass(frozen=True)
class Leaf:
    """The schema declared at a namespace path."""

    schema: Schema


@dataclass
class Namespace:
    """A node of the namespace tree.

    Attributes:
        name: The id segment this node is keyed by (empty for the root).
        leaf: The schema declared at this path, if any.
        children: Child namespaces keyed by id segment.
    """

    name: str
    leaf: Leaf | None = None
    children: dict[str, Namespace] = field(default_factory=dict)

    def insert(self, path: list[str], schema: Schema) -> None:
        """Place `schema` at `path`, creating intermediate namespaces.

        A schema already placed at the same path is replaced.
        """
        current = self
        for part in path:
            if part not in current.children:
                current.children[part] = Namespace(name=part)
            current = current.children[part]
        if current.leaf is not None:
            logger.debug(
                f'namespace path {"/".join(path)} replaced: '
                f'{current.leaf.schema.id.absolute_id} -> {schema.id.absolute_id}'
            )
        current.leaf = Leaf(schema)

    def get_node(self, path: list[str]) -> Namespace | None:
        current = self
        for part in path:
            if part not in current.children:
                return None
            current = current.children[part]
        return current

    def sorted_children(self) -> list[Namespace]:
        return [self.children[key] for key in sorted(self.children)]

    def walk(self) -> Iterator[tuple[list[str], Namespace]]:
        """Iterate over all nodes depth-first in key order."""
        yield from self._walk_recursive([])

    def _walk_recursive(self, path: list[str]) -> Iterator[tuple[list[str], Namespace]]:
        yield path, self
        for child in self.sorted_children():
            yield from child._walk_recursive(path + [child.name])

    def count_leaves(self) -> int:
        return sum(1 for _, node in self.walk() if node.leaf is not None)


def build_tree(schemas: Iterable[Schema]) -> Namespace:
    """Fold schemas into one namespace tree keyed by id segments.

    Raises:
        SchemaError: If no schema could be placed.
    """
    root = Namespace(name='')
    for schema in schemas:
        path = schema.id.to_names()
        if not path:
            logger.warning(
                'schema without an id cannot be declared; add an id or $id to it'
            )
            continue
        root.insert(path, schema)

    if not root.children:
        raise SchemaError('There is no schema in the input contents.')
    return root
