"""
NodeTraverser — generyczne przejście drzewa składni w głąb (pre-order).

Odwiedzający (visitor) implementuje enter_node(node); zwrócenie
DONT_TRAVERSE_CHILDREN pomija poddrzewo bieżącego węzła.
Dzieci węzła wyznacza SyntaxNode.sub_nodes() — kolejność deklaracji pól.
"""
from __future__ import annotations

from typing import Iterable, Optional, Protocol

from contracts import SyntaxNode

DONT_TRAVERSE_CHILDREN = "dont_traverse_children"


class NodeVisitor(Protocol):
    def enter_node(self, node: SyntaxNode) -> Optional[str]:
        ...


class NodeTraverser:
    def __init__(self, *visitors: NodeVisitor) -> None:
        self._visitors = list(visitors)

    def traverse(self, nodes: Iterable[SyntaxNode]) -> None:
        # Jawny stos zamiast rekurencji
        stack = list(reversed(list(nodes)))
        while stack:
            node = stack.pop()
            descend = True
            for visitor in self._visitors:
                if visitor.enter_node(node) == DONT_TRAVERSE_CHILDREN:
                    descend = False
            if descend:
                stack.extend(reversed(list(node.sub_nodes())))
