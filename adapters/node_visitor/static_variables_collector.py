"""
Adapter: StaticVariablesCollector
Implementuje port StaticVariablesCollector — zbiera zmienne `static`
z ciała funkcji/metody i wylicza ich inicjalizatory.

Granice zasięgu (nie schodzimy do środka):
  closure, arrow function, zagnieżdżona deklaracja funkcji, klasa anonimowa
  — ich zmienne statyczne należą do własnego zasięgu.

Późniejsza deklaracja tej samej nazwy nadpisuje wcześniejszą.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from adapters.node_visitor.node_traverser import DONT_TRAVERSE_CHILDREN, NodeTraverser
from contracts import (
    ArrowFunctionNode,
    ClassDeclNode,
    ClassMethodNode,
    ClosureNode,
    FunctionDeclNode,
    InterfaceDeclNode,
    StaticStmtNode,
    StmtNode,
    SyntaxNode,
    TraitDeclNode,
)
from ports.context import ReflectionContext
from ports.reflection import Subject

logger = logging.getLogger("static_reflection.static_variables")

_SCOPE_BOUNDARIES = (
    ClosureNode,
    ArrowFunctionNode,
    FunctionDeclNode,
    ClassDeclNode,
    InterfaceDeclNode,
    TraitDeclNode,
)

_DECLARING_NODES = (FunctionDeclNode, ClassMethodNode, ClosureNode)


class _StaticVariablesVisitor:
    def __init__(self, resolver: NodeExpressionResolver) -> None:
        self._resolver = resolver
        self.static_variables: dict[str, Any] = {}

    def enter_node(self, node: SyntaxNode) -> Optional[str]:
        # Wewnętrzne closure/deklaracje mają własny zasięg
        if isinstance(node, _SCOPE_BOUNDARIES):
            return DONT_TRAVERSE_CHILDREN

        if isinstance(node, StaticStmtNode):
            for static_var in node.vars:
                if static_var.default is not None:
                    value = self._resolver.process(static_var.default).value
                else:
                    value = None
                self.static_variables[static_var.name] = value
            return DONT_TRAVERSE_CHILDREN

        return None


class StaticVariablesCollector:
    """Zmienne statyczne ciała funkcji → {nazwa: wartość początkowa}."""

    def __init__(self, context: Optional[ReflectionContext] = None) -> None:
        self._context = context

    # -- StaticVariablesCollector protocol --------------------------------

    def collect(
        self,
        body: Union[SyntaxNode, Sequence[StmtNode]],
        subject: Subject,
    ) -> dict[str, Any]:
        if isinstance(body, _DECLARING_NODES):
            stmts = list(body.stmts or [])
        elif isinstance(body, SyntaxNode):
            stmts = [body]
        else:
            stmts = list(body)

        visitor = _StaticVariablesVisitor(NodeExpressionResolver(subject, self._context))
        NodeTraverser(visitor).traverse(stmts)

        logger.debug("Collected %d static variable(s)", len(visitor.static_variables))
        return visitor.static_variables
