"""
reflection.py — fasada nad trzema komponentami rdzenia.

Funkcje modułowe dla wywołań jednorazowych; przy wielu zapytaniach na tym
samym kontekście lepiej trzymać własne instancje adapterów.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from adapters.class_structure.class_structure_resolver import ClassStructureResolver
from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from adapters.node_visitor.static_variables_collector import StaticVariablesCollector
from contracts import ClassLikeNode, ExprNode, ResolutionResult, StmtNode, SyntaxNode
from ports.class_structure import TraitsResult
from ports.context import ReflectionContext
from ports.reflection import ClassReflection, Subject


def evaluate(
    node: ExprNode,
    subject: Subject,
    context: Optional[ReflectionContext] = None,
) -> ResolutionResult:
    return NodeExpressionResolver(subject, context).process(node)


def collect_static_variables(
    body: Union[SyntaxNode, Sequence[StmtNode]],
    subject: Subject,
    context: Optional[ReflectionContext] = None,
) -> dict[str, Any]:
    return StaticVariablesCollector(context).collect(body, subject)


def collect_interfaces(
    class_node: ClassLikeNode,
    context: ReflectionContext,
) -> dict[str, ClassReflection]:
    return ClassStructureResolver().collect_interfaces(class_node, context)


def collect_traits(class_node: ClassLikeNode, context: ReflectionContext) -> TraitsResult:
    return ClassStructureResolver().collect_traits(class_node, context)
