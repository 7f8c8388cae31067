"""
Adapter: NodeFunctionReflection
Encja funkcji z węzła FunctionDeclNode — zmienne statyczne i wartości
domyślne parametrów liczone bez wykonywania ciała.
"""
from __future__ import annotations

from typing import Any, Optional

from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from adapters.node_visitor.static_variables_collector import StaticVariablesCollector
from contracts import FunctionDeclNode, ReflectionError, ResolutionResult
from ports.context import ReflectionContext
from ports.reflection import FunctionSubject


class NodeFunctionReflection:
    def __init__(
        self,
        name: str,
        function_node: FunctionDeclNode,
        context: ReflectionContext,
        file_name: Optional[str] = None,
    ) -> None:
        self._subject = FunctionSubject(name.lstrip("\\"), file_name)
        self._node = function_node
        self._context = context

    @property
    def name(self) -> str:
        return self._subject.name

    @property
    def short_name(self) -> str:
        return self._subject.short_name

    @property
    def namespace_name(self) -> str:
        return self._subject.namespace_name

    @property
    def file_name(self) -> Optional[str]:
        return self._subject.file_name

    @property
    def node(self) -> FunctionDeclNode:
        return self._node

    def get_static_variables(self) -> dict[str, Any]:
        collector = StaticVariablesCollector(self._context)
        return collector.collect(self._node, self._subject)

    def get_parameter_default(self, param_name: str) -> ResolutionResult:
        for param in self._node.params:
            if param.name != param_name:
                continue
            if param.default is None:
                raise ReflectionError(
                    f"Parameter ${param_name} of {self.name}() has no default value"
                )
            return NodeExpressionResolver(self._subject, self._context).process(param.default)
        raise ReflectionError(f"Parameter ${param_name} of {self.name}() does not exist")

    def get_parameter_defaults(self) -> dict[str, Any]:
        resolver = NodeExpressionResolver(self._subject, self._context)
        return {
            param.name: resolver.process(param.default).value
            for param in self._node.params
            if param.default is not None
        }

    def __repr__(self) -> str:
        return f"<NodeFunctionReflection {self.name}>"
