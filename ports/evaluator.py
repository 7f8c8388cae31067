"""
Port: ExpressionEvaluator
Odpowiedzialność: statyczne wyliczenie wartości wyrażenia z drzewa składni
bez wykonywania programu.
"""
from typing import Protocol, runtime_checkable

from contracts import ExprNode, ResolutionResult


@runtime_checkable
class ExpressionEvaluator(Protocol):
    def process(self, node: ExprNode) -> ResolutionResult:
        """
        Resolves a single expression node against the subject the evaluator
        was created for.
        Returns ResolutionResult with:
          - value: int / float / str / bool / None / dict (array literal)
          - is_constant + constant_name: set only when the whole expression
            is a named constant reference
          - status: resolved / unresolved_as_literal / unsupported
        Raises ReflectionError when a class reference cannot be resolved.
        """
        ...
