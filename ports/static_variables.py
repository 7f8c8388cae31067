"""
Port: StaticVariablesCollector
Odpowiedzialność: zebranie zmiennych `static` z ciała funkcji/metody
wraz z wartościami inicjalizatorów.
"""
from typing import Any, Protocol, Sequence, Union, runtime_checkable

from contracts import StmtNode, SyntaxNode
from ports.reflection import Subject


@runtime_checkable
class StaticVariablesCollector(Protocol):
    def collect(
        self,
        body: Union[SyntaxNode, Sequence[StmtNode]],
        subject: Subject,
    ) -> dict[str, Any]:
        """
        Walks the body (statement list or the declaring node) and returns
        an insertion-ordered map: variable name → resolved initial value
        (None when there is no initializer).
        Nested closures and declarations are not descended into.
        """
        ...
