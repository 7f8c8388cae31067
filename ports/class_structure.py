"""
Port: ClassStructureResolver
Odpowiedzialność: rozwiązanie interfejsów i traitów zadeklarowanych
bezpośrednio przez węzeł klasy do encji klas (przez ReflectionContext).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from contracts import ClassLikeNode, TraitAdaptationNode
from ports.context import ReflectionContext
from ports.reflection import ClassReflection


@dataclass
class TraitsResult:
    traits: dict[str, ClassReflection] = field(default_factory=dict)
    adaptations: list[TraitAdaptationNode] = field(default_factory=list)


@runtime_checkable
class ClassStructureResolver(Protocol):
    def collect_interfaces(
        self,
        class_node: ClassLikeNode,
        context: ReflectionContext,
    ) -> dict[str, ClassReflection]:
        """
        Returns FQN → reflection for interfaces listed directly by the node
        (`implements` for classes, `extends` for interfaces).
        Empty mapping when nothing is declared.
        """
        ...

    def collect_traits(
        self,
        class_node: ClassLikeNode,
        context: ReflectionContext,
    ) -> TraitsResult:
        """
        Returns FQN → reflection for traits used directly by the node, plus
        the adaptation list of the LAST trait-use statement in source order.
        """
        ...
