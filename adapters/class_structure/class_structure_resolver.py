"""
Adapter: ClassStructureResolver
Implementuje port ClassStructureResolver — interfejsy i traity zadeklarowane
bezpośrednio w węźle klasy → {FQN: encja klasy} przez ReflectionContext.

Uwagi:
  - interfejs czyta listę `extends`, klasa — `implements`, trait nie ma żadnej
  - rozwiązywane są tylko nazwy w pełni kwalifikowane (parser z resolverem
    nazw zawsze takie produkuje); pozostałe są pomijane z ostrzeżeniem
  - adaptacje traitów: zostaje lista z OSTATNIEGO `use` w kolejności źródła
"""
from __future__ import annotations

import logging

from contracts import ClassLikeNode, InterfaceDeclNode, NameNode, TraitUseNode
from ports.class_structure import TraitsResult
from ports.context import ReflectionContext
from ports.reflection import ClassReflection

logger = logging.getLogger("static_reflection.class_structure")


class ClassStructureResolver:
    """Rozwiązuje interfejsy i traity węzła klasy."""

    # -- ClassStructureResolver protocol ----------------------------------

    def collect_interfaces(
        self,
        class_node: ClassLikeNode,
        context: ReflectionContext,
    ) -> dict[str, ClassReflection]:
        interfaces: dict[str, ClassReflection] = {}

        is_interface = isinstance(class_node, InterfaceDeclNode)
        interface_field = "extends" if is_interface else "implements"
        has_interfaces = interface_field in class_node.sub_node_names()
        implements_list: list[NameNode] = (
            getattr(class_node, interface_field) if has_interfaces else []
        )

        for implement_node in implements_list or []:
            if not self._is_resolvable(implement_node, class_node):
                continue
            implement_name = implement_node.to_string()
            interfaces[implement_name] = context.get_class_reflection(implement_name)

        return interfaces

    def collect_traits(
        self,
        class_node: ClassLikeNode,
        context: ReflectionContext,
    ) -> TraitsResult:
        result = TraitsResult()

        for class_level_node in class_node.stmts:
            if not isinstance(class_level_node, TraitUseNode):
                continue
            for trait_name_node in class_level_node.traits:
                if not self._is_resolvable(trait_name_node, class_node):
                    continue
                trait_name = trait_name_node.to_string()
                result.traits[trait_name] = context.get_class_reflection(trait_name)
            result.adaptations = list(class_level_node.adaptations)

        return result

    # -- Prywatne -----------------------------------------------------------

    @staticmethod
    def _is_resolvable(name: NameNode, class_node: ClassLikeNode) -> bool:
        if name.fully_qualified:
            return True
        logger.warning(
            "Skipping non fully-qualified reference %r in %r",
            name.to_string(), class_node.name,
        )
        return False
