"""
Adapter: NodeClassReflection
Encja klasy zbudowana z węzła drzewa składni + ReflectionContext.

Wszystko liczone leniwie, przy pierwszym zapytaniu:
  - rodzic (FQN lub nazwa względna w przestrzeni nazw pliku)
  - interfejsy: bezpośrednie, potem dziedziczone z interfejsów i rodzica
  - traity i adaptacje (ClassStructureResolver)
  - stałe: własne, potem rodzica, potem interfejsów (NodeExpressionResolver
    z podmiotem = ta klasa); stała odwołująca się do samej siebie → ReflectionError
  - domyślne wartości właściwości, zmienne statyczne i domyślne parametry metod
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from adapters.class_structure.class_structure_resolver import ClassStructureResolver
from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from adapters.node_visitor.static_variables_collector import StaticVariablesCollector
from contracts import (
    ClassConstNode,
    ClassDeclNode,
    ClassLikeNode,
    ClassMethodNode,
    ConstEntryNode,
    InterfaceDeclNode,
    PropertyNode,
    ReflectionError,
    ResolutionResult,
    TraitAdaptationNode,
    TraitAliasNode,
    TraitDeclNode,
)
from ports.context import ReflectionContext
from ports.reflection import ClassReflection, ClassSubject, MethodSubject, PropertySubject

logger = logging.getLogger("static_reflection.reflection")


class NodeClassReflection:
    """Refleksja klasy/interfejsu/traitu bez ładowania kodu."""

    def __init__(
        self,
        name: str,
        class_node: ClassLikeNode,
        context: ReflectionContext,
        file_name: Optional[str] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._name = name.lstrip("\\")
        self._node = class_node
        self._context = context
        self._file_name = file_name
        self._structure = ClassStructureResolver()
        self._constant_values: dict[str, Any] = {}
        self._evaluating: set[str] = set()
        # Kontekst przekazuje swoją blokadę: jeden zamek na cały graf klas
        self._lock = lock if lock is not None else threading.RLock()

    # -- Nazwy i rodzaj ---------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def short_name(self) -> str:
        return self._name.rpartition("\\")[2]

    @property
    def namespace_name(self) -> str:
        return self._name.rpartition("\\")[0]

    @property
    def file_name(self) -> Optional[str]:
        return self._file_name

    @property
    def node(self) -> ClassLikeNode:
        return self._node

    def is_interface(self) -> bool:
        return isinstance(self._node, InterfaceDeclNode)

    def is_trait(self) -> bool:
        return isinstance(self._node, TraitDeclNode)

    def is_abstract(self) -> bool:
        return self.is_interface() or (
            isinstance(self._node, ClassDeclNode) and self._node.abstract
        )

    def is_final(self) -> bool:
        return isinstance(self._node, ClassDeclNode) and self._node.final

    def is_user_defined(self) -> bool:
        return True

    # -- Hierarchia ------------------------------------------------------------

    def get_parent_class(self) -> Optional[ClassReflection]:
        if not isinstance(self._node, ClassDeclNode) or self._node.extends is None:
            return None
        extends = self._node.extends
        if extends.fully_qualified:
            return self._context.get_class_reflection(extends.to_string())
        return self._context.get_namespace_class(
            self._file_name, self.namespace_name, extends.to_string()
        )

    def get_interfaces(self) -> dict[str, ClassReflection]:
        interfaces: dict[str, ClassReflection] = {}
        direct = self._structure.collect_interfaces(self._node, self._context)
        for name, interface in direct.items():
            interfaces[name] = interface
            for inherited_name, inherited in _interfaces_of(interface).items():
                interfaces.setdefault(inherited_name, inherited)
        parent = self.get_parent_class()
        if parent is not None:
            for inherited_name, inherited in _interfaces_of(parent).items():
                interfaces.setdefault(inherited_name, inherited)
        return interfaces

    def get_interface_names(self) -> list[str]:
        return list(self.get_interfaces())

    def implements_interface(self, name: str) -> bool:
        wanted = name.lstrip("\\").lower()
        return any(n.lower() == wanted for n in self.get_interfaces())

    def get_traits(self) -> dict[str, ClassReflection]:
        return self._structure.collect_traits(self._node, self._context).traits

    def get_trait_names(self) -> list[str]:
        return list(self.get_traits())

    def get_trait_adaptations(self) -> list[TraitAdaptationNode]:
        return self._structure.collect_traits(self._node, self._context).adaptations

    def get_trait_aliases(self) -> dict[str, str]:
        """{alias: 'Trait::method'} — jak natywne getTraitAliases()."""
        traits_result = self._structure.collect_traits(self._node, self._context)
        aliases: dict[str, str] = {}
        for adaptation in traits_result.adaptations:
            if not isinstance(adaptation, TraitAliasNode) or adaptation.new_name is None:
                continue
            if adaptation.trait is not None:
                trait_name = adaptation.trait.to_string()
            else:
                trait_name = _trait_declaring(traits_result.traits, adaptation.method)
                if trait_name is None:
                    continue
            aliases[adaptation.new_name] = f"{trait_name}::{adaptation.method}"
        return aliases

    # -- Stałe ------------------------------------------------------------------

    def _own_constant_nodes(self) -> dict[str, ConstEntryNode]:
        entries: dict[str, ConstEntryNode] = {}
        for stmt in self._node.stmts:
            if isinstance(stmt, ClassConstNode):
                for entry in stmt.consts:
                    entries[entry.name] = entry
        return entries

    def _inherited_sources(self) -> list[ClassReflection]:
        sources: list[ClassReflection] = []
        parent = self.get_parent_class()
        if parent is not None:
            sources.append(parent)
        sources.extend(self._structure.collect_interfaces(self._node, self._context).values())
        return sources

    def _evaluate_constant(self, entry: ConstEntryNode) -> Any:
        with self._lock:
            if entry.name in self._constant_values:
                return self._constant_values[entry.name]
            if entry.name in self._evaluating:
                raise ReflectionError(
                    f"Cannot declare self-referencing constant {self._name}::{entry.name}"
                )
            self._evaluating.add(entry.name)
            try:
                resolver = NodeExpressionResolver(ClassSubject(self), self._context)
                value = resolver.process(entry.value).value
            finally:
                self._evaluating.discard(entry.name)
            self._constant_values[entry.name] = value
            return value

    def has_constant(self, name: str) -> bool:
        if name in self._own_constant_nodes():
            return True
        return any(source.has_constant(name) for source in self._inherited_sources())

    def get_constant(self, name: str) -> Any:
        own = self._own_constant_nodes()
        if name in own:
            return self._evaluate_constant(own[name])
        for source in self._inherited_sources():
            if source.has_constant(name):
                return source.get_constant(name)
        logger.debug("Constant %s::%s not found", self._name, name)
        return False

    def get_constants(self) -> dict[str, Any]:
        constants = {
            name: self._evaluate_constant(entry)
            for name, entry in self._own_constant_nodes().items()
        }
        for source in self._inherited_sources():
            for name, value in source.get_constants().items():
                constants.setdefault(name, value)
        return constants

    # -- Właściwości ------------------------------------------------------------

    def get_default_properties(self) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for stmt in self._node.stmts:
            if not isinstance(stmt, PropertyNode):
                continue
            value = None
            if stmt.default is not None:
                resolver = NodeExpressionResolver(PropertySubject(stmt.name, self), self._context)
                value = resolver.process(stmt.default).value
            properties[stmt.name] = value

        parent = self.get_parent_class()
        if isinstance(parent, NodeClassReflection):
            for name, value in parent._inherited_properties().items():
                properties.setdefault(name, value)
        return properties

    def _inherited_properties(self) -> dict[str, Any]:
        private = {
            stmt.name for stmt in self._node.stmts
            if isinstance(stmt, PropertyNode) and stmt.visibility == "private"
        }
        return {
            name: value for name, value in self.get_default_properties().items()
            if name not in private
        }

    # -- Metody -----------------------------------------------------------------

    def _find_method(
        self, name: str
    ) -> Optional[tuple[ClassMethodNode, NodeClassReflection]]:
        """(węzeł metody, klasa deklarująca); metody traitów należą do klasy używającej."""
        wanted = name.lower()
        for stmt in self._node.stmts:
            if isinstance(stmt, ClassMethodNode) and stmt.name.lower() == wanted:
                return stmt, self
        for trait in self.get_traits().values():
            if isinstance(trait, NodeClassReflection):
                found = trait._find_method(name)
                if found is not None:
                    return found[0], self
        parent = self.get_parent_class()
        if isinstance(parent, NodeClassReflection):
            return parent._find_method(name)
        return None

    def get_method_node(self, name: str) -> Optional[ClassMethodNode]:
        """Metoda własna, potem z traitów, potem z rodzica (bez rozróżniania wielkości liter)."""
        found = self._find_method(name)
        return found[0] if found is not None else None

    def get_method_names(self) -> list[str]:
        """Metody własne, z traitów i dziedziczone, w pisowni z deklaracji."""
        names: dict[str, str] = {}
        sources: list[ClassReflection] = [self, *self.get_traits().values()]
        parent = self.get_parent_class()
        if parent is not None:
            sources.append(parent)
        for source in sources:
            if not isinstance(source, NodeClassReflection):
                continue
            nested = (
                [stmt.name for stmt in source._node.stmts if isinstance(stmt, ClassMethodNode)]
                if source is self else source.get_method_names()
            )
            for method_name in nested:
                names.setdefault(method_name.lower(), method_name)
        return list(names.values())

    def _method_subject(self, name: str) -> tuple[ClassMethodNode, MethodSubject]:
        found = self._find_method(name)
        if found is None:
            raise ReflectionError(f"Method {self._name}::{name}() does not exist")
        method, declaring_class = found
        return method, MethodSubject(method.name, declaring_class)

    def get_static_variables(self, method_name: str) -> dict[str, Any]:
        method, subject = self._method_subject(method_name)
        collector = StaticVariablesCollector(self._context)
        return collector.collect(method, subject)

    def get_parameter_default(self, method_name: str, param_name: str) -> ResolutionResult:
        method, subject = self._method_subject(method_name)
        for param in method.params:
            if param.name == param_name:
                if param.default is None:
                    raise ReflectionError(
                        f"Parameter ${param_name} of {self._name}::{method.name}() "
                        "has no default value"
                    )
                return NodeExpressionResolver(subject, self._context).process(param.default)
        raise ReflectionError(
            f"Parameter ${param_name} of {self._name}::{method.name}() does not exist"
        )

    def get_parameter_defaults(self, method_name: str) -> dict[str, Any]:
        method, subject = self._method_subject(method_name)
        resolver = NodeExpressionResolver(subject, self._context)
        return {
            param.name: resolver.process(param.default).value
            for param in method.params
            if param.default is not None
        }

    def __repr__(self) -> str:
        return f"<NodeClassReflection {self._name}>"


def _interfaces_of(reflection: ClassReflection) -> dict[str, ClassReflection]:
    get_interfaces = getattr(reflection, "get_interfaces", None)
    return get_interfaces() if get_interfaces is not None else {}


def _trait_declaring(traits: dict[str, ClassReflection], method: str) -> Optional[str]:
    for trait_name, trait in traits.items():
        if isinstance(trait, NodeClassReflection) and trait.get_method_node(method) is not None:
            return trait_name
    return None
