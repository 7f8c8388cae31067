"""
Adapter: BuiltinClassReflection
Encja klasy natywnej (wbudowanej) — nie ma drzewa składni, ma tylko
tablicę stałych, rodzica i listę interfejsów.
"""
from __future__ import annotations

from typing import Any, Callable, Optional


class BuiltinClassReflection:
    """Klasa wbudowana; is_user_defined() == False."""

    def __init__(
        self,
        name: str,
        constants: Optional[dict[str, Any]] = None,
        parent: Optional[str] = None,
        interfaces: tuple[str, ...] = (),
        is_interface: bool = False,
        lookup: Optional[Callable[[str], Optional[BuiltinClassReflection]]] = None,
    ) -> None:
        self._name = name
        self._constants = dict(constants or {})
        self._parent = parent
        self._interfaces = interfaces
        self._is_interface = is_interface
        self._lookup = lookup

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
        return None

    def is_interface(self) -> bool:
        return self._is_interface

    def is_trait(self) -> bool:
        return False

    def is_user_defined(self) -> bool:
        return False

    def get_parent_class(self) -> Optional[BuiltinClassReflection]:
        if self._parent is None or self._lookup is None:
            return None
        return self._lookup(self._parent)

    def get_interfaces(self) -> dict[str, BuiltinClassReflection]:
        """Interfejsy bezpośrednie i dziedziczone (z interfejsów i rodzica)."""
        interfaces: dict[str, BuiltinClassReflection] = {}
        if self._lookup is None:
            return interfaces
        for name in self._interfaces:
            interface = self._lookup(name)
            if interface is None:
                continue
            interfaces[interface.name] = interface
            for inherited_name, inherited in interface.get_interfaces().items():
                interfaces.setdefault(inherited_name, inherited)
        parent = self.get_parent_class()
        if parent is not None:
            for inherited_name, inherited in parent.get_interfaces().items():
                interfaces.setdefault(inherited_name, inherited)
        return interfaces

    def get_interface_names(self) -> list[str]:
        return list(self.get_interfaces())

    def get_constants(self) -> dict[str, Any]:
        constants = dict(self._constants)
        related = [self.get_parent_class()]
        if self._lookup is not None:
            related += [self._lookup(name) for name in self._interfaces]
        for other in related:
            if other is None:
                continue
            for key, value in other.get_constants().items():
                constants.setdefault(key, value)
        return constants

    def has_constant(self, name: str) -> bool:
        return name in self.get_constants()

    def get_constant(self, name: str) -> Any:
        return self.get_constants().get(name, False)

    def __repr__(self) -> str:
        return f"<BuiltinClassReflection {self._name}>"
