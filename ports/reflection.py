"""
Port: ClassReflection + Subject
Odpowiedzialność: wąski interfejs encji klasy, z którego korzysta ewaluator,
oraz zamknięty zbiór wariantów "podmiotu" (kontekstu leksykalnego).

Podmiot to encja, na rzecz której rozwiązywane jest wyrażenie — od niego
zależą __CLASS__, __FUNCTION__, __NAMESPACE__, self::, parent:: itd.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class ClassReflection(Protocol):
    @property
    def name(self) -> str:
        """Fully-qualified name, without a leading backslash."""
        ...

    @property
    def short_name(self) -> str:
        ...

    @property
    def namespace_name(self) -> str:
        """Namespace part of the name; '' for the global namespace."""
        ...

    @property
    def file_name(self) -> Optional[str]:
        """Source file path, or None for native classes."""
        ...

    def is_interface(self) -> bool:
        ...

    def is_trait(self) -> bool:
        ...

    def is_user_defined(self) -> bool:
        """False for native (built-in) classes that have no syntax tree."""
        ...

    def get_parent_class(self) -> Optional[ClassReflection]:
        ...

    def has_constant(self, name: str) -> bool:
        ...

    def get_constant(self, name: str) -> Any:
        """
        Returns the value of a class constant (own or inherited).
        Returns False when the constant does not exist, like native reflection.
        """
        ...

    def get_constants(self) -> dict[str, Any]:
        ...


# ─────────────────────────── Warianty podmiotu ───────────────────────────

def _split_name(name: str) -> tuple[str, str]:
    """'App\\Util\\helper' → ('App\\Util', 'helper')."""
    namespace, _, short = name.rpartition("\\")
    return namespace, short


@dataclass(frozen=True)
class FileSubject:
    file_name: str


@dataclass(frozen=True)
class NamespaceSubject:
    name: str
    file_name: Optional[str] = None


@dataclass(frozen=True)
class FunctionSubject:
    name: str  # FQN funkcji
    file_name: Optional[str] = None

    @property
    def namespace_name(self) -> str:
        return _split_name(self.name)[0]

    @property
    def short_name(self) -> str:
        return _split_name(self.name)[1]


@dataclass(frozen=True)
class ClassSubject:
    reflection: ClassReflection


@dataclass(frozen=True)
class MethodSubject:
    name: str
    declaring_class: ClassReflection


@dataclass(frozen=True)
class PropertySubject:
    name: str
    declaring_class: ClassReflection


Subject = Union[
    FileSubject, NamespaceSubject, FunctionSubject,
    ClassSubject, MethodSubject, PropertySubject,
]
