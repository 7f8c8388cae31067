"""
Port: ReflectionContext
Odpowiedzialność: lokalizacja i parsowanie klas/funkcji/stałych po nazwie.

Rdzeń (ewaluator, kolektor, resolver) tylko KONSUMUJE ten port — to jedyne
miejsce, w którym może wystąpić I/O lub leniwe parsowanie pliku.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from contracts import ClassLikeNode
from ports.reflection import ClassReflection


@runtime_checkable
class ReflectionContext(Protocol):
    def parse_class(self, fqn: str) -> ClassLikeNode:
        """
        Returns the class-like node declared under the fully-qualified name.
        Raises ReflectionError if the class cannot be located.
        """
        ...

    def get_class_reflection(self, fqn: str) -> ClassReflection:
        """
        Returns an already created or newly built class reflection.
        Raises ReflectionError if the class cannot be located.
        """
        ...

    def get_builtin_class(self, fqn: str) -> Optional[ClassReflection]:
        """Returns a native (not user-defined) class, or None."""
        ...

    def get_namespace_class(
        self,
        file_name: Optional[str],
        namespace: str,
        name: str,
    ) -> ClassReflection:
        """
        Resolves a namespace-relative class name as seen from the given
        file and namespace. Raises ReflectionError if not found.
        """
        ...

    def find_namespace_constant(
        self,
        file_name: Optional[str],
        namespace: str,
        name: str,
    ) -> tuple[bool, Any]:
        """
        Looks up a constant declared in the given file's namespace
        (`const` statement or define() call).
        Returns (found, value).
        """
        ...

    def get_global_constant(self, name: str) -> tuple[bool, Any]:
        """
        Looks up a constant by its full name among all known constants
        (user-declared and built-in). Returns (found, value).
        """
        ...
