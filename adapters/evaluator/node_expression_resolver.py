"""
Adapter: NodeExpressionResolver
Implementuje port ExpressionEvaluator — rekurencyjne przejście drzewa wyrażenia
i wyliczenie wartości bez wykonywania kodu.

Obsługiwane:
  - skalary (int, float, string) i magiczne stałe (__CLASS__, __LINE__, ...)
  - stałe (globalne, przestrzeni nazw) i stałe klas (self::, parent::, FQN::)
  - tablice (klucze jawne, kolejne indeksy, ...spread)
  - operatory arytmetyczne, bitowe, logiczne, porównania, ternary, ??

Węzły bez wartości w czasie kompilacji (zmienne, wywołania, new, closure)
dają null — bez wyjątku (status UNSUPPORTED).

Stan rekurencji (poziom zagnieżdżenia, flaga stałej, lista nierozwiązanych
nazw) jest przekazywany jawnie — instancję można wywoływać wielokrotnie.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from adapters.context import builtins
from adapters.evaluator.php_operators import (
    BINARY_OPS,
    UNARY_OPS,
    normalize_array_key,
    php_type_name,
    to_bool,
)
from contracts import (
    ArrayNode,
    BinaryOpNode,
    ClassConstFetchNode,
    ConstFetchNode,
    ExprNode,
    FloatNode,
    IntNode,
    MagicConstNode,
    NameNode,
    ReflectionError,
    ResolutionResult,
    ResolutionStatus,
    StringNode,
    TernaryNode,
    UnaryOpNode,
)
from ports.context import ReflectionContext
from ports.reflection import (
    ClassReflection,
    ClassSubject,
    FileSubject,
    FunctionSubject,
    MethodSubject,
    NamespaceSubject,
    PropertySubject,
    Subject,
)

logger = logging.getLogger("static_reflection.evaluator")

# Literały, które nigdy nie są "nazwaną stałą"
_NOT_CONSTANTS = {
    "true": True,
    "false": False,
    "null": None,
}


@dataclass
class _ResolutionState:
    level: int = 0              # 1 = węzeł najwyższego poziomu
    is_constant: bool = False
    constant_name: Optional[str] = None
    unsupported: bool = False
    unresolved: list[str] = field(default_factory=list)


class NodeExpressionResolver:
    """Statyczny ewaluator wyrażeń dla jednego podmiotu (subject)."""

    def __init__(
        self,
        subject: Subject,
        context: Optional[ReflectionContext] = None,
    ) -> None:
        self._subject = subject
        self._context = context

    # -- ExpressionEvaluator protocol -------------------------------------

    def process(self, node: ExprNode) -> ResolutionResult:
        state = _ResolutionState()
        value = self._resolve(node, state)

        if state.unsupported:
            status = ResolutionStatus.UNSUPPORTED
        elif state.unresolved:
            status = ResolutionStatus.UNRESOLVED_AS_LITERAL
        else:
            status = ResolutionStatus.RESOLVED

        return ResolutionResult(
            value=value,
            is_constant=state.is_constant,
            constant_name=state.constant_name,
            status=status,
            unresolved_constants=state.unresolved,
        )

    # -- Dispatch -----------------------------------------------------------

    def _resolve(self, node: ExprNode, state: _ResolutionState) -> Any:
        state.level += 1
        try:
            match node:
                case IntNode() | FloatNode() | StringNode():
                    return node.value
                case MagicConstNode():
                    return self._resolve_magic_const(node)
                case ConstFetchNode():
                    return self._resolve_const_fetch(node, state)
                case ClassConstFetchNode():
                    return self._resolve_class_const_fetch(node, state)
                case ArrayNode():
                    return self._resolve_array(node, state)
                case UnaryOpNode():
                    return UNARY_OPS[node.op](self._resolve(node.operand, state))
                case BinaryOpNode():
                    return self._resolve_binary_op(node, state)
                case TernaryNode():
                    return self._resolve_ternary(node, state)
                case _:
                    logger.debug("No compile-time value for node %r", node.node_type)
                    state.unsupported = True
                    return None
        finally:
            state.level -= 1

    # -- Magiczne stałe -----------------------------------------------------

    def _resolve_magic_const(self, node: MagicConstNode) -> Any:
        subject = self._subject
        match node.kind:
            case "line":
                return node.line if node.line is not None else 0
            case "method":
                if isinstance(subject, MethodSubject):
                    return f"{subject.declaring_class.name}::{subject.name}"
                return ""
            case "function":
                if isinstance(subject, (FunctionSubject, MethodSubject)):
                    return subject.name
                return ""
            case "namespace":
                return self._namespace_name()
            case "file":
                return self._file_name() or ""
            case "dir":
                file_name = self._file_name()
                return os.path.dirname(file_name) if file_name else ""
            case "class":
                reflection = self._self_class()
                return reflection.name if reflection is not None else ""
            case "trait":
                if isinstance(subject, ClassSubject) and subject.reflection.is_trait():
                    return subject.reflection.name
                return ""
        return ""

    def _namespace_name(self) -> str:
        match self._subject:
            case NamespaceSubject(name=name):
                return name
            case FunctionSubject():
                return self._subject.namespace_name
            case ClassSubject(reflection=reflection):
                return reflection.namespace_name
            case MethodSubject(declaring_class=cls) | PropertySubject(declaring_class=cls):
                return cls.namespace_name
        return ""

    def _file_name(self) -> Optional[str]:
        match self._subject:
            case FileSubject(file_name=file_name) | NamespaceSubject(file_name=file_name):
                return file_name
            case FunctionSubject(file_name=file_name):
                return file_name
            case ClassSubject(reflection=reflection):
                return reflection.file_name
            case MethodSubject(declaring_class=cls) | PropertySubject(declaring_class=cls):
                return cls.file_name
        return None

    def _self_class(self) -> Optional[ClassReflection]:
        match self._subject:
            case ClassSubject(reflection=reflection):
                return reflection
            case MethodSubject(declaring_class=cls) | PropertySubject(declaring_class=cls):
                return cls
        return None

    # -- Stałe ---------------------------------------------------------------

    def _resolve_const_fetch(self, node: ConstFetchNode, state: _ResolutionState) -> Any:
        constant_name = node.name.to_string()
        keyword = constant_name.lower()
        if keyword in _NOT_CONSTANTS:
            return _NOT_CONSTANTS[keyword]

        value: Any = None
        is_resolved = False

        if not node.name.fully_qualified and self._context is not None:
            file_name = self._file_name()
            if file_name is not None:
                namespace = self._namespace_name()
                found, value = self._context.find_namespace_constant(
                    file_name, namespace, constant_name
                )
                if found:
                    if namespace:
                        constant_name = f"{namespace}\\{constant_name}"
                    is_resolved = True

        if not is_resolved:
            if self._context is not None:
                is_resolved, value = self._context.get_global_constant(constant_name)
            else:
                is_resolved, value = builtins.get_constant(constant_name)

        if not is_resolved:
            # Nieznana stała = jej własna nazwa (legacy PHP)
            logger.debug("Undefined constant %r resolved as its own name", constant_name)
            state.unresolved.append(constant_name)
            return constant_name

        if state.level == 1:
            state.is_constant = True
            state.constant_name = constant_name

        return value

    def _resolve_class_const_fetch(
        self, node: ClassConstFetchNode, state: _ResolutionState
    ) -> Any:
        constant_name = node.name
        if constant_name.lower() == "class" and node.class_name.fully_qualified:
            return node.class_name.to_string()

        reflection = self._fetch_reflection_class(node.class_name)
        if constant_name.lower() == "class":
            return reflection.name

        if state.level == 1:
            state.is_constant = True
            state.constant_name = f"{node.class_name.to_string()}::{constant_name}"

        return reflection.get_constant(constant_name)

    def _fetch_reflection_class(self, name: NameNode) -> ClassReflection:
        """
        Zwraca encję klasy dla:
          'self' / 'static' — podmiot lub klasa deklarująca
          'parent'          — rodzic powyższej
          FQN               — klasa natywna albo z Context
          nazwa względna    — rozwiązana w pliku/przestrzeni nazw podmiotu
        """
        class_name = name.to_string()

        if name.fully_qualified:
            native = self._builtin_class(class_name)
            if native is not None and not native.is_user_defined():
                return native
            if self._context is None:
                raise ReflectionError(f"Can not resolve class {class_name}")
            return self._context.get_class_reflection(class_name)

        if not name.is_special_class_name():
            if self._context is None:
                raise ReflectionError(f"Can not resolve class {class_name}")
            return self._context.get_namespace_class(
                self._file_name(), self._namespace_name(), class_name
            )

        reflection = self._self_class()
        if reflection is None:
            raise ReflectionError(f"Can not resolve class {class_name}")
        if class_name.lower() == "parent":
            parent = reflection.get_parent_class()
            if parent is None:
                raise ReflectionError(
                    f"Can not resolve class parent: {reflection.name} has no parent"
                )
            return parent
        return reflection

    def _builtin_class(self, class_name: str) -> Optional[ClassReflection]:
        if self._context is not None:
            return self._context.get_builtin_class(class_name)
        return builtins.get_class(class_name)

    # -- Tablice ---------------------------------------------------------------

    def _resolve_array(self, node: ArrayNode, state: _ResolutionState) -> dict:
        result: dict[Any, Any] = {}
        next_index = 0
        for item in node.items:
            if item is None:
                continue
            value = self._resolve(item.value, state)

            if item.unpack:
                if not isinstance(value, dict):
                    raise TypeError(f"Only arrays can be unpacked, {php_type_name(value)} given")
                for key, spread_value in value.items():
                    if isinstance(key, int):
                        next_index = _next_free_index(result, next_index)
                        result[next_index] = spread_value
                        next_index += 1
                    else:
                        result[key] = spread_value
                continue

            if item.key is not None:
                key = normalize_array_key(self._resolve(item.key, state))
            else:
                next_index = _next_free_index(result, next_index)
                key = next_index
                next_index += 1
            result[key] = value

        return result

    # -- Operatory -------------------------------------------------------------

    def _resolve_binary_op(self, node: BinaryOpNode, state: _ResolutionState) -> Any:
        op = node.op
        left = self._resolve(node.left, state)

        if op in ("&&", "and"):
            return to_bool(left) and to_bool(self._resolve(node.right, state))
        if op in ("||", "or"):
            return to_bool(left) or to_bool(self._resolve(node.right, state))
        if op == "??":
            return left if left is not None else self._resolve(node.right, state)

        return BINARY_OPS[op](left, self._resolve(node.right, state))

    def _resolve_ternary(self, node: TernaryNode, state: _ResolutionState) -> Any:
        condition = self._resolve(node.cond, state)
        if node.if_true is None:
            # Skrót: cond ?: else
            return condition if to_bool(condition) else self._resolve(node.if_false, state)
        if to_bool(condition):
            return self._resolve(node.if_true, state)
        return self._resolve(node.if_false, state)


def _next_free_index(result: dict, start: int) -> int:
    index = start
    while index in result:
        index += 1
    return index
