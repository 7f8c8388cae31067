"""
Adapter: InMemoryContext
Implementuje port ReflectionContext nad zbiorem sparsowanych plików (FileNode)
trzymanych w pamięci.

Indeksy budowane przy add_file():
  - klasy/interfejsy/traity   lower(FQN) → deklaracja (nazwy klas bez rozróżniania wielkości liter)
  - funkcje                   lower(FQN) → deklaracja
  - stałe                     FQN → wyrażenie (`const X = ...` i `define('X', ...)`)

Deklaracje warunkowe (wewnątrz if/bloku) też są indeksowane; pierwsza wygrywa.
Wartości stałych liczone leniwie i zapamiętywane, encje klas tworzone raz.
Oba cache (także stałe klas w encjach) pisane pod jedną blokadą RLock;
wyliczanie stałej wraca do kontekstu z tego samego wątku.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from adapters.context import builtins
from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from adapters.reflection.node_class_reflection import NodeClassReflection
from adapters.reflection.node_function_reflection import NodeFunctionReflection
from contracts import (
    BlockStmtNode,
    ClassDeclNode,
    ClassLikeNode,
    ConstStmtNode,
    ExprNode,
    ExpressionStmtNode,
    FileNode,
    FuncCallNode,
    FunctionDeclNode,
    IfStmtNode,
    InterfaceDeclNode,
    NamespaceNode,
    ReflectionError,
    StmtNode,
    StringNode,
    TraitDeclNode,
)
from ports.reflection import ClassReflection, NamespaceSubject

logger = logging.getLogger("static_reflection.context")

_UNSET = object()


@dataclass
class _Declaration:
    name: str  # FQN w oryginalnej pisowni
    node: Union[ClassLikeNode, FunctionDeclNode]
    file_name: str


@dataclass
class _ConstantEntry:
    name: str
    expr: ExprNode
    namespace: str
    file_name: str
    value: Any = _UNSET


def _join(namespace: str, name: str) -> str:
    return f"{namespace}\\{name}" if namespace else name


class InMemoryContext:
    """
    Kontekst refleksji dla plików przekazanych z zewnątrz.
    Może być wymieniony na kontekst z autoloaderem implementujący ten sam port.
    """

    def __init__(
        self,
        files: Iterable[FileNode] = (),
        php_version: str = builtins.DEFAULT_PHP_VERSION,
    ) -> None:
        self._php_version = php_version
        self._version_constants = builtins.version_constants(php_version)

        self._files: dict[str, FileNode] = {}
        self._classes: dict[str, _Declaration] = {}
        self._functions: dict[str, _Declaration] = {}
        self._constants: dict[str, _ConstantEntry] = {}
        self._evaluating: set[str] = set()

        self._reflections: dict[str, NodeClassReflection] = {}
        self._lock = threading.RLock()

        for file_node in files:
            self.add_file(file_node)

    @property
    def php_version(self) -> str:
        return self._php_version

    # ── indeksowanie ─────────────────────────────────────────────────────────

    def add_file(self, file_node: FileNode) -> None:
        file_name = file_node.file_name
        self._files[file_name] = file_node

        global_stmts: list[StmtNode] = []
        for stmt in file_node.stmts:
            if isinstance(stmt, NamespaceNode):
                namespace = stmt.name.to_string() if stmt.name is not None else ""
                self._index_stmts(stmt.stmts, namespace, file_name)
            else:
                global_stmts.append(stmt)
        self._index_stmts(global_stmts, "", file_name)

        logger.debug(
            "Indexed %s (classes=%d functions=%d constants=%d)",
            file_name, len(self._classes), len(self._functions), len(self._constants),
        )

    def _index_stmts(self, stmts: list[StmtNode], namespace: str, file_name: str) -> None:
        for stmt in stmts:
            match stmt:
                case ClassDeclNode(name=None):
                    continue  # klasa anonimowa
                case ClassDeclNode() | InterfaceDeclNode() | TraitDeclNode():
                    self._declare(self._classes, _join(namespace, stmt.name), stmt, file_name)
                case FunctionDeclNode():
                    self._declare(self._functions, _join(namespace, stmt.name), stmt, file_name)
                case ConstStmtNode():
                    for entry in stmt.consts:
                        self._declare_constant(
                            _join(namespace, entry.name), entry.value, namespace, file_name
                        )
                case ExpressionStmtNode(expr=FuncCallNode() as call):
                    self._index_define(call, namespace, file_name)
                case IfStmtNode():
                    self._index_stmts(stmt.stmts, namespace, file_name)
                    for else_if in stmt.else_ifs:
                        self._index_stmts(else_if.stmts, namespace, file_name)
                    self._index_stmts(stmt.else_stmts, namespace, file_name)
                case BlockStmtNode():
                    self._index_stmts(stmt.stmts, namespace, file_name)

    def _declare(
        self,
        index: dict[str, _Declaration],
        name: str,
        node: Union[ClassLikeNode, FunctionDeclNode],
        file_name: str,
    ) -> None:
        key = name.lower()
        if key in index:
            logger.debug("Skipping redeclaration of %s in %s", name, file_name)
            return
        index[key] = _Declaration(name=name, node=node, file_name=file_name)

    def _declare_constant(
        self, name: str, expr: ExprNode, namespace: str, file_name: str
    ) -> None:
        if name in self._constants:
            logger.debug("Skipping redefinition of constant %s in %s", name, file_name)
            return
        self._constants[name] = _ConstantEntry(
            name=name, expr=expr, namespace=namespace, file_name=file_name
        )

    def _index_define(self, call: FuncCallNode, namespace: str, file_name: str) -> None:
        if call.name.last().lower() != "define" or len(call.args) < 2:
            return
        name_arg = call.args[0]
        if not isinstance(name_arg, StringNode):
            logger.debug("define() with dynamic name at %s:%s skipped", file_name, call.line)
            return
        self._declare_constant(name_arg.value.lstrip("\\"), call.args[1], namespace, file_name)

    # ── stałe ────────────────────────────────────────────────────────────────

    def _constant_value(self, entry: _ConstantEntry) -> Any:
        with self._lock:
            if entry.value is not _UNSET:
                return entry.value
            if entry.name in self._evaluating:
                raise ReflectionError(f"Cannot declare self-referencing constant {entry.name}")
            self._evaluating.add(entry.name)
            try:
                resolver = NodeExpressionResolver(
                    NamespaceSubject(entry.namespace, entry.file_name), self
                )
                entry.value = resolver.process(entry.expr).value
            finally:
                self._evaluating.discard(entry.name)
            return entry.value

    def find_namespace_constant(
        self,
        file_name: Optional[str],
        namespace: str,
        name: str,
    ) -> tuple[bool, Any]:
        entry = self._constants.get(_join(namespace, name))
        if entry is None:
            return False, None
        return True, self._constant_value(entry)

    def get_global_constant(self, name: str) -> tuple[bool, Any]:
        name = name.lstrip("\\")
        entry = self._constants.get(name)
        if entry is not None:
            return True, self._constant_value(entry)
        return builtins.get_constant(name, self._version_constants)

    # ── klasy ────────────────────────────────────────────────────────────────

    def parse_class(self, fqn: str) -> ClassLikeNode:
        name = fqn.lstrip("\\")
        declaration = self._classes.get(name.lower())
        if declaration is None:
            raise ReflectionError(f"Class {name} was not found")
        return declaration.node

    def get_class_reflection(self, fqn: str) -> ClassReflection:
        name = fqn.lstrip("\\")
        key = name.lower()
        with self._lock:
            reflection = self._reflections.get(key)
            if reflection is None:
                declaration = self._classes.get(key)
                if declaration is not None:
                    reflection = NodeClassReflection(
                        declaration.name, declaration.node, self, declaration.file_name,
                        lock=self._lock,
                    )
                    self._reflections[key] = reflection
        if reflection is not None:
            return reflection

        native = builtins.get_class(fqn)
        if native is not None:
            return native
        raise ReflectionError(f"Class {name} was not found")

    def get_builtin_class(self, fqn: str) -> Optional[ClassReflection]:
        return builtins.get_class(fqn)

    def get_namespace_class(
        self,
        file_name: Optional[str],
        namespace: str,
        name: str,
    ) -> ClassReflection:
        """Nazwa względna → bieżąca przestrzeń nazw (bez powrotu do globalnej, jak PHP)."""
        return self.get_class_reflection(_join(namespace, name))

    # ── funkcje ──────────────────────────────────────────────────────────────

    def get_function_reflection(self, fqn: str) -> NodeFunctionReflection:
        name = fqn.lstrip("\\")
        declaration = self._functions.get(name.lower())
        if declaration is None:
            raise ReflectionError(f"Function {name}() does not exist")
        return NodeFunctionReflection(
            declaration.name, declaration.node, self, declaration.file_name
        )
