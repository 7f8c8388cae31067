"""
contracts.py — Jedyne źródło prawdy dla wszystkich typów danych w StaticReflection.
Wszystkie moduły importują WYŁĄCZNIE stąd. Nie modyfikować bez versioning.

Węzły drzewa składni są niemutowalne (frozen) i dostarczane z zewnątrz
(parser nie jest częścią projektu). Każdy węzeł ma dyskryminator `node_type`,
dzięki czemu drzewo można przesłać także jako JSON.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


class ReflectionError(Exception):
    """Nie udało się ustalić klasy, funkcji lub wartości stałej."""


# ─────────────────────────── Bazowy węzeł ────────────────────────────────

class SyntaxNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: Optional[int] = None  # startLine z parsera

    @classmethod
    def sub_node_names(cls) -> list[str]:
        """Nazwy pól-dzieci w kolejności deklaracji (bez node_type i line)."""
        return [name for name in cls.model_fields if name not in ("node_type", "line")]

    def sub_nodes(self) -> Iterator[SyntaxNode]:
        for name in self.sub_node_names():
            child = getattr(self, name)
            if isinstance(child, SyntaxNode):
                yield child
            elif isinstance(child, list):
                for item in child:
                    if isinstance(item, SyntaxNode):
                        yield item


# ─────────────────────────── Nazwy ───────────────────────────────────────

SPECIAL_CLASS_NAMES = frozenset({"self", "parent", "static"})


class NameNode(SyntaxNode):
    node_type: Literal["name"] = "name"
    parts: list[str]
    fully_qualified: bool = False

    @classmethod
    def parse(cls, text: str, line: Optional[int] = None) -> NameNode:
        """'\\App\\Foo' → FQ ['App', 'Foo'];  'Foo\\Bar' → względna."""
        fully_qualified = text.startswith("\\")
        parts = [p for p in text.strip("\\").split("\\") if p]
        return cls(parts=parts, fully_qualified=fully_qualified, line=line)

    def to_string(self) -> str:
        return "\\".join(self.parts)

    def last(self) -> str:
        return self.parts[-1]

    def is_special_class_name(self) -> bool:
        return (
            not self.fully_qualified
            and len(self.parts) == 1
            and self.parts[0].lower() in SPECIAL_CLASS_NAMES
        )

    def __str__(self) -> str:
        return self.to_string()


# ─────────────────────────── Wyrażenia: skalary ──────────────────────────

class IntNode(SyntaxNode):
    node_type: Literal["int"] = "int"
    value: int


class FloatNode(SyntaxNode):
    node_type: Literal["float"] = "float"
    value: float


class StringNode(SyntaxNode):
    node_type: Literal["string"] = "string"
    value: str


MagicConstKind = Literal[
    "class", "dir", "file", "function", "line", "method", "namespace", "trait",
]


class MagicConstNode(SyntaxNode):
    """__CLASS__, __DIR__, __FILE__, __FUNCTION__, __LINE__, __METHOD__, ..."""
    node_type: Literal["magic_const"] = "magic_const"
    kind: MagicConstKind


# ─────────────────────────── Wyrażenia: stałe i tablice ──────────────────

class ConstFetchNode(SyntaxNode):
    node_type: Literal["const_fetch"] = "const_fetch"
    name: NameNode


class ClassConstFetchNode(SyntaxNode):
    """Klasa::STALA — class_name może być 'self', 'parent' lub 'static'."""
    node_type: Literal["class_const_fetch"] = "class_const_fetch"
    class_name: NameNode
    name: str


class ArrayItemNode(SyntaxNode):
    node_type: Literal["array_item"] = "array_item"
    value: "ExprNode"
    key: Optional["ExprNode"] = None
    by_ref: bool = False
    unpack: bool = False  # ...$spread


class ArrayNode(SyntaxNode):
    node_type: Literal["array"] = "array"
    items: list[Optional[ArrayItemNode]] = Field(default_factory=list)


# ─────────────────────────── Wyrażenia: operatory ────────────────────────

BinaryOperator = Literal[
    "+", "-", "*", "/", "%", "**",
    "|", "&", "^", "<<", ">>",
    ".",
    "&&", "||", "and", "or", "xor",
    "<", "<=", ">", ">=", "==", "!=", "<>", "===", "!==", "<=>",
    "??",
]

UnaryOperator = Literal["!", "~", "-", "+"]


class BinaryOpNode(SyntaxNode):
    node_type: Literal["binary_op"] = "binary_op"
    op: BinaryOperator
    left: "ExprNode"
    right: "ExprNode"


class UnaryOpNode(SyntaxNode):
    node_type: Literal["unary_op"] = "unary_op"
    op: UnaryOperator
    operand: "ExprNode"


class TernaryNode(SyntaxNode):
    """cond ? if_true : if_false;  if_true=None oznacza skrót 'cond ?: if_false'."""
    node_type: Literal["ternary"] = "ternary"
    cond: "ExprNode"
    if_true: Optional["ExprNode"] = None
    if_false: "ExprNode"


# ─────────────────────────── Wyrażenia: tylko runtime ────────────────────
# Nie mają wartości w czasie kompilacji; ewaluator zwraca dla nich null.

class VariableNode(SyntaxNode):
    node_type: Literal["variable"] = "variable"
    name: str


class FuncCallNode(SyntaxNode):
    node_type: Literal["func_call"] = "func_call"
    name: NameNode
    args: list["ExprNode"] = Field(default_factory=list)


class AssignNode(SyntaxNode):
    node_type: Literal["assign"] = "assign"
    var: VariableNode
    expr: "ExprNode"


class NewNode(SyntaxNode):
    """new Foo(...) lub new class {...} (class_decl)."""
    node_type: Literal["new"] = "new"
    class_name: Optional[NameNode] = None
    class_decl: Optional["ClassDeclNode"] = None
    args: list["ExprNode"] = Field(default_factory=list)


class ParamNode(SyntaxNode):
    node_type: Literal["param"] = "param"
    name: str
    default: Optional["ExprNode"] = None
    type_name: Optional[str] = None
    by_ref: bool = False
    variadic: bool = False


class ClosureNode(SyntaxNode):
    node_type: Literal["closure"] = "closure"
    params: list[ParamNode] = Field(default_factory=list)
    uses: list[VariableNode] = Field(default_factory=list)
    stmts: list["StmtNode"] = Field(default_factory=list)
    static: bool = False


class ArrowFunctionNode(SyntaxNode):
    node_type: Literal["arrow_function"] = "arrow_function"
    params: list[ParamNode] = Field(default_factory=list)
    expr: "ExprNode"
    static: bool = False


ExprNode = Union[
    IntNode, FloatNode, StringNode, MagicConstNode,
    ConstFetchNode, ClassConstFetchNode, ArrayNode,
    BinaryOpNode, UnaryOpNode, TernaryNode,
    VariableNode, FuncCallNode, AssignNode, NewNode,
    ClosureNode, ArrowFunctionNode,
]


# ─────────────────────────── Instrukcje ──────────────────────────────────

class ExpressionStmtNode(SyntaxNode):
    node_type: Literal["expression_stmt"] = "expression_stmt"
    expr: ExprNode


class ReturnStmtNode(SyntaxNode):
    node_type: Literal["return_stmt"] = "return_stmt"
    expr: Optional[ExprNode] = None


class ElseIfNode(SyntaxNode):
    node_type: Literal["else_if"] = "else_if"
    cond: ExprNode
    stmts: list["StmtNode"] = Field(default_factory=list)


class IfStmtNode(SyntaxNode):
    node_type: Literal["if_stmt"] = "if_stmt"
    cond: ExprNode
    stmts: list["StmtNode"] = Field(default_factory=list)
    else_ifs: list[ElseIfNode] = Field(default_factory=list)
    else_stmts: list["StmtNode"] = Field(default_factory=list)


class WhileStmtNode(SyntaxNode):
    node_type: Literal["while_stmt"] = "while_stmt"
    cond: ExprNode
    stmts: list["StmtNode"] = Field(default_factory=list)


class ForeachStmtNode(SyntaxNode):
    node_type: Literal["foreach_stmt"] = "foreach_stmt"
    expr: ExprNode
    key_var: Optional[VariableNode] = None
    value_var: VariableNode
    stmts: list["StmtNode"] = Field(default_factory=list)


class CatchNode(SyntaxNode):
    node_type: Literal["catch"] = "catch"
    types: list[NameNode]
    var: Optional[VariableNode] = None
    stmts: list["StmtNode"] = Field(default_factory=list)


class TryCatchStmtNode(SyntaxNode):
    node_type: Literal["try_catch_stmt"] = "try_catch_stmt"
    stmts: list["StmtNode"] = Field(default_factory=list)
    catches: list[CatchNode] = Field(default_factory=list)
    finally_stmts: list["StmtNode"] = Field(default_factory=list)


class BlockStmtNode(SyntaxNode):
    node_type: Literal["block_stmt"] = "block_stmt"
    stmts: list["StmtNode"] = Field(default_factory=list)


class StaticVarNode(SyntaxNode):
    """Pojedyncza zmienna w `static $a = 1, $b;` — default=None gdy brak inicjalizatora."""
    node_type: Literal["static_var"] = "static_var"
    name: str
    default: Optional[ExprNode] = None


class StaticStmtNode(SyntaxNode):
    node_type: Literal["static_stmt"] = "static_stmt"
    vars: list[StaticVarNode]


class ConstEntryNode(SyntaxNode):
    node_type: Literal["const_entry"] = "const_entry"
    name: str
    value: ExprNode


class ConstStmtNode(SyntaxNode):
    """`const A = 1, B = 2;` na poziomie przestrzeni nazw."""
    node_type: Literal["const_stmt"] = "const_stmt"
    consts: list[ConstEntryNode]


class FunctionDeclNode(SyntaxNode):
    node_type: Literal["function_decl"] = "function_decl"
    name: str
    params: list[ParamNode] = Field(default_factory=list)
    stmts: list["StmtNode"] = Field(default_factory=list)
    by_ref: bool = False


# ─────────────────────────── Klasy, interfejsy, traity ───────────────────

Visibility = Literal["public", "protected", "private"]


class ClassConstNode(SyntaxNode):
    node_type: Literal["class_const"] = "class_const"
    consts: list[ConstEntryNode]
    visibility: Visibility = "public"


class PropertyNode(SyntaxNode):
    node_type: Literal["property"] = "property"
    name: str
    default: Optional[ExprNode] = None
    visibility: Visibility = "public"
    static: bool = False


class ClassMethodNode(SyntaxNode):
    node_type: Literal["class_method"] = "class_method"
    name: str
    params: list[ParamNode] = Field(default_factory=list)
    stmts: Optional[list["StmtNode"]] = None  # None = metoda abstrakcyjna
    visibility: Visibility = "public"
    static: bool = False
    abstract: bool = False


class TraitAliasNode(SyntaxNode):
    """`Trait::method as protected alias;`"""
    node_type: Literal["trait_alias"] = "trait_alias"
    trait: Optional[NameNode] = None
    method: str
    new_modifier: Optional[Visibility] = None
    new_name: Optional[str] = None


class TraitPrecedenceNode(SyntaxNode):
    """`A::method insteadof B, C;`"""
    node_type: Literal["trait_precedence"] = "trait_precedence"
    trait: NameNode
    method: str
    insteadof: list[NameNode]


TraitAdaptationNode = Union[TraitAliasNode, TraitPrecedenceNode]


class TraitUseNode(SyntaxNode):
    node_type: Literal["trait_use"] = "trait_use"
    traits: list[NameNode]
    adaptations: list[TraitAdaptationNode] = Field(default_factory=list)


ClassStmtNode = Union[ClassConstNode, PropertyNode, ClassMethodNode, TraitUseNode]


class ClassDeclNode(SyntaxNode):
    node_type: Literal["class_decl"] = "class_decl"
    name: Optional[str] = None  # None = klasa anonimowa
    extends: Optional[NameNode] = None
    implements: list[NameNode] = Field(default_factory=list)
    stmts: list[ClassStmtNode] = Field(default_factory=list)
    abstract: bool = False
    final: bool = False


class InterfaceDeclNode(SyntaxNode):
    node_type: Literal["interface_decl"] = "interface_decl"
    name: str
    extends: list[NameNode] = Field(default_factory=list)
    stmts: list[ClassStmtNode] = Field(default_factory=list)


class TraitDeclNode(SyntaxNode):
    node_type: Literal["trait_decl"] = "trait_decl"
    name: str
    stmts: list[ClassStmtNode] = Field(default_factory=list)


ClassLikeNode = Union[ClassDeclNode, InterfaceDeclNode, TraitDeclNode]


class NamespaceNode(SyntaxNode):
    node_type: Literal["namespace"] = "namespace"
    name: Optional[NameNode] = None  # None = globalna przestrzeń nazw
    stmts: list["StmtNode"] = Field(default_factory=list)


StmtNode = Union[
    ExpressionStmtNode, ReturnStmtNode, IfStmtNode, WhileStmtNode,
    ForeachStmtNode, TryCatchStmtNode, BlockStmtNode,
    StaticStmtNode, ConstStmtNode, FunctionDeclNode,
    ClassDeclNode, InterfaceDeclNode, TraitDeclNode, NamespaceNode,
]


class FileNode(SyntaxNode):
    """Korzeń drzewa jednego pliku — przekazywany do Context."""
    node_type: Literal["file"] = "file"
    file_name: str
    stmts: list[StmtNode] = Field(default_factory=list)


for _model in (
    ArrayItemNode, ArrayNode, BinaryOpNode, UnaryOpNode, TernaryNode,
    FuncCallNode, AssignNode, NewNode, ParamNode, ClosureNode, ArrowFunctionNode,
    ExpressionStmtNode, ReturnStmtNode, ElseIfNode, IfStmtNode, WhileStmtNode,
    ForeachStmtNode, CatchNode, TryCatchStmtNode, BlockStmtNode,
    StaticVarNode, StaticStmtNode, ConstEntryNode, ConstStmtNode, FunctionDeclNode,
    ClassConstNode, PropertyNode, ClassMethodNode, TraitUseNode,
    ClassDeclNode, InterfaceDeclNode, TraitDeclNode, NamespaceNode, FileNode,
):
    _model.model_rebuild()


# ─────────────────────────── Evaluator ───────────────────────────────────

class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED_AS_LITERAL = "unresolved_as_literal"  # nieznana stała = własna nazwa
    UNSUPPORTED = "unsupported"                      # węzeł bez reguły → null


class ResolutionResult(BaseModel):
    value: Any = None
    is_constant: bool = False
    constant_name: Optional[str] = None
    status: ResolutionStatus = ResolutionStatus.RESOLVED
    unresolved_constants: list[str] = Field(default_factory=list)
