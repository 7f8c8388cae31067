"""
Wspólne drzewo przykładowego pliku:

    namespace App;

    const GREETING = "hi";
    const LOUD = GREETING . "!";
    define('APP_VERSION', '1.2');

    interface HasName { const PREFIX = "n_"; }
    interface Named extends \\App\\HasName {}
    trait Greets { public function hello() {} }

    abstract class Base {
        const BASE = 10;
        protected $items = [1, 2];
        private $secret = 's';
    }

    final class Child extends Base implements \\App\\Named, \\Countable {
        use \\App\\Greets { hello as protected greet; }
        const OWN = self::BASE + 1;
        const FULL = parent::BASE * 2;
        const NS = GREETING;
        public $name = __CLASS__;
        public function run($limit = self::OWN, $sep = \\PHP_EOL) {
            static $calls = 0, $label = __METHOD__;
            $f = function () { static $inner = 1; };
        }
    }

    function helper($glue = ', ') { static $cache = []; static $seed = LOUD; }
"""
import pytest

from adapters.context.in_memory_context import InMemoryContext
from contracts import (
    ArrayItemNode,
    ArrayNode,
    AssignNode,
    BinaryOpNode,
    ClassConstFetchNode,
    ClassConstNode,
    ClassDeclNode,
    ClassMethodNode,
    ClosureNode,
    ConstEntryNode,
    ConstFetchNode,
    ConstStmtNode,
    ExpressionStmtNode,
    FileNode,
    FuncCallNode,
    FunctionDeclNode,
    IntNode,
    InterfaceDeclNode,
    MagicConstNode,
    NameNode,
    NamespaceNode,
    ParamNode,
    PropertyNode,
    StaticStmtNode,
    StaticVarNode,
    StringNode,
    TraitAliasNode,
    TraitDeclNode,
    TraitUseNode,
    VariableNode,
)

SAMPLE_FILE_NAME = "/src/App.php"


def _name(text: str) -> NameNode:
    return NameNode.parse(text)


def _const(text: str) -> ConstFetchNode:
    return ConstFetchNode(name=_name(text))


def _class_const(class_name: str, name: str) -> ClassConstFetchNode:
    return ClassConstFetchNode(class_name=_name(class_name), name=name)


def _const_decl(name: str, value) -> ClassConstNode:
    return ClassConstNode(consts=[ConstEntryNode(name=name, value=value)])


def build_sample_file() -> FileNode:
    child_run = ClassMethodNode(
        name="run",
        params=[
            ParamNode(name="limit", default=_class_const("self", "OWN")),
            ParamNode(name="sep", default=_const("\\PHP_EOL")),
        ],
        stmts=[
            StaticStmtNode(vars=[
                StaticVarNode(name="calls", default=IntNode(value=0)),
                StaticVarNode(name="label", default=MagicConstNode(kind="method")),
            ]),
            ExpressionStmtNode(expr=AssignNode(
                var=VariableNode(name="f"),
                expr=ClosureNode(stmts=[
                    StaticStmtNode(vars=[StaticVarNode(name="inner", default=IntNode(value=1))]),
                ]),
            )),
        ],
    )

    return FileNode(
        file_name=SAMPLE_FILE_NAME,
        stmts=[
            NamespaceNode(
                name=_name("App"),
                stmts=[
                    ConstStmtNode(consts=[
                        ConstEntryNode(name="GREETING", value=StringNode(value="hi")),
                        ConstEntryNode(
                            name="LOUD",
                            value=BinaryOpNode(
                                op=".", left=_const("GREETING"), right=StringNode(value="!")
                            ),
                        ),
                    ]),
                    ExpressionStmtNode(expr=FuncCallNode(
                        name=_name("define"),
                        args=[StringNode(value="APP_VERSION"), StringNode(value="1.2")],
                    )),
                    InterfaceDeclNode(
                        name="HasName",
                        stmts=[_const_decl("PREFIX", StringNode(value="n_"))],
                    ),
                    InterfaceDeclNode(name="Named", extends=[_name("\\App\\HasName")]),
                    TraitDeclNode(
                        name="Greets",
                        stmts=[ClassMethodNode(name="hello", stmts=[])],
                    ),
                    ClassDeclNode(
                        name="Base",
                        abstract=True,
                        stmts=[
                            _const_decl("BASE", IntNode(value=10)),
                            PropertyNode(
                                name="items",
                                visibility="protected",
                                default=ArrayNode(items=[
                                    ArrayItemNode(value=IntNode(value=1)),
                                    ArrayItemNode(value=IntNode(value=2)),
                                ]),
                            ),
                            PropertyNode(
                                name="secret",
                                visibility="private",
                                default=StringNode(value="s"),
                            ),
                        ],
                    ),
                    ClassDeclNode(
                        name="Child",
                        final=True,
                        extends=_name("Base"),
                        implements=[_name("\\App\\Named"), _name("\\Countable")],
                        stmts=[
                            TraitUseNode(
                                traits=[_name("\\App\\Greets")],
                                adaptations=[TraitAliasNode(
                                    method="hello", new_modifier="protected", new_name="greet"
                                )],
                            ),
                            _const_decl("OWN", BinaryOpNode(
                                op="+", left=_class_const("self", "BASE"), right=IntNode(value=1)
                            )),
                            _const_decl("FULL", BinaryOpNode(
                                op="*", left=_class_const("parent", "BASE"), right=IntNode(value=2)
                            )),
                            _const_decl("NS", _const("GREETING")),
                            PropertyNode(name="name", default=MagicConstNode(kind="class")),
                            child_run,
                        ],
                    ),
                    FunctionDeclNode(
                        name="helper",
                        params=[ParamNode(name="glue", default=StringNode(value=", "))],
                        stmts=[
                            StaticStmtNode(vars=[StaticVarNode(name="cache", default=ArrayNode())]),
                            StaticStmtNode(vars=[StaticVarNode(name="seed", default=_const("LOUD"))]),
                        ],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def sample_file() -> FileNode:
    return build_sample_file()


@pytest.fixture
def context(sample_file) -> InMemoryContext:
    return InMemoryContext([sample_file])
