from adapters.node_visitor.static_variables_collector import StaticVariablesCollector
from contracts import (
    ArrowFunctionNode,
    BinaryOpNode,
    ClassDeclNode,
    ClassMethodNode,
    ClosureNode,
    ConstFetchNode,
    ExpressionStmtNode,
    FunctionDeclNode,
    IfStmtNode,
    IntNode,
    MagicConstNode,
    NameNode,
    NewNode,
    StaticStmtNode,
    StaticVarNode,
    StringNode,
    WhileStmtNode,
)
from ports.reflection import FunctionSubject


def _static(name: str, default=None) -> StaticStmtNode:
    return StaticStmtNode(vars=[StaticVarNode(name=name, default=default)])


def _subject() -> FunctionSubject:
    return FunctionSubject("App\\counter", "/src/counter.php")


def test_collects_static_variables_in_order():
    body = [
        StaticStmtNode(vars=[
            StaticVarNode(name="count", default=IntNode(value=0)),
            StaticVarNode(name="cache"),
        ]),
        _static("label", StringNode(value="x")),
    ]

    collected = StaticVariablesCollector().collect(body, _subject())

    assert collected == {"count": 0, "cache": None, "label": "x"}
    assert list(collected) == ["count", "cache", "label"]


def test_empty_body_gives_empty_mapping():
    assert StaticVariablesCollector().collect([], _subject()) == {}


def test_descends_into_control_flow():
    body = [
        IfStmtNode(
            cond=ConstFetchNode(name=NameNode.parse("true")),
            stmts=[WhileStmtNode(
                cond=IntNode(value=1),
                stmts=[_static("nested", BinaryOpNode(
                    op="+", left=IntNode(value=1), right=IntNode(value=2)
                ))],
            )],
        ),
    ]

    assert StaticVariablesCollector().collect(body, _subject()) == {"nested": 3}


def test_closures_and_nested_declarations_are_skipped():
    body = [
        _static("outer", IntNode(value=1)),
        ExpressionStmtNode(expr=ClosureNode(stmts=[_static("in_closure", IntNode(value=2))])),
        ExpressionStmtNode(expr=ArrowFunctionNode(expr=IntNode(value=3))),
        FunctionDeclNode(name="inner", stmts=[_static("in_function", IntNode(value=4))]),
        ExpressionStmtNode(expr=NewNode(class_decl=ClassDeclNode(stmts=[
            ClassMethodNode(name="m", stmts=[_static("in_class", IntNode(value=5))]),
        ]))),
    ]

    assert StaticVariablesCollector().collect(body, _subject()) == {"outer": 1}


def test_later_declaration_overwrites_earlier():
    body = [_static("x", IntNode(value=1)), _static("x", IntNode(value=2))]

    assert StaticVariablesCollector().collect(body, _subject()) == {"x": 2}


def test_declaring_node_walks_its_own_statements():
    function = FunctionDeclNode(
        name="counter",
        stmts=[_static("name", MagicConstNode(kind="function"))],
    )

    collected = StaticVariablesCollector().collect(function, _subject())

    assert collected == {"name": "App\\counter"}


def test_closure_as_body_collects_its_own_statics():
    closure = ClosureNode(stmts=[_static("inner", IntNode(value=7))])

    assert StaticVariablesCollector().collect(closure, _subject()) == {"inner": 7}


def test_unsupported_initializer_gives_null():
    body = [_static("obj", NewNode(class_name=NameNode.parse("\\Foo")))]

    assert StaticVariablesCollector().collect(body, _subject()) == {"obj": None}


def test_method_static_variables_use_class_context(context):
    child = context.get_class_reflection("App\\Child")

    assert child.get_static_variables("run") == {"calls": 0, "label": "App\\Child::run"}
