import reflection
from contracts import ConstFetchNode, IntNode, NameNode, StaticStmtNode, StaticVarNode
from ports.reflection import FileSubject, NamespaceSubject


def test_evaluate_without_context_uses_builtin_tables():
    result = reflection.evaluate(ConstFetchNode(name=NameNode.parse("M_PI")), FileSubject("/a.php"))

    assert result.value == 3.141592653589793
    assert result.constant_name == "M_PI"


def test_collect_static_variables_with_context(context):
    body = [StaticStmtNode(vars=[
        StaticVarNode(name="greeting", default=ConstFetchNode(name=NameNode.parse("GREETING"))),
        StaticVarNode(name="n", default=IntNode(value=3)),
    ])]

    collected = reflection.collect_static_variables(
        body, NamespaceSubject("App", "/src/App.php"), context
    )

    assert collected == {"greeting": "hi", "n": 3}


def test_collect_interfaces_and_traits(context):
    node = context.parse_class("App\\Child")

    assert list(reflection.collect_interfaces(node, context)) == ["App\\Named", "Countable"]
    traits = reflection.collect_traits(node, context)
    assert list(traits.traits) == ["App\\Greets"]
    assert traits.adaptations[0].new_name == "greet"
