import pytest

from adapters.evaluator.node_expression_resolver import NodeExpressionResolver
from contracts import (
    ArrayItemNode,
    ArrayNode,
    BinaryOpNode,
    ClassConstFetchNode,
    ConstFetchNode,
    FloatNode,
    FuncCallNode,
    IntNode,
    MagicConstNode,
    NameNode,
    ReflectionError,
    ResolutionStatus,
    StringNode,
    TernaryNode,
    UnaryOpNode,
    VariableNode,
)
from ports.reflection import (
    ClassSubject,
    FileSubject,
    FunctionSubject,
    MethodSubject,
    NamespaceSubject,
)


def _int(value: int) -> IntNode:
    return IntNode(value=value)


def _str(value: str) -> StringNode:
    return StringNode(value=value)


def _const(text: str) -> ConstFetchNode:
    return ConstFetchNode(name=NameNode.parse(text))


def _class_const(class_name: str, name: str) -> ClassConstFetchNode:
    return ClassConstFetchNode(class_name=NameNode.parse(class_name), name=name)


def _op(op: str, left, right) -> BinaryOpNode:
    return BinaryOpNode(op=op, left=left, right=right)


def _array(*items) -> ArrayNode:
    return ArrayNode(items=list(items))


def _item(value, key=None, unpack=False) -> ArrayItemNode:
    return ArrayItemNode(value=value, key=key, unpack=unpack)


def _resolve(node, subject=None, context=None):
    subject = subject or FileSubject("/src/plain.php")
    return NodeExpressionResolver(subject, context).process(node)


# -- Skalary i operatory ---------------------------------------------------------

def test_scalar_literal_is_not_a_named_constant():
    result = _resolve(_int(5))

    assert result.value == 5
    assert result.is_constant is False
    assert result.constant_name is None
    assert result.status == ResolutionStatus.RESOLVED


def test_process_is_idempotent_for_the_same_node():
    resolver = NodeExpressionResolver(FileSubject("/src/plain.php"))
    node = _array(_item(_const("PHP_INT_SIZE")), _item(_const("NOT_DEFINED_HERE")))

    first = resolver.process(node)
    second = resolver.process(node)

    assert first == second
    assert second.unresolved_constants == ["NOT_DEFINED_HERE"]


def test_arithmetic_respects_tree_structure():
    node = _op("+", _int(1), _op("*", _int(2), _int(3)))

    assert _resolve(node).value == 7


def test_integer_overflow_promotes_to_float():
    result = _resolve(_op("+", _const("PHP_INT_MAX"), _int(1)))

    assert isinstance(result.value, float)
    assert result.value == float(2 ** 63)
    assert result.is_constant is False


def test_division_returns_int_only_when_exact():
    assert _resolve(_op("/", _int(6), _int(3))).value == 2
    assert _resolve(_op("/", _int(7), _int(2))).value == 3.5


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        _resolve(_op("/", _int(1), _int(0)))


def test_concatenation_formats_floats_like_php():
    node = _op(".", _str("v"), FloatNode(value=0.1 + 0.2))

    assert _resolve(node).value == "v0.3"


def test_unary_operators():
    assert _resolve(UnaryOpNode(op="!", operand=_int(0))).value is True
    assert _resolve(UnaryOpNode(op="-", operand=_int(5))).value == -5
    assert _resolve(UnaryOpNode(op="~", operand=_int(5))).value == -6


def test_logical_and_short_circuits_failing_operand():
    node = _op("&&", _const("false"), _op("/", _int(1), _int(0)))

    assert _resolve(node).value is False


def test_null_coalesce_evaluates_right_only_for_null():
    assert _resolve(_op("??", _const("null"), _int(5))).value == 5
    assert _resolve(_op("??", _int(0), _op("%", _int(1), _int(0)))).value == 0


def test_ternary_skips_branch_that_would_fail():
    node = TernaryNode(cond=_const("true"), if_true=_int(1), if_false=_op("/", _int(1), _int(0)))

    assert _resolve(node).value == 1


def test_short_ternary_returns_condition_when_truthy():
    node = TernaryNode(cond=_str("yes"), if_false=_str("no"))

    assert _resolve(node).value == "yes"


def test_comparison_operators_use_loose_rules():
    assert _resolve(_op("==", _str("10"), _str("1e1"))).value is True
    assert _resolve(_op("===", _int(1), FloatNode(value=1.0))).value is False
    assert _resolve(_op("<=>", _int(2), _int(10))).value == -1


# -- Tablice --------------------------------------------------------------------

def test_array_implicit_keys_are_independent_of_explicit_keys():
    node = _array(
        _item(_int(10)),
        _item(_int(20)),
        _item(_int(30), key=_str("x")),
        _item(_int(40)),
    )

    value = _resolve(node).value

    assert value == {0: 10, 1: 20, "x": 30, 2: 40}
    assert list(value) == [0, 1, "x", 2]


def test_array_implicit_key_skips_used_slot():
    node = _array(_item(_str("a"), key=_int(0)), _item(_str("b")))

    assert _resolve(node).value == {0: "a", 1: "b"}


def test_array_numeric_string_keys_are_normalized():
    node = _array(_item(_str("a"), key=_str("8")), _item(_str("b"), key=_str("08")))

    assert _resolve(node).value == {8: "a", "08": "b"}


def test_array_spread_renumbers_integer_keys():
    inner = _array(_item(_int(2)), _item(_int(3)), _item(_int(9), key=_str("k")))
    node = _array(_item(_int(1)), _item(inner, unpack=True))

    assert _resolve(node).value == {0: 1, 1: 2, 2: 3, "k": 9}


def test_array_spread_of_scalar_raises():
    node = _array(_item(_int(1), unpack=True))

    with pytest.raises(TypeError):
        _resolve(node)


# -- Stałe ----------------------------------------------------------------------

def test_builtin_constant_at_top_level_is_flagged():
    result = _resolve(_const("PHP_EOL"))

    assert result.value == "\n"
    assert result.is_constant is True
    assert result.constant_name == "PHP_EOL"


def test_constant_nested_in_array_is_not_flagged():
    result = _resolve(_array(_item(_const("PHP_EOL"))))

    assert result.value == {0: "\n"}
    assert result.is_constant is False
    assert result.constant_name is None


def test_boolean_and_null_literals_are_case_insensitive_and_not_flagged():
    result = _resolve(_const("TRUE"))

    assert result.value is True
    assert result.is_constant is False
    assert _resolve(_const("Null")).value is None


def test_constant_inside_binary_operation_is_not_flagged():
    result = _resolve(_op("+", _int(1), _const("PHP_INT_SIZE")))

    assert result.value == 9
    assert result.is_constant is False
    assert result.constant_name is None


def test_unknown_constant_resolves_to_its_own_name():
    result = _resolve(_const("SOME_UNDEFINED"))

    assert result.value == "SOME_UNDEFINED"
    assert result.is_constant is False
    assert result.status == ResolutionStatus.UNRESOLVED_AS_LITERAL
    assert result.unresolved_constants == ["SOME_UNDEFINED"]


def test_namespace_constant_is_reported_with_full_name(context):
    subject = NamespaceSubject("App", "/src/App.php")

    result = _resolve(_const("GREETING"), subject, context)

    assert result.value == "hi"
    assert result.constant_name == "App\\GREETING"


def test_php_version_constants_follow_context(sample_file):
    from adapters.context.in_memory_context import InMemoryContext

    context = InMemoryContext([sample_file], php_version="8.1.3")

    assert _resolve(_const("PHP_MINOR_VERSION"), context=context).value == 1
    assert _resolve(_const("PHP_VERSION_ID"), context=context).value == 80103


# -- Stałe klas -----------------------------------------------------------------

def test_self_class_constant_is_flagged_with_written_name(context):
    child = context.get_class_reflection("App\\Child")

    result = _resolve(_class_const("self", "OWN"), ClassSubject(child), context)

    assert result.value == 11
    assert result.is_constant is True
    assert result.constant_name == "self::OWN"


def test_parent_and_interface_constants(context):
    subject = ClassSubject(context.get_class_reflection("App\\Child"))

    assert _resolve(_class_const("parent", "BASE"), subject, context).value == 10
    assert _resolve(_class_const("static", "PREFIX"), subject, context).value == "n_"


def test_class_constant_inside_binary_operation_is_not_flagged(context):
    subject = ClassSubject(context.get_class_reflection("App\\Child"))

    result = _resolve(_op("+", _int(1), _class_const("self", "OWN")), subject, context)

    assert result.value == 12
    assert result.is_constant is False
    assert result.constant_name is None


def test_parent_constant_for_method_subject(context):
    subject = MethodSubject("run", context.get_class_reflection("App\\Child"))

    result = _resolve(_class_const("parent", "BASE"), subject, context)

    assert result.value == 10
    assert result.is_constant is True
    assert result.constant_name == "parent::BASE"


def test_only_unqualified_keywords_are_special_class_names():
    assert NameNode.parse("Parent").is_special_class_name() is True
    assert NameNode.parse("static").is_special_class_name() is True
    assert NameNode.parse("\\self").is_special_class_name() is False
    assert NameNode.parse("App\\self").is_special_class_name() is False


def test_parent_without_parent_class_raises(context):
    subject = ClassSubject(context.get_class_reflection("App\\Base"))

    with pytest.raises(ReflectionError):
        _resolve(_class_const("parent", "BASE"), subject, context)


def test_self_outside_class_raises():
    with pytest.raises(ReflectionError):
        _resolve(_class_const("self", "X"))


def test_fully_qualified_class_name_fetch_needs_no_context():
    result = _resolve(_class_const("\\App\\Missing", "class"))

    assert result.value == "App\\Missing"


def test_self_class_name_fetch(context):
    subject = ClassSubject(context.get_class_reflection("App\\Child"))

    assert _resolve(_class_const("self", "class"), subject, context).value == "App\\Child"


def test_builtin_class_constant_without_context():
    result = _resolve(_class_const("\\DateTimeInterface", "ATOM"))

    assert result.value == "Y-m-d\\TH:i:sP"
    assert result.constant_name == "DateTimeInterface::ATOM"


def test_missing_class_constant_is_false(context):
    subject = ClassSubject(context.get_class_reflection("App\\Child"))

    assert _resolve(_class_const("self", "NOPE"), subject, context).value is False


# -- Magiczne stałe -------------------------------------------------------------

def test_magic_constants_inside_method(context):
    child = context.get_class_reflection("App\\Child")
    subject = MethodSubject("run", child)

    def magic(kind, line=None):
        return _resolve(MagicConstNode(kind=kind, line=line), subject, context).value

    assert magic("method") == "App\\Child::run"
    assert magic("function") == "run"
    assert magic("class") == "App\\Child"
    assert magic("namespace") == "App"
    assert magic("file") == "/src/App.php"
    assert magic("dir") == "/src"
    assert magic("line", line=42) == 42
    assert magic("trait") == ""


def test_magic_constants_inside_function():
    subject = FunctionSubject("App\\Util\\helper", "/src/util.php")

    assert _resolve(MagicConstNode(kind="function"), subject).value == "App\\Util\\helper"
    assert _resolve(MagicConstNode(kind="namespace"), subject).value == "App\\Util"
    assert _resolve(MagicConstNode(kind="class"), subject).value == ""


# -- Węzły bez wartości ---------------------------------------------------------

def test_unsupported_node_resolves_to_null():
    result = _resolve(VariableNode(name="x"))

    assert result.value is None
    assert result.status == ResolutionStatus.UNSUPPORTED


def test_unsupported_node_inside_expression():
    call = FuncCallNode(name=NameNode.parse("time"))

    result = _resolve(_array(_item(call)))

    assert result.value == {0: None}
    assert result.status == ResolutionStatus.UNSUPPORTED
