import logging

import pytest

from adapters.class_structure.class_structure_resolver import ClassStructureResolver
from adapters.context.in_memory_context import InMemoryContext
from contracts import (
    ClassDeclNode,
    ClassMethodNode,
    FileNode,
    InterfaceDeclNode,
    NameNode,
    ReflectionError,
    TraitAliasNode,
    TraitDeclNode,
    TraitPrecedenceNode,
    TraitUseNode,
)


def _name(text: str) -> NameNode:
    return NameNode.parse(text)


def _context(*stmts) -> InMemoryContext:
    return InMemoryContext([FileNode(file_name="/src/lib.php", stmts=list(stmts))])


def test_class_without_interfaces_or_traits_is_empty():
    node = ClassDeclNode(name="Plain")
    resolver = ClassStructureResolver()
    context = _context(node)

    assert resolver.collect_interfaces(node, context) == {}
    traits = resolver.collect_traits(node, context)
    assert traits.traits == {}
    assert traits.adaptations == []


def test_trait_has_no_interface_list():
    node = TraitDeclNode(name="T")

    assert ClassStructureResolver().collect_interfaces(node, _context(node)) == {}


def test_class_implements_user_and_builtin_interfaces():
    iface = InterfaceDeclNode(name="Shape")
    node = ClassDeclNode(name="Circle", implements=[_name("\\Shape"), _name("\\Countable")])
    context = _context(iface, node)

    interfaces = ClassStructureResolver().collect_interfaces(node, context)

    assert list(interfaces) == ["Shape", "Countable"]
    assert interfaces["Shape"].is_user_defined() is True
    assert interfaces["Countable"].is_user_defined() is False


def test_interface_reads_extends_list():
    base = InterfaceDeclNode(name="Base")
    node = InterfaceDeclNode(name="Child", extends=[_name("\\Base")])

    interfaces = ClassStructureResolver().collect_interfaces(node, _context(base, node))

    assert list(interfaces) == ["Base"]
    assert interfaces["Base"].is_interface() is True


def test_non_fully_qualified_reference_is_skipped_with_warning(caplog):
    node = ClassDeclNode(name="Circle", implements=[_name("Shape")])

    with caplog.at_level(logging.WARNING, logger="static_reflection.class_structure"):
        interfaces = ClassStructureResolver().collect_interfaces(node, _context(node))

    assert interfaces == {}
    assert "Shape" in caplog.text


def test_unknown_interface_error_propagates():
    node = ClassDeclNode(name="Circle", implements=[_name("\\Missing")])

    with pytest.raises(ReflectionError):
        ClassStructureResolver().collect_interfaces(node, _context(node))


def test_traits_are_collected_and_last_adaptations_win():
    first = TraitDeclNode(name="A", stmts=[ClassMethodNode(name="run", stmts=[])])
    second = TraitDeclNode(name="B", stmts=[ClassMethodNode(name="run", stmts=[])])
    early = [TraitAliasNode(trait=_name("\\A"), method="run", new_name="runA")]
    late = [TraitPrecedenceNode(trait=_name("\\B"), method="run", insteadof=[_name("\\A")])]
    node = ClassDeclNode(name="C", stmts=[
        TraitUseNode(traits=[_name("\\A")], adaptations=early),
        TraitUseNode(traits=[_name("\\B")], adaptations=late),
    ])

    result = ClassStructureResolver().collect_traits(node, _context(first, second, node))

    assert list(result.traits) == ["A", "B"]
    assert result.adaptations == late


def test_trait_use_without_adaptations_resets_them():
    trait = TraitDeclNode(name="A")
    node = ClassDeclNode(name="C", stmts=[
        TraitUseNode(traits=[_name("\\A")], adaptations=[
            TraitAliasNode(method="x", new_name="y"),
        ]),
        TraitUseNode(traits=[_name("\\A")]),
    ])

    result = ClassStructureResolver().collect_traits(node, _context(trait, node))

    assert result.adaptations == []
