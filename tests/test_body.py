"""Tests for bodies and the extraction functions."""

from dataclasses import FrozenInstanceError

import pytest

from xsdtree.body import (
    XSD_COMPONENTS, Ambiguity, Body, attribute_fields, extract_all,
    extract_first, extract_singleton, find_ambiguities, iter_nodes
)
from xsdtree.particles import Choice, Element, Sequence
from xsdtree.schema_model import (
    Annotation, Attribute, ComplexType, Documentation, Schema, SimpleType
)


def element(name: str) -> Element:
    return Element(name=name)


class TestBody:
    """Tests for the Body sequence."""

    def test_sequence_protocol(self):
        """Test indexing, length, iteration and order."""
        items = [element("a"), Annotation(), element("b")]
        body = Body(items)

        assert len(body) == 3
        assert body[0] is items[0]
        assert list(body) == items
        assert body.tags == ["element", "annotation", "element"]
        assert body.count_of("element") == 2

    def test_empty_body(self):
        """Test the default empty body."""
        body = Body()

        assert len(body) == 0
        assert not body
        assert body == Body([])

    def test_equality_and_hash(self):
        """Test that bodies compare by content."""
        assert Body([element("a")]) == Body([element("a")])
        assert hash(Body([element("a")])) == hash(Body([element("a")]))
        assert Body([element("a")]) != Body([element("b")])

    def test_immutable(self):
        """Test that bodies and nodes cannot be modified."""
        body = Body([element("a")])
        with pytest.raises(TypeError):
            body[0] = element("b")

        node = element("a")
        with pytest.raises(FrozenInstanceError):
            node.name = "b"

    def test_other_attributes_read_only(self):
        """Test that the foreign attributes of a node can't be changed."""
        source = {"{urn:x}hint": "1"}
        node = Annotation(other_attributes=source)
        source["{urn:x}hint"] = "2"

        assert node.other_attributes == {"{urn:x}hint": "1"}
        with pytest.raises(TypeError):
            node.other_attributes["{urn:y}a"] = "changed"
        assert Annotation().other_attributes == {}


class TestExtraction:
    """Tests for extract_singleton, extract_all and extract_first."""

    def test_singleton_one_match(self):
        """Test that a single match is returned."""
        annotation = Annotation()
        body = Body([annotation, element("a")])

        assert extract_singleton(body, "annotation") is annotation

    def test_singleton_no_match(self):
        """Test that no match gives None."""
        assert extract_singleton(Body([element("a")]), "annotation") is None

    def test_singleton_many_matches(self):
        """Test that more than one match is reported as absent."""
        body = Body([Annotation(), Annotation(id="second")])

        assert extract_singleton(body, "annotation") is None

    def test_singleton_kind_group(self):
        """Test that several kinds form a single exclusive group."""
        sequence = Sequence()
        body = Body([Annotation(), sequence, Attribute(name="x")])

        assert extract_singleton(body, ("all", "choice", "sequence")) is sequence
        body = Body([Choice(), sequence])
        assert extract_singleton(body, ("all", "choice", "sequence")) is None

    def test_extract_all(self):
        """Test that all the matches are returned in body order."""
        first, second = Attribute(name="x"), Attribute(name="y")
        body = Body([first, Annotation(), second])

        assert extract_all(body, "attribute") == [first, second]
        assert extract_all(body, "element") == []

    def test_extract_first(self):
        """Test getting the first match of several kinds."""
        simple_type = SimpleType(name="t")
        body = Body([Annotation(), simple_type, ComplexType(name="c")])

        assert extract_first(body, {"complexType", "simpleType"}) is simple_type
        assert extract_first(body, "element") is None


class TestRegistry:
    """Tests for the tag registry and attribute bindings."""

    def test_every_child_kind_is_registered(self):
        """Test that each allowed child tag maps to a node class."""
        for tag, node_class in XSD_COMPONENTS.items():
            assert node_class.tag == tag
            for child_tag in node_class.children:
                assert child_tag in XSD_COMPONENTS, (tag, child_tag)

    def test_exclusive_groups_are_allowed_children(self):
        """Test that exclusive groups only name allowed children."""
        for node_class in XSD_COMPONENTS.values():
            for group in node_class.exclusive:
                assert group <= node_class.children, node_class.tag

    def test_attribute_fields(self):
        """Test the binding of XSD attributes to fields."""
        bound = attribute_fields(Element)

        assert bound["minOccurs"].name == "min_occurs"
        assert bound["substitutionGroup"].name == "substitution_group"
        assert "body" not in bound
        assert bound["name"].metadata["required"] is False
        assert attribute_fields(Schema)["targetNamespace"].metadata["required"] is True

    def test_documentation_binds_xml_lang(self):
        """Test that xml:lang is bound by its extended name."""
        bound = attribute_fields(Documentation)

        assert bound["{http://www.w3.org/XML/1998/namespace}lang"].name == "xml_lang"


class TestAmbiguities:
    """Tests for node walking and ambiguity diagnostics."""

    def test_iter_nodes_paths(self):
        """Test that paths count the children of each kind."""
        schema = Schema(target_namespace="urn:x", body=Body([
            element("a"),
            SimpleType(name="t"),
            element("b"),
        ]))

        paths = [path for path, _ in iter_nodes(schema)]

        assert paths == ["/schema", "/schema/element[1]", "/schema/simpleType[1]",
                         "/schema/element[2]"]

    def test_no_ambiguities(self):
        """Test a well-formed tree."""
        node = ComplexType(body=Body([Annotation(), Sequence(body=Body([element("a")]))]))

        assert find_ambiguities(node) == []

    def test_duplicate_annotation(self):
        """Test that two annotations are reported."""
        node = Sequence(body=Body([Annotation(), Annotation(), element("a")]))

        ambiguities = find_ambiguities(node)

        assert ambiguities == [Ambiguity("/sequence", ("annotation",), ("annotation", "annotation"))]
        assert str(ambiguities[0]) == (
            "/sequence: at most one of annotation is allowed, found annotation, annotation"
        )

    def test_nested_content_conflict(self):
        """Test that conflicting content models are found at any depth."""
        inner = ComplexType(body=Body([Sequence(), Choice()]))
        schema = Schema(target_namespace="urn:x", body=Body([
            Element(name="root", body=Body([inner])),
        ]))

        ambiguities = find_ambiguities(schema)

        assert len(ambiguities) == 1
        assert ambiguities[0].path == "/schema/element[1]/complexType[1]"
        assert ambiguities[0].found == ("sequence", "choice")
