"""Tests for facet nodes and the facet view of restrictions."""

import pytest

from xsdtree.basics import WhiteSpaceValue
from xsdtree.body import XSD_COMPONENTS, Body
from xsdtree.exceptions import GrammarError
from xsdtree.facets import (
    FACET_TAGS, Assertion, Enumeration, Facet, FacetKind, Length, MaxExclusive,
    MinInclusive, Pattern, facets_from_body
)
from xsdtree.schema_model import Annotation, Assert, Attribute, Restriction, SimpleType

XSD = 'xmlns:xs="http://www.w3.org/2001/XMLSchema"'


class TestFacetKinds:
    """Tests for the closed set of facet kinds."""

    def test_kinds_are_registered_tags(self):
        """Test that each facet kind is built from its own node class."""
        for kind in FacetKind:
            node_class = XSD_COMPONENTS[kind.value]
            assert node_class.tag == kind.value
            assert node_class.children == frozenset({"annotation"})

    def test_restriction_children_are_facets_or_skipped(self):
        """Test that each child kind of a restriction is either a facet or skipped."""
        skipped = {
            "annotation", "simpleType", "group", "all", "choice", "sequence",
            "openContent", "attribute", "attributeGroup", "anyAttribute", "assert",
        }

        assert Restriction.children == FACET_TAGS | skipped
        assert not FACET_TAGS & skipped


class TestFacetView:
    """Tests for the mapping of restriction bodies to facets."""

    def test_body_order(self):
        """Test that facets keep the order of the body."""
        length = Length(value=3)
        pattern = Pattern(value="[A-Z]+")
        restriction = Restriction(base="xs:string", body=Body([length, pattern]))

        facets = restriction.facets()

        assert facets == [Facet(FacetKind.LENGTH, length), Facet(FacetKind.PATTERN, pattern)]

    def test_non_facets_are_skipped(self):
        """Test that annotations, inline types, attributes and asserts are skipped."""
        enumeration = Enumeration(value="a")
        restriction = Restriction(body=Body([
            Annotation(),
            SimpleType(),
            enumeration,
            Attribute(name="x"),
            Assert(test="@x > 0"),
        ]))

        assert [facet.node for facet in restriction.facets()] == [enumeration]
        assert len(restriction.asserts()) == 1

    def test_pattern_enumeration_annotation(self):
        """Test that an annotation among two facets is not a facet."""
        pattern = Pattern(value="[a-z]+")
        enumeration = Enumeration(value="abc")
        restriction = Restriction(base="xs:string", body=Body([pattern, enumeration, Annotation()]))

        facets = restriction.facets()

        assert len(facets) == 2
        assert [(facet.kind, facet.node) for facet in facets] == [
            (FacetKind.PATTERN, pattern), (FacetKind.ENUMERATION, enumeration)
        ]

    def test_boundary_kinds(self):
        """Test that each range facet maps to its own kind."""
        facets = facets_from_body([MinInclusive(value="0"), MaxExclusive(value="10")])

        assert [facet.kind for facet in facets] == [
            FacetKind.MIN_INCLUSIVE, FacetKind.MAX_EXCLUSIVE
        ]

    def test_recomputed_per_call(self):
        """Test that each call builds a new list."""
        restriction = Restriction(body=Body([Length(value=1)]))

        assert restriction.facets() == restriction.facets()
        assert restriction.facets() is not restriction.facets()

    def test_facet_values(self):
        """Test the value and fixed properties of the view."""
        length = Facet(FacetKind.LENGTH, Length(value=3, fixed=True))
        pattern = Facet(FacetKind.PATTERN, Pattern(value="\\d+"))
        assertion = Facet(FacetKind.ASSERTION, Assertion(test="$value > 0"))

        assert (length.value, length.fixed) == (3, True)
        assert (pattern.value, pattern.fixed) == ("\\d+", False)
        assert assertion.value == "$value > 0"

    def test_enumeration_values(self):
        """Test the shortcut for enumerated restrictions."""
        restriction = Restriction(body=Body([
            Enumeration(value="a"), Pattern(value="."), Enumeration(value="b")
        ]))

        assert restriction.enumeration_values() == ["a", "b"]


class TestParsedFacets:
    """Tests for facets built from XSD text."""

    def test_facet_attributes(self, parser):
        """Test the typed values of facet attributes."""
        restriction = parser.build(f'''
            <xs:restriction {XSD} base="xs:decimal">
                <xs:whiteSpace value="collapse" fixed="1"/>
                <xs:totalDigits value="9"/>
                <xs:fractionDigits value="0"/>
                <xs:minExclusive value="-1.5"/>
            </xs:restriction>''')

        white_space, total, fraction, minimum = restriction.facets()

        assert white_space.value is WhiteSpaceValue.COLLAPSE
        assert white_space.fixed is True
        assert (total.value, fraction.value) == (9, 0)
        assert minimum.kind is FacetKind.MIN_EXCLUSIVE
        assert minimum.value == "-1.5"

    def test_facet_annotation(self, parser):
        """Test the optional annotation of a facet."""
        restriction = parser.build(f'''
            <xs:restriction {XSD} base="xs:string">
                <xs:enumeration value="x">
                    <xs:annotation><xs:documentation>The x</xs:documentation></xs:annotation>
                </xs:enumeration>
            </xs:restriction>''')

        facet = restriction.facets()[0]

        assert facet.annotation().documentations()[0].text == "The x"

    @pytest.mark.parametrize("facet", [
        '<xs:totalDigits value="0"/>',
        '<xs:length value="-1"/>',
        '<xs:whiteSpace value="trim"/>',
        '<xs:pattern/>',
    ])
    def test_invalid_facets(self, parser, facet):
        """Test that invalid or missing facet values are rejected."""
        with pytest.raises(GrammarError):
            parser.build(f'<xs:restriction {XSD} base="xs:string">{facet}</xs:restriction>')
