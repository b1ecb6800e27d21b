"""
Constraining facets of simple type restrictions.

Facets restrict the value space of a simple type. Each facet element of a
restriction is built into one of the facet nodes below; `Facet` is a view
that puts all of them behind one type, tagged with its `FacetKind`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .basics import (
    AnyURI, ExplicitTimezoneValue, WhiteSpaceValue, parse_boolean,
    parse_explicit_timezone, parse_non_negative_integer, parse_positive_integer,
    parse_string, parse_white_space
)
from .body import Annotated, SchemaNode, xsd_attribute


@dataclass(frozen=True, kw_only=True)
class FacetNode(Annotated):
    """Base class of the facet nodes, whose content is an optional annotation."""
    children = frozenset({"annotation"})


@dataclass(frozen=True, kw_only=True)
class LengthFacet(FacetNode):
    """Base class for the length, minLength and maxLength facets."""
    value: int = xsd_attribute("value", parse_non_negative_integer, required=True)
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class Length(LengthFacet):
    tag = "length"


@dataclass(frozen=True, kw_only=True)
class MinLength(LengthFacet):
    tag = "minLength"


@dataclass(frozen=True, kw_only=True)
class MaxLength(LengthFacet):
    tag = "maxLength"


@dataclass(frozen=True, kw_only=True)
class Pattern(FacetNode):
    """A regular expression the lexical value must match."""
    tag = "pattern"

    value: str = xsd_attribute("value", parse_string, required=True)


@dataclass(frozen=True, kw_only=True)
class Enumeration(FacetNode):
    """One of the values allowed by an enumerated restriction."""
    tag = "enumeration"

    value: str = xsd_attribute("value", parse_string, required=True)


@dataclass(frozen=True, kw_only=True)
class WhiteSpace(FacetNode):
    tag = "whiteSpace"

    value: WhiteSpaceValue = xsd_attribute("value", parse_white_space, required=True)
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class BoundaryFacet(FacetNode):
    """
    Base class for the range facets.

    The value is kept in its lexical form, because its type is the base type
    of the restriction and resolving it is left to the consumer.
    """
    value: str = xsd_attribute("value", parse_string, required=True)
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class MinInclusive(BoundaryFacet):
    tag = "minInclusive"


@dataclass(frozen=True, kw_only=True)
class MaxInclusive(BoundaryFacet):
    tag = "maxInclusive"


@dataclass(frozen=True, kw_only=True)
class MinExclusive(BoundaryFacet):
    tag = "minExclusive"


@dataclass(frozen=True, kw_only=True)
class MaxExclusive(BoundaryFacet):
    tag = "maxExclusive"


@dataclass(frozen=True, kw_only=True)
class TotalDigits(FacetNode):
    tag = "totalDigits"

    value: int = xsd_attribute("value", parse_positive_integer, required=True)
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class FractionDigits(FacetNode):
    tag = "fractionDigits"

    value: int = xsd_attribute("value", parse_non_negative_integer, required=True)
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class Assertion(FacetNode):
    """An XPath 2.0 assertion on the values of a simple type (XSD 1.1)."""
    tag = "assertion"

    test: Optional[str] = xsd_attribute("test", parse_string)
    xpath_default_namespace: Optional[AnyURI] = xsd_attribute("xpathDefaultNamespace")


@dataclass(frozen=True, kw_only=True)
class ExplicitTimezone(FacetNode):
    """Timezone requirement of date and time values (XSD 1.1)."""
    tag = "explicitTimezone"

    value: ExplicitTimezoneValue = xsd_attribute(
        "value", parse_explicit_timezone, required=True
    )
    fixed: Optional[bool] = xsd_attribute("fixed", parse_boolean)


class FacetKind(str, Enum):
    """The closed set of facet kinds, valued with their XSD tags."""
    LENGTH = "length"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    WHITE_SPACE = "whiteSpace"
    ENUMERATION = "enumeration"
    MIN_INCLUSIVE = "minInclusive"
    MAX_INCLUSIVE = "maxInclusive"
    MIN_EXCLUSIVE = "minExclusive"
    MAX_EXCLUSIVE = "maxExclusive"
    TOTAL_DIGITS = "totalDigits"
    FRACTION_DIGITS = "fractionDigits"
    ASSERTION = "assertion"
    EXPLICIT_TIMEZONE = "explicitTimezone"


FACET_KINDS: Dict[str, FacetKind] = {kind.value: kind for kind in FacetKind}
FACET_TAGS = frozenset(FACET_KINDS)


@dataclass(frozen=True)
class Facet:
    """A facet of a restriction, viewed independently of its node type."""
    kind: FacetKind
    node: FacetNode

    @property
    def value(self) -> Any:
        """The facet value, or the test expression for assertions."""
        if isinstance(self.node, Assertion):
            return self.node.test
        return self.node.value

    @property
    def fixed(self) -> bool:
        """Whether derived types are prevented from changing the facet value."""
        return bool(getattr(self.node, "fixed", False))

    def annotation(self) -> Optional[Any]:
        return self.node.annotation()


def facets_from_body(body: Iterable[SchemaNode]) -> List[Facet]:
    """
    Map the facet children of a restriction body to facets, in body order.

    Children that are not facets are skipped: annotations, the inline simple
    type, content model and attribute declarations, and the assert elements of
    complex type restrictions.
    """
    facets = []
    for item in body:
        kind = FACET_KINDS.get(item.tag)
        if kind is not None:
            facets.append(Facet(kind, item))
    return facets
