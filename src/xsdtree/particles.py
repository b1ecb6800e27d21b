"""
Particles of the content models: element declarations, group references,
the model groups and the element wildcard.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from .basics import (
    AnyURI, Derivation, FormChoice, MaxOccurs, NCName, ProcessContents,
    QName, Unbounded, parse_block_set, parse_boolean, parse_form,
    parse_max_occurs, parse_non_negative_integer, parse_process_contents,
    parse_qname_list, parse_string, parse_type_derivation_set
)
from .body import Annotated, SchemaNode, extract_all, extract_singleton, xsd_attribute

PARTICLE_TAGS = frozenset({"element", "group", "choice", "sequence", "any"})
MODEL_GROUP_TAGS = frozenset({"all", "choice", "sequence"})
IDENTITY_CONSTRAINT_TAGS = frozenset({"unique", "key", "keyref"})


@dataclass(frozen=True)
class Occurrence:
    """
    Occurrence bounds of a particle.

    The defaults are the ones of the minOccurs and maxOccurs attributes. The
    bounds are not checked against each other.
    """
    min: int = 1
    max: MaxOccurs = 1

    @property
    def is_unbounded(self) -> bool:
        return self.max is Unbounded.UNBOUNDED

    @property
    def is_optional(self) -> bool:
        return self.min == 0

    @property
    def is_required(self) -> bool:
        return self.min > 0

    @property
    def is_array(self) -> bool:
        """Whether the particle can occur more than once."""
        return self.is_unbounded or self.max > 1

    def __str__(self) -> str:
        return f"[{self.min}..{self.max}]"


@dataclass(frozen=True, kw_only=True)
class Particle(Annotated):
    """Base class for the nodes with occurrence bounds."""
    min_occurs: Optional[int] = xsd_attribute("minOccurs", parse_non_negative_integer)
    max_occurs: Optional[MaxOccurs] = xsd_attribute("maxOccurs", parse_max_occurs)

    @property
    def occurs(self) -> Occurrence:
        """The occurrence bounds, with defaults applied to missing attributes."""
        return Occurrence(
            min=1 if self.min_occurs is None else self.min_occurs,
            max=1 if self.max_occurs is None else self.max_occurs,
        )


@dataclass(frozen=True, kw_only=True)
class Element(Particle):
    """
    An element declaration, global or local, or a reference to a global one.

    The type of the element is either referenced by name (`type`) or defined
    anonymously in the body. Type alternatives and identity constraints
    follow the type definition.
    """
    tag = "element"
    children = frozenset({
        "annotation", "simpleType", "complexType", "alternative",
        "unique", "key", "keyref",
    })
    exclusive = (
        frozenset({"annotation"}),
        frozenset({"simpleType", "complexType"}),
    )

    name: Optional[NCName] = xsd_attribute("name")
    ref: Optional[QName] = xsd_attribute("ref")
    type: Optional[QName] = xsd_attribute("type")
    substitution_group: Optional[Tuple[QName, ...]] = xsd_attribute(
        "substitutionGroup", parse_qname_list
    )
    default: Optional[str] = xsd_attribute("default", parse_string)
    fixed: Optional[str] = xsd_attribute("fixed", parse_string)
    nillable: Optional[bool] = xsd_attribute("nillable", parse_boolean)
    abstract: Optional[bool] = xsd_attribute("abstract", parse_boolean)
    final: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "final", parse_type_derivation_set
    )
    block: Optional[Tuple[Derivation, ...]] = xsd_attribute("block", parse_block_set)
    form: Optional[FormChoice] = xsd_attribute("form", parse_form)
    target_namespace: Optional[AnyURI] = xsd_attribute("targetNamespace")

    def check(self) -> Optional[str]:
        if self.name is None and self.ref is None:
            return "an element requires a 'name' or a 'ref' attribute"
        if self.default is not None and self.fixed is not None:
            return "'default' and 'fixed' attributes are mutually exclusive"
        return None

    def simple_type(self) -> Optional[Any]:
        return extract_singleton(self.body, "simpleType")

    def complex_type(self) -> Optional[Any]:
        return extract_singleton(self.body, "complexType")

    def type_definition(self) -> Optional[Any]:
        """Get the anonymous type definition, simple or complex."""
        return extract_singleton(self.body, ("simpleType", "complexType"))

    def alternatives(self) -> List[Any]:
        return extract_all(self.body, "alternative")

    def identity_constraints(self) -> List[Any]:
        """Get the unique, key and keyref constraints, in body order."""
        return extract_all(self.body, IDENTITY_CONSTRAINT_TAGS)


@dataclass(frozen=True, kw_only=True)
class Group(Particle):
    """A named model group definition or a reference to one."""
    tag = "group"
    children = frozenset({"annotation"}) | MODEL_GROUP_TAGS
    exclusive = (frozenset({"annotation"}), MODEL_GROUP_TAGS)

    name: Optional[NCName] = xsd_attribute("name")
    ref: Optional[QName] = xsd_attribute("ref")

    def check(self) -> Optional[str]:
        if self.name is None and self.ref is None:
            return "a group requires a 'name' or a 'ref' attribute"
        return None

    def model_group(self) -> Optional["ModelGroup"]:
        """Get the all, choice or sequence of a group definition."""
        return extract_singleton(self.body, MODEL_GROUP_TAGS)


@dataclass(frozen=True, kw_only=True)
class ModelGroup(Particle):
    """Base class for sequence, choice and all."""

    def particles(self) -> List[Particle]:
        return particles_from_body(self.body)

    def elements(self) -> List[Element]:
        return extract_all(self.body, "element")


@dataclass(frozen=True, kw_only=True)
class Sequence(ModelGroup):
    tag = "sequence"
    children = frozenset({"annotation"}) | PARTICLE_TAGS


@dataclass(frozen=True, kw_only=True)
class Choice(ModelGroup):
    tag = "choice"
    children = frozenset({"annotation"}) | PARTICLE_TAGS


@dataclass(frozen=True, kw_only=True)
class All(ModelGroup):
    """
    An all model group, whose particles may appear in any order.

    Nested sequences and choices are not allowed. The occurrence bounds are
    stored as declared even if out of the {0, 1} range.
    """
    tag = "all"
    children = frozenset({"annotation", "element", "any", "group"})


@dataclass(frozen=True, kw_only=True)
class AnyElement(Particle):
    """An element wildcard."""
    tag = "any"
    children = frozenset({"annotation"})

    namespace: Optional[str] = xsd_attribute("namespace")
    process_contents: Optional[ProcessContents] = xsd_attribute(
        "processContents", parse_process_contents
    )
    not_namespace: Optional[Tuple[str, ...]] = xsd_attribute("notNamespace", parse_qname_list)
    not_qname: Optional[Tuple[str, ...]] = xsd_attribute("notQName", parse_qname_list)


def particles_from_body(body: Iterable[SchemaNode]) -> List[Particle]:
    """
    Get the particles of a model group body, in source order.

    Every child other than the annotation is a particle: an element, a group
    reference, a wildcard or a nested sequence or choice.
    """
    return extract_all(body, PARTICLE_TAGS)
