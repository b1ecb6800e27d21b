"""Lexical types, value enumerations and attribute parsers of the XSD grammar."""

import re
from enum import Enum
from typing import Callable, Tuple, Type, TypeVar, Union

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
"URI of the XML Schema Definition namespace (xs|xsd)"

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
"URI of the XML namespace (xml)"

XML_LANG = f"{{{XML_NAMESPACE}}}lang"
"Extended name of the xml:lang attribute"

AnyURI = str
"""A Uniform Resource Identifier reference (xs:anyURI). Relative references
are kept as written, no resolution against a base URI is done."""

ID = str
"""An identifier unique within the schema document (xs:ID). It must start with
a letter or an underscore and cannot contain colons."""

NCName = str
"""A non-colonized XML name (xs:NCName), used for the names of the schema
declarations and definitions."""

QName = str
"""A qualified name (xs:QName) as written in the document, optionally
prefixed. Prefixes are not resolved to namespace URIs."""

Token = str
"""A whitespace-collapsed string (xs:token): line breaks and tabs become
spaces, runs of spaces collapse to one, leading and trailing spaces are
removed."""


class FormChoice(str, Enum):
    """Values of form, elementFormDefault and attributeFormDefault."""
    QUALIFIED = "qualified"
    UNQUALIFIED = "unqualified"


class Derivation(str, Enum):
    """Items of the final, block, finalDefault and blockDefault lists."""
    ALL = "#all"
    EXTENSION = "extension"
    RESTRICTION = "restriction"
    LIST = "list"
    UNION = "union"
    SUBSTITUTION = "substitution"


class ProcessContents(str, Enum):
    """Wildcard processing modes."""
    LAX = "lax"
    STRICT = "strict"
    SKIP = "skip"


class AttributeUse(str, Enum):
    """Attribute usage types."""
    OPTIONAL = "optional"
    PROHIBITED = "prohibited"
    REQUIRED = "required"


class OpenContentMode(str, Enum):
    """Modes of openContent and defaultOpenContent."""
    NONE = "none"
    INTERLEAVE = "interleave"
    SUFFIX = "suffix"


class WhiteSpaceValue(str, Enum):
    """Values of the whiteSpace facet."""
    PRESERVE = "preserve"
    REPLACE = "replace"
    COLLAPSE = "collapse"


class ExplicitTimezoneValue(str, Enum):
    """Values of the explicitTimezone facet."""
    OPTIONAL = "optional"
    REQUIRED = "required"
    PROHIBITED = "prohibited"


class Unbounded(str, Enum):
    """The maxOccurs sentinel for an unlimited number of occurrences."""
    UNBOUNDED = "unbounded"

    def __str__(self) -> str:
        return self.value


MaxOccurs = Union[int, Unbounded]

E = TypeVar("E", bound=Enum)

_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")


def collapse(value: str) -> Token:
    """Apply the xs:token whitespace normalization to a value."""
    return " ".join(value.split())


def parse_token(value: str) -> Token:
    """Parse a whitespace-collapsed attribute value."""
    return collapse(value)


def parse_string(value: str) -> str:
    """Parse an attribute value that keeps its whitespace (e.g. a pattern)."""
    return value


def parse_boolean(value: str) -> bool:
    """Parse an xs:boolean lexical value."""
    token = collapse(value)
    if token in ("true", "1"):
        return True
    elif token in ("false", "0"):
        return False
    raise ValueError(f"{value!r} is not a boolean value")


def parse_non_negative_integer(value: str) -> int:
    """Parse an xs:nonNegativeInteger lexical value."""
    token = collapse(value)
    if not _INTEGER_PATTERN.match(token):
        raise ValueError(f"{value!r} is not an integer value")
    number = int(token)
    if number < 0:
        raise ValueError(f"{value!r} is not a non negative integer")
    return number


def parse_positive_integer(value: str) -> int:
    """Parse an xs:positiveInteger lexical value."""
    number = parse_non_negative_integer(value)
    if number == 0:
        raise ValueError(f"{value!r} is not a positive integer")
    return number


def parse_max_occurs(value: str) -> MaxOccurs:
    """Parse a maxOccurs value: the 'unbounded' keyword or a non negative integer."""
    token = collapse(value)
    if token == Unbounded.UNBOUNDED.value:
        return Unbounded.UNBOUNDED
    try:
        return parse_non_negative_integer(token)
    except ValueError:
        raise ValueError(
            f"{value!r} is not a non negative integer or 'unbounded'"
        ) from None


def parse_qname_list(value: str) -> Tuple[QName, ...]:
    """Parse a whitespace-separated list of qualified names."""
    return tuple(value.split())


def enum_parser(enum_class: Type[E]) -> Callable[[str], E]:
    """Create a parser accepting only the values of an enumeration."""

    def parse(value: str) -> E:
        try:
            return enum_class(collapse(value))
        except ValueError:
            choices = ", ".join(repr(member.value) for member in enum_class)
            raise ValueError(f"{value!r} is not one of {choices}") from None

    return parse


def derivation_set_parser(*allowed: Derivation) -> Callable[[str], Tuple[Derivation, ...]]:
    """
    Create a parser for a derivation set attribute (final, block and defaults).

    The value is either '#all' alone or a list of the allowed derivations.
    """

    def parse(value: str) -> Tuple[Derivation, ...]:
        items = value.split()
        if items == [Derivation.ALL.value]:
            return (Derivation.ALL,)

        derivations = []
        for item in items:
            if item == Derivation.ALL.value:
                raise ValueError("'#all' cannot be combined with other values")
            try:
                derivation = Derivation(item)
            except ValueError:
                derivation = None
            if derivation is None or derivation not in allowed:
                choices = ", ".join(repr(d.value) for d in allowed)
                raise ValueError(f"{item!r} is not '#all' or one of {choices}")
            derivations.append(derivation)
        return tuple(derivations)

    return parse


parse_form = enum_parser(FormChoice)
parse_process_contents = enum_parser(ProcessContents)
parse_attribute_use = enum_parser(AttributeUse)
parse_open_content_mode = enum_parser(OpenContentMode)
parse_white_space = enum_parser(WhiteSpaceValue)
parse_explicit_timezone = enum_parser(ExplicitTimezoneValue)

parse_block_set = derivation_set_parser(
    Derivation.EXTENSION, Derivation.RESTRICTION, Derivation.SUBSTITUTION
)
parse_type_derivation_set = derivation_set_parser(
    Derivation.EXTENSION, Derivation.RESTRICTION
)
parse_full_derivation_set = derivation_set_parser(
    Derivation.EXTENSION, Derivation.RESTRICTION, Derivation.LIST, Derivation.UNION
)
