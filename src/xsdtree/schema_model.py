"""Schema model nodes: annotations, declarations, type definitions and the schema root."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .basics import (
    XML_LANG, AnyURI, AttributeUse, Derivation, FormChoice, NCName,
    OpenContentMode, ProcessContents, QName, Token, parse_attribute_use,
    parse_block_set, parse_boolean, parse_form, parse_full_derivation_set,
    parse_open_content_mode, parse_process_contents, parse_qname_list,
    parse_string, parse_type_derivation_set
)
from .body import (
    Annotated, SchemaNode, extract_all, extract_first, extract_singleton,
    xsd_attribute
)
from .exceptions import MissingContentError
from .facets import FACET_TAGS, Facet, facets_from_body
from .particles import MODEL_GROUP_TAGS, Particle

ATTRIBUTE_DECLARATION_TAGS = frozenset({"attribute", "attributeGroup", "anyAttribute", "assert"})
CONTENT_MODEL_TAGS = frozenset({"group"}) | MODEL_GROUP_TAGS
SIMPLE_DERIVATION_TAGS = ("restriction", "union", "list")


#
# Annotations

@dataclass(frozen=True, kw_only=True)
class AppInfo(SchemaNode):
    """
    Application information of an annotation.

    The content is free XML. It is kept as the concatenated text of the
    element and as the serialized markup of its child elements.
    """
    tag = "appinfo"
    mixed_content = True

    source: Optional[AnyURI] = xsd_attribute("source")
    text: str = ""
    markup: str = ""


@dataclass(frozen=True, kw_only=True)
class Documentation(SchemaNode):
    """Human readable documentation of an annotation."""
    tag = "documentation"
    mixed_content = True

    source: Optional[AnyURI] = xsd_attribute("source")
    xml_lang: Optional[Token] = xsd_attribute(XML_LANG)
    text: str = ""
    markup: str = ""


@dataclass(frozen=True, kw_only=True)
class Annotation(SchemaNode):
    tag = "annotation"
    children = frozenset({"appinfo", "documentation"})

    id: Optional[str] = xsd_attribute("id")

    def appinfos(self) -> List[AppInfo]:
        return extract_all(self.body, "appinfo")

    def documentations(self) -> List[Documentation]:
        return extract_all(self.body, "documentation")

    @property
    def text(self) -> str:
        """The text of the documentation entries, one per line."""
        return "\n".join(doc.text.strip() for doc in self.documentations())


#
# Body query mixins

class AttributeDeclarations:
    """Accessors for the attribute uses and the assertions of a definition."""

    def attributes(self) -> List["Attribute"]:
        return extract_all(self.body, "attribute")

    def attribute_groups(self) -> List["AttributeGroup"]:
        return extract_all(self.body, "attributeGroup")

    def any_attribute(self) -> Optional["AnyAttribute"]:
        return extract_singleton(self.body, "anyAttribute")

    def asserts(self) -> List["Assert"]:
        return extract_all(self.body, "assert")


class ContentModel:
    """Accessors for the particle content of a definition."""

    def group(self) -> Optional[Any]:
        return extract_singleton(self.body, "group")

    def all(self) -> Optional[Any]:
        return extract_singleton(self.body, "all")

    def choice(self) -> Optional[Any]:
        return extract_singleton(self.body, "choice")

    def sequence(self) -> Optional[Any]:
        return extract_singleton(self.body, "sequence")

    def particle(self) -> Optional[Particle]:
        """Get the content model: a group reference, an all, a choice or a sequence."""
        return extract_singleton(self.body, CONTENT_MODEL_TAGS)

    def open_content(self) -> Optional["OpenContent"]:
        return extract_singleton(self.body, "openContent")


#
# Attribute declarations

@dataclass(frozen=True, kw_only=True)
class Attribute(Annotated):
    """An attribute declaration, global or local, or a reference to a global one."""
    tag = "attribute"
    children = frozenset({"annotation", "simpleType"})
    exclusive = (frozenset({"annotation"}), frozenset({"simpleType"}))

    name: Optional[NCName] = xsd_attribute("name")
    ref: Optional[QName] = xsd_attribute("ref")
    type: Optional[QName] = xsd_attribute("type")
    use: Optional[AttributeUse] = xsd_attribute("use", parse_attribute_use)
    default: Optional[str] = xsd_attribute("default", parse_string)
    fixed: Optional[str] = xsd_attribute("fixed", parse_string)
    form: Optional[FormChoice] = xsd_attribute("form", parse_form)
    target_namespace: Optional[AnyURI] = xsd_attribute("targetNamespace")
    inheritable: Optional[bool] = xsd_attribute("inheritable", parse_boolean)

    def check(self) -> Optional[str]:
        if self.name is None and self.ref is None:
            return "an attribute requires a 'name' or a 'ref' attribute"
        if self.default is not None and self.fixed is not None:
            return "'default' and 'fixed' attributes are mutually exclusive"
        return None

    def simple_type(self) -> Optional["SimpleType"]:
        return extract_singleton(self.body, "simpleType")


@dataclass(frozen=True, kw_only=True)
class AttributeGroup(Annotated, AttributeDeclarations):
    """A named attribute group definition or a reference to one."""
    tag = "attributeGroup"
    children = frozenset({"annotation"}) | ATTRIBUTE_DECLARATION_TAGS
    exclusive = (frozenset({"annotation"}), frozenset({"anyAttribute"}))

    name: Optional[NCName] = xsd_attribute("name")
    ref: Optional[QName] = xsd_attribute("ref")

    def check(self) -> Optional[str]:
        if self.name is None and self.ref is None:
            return "an attribute group requires a 'name' or a 'ref' attribute"
        return None


@dataclass(frozen=True, kw_only=True)
class AnyAttribute(Annotated):
    """An attribute wildcard."""
    tag = "anyAttribute"
    children = frozenset({"annotation"})

    namespace: Optional[str] = xsd_attribute("namespace")
    process_contents: Optional[ProcessContents] = xsd_attribute(
        "processContents", parse_process_contents
    )
    not_namespace: Optional[Tuple[str, ...]] = xsd_attribute("notNamespace", parse_qname_list)
    not_qname: Optional[Tuple[str, ...]] = xsd_attribute("notQName", parse_qname_list)


@dataclass(frozen=True, kw_only=True)
class Assert(Annotated):
    """An XPath 2.0 assertion on the content of a complex type (XSD 1.1)."""
    tag = "assert"
    children = frozenset({"annotation"})

    test: Optional[str] = xsd_attribute("test", parse_string)
    xpath_default_namespace: Optional[AnyURI] = xsd_attribute("xpathDefaultNamespace")


#
# Simple type definitions

@dataclass(frozen=True, kw_only=True)
class SimpleType(Annotated):
    """
    A simple type definition, named at the top level or anonymous.

    The content of a simple type is exactly one of a restriction, a union or
    a list.
    """
    tag = "simpleType"
    children = frozenset({"annotation"}) | frozenset(SIMPLE_DERIVATION_TAGS)
    exclusive = (frozenset({"annotation"}), frozenset(SIMPLE_DERIVATION_TAGS))

    name: Optional[NCName] = xsd_attribute("name")
    final: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "final", parse_full_derivation_set
    )

    def content(self) -> SchemaNode:
        """
        Get the derivation of the simple type.

        The first restriction, union or list in body order is returned.

        :raises MissingContentError: if the body has none of them.
        """
        content = extract_first(self.body, SIMPLE_DERIVATION_TAGS)
        if content is None:
            raise MissingContentError(self, SIMPLE_DERIVATION_TAGS)
        return content

    def restriction(self) -> Optional["Restriction"]:
        return extract_singleton(self.body, "restriction")

    def union(self) -> Optional["UnionDerivation"]:
        return extract_singleton(self.body, "union")

    def list(self) -> Optional["ListDerivation"]:
        return extract_singleton(self.body, "list")


@dataclass(frozen=True, kw_only=True)
class Restriction(Annotated, ContentModel, AttributeDeclarations):
    """
    A derivation by restriction.

    The same element restricts simple types (base or inline simple type plus
    facets), simple content (facets plus attributes) and complex content
    (content model plus attributes).
    """
    tag = "restriction"
    children = (
        frozenset({"annotation", "simpleType", "openContent"})
        | FACET_TAGS | CONTENT_MODEL_TAGS | ATTRIBUTE_DECLARATION_TAGS
    )
    exclusive = (
        frozenset({"annotation"}),
        frozenset({"simpleType"}),
        frozenset({"openContent"}),
        CONTENT_MODEL_TAGS,
        frozenset({"anyAttribute"}),
    )

    base: Optional[QName] = xsd_attribute("base")

    def facets(self) -> List[Facet]:
        """Get the facets, in body order. The list is built again on each call."""
        return facets_from_body(self.body)

    def enumeration_values(self) -> List[str]:
        return [item.value for item in extract_all(self.body, "enumeration")]

    def simple_type(self) -> Optional[SimpleType]:
        """Get the inline base type of a restriction without a base attribute."""
        return extract_singleton(self.body, "simpleType")


@dataclass(frozen=True, kw_only=True)
class UnionDerivation(Annotated):
    """A derivation by union of member types, named and inline."""
    tag = "union"
    children = frozenset({"annotation", "simpleType"})

    member_types: Optional[Tuple[QName, ...]] = xsd_attribute("memberTypes", parse_qname_list)

    def simple_types(self) -> List[SimpleType]:
        return extract_all(self.body, "simpleType")


@dataclass(frozen=True, kw_only=True)
class ListDerivation(Annotated):
    """A derivation by list of an item type, named or inline."""
    tag = "list"
    children = frozenset({"annotation", "simpleType"})
    exclusive = (frozenset({"annotation"}), frozenset({"simpleType"}))

    item_type: Optional[QName] = xsd_attribute("itemType")

    def simple_type(self) -> Optional[SimpleType]:
        return extract_singleton(self.body, "simpleType")


#
# Complex type definitions

@dataclass(frozen=True, kw_only=True)
class OpenContent(Annotated):
    """Open content of a complex type (XSD 1.1)."""
    tag = "openContent"
    children = frozenset({"annotation", "any"})
    exclusive = (frozenset({"annotation"}), frozenset({"any"}))

    mode: Optional[OpenContentMode] = xsd_attribute("mode", parse_open_content_mode)

    def wildcard(self) -> Optional[Any]:
        return extract_singleton(self.body, "any")


@dataclass(frozen=True, kw_only=True)
class DefaultOpenContent(OpenContent):
    """Open content applied to all the complex types of a schema (XSD 1.1)."""
    tag = "defaultOpenContent"

    applies_to_empty: Optional[bool] = xsd_attribute("appliesToEmpty", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class Extension(Annotated, ContentModel, AttributeDeclarations):
    """A derivation by extension of a base type."""
    tag = "extension"
    children = (
        frozenset({"annotation", "openContent"})
        | CONTENT_MODEL_TAGS | ATTRIBUTE_DECLARATION_TAGS
    )
    exclusive = (
        frozenset({"annotation"}),
        frozenset({"openContent"}),
        CONTENT_MODEL_TAGS,
        frozenset({"anyAttribute"}),
    )

    base: QName = xsd_attribute("base", required=True)


@dataclass(frozen=True, kw_only=True)
class DerivedContent(Annotated):
    """Base class for simpleContent and complexContent."""
    children = frozenset({"annotation", "restriction", "extension"})
    exclusive = (frozenset({"annotation"}), frozenset({"restriction", "extension"}))

    def derivation(self) -> Optional[Any]:
        """Get the restriction or the extension."""
        return extract_singleton(self.body, ("restriction", "extension"))

    def restriction(self) -> Optional[Restriction]:
        return extract_singleton(self.body, "restriction")

    def extension(self) -> Optional[Extension]:
        return extract_singleton(self.body, "extension")


@dataclass(frozen=True, kw_only=True)
class SimpleContent(DerivedContent):
    tag = "simpleContent"


@dataclass(frozen=True, kw_only=True)
class ComplexContent(DerivedContent):
    tag = "complexContent"

    mixed: Optional[bool] = xsd_attribute("mixed", parse_boolean)


@dataclass(frozen=True, kw_only=True)
class ComplexType(Annotated, ContentModel, AttributeDeclarations):
    """
    A complex type definition, named at the top level or anonymous.

    The content is given by at most one of a simple content, a complex
    content or a content model, followed by attribute declarations and
    assertions.
    """
    tag = "complexType"
    children = (
        frozenset({"annotation", "simpleContent", "complexContent", "openContent"})
        | CONTENT_MODEL_TAGS | ATTRIBUTE_DECLARATION_TAGS
    )
    content_tags = frozenset({"simpleContent", "complexContent"}) | CONTENT_MODEL_TAGS
    exclusive = (
        frozenset({"annotation"}),
        content_tags,
        frozenset({"openContent"}),
        frozenset({"anyAttribute"}),
    )

    name: Optional[NCName] = xsd_attribute("name")
    mixed: Optional[bool] = xsd_attribute("mixed", parse_boolean)
    abstract: Optional[bool] = xsd_attribute("abstract", parse_boolean)
    final: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "final", parse_type_derivation_set
    )
    block: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "block", parse_type_derivation_set
    )
    default_attributes_apply: Optional[bool] = xsd_attribute(
        "defaultAttributesApply", parse_boolean
    )

    def content(self) -> Optional[Any]:
        """Get the simple content, the complex content or the content model."""
        return extract_singleton(self.body, self.content_tags)

    def simple_content(self) -> Optional[SimpleContent]:
        return extract_singleton(self.body, "simpleContent")

    def complex_content(self) -> Optional[ComplexContent]:
        return extract_singleton(self.body, "complexContent")


@dataclass(frozen=True, kw_only=True)
class Alternative(Annotated):
    """A conditional type assignment of an element declaration (XSD 1.1)."""
    tag = "alternative"
    children = frozenset({"annotation", "simpleType", "complexType"})
    exclusive = (frozenset({"annotation"}), frozenset({"simpleType", "complexType"}))

    test: Optional[str] = xsd_attribute("test", parse_string)
    type: Optional[QName] = xsd_attribute("type")
    xpath_default_namespace: Optional[AnyURI] = xsd_attribute("xpathDefaultNamespace")

    def type_definition(self) -> Optional[Any]:
        return extract_singleton(self.body, ("simpleType", "complexType"))


#
# Identity constraints

@dataclass(frozen=True, kw_only=True)
class Selector(Annotated):
    """The XPath expression selecting the elements of an identity constraint."""
    tag = "selector"
    children = frozenset({"annotation"})

    xpath: str = xsd_attribute("xpath", parse_string, required=True)
    xpath_default_namespace: Optional[AnyURI] = xsd_attribute("xpathDefaultNamespace")


@dataclass(frozen=True, kw_only=True)
class Field(Selector):
    """The XPath expression of one of the fields of an identity constraint."""
    tag = "field"


@dataclass(frozen=True, kw_only=True)
class IdentityConstraint(Annotated):
    """Base class for unique, key and keyref."""
    children = frozenset({"annotation", "selector", "field"})
    exclusive = (frozenset({"annotation"}), frozenset({"selector"}))

    name: Optional[NCName] = xsd_attribute("name")
    ref: Optional[QName] = xsd_attribute("ref")

    def check(self) -> Optional[str]:
        if self.name is None and self.ref is None:
            return f"{self.tag} requires a 'name' or a 'ref' attribute"
        return None

    def selector(self) -> Optional[Selector]:
        return extract_singleton(self.body, "selector")

    def fields(self) -> List[Field]:
        return extract_all(self.body, "field")


@dataclass(frozen=True, kw_only=True)
class Unique(IdentityConstraint):
    tag = "unique"


@dataclass(frozen=True, kw_only=True)
class Key(IdentityConstraint):
    tag = "key"


@dataclass(frozen=True, kw_only=True)
class Keyref(IdentityConstraint):
    """A reference to a key or unique constraint, named by `refer`."""
    tag = "keyref"

    refer: Optional[QName] = xsd_attribute("refer")

    def check(self) -> Optional[str]:
        message = super().check()
        if message is None and self.ref is None and self.refer is None:
            return "keyref requires a 'refer' attribute"
        return message


#
# Schema composition

@dataclass(frozen=True, kw_only=True)
class Include(Annotated):
    tag = "include"
    children = frozenset({"annotation"})

    schema_location: AnyURI = xsd_attribute("schemaLocation", required=True)


@dataclass(frozen=True, kw_only=True)
class Import(Annotated):
    tag = "import"
    children = frozenset({"annotation"})

    namespace: Optional[AnyURI] = xsd_attribute("namespace")
    schema_location: Optional[AnyURI] = xsd_attribute("schemaLocation")


@dataclass(frozen=True, kw_only=True)
class Redefine(SchemaNode):
    """Redefinitions of the components of an included schema."""
    tag = "redefine"
    children = frozenset({"annotation", "simpleType", "complexType", "group", "attributeGroup"})

    id: Optional[str] = xsd_attribute("id")
    schema_location: AnyURI = xsd_attribute("schemaLocation", required=True)

    def annotations(self) -> List[Annotation]:
        return extract_all(self.body, "annotation")

    def components(self) -> List[SchemaNode]:
        """Get the redefined components, in body order."""
        return [item for item in self.body if item.tag != "annotation"]


@dataclass(frozen=True, kw_only=True)
class Override(Redefine):
    """Overrides of the components of an included schema (XSD 1.1)."""
    tag = "override"
    children = Redefine.children | frozenset({"element", "attribute", "notation"})


@dataclass(frozen=True, kw_only=True)
class Notation(Annotated):
    tag = "notation"
    children = frozenset({"annotation"})

    name: NCName = xsd_attribute("name", required=True)
    public: Optional[Token] = xsd_attribute("public")
    system: Optional[AnyURI] = xsd_attribute("system")


#
# Schema root

@dataclass(frozen=True, kw_only=True)
class Schema(SchemaNode):
    """
    The root of a schema document.

    The body holds the composition elements, the annotations and all the
    top-level declarations and definitions, in document order. The accessors
    return the children of one kind each, preserving that order.
    """
    tag = "schema"
    children = frozenset({
        "include", "import", "redefine", "override", "annotation",
        "defaultOpenContent", "simpleType", "complexType", "group",
        "attributeGroup", "element", "attribute", "notation",
    })
    exclusive = (frozenset({"defaultOpenContent"}),)

    id: Optional[str] = xsd_attribute("id")
    attribute_form_default: Optional[FormChoice] = xsd_attribute(
        "attributeFormDefault", parse_form
    )
    element_form_default: Optional[FormChoice] = xsd_attribute(
        "elementFormDefault", parse_form
    )
    block_default: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "blockDefault", parse_block_set
    )
    final_default: Optional[Tuple[Derivation, ...]] = xsd_attribute(
        "finalDefault", parse_full_derivation_set
    )
    target_namespace: AnyURI = xsd_attribute("targetNamespace", required=True)
    version: Optional[Token] = xsd_attribute("version")
    default_attributes: Optional[QName] = xsd_attribute("defaultAttributes")
    xpath_default_namespace: Optional[str] = xsd_attribute("xpathDefaultNamespace")
    xml_lang: Optional[Token] = xsd_attribute(XML_LANG)

    def includes(self) -> List[Include]:
        return extract_all(self.body, "include")

    def imports(self) -> List[Import]:
        return extract_all(self.body, "import")

    def redefines(self) -> List[Redefine]:
        return extract_all(self.body, "redefine")

    def overrides(self) -> List[Override]:
        return extract_all(self.body, "override")

    def annotations(self) -> List[Annotation]:
        return extract_all(self.body, "annotation")

    def default_open_contents(self) -> List[DefaultOpenContent]:
        return extract_all(self.body, "defaultOpenContent")

    def simple_types(self) -> List[SimpleType]:
        return extract_all(self.body, "simpleType")

    def complex_types(self) -> List[ComplexType]:
        return extract_all(self.body, "complexType")

    def groups(self) -> List[Any]:
        return extract_all(self.body, "group")

    def attribute_groups(self) -> List[AttributeGroup]:
        return extract_all(self.body, "attributeGroup")

    def elements(self) -> List[Any]:
        return extract_all(self.body, "element")

    def attributes(self) -> List[Attribute]:
        return extract_all(self.body, "attribute")

    def notations(self) -> List[Notation]:
        return extract_all(self.body, "notation")

    def summary(self) -> Dict[str, int]:
        """Count the top-level children of each kind."""
        return {
            "simpleTypes": len(self.simple_types()),
            "complexTypes": len(self.complex_types()),
            "elements": len(self.elements()),
            "groups": len(self.groups()),
            "attributeGroups": len(self.attribute_groups()),
            "attributes": len(self.attributes()),
            "notations": len(self.notations()),
            "annotations": len(self.annotations()),
            "includes": len(self.includes()),
            "imports": len(self.imports()),
            "redefines": len(self.redefines()),
            "overrides": len(self.overrides()),
            "defaultOpenContents": len(self.default_open_contents()),
        }
