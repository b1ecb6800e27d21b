"""
Construction of schema trees from XSD documents.

The document is loaded with an `xmlschema.XMLResource`, then its element tree
is walked once: each XSD element is built into the node class registered for
its tag, its attributes are parsed into the node fields and its element
children become the node body. Any deviation from the schema-for-schemas
grammar rejects the whole document.
"""

import copy
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union
from xml.etree import ElementTree

import xmlschema

from .basics import XSD_NAMESPACE
from .body import XSD_COMPONENTS, Body, SchemaNode, attribute_fields
from .config import Config
from .exceptions import GrammarError, SchemaReadError
from .logger import XSDLogger, create_logger
from .schema_model import Schema

SourceType = Union[str, bytes, Path, Any]

XSD_SCHEMA = f"{{{XSD_NAMESPACE}}}schema"


def local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def namespace_of(tag: str) -> str:
    return tag[1:].partition("}")[0] if tag.startswith("{") else ""


def serialize_children(elem: ElementTree.Element) -> str:
    """Serialize the child elements of an element, without its own text and tail."""
    parts = []
    for child in elem:
        child = copy.copy(child)
        child.tail = None
        parts.append(ElementTree.tostring(child, encoding="unicode"))
    return "".join(parts)


class SchemaParser:
    """Builds schema trees from XSD documents."""

    def __init__(self, config: Optional[Config] = None, logger: Optional[XSDLogger] = None):
        self.config = config or Config()
        self.logger = logger or create_logger(
            level=self.config.logging.level,
            component="parser",
            destination=self.config.logging.destination,
        )
        self._source: Optional[str] = None
        self._nodes_built = 0

    def load(self, source: SourceType) -> xmlschema.XMLResource:
        """
        Load a schema document.

        :param source: a file path, an URL, a string or bytes with the XML \
        data, a file-like object or an ElementTree element.
        :raises SchemaReadError: if the source cannot be read or is not \
        well-formed XML.
        """
        if isinstance(source, Path):
            source = str(source)

        reader = self.config.reader
        try:
            resource = xmlschema.XMLResource(
                source, allow=reader.allow, defuse=reader.defuse, timeout=reader.timeout
            )
        except (xmlschema.XMLSchemaException, ElementTree.ParseError, OSError) as err:
            location = source if isinstance(source, str) and "<" not in source else None
            self.logger.error(
                "Cannot load schema document",
                sourceURI=location,
                error=str(err),
                errorType=type(err).__name__
            )
            raise SchemaReadError(f"cannot load the schema document: {err}", location) from err

        self.logger.schema_event("loaded", resource.url)
        return resource

    def parse(self, source: SourceType) -> Schema:
        """
        Build the tree of a schema document.

        :raises SchemaReadError: if the document cannot be loaded.
        :raises GrammarError: if the root is not an xs:schema element or the \
        document doesn't follow the XSD grammar.
        """
        resource = self.load(source)
        if resource.root.tag != XSD_SCHEMA:
            self._source = resource.url
            raise self._error(
                f"the root element {resource.root.tag!r} is not an xs:schema",
                path=f"/{local_name(resource.root.tag)}",
                tag=local_name(resource.root.tag),
            )
        return self._build_tree(resource)

    def build(self, source: SourceType) -> SchemaNode:
        """
        Build the tree of any XSD element, e.g. a simpleType fragment.

        :raises SchemaReadError: if the document cannot be loaded.
        :raises GrammarError: if the document doesn't follow the XSD grammar.
        """
        return self._build_tree(self.load(source))

    def _build_tree(self, resource: xmlschema.XMLResource) -> Any:
        self._source = resource.url
        self._nodes_built = 0
        root = resource.root
        tag = local_name(root.tag)
        path = f"/{tag}"

        if namespace_of(root.tag) != XSD_NAMESPACE or tag not in XSD_COMPONENTS:
            raise self._error(f"{root.tag!r} is not an XSD element", path=path, tag=tag)

        start_time = time.perf_counter()
        try:
            node = self._build_node(root, XSD_COMPONENTS[tag], path, depth=1)
        except RecursionError:
            raise self._error(
                "nesting depth exceeds the recursion limit of the interpreter",
                path=path, tag=tag,
            ) from None
        elapsed = time.perf_counter() - start_time

        self.logger.construction_progress(
            "Schema tree built", nodes_built=self._nodes_built, schema=self._source
        )
        self.logger.performance_metric("construction_time", round(elapsed, 6), "seconds")
        return node

    def _build_node(self, elem: ElementTree.Element, node_class: Type[SchemaNode],
                    path: str, depth: int) -> SchemaNode:
        if depth > self.config.max_recursion_depth:
            raise self._error(
                f"nesting depth exceeds the limit of {self.config.max_recursion_depth}",
                path=path,
                tag=node_class.tag,
            )

        values = self._parse_attributes(elem, node_class, path)
        if node_class.mixed_content:
            values["text"] = "".join(elem.itertext())
            values["markup"] = serialize_children(elem)
            body: List[SchemaNode] = []
        else:
            body = self._build_body(elem, node_class, path, depth)

        node = node_class(body=Body(body), **values)
        message = node.check()
        if message is not None:
            raise self._error(message, path=path, tag=node_class.tag)

        self._nodes_built += 1
        return node

    def _parse_attributes(self, elem: ElementTree.Element, node_class: Type[SchemaNode],
                          path: str) -> Dict[str, Any]:
        """Bind the attributes of an element to the fields of its node class."""
        bound = attribute_fields(node_class)
        values: Dict[str, Any] = {}
        other_attributes: Dict[str, str] = {}

        for name, value in elem.attrib.items():
            field = bound.get(name)
            if field is not None:
                try:
                    values[field.name] = field.metadata["parse"](value)
                except ValueError as err:
                    raise self._error(
                        f"invalid value for attribute {name!r}: {err}",
                        path=path, tag=node_class.tag, attribute=name,
                    ) from None
            elif not name.startswith("{"):
                raise self._error(
                    f"attribute {name!r} is not allowed on {node_class.tag!r}",
                    path=path, tag=node_class.tag, attribute=name,
                )
            elif namespace_of(name) == XSD_NAMESPACE:
                raise self._error(
                    f"attribute {name!r} in the XSD namespace is not allowed",
                    path=path, tag=node_class.tag, attribute=name,
                )
            else:
                other_attributes[name] = value

        for name, field in bound.items():
            if field.metadata["required"] and field.name not in values:
                raise self._error(
                    f"missing required attribute {name!r}",
                    path=path, tag=node_class.tag, attribute=name,
                )

        values["other_attributes"] = other_attributes
        return values

    def _build_body(self, elem: ElementTree.Element, node_class: Type[SchemaNode],
                    path: str, depth: int) -> List[SchemaNode]:
        self._check_text(elem.text, node_class.tag, path)

        body = []
        counters: Dict[str, int] = {}
        for child in elem:
            if isinstance(child.tag, str):
                tag = local_name(child.tag)
                counters[tag] = counters.get(tag, 0) + 1
                child_path = f"{path}/{tag}[{counters[tag]}]"

                if namespace_of(child.tag) != XSD_NAMESPACE:
                    raise self._error(
                        f"element {child.tag!r} is not in the XSD namespace",
                        path=child_path, tag=tag,
                    )
                elif tag not in node_class.children:
                    raise self._error(
                        f"element {tag!r} is not allowed in {node_class.tag!r}",
                        path=child_path, tag=tag,
                    )
                body.append(self._build_node(child, XSD_COMPONENTS[tag], child_path, depth + 1))

            # Comments and processing instructions are skipped, not their tails
            self._check_text(child.tail, node_class.tag, path)

        return body

    def _check_text(self, text: Optional[str], tag: str, path: str) -> None:
        if text and not text.isspace():
            raise self._error(
                f"character data {text.strip()[:40]!r} is not allowed in {tag!r}",
                path=path, tag=tag,
            )

    def _error(self, message: str, path: Optional[str] = None, tag: Optional[str] = None,
               attribute: Optional[str] = None) -> GrammarError:
        """Log a grammar violation and create the error to raise."""
        self.logger.grammar_violation(
            message, path=path, tag=tag, attribute=attribute, sourceURI=self._source
        )
        return GrammarError(message, path=path, tag=tag, attribute=attribute, source=self._source)


def parse_schema(source: SourceType, config: Optional[Config] = None) -> Schema:
    """Build the tree of a schema document with a new parser."""
    return SchemaParser(config).parse(source)
