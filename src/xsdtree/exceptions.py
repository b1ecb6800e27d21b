"""Exceptions raised while building and querying schema trees."""

from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .body import SchemaNode


class XsdTreeError(Exception):
    """Base class of the package errors."""


class SchemaReadError(XsdTreeError, OSError):
    """The schema source cannot be loaded or is not well-formed XML."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} (source: {self.source})"
        return self.message


class GrammarError(XsdTreeError, ValueError):
    """
    An XSD element violates the schema-for-schemas grammar.

    :param message: the error message.
    :param path: path of the offending element, e.g. '/schema/complexType[2]'.
    :param tag: local name of the offending element.
    :param attribute: name of the offending attribute, if any.
    :param source: URL of the schema document, `None` for in-memory sources.
    """

    def __init__(self, message: str,
                 path: Optional[str] = None,
                 tag: Optional[str] = None,
                 attribute: Optional[str] = None,
                 source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.tag = tag
        self.attribute = attribute
        self.source = source

    def __str__(self) -> str:
        details = []
        if self.path:
            details.append(f"path: {self.path}")
        if self.source:
            details.append(f"source: {self.source}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class MissingContentError(XsdTreeError, ValueError):
    """A node has none of the content kinds its grammar requires one of."""

    def __init__(self, node: "SchemaNode", kinds: Tuple[str, ...]):
        self.node = node
        self.kinds = kinds
        super().__init__(
            f"{node.tag!r} has no valid content ({', '.join(kinds)})"
        )
