"""
Bodies of the schema nodes and the query primitives over them.

Every container node keeps its children in a `Body`: an immutable, ordered
list of typed child nodes. The variant kind of a child is the XSD tag it was
built from, and each node class declares the closed set of kinds it accepts.
The grammar's cardinality rules are not enforced when a body is built, they
are applied by the extraction functions when the body is read.
"""

from collections import abc
from dataclasses import Field, dataclass, field, fields
from functools import lru_cache
from types import MappingProxyType
from typing import (
    Any, Callable, ClassVar, Dict, FrozenSet, Iterable, Iterator, List, Mapping,
    NamedTuple, Optional, Tuple, Type, Union
)

from .basics import ID, parse_token

Kinds = Union[str, Iterable[str]]

XSD_COMPONENTS: Dict[str, Type["SchemaNode"]] = {}
"Map from XSD tag (local name) to the node class built from it"


def xsd_attribute(name: str, parse: Callable[[str], Any] = parse_token,
                  required: bool = False) -> Any:
    """Declare a node field bound to an XSD attribute."""
    metadata = {"xsd_attribute": name, "parse": parse, "required": required}
    if required:
        return field(metadata=metadata)
    return field(default=None, metadata=metadata)


@lru_cache(maxsize=None)
def attribute_fields(node_class: Type["SchemaNode"]) -> Dict[str, Field]:
    """Get the fields of a node class keyed by the XSD attribute they bind."""
    return {
        f.metadata["xsd_attribute"]: f
        for f in fields(node_class)
        if "xsd_attribute" in f.metadata
    }


class Body(abc.Sequence):
    """Ordered, immutable list of the child nodes of a schema node."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable["SchemaNode"] = ()):
        self._items: Tuple["SchemaNode", ...] = tuple(items)

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator["SchemaNode"]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Body):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Body({list(self._items)!r})"

    @property
    def tags(self) -> List[str]:
        """Kinds of the children, in body order."""
        return [item.tag for item in self._items]

    def count_of(self, kind: Kinds) -> int:
        """Number of children of the given kind(s)."""
        return len(extract_all(self, kind))


def _as_kinds(kind: Kinds) -> FrozenSet[str]:
    if isinstance(kind, str):
        return frozenset((kind,))
    return frozenset(kind)


def extract_all(body: Iterable["SchemaNode"], kind: Kinds) -> List[Any]:
    """
    Get every child of the given kind, in body order.

    `kind` is a tag or a collection of tags. An empty list is returned when
    there are no matches.
    """
    kinds = _as_kinds(kind)
    return [item for item in body if item.tag in kinds]


def extract_singleton(body: Iterable["SchemaNode"], kind: Kinds) -> Optional[Any]:
    """
    Get the only child of the given kind.

    When `kind` is a collection of tags the kinds are taken as one mutually
    exclusive group. Returns `None` if there are no matches and also if there
    is more than one: an ambiguous child is reported as absent. Use
    `find_ambiguities` to tell the two cases apart.
    """
    matches = extract_all(body, kind)
    if len(matches) == 1:
        return matches[0]
    return None


def extract_first(body: Iterable["SchemaNode"], kind: Kinds) -> Optional[Any]:
    """Get the first child of the given kind(s), `None` if there is none."""
    kinds = _as_kinds(kind)
    for item in body:
        if item.tag in kinds:
            return item
    return None


@dataclass(frozen=True, kw_only=True)
class SchemaNode:
    """
    Base class of the nodes of a schema tree.

    Subclasses declare the XSD tag they are built from, the kinds of children
    allowed in their body and the groups of kinds the grammar allows at most
    one of. Each dataclass field declared with `xsd_attribute` is bound to an
    XSD attribute. Attributes in foreign namespaces are kept apart in the
    read-only mapping `other_attributes`.
    """
    tag: ClassVar[str] = ""
    children: ClassVar[FrozenSet[str]] = frozenset()
    exclusive: ClassVar[Tuple[FrozenSet[str], ...]] = ()
    mixed_content: ClassVar[bool] = False

    other_attributes: Mapping[str, str] = field(default_factory=dict, hash=False)
    body: Body = field(default_factory=Body)

    def __post_init__(self) -> None:
        object.__setattr__(self, "other_attributes", MappingProxyType(dict(self.other_attributes)))

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "tag" in cls.__dict__ and cls.tag:
            XSD_COMPONENTS[cls.tag] = cls

    def check(self) -> Optional[str]:
        """Check co-occurrence constraints on attributes, returns an error message or `None`."""
        return None


@dataclass(frozen=True, kw_only=True)
class Annotated(SchemaNode):
    """Base class for the nodes that have an id and an optional annotation."""
    exclusive = (frozenset({"annotation"}),)

    id: Optional[ID] = xsd_attribute("id")

    def annotation(self) -> Optional[Any]:
        """Get the annotation of the node."""
        return extract_singleton(self.body, "annotation")


class Ambiguity(NamedTuple):
    """A body holding more than one child of a group the grammar restricts to one."""
    path: str
    kinds: Tuple[str, ...]
    found: Tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"{self.path}: at most one of {', '.join(self.kinds)} is allowed, "
            f"found {', '.join(self.found)}"
        )


def iter_nodes(node: SchemaNode, path: Optional[str] = None) -> Iterator[Tuple[str, SchemaNode]]:
    """Iterate over a node and all its descendants, depth-first, with their paths."""
    if path is None:
        path = f"/{node.tag}"
    yield path, node

    counters: Dict[str, int] = {}
    for child in node.body:
        counters[child.tag] = counters.get(child.tag, 0) + 1
        yield from iter_nodes(child, f"{path}/{child.tag}[{counters[child.tag]}]")


def find_ambiguities(node: SchemaNode) -> List[Ambiguity]:
    """Find every body in the tree that breaks one of its exclusive groups."""
    ambiguities = []
    for path, item in iter_nodes(node):
        for group in item.exclusive:
            found = tuple(child.tag for child in item.body if child.tag in group)
            if len(found) > 1:
                ambiguities.append(Ambiguity(path, tuple(sorted(group)), found))
    return ambiguities
