"""xsdtree: typed, immutable syntax trees of XSD schema documents with a query layer."""

__version__ = "0.1.0"

from .body import Body, SchemaNode, extract_all, extract_first, extract_singleton, find_ambiguities
from .config import Config
from .converter import Converter
from .exceptions import GrammarError, MissingContentError, SchemaReadError, XsdTreeError
from .facets import Facet, FacetKind
from .parser import SchemaParser, parse_schema
from .particles import Occurrence, Particle
from .schema_model import Schema

__all__ = [
    "Body", "SchemaNode", "extract_all", "extract_first", "extract_singleton",
    "find_ambiguities", "Config", "Converter", "GrammarError", "MissingContentError",
    "SchemaReadError", "XsdTreeError", "Facet", "FacetKind", "SchemaParser",
    "parse_schema", "Occurrence", "Particle", "Schema",
]
