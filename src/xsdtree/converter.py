"""Conversion of schema documents to JSON-ready summaries and tree dumps."""

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .basics import XML_LANG
from .body import Ambiguity, SchemaNode, attribute_fields, find_ambiguities, iter_nodes
from .config import Config, OutputFormat
from .exceptions import XsdTreeError
from .logger import create_logger
from .parser import SchemaParser, SourceType
from .schema_model import Schema


@dataclass
class ConversionResult:
    """Result of the conversion of a schema document."""
    success: bool
    schema: Optional[Schema] = None
    data: Dict[str, Any] = field(default_factory=dict)
    processing_time: float = 0.0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    statistics: Dict[str, int] = field(default_factory=dict)


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    elif isinstance(value, tuple):
        return [_json_value(item) for item in value]
    return value


def node_to_data(node: SchemaNode) -> Dict[str, Any]:
    """
    Dump a node and its descendants to JSON-ready dictionaries.

    Attributes are keyed by their XML names and absent attributes are left
    out. Children are listed in body order under the "children" key.
    """
    data: Dict[str, Any] = {"tag": node.tag}
    for name, attr_field in attribute_fields(type(node)).items():
        value = getattr(node, attr_field.name)
        if value is not None:
            data["xml:lang" if name == XML_LANG else name] = _json_value(value)

    if node.other_attributes:
        data["otherAttributes"] = dict(node.other_attributes)

    if node.mixed_content:
        data["text"] = node.text
        if node.markup:
            data["markup"] = node.markup
    elif node.body:
        data["children"] = [node_to_data(child) for child in node.body]

    return data


def ambiguity_to_data(ambiguity: Ambiguity) -> Dict[str, Any]:
    return {
        "path": ambiguity.path,
        "kinds": list(ambiguity.kinds),
        "found": list(ambiguity.found),
    }


class Converter:
    """Builds the tree of a schema document and renders it for output."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = create_logger(
            level=config.logging.level,
            component="converter",
            destination=config.logging.destination,
        )
        self.parser = SchemaParser(config)

        self.logger.debug(
            "Converter initialized",
            outputFormat=config.output_format.value,
            diagnose=config.diagnose,
        )

    def convert(self, source: Optional[SourceType] = None) -> ConversionResult:
        """
        Build the tree of a schema document and render it.

        :param source: the schema source, defaults to the configured input file.
        """
        start_time = time.perf_counter()
        if source is None:
            source = self.config.input_file
        if source is None:
            return ConversionResult(False, errors=["No schema source given"])

        location = str(source) if isinstance(source, Path) else None
        self.logger.info("Starting schema conversion", sourceURI=location)
        try:
            schema = self.parser.parse(source)
        except XsdTreeError as err:
            self.logger.error("Conversion failed", error=str(err), errorType=type(err).__name__)
            return ConversionResult(
                False,
                processing_time=time.perf_counter() - start_time,
                errors=[str(err)],
            )

        ambiguities = find_ambiguities(schema)
        for ambiguity in ambiguities:
            self.logger.ambiguity(str(ambiguity), path=ambiguity.path)

        statistics = schema.summary()
        statistics["nodes"] = sum(1 for _ in iter_nodes(schema))
        statistics["ambiguities"] = len(ambiguities)

        processing_time = time.perf_counter() - start_time
        self.logger.info("Conversion completed", processingTime=processing_time, **statistics)

        return ConversionResult(
            True,
            schema=schema,
            data=self._render(schema, ambiguities),
            processing_time=processing_time,
            warnings=[str(ambiguity) for ambiguity in ambiguities],
            statistics=statistics,
        )

    def _render(self, schema: Schema, ambiguities: List[Ambiguity]) -> Dict[str, Any]:
        if self.config.output_format == OutputFormat.DUMP:
            data = {"schema": node_to_data(schema)}
        else:
            data = {
                "targetNamespace": schema.target_namespace,
                "summary": schema.summary(),
            }

        if self.config.diagnose:
            data["ambiguities"] = [ambiguity_to_data(item) for item in ambiguities]
        return data

    def to_json(self, result: ConversionResult) -> str:
        """Serialize the data of a result, according to the serializer settings."""
        if self.config.serializer.pretty:
            return json.dumps(result.data, indent=2, ensure_ascii=False)
        return json.dumps(result.data, separators=(",", ":"), ensure_ascii=False)
