"""Configuration management for the schema tree builder."""

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .logger import LogLevel

ALLOW_MODES = frozenset(("all", "remote", "local", "sandbox", "none"))
DEFUSE_MODES = frozenset(("always", "remote", "nonlocal", "never"))

# Each nesting level takes two frames of the tree builder
MAX_RECURSION_DEPTH = sys.getrecursionlimit() // 4


class OutputFormat(str, Enum):
    """Output format options."""
    SUMMARY = "summary"  # declaration counts of the schema root
    DUMP = "dump"        # the whole tree


@dataclass
class ReaderConfig:
    """Options of the XML resource loading the schema document."""
    allow: str = "all"       # "all" | "remote" | "local" | "sandbox" | "none"
    defuse: str = "remote"   # "always" | "remote" | "nonlocal" | "never"
    timeout: int = 300


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: LogLevel = LogLevel.WARN
    destination: str = "stderr"


@dataclass
class SerializerConfig:
    """Output serialization configuration."""
    pretty: bool = True


@dataclass
class Config:
    """Main configuration of the schema tree builder."""

    # Input/Output
    input_file: Optional[Path] = None
    output_format: OutputFormat = OutputFormat.SUMMARY

    # Tree construction
    diagnose: bool = False
    max_recursion_depth: int = 100
    reader: ReaderConfig = field(default_factory=ReaderConfig)

    # System Configuration
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)

    def validate(self) -> List[str]:
        """Validate configuration and return any errors."""
        errors = []

        if self.input_file and not self.input_file.exists():
            errors.append(f"Input file does not exist: {self.input_file}")

        if self.input_file and self.input_file.suffix.lower() not in {'.xsd', '.xml'}:
            errors.append(f"Input file must have .xsd or .xml extension: {self.input_file}")

        if self.max_recursion_depth < 1:
            errors.append("max_recursion_depth must be at least 1")
        elif self.max_recursion_depth > MAX_RECURSION_DEPTH:
            errors.append(f"max_recursion_depth must be at most {MAX_RECURSION_DEPTH}")

        if self.reader.allow not in ALLOW_MODES:
            errors.append(f"reader allow must be one of {sorted(ALLOW_MODES)}: {self.reader.allow!r}")

        if self.reader.defuse not in DEFUSE_MODES:
            errors.append(f"reader defuse must be one of {sorted(DEFUSE_MODES)}: {self.reader.defuse!r}")

        if self.reader.timeout < 1:
            errors.append("reader timeout must be a positive number of seconds")

        return errors

    @classmethod
    def from_cli_args(cls, **kwargs) -> "Config":
        """Create config from CLI arguments."""
        config = cls()

        for key, value in kwargs.items():
            if hasattr(config, key) and value is not None:
                setattr(config, key, value)

        if isinstance(config.input_file, str):
            config.input_file = Path(config.input_file)

        if kwargs.get("output_format") is not None:
            config.output_format = OutputFormat(kwargs["output_format"])

        if kwargs.get("max_depth") is not None:
            config.max_recursion_depth = kwargs["max_depth"]

        if kwargs.get("pretty") is not None:
            config.serializer.pretty = kwargs["pretty"]

        if kwargs.get("log_level") is not None:
            config.logging.level = LogLevel(kwargs["log_level"])

        return config
