"""Command-line interface of the schema tree builder."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import MAX_RECURSION_DEPTH, Config, LogLevel, OutputFormat
from .converter import Converter
from .logger import create_logger


def validate_input_file(ctx, param, value):
    """Validate input file exists and has correct extension."""
    if value is None:
        return None

    path = Path(value)
    if not path.exists():
        raise click.BadParameter(f"Input file does not exist: {value}")

    if path.suffix.lower() not in {'.xsd', '.xml'}:
        raise click.BadParameter(f"Input file must have .xsd or .xml extension: {value}")

    return path


@click.command()
@click.version_option(__version__)
@click.option(
    "--input", "-i",
    required=True,
    callback=validate_input_file,
    help="Path to the XSD schema document"
)
@click.option(
    "--format", "output_format",
    type=click.Choice([item.value for item in OutputFormat]),
    default=OutputFormat.SUMMARY.value,
    help="Output: declaration counts (summary) or the whole tree (dump)"
)
@click.option(
    "--log-level",
    type=click.Choice([item.value for item in LogLevel]),
    default=LogLevel.WARN.value,
    help="Logging level of the JSON log records written to stderr"
)
@click.option(
    "--diagnose",
    is_flag=True,
    help="Report the bodies with more than one child of an exclusive group"
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1, max=MAX_RECURSION_DEPTH),
    default=None,
    help="Maximum nesting depth of the schema elements"
)
@click.option(
    "--pretty/--compact",
    default=True,
    help="Pretty-print JSON output (default: pretty)"
)
def main(
    input: Path,
    output_format: str,
    log_level: str,
    diagnose: bool,
    max_depth: int,
    pretty: bool,
) -> None:
    """Build the tree of an XSD schema document and print it as JSON.

    Examples:
        # Declaration counts of the schema
        xsdtree --input schema.xsd

        # Full tree, with the ambiguous bodies
        xsdtree --input schema.xsd --format dump --diagnose
    """
    config = Config.from_cli_args(
        input_file=input,
        output_format=output_format,
        log_level=log_level,
        diagnose=diagnose,
        max_depth=max_depth,
        pretty=pretty,
    )
    logger = create_logger(
        level=config.logging.level,
        component="cli",
        destination=config.logging.destination,
    )

    errors = config.validate()
    if errors:
        logger.error("Configuration validation failed", errors=errors)
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    logger.info(
        "Starting xsdtree",
        inputFile=str(config.input_file),
        outputFormat=config.output_format.value,
    )

    try:
        converter = Converter(config)
        result = converter.convert()

        if not result.success:
            logger.error("Conversion failed", errors=result.errors)
            click.echo("✗ Conversion failed:", err=True)
            for error in result.errors:
                click.echo(f"  {error}", err=True)
            sys.exit(1)

        if diagnose:
            for warning in result.warnings:
                click.echo(f"Warning: {warning}", err=True)

        click.echo(converter.to_json(result))
        logger.info("Conversion completed", processingTime=result.processing_time)

    except KeyboardInterrupt:
        logger.info("Conversion interrupted by user")
        click.echo("\nConversion interrupted by user", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
