"""
Command-line interface for the XSLT generation system.

Reads a mapping set (JSON or YAML), generates a stylesheet for the requested
output format and writes it to a file or stdout.

Exit codes:
    0  stylesheet generated (and valid, when validation ran)
    1  unsupported format, configuration error or generation failure
    2  stylesheet generated but rejected by the output validator (still written)
"""

import sys
import argparse
import logging

from pathlib import Path
from typing import Optional

from .compiler import XsltCompiler
from .config.config_manager import get_config_manager
from .config.generation_defaults import GenerationDefaults
from .exceptions import ConfigurationError, GenerationError, UnsupportedFormatError

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_OUTPUT = 2


def build_parser(default_format: str = GenerationDefaults.DEFAULT_FORMAT,
                 default_log_level: str = GenerationDefaults.LOG_LEVEL) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xslt_generator",
        description="Generate an XSLT stylesheet from a field mapping file"
    )
    parser.add_argument("mapping_file", help="Mapping set file (.json, .yaml or .yml)")
    parser.add_argument("--format", dest="output_format", default=default_format,
                        help=f"Output format: xml, json, flat or csv (default: {default_format})")
    parser.add_argument("--namespaces", help="Namespace table file mapping prefixes to URIs")
    parser.add_argument("--delimiter", help="Column delimiter for flat output (default: ',')")
    parser.add_argument("--output", "-o", help="Write the stylesheet here instead of stdout")
    parser.add_argument("--no-validate", action="store_true",
                        help="Skip the well-formedness check of the generated stylesheet")
    parser.add_argument("--log-level", default=default_log_level,
                        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
                        type=str.upper,
                        help=f"Logging level (default: {default_log_level})")
    return parser


def _configure_logging(level: str) -> None:
    # Set up logging without reconfiguring root if already configured
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level, logging.WARNING))


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        args: Optional command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if args is None:
        args = sys.argv[1:]

    config_manager = get_config_manager()
    settings = config_manager.settings
    parsed = build_parser(settings.default_format, settings.log_level).parse_args(args)

    _configure_logging(parsed.log_level)
    logger = logging.getLogger(__name__)

    try:
        mapping_set = config_manager.load_mapping_set(parsed.mapping_file)
        namespaces = config_manager.load_namespaces(parsed.namespaces) if parsed.namespaces else None
        options = config_manager.get_generation_options(namespaces=namespaces, delimiter=parsed.delimiter)

        compiler = XsltCompiler(settings=settings)
        result = compiler.compile(
            parsed.output_format,
            mapping_set,
            options=options,
            validate=not parsed.no_validate and settings.validate_output,
        )
    except (UnsupportedFormatError, ConfigurationError, GenerationError) as e:
        logger.error(f"ERROR: {e}")
        return EXIT_FAILURE

    if parsed.output:
        Path(parsed.output).write_text(result.stylesheet, encoding='utf-8')
        logger.info(f"Stylesheet written to {parsed.output}")
    else:
        sys.stdout.write(result.stylesheet)

    if result.rejected_count:
        logger.warning(f"{result.rejected_count} mapping(s) skipped as malformed")
    for warning in result.warnings:
        logger.info(f"Warning: {warning}")

    if not result.is_valid:
        logger.error(f"Generated stylesheet failed validation: {result.validation.error}")
        return EXIT_INVALID_OUTPUT

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
