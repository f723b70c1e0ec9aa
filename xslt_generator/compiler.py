"""
Compiler facade: mapping set in, stylesheet text out.

Pipeline for one call:

    resolve format -> normalize paths -> pre-flight checks
        -> complete hierarchy -> emit -> (optional) validate output

Format resolution happens first so an unsupported format fails before any
work is done. Problems with individual mappings (rejected rows, invalid paths,
pre-flight findings) are reported, never raised. An emitter failure is raised
as GenerationError with the original exception chained.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Union

from .config.config_manager import GeneratorSettings
from .emitters import FlatEmitter, JsonEmitter, XmlEmitter
from .exceptions import GenerationError, UnsupportedFormatError
from .interfaces import StylesheetEmitterInterface
from .mapping import MappingNormalizer, complete_hierarchy
from .models import CompilationResult, GenerationOptions, MappingSet, OutputFormat
from .validation import MappingSetValidator, StylesheetValidator


class XsltCompiler:
    """
    Dispatches a mapping set to the emitter for the requested output format.

    Emitters and the output validator are stateless, so one compiler can be
    shared between threads; every compile() call builds its own intermediates.

    Usage:
        compiler = XsltCompiler()
        result = compiler.compile('xml', mapping_set, namespaces={'ns': 'urn:x'})
        if not result.is_valid:
            ...
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None,
                 logger: Optional[logging.Logger] = None):
        self.settings = settings or GeneratorSettings.from_environment()
        self.logger = logger or logging.getLogger(__name__)
        self.emitters: Dict[OutputFormat, StylesheetEmitterInterface] = {
            OutputFormat.XML: XmlEmitter(self.logger),
            OutputFormat.JSON: JsonEmitter(self.logger),
            OutputFormat.FLAT: FlatEmitter(self.logger),
        }
        self.validator = StylesheetValidator(self.logger)

    def compile(self, output_format: Union[str, OutputFormat],
                mapping_set: Union[MappingSet, Dict[str, Any]],
                namespaces: Optional[Dict[str, str]] = None,
                delimiter: Optional[str] = None,
                options: Optional[Union[GenerationOptions, Dict[str, Any]]] = None,
                validate: Optional[bool] = None) -> CompilationResult:
        """
        Generate a stylesheet and report everything that was skipped or looks wrong.

        Args:
            output_format: 'xml', 'json', 'flat' or 'csv' (case-insensitive)
            mapping_set: MappingSet, or the raw dict the mapping UI produces
            namespaces: Prefix -> URI table; overrides options.namespaces
            delimiter: Flat column delimiter; overrides options.delimiter
            options: Full GenerationOptions (or dict) when more than the above is needed
            validate: Run the output validator; defaults to settings.validate_output

        Returns:
            CompilationResult with the stylesheet, rejected rows, warnings and
            the validation result (None when validation was skipped)

        Raises:
            UnsupportedFormatError: If output_format has no emitter
            GenerationError: If mapping_set is not a mapping set at all, or the emitter fails
        """
        fmt = OutputFormat.resolve(output_format)
        if fmt is None:
            raise UnsupportedFormatError(output_format)

        if not isinstance(mapping_set, MappingSet):
            try:
                mapping_set = MappingSet.from_dict(mapping_set)
            except (ValueError, TypeError) as exc:
                raise GenerationError(
                    f"Cannot read mapping set for {fmt.value} stylesheet: {exc}", output_format=fmt.value
                ) from exc
        if not mapping_set.xslt_version:
            mapping_set = replace(mapping_set, xslt_version=self.settings.xslt_version)
        options = self._build_options(options, namespaces, delimiter)

        for rejected in mapping_set.rejected:
            self.logger.warning(rejected.message)

        normalizer = MappingNormalizer(self.logger)
        mappings = normalizer.normalize(mapping_set.fields)
        warnings = list(normalizer.issues)

        preflight = MappingSetValidator(mapping_set).validate()
        for issue in preflight.errors + preflight.warnings:
            self.logger.warning(f"Mapping set check: {issue}")
        warnings.extend(preflight.errors)
        warnings.extend(preflight.warnings)

        completed = complete_hierarchy(mappings)

        emitter = self.emitters[fmt]
        try:
            stylesheet = emitter.emit(mapping_set, completed, options)
        except Exception as exc:
            raise GenerationError(
                f"Failed to generate {fmt.value} stylesheet: {exc}", output_format=fmt.value
            ) from exc

        validation = None
        if self.settings.validate_output if validate is None else validate:
            validation = self.validator.validate(stylesheet)

        self.logger.info(
            f"Generated {fmt.value} stylesheet: {len(mapping_set.fields)} fields, "
            f"{len(mapping_set.rejected)} rejected, {len(warnings)} warnings"
        )
        return CompilationResult(
            stylesheet=stylesheet,
            output_format=fmt,
            rejected_mappings=list(mapping_set.rejected),
            warnings=warnings,
            validation=validation,
        )

    def generate(self, output_format: Union[str, OutputFormat],
                 mapping_set: Union[MappingSet, Dict[str, Any]],
                 options: Optional[Union[GenerationOptions, Dict[str, Any]]] = None) -> str:
        """
        Generate stylesheet text only, without running the output validator.

        Raises:
            UnsupportedFormatError: If output_format has no emitter
            GenerationError: If the emitter fails
        """
        return self.compile(output_format, mapping_set, options=options, validate=False).stylesheet

    def _build_options(self, options, namespaces, delimiter) -> GenerationOptions:
        if options is None:
            options = GenerationOptions(
                delimiter=self.settings.delimiter,
                json_typed_values=self.settings.json_typed_values,
            )
        elif isinstance(options, dict):
            options = GenerationOptions.from_dict(options)

        return GenerationOptions(
            namespaces=dict(namespaces if namespaces is not None else options.namespaces),
            delimiter=delimiter or options.delimiter,
            json_typed_values=options.json_typed_values,
        )


def generate_xslt(output_format: Union[str, OutputFormat],
                  mapping_set: Union[MappingSet, Dict[str, Any]],
                  options: Optional[Union[GenerationOptions, Dict[str, Any]]] = None) -> str:
    """
    Generate stylesheet text with a default compiler.

    Args:
        output_format: 'xml', 'json', 'flat' or 'csv'
        mapping_set: MappingSet or raw mapping dict
        options: Namespaces, delimiter (Flat) and JSON value typing

    Returns:
        Stylesheet text

    Raises:
        UnsupportedFormatError: If output_format is not supported
    """
    return XsltCompiler().generate(output_format, mapping_set, options)
