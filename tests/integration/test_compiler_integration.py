"""
Integration tests for the compiler facade.

These run the whole pipeline (boundary parsing, normalization, pre-flight
checks, hierarchy completion, emission and output validation) and execute the
generated XSLT 1.0 stylesheets with lxml against the sample employee document.
"""

import json
import unittest
from unittest.mock import MagicMock

import pytest
from lxml import etree

from tests.helpers import SAMPLES_DIR, XSL_NS, flat_header_and_separators
from xslt_generator import (
    CompilationResult,
    GenerationError,
    InvalidXPathError,
    MappingSet,
    OutputFormat,
    UnsupportedFormatError,
    XsltCompiler,
    generate_xslt,
)
from xslt_generator.config import GeneratorSettings
from xslt_generator.validation import MappingSetValidationError, MappingSetValidationWarning

pytestmark = pytest.mark.integration

FLAT_EMPLOYEES = {
    "rootPath": "/Company/Employee",
    "recordPath": "Employee",
    "fields": [
        {"sourcePath": "Company/Employee/Name", "targetName": "Name"},
        {"sourcePath": "Company/Employee/@id", "targetName": "empId"},
        {"sourcePath": "Company/Employee/Salary", "targetName": "Salary", "fieldType": "decimal"},
        {"sourcePath": "Company/Employee/Phone", "targetName": "Phone", "occurs": 2},
    ],
}

DATE_TIME_COLUMN = r"^E\d,\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$"


def _load_sample(name):
    with open(SAMPLES_DIR / name, encoding="utf-8") as file:
        return json.load(file)


def _run(stylesheet):
    transform = etree.XSLT(etree.fromstring(stylesheet.encode("utf-8")))
    return transform(etree.parse(str(SAMPLES_DIR / "employees.xml")))


class TestCompilerFacade(unittest.TestCase):

    def setUp(self):
        self.compiler = XsltCompiler(GeneratorSettings())

    def test_unsupported_format_fails_before_emitting(self):
        for emitter in self.compiler.emitters.values():
            emitter.emit = MagicMock(side_effect=AssertionError("emitter should not run"))

        with self.assertRaises(UnsupportedFormatError) as context:
            self.compiler.compile("yaml", {"fields": [{"sourcePath": "//a", "targetName": "a"}]})
        self.assertEqual(context.exception.output_format, "yaml")
        self.assertEqual(str(context.exception), "Unsupported output format: yaml")

    def test_format_names_are_case_insensitive(self):
        mapping = {"fields": [{"sourcePath": "//a", "targetName": "a"}]}

        self.assertEqual(self.compiler.compile("XML", mapping).output_format, OutputFormat.XML)
        self.assertEqual(self.compiler.compile("Json", mapping).output_format, OutputFormat.JSON)
        self.assertEqual(self.compiler.compile("csv", mapping).output_format, OutputFormat.FLAT)
        self.assertEqual(self.compiler.compile(OutputFormat.FLAT, mapping).output_format, OutputFormat.FLAT)

    def test_generation_is_deterministic(self):
        mapping = _load_sample("employee_mapping.json")

        for fmt in ("xml", "json", "flat"):
            first = self.compiler.compile(fmt, mapping).stylesheet
            second = self.compiler.compile(fmt, mapping).stylesheet
            self.assertEqual(first, second, fmt)

    def test_input_mapping_set_is_not_modified(self):
        mapping_set = MappingSet.from_dict({"fields": [{"sourcePath": "orders.xml/Order.Id", "targetName": "Id"}]})

        self.compiler.compile("xml", mapping_set)

        self.assertIsNone(mapping_set.xslt_version)
        self.assertEqual(mapping_set.fields[0].source_path, "orders.xml/Order.Id")

    def test_rejected_rows_are_reported_and_skipped(self):
        logger = MagicMock()
        compiler = XsltCompiler(GeneratorSettings(), logger=logger)

        result = compiler.compile("xml", {"fields": [
            {"sourcePath": "//Order/Id", "targetName": "Id"},
            {"sourcePath": "//Order/Ghost"},
            {"targetName": "Phantom"},
        ]})

        self.assertIsInstance(result, CompilationResult)
        self.assertEqual(result.rejected_count, 2)
        self.assertEqual([r.field_index for r in result.rejected_mappings], [1, 2])
        self.assertNotIn("Ghost", result.stylesheet)
        self.assertNotIn("Phantom", result.stylesheet)
        warned = [call.args[0] for call in logger.warning.call_args_list]
        self.assertIn("Mapping 1 skipped: targetName cannot be empty", warned)

    def test_malformed_variables_and_root_attributes_are_rejected(self):
        result = self.compiler.compile("xml", {
            "rootElement": {"name": "Staff", "attributes": [{"name": "lang"}]},
            "variables": [{"name": "V"}, {"name": "Lang", "value": "en-US"}],
            "fields": [{"sourcePath": "//Order/Id", "targetName": "Id"}],
        })

        self.assertEqual(result.rejected_count, 2)
        self.assertEqual(sorted(r.section for r in result.rejected_mappings), ["rootElement", "variables"])
        self.assertIn("<xsl:variable name=\"Lang\" select=\"'en-US'\"/>", result.stylesheet)
        self.assertNotIn('name="V"', result.stylesheet)
        self.assertIn("    <Staff>", result.stylesheet)
        self.assertTrue(result.is_valid)

    def test_unreadable_mapping_set_stays_in_error_taxonomy(self):
        for raw in (["not", "a", "set"], {"fields": 7}):
            with self.assertRaises(GenerationError) as context:
                self.compiler.compile("xml", raw)
            self.assertIsInstance(context.exception.__cause__, (ValueError, TypeError))

    def test_invalid_xpath_is_a_warning(self):
        result = self.compiler.compile("xml", {"fields": [
            {"sourcePath": "Order[1/Id", "targetName": "Id"},
        ]})

        issues = [w for w in result.warnings if isinstance(w, InvalidXPathError)]
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].xpath, "Order[1/Id")
        self.assertEqual(issues[0].normalized, "//Order[1/Id")
        self.assertIn('select="//Order[1/Id"', result.stylesheet)

    def test_malformed_for_each_path_is_reported_once(self):
        result = self.compiler.compile("xml", {"fields": [
            {"sourcePath": "//a/b", "targetName": "b", "forEachPath": "//a[b"},
        ]})

        self.assertEqual(len(result.warnings), 1)
        self.assertIsInstance(result.warnings[0], InvalidXPathError)
        self.assertEqual(result.warnings[0].xpath, "//a[b")

    def test_preflight_findings_are_warnings(self):
        result = self.compiler.compile("xml", {
            "variables": [{"name": "Lang", "value": "en"}, {"name": "Lang", "value": "fr"}],
            "fields": [
                {"sourcePath": "//a", "targetName": "a", "attributes": [
                    {"name": "x", "value": "Nope", "isVariable": True}]},
            ],
        })

        self.assertTrue(any(isinstance(w, MappingSetValidationError) for w in result.warnings))
        self.assertTrue(any(isinstance(w, MappingSetValidationWarning) for w in result.warnings))
        self.assertIn('<a x="{$Nope}">', result.stylesheet)

    def test_emitter_failure_is_chained(self):
        failure = RuntimeError("boom")
        self.compiler.emitters[OutputFormat.JSON].emit = MagicMock(side_effect=failure)

        with self.assertRaises(GenerationError) as context:
            self.compiler.compile("json", {"fields": [{"sourcePath": "//a", "targetName": "a"}]})

        self.assertIs(context.exception.__cause__, failure)
        self.assertEqual(context.exception.output_format, "json")
        self.assertEqual(str(context.exception), "Failed to generate json stylesheet: boom")

    def test_every_format_passes_output_validation(self):
        mapping = _load_sample("employee_mapping.json")
        namespaces = {"hr": "urn:example:hr", "default": "urn:example:company"}

        for fmt in OutputFormat:
            result = self.compiler.compile(fmt, mapping, namespaces=namespaces)
            self.assertTrue(result.is_valid, result.validation)
            self.assertEqual(result.validation.to_dict(), {"valid": True, "error": None})

    def test_validation_can_be_skipped(self):
        mapping = {"fields": [{"sourcePath": "//a", "targetName": "a"}]}

        self.assertIsNone(self.compiler.compile("xml", mapping, validate=False).validation)
        quiet = XsltCompiler(GeneratorSettings(validate_output=False))
        self.assertIsNone(quiet.compile("xml", mapping).validation)
        self.assertIsNotNone(quiet.compile("xml", mapping, validate=True).validation)

    def test_xslt_version_resolution(self):
        mapping = {"fields": [{"sourcePath": "//a", "targetName": "a"}]}
        compiler = XsltCompiler(GeneratorSettings(xslt_version="2.0"))

        self.assertIn('<xsl:stylesheet version="2.0"', compiler.compile("xml", mapping).stylesheet)
        own_version = dict(mapping, xsltVersion="1.0")
        self.assertIn('<xsl:stylesheet version="1.0"', compiler.compile("flat", own_version).stylesheet)
        self.assertIn('<xsl:stylesheet version="3.0"', compiler.compile("json", mapping).stylesheet)

    def test_option_sources(self):
        mapping = {"fields": [{"sourcePath": "//a", "targetName": "a"}, {"sourcePath": "//b", "targetName": "b"}]}

        from_settings = XsltCompiler(GeneratorSettings(delimiter=";")).compile("flat", mapping)
        self.assertIn("<xsl:text>a;b&#10;</xsl:text>", from_settings.stylesheet)

        from_dict = self.compiler.compile("flat", mapping, options={"delimiter": "\t"})
        self.assertIn("<xsl:text>a\tb&#10;</xsl:text>", from_dict.stylesheet)

        keyword_wins = self.compiler.compile("flat", mapping, delimiter="|", options={"delimiter": "\t"})
        self.assertIn("<xsl:text>a|b&#10;</xsl:text>", keyword_wins.stylesheet)

        namespaces = self.compiler.compile("xml", mapping, namespaces={"x": "urn:x"},
                                           options={"namespaces": {"y": "urn:y"}})
        self.assertIn('xmlns:x="urn:x"', namespaces.stylesheet)
        self.assertNotIn('xmlns:y', namespaces.stylesheet)

    def test_generate_returns_text_only(self):
        stylesheet = self.compiler.generate("json", {"fields": [{"sourcePath": "//a", "targetName": "a"}]})

        self.assertIsInstance(stylesheet, str)
        self.assertIn("<xsl:map>", stylesheet)


class TestGeneratedStylesheetsRun(unittest.TestCase):
    """Execute XSLT 1.0 output with lxml."""

    def setUp(self):
        self.compiler = XsltCompiler(GeneratorSettings())

    def test_xml_output(self):
        result = self.compiler.compile("xml", _load_sample("employee_mapping.json"))
        output = _run(result.stylesheet).getroot()

        self.assertEqual(output.tag, "Staff")
        self.assertEqual(output.get("lang"), "en-US")
        self.assertEqual(output.get("source"), "HR")
        employees = output.findall("Employees/Employee")
        self.assertEqual([e.get("id") for e in employees], ["E1", "E2"])
        self.assertEqual([e.findtext("Name") for e in employees], ["Ann Lee", "Bo Chan"])
        self.assertEqual([e.findtext("Salary") for e in employees], ["1200.50", "980.00"])
        self.assertEqual([e.findtext("Department") for e in employees], ["Sales", ""])
        self.assertEqual([e.findtext("Status") for e in employees], ["active", "active"])

    def test_xml_output_with_occurs(self):
        result = self.compiler.compile("xml", {
            "rootElement": {"name": "Staff"},
            "fields": [
                {"sourcePath": "//Company/Employee", "targetName": "Employee", "fieldType": "component",
                 "forEachPath": "//Company/Employee"},
                {"sourcePath": "Company/Employee/@id", "targetName": "empId", "targetPath": "Employee/empId"},
                {"sourcePath": "Company/Employee/Phone", "targetName": "Phone", "targetPath": "Employee/Phone",
                 "occurs": 2},
            ],
        })
        employees = _run(result.stylesheet).getroot().findall("Employee")

        self.assertEqual([e.findtext("empId") for e in employees], ["E1", "E2"])
        self.assertEqual([p.text for p in employees[0].findall("Phone")], ["555-0100", "555-0101"])
        self.assertEqual([p.text for p in employees[1].findall("Phone")], ["555-0200"])

    def test_flat_output(self):
        result = self.compiler.compile("csv", FLAT_EMPLOYEES)

        self.assertEqual(str(_run(result.stylesheet)), (
            "Name,empId,Salary,Phone_1,Phone_2\n"
            "Ann Lee,E1,1200.50,555-0100,555-0101\n"
            "Bo Chan,E2,980.00,555-0200,\n"
        ))

    def test_flat_column_parity(self):
        result = self.compiler.compile("flat", FLAT_EMPLOYEES, delimiter="|")

        columns, separators = flat_header_and_separators(result.stylesheet, "|")
        self.assertEqual(separators, len(columns))
        for line in str(_run(result.stylesheet)).splitlines():
            self.assertEqual(line.count("|") + 1, len(columns))

    def test_flat_missing_date_falls_back_to_current_date_time(self):
        result = self.compiler.compile("flat", {
            "rootPath": "/Company/Employee",
            "recordPath": "Employee",
            "fields": [
                {"sourcePath": "Company/Employee/@id", "targetName": "empId"},
                {"sourcePath": "Company/Employee/Hired", "targetName": "Hired", "fieldType": "dateTime"},
            ],
        })

        lines = str(_run(result.stylesheet)).splitlines()
        self.assertEqual(lines[0], "empId,Hired")
        self.assertEqual(len(lines), 3)
        for line in lines[1:]:
            self.assertRegex(line, DATE_TIME_COLUMN)

    def test_xml_missing_date_falls_back_to_current_date_time(self):
        result = self.compiler.compile("xml", {
            "rootElement": {"name": "Staff"},
            "fields": [{"sourcePath": "//Company/Nope", "targetName": "Created", "fieldType": "date"}],
        })

        self.assertIn('xmlns:date="http://exslt.org/dates-and-times"', result.stylesheet)
        created = _run(result.stylesheet).getroot().findtext("Created")
        self.assertRegex(created, r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")

    def test_json_has_one_top_level_map(self):
        result = self.compiler.compile("json", _load_sample("employee_mapping.json"))

        template = etree.fromstring(result.stylesheet.encode("utf-8")).find(f"{{{XSL_NS}}}template")
        children = [child for child in template if isinstance(child.tag, str)]
        self.assertEqual([child.tag for child in children], [f"{{{XSL_NS}}}map"])


def test_generate_xslt_helper():
    stylesheet = generate_xslt("flat", FLAT_EMPLOYEES, {"delimiter": ";"})

    assert "<xsl:text>Name;empId;Salary;Phone_1;Phone_2&#10;</xsl:text>" in stylesheet


def test_generate_xslt_reads_environment_settings(monkeypatch):
    monkeypatch.setenv("XSLT_GENERATOR_XSLT_VERSION", "2.0")
    monkeypatch.setenv("XSLT_GENERATOR_DELIMITER", "|")

    stylesheet = generate_xslt("flat", FLAT_EMPLOYEES)

    assert '<xsl:stylesheet version="2.0"' in stylesheet
    assert "<xsl:text>Name|empId|Salary|Phone_1|Phone_2&#10;</xsl:text>" in stylesheet


def test_generate_xslt_unsupported_format():
    with pytest.raises(UnsupportedFormatError):
        generate_xslt("yaml", FLAT_EMPLOYEES)
