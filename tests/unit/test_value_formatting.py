"""
Unit tests for the field-type value formatting shared by the emitters.
"""

import unittest

from xslt_generator.emitters.value_formatting import (
    DATETIME_FALLBACK,
    EXSLT_DATES_NAMESPACE,
    EXSLT_DATETIME_FALLBACK,
    choose,
    flat_value_lines,
    format_number,
    json_typed_value_lines,
    with_date_namespace,
    xml_value_lines,
)
from xslt_generator.models import FieldType, Mapping


class TestXmlValueLines(unittest.TestCase):

    def test_string_is_plain_value_of(self):
        self.assertEqual(xml_value_lines(FieldType.STRING, "Name"), ['<xsl:value-of select="Name"/>'])

    def test_decimal_and_numeric_use_two_decimals(self):
        for field_type in (FieldType.DECIMAL, FieldType.NUMERIC):
            self.assertEqual(xml_value_lines(field_type, "Salary"),
                             ['<xsl:value-of select="format-number(Salary, \'0.00\')"/>'])

    def test_currency_adds_currency_attribute(self):
        lines = xml_value_lines(FieldType.CURRENCY, "Total")

        self.assertEqual(lines[0], '<xsl:attribute name="currencyID">USD</xsl:attribute>')
        self.assertIn("format-number(Total, '0.00')", lines[1])

    def test_dates_fall_back_to_current_date_time(self):
        for field_type in (FieldType.DATE, FieldType.DATETIME):
            text = "\n".join(xml_value_lines(field_type, "Created"))
            self.assertIn('<xsl:when test="Created">', text)
            self.assertIn(DATETIME_FALLBACK, text)
            self.assertIn("<!-- Using current date-time as fallback -->", text)

    def test_date_fallback_works_on_xslt_1_processors(self):
        text = "\n".join(xml_value_lines(FieldType.DATE, "Created"))

        self.assertIn('<xsl:when test="function-available(\'current-dateTime\')">', text)
        self.assertIn(EXSLT_DATETIME_FALLBACK, text)
        self.assertEqual(EXSLT_DATETIME_FALLBACK, "substring(date:date-time(), 1, 19)")

    def test_date_namespace_added_only_for_date_fields(self):
        plain = [Mapping(source_path="//a", target_name="a")]
        dated = plain + [Mapping(source_path="//d", target_name="d", field_type=FieldType.DATETIME)]

        self.assertEqual(with_date_namespace({"hr": "urn:hr"}, plain), {"hr": "urn:hr"})
        self.assertEqual(with_date_namespace({"hr": "urn:hr"}, dated),
                         {"hr": "urn:hr", "date": EXSLT_DATES_NAMESPACE})
        self.assertEqual(with_date_namespace({"date": "urn:mine"}, dated), {"date": "urn:mine"})

    def test_select_is_attribute_escaped(self):
        lines = xml_value_lines(FieldType.STRING, "Item[@code=\"a\" and x < 1]")
        self.assertEqual(lines, ['<xsl:value-of select="Item[@code=&quot;a&quot; and x &lt; 1]"/>'])


class TestFlatValueLines(unittest.TestCase):

    def test_every_type_has_a_fallback(self):
        for field_type in FieldType:
            text = "\n".join(flat_value_lines(field_type, "X", "X"))
            self.assertIn("<xsl:otherwise>", text, field_type)

    def test_currency_falls_back_to_zero_amount(self):
        lines = flat_value_lines(FieldType.CURRENCY, "Total", "Total")

        self.assertEqual(lines[0], "<!-- Total - Currency field -->")
        self.assertIn("<xsl:text>0.00</xsl:text>", "\n".join(lines))

    def test_numeric_falls_back_to_zero(self):
        lines = flat_value_lines(FieldType.DECIMAL, "Qty", "Qty")

        self.assertEqual(lines[0], "<!-- Qty - Numeric field -->")
        self.assertIn("<xsl:text>0</xsl:text>", "\n".join(lines))

    def test_required_string_notes_missing_field(self):
        text = "\n".join(flat_value_lines(FieldType.STRING, "Name", "Name"))

        self.assertTrue(text.startswith("<!-- Name -->"))
        self.assertIn("<!-- Field Name is missing -->", text)

    def test_optional_string(self):
        lines = flat_value_lines(FieldType.STRING, "Dept", "Dept", required=False)

        self.assertEqual(lines[0], "<!-- Dept - Optional field -->")
        self.assertNotIn("is missing", "\n".join(lines))


class TestJsonTypedValueLines(unittest.TestCase):

    def test_currency_is_amount_and_currency_map(self):
        text = "\n".join(json_typed_value_lines(FieldType.CURRENCY, "Total", "Total"))

        self.assertIn("<xsl:map-entry key=\"'amount'\">", text)
        self.assertIn("<xsl:sequence select=\"'USD'\"/>", text)

    def test_decimal_is_sequence(self):
        self.assertEqual(json_typed_value_lines(FieldType.DECIMAL, "Qty", "Qty"),
                         ["<xsl:sequence select=\"format-number(Qty, '0.00')\"/>"])

    def test_string_falls_back_to_empty_string(self):
        text = "\n".join(json_typed_value_lines(FieldType.STRING, "Name", "Name"))

        self.assertIn('<xsl:sequence select="string(Name)"/>', text)
        self.assertIn("<xsl:sequence select=\"''\"/>", text)


def test_choose_structure():
    assert choose("a", ["x"], ["y"]) == [
        "<xsl:choose>",
        '  <xsl:when test="a">',
        "    x",
        "  </xsl:when>",
        "  <xsl:otherwise>",
        "    y",
        "  </xsl:otherwise>",
        "</xsl:choose>",
    ]


def test_format_number():
    assert format_number("@amount") == "format-number(@amount, '0.00')"
