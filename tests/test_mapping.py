import unittest

from core.datatypes import DataType
from core.errors import MappingSyntaxError
from core.mapping import Mapping


class MappingTest(unittest.TestCase):
    def test_parse_field_mapping(self):
        mapping = Mapping.parse("_STRING(name)")
        self.assertEqual(mapping.data_type, DataType.STRING)
        self.assertEqual(mapping.field, "name")
        self.assertIsNone(mapping.literal)

    def test_parse_literal(self):
        mapping = Mapping.parse("_LITERAL(Hello World)")
        self.assertTrue(mapping.is_literal)
        self.assertEqual(mapping.literal, "Hello World")
        self.assertIsNone(mapping.field)

    def test_parse_nested_parentheses_and_dotted_fields(self):
        self.assertEqual(Mapping.parse("_LITERAL((a))").literal, "(a)")
        self.assertEqual(Mapping.parse("_INTEGER(details.age)").field, "details.age")

    def test_parse_rejects_bad_text(self):
        for text in ("name", "_string(name)", "_UNKNOWN(name)", "STRING(name)", "_STRING(name) "):
            with self.assertRaises(MappingSyntaxError, msg=text):
                Mapping.parse(text)

    def test_permissive_parse_falls_back_to_literal(self):
        # Plain property values in configuration files rely on this
        self.assertEqual(Mapping.from_text("Hello"), Mapping.of_literal("Hello"))
        self.assertEqual(Mapping.from_text("_FOO(bar)"), Mapping.of_literal("_FOO(bar)"))
        self.assertEqual(Mapping.from_text("_STRING(name)"), Mapping.of_field(DataType.STRING, "name"))

    def test_type_hint(self):
        self.assertTrue(Mapping.parse("_INTEGER()").is_type_hint)
        self.assertFalse(Mapping.parse("_INTEGER(age)").is_type_hint)
        self.assertFalse(Mapping.parse("_LITERAL()").is_type_hint)

    def test_equality_is_structural(self):
        self.assertEqual(Mapping.of_field(DataType.INTEGER, "age"), Mapping(DataType.INTEGER, "age"))
        self.assertNotEqual(Mapping.of_field(DataType.INTEGER, "age"), Mapping.of_field(DataType.DOUBLE, "age"))
        self.assertNotEqual(Mapping.of_literal("age"), Mapping.of_field(DataType.STRING, "age"))
        self.assertEqual(Mapping.of_field(DataType.LITERAL, "x"), Mapping.of_literal("x"))

    def test_to_text(self):
        self.assertEqual(Mapping.of_field(DataType.DATETIME, "created").to_text(), "_DATETIME(created)")
        self.assertEqual(Mapping.of_literal("Person").to_text(), "_LITERAL(Person)")
        self.assertEqual(str(Mapping.of_field(DataType.URL, "site")), "_URL(site)")

    def test_text_form_parses_back(self):
        mappings = [Mapping.of_field(t, "field.path") for t in DataType if t is not DataType.LITERAL]
        mappings += [Mapping.of_literal("plain text"), Mapping.of_literal(""), Mapping.of_field(DataType.INTEGER, "")]
        for mapping in mappings:
            self.assertEqual(Mapping.parse(mapping.to_text()), mapping)


if __name__ == '__main__':
    unittest.main()
