import sqlite3
import tempfile
import unittest
from pathlib import Path

from sources.delimited import DelimitedSource
from sources.factory import open_source
from sources.json_sources import JsonLinesSource, JsonSource
from sources.regex_source import RegexSource
from sources.sql_source import SqlSource
from sources.xml_source import XmlSource


class SourceTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, text):
        path = self.tmp / name
        path.write_text(text, encoding='utf-8')
        return path


class DelimitedSourceTest(SourceTestCase):
    def test_csv_with_header(self):
        path = self.write("people.csv", "name,age\nBob,29\nAlice,31\n")
        records = list(DelimitedSource(path, header=True))

        self.assertEqual(records[0], {"name": "Bob", "1": "Bob", "age": "29", "2": "29"})
        self.assertEqual(len(records), 2)

    def test_tsv_without_header(self):
        path = self.write("people.tsv", "Bob\t29\n")
        self.assertEqual(list(DelimitedSource(path, delimiter="\t")), [{"1": "Bob", "2": "29"}])

    def test_quoted_values(self):
        path = self.write("quoted.csv", 'name,place\nBob,"Edinburgh, Scotland"\n')
        self.assertEqual(list(DelimitedSource(path, header=True))[0]["place"], "Edinburgh, Scotland")


class JsonSourceTest(SourceTestCase):
    def test_array(self):
        path = self.write("people.json", '[{"name": "Bob", "details": {"age": 29}}, 3]')
        with self.assertLogs("sources.json_sources", level="WARNING"):
            records = list(JsonSource(path))
        self.assertEqual(records, [{"name": "Bob", "details": {"age": 29}}])

    def test_not_an_array(self):
        path = self.write("person.json", '{"name": "Bob"}')
        with self.assertRaises(ValueError):
            list(JsonSource(path))

    def test_json_lines(self):
        path = self.write("people.jsonl", '{"name": "Bob"}\n\nnot json\n{"name": "Alice"}\n')
        with self.assertLogs("sources.json_sources", level="WARNING"):
            records = list(JsonLinesSource(path))
        self.assertEqual(records, [{"name": "Bob"}, {}, {"name": "Alice"}])


class XmlSourceTest(SourceTestCase):
    def test_records_per_element(self):
        path = self.write("people.xml", """<people>
  <person id="1">
    <name>Bob</name>
    <address type="home"><town>Edinburgh</town></address>
    <phone>123</phone>
    <phone>456</phone>
  </person>
  <person id="2"><name>Alice</name></person>
</people>""")
        records = list(XmlSource(path, "person"))

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], {
            "#id": "1",
            "name": "Bob",
            "address#type": "home",
            "address.town": "Edinburgh",
            "phone": ["123", "456"],
        })
        self.assertEqual(records[1], {"#id": "2", "name": "Alice"})


class RegexSourceTest(SourceTestCase):
    def test_groups(self):
        path = self.write("log.txt", "user=bob id=1\nUSER=alice id=2\n")
        records = list(RegexSource(path, r"user=(?P<user>\w+) id=(\d+)", ignore_case=True))

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], {"0": "user=bob id=1", "1": "bob", "2": "1", "user": "bob"})
        self.assertEqual(records[1]["user"], "alice")

    def test_case_sensitive(self):
        path = self.write("log.txt", "user=bob\nUSER=alice\n")
        self.assertEqual(len(list(RegexSource(path, r"user=(\w+)"))), 1)


class SqlSourceTest(SourceTestCase):
    def setUp(self):
        super().setUp()
        self.db = self.tmp / "people.db"
        conn = sqlite3.connect(str(self.db))
        conn.execute("CREATE TABLE people (name TEXT, age INTEGER)")
        conn.executemany("INSERT INTO people VALUES (?, ?)", [("Bob", 29), ("Alice", 31)])
        conn.commit()
        conn.close()

    def test_table(self):
        with SqlSource(self.db, table="people") as source:
            records = list(source)
        self.assertEqual(records[0], {"name": "Bob", "1": "Bob", "age": 29, "2": 29})
        self.assertIsNone(source.conn)

    def test_query(self):
        with SqlSource(self.db, query="SELECT name FROM people WHERE age > 30") as source:
            self.assertEqual(list(source), [{"name": "Alice", "1": "Alice"}])

    def test_requires_table_or_query(self):
        with self.assertRaises(ValueError):
            SqlSource(self.db)


class FactoryTest(SourceTestCase):
    def test_formats(self):
        path = self.write("data.txt", "")
        self.assertIsInstance(open_source("csv", str(path)), DelimitedSource)
        self.assertEqual(open_source("TSV", str(path)).delimiter, "\t")
        self.assertIsInstance(open_source("JSONL", str(path)), JsonLinesSource)
        self.assertIsInstance(open_source("XML", str(path), element="person"), XmlSource)
        self.assertIsInstance(open_source("REGEX", str(path), query="x"), RegexSource)

    def test_missing_options(self):
        with self.assertRaises(ValueError):
            open_source("XML", "data.xml")
        with self.assertRaises(ValueError):
            open_source("REGEX", "data.txt")
        with self.assertRaises(ValueError):
            open_source("SQL", "data.db")
        with self.assertRaises(ValueError):
            open_source("PARQUET", "data.parquet")


if __name__ == '__main__':
    unittest.main()
