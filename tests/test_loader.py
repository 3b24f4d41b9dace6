import json
import tempfile
import unittest
from pathlib import Path

from tech_roles.core.loader import load_entries, load_role_document
from tech_roles.errors import ErrorKind, LoadFailureError

from tests.support import ROLE_NAMES, write_dataset, write_json


class LoadEntriesTests(unittest.TestCase):
    """Role documents are flattened into one entry per level."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def test_flattens_every_level_of_every_document(self):
        write_dataset(self.root)
        entries = load_entries(self.root / "es")

        self.assertEqual(len(entries), 27)
        self.assertEqual({e.role for e in entries}, set(ROLE_NAMES))

        be3 = next(e for e in entries if e.code == "BE-L3")
        self.assertEqual(be3.category, "Software Engineering")
        self.assertEqual(be3.level, "L3 - Junior II")
        self.assertEqual(be3.level_number, 3)
        self.assertEqual((be3.years_range.min, be3.years_range.max), (2, 3))
        self.assertEqual(len(be3.core_competencies), 5)

    def test_files_are_read_in_filename_order(self):
        write_dataset(self.root)
        entries = load_entries(self.root / "en")

        # backend-developer.json < data-engineer.json < frontend-developer.json
        self.assertEqual(entries[0].code, "BE-L1")
        self.assertEqual(entries[9].code, "DE-L1")
        self.assertEqual(entries[18].code, "FE-L1")

    def test_ignores_files_with_other_extensions(self):
        write_dataset(self.root)
        (self.root / "en" / "notes.txt").write_text("not a role", encoding="utf-8")

        self.assertEqual(len(load_entries(self.root / "en")), 27)

    def test_missing_lists_default_to_empty(self):
        write_json(
            self.root / "qa-engineer.json",
            {
                "role": "QA Engineer",
                "category": "Quality",
                "levels": {"QA-L1": {"level": "L1 - Trainee", "levelNumber": 1, "yearsRange": {"min": 0, "max": 1}}},
            },
        )
        (entry,) = load_entries(self.root)

        self.assertEqual(entry.core_competencies, [])
        self.assertEqual(entry.complementary_competencies, [])
        self.assertEqual(entry.indicators, [])

    def test_level_number_is_derived_from_code_when_absent(self):
        write_json(
            self.root / "qa.json",
            {"role": "QA Engineer", "category": "Quality", "levels": {"QA-L4": {"yearsRange": {"min": 3, "max": 5}}}},
        )
        (entry,) = load_entries(self.root)

        self.assertEqual(entry.level_number, 4)
        self.assertEqual(entry.level, "L4")

    def test_rejects_level_number_that_disagrees_with_code(self):
        path = write_json(
            self.root / "qa.json",
            {
                "role": "QA Engineer",
                "category": "Quality",
                "levels": {"QA-L4": {"levelNumber": 5, "yearsRange": {"min": 3, "max": 5}}},
            },
        )

        with self.assertRaises(LoadFailureError) as ctx:
            load_entries(self.root)
        self.assertEqual(ctx.exception.path, path)

    def test_rejects_fractional_years(self):
        for years in ({"min": 0.5, "max": 1}, {"min": 0, "max": 1.9}):
            path = write_json(
                self.root / "qa.json",
                {"role": "QA Engineer", "category": "Quality", "levels": {"QA-L1": {"yearsRange": years}}},
            )
            with self.subTest(years=years):
                with self.assertRaises(LoadFailureError) as ctx:
                    load_entries(self.root)
                self.assertEqual(ctx.exception.path, path)

    def test_whole_float_years_are_accepted(self):
        write_json(
            self.root / "qa.json",
            {"role": "QA Engineer", "category": "Quality", "levels": {"QA-L9": {"yearsRange": {"min": 15.0, "max": None}}}},
        )
        (entry,) = load_entries(self.root)

        self.assertEqual((entry.years_range.min, entry.years_range.max), (15, None))
        self.assertIsInstance(entry.years_range.min, int)

    def test_missing_directory_is_a_load_failure(self):
        missing = self.root / "nope"

        with self.assertRaises(LoadFailureError) as ctx:
            load_entries(missing)
        self.assertEqual(ctx.exception.kind, ErrorKind.LOAD_FAILURE)
        self.assertEqual(ctx.exception.path, missing)
        self.assertIsInstance(ctx.exception.__cause__, OSError)


class LoadRoleDocumentTests(unittest.TestCase):
    """Shape checks on a single role document."""

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)

    def test_invalid_json_wraps_the_decode_error(self):
        path = self.root / "broken.json"
        path.write_text("{ not json", encoding="utf-8")

        with self.assertRaises(LoadFailureError) as ctx:
            load_role_document(path)
        self.assertEqual(ctx.exception.path, path)
        self.assertIsInstance(ctx.exception.__cause__, json.JSONDecodeError)

    def test_invalid_utf8_is_a_load_failure(self):
        path = self.root / "broken.json"
        path.write_bytes(b'{"role": "X\xff", "category": "Data", "levels": {}}')

        with self.assertRaises(LoadFailureError) as ctx:
            load_role_document(path)
        self.assertEqual(ctx.exception.path, path)
        self.assertIsInstance(ctx.exception.__cause__, UnicodeDecodeError)

    def test_requires_role_category_and_levels(self):
        for payload in (
            [],
            {"category": "Data", "levels": {}},
            {"role": "Data Engineer", "levels": {}},
            {"role": "Data Engineer", "category": "Data"},
            {"role": "Data Engineer", "category": "Data", "levels": []},
        ):
            path = write_json(self.root / "doc.json", payload)
            with self.subTest(payload=payload):
                with self.assertRaises(LoadFailureError):
                    load_role_document(path)

    def test_returns_the_parsed_document(self):
        path = write_json(self.root / "doc.json", {"role": "Data Engineer", "category": "Data", "levels": {}})

        self.assertEqual(load_role_document(path)["role"], "Data Engineer")
