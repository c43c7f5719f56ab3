"""Tests for the part table lookups."""

import unittest

from pbitutility import parts


class TestLookup(unittest.TestCase):
    """Tests for part table lookup."""

    def test_package_form(self):
        """Package part names resolve to their table entry."""
        info = parts.lookup("/Report/Layout")
        self.assertEqual(info.extension, ".json")
        self.assertTrue(info.is_utf16)

    def test_file_form_with_backslashes(self):
        """Windows-style exported file names resolve to the same entry."""
        self.assertEqual(parts.lookup("\\Report\\Layout.json"), parts.lookup("/Report/Layout"))

    def test_file_form_with_slashes(self):
        """Relative exported file names resolve without a leading slash."""
        self.assertEqual(parts.extension_for("Version.txt"), ".txt")
        self.assertTrue(parts.lookup("Version.txt").is_utf16)

    def test_unknown_part(self):
        """Unknown parts have no extension and are not UTF-16."""
        self.assertEqual(parts.extension_for("/SecurityBindings"), "")
        self.assertFalse(parts.lookup("/SecurityBindings").is_utf16)
        self.assertEqual(parts.content_type_for("/SecurityBindings"), "")

    def test_exact_match_only(self):
        """Prefixes and sub-paths of known parts do not match."""
        self.assertIs(parts.lookup("/Report"), parts.UNKNOWN_PART)
        self.assertIs(parts.lookup("/Report/Layout/extra"), parts.UNKNOWN_PART)
        self.assertIs(parts.lookup("/Report/Layouts"), parts.UNKNOWN_PART)

    def test_connections_is_utf8_json(self):
        """Connections is JSON but not stored as UTF-16."""
        self.assertEqual(parts.extension_for("/Connections"), ".json")
        self.assertFalse(parts.lookup("/Connections").is_utf16)

    def test_content_types(self):
        """Metadata and Settings are declared as application/json."""
        self.assertEqual(parts.content_type_for("/Metadata"), "application/json")
        self.assertEqual(parts.content_type_for("/Settings"), "application/json")
        self.assertEqual(parts.content_type_for("/Report/Layout"), "")

    def test_all_utf16_parts(self):
        """Every known part except Connections is stored as UTF-16."""
        utf16 = {name for name, info in parts.KNOWN_PARTS.items() if info.is_utf16}
        self.assertEqual(set(parts.KNOWN_PARTS) - utf16, {"/Connections"})


class TestLookupFile(unittest.TestCase):
    """Tests for exported file name lookup."""

    def test_matches_exported_name(self):
        self.assertEqual(parts.lookup_file("Report/Layout.json").extension, ".json")

    def test_ignores_package_form(self):
        """A file without the exported extension is not a known part."""
        self.assertIs(parts.lookup_file("/Version"), parts.UNKNOWN_PART)


if __name__ == "__main__":
    unittest.main()
