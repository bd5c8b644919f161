"""Tests for the site console wrappers.

Covers: installer.console (JSON extraction, noise scrubbing, flag coercion)
"""

import unittest
from pathlib import Path
from unittest.mock import patch

from installer import console


class TestParsing(unittest.TestCase):

    def test_extract_json_blob_skips_brackets_in_strings(self):
        text = 'Notice: boot\n[{"name": "a]b"}, {"name": "c"}] trailing'
        self.assertEqual(console.extract_json_blob(text), '[{"name": "a]b"}, {"name": "c"}]')

    def test_extract_json_blob_none_when_unbalanced(self):
        self.assertIsNone(console.extract_json_blob("[1, 2"))
        self.assertIsNone(console.extract_json_blob("no json"))

    def test_parse_drops_php_noise(self):
        text = "PHP Warning: something\n\x1b[32m[{\"name\": \"Foo\"}]\x1b[0m"
        self.assertEqual(console._parse_json_loose(text), [{"name": "Foo"}])

    def test_parse_scalar_line(self):
        self.assertEqual(console._parse_json_loose('"FrontendTheme"\n'), "FrontendTheme")
        self.assertEqual(console._parse_json_loose("FrontendTheme"), "FrontendTheme")
        self.assertEqual(console._parse_json_loose("42"), 42)
        self.assertIsNone(console._parse_json_loose("Warning: only noise"))


class TestConsoleJson(unittest.TestCase):

    @patch("installer.console._console_run", return_value=(True, '[{"name": "Foo"}]', "", 0))
    def test_read_commands_get_json_flags(self, run):
        ok, data = console.console_json("a.local", "bin/cake plugin list --fields=name")
        self.assertTrue(ok)
        self.assertEqual(data, [{"name": "Foo"}])
        parts = run.call_args[0][1]
        self.assertEqual(parts[:3], ["plugin", "list", "--fields=name"])
        self.assertIn("--format=json", parts)
        self.assertIn("--quiet", parts)

    @patch("installer.console._console_run", return_value=(True, "", "", 0))
    def test_write_commands_untouched(self, run):
        ok, data = console.console_json("a.local", ["plugin", "uninstall", "Foo"])
        self.assertTrue(ok)
        self.assertEqual(data, [])
        self.assertEqual(run.call_args[0][1], ["plugin", "uninstall", "Foo"])

    @patch("installer.console._console_run")
    def test_empty_command_is_rejected(self, run):
        self.assertEqual(console.console_json("a.local", "   "), (False, []))
        run.assert_not_called()

    @patch("installer.console._console_run", return_value=(False, "", "Error: nope", 1))
    def test_console_cmd_reports_failure(self, _run):
        self.assertFalse(console.console_cmd("a.local", "option update front_theme Foo"))

    def test_site_path(self):
        self.assertEqual(console.site_path("a.local"), Path("/srv/http/a.local"))
        self.assertEqual(console.site_path(Path("/tmp/site")), Path("/tmp/site"))

    def test_log_format_hides_sudo_and_binary(self):
        args = ["sudo", "-u", "http", "/srv/http/a/bin/cake", "plugin", "list"]
        self.assertEqual(console._fmt_cmd_for_log(args), "console plugin list")


if __name__ == "__main__":
    unittest.main()
