"""Tests for the sub-command entry point and the shell dispatcher.

Covers: installer.__main__, installer.shell.dispatch_shell
"""

import subprocess
import sys
import unittest
from unittest.mock import patch

from installer.__main__ import build_parser, main
from installer.shell import dispatch_shell


class TestParser(unittest.TestCase):

    def test_install_flags(self):
        args = build_parser().parse_args(
            ["--site", "a.local", "plugins", "install", "-s", "/tmp/t.zip", "--theme", "-a"]
        )
        self.assertEqual((args.group, args.command), ("plugins", "install"))
        self.assertEqual(args.source, "/tmp/t.zip")
        self.assertTrue(args.theme)
        self.assertTrue(args.activate)

    def test_dash_leading_values_reach_the_tasks(self):
        parser = build_parser()
        args = parser.parse_args(["plugins", "install", "--source=-theme.zip", "--theme", "-a"])
        self.assertEqual(args.source, "-theme.zip")
        args = parser.parse_args(["plugins", "uninstall", "--plugin=-Foo"])
        self.assertEqual(args.plugin, "-Foo")
        args = parser.parse_args(["themes", "change", "--theme=-Foo"])
        self.assertEqual(args.theme, "-Foo")

    def test_missing_required_flag_is_usage_error(self):
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit) as ctx:
                build_parser().parse_args(["themes", "change"])
        self.assertEqual(ctx.exception.code, 2)


@patch("installer.__main__.init_logging")
class TestMain(unittest.TestCase):

    @patch("installer.__main__.install_plugin", return_value=0)
    def test_plugins_install(self, install_plugin, _init):
        self.assertEqual(main(["--site", "a.local", "plugins", "install", "-s", "/tmp/t.zip", "--theme", "-a"]), 0)
        install_plugin.assert_called_once_with("a.local", "/tmp/t.zip", theme=True, activate=True)

    @patch("installer.__main__.uninstall_plugin", return_value=1)
    def test_plugins_uninstall_failure(self, uninstall_plugin, _init):
        self.assertEqual(main(["--site", "a.local", "plugins", "uninstall", "-p", "Foo"]), 1)
        uninstall_plugin.assert_called_once_with("a.local", "Foo")

    @patch("installer.__main__.activate_theme", return_value=0)
    def test_themes_change(self, activate_theme, _init):
        self.assertEqual(main(["--site", "a.local", "themes", "change", "-t", "Foo"]), 0)
        activate_theme.assert_called_once_with("a.local", "Foo")

    @patch("installer.__main__.load_fixtures", return_value=True)
    def test_fixtures_load(self, load_fixtures, _init):
        self.assertEqual(main(["--site", "a.local", "fixtures", "load", "nodes"]), 0)
        load_fixtures.assert_called_once_with("a.local", ["nodes"])


class TestDispatch(unittest.TestCase):

    @patch("installer.shell.run_cmd")
    def test_success(self, run_cmd):
        self.assertEqual(dispatch_shell("a.local", ["themes", "change", "-t", "Foo"]), 0)
        run_cmd.assert_called_once_with(
            [sys.executable, "-m", "installer", "--site", "a.local", "themes", "change", "-t", "Foo"]
        )

    @patch("installer.shell.run_cmd", side_effect=subprocess.CalledProcessError(3, "installer"))
    def test_non_zero_status_is_returned(self, _run_cmd):
        self.assertEqual(dispatch_shell("a.local", ["plugins", "uninstall", "-p", "Foo"]), 3)


if __name__ == "__main__":
    unittest.main()
