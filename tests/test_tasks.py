"""Tests for install/uninstall/activation sub-operations.

Covers: installer.tasks
"""

import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from installer.registry import Theme
from installer.tasks import FAILED, OK, activate_theme, install_plugin, uninstall_plugin


class TestInstall(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    @patch("installer.tasks.console_cmd", return_value=True)
    def test_local_theme_is_installed_and_activated(self, console_cmd):
        self.assertEqual(install_plugin("a.local", self.tmpdir, theme=True, activate=True), OK)
        console_cmd.assert_called_once_with(
            "a.local", ["plugin", "install", self.tmpdir, "--theme", "--activate"]
        )

    @patch("installer.tasks.console_cmd", return_value=True)
    def test_url_source_is_passed_through(self, console_cmd):
        url = "https://example.com/themes/foo.zip"
        self.assertEqual(install_plugin("a.local", url), OK)
        console_cmd.assert_called_once_with("a.local", ["plugin", "install", url])

    @patch("installer.tasks.console_cmd")
    def test_missing_path_fails_without_console(self, console_cmd):
        self.assertEqual(install_plugin("a.local", "/nonexistent/theme.zip", theme=True), FAILED)
        self.assertEqual(install_plugin("a.local", "  "), FAILED)
        console_cmd.assert_not_called()

    @patch("installer.tasks.console_cmd", return_value=False)
    def test_console_failure(self, _console_cmd):
        self.assertEqual(install_plugin("a.local", self.tmpdir), FAILED)


class TestUninstall(unittest.TestCase):

    @patch("installer.tasks.active_themes", return_value=("FrontendTheme", "BackendTheme"))
    @patch("installer.tasks.console_cmd", return_value=True)
    def test_uninstall(self, console_cmd, _active):
        self.assertEqual(uninstall_plugin("a.local", "Foo"), OK)
        console_cmd.assert_called_once_with("a.local", ["plugin", "uninstall", "Foo"])

    @patch("installer.tasks.active_themes", return_value=("FrontendTheme", "BackendTheme"))
    @patch("installer.tasks.console_cmd")
    def test_active_theme_is_refused(self, console_cmd, _active):
        self.assertEqual(uninstall_plugin("a.local", "BackendTheme"), FAILED)
        console_cmd.assert_not_called()


class TestActivate(unittest.TestCase):

    def registry(self, *plugins):
        registry = MagicMock()
        registry.get.side_effect = lambda name: {p.name: p for p in plugins}.get(name)
        return registry

    @patch("installer.tasks.console_cmd", return_value=True)
    def test_front_theme(self, console_cmd):
        registry = self.registry(Theme("Foo", is_theme=True))
        self.assertEqual(activate_theme("a.local", "Foo", registry=registry), OK)
        console_cmd.assert_called_once_with("a.local", ["option", "update", "front_theme", "Foo"])

    @patch("installer.tasks.console_cmd", return_value=True)
    def test_admin_theme_sets_back_theme(self, console_cmd):
        registry = self.registry(Theme("Dark", is_theme=True, is_admin=True))
        self.assertEqual(activate_theme("a.local", "Dark", registry=registry), OK)
        console_cmd.assert_called_once_with("a.local", ["option", "update", "back_theme", "Dark"])

    @patch("installer.tasks.console_cmd")
    def test_unknown_or_non_theme_fails(self, console_cmd):
        registry = self.registry(Theme("Blog", is_theme=False))
        self.assertEqual(activate_theme("a.local", "Blog", registry=registry), FAILED)
        self.assertEqual(activate_theme("a.local", "Missing", registry=registry), FAILED)
        console_cmd.assert_not_called()


if __name__ == "__main__":
    unittest.main()
