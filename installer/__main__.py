"""Sub-command entry point used by the themes shell dispatcher.

usage: python -m installer [--site SITE] plugins install -s SRC [--theme] [-a]
       python -m installer [--site SITE] plugins uninstall -p NAME
       python -m installer [--site SITE] themes change -t NAME
       python -m installer [--site SITE] fixtures load [TABLE ...]
"""

from __future__ import annotations

import argparse
import sys

from config import DEFAULT_SITE
from installer.db import load_fixtures
from installer.tasks import OK, activate_theme, install_plugin, uninstall_plugin
from installer.utils import init_logging, status_fail, status_pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="installer", description="Installer sub-commands.")
    parser.add_argument("--site", default=DEFAULT_SITE, help="site name under the site root")
    groups = parser.add_subparsers(dest="group", required=True)

    plugins = groups.add_parser("plugins", help="Plugin install/uninstall.")
    plugin_cmds = plugins.add_subparsers(dest="command", required=True)
    install = plugin_cmds.add_parser("install", help="Install a new plugin or theme.")
    install.add_argument("-s", "--source", required=True, help="URL or path to a ZIP/directory")
    install.add_argument("--theme", action="store_true", help="the package is a theme")
    install.add_argument("-a", "--activate", action="store_true", help="activate after install")
    uninstall = plugin_cmds.add_parser("uninstall", help="Uninstall an existing plugin.")
    uninstall.add_argument("-p", "--plugin", required=True, help="plugin machine name")

    themes = groups.add_parser("themes", help="Theme activation.")
    theme_cmds = themes.add_subparsers(dest="command", required=True)
    change = theme_cmds.add_parser("change", help="Change theme in use.")
    change.add_argument("-t", "--theme", required=True, help="theme machine name")

    fixtures = groups.add_parser("fixtures", help="Table fixtures.")
    fixture_cmds = fixtures.add_subparsers(dest="command", required=True)
    load = fixture_cmds.add_parser("load", help="Drop, create and seed fixture tables.")
    load.add_argument("tables", nargs="*", help="tables to load (default: all)")
    return parser


def run(args: argparse.Namespace) -> int:
    target = (args.group, args.command)
    if target == ("plugins", "install"):
        code = install_plugin(args.site, args.source, theme=args.theme, activate=args.activate)
        label = f"install {args.source}"
    elif target == ("plugins", "uninstall"):
        code = uninstall_plugin(args.site, args.plugin)
        label = f"uninstall {args.plugin}"
    elif target == ("themes", "change"):
        code = activate_theme(args.site, args.theme)
        label = f"activate {args.theme}"
    else:
        code = 0 if load_fixtures(args.site, args.tables) else 1
        label = "fixtures load"

    if code == OK:
        status_pass(f"{label} on {args.site}")
    else:
        status_fail(f"{label} on {args.site}; see log")
    return code


def main(argv: list[str] | None = None) -> int:
    init_logging(None)
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
