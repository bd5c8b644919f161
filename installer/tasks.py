"""Plugin install/uninstall and theme activation sub-operations.

Each task returns a process-style status code: 0 on success, 1 on failure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union
from urllib.parse import urlsplit

from config import BACK_THEME_OPTION, FRONT_THEME_OPTION
from installer.console import console_cmd
from installer.registry import PluginRegistry, active_themes
from installer.utils import log, require

OK = 0
FAILED = 1


def _is_url(source: str) -> bool:
    return urlsplit(source).scheme in ("http", "https", "ftp")


def install_plugin(site: Union[str, Path], source: str, theme: bool = False, activate: bool = False) -> int:
    source = (source or "").strip()
    if not require(bool(source), "Missing plugin source", "error"):
        return FAILED
    if not _is_url(source):
        exists = Path(source).expanduser().exists()
        if not require(exists, f"Plugin source not found: {source}", "error"):
            return FAILED

    command = ["plugin", "install", source]
    if theme:
        command.append("--theme")
    if activate:
        command.append("--activate")
    if not console_cmd(site, command):
        logging.error("Could not install plugin from: %s", source)
        return FAILED
    log(f"PASS: Installed {source}")
    return OK


def uninstall_plugin(site: Union[str, Path], name: str) -> int:
    if not require(bool(name), "Missing plugin name", "error"):
        return FAILED
    if name in active_themes(site):
        logging.error("Refusing to uninstall active theme: %s", name)
        return FAILED
    if not console_cmd(site, ["plugin", "uninstall", name]):
        logging.error("Could not uninstall plugin: %s", name)
        return FAILED
    log(f"PASS: Uninstalled {name}")
    return OK


def activate_theme(site: Union[str, Path], name: str, registry: PluginRegistry | None = None) -> int:
    registry = registry or PluginRegistry(site)
    theme = registry.get(name)
    installed = theme is not None and theme.is_theme
    if not require(installed, f"Theme not installed: {name}", "error"):
        return FAILED

    key = BACK_THEME_OPTION if theme.is_admin else FRONT_THEME_OPTION
    if not console_cmd(site, ["option", "update", key, name]):
        logging.error("Could not set %s to %s", key, name)
        return FAILED
    log(f"PASS: {key} is now {name}")
    return OK
