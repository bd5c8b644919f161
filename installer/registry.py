"""Installed plugin registry and theme predicates.

Plugins are read from the site console and cached until drop_cache().
Theme classification is done with plain predicates over Theme values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from config import BACK_THEME_OPTION, FRONT_THEME_OPTION
from installer.console import console_json
from installer.utils import require

PLUGIN_FIELDS = "name,human_name,description,path,is_theme,is_admin"
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Theme:
    name: str
    human_name: str = ""
    description: str = ""
    path: str = ""
    is_theme: bool = False
    is_admin: bool = False


def is_theme(plugin: Theme) -> bool:
    return plugin.is_theme


def is_admin_theme(plugin: Theme) -> bool:
    return plugin.is_theme and plugin.is_admin


def is_active(plugin: Theme, front: str, back: str) -> bool:
    return plugin.name in (front, back)


def uninstall_candidates(plugins: Iterable[Theme]) -> list[Theme]:
    return [p for p in plugins if is_theme(p)]


def change_candidates(plugins: Iterable[Theme], front: str, back: str) -> list[Theme]:
    """Installed themes that are neither the front nor the back theme."""
    return [p for p in plugins if is_theme(p) and not is_active(p, front, back)]


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value or "").strip().lower() in TRUTHY


def theme_from_row(row: dict) -> Theme | None:
    name = str(row.get("name", "") or "").strip()
    if not name:
        return None
    human_name = str(row.get("human_name", "") or "").strip() or name
    return Theme(
        name=name,
        human_name=human_name,
        description=str(row.get("description", "") or "").strip(),
        path=str(row.get("path", "") or "").strip(),
        is_theme=_flag(row.get("is_theme")),
        is_admin=_flag(row.get("is_admin")),
    )


class PluginRegistry:
    """Cached view of the plugins installed on one site."""

    def __init__(self, site: Union[str, Path]):
        self.site = site
        self._cache: list[Theme] | None = None

    def list(self) -> list[Theme]:
        if self._cache is not None:
            return list(self._cache)
        ok, rows = console_json(self.site, ["plugin", "list", f"--fields={PLUGIN_FIELDS}"])
        if not require(ok and isinstance(rows, list), "Could not read plugin list", "error"):
            return []
        plugins = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            plugin = theme_from_row(row)
            if plugin is not None:
                plugins.append(plugin)
        self._cache = plugins
        logging.debug("registry: %d plugins on %s", len(plugins), self.site)
        return list(plugins)

    def get(self, name: str) -> Theme | None:
        for plugin in self.list():
            if plugin.name == name:
                return plugin
        return None

    def drop_cache(self) -> None:
        self._cache = None
        logging.debug("registry: cache dropped for %s", self.site)


def get_option(site: Union[str, Path], key: str) -> str:
    ok, value = console_json(site, ["option", "get", key])
    if not ok:
        return ""
    if isinstance(value, list):
        value = value[0] if value else ""
    if value is None:
        return ""
    return str(value).strip()


def active_themes(site: Union[str, Path]) -> tuple[str, str]:
    return get_option(site, FRONT_THEME_OPTION), get_option(site, BACK_THEME_OPTION)
