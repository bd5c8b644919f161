"""Shared configuration constants for the installer.

Centralizes paths and option keys used by the installer package.
"""

import os

SITE_ROOT_DIR = "/srv/http"
DEFAULT_SITE = os.environ.get("INSTALLER_SITE", "quickapps.local")
# CMS console, relative to the site directory
CONSOLE_BIN = "bin/cake"
USER = "http"
FRONT_THEME_OPTION = "front_theme"
BACK_THEME_OPTION = "back_theme"
