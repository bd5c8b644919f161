#!/usr/bin/env python3
"""CLI for themes management on a local CMS site.

Inputs: optional --site and a sub-command (install, uninstall, change).
Without a sub-command an interactive menu is shown. Side effects:
installs/uninstalls theme packages and changes the active front or back
theme through the site console.
"""
import sys

from installer.shell import main

if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
