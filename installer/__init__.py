"""CMS installer package.

Submodules:
- utils: logging, status lines, small helpers
- console: site console wrappers
- registry: installed plugins/themes and theme predicates
- tasks: plugin install/uninstall and theme activation
- shell: interactive themes shell and the themes CLI
- fixtures: table schema and seed records
- db: MariaDB helpers for loading fixtures
"""

# Intentionally minimal; logic lives in submodules and __main__.
