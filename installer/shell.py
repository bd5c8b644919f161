"""Interactive shell for themes management.

Menu loop over install / remove / change. Stateful actions run as
sub-commands (python -m installer ...) and report an exit status.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, Sequence, Union

from config import DEFAULT_SITE
from installer.registry import (
    PluginRegistry,
    Theme,
    active_themes,
    change_candidates,
    uninstall_candidates,
)
from installer.tasks import OK, activate_theme, install_plugin, uninstall_plugin
from installer.utils import init_logging, log, run_cmd, status_fail, status_pass

HR = "-" * 63
INVALID_SELECTION = (
    "You have made an invalid selection. Please choose a command to execute "
    "by entering I, R, C, H, or Q."
)
SOURCE_PROMPT = (
    "Please provide a theme source, it can be either an URL or a filesystem "
    "path to a ZIP/directory within your server?\n[Q]uit"
)


class State(Enum):
    MENU = "menu"
    AWAITING_SOURCE = "awaiting_source"
    AWAITING_TARGET = "awaiting_target"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    TERMINATED = "terminated"


class ShellError(Exception):
    pass


class UserInputError(ShellError):
    """Invalid menu or index choice; the prompt is repeated."""


class ConfirmationMismatch(ShellError):
    """Retyped name differs from the target; the action is aborted."""


class SubOperationFailure(ShellError):
    def __init__(self, args: Sequence[str], status: int):
        super().__init__(f"{' '.join(args)} exit={status}")
        self.status = status


def dispatch_shell(site: Union[str, Path], args: Sequence[str]) -> int:
    cmd = [sys.executable, "-m", "installer", "--site", str(site)] + list(args)
    log(f"dispatch: {' '.join(cmd)}")
    try:
        run_cmd(cmd)
        return 0
    except subprocess.CalledProcessError as err:
        log(f"dispatch: exit={err.returncode}")
        return err.returncode


def pick(candidates: Sequence[Theme], raw: str) -> Theme:
    """Resolve a 1-based index typed by the operator."""
    # plain ASCII digits only; int() would also take "+1", "1_0" and "１"
    if not (raw.isascii() and raw.isdigit()):
        raise UserInputError("Invalid option")
    index = int(raw)
    if index < 1 or index > len(candidates):
        raise UserInputError("Invalid option")
    return candidates[index - 1]


class ThemesShell:
    def __init__(
        self,
        site: Union[str, Path] = DEFAULT_SITE,
        registry: PluginRegistry | None = None,
        dispatch: Callable[[Sequence[str]], int] | None = None,
        options: Callable[[], tuple[str, str]] | None = None,
        ask: Callable[[str], str] = input,
        stdout=None,
        stderr=None,
    ):
        self.site = site
        self.registry = registry or PluginRegistry(site)
        self.dispatch = dispatch or partial(dispatch_shell, site)
        self.active_themes = options or partial(active_themes, site)
        self.ask = ask
        self.stdout = stdout
        self.stderr = stderr
        self.state = State.MENU

    # ── I/O ──────────────────────────────────────────────────────────────
    def out(self, msg: str = "") -> None:
        print(msg, file=self.stdout)

    def err(self, msg: str) -> None:
        print(msg, file=self.stderr if self.stderr is not None else sys.stderr)

    def hr(self) -> None:
        self.out(HR)

    def prompt(self, message: str) -> str:
        try:
            return self.ask(f"{message}\n> ")
        except EOFError:
            return "Q"

    # ── Menu ─────────────────────────────────────────────────────────────
    def main(self) -> int:
        self.state = State.MENU
        actions = {"i": self.install, "r": self.uninstall, "c": self.change}
        while self.state is not State.TERMINATED:
            self.out("Themes Shell")
            self.hr()
            self.out("[I]nstall new theme")
            self.out("[R]emove an existing theme")
            self.out("[C]hange site theme")
            self.out("[H]elp")
            self.out("[Q]uit")

            choice = self.prompt("What would you like to do? (I/R/C/H/Q)").strip().lower()
            if choice == "q":
                self.state = State.TERMINATED
                break
            if choice in actions:
                actions[choice]()
            elif choice == "h":
                self.out(build_parser().format_help())
            else:
                self.out(INVALID_SELECTION)
            self.state = State.MENU
            self.hr()
        return 0

    def _run(self, args: Sequence[str]) -> None:
        status = self.dispatch(list(args))
        if status != 0:
            raise SubOperationFailure(args, status)

    def _select(self, candidates: Sequence[Theme], message: str) -> Theme | None:
        self.state = State.AWAITING_TARGET
        while True:
            raw = self.prompt(message).strip()
            if raw.upper() == "Q":
                self.err("Operation aborted")
                return None
            try:
                return pick(candidates, raw)
            except UserInputError as exc:
                self.err(str(exc))

    # ── Actions ──────────────────────────────────────────────────────────
    def install(self) -> int:
        self.state = State.AWAITING_SOURCE
        code = 1
        while True:
            source = self.prompt(SOURCE_PROMPT).strip()
            if source.upper() == "Q":
                self.err("Installation aborted")
                break
            if not source:
                continue
            self.out("Starting installation...")
            try:
                self._run(["plugins", "install", f"--source={source}", "--theme", "-a"])
            except SubOperationFailure as exc:
                log(f"install failed: {exc}")
                self.out("Starting installation... failed!")
                self.out()
                continue
            self.out("Starting installation... successfully installed!")
            self.registry.drop_cache()
            code = 0
            break
        self.out()
        return code

    def uninstall(self) -> int:
        themes = uninstall_candidates(self.registry.list())
        if not themes:
            self.err("There are no installed themes!")
            self.out()
            return 1

        self.out()
        for index, theme in enumerate(themes, start=1):
            self.out(f"[{index}] {theme.human_name}")
        self.out()

        target = self._select(themes, "Which theme would you like to uninstall?\n[Q]uit")
        if target is None:
            self.out()
            return 1

        self.hr()
        self.out("The following theme will be uninstalled")
        self.hr()
        self.out(f"Name:        {target.name}")
        self.out(f"Description: {target.description}")
        self.out(f"Path:        {target.path}")
        self.hr()
        self.out()

        self.state = State.AWAITING_CONFIRMATION
        code = 1
        try:
            typed = self.prompt(f'Please type in "{target.name}" to uninstall')
            if typed != target.name:
                raise ConfirmationMismatch(target.name)
            self._run(["plugins", "uninstall", f"--plugin={target.name}"])
        except ConfirmationMismatch:
            self.err("Confirmation failure, operation aborted!")
        except SubOperationFailure as exc:
            log(f"uninstall failed: {exc}")
            self.err("Plugin could not be uninstalled.")
        else:
            self.out("Plugin uninstalled!")
            self.registry.drop_cache()
            code = 0
        self.out()
        return code

    def change(self) -> int:
        front, back = self.active_themes()
        themes = change_candidates(self.registry.list(), front, back)
        if not themes:
            self.err("There are no disabled themes!")
            self.out()
            return 1

        self.out()
        for index, theme in enumerate(themes, start=1):
            kind = "backend" if theme.is_admin else "frontend"
            self.out(f"[{index}] {theme.human_name} [{kind}]")
        self.out()

        target = self._select(themes, "Which theme would you like to activate?\n[Q]uit")
        if target is None:
            self.out()
            return 1

        code = 1
        try:
            self._run(["themes", "change", f"--theme={target.name}"])
        except SubOperationFailure as exc:
            log(f"change failed: {exc}")
            self.err("Theme could not be changed.")
        else:
            self.out("Theme changed!")
            self.registry.drop_cache()
            code = 0
        self.out()
        return code


# ─── CLI ──────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="themes", description="Themes maintenance commands.")
    parser.add_argument("--site", default=DEFAULT_SITE, help="site name under the site root")
    commands = parser.add_subparsers(dest="command")
    install = commands.add_parser("install", help="Install a new theme.")
    install.add_argument("-s", "--source", help="URL or path to a ZIP/directory")
    uninstall = commands.add_parser("uninstall", help="Uninstalls an existing theme.")
    uninstall.add_argument("-p", "--plugin", help="theme machine name")
    change = commands.add_parser("change", help="Change theme in use.")
    change.add_argument("-t", "--theme", help="theme machine name")
    return parser


def _report(code: int, label: str) -> int:
    if code == OK:
        status_pass(label)
    else:
        status_fail(f"{label}; see log")
    return code


def main(argv: list[str] | None = None) -> int:
    init_logging(None)
    args = build_parser().parse_args(argv)
    shell = ThemesShell(args.site)
    if args.command == "install":
        if args.source:
            code = install_plugin(args.site, args.source, theme=True, activate=True)
            return _report(code, f"theme install {args.source}")
        return shell.install()
    if args.command == "uninstall":
        if args.plugin:
            return _report(uninstall_plugin(args.site, args.plugin), f"theme uninstall {args.plugin}")
        return shell.uninstall()
    if args.command == "change":
        if args.theme:
            return _report(activate_theme(args.site, args.theme), f"theme change {args.theme}")
        return shell.change()
    return shell.main()


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
