"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_pass/status_fail: concise console status lines (with run-id).
- run_cmd: thin wrapper over subprocess.run with check + text enabled.
- log: debug-level logger for normal status lines (file-oriented).
- db_ident: normalized identifier for DB/user names.
- require: log a SKIP line when a condition does not hold.
- _http_uid: resolve uid for the "http" user or -1 if missing.
- _normalize_console_parts: parse a console command into argv parts.
"""

import json
import logging
import os
import pwd
import shlex
import subprocess
from logging.handlers import RotatingFileHandler
from typing import Any, List, Sequence

from config import USER


_RUN_ID = ""


def _gen_run_id() -> str:
    try:
        import uuid

        return uuid.uuid4().hex[:8]
    except Exception:
        return "00000000"


def init_logging(run_id: str | None = None) -> str:
    """Initialize logging with console + rotating file handlers.

    - Console: minimal, INFO+, intended for terse status only.
    - File: DEBUG+, rich format, written to log/installer-<rid>.log
    Returns the run-id used.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID

    rid = run_id or os.environ.get("INSTALLER_RID") or _gen_run_id()
    _RUN_ID = rid

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Project root = parent of 'installer'
    try:
        root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
        log_dir = os.path.join(root_dir, "log")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, f"installer-{rid}.log")
    except OSError:
        logfile = os.path.abspath(f"installer-{rid}.log")

    # Quiet any pre-existing console handlers
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(logging.CRITICAL)

    has_file = any(
        isinstance(h, RotatingFileHandler)
        and getattr(h, "baseFilename", "").endswith(os.path.basename(logfile))
        for h in root.handlers
    )
    if not has_file:
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        root.addHandler(fh)

    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in root.handlers
    ):
        ch = logging.StreamHandler()
        ch.setLevel(logging.CRITICAL)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(ch)

    logging.debug("Logging initialized. run_id=%s file=%s", rid, logfile)
    # Dispatched sub-commands log under the same run-id
    os.environ["INSTALLER_RID"] = rid
    return rid


def _rid() -> str:
    return _RUN_ID or os.environ.get("INSTALLER_RID", "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def run_cmd(args: List[str]) -> None:
    subprocess.run(args, check=True, text=True)


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


def db_ident(site: str) -> str:
    parts: list[str] = []
    for char in site:
        if char.isalnum():
            parts.append(char)
            continue
        parts.append("_")
    return "".join(parts)


def require(condition: bool, message: str, level: str = "info") -> bool:
    if condition:
        return True

    if level == "error":
        logging.error(f"SKIP: {message}")
    elif level == "warning":
        logging.warning(f"SKIP: {message}")
    else:
        log(f"SKIP: {message}")

    return False


def _http_uid() -> int:
    try:
        return pwd.getpwnam(USER).pw_uid
    except KeyError:
        return -1


def _normalize_console_parts(command: str | Sequence[str]) -> list[str]:
    """Normalize command into argv parts.
    Accepts str (parsed with shlex) or sequence of strings.
    Returns a list; empty list indicates an error already reported.
    """
    if command is None:
        logging.error("console called with None command")
        return []
    if isinstance(command, str):
        text = command.strip()
        if not text:
            logging.error("console called with empty command")
            return []
        try:
            return shlex.split(text)
        except ValueError as err:
            logging.error("Could not parse command: %s", err)
            return []
    if isinstance(command, (list, tuple)):
        parts = [str(p) for p in command]
        if not parts:
            logging.error("console called with empty argv list")
            return []
        return parts
    logging.error("Unsupported command type: %s", type(command).__name__)
    return []


def parse_json_relaxed(text: str, default: Any) -> Any:
    """Parse JSON with basic tolerance for noise.

    - Strips BOM
    - Extracts substring between first '[' and last ']' or first '{' and last '}'
    - Returns default on failure
    """
    if text is None:
        return default
    s = text.lstrip("\ufeff").strip()
    try:
        return json.loads(s)
    except ValueError:
        pass
    for open_c, close_c in (("[", "]"), ("{", "}")):
        lb = s.find(open_c)
        rb = s.rfind(close_c)
        if lb == -1 or rb <= lb:
            continue
        try:
            return json.loads(s[lb : rb + 1])
        except ValueError:
            continue
    return default
