# console.py
# Invariants (site console JSON consistency):
# - All CMS console access goes through these wrappers; callers never build flags.
# - Read-ish commands (list/get/--fields=) are coerced to JSON at the source by
#   appending: --format=json --quiet --no-color
# - Parsing strips ANSI and PHP noise and extracts real JSON when present.
# - Accept commands with or without a leading console binary; sanitize duplicates.
# - Logs: one PASS/FAIL per call; console stays minimal; file logs keep details.

from __future__ import annotations

import json
import logging
import os
import re
import subprocess
import time
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from config import CONSOLE_BIN, SITE_ROOT_DIR, USER
from installer.utils import _http_uid, _normalize_console_parts, log, parse_json_relaxed

CONSOLE_TIMEOUT = int(os.environ.get("CONSOLE_TIMEOUT", "600"))  # seconds

# ── Noise filters ───────────────────────────────────────────────────────────────
ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
NOISE_PREFIXES = (
    "PHP Warning:", "PHP Notice:", "PHP Deprecated:", "PHP Fatal error:",
    "Warning:", "Notice:", "Deprecated:", "Fatal error:", "Error:", "PHP:"
)
NOISE_PATTERNS = (
    re.compile(r"^#\d+ "),               # stack frames
    re.compile(r"^Stack Trace:"),
    re.compile(r"^-{3,}$"),              # console rules
)


def _strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def _drop_noise_lines(text: str) -> list[str]:
    out: list[str] = []
    for ln in text.splitlines():
        ln = ln.strip()
        if not ln:
            continue
        if ln.startswith(NOISE_PREFIXES):
            continue
        if any(p.search(ln) for p in NOISE_PATTERNS):
            continue
        out.append(ln)
    return out


def extract_json_blob(s: str) -> Optional[str]:
    """Return the first balanced JSON object/array found in text.

    Starts at the earliest '[' or '{' and walks to its matching closer,
    skipping brackets inside string literals. None if nothing balances.
    """
    if not s:
        return None
    starts = [i for i in (s.find("["), s.find("{")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    closer = {"[": "]", "{": "}"}[s[start]]
    opener = s[start]

    depth = 0
    in_str = False
    esc = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_str:
            if esc:
                esc = False
            elif ch == "\\":
                esc = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None


def _decode_scalar(one: str) -> Any:
    try:
        return json.loads(one)
    except ValueError:
        if len(one) >= 2 and one[0] == one[-1] and one[0] in "\"'":
            return one[1:-1]
        return one


# ── Internal helpers ────────────────────────────────────────────────────────────
def site_path(target: Union[str, Path]) -> Path:
    if isinstance(target, Path):
        return target
    return Path(SITE_ROOT_DIR) / str(target)


def _console_base_argv(path: Path) -> list[str]:
    parts = [str(path / CONSOLE_BIN)]
    http_uid = _http_uid()
    if http_uid <= 0:
        return parts
    if os.geteuid() == http_uid:
        return parts
    return ["sudo", "-u", USER] + parts


def _sanitize_parts(parts: list[str]) -> list[str]:
    # drop any leading console binary tokens
    binary = os.path.basename(CONSOLE_BIN)
    while parts and os.path.basename(parts[0]) == binary:
        parts = parts[1:]
    return parts


def _fmt_cmd_for_log(args: list[str]) -> str:
    if not args:
        return ""
    start = 0
    if args[0] == "sudo" and len(args) >= 4 and args[1] == "-u":
        start = 3
    return " ".join(["console"] + args[start + 1:])


def _console_run(target: Union[str, Path], parts: list[str], timeout: int = CONSOLE_TIMEOUT) -> Tuple[bool, str, str, int]:
    path = site_path(target)
    args = _console_base_argv(path) + parts

    t0 = time.monotonic()
    try:
        proc = subprocess.run(
            args,
            cwd=str(path),
            capture_output=True,
            timeout=timeout,
            env=os.environ.copy(),
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired:
        dt = time.monotonic() - t0
        logging.error("%s timeout after %.1fs", _fmt_cmd_for_log(args), dt)
        return False, "", f"timeout after {dt:.1f}s", 124
    except OSError as err:
        logging.error("%s could not start: %s", _fmt_cmd_for_log(args), err)
        return False, "", str(err), 127

    dt = time.monotonic() - t0
    ok = proc.returncode == 0
    if ok:
        log(f"PASS: {_fmt_cmd_for_log(args)} ({dt:.1f}s)")
    else:
        clean_err = "\n".join(_drop_noise_lines(proc.stderr or ""))
        logging.error(
            "%s exit=%s\nSTDERR: %s",
            _fmt_cmd_for_log(args),
            proc.returncode,
            clean_err.strip(),
        )
    return ok, (proc.stdout or ""), (proc.stderr or ""), proc.returncode


# ── Parsing ─────────────────────────────────────────────────────────────────────
def _parse_json_loose(combined: str) -> Any | None:
    """
    Best-effort JSON parse with noise scrubbing.
    Order:
      1) Strip ANSI; drop PHP noise lines.
      2) Extract an embedded JSON container and parse strictly, then relaxed.
      3) Single clean line: decode as a JSON primitive or bare string.
      4) Several lines: list of lines.
    """
    cleaned_text = "\n".join(_drop_noise_lines(_strip_ansi(combined))).strip()
    if not cleaned_text:
        return None

    blob = extract_json_blob(cleaned_text)
    if blob is not None:
        try:
            return json.loads(blob)
        except ValueError:
            return parse_json_relaxed(blob, default=None)

    lines = cleaned_text.splitlines()
    if len(lines) == 1:
        return _decode_scalar(lines[0])
    return lines


# ── Public API ──────────────────────────────────────────────────────────────────
def _looks_like_read_cmd(parts: list[str]) -> bool:
    if "list" in parts or "get" in parts:
        return True
    return any(p.startswith("--fields=") for p in parts)


def _append_format_json(parts: list[str]) -> list[str]:
    parts = parts[:]
    if not any(p.startswith("--format=") for p in parts):
        parts.append("--format=json")
    if "--no-color" not in parts:
        parts.append("--no-color")
    if "--quiet" not in parts:
        parts.append("--quiet")
    return parts


def console_json(site: Union[str, Path], command: Any, timeout: int = CONSOLE_TIMEOUT) -> Tuple[bool, Any]:
    """Run a console command and return (ok, data).

    Read-ish commands yield parsed JSON (an empty list when nothing parses);
    other commands yield whatever clean output they print, or [].
    """
    parts = _sanitize_parts(_normalize_console_parts(command))
    if not parts:
        return False, []

    readish = _looks_like_read_cmd(parts)
    if readish:
        parts = _append_format_json(parts)
    ok, out, err, _ = _console_run(site, parts, timeout=timeout)

    if err:
        logging.debug("Stderr (len %d): %s", len(err), _drop_noise_lines(err)[:3])

    data = _parse_json_loose(out)
    if data is None:
        if readish:
            logging.warning("console_json: returning empty array because JSON parse failed")
        data = []
    return ok, data


def console_cmd(site: Union[str, Path], command: Any, timeout: int = CONSOLE_TIMEOUT) -> bool:
    """Boolean wrapper. Delegates to console_json and discards data."""
    ok, _ = console_json(site, command, timeout=timeout)
    return ok
