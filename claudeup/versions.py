"""Version strings of the Claude CLI and how they compare."""

from __future__ import annotations

import re
import subprocess
from typing import List

# Older releases mishandle raw terminal mode when stdin is not a terminal.
MIN_CLAUDE_VERSION = "1.0.80"
UNKNOWN_VERSION = "unknown"

_LEADING_DIGITS = re.compile(r"[0-9]+")


def parse_version(version: str) -> List[int]:
    """Numeric parts of a version such as ``1.0.72``, ``v1.0.72`` or ``claude 1.0.72``.

    Each dot-separated part contributes its leading digits; parts without
    any are skipped.
    """
    version = version.removeprefix("v").removeprefix("claude ")
    numbers = []
    for part in version.split("."):
        digits = _LEADING_DIGITS.match(part)
        if digits:
            numbers.append(int(digits.group()))
    return numbers


def is_version_outdated(current: str, minimum: str) -> bool:
    """Whether ``current`` is older than ``minimum``.

    A version with fewer parts than the minimum counts as older.
    """
    current_parts = parse_version(current)
    for index, required in enumerate(parse_version(minimum)):
        if index >= len(current_parts):
            return True
        if current_parts[index] != required:
            return current_parts[index] < required
    return False


def claude_version() -> str:
    """First line of ``claude --version``, or ``unknown`` if it cannot run."""
    try:
        result = subprocess.run(
            ["claude", "--version"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return UNKNOWN_VERSION
    return result.stdout.split("\n")[0].strip()