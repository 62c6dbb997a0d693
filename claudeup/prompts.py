"""Interactive questions asked on the terminal."""

from __future__ import annotations

import sys
from typing import List, Sequence


def _ask(prompt: str) -> str:
    """Show ``prompt`` and return the next line of input, trimmed."""
    print(prompt, end="", flush=True)
    return sys.stdin.readline().strip()


def prompt_choice(prompt: str, default: str, assume_yes: bool = False) -> str:
    """Ask for a value, falling back to ``default`` on empty input.

    With ``assume_yes`` nothing is asked and ``default`` is returned.
    """
    if assume_yes:
        return default
    answer = _ask(f"{prompt} [{default}]: ")
    return answer or default


def confirm_proceed(assume_yes: bool = False) -> bool:
    """Ask whether to go on; an empty answer means yes."""
    if assume_yes:
        return True
    choice = prompt_choice("Proceed?", "y", assume_yes).lower()
    return choice in ("y", "yes")


def confirm_yes_no(question: str, assume_yes: bool = False) -> bool:
    """Ask a yes/no question; an empty answer means no."""
    if assume_yes:
        return True
    answer = _ask(f"{question} [y/N]: ").lower()
    return answer in ("y", "yes")


def select_from_list(
    message: str, options: Sequence[str], assume_yes: bool = False
) -> List[str]:
    """Let the user pick some of ``options`` by number.

    An empty answer or ``all`` picks every option, ``none`` picks nothing.
    The chosen options come back in their original order. Raises
    ``ValueError`` for a number that is not on the list.
    """
    choices = list(options)
    if assume_yes or not choices:
        return choices

    print(message)
    for number, option in enumerate(choices, start=1):
        print(f"  {number}) {option}")
    answer = _ask("Enter numbers separated by commas, 'all' or 'none' [all]: ").lower()

    if answer in ("", "all"):
        return choices
    if answer == "none":
        return []

    picked = set()
    for token in answer.replace(",", " ").split():
        try:
            number = int(token)
        except ValueError:
            raise ValueError(f"invalid selection: {token}") from None
        if not 1 <= number <= len(choices):
            raise ValueError(
                f"invalid selection: {number} (must be 1-{len(choices)})"
            )
        picked.add(number - 1)
    return [option for index, option in enumerate(choices) if index in picked]