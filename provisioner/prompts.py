from __future__ import annotations

from typing import Callable

InputFn = Callable[[str], str]

_YES = {"y", "yes"}
_NO = {"n", "no"}


def ask_yes_no(question: str, *, input_fn: InputFn = input) -> bool:
    """Ask until the answer is y/yes or n/no. End of input means no."""

    while True:
        try:
            answer = input_fn(f"{question} [y/n]: ").strip().lower()
        except EOFError:
            return False
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        print("Please answer 'y' or 'n'.")


def ask_line(question: str, *, input_fn: InputFn = input) -> str:
    try:
        return input_fn(f"{question}: ")
    except EOFError:
        return ""
