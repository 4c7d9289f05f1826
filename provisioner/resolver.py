from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class InputError(ValueError):
    """Raised when a user-supplied configuration value is unusable."""


class EmptyInputError(InputError):
    """Raised when a configuration value would resolve to a blank string."""


class MultiLineInputError(InputError):
    """Raised when a configuration value spans more than one line."""


def _single_line(value: str, name: str) -> str:
    if "\n" in value or "\r" in value:
        raise MultiLineInputError(f"The {name} must be a single line")
    return value


@dataclass(frozen=True)
class ConfigResolution:
    value: str
    changed: bool


def resolve_config_value(
    *,
    persisted: Optional[str],
    override: Optional[str],
    prompt: Callable[[], str],
    name: str = "project id",
) -> ConfigResolution:
    """Pick the effective value for one configuration item.

    Precedence:
    - a saved value wins unless a different, non-blank override is given
      (the override then replaces it and a warning is logged);
    - with nothing saved, a non-blank override is used;
    - otherwise the user is prompted and a blank answer is rejected.

    ``changed`` tells the caller the saved value must be rewritten.
    """

    saved = (persisted or "").strip()
    given = (override or "").strip()

    if not saved:
        if given:
            return ConfigResolution(value=_single_line(given, name), changed=True)
        answer = (prompt() or "").strip()
        if not answer:
            raise EmptyInputError(f"A {name} is required and cannot be empty")
        return ConfigResolution(value=_single_line(answer, name), changed=True)

    if given and given != saved:
        _single_line(given, name)
        logger.warning(
            "The %s given on the command line (%s) differs from the saved value (%s); updating",
            name,
            given,
            saved,
        )
        return ConfigResolution(value=given, changed=True)

    return ConfigResolution(value=saved, changed=False)
