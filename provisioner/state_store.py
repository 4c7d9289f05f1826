from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

DONE_STEP_KEY = "DONE_STEP"
SAVED_SUFFIX = "_SAVED"


class StateIOError(OSError):
    """Raised when the checkpoint cannot be written durably."""


@dataclass
class PersistedState:
    done_step: int = 0
    saved_variables: Dict[str, str] = field(default_factory=dict)

    def mark_done(self, ordinal: int) -> None:
        # Checkpoints never move backwards except through reset().
        if ordinal > self.done_step:
            self.done_step = ordinal

    def reset(self) -> None:
        self.done_step = 0
        self.saved_variables.clear()


def _unquote(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_state(text: str) -> PersistedState:
    """Parse the KEY=VALUE layout, skipping lines that do not fit it."""

    state = PersistedState()
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.debug("Ignoring malformed state line %d: %r", lineno, raw)
            continue
        value = value.strip()

        if key == DONE_STEP_KEY:
            try:
                done = int(_unquote(value))
            except ValueError:
                logger.debug("Ignoring non-integer %s on line %d", DONE_STEP_KEY, lineno)
                continue
            if done < 0:
                continue
            state.done_step = done
        elif key.endswith(SAVED_SUFFIX) and len(key) > len(SAVED_SUFFIX):
            name = key[: -len(SAVED_SUFFIX)].lower()
            state.saved_variables[name] = _unquote(value)
        # Unknown keys are left for newer versions.
    return state


def render_state(state: PersistedState) -> str:
    lines = [f"{DONE_STEP_KEY}={int(state.done_step)}"]
    for name in sorted(state.saved_variables):
        value = state.saved_variables[name]
        if "\n" in value or "\r" in value:
            raise ValueError(f"Saved value for {name!r} must be a single line")
        lines.append(f'{name.upper()}{SAVED_SUFFIX}="{value}"')
    return "\n".join(lines) + "\n"


def state_file_exists(path: str) -> bool:
    return Path(path).is_file()


def load_state(path: str) -> PersistedState:
    """Load state from disk; a missing or unreadable file is a fresh start."""

    p = Path(path)
    if not p.exists():
        return PersistedState()
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read state file %s (%s); starting fresh", path, e)
        return PersistedState()
    return parse_state(text)


def save_state(path: str, state: PersistedState) -> None:
    """Rewrite the whole state file."""

    p = Path(path)
    content = render_state(state)
    tmp = p.with_name(p.name + ".tmp")
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, p)
    except OSError as e:
        raise StateIOError(f"Could not write state file {path}: {e}") from e
    logger.debug("Saved state to %s (done_step=%d)", path, state.done_step)
