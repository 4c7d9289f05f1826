from __future__ import annotations

import logging
from typing import Callable

from .state_store import PersistedState

logger = logging.getLogger(__name__)


def maybe_reset(
    *,
    state_file_present: bool,
    workspace_exists: bool,
    confirm: Callable[[], bool],
    reset: Callable[[], None],
    state: PersistedState,
    save: Callable[[PersistedState], None],
) -> bool:
    """Offer a clean reinstall when a workspace exists but no state file does.

    Only a first run (no state file) can trigger this. Once a state file
    exists the gate stays closed, even if the workspace later disappears.
    Returns True when the reset was performed.
    """

    if state_file_present or not workspace_exists:
        return False

    logger.info("Found an existing workspace without saved progress")
    if not confirm():
        logger.info("Keeping the existing workspace")
        return False

    logger.warning("Removing the existing workspace for a clean reinstall")
    reset()
    state.reset()
    save(state)
    return True
