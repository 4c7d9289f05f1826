from __future__ import annotations

import logging
import shutil
from typing import List, Sequence

from ..pipeline import StepActionError
from .command import run_cmd

logger = logging.getLogger(__name__)


def missing_tools(tools: Sequence[str]) -> List[str]:
    return [t for t in tools if shutil.which(t) is None]


def ensure_tools(
    tools: Sequence[str],
    *,
    install_command: Sequence[str] = (),
    dry_run: bool = False,
) -> List[str]:
    """Make sure every tool is on PATH, installing the missing ones.

    ``install_command`` is an argv template; ``{tool}`` is replaced with
    the tool name. Returns the tools that had to be installed.
    """

    missing = missing_tools(tools)
    if not missing:
        logger.info("All prerequisites present: %s", ", ".join(tools) or "(none)")
        return []

    if not install_command:
        raise StepActionError(
            f"Missing required tools: {', '.join(missing)} "
            "(install them or set prerequisites.install_command)"
        )

    for tool in missing:
        logger.info("Installing missing prerequisite %s", tool)
        run_cmd([a.replace("{tool}", tool) for a in install_command], dry_run=dry_run)

    if dry_run:
        return missing

    still_missing = missing_tools(missing)
    if still_missing:
        raise StepActionError(f"Tools still missing after install: {', '.join(still_missing)}")
    return missing
