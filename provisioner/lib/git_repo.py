from __future__ import annotations

import logging
from typing import Optional

from ..pipeline import StepActionError
from .command import run_cmd
from .workspace import Workspace

logger = logging.getLogger(__name__)


def clone_or_update(
    *,
    url: str,
    workspace: Workspace,
    branch: Optional[str] = None,
    dry_run: bool = False,
) -> str:
    """Clone ``url`` into the workspace, or fast-forward an existing checkout.

    Returns "cloned" or "updated".
    """

    if workspace.is_git_checkout():
        logger.info("Updating existing checkout in %s", workspace.root)
        if branch:
            run_cmd(["git", "checkout", branch], cwd=str(workspace.root), dry_run=dry_run)
        run_cmd(["git", "pull", "--ff-only"], cwd=str(workspace.root), dry_run=dry_run)
        return "updated"

    if workspace.exists():
        raise StepActionError(
            f"{workspace.root} exists but is not a git checkout; move it away or accept the reinstall prompt"
        )

    workspace.root.parent.mkdir(parents=True, exist_ok=True)
    argv = ["git", "clone"]
    if branch:
        argv += ["--branch", branch]
    argv += [url, str(workspace.root)]
    run_cmd(argv, dry_run=dry_run)
    return "cloned"
