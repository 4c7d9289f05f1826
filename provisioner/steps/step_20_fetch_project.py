from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.git_repo import clone_or_update
from ..pipeline import StepActionError

logger = logging.getLogger(__name__)


class FetchProjectStep:
    ordinal = 20
    title = "Fetch project repository"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        url = self.ctx.cfg.repo_url
        if not url:
            raise StepActionError("repo.url is required to fetch the project")

        outcome = clone_or_update(
            url=url,
            workspace=self.ctx.workspace,
            branch=self.ctx.cfg.repo_branch,
            dry_run=self.ctx.dry_run,
        )
        logger.info("Project repository %s into %s", outcome, self.ctx.workspace.root)
