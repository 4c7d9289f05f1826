from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.command import run_foreground

logger = logging.getLogger(__name__)


class LaunchApplicationStep:
    ordinal = 60
    title = "Launch application"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        # Blocks until the application exits.
        run_foreground(
            self.ctx.launch_argv,
            cwd=str(self.ctx.workspace.root),
            dry_run=self.ctx.dry_run,
        )
        logger.info("Application exited")
