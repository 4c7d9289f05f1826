from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.launcher import write_launcher

logger = logging.getLogger(__name__)


class CreateLauncherStep:
    ordinal = 50
    title = "Create launcher"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        write_launcher(
            self.ctx.workspace.root,
            self.ctx.cfg.launcher_name,
            self.ctx.launch_argv,
            dry_run=self.ctx.dry_run,
        )
