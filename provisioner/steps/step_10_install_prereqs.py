from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.prereqs import ensure_tools

logger = logging.getLogger(__name__)


class InstallPrerequisitesStep:
    ordinal = 10
    title = "Install prerequisites"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        cfg = self.ctx.cfg
        installed = ensure_tools(
            cfg.required_tools,
            install_command=cfg.tool_install_command,
            dry_run=self.ctx.dry_run,
        )
        if installed:
            logger.info("Installed prerequisites: %s", ", ".join(installed))
