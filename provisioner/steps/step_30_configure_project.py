from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.manifest import rewrite_requirements
from ..lib.settings_file import set_config_values

logger = logging.getLogger(__name__)


class ConfigureProjectStep:
    ordinal = 30
    title = "Configure project"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        cfg = self.ctx.cfg
        ws = self.ctx.workspace

        if cfg.manifest_remove or cfg.manifest_replace:
            rewrite_requirements(
                ws.resolve_rel(cfg.manifest_path),
                remove=cfg.manifest_remove,
                replace=cfg.manifest_replace,
                dry_run=self.ctx.dry_run,
            )

        values = dict(cfg.settings_extra)
        values[cfg.settings_key] = self.ctx.project_id
        set_config_values(ws.resolve_rel(cfg.settings_path), values, dry_run=self.ctx.dry_run)
        logger.info("Project configured for %s", self.ctx.project_id)
