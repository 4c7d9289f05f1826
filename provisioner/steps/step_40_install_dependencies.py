from __future__ import annotations

import logging

from ..context import StepContext
from ..lib.venv import create_venv, pip_install_requirements
from ..pipeline import StepActionError

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    ordinal = 40
    title = "Install dependencies"

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    def __call__(self) -> None:
        cfg = self.ctx.cfg
        requirements = self.ctx.workspace.resolve_rel(cfg.manifest_path)
        if not requirements.is_file() and not self.ctx.dry_run:
            raise StepActionError(f"Dependency manifest not found: {requirements}")

        py = create_venv(self.ctx.venv_dir, python=cfg.venv_python, dry_run=self.ctx.dry_run)
        pip_install_requirements(
            py,
            requirements,
            cwd=str(self.ctx.workspace.root),
            dry_run=self.ctx.dry_run,
        )
