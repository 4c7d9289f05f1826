from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import ProvisionConfig
from .lib.launcher import expand_command
from .lib.venv import venv_python
from .lib.workspace import Workspace


@dataclass(frozen=True)
class StepContext:
    """Everything a step action may read. Resolved once per run."""

    cfg: ProvisionConfig
    workspace: Workspace
    project_id: str

    @property
    def dry_run(self) -> bool:
        return self.cfg.dry_run

    @property
    def venv_dir(self) -> Path:
        return self.workspace.resolve_rel(self.cfg.venv_dir)

    @property
    def python(self) -> Path:
        return venv_python(self.venv_dir)

    @property
    def launch_argv(self) -> list[str]:
        return expand_command(
            self.cfg.launch_command, python=str(self.python), project_id=self.project_id
        )
