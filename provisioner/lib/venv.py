from __future__ import annotations

import logging
import os
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def venv_python(venv_dir: Path) -> Path:
    if os.name == "nt":
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def create_venv(venv_dir: Path, *, python: str, dry_run: bool = False) -> Path:
    """Create a virtual environment unless a usable one already exists."""

    py = venv_python(venv_dir)
    if py.exists():
        logger.info("Reusing virtual environment %s", venv_dir)
        return py
    run_cmd([python, "-m", "venv", str(venv_dir)], dry_run=dry_run)
    return py


def pip_install_requirements(
    py: Path,
    requirements: Path,
    *,
    cwd: str | None = None,
    dry_run: bool = False,
) -> None:
    run_cmd([str(py), "-m", "pip", "install", "--upgrade", "pip"], cwd=cwd, dry_run=dry_run)
    run_cmd([str(py), "-m", "pip", "install", "-r", str(requirements)], cwd=cwd, dry_run=dry_run)
