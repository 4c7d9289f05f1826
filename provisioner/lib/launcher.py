from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def expand_command(argv: Sequence[str], *, python: str, project_id: str) -> list[str]:
    return [a.replace("{python}", python).replace("{project_id}", project_id) for a in argv]


def render_posix_launcher(argv: Sequence[str]) -> str:
    cmd = " ".join(shlex.quote(a) for a in argv)
    return f'#!/bin/sh\ncd "$(dirname "$0")" || exit 1\nexec {cmd} "$@"\n'


def render_windows_launcher(argv: Sequence[str]) -> str:
    return "\r\n".join(
        [
            "@echo off",
            'cd /d "%~dp0"',
            f"{subprocess.list2cmdline(list(argv))} %*",
            "",
        ]
    )


def launcher_path(directory: Path, name: str, *, windows: Optional[bool] = None) -> Path:
    if windows is None:
        windows = os.name == "nt"
    return directory / (f"{name}.cmd" if windows else f"{name}.sh")


def write_launcher(
    directory: Path,
    name: str,
    argv: Sequence[str],
    *,
    windows: Optional[bool] = None,
    dry_run: bool = False,
) -> Path:
    """Write a script that starts the application from ``directory``."""

    if windows is None:
        windows = os.name == "nt"
    path = launcher_path(directory, name, windows=windows)
    content = render_windows_launcher(argv) if windows else render_posix_launcher(argv)

    if dry_run:
        logger.info("Would write launcher %s", path)
        return path

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="")
    if not windows:
        path.chmod(0o755)
    logger.info("Wrote launcher %s", path)
    return path
