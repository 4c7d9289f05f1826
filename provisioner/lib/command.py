from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence

from ..pipeline import StepActionError

logger = logging.getLogger(__name__)


class CommandError(StepActionError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {_fmt_argv(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _spawn_error(argv: Sequence[str], e: OSError) -> CommandError:
    # 127 mirrors what a shell reports for a command it cannot start.
    return CommandError(argv, 127, str(e))


def run_cmd(
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr so failures can be reported.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise _spawn_error(argv_list, e) from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if p.returncode != 0:
        raise CommandError(argv_list, p.returncode, p.stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def run_foreground(
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    dry_run: bool = False,
) -> int:
    """Run an interactive command attached to the terminal and wait for it."""

    argv_list = list(argv)
    logger.info("RUN %s", _fmt_argv(argv_list))

    if dry_run:
        return 0

    try:
        p = subprocess.run(argv_list, cwd=cwd)
    except OSError as e:
        raise _spawn_error(argv_list, e) from e

    if p.returncode != 0:
        raise CommandError(argv_list, p.returncode)
    return p.returncode
