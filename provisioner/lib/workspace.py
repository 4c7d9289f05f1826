from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class WorkspaceViolation(ValueError):
    pass


def _make_writable_and_retry(func, path, _exc) -> None:
    # Git object files are read-only on Windows.
    os.chmod(path, stat.S_IWRITE)
    func(path)


@dataclass(frozen=True)
class Workspace:
    root: Path

    @classmethod
    def from_path(cls, root: str | Path) -> "Workspace":
        p = Path(root).expanduser()
        try:
            p = p.resolve()
        except OSError:
            p = p.absolute()
        return cls(root=p)

    def exists(self) -> bool:
        """True when the workspace directory is present and not empty."""
        if not self.root.is_dir():
            return False
        return any(self.root.iterdir())

    def is_git_checkout(self) -> bool:
        return (self.root / ".git").exists()

    def resolve_rel(self, rel: str | Path) -> Path:
        """Resolve a configured relative path within the workspace."""
        rp = Path(rel)
        if rp.is_absolute():
            raise WorkspaceViolation(f"Absolute paths are not allowed: {rel}")

        candidate = (self.root / rp).resolve()
        try:
            candidate.relative_to(self.root)
        except ValueError as e:
            raise WorkspaceViolation(f"Path escapes workspace: {rel}") from e
        return candidate

    def remove(self) -> None:
        if not self.root.exists():
            return
        logger.info("Removing workspace %s", self.root)
        if sys.version_info >= (3, 12):
            shutil.rmtree(self.root, onexc=_make_writable_and_retry)
        else:
            shutil.rmtree(self.root, onerror=_make_writable_and_retry)
