from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..pipeline import StepActionError

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def normalize_name(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def requirement_name(line: str) -> Optional[str]:
    """Return the normalized package name of a requirement line, if any."""

    stripped = line.strip()
    if not stripped or stripped.startswith(("#", "-")):
        return None
    m = _NAME_RE.match(stripped)
    if not m:
        return None
    return normalize_name(m.group(1))


def rewrite_lines(
    lines: Sequence[str],
    *,
    remove: Sequence[str] = (),
    replace: Mapping[str, str] | None = None,
) -> list[str]:
    drop = {normalize_name(n) for n in remove}
    swap = {normalize_name(k): v for k, v in (replace or {}).items()}

    out: list[str] = []
    for line in lines:
        name = requirement_name(line)
        if name in drop:
            logger.info("Dropping requirement %s", line.strip())
            continue
        if name in swap:
            logger.info("Replacing requirement %s -> %s", line.strip(), swap[name])
            out.append(swap[name])
            continue
        out.append(line)
    return out


def rewrite_requirements(
    path: Path,
    *,
    remove: Sequence[str] = (),
    replace: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> bool:
    """Apply drop/replace rules to a requirements file. Returns True if it changed."""

    if not path.is_file():
        raise StepActionError(f"Dependency manifest not found: {path}")

    original = path.read_text(encoding="utf-8").splitlines()
    updated = rewrite_lines(original, remove=remove, replace=replace)
    if updated == original:
        logger.info("Dependency manifest %s needs no changes", path)
        return False

    if dry_run:
        logger.info("Would rewrite %s", path)
    else:
        path.write_text("\n".join(updated) + "\n", encoding="utf-8")
    return True
