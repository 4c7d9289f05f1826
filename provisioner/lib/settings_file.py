from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

logger = logging.getLogger(__name__)

_NEEDS_QUOTES = re.compile(r"[\s#\"']")


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # .env, .ini, .properties and anything else: KEY=VALUE lines.
    return "keyvalue"


def _format_value(value: str) -> str:
    if value and not _NEEDS_QUOTES.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def update_keyvalue_text(text: str, values: Mapping[str, str]) -> str:
    """Set KEY=VALUE lines, keeping comments, order and unrelated keys."""

    pending = dict(values)
    out = []
    for line in text.splitlines():
        stripped = line.strip()
        key, sep, _ = stripped.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if sep and not stripped.startswith(("#", ";")) and key in pending:
            out.append(f"{key}={_format_value(pending.pop(key))}")
        else:
            out.append(line)
    for key, value in pending.items():
        out.append(f"{key}={_format_value(value)}")
    return "\n".join(out) + "\n"


def _set_dotted(data: Dict[str, Any], dotted: str, value: str) -> None:
    parts = dotted.split(".")
    node = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def _load_mapping(path: Path, fmt: str) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    data = json.loads(text) if fmt == "json" else (yaml.safe_load(text) or {})
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain an object/dict: {path}")
    return data


def set_config_values(path: Path, values: Mapping[str, str], *, dry_run: bool = False) -> None:
    """Write ``values`` into a configuration file, creating it if needed.

    JSON and YAML keys may be dotted (``app.project_id``) to reach nested
    mappings.
    """

    fmt = _detect_format(path)
    if fmt == "keyvalue":
        current = path.read_text(encoding="utf-8") if path.exists() else ""
        content = update_keyvalue_text(current, values)
    else:
        data = _load_mapping(path, fmt)
        for key, value in values.items():
            _set_dotted(data, key, value)
        if fmt == "json":
            content = json.dumps(data, indent=2) + "\n"
        else:
            content = yaml.safe_dump(data, sort_keys=False)

    if dry_run:
        logger.info("Would update %s (%s)", path, ", ".join(values))
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Updated %s (%s)", path, ", ".join(values))
