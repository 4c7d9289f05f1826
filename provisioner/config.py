from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_ENV_VAR = "PROVISIONER_CONFIG"
DEFAULT_CONFIG_PATH = "provisioner.yaml"


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def workspace_dir(self) -> str:
        return str(self._section("paths").get("workspace_dir") or "workspace")

    @property
    def state_file(self) -> str:
        return str(self._section("paths").get("state_file") or "provisioner.state")

    @property
    def log_file(self) -> str:
        return str(self._section("paths").get("log_file") or "provisioner.log")

    @property
    def repo_url(self) -> Optional[str]:
        url = self._section("repo").get("url")
        return str(url) if url else None

    @property
    def repo_branch(self) -> Optional[str]:
        branch = self._section("repo").get("branch")
        return str(branch) if branch else None

    @property
    def required_tools(self) -> List[str]:
        tools = self._section("prerequisites").get("tools")
        if tools is None:
            return ["git"]
        return [str(t) for t in tools]

    @property
    def tool_install_command(self) -> List[str]:
        return [str(a) for a in (self._section("prerequisites").get("install_command") or [])]

    @property
    def manifest_path(self) -> str:
        return str(self._section("manifest").get("path") or "requirements.txt")

    @property
    def manifest_remove(self) -> List[str]:
        return [str(p) for p in (self._section("manifest").get("remove") or [])]

    @property
    def manifest_replace(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self._section("manifest").get("replace") or {}).items()}

    @property
    def settings_path(self) -> str:
        return str(self._section("settings").get("path") or ".env")

    @property
    def settings_key(self) -> str:
        return str(self._section("settings").get("key") or "PROJECT_ID")

    @property
    def settings_extra(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self._section("settings").get("extra") or {}).items()}

    @property
    def venv_dir(self) -> str:
        return str(self._section("venv").get("dir") or ".venv")

    @property
    def venv_python(self) -> str:
        return str(self._section("venv").get("python") or sys.executable)

    @property
    def launcher_name(self) -> str:
        return str(self._section("launcher").get("name") or "launch")

    @property
    def launch_command(self) -> List[str]:
        cmd = self._section("launcher").get("command")
        if not cmd:
            return ["{python}", "main.py"]
        return [str(a) for a in cmd]

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))


def default_config_path() -> Optional[str]:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return env
    if Path(DEFAULT_CONFIG_PATH).exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load a YAML config; no path means built-in defaults."""

    if path is None:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return ProvisionConfig(raw=raw)
