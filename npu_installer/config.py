from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

DEFAULT_CONTAINER_NAME = "frigate"
DEFAULT_DOWNLOAD_DIR = "~/npu-drivers"
DEFAULT_RESTART_WAIT = 8.0
DEFAULT_DOWNLOAD_TIMEOUT = 60.0

# Environment overrides, same names the shell installer used.
ENV_KEYS = {
    "CONTAINER_NAME": "container_name",
    "DOWNLOAD_DIR": "download_dir",
}


@dataclass(frozen=True)
class InstallConfig:
    """Typed view over state['config']."""

    raw: Dict[str, Any]

    @property
    def container_name(self) -> str:
        return str(self.raw.get("container_name") or DEFAULT_CONTAINER_NAME)

    @property
    def download_dir(self) -> str:
        return str(Path(str(self.raw.get("download_dir") or DEFAULT_DOWNLOAD_DIR)).expanduser())

    @property
    def manifest_path(self) -> Optional[str]:
        p = self.raw.get("manifest_path")
        return str(p) if p else None

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def restart_wait(self) -> float:
        v = self.raw.get("restart_wait")
        return float(DEFAULT_RESTART_WAIT if v is None else v)

    @property
    def download_timeout(self) -> float:
        v = self.raw.get("download_timeout")
        return float(DEFAULT_DOWNLOAD_TIMEOUT if v is None else v)

    @property
    def cleanup(self) -> Optional[bool]:
        """None means ask the user."""
        v = self.raw.get("cleanup")
        return None if v is None else bool(v)

    @property
    def require_npu(self) -> bool:
        return bool(self.raw.get("require_npu", False))


def env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    return {key: environ[name] for name, key in ENV_KEYS.items() if environ.get(name)}


def merge_config(
    cfg: Dict[str, Any],
    *,
    file_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    cli_values: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Layer config sources onto cfg: file < environment < CLI.

    None values in cli_values mean "not given" and are skipped.
    """

    for k, v in (file_values or {}).items():
        cfg[k] = v
    cfg.update(env_overrides(os.environ if environ is None else environ))
    for k, v in (cli_values or {}).items():
        if v is not None:
            cfg[k] = v
    return cfg
