from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from ..config import InstallConfig
from ..lib.docker import docker_cp
from ..manifests import load_manifest

logger = logging.getLogger(__name__)


def _debs_to_copy(download_dir: Path, state: Dict[str, Any], *, dry_run: bool) -> List[str]:
    if dry_run:
        # Nothing was written to disk; plan from the recorded download list.
        files = ((state.get("execution") or {}).get("downloads") or {}).get("files") or []
        return sorted(f for f in files if f.endswith(".deb"))
    # Debug symbol packages (.ddeb) are deliberately left on the host.
    return sorted(p.name for p in download_dir.glob("*.deb"))


class CopyPackagesStep:
    step_id = "30_copy_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        manifest = load_manifest(cfg.manifest_path)
        download_dir = Path(cfg.download_dir)

        names = _debs_to_copy(download_dir, state, dry_run=cfg.dry_run)
        if not names:
            raise RuntimeError(f"No .deb packages found in {download_dir}")

        staging = manifest.staging_dir.rstrip("/") + "/"
        logger.info("Copying %d package(s) into %s:%s", len(names), cfg.container_name, staging)

        copied: List[str] = []
        for name in names:
            logger.info("  * Copying %s", name)
            docker_cp(str(download_dir / name), cfg.container_name, staging, dry_run=cfg.dry_run)
            copied.append(staging + name)

        state.setdefault("execution", {})["copied"] = copied
        return state
