from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, List

from ..config import InstallConfig
from ..lib.docker import container_path_exists, docker_cp
from ..lib.pkg import dpkg_install_with_fix, dpkg_purge, ldconfig, remove_files
from ..manifests import load_manifest

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "40_install_packages"

    def _restore_missing(self, cfg: InstallConfig, copied: List[str], staging: str) -> List[str]:
        """Re-copy packages that vanished from the container since 30_copy_packages.

        A recreated container starts with an empty staging dir.
        """

        missing = [p for p in copied if not container_path_exists(cfg.container_name, p, dry_run=cfg.dry_run)]
        if not missing:
            return []

        logger.warning("%d package(s) missing in %s, copying them again", len(missing), cfg.container_name)
        download_dir = Path(cfg.download_dir)
        for path in missing:
            src = download_dir / posixpath.basename(path)
            if not src.exists():
                raise RuntimeError(
                    f"{path} is gone from {cfg.container_name} and {src} is not on the host; "
                    "re-run with --start-at 20_download_packages"
                )
            docker_cp(str(src), cfg.container_name, staging, dry_run=cfg.dry_run)
        return missing

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        manifest = load_manifest(cfg.manifest_path)
        container = cfg.container_name

        copied = list((state.get("execution") or {}).get("copied") or [])
        if not copied:
            raise RuntimeError("execution.copied missing; run 30_copy_packages first")

        staging = manifest.staging_dir.rstrip("/") + "/"
        recopied = self._restore_missing(cfg, copied, staging)
        if recopied:
            state.setdefault("execution", {}).setdefault("decisions", {})["recopied"] = recopied

        logger.info("Removing any conflicting packages")
        dpkg_purge(container, manifest.purge_packages, dry_run=cfg.dry_run)

        logger.info("Installing %d package(s) in %s", len(copied), container)
        fixed = dpkg_install_with_fix(container, copied, workdir=manifest.staging_dir, dry_run=cfg.dry_run)
        state.setdefault("execution", {}).setdefault("decisions", {})["fix_broken_used"] = fixed

        logger.info("Updating library cache")
        ldconfig(container, dry_run=cfg.dry_run)

        logger.info("Cleaning up temp files")
        remove_files(container, copied, dry_run=cfg.dry_run)
        return state
