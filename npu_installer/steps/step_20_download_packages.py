from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import requests

from ..config import InstallConfig
from ..lib.download import clean_debs, download_file
from ..manifests import load_manifest

logger = logging.getLogger(__name__)


class DownloadPackagesStep:
    step_id = "20_download_packages"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        manifest = load_manifest(cfg.manifest_path)

        download_dir = Path(cfg.download_dir)
        logger.info("Downloading NPU drivers to %s", str(download_dir))
        if not cfg.dry_run:
            download_dir.mkdir(parents=True, exist_ok=True)

        removed = clean_debs(str(download_dir), dry_run=cfg.dry_run)
        if removed:
            logger.info("Removed %d stale package(s)", len(removed))

        downloaded: List[str] = []
        with requests.Session() as session:
            for group in manifest.groups:
                logger.info("  * %s", group.label)
                for url in group.urls:
                    path = download_file(
                        url,
                        str(download_dir),
                        timeout=cfg.download_timeout,
                        session=session,
                        dry_run=cfg.dry_run,
                    )
                    downloaded.append(path.name)

        state.setdefault("execution", {})["downloads"] = {
            "dir": str(download_dir),
            "files": downloaded,
        }
        logger.info("Downloaded %d file(s)", len(downloaded))
        return state
