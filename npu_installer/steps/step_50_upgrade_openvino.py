from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallConfig
from ..lib.pkg import pip_upgrade
from ..manifests import load_manifest

logger = logging.getLogger(__name__)


class UpgradeOpenVinoStep:
    step_id = "50_upgrade_openvino"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        requirement = load_manifest(cfg.manifest_path).openvino_requirement

        logger.info("Updating OpenVINO in %s (%s)", cfg.container_name, requirement)
        pip_upgrade(cfg.container_name, requirement, dry_run=cfg.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["openvino"] = requirement
        return state
