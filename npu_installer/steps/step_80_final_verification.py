from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallConfig
from ..lib.probe import run_probe
from ..manifests import load_manifest

logger = logging.getLogger(__name__)


class FinalVerificationStep:
    step_id = "80_final_verification"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        token = load_manifest(cfg.manifest_path).device_token

        result = run_probe(cfg.container_name, token=token, dry_run=cfg.dry_run)
        state.setdefault("execution", {}).setdefault("probes", {})["final"] = result.to_dict()

        logger.info("Final test - available devices: %s", result.devices)
        if result.detected:
            logger.info("%s successfully installed and working", token)
        elif cfg.dry_run:
            logger.info("Skipping final verdict in dry-run")
        else:
            if result.error:
                logger.warning("Probe error: %s", result.error)
            logger.warning("%s not detected after restart", token)
            if cfg.require_npu:
                raise RuntimeError(f"{token} not detected in {cfg.container_name} after restart")
        return state
