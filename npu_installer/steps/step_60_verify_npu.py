from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallConfig
from ..lib.probe import ProbeResult, check_device_node, run_probe
from ..manifests import load_manifest
from ..state_store import add_warning

logger = logging.getLogger(__name__)


def log_probe(result: ProbeResult, *, token: str, container: str) -> None:
    if result.error and not result.devices:
        logger.warning("OpenVINO test failed: %s", result.error)
        return
    logger.info("Available OpenVINO devices in %s: %s", container, result.devices)
    if result.detected:
        logger.info("SUCCESS: %s detected in %s", token, container)
        if result.device_name:
            logger.info("%s info: %s", token, result.device_name)
        else:
            logger.info("%s detected but detailed info unavailable", token)
    else:
        logger.warning("%s not detected. Available devices: %s", token, result.devices)


class VerifyNpuStep:
    step_id = "60_verify_npu"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        manifest = load_manifest(cfg.manifest_path)
        container = cfg.container_name
        token = manifest.device_token

        logger.info("Testing %s detection", token)
        result = run_probe(container, token=token, dry_run=cfg.dry_run)
        log_probe(result, token=token, container=container)
        if not result.detected and not cfg.dry_run:
            logger.warning("Check that %s is mounted in the container", manifest.device_node)

        logger.info("Checking %s device access", token)
        node = check_device_node(container, manifest.device_node, dry_run=cfg.dry_run)
        if node["present"]:
            logger.info("%s device %s is accessible", token, node["node"])
            if node["listing"]:
                logger.info("%s", node["listing"])
        else:
            logger.warning("%s device not found - check Docker device passthrough", token)
            logger.warning("Add to docker-compose.yaml:\n  devices:\n    - /dev/accel:/dev/accel")
            add_warning(state, {"device_node_missing": node["node"]})

        exe = state.setdefault("execution", {})
        exe.setdefault("probes", {})["initial"] = result.to_dict()
        exe["device_node"] = node
        return state
