from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallConfig
from ..lib.docker import docker_restart, wait_for_running

logger = logging.getLogger(__name__)


class RestartContainerStep:
    step_id = "70_restart_container"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})

        logger.info("Restarting %s to complete setup", cfg.container_name)
        docker_restart(cfg.container_name, dry_run=cfg.dry_run)
        wait_for_running(cfg.container_name, settle_s=cfg.restart_wait, dry_run=cfg.dry_run)
        return state
