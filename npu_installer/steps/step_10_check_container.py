from __future__ import annotations

import logging
from typing import Any, Dict

from ..config import InstallConfig
from ..lib.docker import ContainerNotRunningError, container_is_running

logger = logging.getLogger(__name__)


class CheckContainerStep:
    step_id = "10_check_container"
    # The container may have been stopped or recreated since the last run.
    always_run = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})

        if not container_is_running(cfg.container_name, dry_run=cfg.dry_run):
            raise ContainerNotRunningError(cfg.container_name)

        logger.info("Container %s is running", cfg.container_name)
        return state
