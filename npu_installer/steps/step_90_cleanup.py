from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..config import InstallConfig
from ..lib.prompt import ask_yes_no

logger = logging.getLogger(__name__)

NEXT_STEPS = """Next steps:
1. Update your Frigate config.yaml detector section:
   detectors:
     openvino:
       type: openvino
       device: NPU    # Changed from GPU to NPU

2. Restart Frigate to use NPU:
   docker restart {container}

3. Check Frigate logs for NPU usage:
   docker logs {container} | grep -i npu"""


class CleanupStep:
    step_id = "90_cleanup"
    always_run = True

    def __init__(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        self.input_fn = input_fn

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = InstallConfig(state.get("config") or {})
        download_dir = Path(cfg.download_dir)

        logger.info("Installation complete")
        for line in NEXT_STEPS.format(container=cfg.container_name).splitlines():
            logger.info("%s", line)
        logger.info("Downloaded drivers saved in: %s", str(download_dir))
        logger.warning(
            "These container changes are temporary and will be lost on container recreation. "
            "Re-run this installer after any Frigate updates."
        )

        delete = cfg.cleanup
        if delete is None:
            delete = ask_yes_no("Delete downloaded drivers? (y/N): ", input_fn=self.input_fn)

        if delete:
            if cfg.dry_run:
                logger.info("Would remove %s", str(download_dir))
            else:
                shutil.rmtree(download_dir, ignore_errors=True)
            logger.info("Cleaned up downloaded files")
        else:
            logger.info("Drivers saved in %s for future use", str(download_dir))

        state.setdefault("execution", {}).setdefault("decisions", {})["downloads_deleted"] = bool(delete)
        return state
