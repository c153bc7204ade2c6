from __future__ import annotations

import argparse
import copy
import logging
import subprocess
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import yaml

from .config import merge_config
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .manifests import load_yaml_mapping
from .pipeline import run_pipeline
from .state_store import ensure_defaults, load_state, reset_progress, save_state
from .steps import (
    CheckContainerStep,
    CleanupStep,
    CopyPackagesStep,
    DownloadPackagesStep,
    FinalVerificationStep,
    InstallPackagesStep,
    RestartContainerStep,
    UpgradeOpenVinoStep,
    VerifyNpuStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "~/.local/state/frigate-npu-installer/state.json"


def build_steps(input_fn: Optional[Callable[[str], str]] = None):
    return [
        CheckContainerStep(),
        DownloadPackagesStep(),
        CopyPackagesStep(),
        InstallPackagesStep(),
        UpgradeOpenVinoStep(),
        VerifyNpuStep(),
        RestartContainerStep(),
        FinalVerificationStep(),
        CleanupStep(input_fn=input_fn),
    ]


def run(
    *,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    config: Optional[Dict[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    log_level: int = logging.INFO,
    input_fn: Optional[Callable[[str], str]] = None,
) -> Dict[str, Any]:
    """Run the installer pipeline, persisting state for resume.

    config replaces state['config'] for this run. A run that reaches the
    last step clears the completed step list, so the next run (e.g. after
    the container was recreated) installs from scratch. A dry run works on
    a copy of the state and never writes the state file.
    """

    actual_log_path = configure_logging(log_path=log_path, level=log_level)

    state = ensure_defaults(load_state(state_path))
    state["config"] = dict(config or {})
    state["execution"].setdefault("paths", {})["log_path_actual"] = actual_log_path

    dry_run = bool(state["config"].get("dry_run", False))
    if dry_run:
        # Planned downloads and copies must never look like real progress.
        state = copy.deepcopy(state)

    steps = build_steps(input_fn=input_fn)

    try:
        result = run_pipeline(
            state=state,
            steps=steps,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state["execution"]["summary"] = {
            "ran_steps": result.ran_steps,
            "skipped_steps": result.skipped_steps,
        }
        if result.finished and not dry_run:
            state["execution"]["last_success"] = datetime.now(timezone.utc).isoformat()
            reset_progress(state)
        return state
    except Exception as e:
        logger.exception("Installer failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if dry_run:
            logger.info("Dry run: state file %s left untouched", state_path)
        else:
            save_state(state_path, state)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="frigate-npu-installer",
        description="Install Intel NPU drivers and OpenVINO into a running Frigate container.",
    )
    p.add_argument("--container", default=None, help="Target container (env CONTAINER_NAME, default: frigate)")
    p.add_argument("--download-dir", default=None, help="Host download dir (env DOWNLOAD_DIR, default: ~/npu-drivers)")
    p.add_argument("--manifest", default=None, help="Package manifest YAML (default: bundled)")
    p.add_argument("--config", default=None, help="YAML file with config overrides")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_install_packages)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", default=None, help="Log commands without running them")
    p.add_argument("--restart-wait", type=float, default=None, help="Seconds to wait after restart (default: 8)")
    p.add_argument("--require-npu", action="store_true", default=None, help="Fail if the NPU is not detected")
    cleanup = p.add_mutually_exclusive_group()
    cleanup.add_argument("--cleanup", dest="cleanup", action="store_true", default=None, help="Delete downloads without asking")
    cleanup.add_argument("--keep-downloads", dest="cleanup", action="store_false", help="Keep downloads without asking")
    p.add_argument("-v", "--verbose", action="store_true", help="Log command output")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        file_values = load_yaml_mapping(args.config) if args.config else None
        config = merge_config(
            {},
            file_values=file_values,
            cli_values={
                "container_name": args.container,
                "download_dir": args.download_dir,
                "manifest_path": args.manifest,
                "dry_run": args.dry_run,
                "restart_wait": args.restart_wait,
                "require_npu": args.require_npu,
                "cleanup": args.cleanup,
            },
        )
        run(
            state_path=args.state,
            log_path=args.log,
            config=config,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=args.force,
            log_level=logging.DEBUG if args.verbose else logging.INFO,
        )
    except (RuntimeError, ValueError, OSError, subprocess.SubprocessError, yaml.YAMLError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
