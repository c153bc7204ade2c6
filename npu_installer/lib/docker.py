from __future__ import annotations

import logging
import time
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


class ContainerNotRunningError(RuntimeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Container '{name}' not found or not running. "
            f"Make sure container '{name}' is running with: docker compose up -d"
        )


def container_is_running(name: str, *, dry_run: bool = False) -> bool:
    """Return True if a container with exactly this name exists and is running."""

    if dry_run:
        # Be permissive in dry-run so planning doesn't fail.
        run_cmd(["docker", "inspect", "-f", "{{.State.Running}}", name], check=False, dry_run=True)
        return True
    r = run_cmd(["docker", "inspect", "-f", "{{.State.Running}}", name], check=False)
    if r.returncode != 0:
        return False
    return r.stdout.strip().lower() == "true"


def docker_cp(src: str, container: str, dest: str, *, dry_run: bool = False) -> None:
    run_cmd(["docker", "cp", src, f"{container}:{dest}"], dry_run=dry_run)


def docker_exec(
    container: str,
    argv: Sequence[str],
    *,
    workdir: str | None = None,
    check: bool = True,
    timeout: float | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command inside a running container."""

    cmd = ["docker", "exec"]
    if workdir:
        cmd += ["-w", workdir]
    cmd += [container, *argv]
    return run_cmd(cmd, check=check, timeout=timeout, dry_run=dry_run)


def docker_restart(container: str, *, dry_run: bool = False) -> None:
    run_cmd(["docker", "restart", container], dry_run=dry_run)


def wait_for_running(
    container: str,
    *,
    settle_s: float,
    timeout_s: float = 60.0,
    poll_s: float = 1.0,
    dry_run: bool = False,
) -> None:
    """Sleep for settle_s, then poll until the container reports running.

    Raises ContainerNotRunningError if it is still down after timeout_s.
    """

    if dry_run:
        logger.info("Would wait %.1fs for %s to restart", settle_s, container)
        return

    logger.info("Waiting %.1fs for container %s to restart", settle_s, container)
    time.sleep(settle_s)

    deadline = time.monotonic() + timeout_s
    while True:
        if container_is_running(container):
            return
        if time.monotonic() >= deadline:
            raise ContainerNotRunningError(container)
        time.sleep(poll_s)


def container_path_exists(container: str, path: str, *, dry_run: bool = False) -> bool:
    r = docker_exec(container, ["test", "-e", path], check=False, dry_run=dry_run)
    return r.returncode == 0
