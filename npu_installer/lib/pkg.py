from __future__ import annotations

import logging
from typing import Sequence

from .command import CommandError
from .docker import docker_exec

logger = logging.getLogger(__name__)


def dpkg_purge(container: str, packages: Sequence[str], *, dry_run: bool = False) -> bool:
    """Purge packages that conflict with the ones being installed.

    Failures are ignored: the packages are usually simply not installed yet.
    Returns True if dpkg reported success.
    """
    if not packages:
        return True
    r = docker_exec(
        container,
        ["dpkg", "--purge", "--force-remove-reinstreq", *packages],
        check=False,
        dry_run=dry_run,
    )
    if r.returncode != 0:
        logger.info("dpkg --purge returned %d (ignored)", r.returncode)
    return r.returncode == 0


def apt_update(container: str, *, dry_run: bool = False) -> None:
    docker_exec(container, ["apt", "update", "-qq"], dry_run=dry_run)


def apt_fix_broken(container: str, *, dry_run: bool = False) -> None:
    docker_exec(container, ["apt", "--fix-broken", "install", "-y", "-qq"], dry_run=dry_run)


def dpkg_install_with_fix(
    container: str,
    deb_paths: Sequence[str],
    *,
    workdir: str = "/tmp",
    dry_run: bool = False,
) -> bool:
    """Install .deb files, repairing missing dependencies once if needed.

    dpkg -i is attempted; on failure apt resolves the broken dependencies
    and dpkg -i is retried a single time. A second failure propagates.
    Returns True if the fix-broken path was taken.
    """
    if not deb_paths:
        logger.warning("No packages to install")
        return False

    argv = ["dpkg", "-i", *deb_paths]
    try:
        docker_exec(container, argv, workdir=workdir, dry_run=dry_run)
        return False
    except CommandError as e:
        logger.warning("dpkg -i failed (%d), fixing dependencies", e.returncode)

    apt_update(container, dry_run=dry_run)
    apt_fix_broken(container, dry_run=dry_run)
    docker_exec(container, argv, workdir=workdir, dry_run=dry_run)
    return True


def ldconfig(container: str, *, dry_run: bool = False) -> None:
    docker_exec(container, ["ldconfig"], dry_run=dry_run)


def remove_files(container: str, paths: Sequence[str], *, dry_run: bool = False) -> None:
    if not paths:
        return
    docker_exec(container, ["rm", "-f", *paths], dry_run=dry_run)


def pip_upgrade(container: str, requirement: str, *, dry_run: bool = False) -> None:
    # The container's interpreter is externally managed; the container is disposable.
    docker_exec(
        container,
        ["pip", "install", "--upgrade", "--quiet", "--break-system-packages", requirement],
        dry_run=dry_run,
    )
