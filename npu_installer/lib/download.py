from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
DEFAULT_CHUNK_SIZE = 1024 * 1024


class DownloadError(RuntimeError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Download failed: {url}: {reason}")


def filename_from_url(url: str) -> str:
    name = unquote(os.path.basename(urlparse(url).path))
    if not name:
        raise ValueError(f"Cannot derive a file name from URL: {url}")
    return name


def clean_debs(directory: str, *, dry_run: bool = False) -> List[str]:
    """Delete stale *.deb files from a previous run. Returns removed names."""

    removed: List[str] = []
    d = Path(directory)
    if not d.exists():
        return removed
    for p in sorted(d.glob("*.deb")):
        if dry_run:
            logger.info("Would remove %s", str(p))
        else:
            p.unlink()
        removed.append(p.name)
    return removed


def download_file(
    url: str,
    dest_dir: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    session: Optional[requests.Session] = None,
    dry_run: bool = False,
) -> Path:
    """Stream url into dest_dir and return the final path.

    The body is written to <name>.part and renamed once complete, so an
    interrupted download never leaves a truncated package behind.
    """

    name = filename_from_url(url)
    dest = Path(dest_dir) / name
    if dry_run:
        logger.info("Would download %s -> %s", url, str(dest))
        return dest

    part = dest.with_name(name + ".part")
    http = session or requests
    logger.info("GET %s", url)
    try:
        with http.get(url, stream=True, timeout=timeout, allow_redirects=True) as r:
            r.raise_for_status()
            with open(part, "wb") as fh:
                for chunk in r.iter_content(chunk_size=chunk_size):
                    if chunk:
                        fh.write(chunk)
    except (requests.RequestException, OSError) as e:
        part.unlink(missing_ok=True)
        raise DownloadError(url, str(e)) from e

    part.replace(dest)
    logger.debug("Saved %s (%d bytes)", str(dest), dest.stat().st_size)
    return dest
