from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .docker import docker_exec

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_TOKEN = "NPU"
DEFAULT_DEVICE_NODE = "/dev/accel/accel0"
# Upper bound for one in-container OpenVINO device query, in seconds.
PROBE_TIMEOUT = 120.0

# Runs inside the container with the container's python3. Prints one JSON line.
PROBE_SCRIPT = """
import json, sys
token = sys.argv[1] if len(sys.argv) > 1 else "NPU"
out = {"devices": [], "npu_name": None, "error": None}
try:
    from openvino import Core
    core = Core()
    out["devices"] = list(core.available_devices)
    if token in out["devices"]:
        try:
            out["npu_name"] = str(core.get_property(token, "FULL_DEVICE_NAME"))
        except Exception:
            pass
except Exception as e:
    out["error"] = str(e)
print(json.dumps(out))
"""


@dataclass(frozen=True)
class ProbeResult:
    devices: List[str] = field(default_factory=list)
    detected: bool = False
    device_name: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "devices": list(self.devices),
            "detected": self.detected,
            "device_name": self.device_name,
            "error": self.error,
        }


def parse_probe_output(stdout: str, *, token: str = DEFAULT_DEVICE_TOKEN) -> ProbeResult:
    """Parse the probe's JSON line. The last line that decodes to an object wins."""

    for line in reversed(stdout.strip().splitlines()):
        line = line.strip()
        if not line.startswith("{"):
            continue
        try:
            data = json.loads(line)
        except ValueError:
            continue
        if not isinstance(data, dict):
            continue

        devices = [str(d) for d in (data.get("devices") or [])]
        name = data.get("npu_name")
        error = data.get("error")
        return ProbeResult(
            devices=devices,
            detected=token in devices,
            device_name=str(name) if name else None,
            error=str(error) if error else None,
        )

    snippet = stdout.strip()[:200] or "<empty>"
    return ProbeResult(error=f"unrecognized probe output: {snippet}")


def run_probe(container: str, *, token: str = DEFAULT_DEVICE_TOKEN, dry_run: bool = False) -> ProbeResult:
    """Ask OpenVINO inside the container which devices it can see."""

    try:
        r = docker_exec(
            container,
            ["python3", "-c", PROBE_SCRIPT, token],
            check=False,
            timeout=PROBE_TIMEOUT,
            dry_run=dry_run,
        )
    except subprocess.TimeoutExpired:
        logger.warning("OpenVINO probe timed out after %.0fs", PROBE_TIMEOUT)
        return ProbeResult(error=f"probe timed out after {PROBE_TIMEOUT:.0f}s")
    if dry_run:
        return ProbeResult(error="dry-run")
    if r.returncode != 0:
        return ProbeResult(error=(r.stderr.strip() or f"python3 exited with {r.returncode}"))
    return parse_probe_output(r.stdout, token=token)


def check_device_node(
    container: str, node: str = DEFAULT_DEVICE_NODE, *, dry_run: bool = False
) -> Dict[str, Any]:
    """Check that the NPU device node is passed through into the container."""

    r = docker_exec(container, ["test", "-e", node], check=False, dry_run=dry_run)
    info: Dict[str, Any] = {"node": node, "present": r.returncode == 0, "listing": None}
    if info["present"]:
        ls = docker_exec(container, ["ls", "-la", node], check=False, dry_run=dry_run)
        info["listing"] = ls.stdout.strip() or None
    return info
