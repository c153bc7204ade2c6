import json
import subprocess
from typing import Callable, List, Optional

import pytest


MANIFEST_YAML = """
staging_dir: /tmp
groups:
  - id: npu_driver
    label: NPU driver
    urls:
      - https://example.com/releases/intel-fw-npu_1.0_amd64.deb
      - https://example.com/releases/level-zero_1.22.4%2Bu22.04_amd64.deb
  - id: debug
    label: Debug symbols
    urls:
      - https://example.com/releases/intel-opencl-icd-dbgsym_1.0_amd64.ddeb
purge:
  - intel-fw-npu
  - level-zero
openvino:
  requirement: openvino==2025.2.0
verify:
  device_token: NPU
  device_node: /dev/accel/accel0
"""


class FakeRunner:
    """Stands in for subprocess.run; answers by matching argv prefixes."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.rules: List[tuple] = []

    def on(self, match: Callable[[List[str]], bool], returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.rules.append((match, returncode, stdout, stderr))
        return self

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        for match, rc, out, err in self.rules:
            if match(argv):
                return subprocess.CompletedProcess(argv, rc, out, err)
        return subprocess.CompletedProcess(argv, 0, "", "")

    def find(self, *needle: str) -> List[List[str]]:
        return [c for c in self.calls if all(n in c for n in needle)]


def probe_stdout(devices, name: Optional[str] = None, error: Optional[str] = None) -> str:
    return json.dumps({"devices": devices, "npu_name": name, "error": error}) + "\n"


@pytest.fixture
def manifest_path(tmp_path):
    p = tmp_path / "packages.yaml"
    p.write_text(MANIFEST_YAML, encoding="utf-8")
    return str(p)


@pytest.fixture
def download_dir(tmp_path):
    return tmp_path / "npu-drivers"


@pytest.fixture
def config(manifest_path, download_dir):
    return {
        "container_name": "frigate",
        "download_dir": str(download_dir),
        "manifest_path": manifest_path,
        "restart_wait": 0,
        "cleanup": False,
    }


@pytest.fixture
def state(config):
    return {"config": dict(config), "execution": {"completed_steps": []}}


@pytest.fixture
def fake_runner():
    return FakeRunner()
