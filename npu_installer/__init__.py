"""Intel NPU driver installer for a running Frigate container.

Downloads the vendor driver packages on the host, installs them inside the
container, upgrades OpenVINO and verifies that the NPU is visible.

- Step-based and resumable
- Every command logged
- Manifest-driven package list
"""

__version__ = "1.19.0"

__all__ = ["__version__"]
