from .step_10_check_container import CheckContainerStep
from .step_20_download_packages import DownloadPackagesStep
from .step_30_copy_packages import CopyPackagesStep
from .step_40_install_packages import InstallPackagesStep
from .step_50_upgrade_openvino import UpgradeOpenVinoStep
from .step_60_verify_npu import VerifyNpuStep
from .step_70_restart_container import RestartContainerStep
from .step_80_final_verification import FinalVerificationStep
from .step_90_cleanup import CleanupStep

__all__ = [
    "CheckContainerStep",
    "DownloadPackagesStep",
    "CopyPackagesStep",
    "InstallPackagesStep",
    "UpgradeOpenVinoStep",
    "VerifyNpuStep",
    "RestartContainerStep",
    "FinalVerificationStep",
    "CleanupStep",
]
