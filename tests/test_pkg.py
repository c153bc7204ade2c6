"""Tests for in-container package operations."""

from unittest.mock import patch

import pytest

from npu_installer.lib.command import CmdResult, CommandError
from npu_installer.lib.pkg import dpkg_install_with_fix, dpkg_purge, pip_upgrade


def _ok(argv=()):
    return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")


def _argvs(mock_exec):
    return [c.args[1] for c in mock_exec.call_args_list]


@pytest.mark.unit
class TestDpkgInstallWithFix:
    @patch("npu_installer.lib.pkg.docker_exec")
    def test_clean_install_skips_fix(self, mock_exec):
        mock_exec.return_value = _ok()

        fixed = dpkg_install_with_fix("frigate", ["/tmp/a.deb", "/tmp/b.deb"])

        assert fixed is False
        assert _argvs(mock_exec) == [["dpkg", "-i", "/tmp/a.deb", "/tmp/b.deb"]]

    @patch("npu_installer.lib.pkg.docker_exec")
    def test_failure_runs_fix_broken_then_retries_once(self, mock_exec):
        mock_exec.side_effect = [
            CommandError(["dpkg"], 1, "dependency problems"),
            _ok(),
            _ok(),
            _ok(),
        ]

        fixed = dpkg_install_with_fix("frigate", ["/tmp/a.deb"])

        assert fixed is True
        assert _argvs(mock_exec) == [
            ["dpkg", "-i", "/tmp/a.deb"],
            ["apt", "update", "-qq"],
            ["apt", "--fix-broken", "install", "-y", "-qq"],
            ["dpkg", "-i", "/tmp/a.deb"],
        ]

    @patch("npu_installer.lib.pkg.docker_exec")
    def test_second_failure_is_fatal(self, mock_exec):
        mock_exec.side_effect = [
            CommandError(["dpkg"], 1, "dependency problems"),
            _ok(),
            _ok(),
            CommandError(["dpkg"], 1, "still broken"),
        ]

        with pytest.raises(CommandError):
            dpkg_install_with_fix("frigate", ["/tmp/a.deb"])

        assert mock_exec.call_count == 4

    @patch("npu_installer.lib.pkg.docker_exec")
    def test_fix_broken_failure_is_fatal(self, mock_exec):
        mock_exec.side_effect = [
            CommandError(["dpkg"], 1, ""),
            _ok(),
            CommandError(["apt"], 100, "unmet"),
        ]

        with pytest.raises(CommandError):
            dpkg_install_with_fix("frigate", ["/tmp/a.deb"])

    @patch("npu_installer.lib.pkg.docker_exec")
    def test_nothing_to_install(self, mock_exec):
        assert dpkg_install_with_fix("frigate", []) is False
        mock_exec.assert_not_called()


@pytest.mark.unit
class TestPurgeAndPip:
    @patch("npu_installer.lib.pkg.docker_exec")
    def test_purge_failure_is_ignored(self, mock_exec):
        mock_exec.return_value = CmdResult(argv=[], returncode=1, stdout="", stderr="not installed")

        assert dpkg_purge("frigate", ["intel-fw-npu"]) is False
        assert mock_exec.call_args.kwargs["check"] is False
        assert _argvs(mock_exec) == [["dpkg", "--purge", "--force-remove-reinstreq", "intel-fw-npu"]]

    @patch("npu_installer.lib.pkg.docker_exec")
    def test_pip_upgrade_breaks_system_packages(self, mock_exec):
        pip_upgrade("frigate", "openvino==2025.2.0")

        assert _argvs(mock_exec) == [
            ["pip", "install", "--upgrade", "--quiet", "--break-system-packages", "openvino==2025.2.0"]
        ]
