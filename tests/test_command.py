"""Tests for npu_installer.lib.command."""

import subprocess
from unittest.mock import patch

import pytest

from npu_installer.lib.command import CommandError, fmt_argv, run_cmd


@pytest.mark.unit
class TestRunCmd:
    @patch("npu_installer.lib.command.subprocess.run")
    def test_returns_captured_output(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["echo", "hi"], 0, "hi\n", "")

        r = run_cmd(["echo", "hi"])

        assert r.returncode == 0
        assert r.stdout == "hi\n"
        assert r.argv == ["echo", "hi"]

    @patch("npu_installer.lib.command.subprocess.run")
    def test_nonzero_exit_raises_command_error(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["false"], 3, "", "boom")

        with pytest.raises(CommandError) as exc:
            run_cmd(["false"])

        assert exc.value.returncode == 3
        assert exc.value.stderr == "boom"
        assert isinstance(exc.value, RuntimeError)

    @patch("npu_installer.lib.command.subprocess.run")
    def test_check_false_returns_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["false"], 1, "", "")

        r = run_cmd(["false"], check=False)

        assert r.returncode == 1

    @patch("npu_installer.lib.command.subprocess.run")
    def test_dry_run_does_not_execute(self, mock_run):
        r = run_cmd(["docker", "restart", "frigate"], dry_run=True)

        mock_run.assert_not_called()
        assert r.returncode == 0

    @patch("npu_installer.lib.command.subprocess.run")
    def test_env_is_merged_with_environment(self, mock_run, monkeypatch):
        monkeypatch.setenv("KEEP_ME", "1")
        mock_run.return_value = subprocess.CompletedProcess(["env"], 0, "", "")

        run_cmd(["env"], env={"EXTRA": "2"})

        env = mock_run.call_args.kwargs["env"]
        assert env["KEEP_ME"] == "1"
        assert env["EXTRA"] == "2"


def test_fmt_argv_quotes_arguments():
    assert fmt_argv(["bash", "-c", "echo hi"]) == "bash -c 'echo hi'"
