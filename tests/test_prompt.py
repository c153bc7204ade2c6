"""Tests for the (y/N) prompt."""

from unittest.mock import patch

import pytest

from npu_installer.lib.prompt import ask_yes_no


@pytest.mark.unit
class TestAskYesNo:
    @pytest.mark.parametrize("reply", ["y", "Y", "yes", "Yes please"])
    def test_yes(self, reply):
        assert ask_yes_no("Delete? (y/N): ", input_fn=lambda _: reply) is True

    @pytest.mark.parametrize("reply", ["", "n", "N", "no", " ", "sure"])
    def test_default_is_no(self, reply):
        assert ask_yes_no("Delete? (y/N): ", input_fn=lambda _: reply) is False

    def test_eof_is_no(self):
        def _eof(_):
            raise EOFError

        assert ask_yes_no("Delete? (y/N): ", input_fn=_eof) is False

    @patch("npu_installer.lib.prompt.sys.stdin")
    def test_no_terminal_is_no(self, mock_stdin):
        mock_stdin.isatty.return_value = False

        assert ask_yes_no("Delete? (y/N): ") is False
