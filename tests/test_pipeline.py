"""Tests for step ordering and resume behaviour."""

import pytest

from npu_installer.pipeline import run_pipeline


class RecordingStep:
    def __init__(self, step_id, log, always_run=False, fail=False):
        self.step_id = step_id
        self.log = log
        self.always_run = always_run
        self.fail = fail

    def run(self, state):
        if self.fail:
            raise RuntimeError(f"{self.step_id} failed")
        self.log.append(self.step_id)
        return state


def _steps(log, **overrides):
    ids = ["10_a", "20_b", "30_c"]
    return [RecordingStep(i, log, **overrides.get(i, {})) for i in ids]


@pytest.mark.unit
class TestRunPipeline:
    def test_runs_in_order(self):
        log = []
        result = run_pipeline(state={}, steps=_steps(log))

        assert log == ["10_a", "20_b", "30_c"]
        assert result.ran_steps == log
        assert result.finished is True
        assert result.state["execution"]["current_step"] is None

    def test_skips_completed_steps(self):
        log = []
        state = {"execution": {"completed_steps": ["10_a", "20_b"]}}

        result = run_pipeline(state=state, steps=_steps(log))

        assert log == ["30_c"]
        assert result.skipped_steps == ["10_a", "20_b"]

    def test_always_run_steps_run_on_resume(self):
        log = []
        state = {"execution": {"completed_steps": ["10_a", "20_b"]}}

        run_pipeline(state=state, steps=_steps(log, **{"10_a": {"always_run": True}}))

        assert log == ["10_a", "30_c"]

    def test_force_reruns_everything(self):
        log = []
        state = {"execution": {"completed_steps": ["10_a", "20_b", "30_c"]}}

        run_pipeline(state=state, steps=_steps(log), force=True)

        assert log == ["10_a", "20_b", "30_c"]

    def test_start_at_and_stop_after(self):
        log = []
        result = run_pipeline(state={}, steps=_steps(log), start_at="20_b", stop_after="20_b")

        assert log == ["20_b"]
        assert result.finished is False

    def test_unknown_step_id(self):
        with pytest.raises(ValueError):
            run_pipeline(state={}, steps=_steps([]), start_at="99_nope")

    def test_failure_leaves_current_step(self):
        log = []
        state = {}

        with pytest.raises(RuntimeError):
            run_pipeline(state=state, steps=_steps(log, **{"20_b": {"fail": True}}))

        assert state["execution"]["current_step"] == "20_b"
        assert state["execution"]["completed_steps"] == ["10_a"]
