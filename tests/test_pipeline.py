from __future__ import annotations

import logging

import pytest

from provisioner.pipeline import Step, StepActionError, run_pipeline, validate_steps
from provisioner.state_store import PersistedState, StateIOError

ORDINALS = (10, 20, 30, 40, 50, 60)


class SaveLog:
    def __init__(self, fail_on=None) -> None:
        self.done_steps = []
        self.fail_on = fail_on

    def __call__(self, state: PersistedState) -> None:
        if state.done_step == self.fail_on:
            raise StateIOError("disk full")
        self.done_steps.append(state.done_step)


def test_fresh_run_executes_every_step_in_order(recorder):
    state = PersistedState()
    saves = SaveLog()

    result = run_pipeline(steps=recorder.steps(), state=state, save=saves)

    assert result.ok and result.exit_code == 0
    assert recorder.calls == list(ORDINALS)
    assert result.ran_steps == list(ORDINALS)
    assert state.done_step == 60
    # Checkpoint saved after every step, monotonically.
    assert saves.done_steps == list(ORDINALS)


@pytest.mark.parametrize("done", [0, 10, 25, 30, 59, 60, 100])
def test_resume_runs_exactly_the_steps_after_checkpoint(recorder, done):
    state = PersistedState(done_step=done)

    result = run_pipeline(steps=recorder.steps(), state=state, save=SaveLog())

    expected = [o for o in ORDINALS if o > done]
    assert recorder.calls == expected
    assert result.skipped_steps == [o for o in ORDINALS if o <= done]
    assert result.ok


def test_failure_halts_chain_and_keeps_last_checkpoint(recorder, caplog):
    state = PersistedState()
    saves = SaveLog()

    with caplog.at_level(logging.INFO, logger="provisioner.pipeline"):
        result = run_pipeline(steps=recorder.steps(fail_at=30), state=state, save=saves)

    assert not result.ok
    assert result.exit_code == 1
    assert recorder.calls == [10, 20, 30]
    assert state.done_step == 20
    assert result.last_done == 20
    assert result.failed_step == 30
    assert "exploded" in result.error
    assert saves.done_steps == [10, 20]

    messages = [r.getMessage() for r in caplog.records]
    assert any("Step 30" in m and "failed" in m for m in messages)
    assert any("Last completed step: 20" in m for m in messages)
    assert any("Re-run the program" in m for m in messages)


def test_rerun_after_failure_resumes_at_failed_step(recorder):
    state = PersistedState()
    run_pipeline(steps=recorder.steps(fail_at=30), state=state, save=SaveLog())

    recorder.calls.clear()
    result = run_pipeline(steps=recorder.steps(), state=state, save=SaveLog())

    assert result.ok
    assert recorder.calls == [30, 40, 50, 60]


def test_step_action_error_is_contained():
    def broken() -> None:
        raise StepActionError("manifest missing")

    result = run_pipeline(
        steps=[Step(ordinal=10, title="broken", action=broken)],
        state=PersistedState(),
        save=SaveLog(),
    )
    assert not result.ok
    assert result.error == "manifest missing"


def test_checkpoint_write_failure_is_fatal(recorder):
    state = PersistedState()

    result = run_pipeline(steps=recorder.steps(), state=state, save=SaveLog(fail_on=20))

    assert not result.ok
    assert result.failed_step == 20
    assert recorder.calls == [10, 20]
    # The step will be redone on the next run.
    assert state.done_step == 10


def test_gaps_between_ordinals_are_allowed(recorder):
    state = PersistedState(done_step=20)
    result = run_pipeline(steps=recorder.steps(ordinals=(10, 20, 25, 30)), state=state, save=SaveLog())
    assert recorder.calls == [25, 30]
    assert result.last_done == 30


@pytest.mark.parametrize("ordinals", [(10, 10), (20, 10), (0, 10)])
def test_ordinals_must_ascend(recorder, ordinals):
    with pytest.raises(ValueError):
        validate_steps(recorder.steps(ordinals=ordinals))


def test_interrupt_logs_checkpoint_and_propagates(recorder, caplog):
    def interrupted() -> None:
        raise KeyboardInterrupt

    steps = recorder.steps(ordinals=(10, 20)) + [Step(ordinal=30, title="slow", action=interrupted)]
    state = PersistedState()

    with caplog.at_level(logging.INFO, logger="provisioner.pipeline"):
        with pytest.raises(KeyboardInterrupt):
            run_pipeline(steps=steps, state=state, save=SaveLog())

    assert state.done_step == 20
    messages = [r.getMessage() for r in caplog.records]
    assert any("Step 30" in m and "interrupted" in m for m in messages)
    assert any("Last completed step: 20" in m for m in messages)
