from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .logging_utils import log_ok
from .state_store import PersistedState, StateIOError

logger = logging.getLogger(__name__)

RESUME_HINT = "Re-run the program to continue from this point."


class StepActionError(RuntimeError):
    """A step's external action did not complete."""


class StepAction(Protocol):
    """A zero-argument unit of provisioning work."""

    ordinal: int
    title: str

    def __call__(self) -> None:
        ...


@dataclass(frozen=True)
class Step:
    ordinal: int
    title: str
    action: Callable[[], None]

    @classmethod
    def from_action(cls, action: StepAction) -> "Step":
        return cls(ordinal=action.ordinal, title=action.title, action=action)


@dataclass
class PipelineResult:
    ok: bool
    last_done: int
    ran_steps: List[int] = field(default_factory=list)
    skipped_steps: List[int] = field(default_factory=list)
    failed_step: Optional[int] = None
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def validate_steps(steps: Sequence[Step]) -> None:
    previous = 0
    for step in steps:
        if step.ordinal <= previous:
            raise ValueError(
                f"Step ordinals must be positive and strictly ascending, got {step.ordinal} after {previous}"
            )
        previous = step.ordinal


def _fail(step: Step, state: PersistedState, result: PipelineResult, message: str) -> PipelineResult:
    logger.error("Step %d (%s) failed: %s", step.ordinal, step.title, message)
    logger.error("Last completed step: %d", state.done_step)
    logger.error(RESUME_HINT)
    result.ok = False
    result.failed_step = step.ordinal
    result.error = message
    result.last_done = state.done_step
    return result


def run_pipeline(
    *,
    steps: Sequence[Step],
    state: PersistedState,
    save: Callable[[PersistedState], None],
) -> PipelineResult:
    """Run steps in ascending order, resuming after ``state.done_step``.

    Completed steps are skipped without invoking their action. After each
    step that finishes, the checkpoint is advanced and saved before the
    next one starts. The first failure stops the run; nothing is rolled
    back.
    """

    validate_steps(steps)
    result = PipelineResult(ok=True, last_done=state.done_step)

    for step in steps:
        if state.done_step >= step.ordinal:
            logger.info("Skipping step %d (%s): already completed", step.ordinal, step.title)
            result.skipped_steps.append(step.ordinal)
            continue

        logger.info("Step %d: %s", step.ordinal, step.title)
        try:
            step.action()
        except KeyboardInterrupt:
            _fail(step, state, result, "interrupted")
            raise
        except Exception as e:
            return _fail(step, state, result, str(e) or type(e).__name__)

        log_ok(logger, "Step %d completed: %s", step.ordinal, step.title)
        previous = state.done_step
        state.mark_done(step.ordinal)
        try:
            save(state)
        except StateIOError as e:
            # The action finished but its checkpoint did not land; it will run again.
            state.done_step = previous
            return _fail(step, state, result, f"checkpoint not saved: {e}")
        result.ran_steps.append(step.ordinal)
        result.last_done = state.done_step

    return result
