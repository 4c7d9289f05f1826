from __future__ import annotations

from typing import Callable, List

import pytest

from provisioner.logging_utils import reset_logging
from provisioner.pipeline import Step


@pytest.fixture(autouse=True)
def _isolated_logging():
    yield
    reset_logging()


class Recorder:
    """Collects the ordinals of fake step actions as they run."""

    def __init__(self) -> None:
        self.calls: List[int] = []

    def action(self, ordinal: int, fail: bool = False) -> Callable[[], None]:
        def _run() -> None:
            self.calls.append(ordinal)
            if fail:
                raise RuntimeError(f"step {ordinal} exploded")

        return _run

    def steps(self, ordinals=(10, 20, 30, 40, 50, 60), fail_at=None) -> List[Step]:
        return [
            Step(ordinal=o, title=f"step {o}", action=self.action(o, fail=(o == fail_at)))
            for o in ordinals
        ]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
