
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from loguru import logger

from .cancel import CancellationToken
from .interfaces import SelectionPolicy
from .state import ScheduleState


class Phase(str, Enum):
    RUNNING = "running"
    DONE = "done"


@dataclass
class RunResult:
    phase: Phase
    steps: int
    cancelled: bool
    elapsed: int
    takes: int


class ScheduleRunner:
    """Drives a ScheduleState to completion, one committed take per step.

    The runner is the only mutator of `state`. Policies see an immutable
    snapshot taken at the start of each step, so a cancellation observed at the
    step boundary always leaves the state checkpoint-consistent.
    """

    def __init__(self, state: ScheduleState, policy: SelectionPolicy,
                 cancel: Optional[CancellationToken] = None):
        self.state = state
        self.policy = policy
        self.cancel = cancel or CancellationToken()
        self.phase = Phase.RUNNING
        self.steps = 0
        self.cancelled = False

    def step(self) -> Phase:
        if self.phase is Phase.DONE:
            return self.phase
        st = self.state
        if self.cancel.cancelled:
            logger.warning("Cancelled at t={}/{} after {} takes", st.elapsed, st.budget, len(st.committed))
            self.cancelled = True
            self.phase = Phase.DONE
            return self.phase
        if st.elapsed >= st.budget or len(st.available_sources) == 0:
            self.phase = Phase.DONE
            return self.phase

        take = self.policy.select_next(st.snapshot())
        if take is None:
            logger.debug("No source yields a usable take at t={}", st.elapsed)
            self.phase = Phase.DONE
            return self.phase
        if take.is_empty():
            # the source is spent even though nothing is harvested; nothing is appended
            st.consume_source(take.source)
            logger.debug("Source {} offers nothing at t={}; stopping", take.source, st.elapsed)
            self.phase = Phase.DONE
            return self.phase

        st.commit(take)
        self.steps += 1
        logger.debug("Step {}: source {} takes {} items, t={}/{}",
                     self.steps, take.source, len(take.items), st.elapsed, st.budget)
        return self.phase

    def run(self, on_step: Optional[Callable[[ScheduleState], None]] = None) -> RunResult:
        st = self.state
        logger.info("Starting {} run at t={}/{} ({} sources, {} items available)",
                    getattr(self.policy, "name", type(self.policy).__name__),
                    st.elapsed, st.budget, len(st.available_sources), len(st.available_items))
        try:
            while self.step() is Phase.RUNNING:
                if on_step is not None:
                    on_step(st)
        finally:
            self.policy.close()
        if not self.cancelled:
            logger.success("Schedule complete: {} takes, t={}/{}", len(st.committed), st.elapsed, st.budget)
        return RunResult(phase=self.phase, steps=self.steps, cancelled=self.cancelled,
                         elapsed=st.elapsed, takes=len(st.committed))
