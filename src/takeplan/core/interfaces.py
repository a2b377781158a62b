
from __future__ import annotations
from typing import Optional, Protocol

from .datatypes import Take
from .state import ScheduleState, StateSnapshot


class SelectionPolicy(Protocol):
    name: str

    def select_next(self, snapshot: StateSnapshot) -> Optional[Take]: ...

    def close(self) -> None: ...


class CheckpointStore(Protocol):
    def exists(self) -> bool: ...

    def load(self) -> ScheduleState: ...

    def save(self, state: ScheduleState) -> None: ...
