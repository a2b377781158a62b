
from __future__ import annotations
import os
import tempfile
from pathlib import Path
from typing import List
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ..core.datatypes import Take, ValueModel
from ..core.errors import CorruptCheckpoint, MissingFile
from ..core.state import IdSet, ScheduleState

CHECKPOINT_VERSION = 1


class Checkpoint(BaseModel):
    """Serialized form of a ScheduleState plus the value model it runs on."""
    version: int = CHECKPOINT_VERSION
    value_model: ValueModel
    elapsed: int = 0
    available_sources: List[int] = Field(default_factory=list)
    available_items: List[int] = Field(default_factory=list)
    committed: List[Take] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: ScheduleState) -> "Checkpoint":
        return cls(
            value_model=state.value_model,
            elapsed=state.elapsed,
            available_sources=list(state.available_sources),
            available_items=list(state.available_items),
            committed=list(state.committed),
        )

    def to_state(self) -> ScheduleState:
        vm = self.value_model
        state = ScheduleState(
            value_model=vm,
            elapsed=self.elapsed,
            available_sources=IdSet.from_ids(vm.source_count, self.available_sources),
            available_items=IdSet.from_ids(vm.item_count, self.available_items),
            committed=list(self.committed),
        )
        state.check_invariants()
        return state


class JsonCheckpointStore:
    """CheckpointStore writing one JSON document per task."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> ScheduleState:
        if not self.exists():
            raise MissingFile(f"checkpoint not found: {self.path}")
        try:
            cp = Checkpoint.model_validate_json(self.path.read_bytes())
            if cp.version != CHECKPOINT_VERSION:
                raise ValueError(f"unsupported checkpoint version {cp.version}")
            state = cp.to_state()
        except (ValidationError, ValueError) as e:
            raise CorruptCheckpoint(f"{self.path}: {e}") from e
        logger.info("Restored state from {}: {} takes, t={}/{}",
                    self.path, len(state.committed), state.elapsed, state.budget)
        return state

    def save(self, state: ScheduleState) -> None:
        data = Checkpoint.from_state(state).model_dump_json()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("Saved checkpoint {} ({} takes)", self.path, len(state.committed))
