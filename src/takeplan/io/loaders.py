from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from loguru import logger

from ..core.config import DataConfig
from ..core.errors import MissingFile
from ..core.state import ScheduleState
from .checkpoint import JsonCheckpointStore
from .readers import read_problem


@dataclass(frozen=True)
class TaskFiles:
    """Input / output / checkpoint paths sharing one stem under the data dir."""
    name: str
    input_path: Path
    output_path: Path
    state_path: Path

    @classmethod
    def for_stem(cls, stem: str, data: DataConfig) -> "TaskFiles":
        base = Path(data.data_dir)
        return cls(
            name=stem,
            input_path=base / f"{stem}.{data.input_ext}",
            output_path=base / f"{stem}.{data.output_ext}",
            state_path=base / f"{stem}.{data.state_ext}",
        )

    def store(self) -> JsonCheckpointStore:
        return JsonCheckpointStore(self.state_path)


def find_tasks(data: DataConfig) -> List[str]:
    """Stems of every input file in the data dir, sorted."""
    base = Path(data.data_dir)
    if not base.is_dir():
        raise MissingFile(f"data directory not found: {base}")
    suffix = f".{data.input_ext}"
    return sorted(p.stem for p in base.iterdir() if p.is_file() and p.suffix == suffix)


def pick_task(stems: Sequence[str], prefix: str) -> str:
    """First stem starting with `prefix`."""
    for stem in stems:
        if stem.startswith(prefix):
            return stem
    raise MissingFile(f"no input file starting with {prefix!r} (have: {', '.join(stems) or 'none'})")


def resolve_task(prefix: str, data: DataConfig) -> TaskFiles:
    return TaskFiles.for_stem(pick_task(find_tasks(data), prefix), data)


def open_task(files: TaskFiles, *, reparse: bool = False) -> ScheduleState:
    """Resume from the task's checkpoint when present, else parse its input.

    A corrupt checkpoint is fatal; it never falls back to re-parsing.
    """
    store = files.store()
    if store.exists() and not reparse:
        logger.info("Resuming task {} from {}", files.name, files.state_path)
        return store.load()
    if reparse and store.exists():
        logger.info("Ignoring checkpoint {} (reparse requested)", files.state_path)
    vm = read_problem(files.input_path)
    logger.info("Loaded task {}: |I|={} |S|={} budget={}",
                files.name, vm.item_count, vm.source_count, vm.budget)
    return ScheduleState.initial(vm)
