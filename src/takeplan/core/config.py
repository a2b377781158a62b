# takeplan/core/config.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import pathlib
import yaml

from .errors import MissingFile

# ---------- leaf configs ----------
@dataclass
class EngineConfig:
    strategy: str = "greedy"  # registered policy name: greedy | lookahead
    max_workers: Optional[int] = None  # 1 -> inline; pooled threads share the GIL, so this shapes the fan-out, not its speed

@dataclass
class DataConfig:
    data_dir: str = "data"
    input_ext: str = "in"
    output_ext: str = "out"
    state_ext: str = "state"

@dataclass
class RunConfig:
    log_level: str = "INFO"
    checkpoint_every: int = 0  # steps between periodic saves; 0 saves only at the end

# ---------- helpers ----------
def _as(cls, obj, defaults: Optional[Dict[str, Any]] = None):
    """Coerce a possibly-dict `obj` into dataclass `cls` (overlaying defaults)."""
    if isinstance(obj, cls):
        return obj
    if isinstance(obj, dict):
        base = {} if defaults is None else dict(defaults)
        base.update(obj)
        return cls(**base)  # type: ignore[arg-type]
    return cls(**({} if defaults is None else defaults))  # type: ignore[arg-type]

# ---------- top-level ----------
@dataclass
class TakeplanConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    data: DataConfig = field(default_factory=DataConfig)
    run: RunConfig = field(default_factory=RunConfig)

    def __post_init__(self):
        self.engine = _as(EngineConfig, self.engine, EngineConfig().__dict__)
        self.data = _as(DataConfig, self.data, DataConfig().__dict__)
        self.run = _as(RunConfig, self.run, RunConfig().__dict__)
        if self.engine.max_workers is not None and self.engine.max_workers < 1:
            raise ValueError(f"engine.max_workers must be >= 1, got {self.engine.max_workers}")
        if self.run.checkpoint_every < 0:
            raise ValueError(f"run.checkpoint_every must be >= 0, got {self.run.checkpoint_every}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TakeplanConfig":
        d = d or {}
        return cls(
            engine=_as(EngineConfig, d.get("engine"), EngineConfig().__dict__),
            data=_as(DataConfig, d.get("data"), DataConfig().__dict__),
            run=_as(RunConfig, d.get("run"), RunConfig().__dict__),
        )

def load_config(path_or_dict: str | pathlib.Path | Dict[str, Any] | TakeplanConfig | None = None) -> TakeplanConfig:
    """Accept YAML path, dict, TakeplanConfig or None; always return a fully-typed TakeplanConfig."""
    if path_or_dict is None:
        return TakeplanConfig()
    if isinstance(path_or_dict, TakeplanConfig):
        return TakeplanConfig.from_dict(path_or_dict.__dict__)
    if isinstance(path_or_dict, dict):
        return TakeplanConfig.from_dict(path_or_dict)
    path = pathlib.Path(path_or_dict)
    if not path.exists():
        raise MissingFile(f"config file not found: {path}")
    with path.open("r") as f:
        d = yaml.safe_load(f) or {}
    return TakeplanConfig.from_dict(d)
