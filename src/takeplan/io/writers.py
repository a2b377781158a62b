
from __future__ import annotations
from pathlib import Path
from typing import Sequence
from loguru import logger

from ..core.datatypes import Take


def format_output(committed: Sequence[Take]) -> str:
    """Take count, then per take `source item_count` and a line of item ids."""
    lines = [str(len(committed))]
    for t in committed:
        lines.append(f"{t.source} {len(t.items)}")
        lines.append(" ".join(str(i) for i in t.items))
    return "\n".join(lines) + "\n"


def write_output(path: str | Path, committed: Sequence[Take]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(format_output(committed), encoding="utf-8")
    logger.info("Wrote {} takes to {}", len(committed), p)
    return p
