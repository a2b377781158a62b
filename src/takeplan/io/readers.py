
from __future__ import annotations
from pathlib import Path
from typing import List
from loguru import logger

from ..core.datatypes import Source, ValueModel
from ..core.errors import MalformedInput, MissingFile


def _ints(line: str, lineno: int) -> List[int]:
    try:
        return [int(tok) for tok in line.split()]
    except ValueError:
        raise MalformedInput(f"line {lineno}: expected integers, got {line.strip()[:60]!r}") from None


def _header(line: str, lineno: int, width: int, what: str) -> List[int]:
    vals = _ints(line, lineno)
    if len(vals) != width:
        raise MalformedInput(f"line {lineno}: expected {width} values ({what}), got {len(vals)}")
    if any(v < 0 for v in vals):
        raise MalformedInput(f"line {lineno}: negative value in {what}")
    return vals


def parse_problem(text: str) -> ValueModel:
    """Parse the line-oriented problem format.

    line 1            item_count source_count budget
    line 2            item_count scores
    per source        source_item_count activation_cost throughput
                      source_item_count item ids
    """
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) < 2:
        raise MalformedInput("expected at least a header line and a score line")

    item_count, source_count, budget = _header(lines[0], 1, 3, "item_count source_count budget")
    scores = _ints(lines[1], 2)
    if len(scores) != item_count:
        raise MalformedInput(f"line 2: declared {item_count} item scores, found {len(scores)}")
    if any(s < 0 for s in scores):
        raise MalformedInput("line 2: item scores must be non-negative")

    sources: List[Source] = []
    pos = 2
    for sid in range(source_count):
        if pos >= len(lines):
            raise MalformedInput(f"declared {source_count} sources, input ends after {sid}")
        n_items, activation_cost, throughput = _header(
            lines[pos], pos + 1, 3, "source_item_count activation_cost throughput")
        item_line = lines[pos + 1] if pos + 1 < len(lines) else ""
        if pos + 1 >= len(lines) and n_items:
            raise MalformedInput(f"line {pos + 2}: missing item list for source {sid}")
        ids = _ints(item_line, pos + 2)
        bad = [i for i in ids if not 0 <= i < item_count]
        if bad:
            raise MalformedInput(f"line {pos + 2}: source {sid} references unknown items {bad[:5]}")
        if len(set(ids)) != n_items:
            raise MalformedInput(f"line {pos + 2}: source {sid} declares {n_items} items, found {len(set(ids))}")
        sources.append(Source(activation_cost=activation_cost, throughput=throughput, items=ids))
        pos += 2

    if any(line.strip() for line in lines[pos:]):
        raise MalformedInput(f"line {pos + 1}: unexpected content after {source_count} sources")

    logger.debug("Parsed problem: |I|={} |S|={} budget={}", item_count, source_count, budget)
    return ValueModel(sources=sources, item_scores=scores, budget=budget)


def read_problem(path: str | Path) -> ValueModel:
    p = Path(path)
    if not p.is_file():
        raise MissingFile(f"input file not found: {p}")
    logger.info("Parsing problem from {}", p)
    return parse_problem(p.read_text(encoding="utf-8"))
