
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import List, Optional

from loguru import logger

from ..core.config import EngineConfig
from ..core.datatypes import Take
from ..core.state import StateSnapshot
from ..plugins.registry import register, get as get_policy
from .evaluator import evaluate
from .types import Candidate


class _FanOutPolicy:
    """Shared parallel evaluation: map `evaluate` over every available source, then join."""

    name = "base"

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    def evaluate_all(self, snapshot: StateSnapshot) -> List[Candidate]:
        """Non-empty candidates for every available source, in source-id order."""
        fn = partial(evaluate, snapshot)
        source_ids = list(snapshot.available_sources)
        if self.max_workers == 1 or len(source_ids) <= 1:
            results = [fn(s) for s in source_ids]
        else:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="takeplan-eval")
            # map() preserves input order and blocks until every evaluation is done
            results = list(self._executor.map(fn, source_ids))
        candidates = [c for c in results if not c.is_empty()]
        logger.debug("Evaluated {} sources, {} usable candidates", len(source_ids), len(candidates))
        return candidates

    @staticmethod
    def rank(candidates: List[Candidate]) -> List[Candidate]:
        return sorted(candidates, key=lambda c: (-c.rank_value, c.source))

    def select_next(self, snapshot: StateSnapshot) -> Optional[Take]:
        raise NotImplementedError

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@register("greedy")
class GreedyPolicy(_FanOutPolicy):
    """Commit the densest candidate each step (ties: lowest source id)."""

    name = "greedy"

    def select_next(self, snapshot: StateSnapshot) -> Optional[Take]:
        candidates = self.evaluate_all(snapshot)
        if not candidates:
            return None
        best = min(candidates, key=lambda c: (-c.rank_value, c.source))
        return best.take


@register("lookahead")
class LookaheadPolicy(_FanOutPolicy):
    """Two-candidate exchange on top of the greedy ranking.

    If the runner-up's free time after activation is shorter than what the
    best candidate leaves after activating *and* harvesting, take the
    runner-up first so its activation is not stranded later. Only the top two
    are ever compared.
    """

    name = "lookahead"

    @staticmethod
    def prefer_second(best: Candidate, second: Candidate, remaining: int) -> bool:
        free_second = remaining - second.activation_cost
        rem_best = remaining - best.activation_cost - len(best.take.items) / best.throughput
        return free_second < rem_best

    def select_next(self, snapshot: StateSnapshot) -> Optional[Take]:
        ranked = self.rank(self.evaluate_all(snapshot))
        if not ranked:
            return None
        if len(ranked) < 2:
            return ranked[0].take
        best, second = ranked[0], ranked[1]
        if self.prefer_second(best, second, snapshot.remaining):
            logger.debug("Lookahead swap: source {} before source {}", second.source, best.source)
            return second.take
        return best.take


def make_policy(cfg: EngineConfig | str | None = None) -> _FanOutPolicy:
    if cfg is None:
        cfg = EngineConfig()
    elif isinstance(cfg, str):
        cfg = EngineConfig(strategy=cfg)
    return get_policy(cfg.strategy)(max_workers=cfg.max_workers)
