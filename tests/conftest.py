"""Shared fixtures: the small hand-checked scenarios plus a random instance factory."""

import random
import sys

import pytest
from loguru import logger

from takeplan.core.datatypes import Source, ValueModel


EXAMPLE_TEXT = """6 2 7
1 2 3 6 5 4
5 2 2
0 1 2 3 4
4 3 1
3 2 5 0
"""


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    # CLI tests point loguru at a captured stream; put stderr back afterwards
    logger.remove()
    logger.add(sys.stderr, level="INFO")


@pytest.fixture
def scenario_vm():
    """scores [3, 5, 2]; A: cost 1, rate 1, {0, 1}; B: cost 1, rate 1, {2}; budget 2."""
    return ValueModel(
        item_scores=[3, 5, 2],
        sources=[
            Source(activation_cost=1, throughput=1, items=[0, 1]),
            Source(activation_cost=1, throughput=1, items=[2]),
        ],
        budget=2,
    )


@pytest.fixture
def example_text():
    return EXAMPLE_TEXT


@pytest.fixture
def example_vm():
    return ValueModel(
        item_scores=[1, 2, 3, 6, 5, 4],
        sources=[
            Source(activation_cost=2, throughput=2, items=[0, 1, 2, 3, 4]),
            Source(activation_cost=3, throughput=1, items=[3, 2, 5, 0]),
        ],
        budget=7,
    )


@pytest.fixture
def swap_vm():
    """Densest source is cheap; runner-up's activation outlasts the best's whole take."""
    return ValueModel(
        item_scores=[10, 10, 1],
        sources=[
            Source(activation_cost=1, throughput=10, items=[0, 1]),
            Source(activation_cost=5, throughput=1, items=[2]),
        ],
        budget=10,
    )


@pytest.fixture
def make_random_vm():
    def _make(seed: int, n_items: int = 60, n_sources: int = 12, budget: int = 25) -> ValueModel:
        rng = random.Random(seed)
        scores = [rng.randint(0, 50) for _ in range(n_items)]
        sources = []
        for _ in range(n_sources):
            k = rng.randint(0, 15)
            sources.append(Source(
                activation_cost=rng.randint(0, 8),
                throughput=rng.randint(0, 3),
                items=rng.sample(range(n_items), k),
            ))
        return ValueModel(item_scores=scores, sources=sources, budget=budget)
    return _make
