"""
tests/models/test_scoring.py

Covers:
  - Replay scoring with prefix truncation
  - Idempotence
  - Breakdown bookkeeping
"""

from takeplan.core.datatypes import Take
from takeplan.models.scoring import score, score_breakdown


class TestScore:

    def test_scenario(self, scenario_vm):
        assert score([Take(source=0, items=[1])], scenario_vm) == 5

    def test_empty(self, scenario_vm):
        assert score([], scenario_vm) == 0

    def test_truncates_to_capacity_at_replay(self, scenario_vm):
        # only one slot after A's activation; item 0 falls outside
        assert score([Take(source=0, items=[1, 0])], scenario_vm) == 5

    def test_later_take_sees_advanced_clock(self, scenario_vm):
        takes = [Take(source=0, items=[1]), Take(source=1, items=[2])]
        assert score(takes, scenario_vm) == 5

    def test_order_matters(self, scenario_vm):
        assert score([Take(source=1, items=[2]), Take(source=0, items=[1])], scenario_vm) == 2

    def test_idempotent(self, example_vm):
        takes = [Take(source=0, items=[3, 4, 2, 1, 0]), Take(source=1, items=[5])]
        first = score(takes, example_vm)
        assert first == 21
        assert all(score(takes, example_vm) == first for _ in range(5))
        assert takes[0].items == [3, 4, 2, 1, 0]


class TestBreakdown:

    def test_fields(self, example_vm):
        takes = [Take(source=0, items=[3, 4, 2, 1, 0]), Take(source=1, items=[5])]
        bd = score_breakdown(takes, example_vm)
        assert bd.per_take == [17, 4]
        assert bd.total == 21
        assert bd.items_harvested == 6
        assert bd.clock == 5
