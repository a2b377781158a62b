"""
tests/core/test_state.py

Covers:
  - IdSet membership / removal / iteration / freezing
  - ScheduleState construction, snapshots and commits
  - Invariant checking used on restore
"""

import pytest

from takeplan.core.datatypes import Take
from takeplan.core.errors import EngineInvariantError
from takeplan.core.state import IdSet, ScheduleState


# ── IdSet ─────────────────────────────────────────────────────────────────────

class TestIdSet:

    def test_full(self):
        s = IdSet.full(4)
        assert len(s) == 4
        assert list(s) == [0, 1, 2, 3]

    def test_from_ids(self):
        s = IdSet.from_ids(5, [3, 1, 3])
        assert list(s) == [1, 3]
        assert len(s) == 2

    def test_from_ids_out_of_range(self):
        with pytest.raises(ValueError):
            IdSet.from_ids(2, [2])

    def test_membership(self):
        s = IdSet.from_ids(3, [1])
        assert 1 in s
        assert 0 not in s
        assert 7 not in s
        assert -1 not in s

    def test_discard_twice(self):
        s = IdSet.full(3)
        s.discard(1)
        s.discard(1)
        assert len(s) == 2
        assert list(s) == [0, 2]

    def test_freeze_is_a_copy(self):
        s = IdSet.full(3)
        f = s.freeze()
        s.discard(0)
        assert 0 in f
        assert len(f) == 3
        assert f.frozen and not s.frozen

    def test_frozen_rejects_discard(self):
        with pytest.raises(TypeError):
            IdSet.full(2).freeze().discard(0)

    def test_equality(self):
        assert IdSet.full(3).freeze() == IdSet.from_ids(3, [0, 1, 2])


# ── ScheduleState ─────────────────────────────────────────────────────────────

class TestScheduleState:

    def test_initial(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        assert st.elapsed == 0
        assert list(st.available_sources) == [0, 1]
        assert list(st.available_items) == [0, 1, 2]
        assert st.committed == []
        assert st.budget == 2

    def test_snapshot_is_isolated(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        snap = st.snapshot()
        st.commit(Take(source=0, items=[1]))
        assert snap.elapsed == 0
        assert 0 in snap.available_sources
        assert 1 in snap.available_items
        assert snap.remaining == 2

    def test_commit(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.commit(Take(source=0, items=[1]))
        assert st.elapsed == 1
        assert list(st.available_sources) == [1]
        assert list(st.available_items) == [0, 2]
        assert st.committed == [Take(source=0, items=[1])]

    def test_commit_reused_item(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.commit(Take(source=0, items=[1]))
        with pytest.raises(EngineInvariantError):
            st.commit(Take(source=1, items=[1]))

    def test_commit_reused_source(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.commit(Take(source=0, items=[1]))
        with pytest.raises(EngineInvariantError):
            st.commit(Take(source=0, items=[0]))

    def test_consume_source(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.consume_source(1)
        assert list(st.available_sources) == [0]
        assert st.elapsed == 0


class TestInvariants:

    def test_fresh_state_ok(self, scenario_vm):
        ScheduleState.initial(scenario_vm).check_invariants()

    def test_committed_state_ok(self, example_vm):
        st = ScheduleState.initial(example_vm)
        st.commit(Take(source=0, items=[3, 4, 2, 1, 0]))
        st.check_invariants()

    def test_elapsed_mismatch(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.commit(Take(source=0, items=[1]))
        st.elapsed = 2
        with pytest.raises(ValueError):
            st.check_invariants()

    def test_item_still_available(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        st.commit(Take(source=0, items=[1]))
        st.available_items = IdSet.full(3)
        with pytest.raises(ValueError):
            st.check_invariants()

    def test_ineligible_item(self, scenario_vm):
        st = ScheduleState(
            value_model=scenario_vm,
            elapsed=1,
            available_sources=IdSet.from_ids(2, [1]),
            available_items=IdSet.from_ids(3, [0, 1]),
            committed=[Take(source=0, items=[2])],
        )
        with pytest.raises(ValueError):
            st.check_invariants()

    def test_take_over_capacity(self, scenario_vm):
        st = ScheduleState.initial(scenario_vm)
        # one time unit left after activation at rate 1: room for a single item
        st.commit(Take(source=0, items=[1, 0]))
        with pytest.raises(ValueError, match="capacity"):
            st.check_invariants()

    def test_activation_past_budget(self, scenario_vm):
        st = ScheduleState(
            value_model=scenario_vm.model_copy(update={"budget": 1}),
            elapsed=2,
            available_sources=IdSet.from_ids(2, []),
            available_items=IdSet.from_ids(3, [0, 1, 2]),
            committed=[Take(source=0, items=[]), Take(source=1, items=[])],
        )
        with pytest.raises(ValueError, match="past the budget"):
            st.check_invariants()
