"""Integration tests for SimulationEngine."""

from dataclasses import replace

import numpy as np
import pytest

from segnet.core.config import SimulationConfig
from segnet.core.engine import (
    SimulationEngine,
    SimulationState,
    TickSnapshot,
    compute_snapshot,
)


def _assert_occupancy_consistent(engine: SimulationEngine):
    positions = [a.position for a in engine.agents]
    assert len(set(positions)) == len(engine.agents)
    assert engine.grid.occupied_count() == len(engine.agents)
    for agent in engine.agents:
        assert engine.grid.occupant(*agent.position) == agent.id


class TestLifecycle:
    def test_starts_idle(self, small_config):
        engine = SimulationEngine(small_config)
        assert engine.state == SimulationState.IDLE
        assert engine.step() is None

    def test_setup_runs(self, small_config):
        engine = SimulationEngine(small_config)
        snap = engine.setup()
        assert engine.state == SimulationState.RUNNING
        assert isinstance(snap, TickSnapshot)
        assert snap.tick == 0
        assert len(engine.agents) == 300
        assert engine.history == [snap]
        _assert_occupancy_consistent(engine)

    def test_step_advances_tick(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        snap = engine.step()
        assert snap is not None
        assert snap.tick == 1
        assert engine.ticks == 1
        assert len(engine.history) == 2

    def test_setup_again_restarts(self, small_config):
        engine = SimulationEngine(small_config)
        first = engine.setup()
        engine.run(max_ticks=5)
        again = engine.setup()
        assert engine.ticks == 0
        assert len(engine.history) == 1
        assert again.percent_similar == pytest.approx(first.percent_similar)

    def test_run_sets_up_when_idle(self, small_config):
        engine = SimulationEngine(small_config)
        history = engine.run(max_ticks=3)
        assert history[0].tick == 0
        assert engine.state != SimulationState.IDLE

    def test_run_respects_tick_cap(self):
        config = SimulationConfig(
            random_seed=3, world_width=15, world_height=15,
            number_of_agents=200, closeness_threshold=100.0, max_ticks=4,
        )
        engine = SimulationEngine(config)
        history = engine.run()
        # Full closeness keeps every linked agent unhappy forever
        assert engine.ticks == 4
        assert len(history) == 5
        assert engine.state == SimulationState.RUNNING


class TestInvariants:
    def test_occupancy_after_every_tick(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        for _ in range(10):
            if engine.step() is None:
                break
            _assert_occupancy_consistent(engine)
            assert len(engine.agents) == small_config.number_of_agents

    def test_categories_never_change(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        before = [a.category for a in engine.agents]
        engine.run(max_ticks=5)
        assert [a.category for a in engine.agents] == before

    def test_thresholds_within_cap(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        for agent in engine.agents:
            assert 0.0 <= agent.similarity_threshold < small_config.similarity_threshold_cap
            assert agent.difference_threshold == small_config.difference_threshold
            assert agent.closeness_threshold == small_config.closeness_threshold

    def test_snapshot_matches_agents(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        snap = engine.step()
        unhappy = sum(1 for a in engine.agents if not a.satisfied)
        assert snap.unhappy_count == unhappy
        assert snap.percent_unhappy == pytest.approx(unhappy / 300 * 100)


class TestConvergence:
    def test_trivially_satisfied_converges_without_ticks(self):
        config = SimulationConfig(
            random_seed=1, world_width=10, world_height=10,
            number_of_agents=50, similarity_threshold_cap=0.0,
            closeness_threshold=0.0,
        )
        engine = SimulationEngine(config)
        engine.setup()
        assert engine.step() is None
        assert engine.state == SimulationState.CONVERGED
        assert engine.ticks == 0
        assert engine.step() is None

    def test_converged_state_is_fully_satisfied(self):
        config = SimulationConfig(
            random_seed=42, world_width=20, world_height=20,
            number_of_agents=150, similarity_threshold_cap=30.0,
            closeness_threshold=0.0, max_ticks=500,
        )
        engine = SimulationEngine(config)
        engine.run()
        assert engine.is_converged
        assert engine.latest.percent_unhappy == 0.0
        assert all(a.satisfied for a in engine.agents)

    def test_zero_unhappy_means_all_satisfied(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        for _ in range(200):
            snap = engine.step()
            if snap is None:
                break
            if snap.percent_unhappy == 0.0:
                assert all(a.satisfied for a in engine.agents)


class TestStop:
    def test_stop_before_run(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        engine.request_stop()
        engine.run()
        assert engine.ticks == 0
        assert not engine.stop_requested

    def test_stop_from_tick_callback(self, small_config):
        # Full closeness never converges, so only the stop ends the run
        engine = SimulationEngine(replace(small_config, closeness_threshold=100.0))
        seen = []

        def on_tick(snap):
            seen.append(snap.tick)
            if snap.tick == 2:
                engine.request_stop()

        engine.run(max_ticks=0, on_tick=on_tick)
        assert seen == [1, 2]
        assert engine.ticks == 2

    def test_stop_on_last_capped_tick_does_not_leak(self, small_config):
        engine = SimulationEngine(replace(small_config, closeness_threshold=100.0))

        def on_tick(snap):
            if snap.tick == 2:
                engine.request_stop()

        engine.run(max_ticks=2, on_tick=on_tick)
        assert engine.ticks == 2
        assert not engine.stop_requested

        engine.run(max_ticks=3)
        assert engine.ticks == 5


class TestDeterminism:
    def test_same_seed_same_history(self, small_config):
        h1 = SimulationEngine(small_config).run(max_ticks=8)
        h2 = SimulationEngine(small_config).run(max_ticks=8)
        assert len(h1) == len(h2)
        for s1, s2 in zip(h1, h2):
            assert s1.moved == s2.moved
            assert s1.percent_similar == s2.percent_similar
            assert s1.percent_unhappy == s2.percent_unhappy

    def test_same_seed_same_positions(self, small_config):
        e1 = SimulationEngine(small_config)
        e2 = SimulationEngine(small_config)
        e1.run(max_ticks=5)
        e2.run(max_ticks=5)
        np.testing.assert_array_equal(e1.grid.occupancy, e2.grid.occupancy)


class TestQueries:
    def test_agent_lookup(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        assert engine.agent(5).id == 5
        with pytest.raises(KeyError):
            engine.agent(10_000)

    def test_highlighted_cells_cover_own_neighborhood(self, small_config):
        engine = SimulationEngine(small_config)
        engine.setup()
        agent = engine.agent(0)
        cells = engine.highlighted_cells(0)
        assert agent.position in cells
        for nid in engine.graph.neighbors(0):
            assert engine.agents[nid].position in cells


class TestFromWorld:
    def test_prebuilt_world(self, make_world):
        grid, graph, agents = make_world(4, 4, {
            (0, 0): 0, (1, 0): 1, (0, 1): 1, (1, 1): 0,
        }, similarity=50.0)
        config = SimulationConfig(world_width=4, world_height=4, random_seed=0)
        engine = SimulationEngine.from_world(config, grid, graph, agents)
        assert engine.state == SimulationState.RUNNING
        assert not agents[0].satisfied
        assert engine.latest.unhappy_count > 0


class TestSnapshot:
    def test_zero_denominators(self, make_world):
        grid, graph, agents = make_world(10, 10, {(0, 0): 0, (5, 5): 1})
        config = SimulationConfig(world_width=10, world_height=10)
        snap = compute_snapshot(0, 0, agents, graph, config)
        assert snap.percent_similar == 0.0
        assert snap.global_average_link_distance == 0.0

    def test_link_average_ignores_unlinked(self, make_world):
        grid, graph, agents = make_world(20, 20, {
            (0, 0): 0, (3, 4): 0, (10, 10): 1,
        }, edges=[(0, 1)])
        for a in agents[:2]:
            a.average_link_distance = 5.0
        config = SimulationConfig(world_width=20, world_height=20, closeness_threshold=50.0)
        snap = compute_snapshot(0, 0, agents, graph, config)
        assert snap.global_average_link_distance == pytest.approx(5.0)
        assert snap.max_allowed_distance == pytest.approx(config.diagonal / 2)

    def test_percent_similar_pools_neighbor_counts(self, make_world):
        grid, graph, agents = make_world(10, 10, {(0, 0): 0, (5, 5): 1})
        agents[0].similar_nearby, agents[0].other_nearby = 1, 2
        agents[1].similar_nearby, agents[1].other_nearby = 2, 0
        config = SimulationConfig(world_width=10, world_height=10)
        snap = compute_snapshot(0, 0, agents, graph, config)
        # 3 similar out of 5 neighbors, not the mean of 1/3 and 2/2
        assert snap.percent_similar == pytest.approx(60.0)

    def test_percent_similar_from_evaluated_layout(self, make_world):
        grid, graph, agents = make_world(10, 10, {
            (0, 0): 0, (1, 0): 0, (2, 0): 1,
        })
        config = SimulationConfig(world_width=10, world_height=10)
        engine = SimulationEngine.from_world(config, grid, graph, agents)
        # (0,0): 1 similar; (1,0): 1 similar, 1 other; (2,0): 1 other
        assert engine.latest.percent_similar == pytest.approx(50.0)
