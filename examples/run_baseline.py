#!/usr/bin/env python3
"""Run a baseline segregation simulation and print results."""

from segnet.core.config import SimulationConfig
from segnet.core.engine import SimulationEngine


def main():
    config = SimulationConfig(
        experiment_name="baseline",
        random_seed=42,
        max_ticks=200,
    )

    print(f"=== Segnet: {config.experiment_name} ===")
    print(f"World: {config.world_width}x{config.world_height}")
    print(f"Agents: {config.number_of_agents} in {config.number_of_categories} categories")
    print(f"Similarity cap: {config.similarity_threshold_cap}%  "
          f"Difference: {config.difference_threshold}%  "
          f"Closeness: {config.closeness_threshold}%")
    print(f"Network: degree {config.average_degree}, rewiring {config.rewiring_probability}")
    print()

    engine = SimulationEngine(config)
    history = engine.run()

    print(f"{'Tick':>5} {'Moved':>6} {'Similar%':>9} {'Unhappy%':>9} "
          f"{'Spatial':>8} {'Social':>7} {'AvgLink':>8}")
    print("-" * 60)

    for snap in history:
        print(
            f"{snap.tick:5d} {snap.moved:6d} "
            f"{snap.percent_similar:9.2f} {snap.percent_unhappy:9.2f} "
            f"{snap.spatially_unhappy:8d} {snap.socially_unhappy:7d} "
            f"{snap.global_average_link_distance:8.2f}"
        )

    final = history[-1]
    print()
    print(f"=== Final State (Tick {final.tick}) ===")
    print(f"State: {engine.state.value}")
    print(f"Percent similar: {final.percent_similar:.2f}")
    print(f"Percent unhappy: {final.percent_unhappy:.2f}")
    print(f"Average link distance: {final.global_average_link_distance:.2f} "
          f"(max allowed {final.max_allowed_distance:.2f})")


if __name__ == "__main__":
    main()
