"""
Experiment Runner: A/B testing, parameter sweeps, and batch execution.

Provides tools for running comparative experiments, sweeping parameters,
and collecting results across multiple simulation runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from segnet.core.config import SimulationConfig
from segnet.core.engine import SimulationEngine, TickSnapshot
from segnet.metrics.collector import MetricsCollector, TickMetrics


@dataclass
class ExperimentResult:
    """Result of a single experiment run."""
    config: SimulationConfig
    history: list[TickSnapshot]
    metrics: list[TickMetrics]
    converged: bool
    ticks: int
    final_percent_similar: float
    final_percent_unhappy: float
    final_average_link_distance: float


@dataclass
class ComparisonResult:
    """Result of comparing two or more experiments."""
    results: dict[str, ExperimentResult]
    config_diffs: dict[str, Any]


class ExperimentRunner:
    """
    Run, compare, and sweep simulation experiments.
    """

    def run_experiment(
        self,
        config: SimulationConfig,
        collect_metrics: bool = True,
    ) -> ExperimentResult:
        """Run a single experiment and return results.

        Metrics are collected after every tick, since the collector reads
        live agent state.
        """
        engine = SimulationEngine(config)
        initial = engine.setup()

        collector = MetricsCollector(config) if collect_metrics else None
        if collector is not None:
            collector.collect(engine.agents, initial)

        limit = config.max_ticks
        while not limit or engine.ticks < limit:
            snapshot = engine.step()
            if snapshot is None:
                break
            if collector is not None:
                collector.collect(engine.agents, snapshot)

        final = engine.latest
        return ExperimentResult(
            config=config,
            history=engine.history,
            metrics=collector.metrics_history if collector is not None else [],
            converged=engine.is_converged,
            ticks=engine.ticks,
            final_percent_similar=final.percent_similar,
            final_percent_unhappy=final.percent_unhappy,
            final_average_link_distance=final.global_average_link_distance,
        )

    def compare_experiments(
        self,
        configs: dict[str, SimulationConfig],
        collect_metrics: bool = True,
    ) -> ComparisonResult:
        """Run multiple experiments and compare results."""
        results: dict[str, ExperimentResult] = {}
        for name, config in configs.items():
            results[name] = self.run_experiment(config, collect_metrics)

        # Compute config diffs against the first config
        config_names = list(configs.keys())
        diffs: dict[str, Any] = {}
        if len(config_names) >= 2:
            base = configs[config_names[0]]
            for name in config_names[1:]:
                diffs[f"{config_names[0]}_vs_{name}"] = base.diff(configs[name])

        return ComparisonResult(results=results, config_diffs=diffs)

    def run_ab_test(
        self,
        config_a: SimulationConfig,
        config_b: SimulationConfig,
        label_a: str = "A",
        label_b: str = "B",
        collect_metrics: bool = True,
    ) -> ComparisonResult:
        """Run an A/B test between two configurations."""
        return self.compare_experiments(
            {label_a: config_a, label_b: config_b},
            collect_metrics=collect_metrics,
        )

    def run_parameter_sweep(
        self,
        base_config: SimulationConfig,
        param_name: str,
        values: list[Any],
        collect_metrics: bool = True,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the parameter to sweep (attribute on SimulationConfig)
            values: List of values to test
            collect_metrics: Whether to collect detailed metrics

        Returns:
            Dict mapping value label -> ExperimentResult
        """
        results: dict[str, ExperimentResult] = {}

        for val in values:
            config_dict = base_config.to_dict()
            config_dict[param_name] = val
            config_dict["experiment_name"] = f"sweep_{param_name}={val}"
            config = SimulationConfig.from_dict(config_dict)

            label = f"{param_name}={val}"
            results[label] = self.run_experiment(config, collect_metrics)

        return results

    def run_multi_seed(
        self,
        config: SimulationConfig,
        seeds: list[int],
        collect_metrics: bool = False,
    ) -> list[ExperimentResult]:
        """
        Run the same configuration with multiple random seeds.

        Useful for measuring variance in outcomes.
        """
        results: list[ExperimentResult] = []
        for seed in seeds:
            config_dict = config.to_dict()
            config_dict["random_seed"] = seed
            config_dict["experiment_name"] = f"{config.experiment_name}_seed{seed}"
            seed_config = SimulationConfig.from_dict(config_dict)
            results.append(self.run_experiment(seed_config, collect_metrics))
        return results
