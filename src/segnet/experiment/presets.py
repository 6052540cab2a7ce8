"""
Experiment presets: pre-configured experiment templates.

Each preset returns a SimulationConfig with specific parameter settings
designed to probe how social ties interact with spatial preferences.
"""

from __future__ import annotations

from segnet.core.config import SimulationConfig


def baseline() -> SimulationConfig:
    """Standard baseline configuration with default parameters."""
    return SimulationConfig(experiment_name="baseline")


def classic_schelling() -> SimulationConfig:
    """No social constraint: closeness 0 lets links stretch across the map."""
    return SimulationConfig(
        experiment_name="classic_schelling",
        closeness_threshold=0.0,
        average_degree=0,
    )


def tight_friends() -> SimulationConfig:
    """Agents want their contacts close by."""
    return SimulationConfig(
        experiment_name="tight_friends",
        closeness_threshold=85.0,
        average_degree=4,
        movement_radius=4.0,
    )


def homophilous_network() -> SimulationConfig:
    """Links mostly connect agents of the same category."""
    return SimulationConfig(
        experiment_name="homophilous_network",
        category_network_correlation=0.9,
        closeness_threshold=70.0,
    )


def diversity_seekers() -> SimulationConfig:
    """Agents also require a share of other-category neighbors."""
    return SimulationConfig(
        experiment_name="diversity_seekers",
        similarity_threshold_cap=40.0,
        difference_threshold=25.0,
    )


def many_categories() -> SimulationConfig:
    """Five categories on a crowded grid."""
    return SimulationConfig(
        experiment_name="many_categories",
        number_of_categories=5,
        number_of_agents=2300,
        similarity_threshold_cap=40.0,
    )


def small_world_random() -> SimulationConfig:
    """Heavily rewired network: contacts are scattered, not local."""
    return SimulationConfig(
        experiment_name="small_world_random",
        rewiring_probability=0.8,
        closeness_threshold=60.0,
    )


# Registry of all presets
PRESETS: dict[str, callable] = {
    "baseline": baseline,
    "classic_schelling": classic_schelling,
    "tight_friends": tight_friends,
    "homophilous_network": homophilous_network,
    "diversity_seekers": diversity_seekers,
    "many_categories": many_categories,
    "small_world_random": small_world_random,
}


def get_preset(name: str) -> SimulationConfig:
    """Get a preset config by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """Return list of available preset names."""
    return list(PRESETS.keys())
