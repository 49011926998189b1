"""
Simulation parameters for meshprune.

Defaults reproduce the reference run: 1000 relays on a 30 x 40 field, a
10-unit radio cutoff and 20000 learning rounds.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class CostParams:
    """Cost constants shared by graph construction and cost aggregation."""

    cutoff_distance: float = 10.0
    cost_not_found: float = 5000.0  # penalty for a node the root cannot reach
    cost_switch: float = 80.0       # relay overhead on edges not touching the root
    cost_message: float = 2.0       # per enabled node, root included

    def __post_init__(self) -> None:
        if self.cutoff_distance <= 0:
            raise ValueError("cutoff_distance must be positive")
        for name in ("cost_not_found", "cost_switch", "cost_message"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class SimulationConfig:
    n_nodes: int = 1000
    width: float = 30.0
    height: float = 40.0
    cutoff_distance: float = 10.0
    cost_not_found: float = 5000.0
    cost_switch: float = 80.0
    cost_message: float = 2.0
    initial_weight: float = 1.5
    learning_rate: float = 0.003
    rounds: int = 20000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if self.n_nodes < 1:
            raise ValueError("n_nodes must be at least 1 (the root)")
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be non-negative")
        if self.rounds < 0:
            raise ValueError("rounds must be non-negative")
        if self.learning_rate < 0:
            raise ValueError("learning_rate must be non-negative")
        CostParams(
            cutoff_distance=self.cutoff_distance,
            cost_not_found=self.cost_not_found,
            cost_switch=self.cost_switch,
            cost_message=self.cost_message,
        )

    @property
    def cost_params(self) -> CostParams:
        return CostParams(
            cutoff_distance=self.cutoff_distance,
            cost_not_found=self.cost_not_found,
            cost_switch=self.cost_switch,
            cost_message=self.cost_message,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        """
        Build a config from a plain mapping, e.g. parsed YAML.

        Missing keys take their defaults. Unknown keys raise ValueError so a
        typo in a config file is not silently ignored.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            if value is None:
                if name == "seed":
                    kwargs[name] = None
                continue
            if name in ("n_nodes", "rounds", "seed"):
                kwargs[name] = int(value)
            else:
                kwargs[name] = float(value)
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "SimulationConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: Path) -> SimulationConfig:
    import yaml  # type: ignore

    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{path}: expected a mapping at top level")
    return SimulationConfig.from_mapping(data)
