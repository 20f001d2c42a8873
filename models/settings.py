from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from config.defaults import DEFAULT_RATIOS, FACTOR_KEYS

# Serialized (camelCase) names of the four ratio keys
_RATIO_WIRE_NAMES = {
    "turnover_rate": "turnoverRate",
    "store_count": "storeCount",
    "remaining_inventory": "remainingInventory",
    "sales_volume": "salesVolume",
}


@dataclass
class AssignmentRatios:
    turnover_rate: float = DEFAULT_RATIOS["turnover_rate"]
    store_count: float = DEFAULT_RATIOS["store_count"]
    remaining_inventory: float = DEFAULT_RATIOS["remaining_inventory"]
    sales_volume: float = DEFAULT_RATIOS["sales_volume"]

    @property
    def total(self) -> float:
        return sum(max(0.0, float(getattr(self, key))) for key in FACTOR_KEYS)

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in FACTOR_KEYS}

    def shares(self) -> Dict[str, float]:
        """Ratios rescaled so they sum to 100. All-zero ratios give all-zero shares."""
        total = self.total
        if total <= 0:
            return {key: 0.0 for key in FACTOR_KEYS}
        return {key: max(0.0, float(getattr(self, key))) / total * 100 for key in FACTOR_KEYS}


@dataclass
class AssignmentTargets:
    offices: Dict[str, bool] = field(default_factory=dict)
    departments: Dict[str, bool] = field(default_factory=dict)
    agents: Dict[str, bool] = field(default_factory=dict)

    @staticmethod
    def _selected(flags: Dict[str, bool]) -> Set[str]:
        return {name for name, on in flags.items() if on}

    @property
    def selected_offices(self) -> Set[str]:
        return self._selected(self.offices)

    @property
    def selected_departments(self) -> Set[str]:
        return self._selected(self.departments)

    @property
    def selected_agents(self) -> Set[str]:
        return self._selected(self.agents)


@dataclass
class AssignmentSettings:
    ratios: AssignmentRatios = field(default_factory=AssignmentRatios)
    targets: AssignmentTargets = field(default_factory=AssignmentTargets)

    def to_dict(self) -> dict:
        """Serialize to the external settings shape (camelCase ratio keys)."""
        return {
            "ratios": {_RATIO_WIRE_NAMES[k]: v for k, v in self.ratios.as_dict().items()},
            "targets": {
                "offices": dict(sorted(self.targets.offices.items())),
                "departments": dict(sorted(self.targets.departments.items())),
                "agents": dict(sorted(self.targets.agents.items())),
            },
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "AssignmentSettings":
        """Build settings from the external shape. Missing sections fall back to defaults."""
        data = data or {}
        raw_ratios = data.get("ratios") or {}
        ratio_values = {}
        for key, wire in _RATIO_WIRE_NAMES.items():
            value = raw_ratios.get(wire, raw_ratios.get(key, DEFAULT_RATIOS[key]))
            ratio_values[key] = float(value)

        raw_targets = data.get("targets") or {}
        targets = AssignmentTargets(
            offices={str(k): bool(v) for k, v in (raw_targets.get("offices") or {}).items()},
            departments={str(k): bool(v) for k, v in (raw_targets.get("departments") or {}).items()},
            agents={str(k): bool(v) for k, v in (raw_targets.get("agents") or {}).items()},
        )
        return cls(ratios=AssignmentRatios(**ratio_values), targets=targets)
