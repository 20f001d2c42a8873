from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ColorVariant:
    color_name: str
    quantity: int   # Units of this model/color to distribute


@dataclass
class PhoneModel:
    model_name: str
    colors: List[ColorVariant] = field(default_factory=list)

    @property
    def total_quantity(self) -> int:
        return sum(max(0, c.quantity) for c in self.colors)

    @property
    def color_names(self) -> List[str]:
        return [c.color_name for c in self.colors]

    @classmethod
    def from_dict(cls, data: dict) -> "PhoneModel":
        """Build from ``{modelName, colors: [{colorName, quantity}]}``."""
        return cls(
            model_name=str(data["modelName"]),
            colors=[ColorVariant(str(c["colorName"]), int(c.get("quantity", 0))) for c in data.get("colors", [])],
        )
