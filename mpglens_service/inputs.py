from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class PredictionInputs:
    """Vehicle parameters sent to the fuel-efficiency regression."""

    engine_displacement: float = 3.5
    cylinders: int = 6
    city_fe: float = 20.0
    highway_fe: float = 28.0
    co2: float = 300.0

    @classmethod
    def from_car_details(cls, details: Mapping[str, Any]) -> "PredictionInputs":
        """Fill from a car-details response; missing or zero fields keep the defaults."""

        defaults = cls()
        return cls(
            engine_displacement=float(details.get("engine_displacement") or defaults.engine_displacement),
            cylinders=int(details.get("cylinders") or defaults.cylinders),
            city_fe=float(details.get("city_fuel_efficiency") or defaults.city_fe),
            highway_fe=float(details.get("highway_fuel_efficiency") or defaults.highway_fe),
            co2=float(details.get("co2_emissions") or defaults.co2),
        )

    def to_payload(self) -> dict[str, float | int]:
        return {
            "Eng Displ": self.engine_displacement,
            "# Cyl": self.cylinders,
            "City FE (Guide) - Conventional Fuel": self.city_fe,
            "Hwy FE (Guide) - Conventional Fuel": self.highway_fe,
            "Comb CO2 Rounded Adjusted (as shown on FE Label)": self.co2,
        }

    def label(self) -> str:
        return (
            f"Eng: {_num(self.engine_displacement)}, Cyl: {self.cylinders}, "
            f"City FE: {_num(self.city_fe)}, Hwy FE: {_num(self.highway_fe)}, CO2: {_num(self.co2)}"
        )


@dataclass(frozen=True)
class ClusterInputs:
    """Fuel-economy figures sent to the cluster model."""

    city_fe: float
    highway_fe: float
    combined_fe: float
    annual_fuel_cost: float

    @classmethod
    def from_car_details(cls, details: Mapping[str, Any]) -> "ClusterInputs":
        try:
            return cls(
                city_fe=float(details["city_fuel_efficiency"]),
                highway_fe=float(details["highway_fuel_efficiency"]),
                combined_fe=float(details["combined_fuel_efficiency"]),
                annual_fuel_cost=float(details["annual_fuel_cost"]),
            )
        except KeyError as exc:
            raise ValueError(f"car details missing required field: {exc.args[0]}") from exc

    def to_payload(self) -> dict[str, float]:
        return {
            "City FE (Guide) - Conventional Fuel": self.city_fe,
            "Hwy FE (Guide) - Conventional Fuel": self.highway_fe,
            "Comb FE (Guide) - Conventional Fuel": self.combined_fe,
            "Annual Fuel1 Cost - Conventional Fuel": self.annual_fuel_cost,
        }


def _num(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
