from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union


class ConductorMaterial(Enum):
    COPPER = "copper"
    ALUMINIUM = "aluminium"


class InstallationMethod(Enum):
    GROUND = "ground"
    DUCTS = "ducts"
    AIR = "air"


class CircuitType(Enum):
    LIGHTING = "lighting"
    POWER = "power"
    MOTOR = "motor"
    HVAC = "hvac"
    DATA = "data"
    FIRE = "fire"
    OTHER = "other"


# Load multipliers applied by callers before building a SizingRequest
CIRCUIT_LOAD_MULTIPLIERS = {
    CircuitType.LIGHTING: 1.25,  # Continuous load
    CircuitType.POWER: 1.1,
    CircuitType.MOTOR: 1.5,      # Starting allowance
    CircuitType.HVAC: 1.25,
    CircuitType.DATA: 1.0,
    CircuitType.FIRE: 1.0,
    CircuitType.OTHER: 1.0,
}

CIRCUIT_POWER_FACTORS = {
    CircuitType.LIGHTING: 0.95,
    CircuitType.POWER: 0.85,
    CircuitType.MOTOR: 0.80,
    CircuitType.HVAC: 0.85,
    CircuitType.DATA: 0.9,
    CircuitType.FIRE: 0.9,
    CircuitType.OTHER: 0.9,
}

SUPPORTED_VOLTAGES = (230, 400)


@dataclass(frozen=True)
class SizingRequest:
    load_amps: float
    voltage: float            # 230 (single phase) or 400 (three phase)
    total_length_meters: float
    material: Union[ConductorMaterial, str] = ConductorMaterial.COPPER
    installation_method: Union[InstallationMethod, str] = InstallationMethod.AIR
    derating_factor: float = 1.0  # 0 < f <= 1, applied to ampacity

    @property
    def phases(self) -> int:
        return 3 if self.voltage == 400 else 1


@dataclass(frozen=True)
class CableAlternative:
    cable_size: str
    cables_in_parallel: int
    load_per_cable: float
    volt_drop_percent: float
    supply_cost: float
    install_cost: float
    total_cost: float
    is_recommended: bool = False

    @property
    def key(self) -> Tuple[str, int]:
        return (self.cable_size, self.cables_in_parallel)

    @property
    def description(self) -> str:
        if self.cables_in_parallel > 1:
            return f"{self.cables_in_parallel}x {self.cable_size} in parallel"
        return self.cable_size


@dataclass(frozen=True)
class SizingResult:
    recommended_size: str
    cables_in_parallel: int
    load_per_cable: float
    ohm_per_km: float
    volt_drop_volts: float
    volt_drop_percent: float
    volt_drop_limit: float
    ampacity_per_cable: float   # Derated rating of one run
    supply_cost: float
    install_cost: float
    total_cost: float
    alternatives: Tuple[CableAlternative, ...] = ()
    cost_savings: float = 0.0

    @property
    def description(self) -> str:
        if self.cables_in_parallel > 1:
            return f"{self.cables_in_parallel}x {self.recommended_size} in parallel"
        return self.recommended_size
