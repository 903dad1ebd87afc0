from dataclasses import dataclass
from typing import Optional

from core.models import InstallationMethod


@dataclass(frozen=True)
class CableSpec:
    size: str
    ampacity_ground: float
    ampacity_ducts: float
    ampacity_air: float
    ohm_per_km: float
    volt_drop_3ph: float  # mV/A/m
    volt_drop_1ph: float  # mV/A/m
    supply_cost: float    # per metre
    install_cost: float   # per metre
    diameter_mm: Optional[float] = None     # Display only
    mass_kg_per_km: Optional[float] = None  # Display only

    @property
    def unit_cost(self) -> float:
        return self.supply_cost + self.install_cost

    def ampacity(self, method: InstallationMethod) -> float:
        if method == InstallationMethod.GROUND:
            return self.ampacity_ground
        elif method == InstallationMethod.DUCTS:
            return self.ampacity_ducts
        return self.ampacity_air

    def volt_drop_coefficient(self, voltage: float) -> float:
        """mV/A/m for the phase configuration implied by the supply voltage."""
        return self.volt_drop_3ph if voltage == 400 else self.volt_drop_1ph


@dataclass(frozen=True)
class CableRate:
    cable_size: str
    cable_type: str
    supply_rate_per_meter: float
    install_rate_per_meter: float
    termination_cost_per_end: float = 0.0


@dataclass
class CableEntry:
    """One row of a project cable schedule."""
    cable_tag: str
    from_location: str = ""
    to_location: str = ""
    voltage: Optional[float] = None
    load_amps: Optional[float] = None
    cable_size: Optional[str] = None
    cable_type: Optional[str] = None
    total_length: Optional[float] = None
    installation_method: Optional[str] = None
    protection_device_rating: Optional[float] = None
    parallel_total_count: Optional[int] = None
    parallel_group_id: Optional[str] = None
    base_cable_tag: Optional[str] = None
