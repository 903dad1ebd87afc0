import math
from typing import Optional, Union

from core.errors import UnknownInstallationMethod, UnknownMaterial
from core.models import (
    CIRCUIT_LOAD_MULTIPLIERS, CIRCUIT_POWER_FACTORS,
    CircuitType, ConductorMaterial, InstallationMethod,
)


def convert_power_to_amps(val: float, unit: str, voltage: float, pf: Optional[float] = None) -> float:
    """
    Converts a load value to line current (Amps).
    230V is treated as single phase, 400V as three phase.
    """
    unit = unit.strip().upper()
    if pf is None:
        pf = 0.9

    if unit == "A":
        return val

    # Apparent power does not need the power factor
    if unit == "VA": va = val
    elif unit == "KVA": va = val * 1000.0
    elif unit == "MVA": va = val * 1000000.0
    else:
        if unit == "W": watts = val
        elif unit == "KW": watts = val * 1000.0
        elif unit == "MW": watts = val * 1000000.0
        elif unit == "HP": watts = val * 746.0
        else:
            raise ValueError(f"Unknown power unit: {unit}")
        va = watts / pf

    if voltage == 400:
        return va / (math.sqrt(3) * voltage)
    return va / voltage


def convert_length_unit(val: float, unit: str) -> float:
    """Returns length in meters."""
    unit = unit.strip().lower()
    if unit in ["m", "mts", "metres", "meters", "metre", "meter"]: return val
    if unit in ["km"]: return val * 1000.0
    if unit in ["ft", "feet"]: return val * 0.3048
    if unit in ["yd", "yards"]: return val * 0.9144
    return val


def parse_material(value: Union[ConductorMaterial, str]) -> ConductorMaterial:
    """Accepts 'copper', 'Cu/PVC', 'Aluminium', 'Al' ..."""
    if isinstance(value, ConductorMaterial):
        return value
    text = str(value).strip().lower()
    if text in ("copper", "cu") or text.startswith("cu/") or text.startswith("copper"):
        return ConductorMaterial.COPPER
    if text in ("aluminium", "aluminum", "al") or text.startswith("al/") or text.startswith("alumin"):
        return ConductorMaterial.ALUMINIUM
    raise UnknownMaterial(f"Unknown conductor material: {value!r}",
                          hint="Use copper or aluminium")


def parse_installation_method(value: Union[InstallationMethod, str]) -> InstallationMethod:
    if isinstance(value, InstallationMethod):
        return value
    text = str(value).strip().lower()
    if text in ("ground", "underground", "buried"): return InstallationMethod.GROUND
    if text in ("ducts", "duct", "conduit"): return InstallationMethod.DUCTS
    if text in ("air", "free air", "tray"): return InstallationMethod.AIR
    raise UnknownInstallationMethod(f"Unknown installation method: {value!r}",
                                    hint="Use ground, ducts or air")


def apply_circuit_multiplier(load_amps: float, circuit_type: Union[CircuitType, str]) -> float:
    """Design current for a circuit type (motor starting, continuous lighting ...)."""
    return load_amps * CIRCUIT_LOAD_MULTIPLIERS[CircuitType(circuit_type)]


def default_power_factor(circuit_type: Union[CircuitType, str]) -> float:
    return CIRCUIT_POWER_FACTORS[CircuitType(circuit_type)]
