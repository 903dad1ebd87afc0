"""
Calculation settings (policy constants) for cable sizing.

Defaults follow SANS 10142-1. A project may override them with a JSON file,
either passed explicitly or named by the CABLE_SIZING_SETTINGS environment
variable.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from core.errors import ConfigurationError
from core.models import ConductorMaterial, InstallationMethod

SETTINGS_ENV_VAR = "CABLE_SIZING_SETTINGS"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationSettings:
    voltage_drop_limit_400v: float = 5.0
    voltage_drop_limit_230v: float = 3.0
    max_parallel_runs: int = 6
    max_alternatives: int = 5
    max_amps_per_cable: float = 400.0
    min_amps_per_parallel_cable: float = 50.0
    cable_safety_margin: float = 1.15
    grouping_factor_2_circuits: float = 0.80
    grouping_factor_3_circuits: float = 0.70
    grouping_factor_4plus_circuits: float = 0.65
    default_cable_material: str = ConductorMaterial.ALUMINIUM.value
    default_installation_method: str = InstallationMethod.AIR.value

    def voltage_drop_limit(self, voltage: float) -> float:
        return self.voltage_drop_limit_400v if voltage == 400 else self.voltage_drop_limit_230v

    def grouping_factor(self, parallel_count: int) -> float:
        if parallel_count <= 1:
            return 1.0
        if parallel_count == 2:
            return self.grouping_factor_2_circuits
        if parallel_count == 3:
            return self.grouping_factor_3_circuits
        return self.grouping_factor_4plus_circuits

    def validate(self) -> "CalculationSettings":
        for name in ("voltage_drop_limit_400v", "voltage_drop_limit_230v",
                     "max_amps_per_cable", "cable_safety_margin"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.max_parallel_runs < 1:
            raise ConfigurationError("max_parallel_runs must be at least 1")
        if self.max_alternatives < 1:
            raise ConfigurationError("max_alternatives must be at least 1")
        if self.min_amps_per_parallel_cable < 0:
            raise ConfigurationError("min_amps_per_parallel_cable cannot be negative")
        for name in ("grouping_factor_2_circuits", "grouping_factor_3_circuits",
                     "grouping_factor_4plus_circuits"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ConfigurationError(f"{name} must be in (0, 1], got {value}")
        if self.default_cable_material not in {m.value for m in ConductorMaterial}:
            raise ConfigurationError(f"Unknown default material: {self.default_cable_material}")
        if self.default_installation_method not in {m.value for m in InstallationMethod}:
            raise ConfigurationError(f"Unknown default installation method: {self.default_installation_method}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_SETTINGS = CalculationSettings()


def settings_from_dict(data: Dict[str, Any], base: CalculationSettings = DEFAULT_SETTINGS) -> CalculationSettings:
    known = {f.name for f in fields(CalculationSettings)}
    overrides = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown calculation setting %r", key)
            continue
        if value is None:
            continue
        default = getattr(base, key)
        try:
            overrides[key] = type(default)(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {key}: {value!r}") from e
    return replace(base, **overrides).validate()


def load_settings(path: Optional[Union[str, Path]] = None) -> CalculationSettings:
    if path is None:
        path = os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return DEFAULT_SETTINGS

    settings_file = Path(path)
    if not settings_file.exists():
        raise ConfigurationError(f"Settings file not found: {settings_file}")

    try:
        data = json.loads(settings_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file is not valid JSON: {settings_file}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain an object: {settings_file}")

    log.info("Loaded calculation settings from %s", settings_file)
    return settings_from_dict(data)
