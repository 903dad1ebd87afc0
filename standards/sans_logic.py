from typing import Optional, Sequence

from core.components import CableSpec
from core.models import InstallationMethod


class AmpacitySelector:
    @staticmethod
    def select_minimum_size(
        table: Sequence[CableSpec],
        required_amps: float,
        method: InstallationMethod,
        start_index: int = 0,
    ) -> Optional[CableSpec]:
        """
        First (smallest) cable whose rating for the installation method covers
        the required current. None when even the largest size is insufficient.
        """
        for spec in table[start_index:]:
            if spec.ampacity(method) >= required_amps:
                return spec
        return None


class VoltageDropCalculator:
    @staticmethod
    def drop_volts(spec: CableSpec, current_amps: float, length_meters: float, voltage: float) -> float:
        if length_meters <= 0:
            return 0.0
        # (mV/A/m) * A * m -> V
        return spec.volt_drop_coefficient(voltage) * current_amps * length_meters / 1000.0

    @staticmethod
    def drop_percent(spec: CableSpec, current_amps: float, length_meters: float, voltage: float) -> float:
        vd_volts = VoltageDropCalculator.drop_volts(spec, current_amps, length_meters, voltage)
        return (vd_volts / voltage) * 100.0
