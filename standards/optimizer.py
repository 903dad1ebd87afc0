"""
ParallelRunOptimizer: cheapest feasible (size, number of runs) for a load.

For each run count n in the search window the load is split evenly, the
smallest size whose derated ampacity covers the per-cable current is taken,
then stepped up until the voltage drop limit is met. Each feasible n yields one
candidate costed at n * (supply + install) * length.

The run counts searched depend only on the load: from ceil(load /
max_amps_per_cable) up to max_parallel_runs, leaving out parallel counts whose
per-cable current falls below min_amps_per_parallel_cable. Parallel runs laid
together are derated by the grouping factor for n circuits on top of the
request's derating factor.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from core.components import CableSpec
from core.config import DEFAULT_SETTINGS, CalculationSettings
from core.models import CableAlternative, InstallationMethod
from standards.sans_logic import AmpacitySelector, VoltageDropCalculator

log = logging.getLogger(__name__)


def to_currency(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class RunCandidate:
    spec: CableSpec
    cables_in_parallel: int
    load_per_cable: float
    volt_drop_volts: float
    volt_drop_percent: float
    supply_cost: float
    install_cost: float
    total_cost: float

    @property
    def sort_key(self):
        # Cheapest first, fewer physical runs on equal cost
        return (self.total_cost, self.cables_in_parallel)

    def to_alternative(self, is_recommended: bool = False) -> CableAlternative:
        return CableAlternative(
            cable_size=self.spec.size,
            cables_in_parallel=self.cables_in_parallel,
            load_per_cable=self.load_per_cable,
            volt_drop_percent=round(self.volt_drop_percent, 2),
            supply_cost=self.supply_cost,
            install_cost=self.install_cost,
            total_cost=self.total_cost,
            is_recommended=is_recommended,
        )


class ParallelRunOptimizer:
    def __init__(self, settings: CalculationSettings = DEFAULT_SETTINGS):
        self.settings = settings

    def evaluate_run_count(
        self,
        table: Sequence[CableSpec],
        load_amps: float,
        cables_in_parallel: int,
        method: InstallationMethod,
        derating_factor: float,
        length_meters: float,
        voltage: float,
    ) -> Optional[RunCandidate]:
        n = cables_in_parallel
        load_per_cable = load_amps / n
        required_amps = load_per_cable / derating_factor
        limit = self.settings.voltage_drop_limit(voltage)

        spec = AmpacitySelector.select_minimum_size(table, required_amps, method)
        if spec is None:
            log.debug("n=%d: no size carries %.1fA (%s)", n, required_amps, method.value)
            return None

        # Voltage drop falls as the size grows, so walk up until the limit is met
        index = table.index(spec)
        vd_percent = VoltageDropCalculator.drop_percent(spec, load_per_cable, length_meters, voltage)
        while vd_percent > limit:
            index += 1
            if index >= len(table):
                log.debug("n=%d: largest size %s still drops %.2f%% > %.1f%%",
                          n, spec.size, vd_percent, limit)
                return None
            spec = table[index]
            vd_percent = VoltageDropCalculator.drop_percent(spec, load_per_cable, length_meters, voltage)

        supply = to_currency(n * spec.supply_cost * length_meters)
        install = to_currency(n * spec.install_cost * length_meters)
        candidate = RunCandidate(
            spec=spec,
            cables_in_parallel=n,
            load_per_cable=load_per_cable,
            volt_drop_volts=VoltageDropCalculator.drop_volts(spec, load_per_cable, length_meters, voltage),
            volt_drop_percent=vd_percent,
            supply_cost=supply,
            install_cost=install,
            total_cost=to_currency(supply + install),
        )
        log.debug("n=%d: %s carries %.1fA, VD %.2f%%, cost %.2f",
                  n, spec.size, load_per_cable, vd_percent, candidate.total_cost)
        return candidate

    def search(
        self,
        table: Sequence[CableSpec],
        load_amps: float,
        method: InstallationMethod,
        derating_factor: float,
        length_meters: float,
        voltage: float,
    ) -> List[RunCandidate]:
        """All feasible candidates in the search window (empty when infeasible)."""
        candidates = []
        for n in self.run_counts(load_amps):
            derating = derating_factor * self.settings.grouping_factor(n)
            candidate = self.evaluate_run_count(table, load_amps, n, method, derating, length_meters, voltage)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def run_counts(self, load_amps: float) -> range:
        first_n = max(1, math.ceil(load_amps / self.settings.max_amps_per_cable))
        last_n = self.settings.max_parallel_runs
        # Parallel cables carrying less than the minimum are not worth pulling
        while last_n > max(1, first_n) and load_amps / last_n < self.settings.min_amps_per_parallel_cable:
            last_n -= 1
        return range(first_n, last_n + 1)

    @staticmethod
    def best(candidates: Sequence[RunCandidate]) -> Optional[RunCandidate]:
        if not candidates:
            return None
        return min(candidates, key=lambda c: c.sort_key)
