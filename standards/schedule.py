"""
Cable schedule review: finds cheaper compliant configurations for the cables
already entered on a project schedule.

Per entry, run counts around the current one are sized with the parallel run
optimizer (grouping factor for n circuits and the project safety margin applied
as derating), then checked against SANS 10142-1 rules:

- derated capacity per cable >= per-cable current x safety margin
- In <= Iz when the protection device is local to the circuit
- voltage drop within the limit for the supply voltage
- minimum conductor size for the protection rating

Costs come from the project cable rates (supply, install, termination per end),
falling back to the reference table rates when a size has no project rate.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from core.components import CableEntry, CableRate
from core.config import DEFAULT_SETTINGS, CalculationSettings
from core.converters import parse_installation_method, parse_material
from core.errors import SizingError
from core.models import ConductorMaterial
from standards.optimizer import ParallelRunOptimizer, to_currency
from standards.reference import ReferenceTableStore
from standards.sans_tables import get_min_size_for_protection, size_to_mm2

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostBreakdown:
    supply: float = 0.0
    install: float = 0.0
    termination: float = 0.0

    @property
    def total(self) -> float:
        return to_currency(self.supply + self.install + self.termination)


@dataclass
class CurrentConfig:
    size: str
    parallel_count: int
    cost: CostBreakdown
    voltage: float
    load_amps: float


@dataclass
class ScheduleAlternative:
    size: str
    parallel_count: int
    cost: CostBreakdown
    savings: float
    savings_percent: float
    volt_drop_percent: float
    is_current_config: bool = False
    compliance_report: str = ""


@dataclass
class OptimizationResult:
    cable_tag: str
    from_location: str
    to_location: str
    total_length: float
    current_config: CurrentConfig
    alternatives: List[ScheduleAlternative] = field(default_factory=list)
    compliance_notes: str = ""


class ScheduleOptimizer:
    def __init__(self, store: ReferenceTableStore, settings: CalculationSettings = DEFAULT_SETTINGS):
        self.store = store
        self.settings = settings
        self.optimizer = ParallelRunOptimizer(settings)

    # --- Costs ---
    def cost_breakdown(self, size: str, cable_type: str, material: ConductorMaterial,
                       length: float, parallel_count: int, rates: Sequence[CableRate]) -> CostBreakdown:
        rate = next((r for r in rates if r.cable_size == size and r.cable_type == cable_type), None)
        if rate is None:
            for r in rates:
                if r.cable_size != size:
                    continue
                try:
                    if parse_material(r.cable_type) == material:
                        rate = r
                        break
                except SizingError:
                    continue

        if rate is not None:
            return CostBreakdown(
                supply=to_currency(rate.supply_rate_per_meter * length * parallel_count),
                install=to_currency(rate.install_rate_per_meter * length * parallel_count),
                termination=to_currency(rate.termination_cost_per_end * 2 * parallel_count),
            )

        spec = self.store.find(material, size)
        if spec is None:
            return CostBreakdown()
        return CostBreakdown(
            supply=to_currency(spec.supply_cost * length * parallel_count),
            install=to_currency(spec.install_cost * length * parallel_count),
        )

    # --- Helpers ---
    def _material_for(self, entry: CableEntry) -> ConductorMaterial:
        if entry.cable_type:
            try:
                return parse_material(entry.cable_type)
            except SizingError:
                log.debug("Cable type %r not recognised, using default material", entry.cable_type)
        return parse_material(self.settings.default_cable_material)

    def _run_count_range(self, current_count: int) -> range:
        n_max = self.settings.max_parallel_runs
        if current_count > 1:
            return range(max(1, current_count - 2), min(n_max, current_count + 1) + 1)
        return range(1, n_max + 1)

    @staticmethod
    def _unique_entries(entries: Iterable[CableEntry]) -> List[CableEntry]:
        groups: Dict[str, CableEntry] = {}
        for entry in entries:
            key = entry.parallel_group_id or entry.base_cable_tag or entry.cable_tag
            groups.setdefault(key, entry)
        return list(groups.values())

    # --- Analysis ---
    def analyze_entry(self, entry: CableEntry, rates: Sequence[CableRate]) -> Optional[OptimizationResult]:
        if not entry.voltage or not entry.total_length:
            return None

        target_amps = entry.load_amps if entry.load_amps and entry.load_amps > 0 else entry.protection_device_rating
        if not target_amps:
            return None

        protection = entry.protection_device_rating
        nominal_voltage = 400 if entry.voltage >= 380 else 230
        limit = self.settings.voltage_drop_limit(nominal_voltage)
        material = self._material_for(entry)
        cable_type = entry.cable_type or material.value.capitalize()
        method = parse_installation_method(entry.installation_method or self.settings.default_installation_method)
        table = self.store.lookup(material)
        margin = self.settings.cable_safety_margin
        length = entry.total_length
        current_count = entry.parallel_total_count or 1

        current_cost = self.cost_breakdown(entry.cable_size or "", cable_type, material, length, current_count, rates)
        alternatives = []

        for n in self._run_count_range(current_count):
            per_cable = target_amps / n
            if per_cable > self.settings.max_amps_per_cable:
                continue
            if n > 1 and per_cable < self.settings.min_amps_per_parallel_cable:
                continue

            grouping = self.settings.grouping_factor(n)
            derating = min(1.0, grouping / margin)
            candidate = self.optimizer.evaluate_run_count(table, target_amps, n, method, derating, length, nominal_voltage)
            if candidate is None:
                continue

            spec = candidate.spec
            derated_per_cable = spec.ampacity(method) * grouping
            total_capacity = derated_per_cable * n

            if derated_per_cable < per_cable * margin:
                log.debug("[%s] %dx %s fails capacity: %.1fA < %.1fA",
                          entry.cable_tag, n, spec.size, derated_per_cable, per_cable * margin)
                continue

            # Protection far above the load is an upstream main breaker, not this circuit's
            is_local_protection = bool(protection) and protection <= target_amps * 3
            if is_local_protection and protection > total_capacity:
                log.debug("[%s] %dx %s fails In<=Iz: %.0fA > %.1fA",
                          entry.cable_tag, n, spec.size, protection, total_capacity)
                continue

            if candidate.volt_drop_percent > limit:
                continue

            if protection and size_to_mm2(spec.size) < get_min_size_for_protection(protection):
                log.debug("[%s] %s below minimum size for %.0fA protection", entry.cable_tag, spec.size, protection)
                continue

            cost = self.cost_breakdown(spec.size, cable_type, material, length, n, rates)
            savings = to_currency(current_cost.total - cost.total)
            is_current = spec.size == entry.cable_size and n == current_count
            if not (is_current or savings > 0):
                continue

            report = (
                f"Design: {target_amps:.0f}A | "
                f"CB: {f'{protection:.0f}A' if protection else 'N/A'} | "
                f"Cable: {total_capacity:.0f}A ({derated_per_cable:.0f}A x {n}) | "
                f"Grouping: {grouping * 100:.0f}% | "
                f"Margin: {(derated_per_cable / per_cable - 1) * 100:.0f}%"
            )
            alternatives.append(ScheduleAlternative(
                size=spec.size,
                parallel_count=n,
                cost=cost,
                savings=savings,
                savings_percent=(savings / current_cost.total * 100) if current_cost.total > 0 else 0.0,
                volt_drop_percent=round(candidate.volt_drop_percent, 2),
                is_current_config=is_current,
                compliance_report=report,
            ))

        if not alternatives:
            return None

        alternatives.sort(key=lambda a: (a.cost.total, a.parallel_count))
        if entry.load_amps:
            notes = (f"Circuit load: {target_amps:.0f}A. Protection: {f'{protection:.0f}A' if protection else 'N/A'}. "
                     "All alternatives meet SANS 10142-1: In <= Iz, voltage drop limits and minimum cable sizing.")
        else:
            notes = (f"Design based on protection device: {protection:.0f}A (load data unavailable). "
                     "All alternatives meet SANS 10142-1 compliance checks.")

        return OptimizationResult(
            cable_tag=entry.base_cable_tag or entry.cable_tag,
            from_location=entry.from_location,
            to_location=entry.to_location,
            total_length=length,
            current_config=CurrentConfig(
                size=entry.cable_size or "",
                parallel_count=current_count,
                cost=current_cost,
                voltage=entry.voltage,
                load_amps=target_amps,
            ),
            alternatives=alternatives,
            compliance_notes=notes,
        )

    def analyze(self, entries: Iterable[CableEntry], rates: Sequence[CableRate]) -> List[OptimizationResult]:
        results = []
        for entry in self._unique_entries(entries):
            try:
                result = self.analyze_entry(entry, rates)
            except SizingError as e:
                log.warning("Skipping cable %s: %s", entry.cable_tag, e)
                continue
            if result is not None:
                results.append(result)
        log.info("Schedule review: %d of the analysed cables have alternatives", len(results))
        return results
