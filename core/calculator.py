import logging
import math
import numbers
from dataclasses import replace
from typing import Optional, Union

from core.config import DEFAULT_SETTINGS, CalculationSettings
from core.converters import parse_installation_method, parse_material
from core.errors import (
    InvalidDeratingFactor, InvalidLength, InvalidLoad,
    NoFeasibleConfiguration, SizingError, UnsupportedVoltage,
)
from core.models import SUPPORTED_VOLTAGES, SizingRequest, SizingResult
from standards.optimizer import ParallelRunOptimizer
from standards.ranking import CostRanker
from standards.reference import ReferenceTableStore

log = logging.getLogger(__name__)

_default_store: Optional[ReferenceTableStore] = None


def default_store() -> ReferenceTableStore:
    global _default_store
    if _default_store is None:
        _default_store = ReferenceTableStore.default()
    return _default_store


class SizingEngine:
    """
    Stateless facade: validates a request, searches run counts and sizes,
    ranks the alternatives and returns one SizingResult.
    Raises a SizingError subclass for bad input or when nothing is feasible.
    """

    def __init__(self, store: Optional[ReferenceTableStore] = None,
                 settings: CalculationSettings = DEFAULT_SETTINGS):
        self.store = store or default_store()
        self.settings = settings
        self.optimizer = ParallelRunOptimizer(settings)

    def validate(self, request: SizingRequest) -> SizingRequest:
        """Returns the request with material and installation method as enums."""
        if not (isinstance(request.load_amps, numbers.Real) and request.load_amps > 0 and math.isfinite(request.load_amps)):
            raise InvalidLoad(f"Load must be greater than 0 A (got {request.load_amps})")
        if not (isinstance(request.total_length_meters, numbers.Real) and request.total_length_meters >= 0
                and math.isfinite(request.total_length_meters)):
            raise InvalidLength(f"Length cannot be negative (got {request.total_length_meters})")
        if request.voltage not in SUPPORTED_VOLTAGES:
            raise UnsupportedVoltage(f"Supply voltage must be 230V or 400V (got {request.voltage})",
                                     hint="230V single phase, 400V three phase")
        if not (isinstance(request.derating_factor, numbers.Real) and 0 < request.derating_factor <= 1):
            raise InvalidDeratingFactor(f"Derating factor must be in (0, 1] (got {request.derating_factor})")

        material = parse_material(request.material)
        self.store.lookup(material)
        method = parse_installation_method(request.installation_method)
        return replace(request, material=material, installation_method=method)

    def calculate(self, request: SizingRequest) -> SizingResult:
        request = self.validate(request)
        table = self.store.lookup(request.material)
        method = request.installation_method

        log.debug("Sizing %.1fA %sV %.1fm %s/%s derating %.2f",
                  request.load_amps, request.voltage, request.total_length_meters,
                  request.material.value, method.value, request.derating_factor)

        candidates = self.optimizer.search(
            table, request.load_amps, method, request.derating_factor,
            request.total_length_meters, request.voltage,
        )
        if not candidates:
            log.warning("No feasible configuration for %.1fA over %.1fm at %sV (%s, %s)",
                        request.load_amps, request.total_length_meters, request.voltage,
                        request.material.value, method.value)
            raise NoFeasibleConfiguration(
                f"No cable configuration up to {self.settings.max_parallel_runs} parallel runs "
                f"meets ampacity and voltage drop for {request.load_amps}A over {request.total_length_meters}m",
                hint="Shorten the run, raise the supply voltage or change material",
            )

        ranked = CostRanker.rank(candidates, self.settings.max_alternatives)
        best = ranked[0]
        spec = best.spec

        result = SizingResult(
            recommended_size=spec.size,
            cables_in_parallel=best.cables_in_parallel,
            load_per_cable=best.load_per_cable,
            ohm_per_km=spec.ohm_per_km,
            volt_drop_volts=round(best.volt_drop_volts, 2),
            volt_drop_percent=round(best.volt_drop_percent, 2),
            volt_drop_limit=self.settings.voltage_drop_limit(request.voltage),
            ampacity_per_cable=(spec.ampacity(method) * request.derating_factor
                                * self.settings.grouping_factor(best.cables_in_parallel)),
            supply_cost=best.supply_cost,
            install_cost=best.install_cost,
            total_cost=best.total_cost,
            alternatives=CostRanker.to_alternatives(ranked),
            cost_savings=CostRanker.cost_savings(ranked),
        )
        log.info("Recommended %s (VD %.2f%%, cost %.2f, %d alternatives)",
                 result.description, result.volt_drop_percent, result.total_cost, len(ranked))
        return result


def calculate_cable_size(request: SizingRequest,
                         store: Optional[ReferenceTableStore] = None,
                         settings: CalculationSettings = DEFAULT_SETTINGS) -> Union[SizingResult, SizingError]:
    """Entry point for collaborators that want the failure as a value."""
    try:
        return SizingEngine(store, settings).calculate(request)
    except SizingError as e:
        return e
