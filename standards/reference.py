"""
ReferenceTableStore: immutable per-material cable tables.

Built once at start-up and shared read-only by every sizing call. The
constructor checks the ordering the optimizer relies on (ampacity and unit cost
non-decreasing with size) and refuses inconsistent data.
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from core.components import CableSpec
from core.converters import parse_material
from core.errors import ReferenceTableError, UnknownMaterial
from core.models import ConductorMaterial, InstallationMethod
from standards.sans_tables import SANS_ALUMINIUM_TABLE, SANS_COPPER_TABLE, TABLE_COLUMNS

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = TABLE_COLUMNS[:9]


def spec_from_row(row: Union[Sequence, Mapping]) -> CableSpec:
    if isinstance(row, Mapping):
        values = {col: row.get(col) for col in TABLE_COLUMNS}
    else:
        values = dict(zip(TABLE_COLUMNS, row))

    missing = [col for col in REQUIRED_COLUMNS if values.get(col) is None or pd.isna(values.get(col))]
    if missing:
        raise ReferenceTableError(f"Reference row {values.get('size')!r} is missing {', '.join(missing)}")

    optional = {}
    for col in ("diameter_mm", "mass_kg_per_km"):
        val = values.get(col)
        optional[col] = None if val is None or pd.isna(val) else float(val)

    return CableSpec(
        size=str(values["size"]).strip(),
        ampacity_ground=float(values["ampacity_ground"]),
        ampacity_ducts=float(values["ampacity_ducts"]),
        ampacity_air=float(values["ampacity_air"]),
        ohm_per_km=float(values["ohm_per_km"]),
        volt_drop_3ph=float(values["volt_drop_3ph"]),
        volt_drop_1ph=float(values["volt_drop_1ph"]),
        supply_cost=float(values["supply_cost"]),
        install_cost=float(values["install_cost"]),
        **optional,
    )


def _check_table(material: ConductorMaterial, table: Tuple[CableSpec, ...]) -> None:
    if not table:
        raise ReferenceTableError(f"Reference table for {material.value} is empty")

    sizes = [spec.size for spec in table]
    if len(set(sizes)) != len(sizes):
        raise ReferenceTableError(f"Duplicate sizes in {material.value} table")

    for spec in table:
        if min(spec.volt_drop_3ph, spec.volt_drop_1ph, spec.ohm_per_km) <= 0:
            raise ReferenceTableError(f"{material.value} {spec.size}: impedance and volt drop must be positive")
        if min(spec.supply_cost, spec.install_cost) < 0:
            raise ReferenceTableError(f"{material.value} {spec.size}: costs cannot be negative")

    for smaller, larger in zip(table, table[1:]):
        for method in InstallationMethod:
            if larger.ampacity(method) < smaller.ampacity(method):
                raise ReferenceTableError(
                    f"{material.value} table: {method.value} ampacity decreases from {smaller.size} to {larger.size}")
        if larger.unit_cost < smaller.unit_cost:
            raise ReferenceTableError(
                f"{material.value} table: unit cost decreases from {smaller.size} to {larger.size}")


class ReferenceTableStore:
    def __init__(self, tables: Mapping[Union[ConductorMaterial, str], Iterable[CableSpec]]):
        frozen: Dict[ConductorMaterial, Tuple[CableSpec, ...]] = {}
        for material, specs in tables.items():
            key = parse_material(material)
            table = tuple(specs)
            _check_table(key, table)
            frozen[key] = table
        if not frozen:
            raise ReferenceTableError("No reference tables supplied")
        self._tables = frozen
        self._by_size = {
            material: {spec.size: spec for spec in table}
            for material, table in frozen.items()
        }

    @classmethod
    def default(cls) -> "ReferenceTableStore":
        return cls({
            ConductorMaterial.COPPER: [spec_from_row(r) for r in SANS_COPPER_TABLE],
            ConductorMaterial.ALUMINIUM: [spec_from_row(r) for r in SANS_ALUMINIUM_TABLE],
        })

    @classmethod
    def from_dataframe(cls, frames: Mapping[Union[ConductorMaterial, str], pd.DataFrame]) -> "ReferenceTableStore":
        tables = {}
        for material, df in frames.items():
            try:
                material = parse_material(material)
            except UnknownMaterial:
                log.warning("Skipping sheet %r: not a conductor material", material)
                continue
            missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
            if missing:
                raise ReferenceTableError(f"Sheet for {material.value} is missing columns: {', '.join(missing)}")
            tables[material] = [spec_from_row(row) for row in df.to_dict(orient="records")]
        return cls(tables)

    @classmethod
    def from_excel(cls, path: Union[str, Path]) -> "ReferenceTableStore":
        """One sheet per material, named 'copper' / 'aluminium' (or Cu / Al)."""
        sheets = pd.read_excel(path, sheet_name=None)
        log.info("Loading reference tables from %s (sheets: %s)", path, ", ".join(sheets))
        return cls.from_dataframe(sheets)

    @property
    def materials(self) -> Tuple[ConductorMaterial, ...]:
        return tuple(self._tables)

    def lookup(self, material: Union[ConductorMaterial, str]) -> Tuple[CableSpec, ...]:
        key = parse_material(material)
        try:
            return self._tables[key]
        except KeyError:
            raise UnknownMaterial(f"No reference table loaded for {key.value}") from None

    def find(self, material: Union[ConductorMaterial, str], size: str) -> Optional[CableSpec]:
        self.lookup(material)
        return self._by_size[parse_material(material)].get(size)

    def to_dataframe(self, material: Union[ConductorMaterial, str]) -> pd.DataFrame:
        rows = [[getattr(spec, col) for col in TABLE_COLUMNS] for spec in self.lookup(material)]
        return pd.DataFrame(rows, columns=list(TABLE_COLUMNS))
