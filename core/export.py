import datetime
import io
from typing import Optional

import pandas as pd
from openpyxl.styles import Font, PatternFill

from core.models import SizingRequest, SizingResult
from standards.reference import ReferenceTableStore

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)


def result_frame(result: SizingResult, request: Optional[SizingRequest] = None) -> pd.DataFrame:
    rows = []
    if request is not None:
        rows += [
            {"Parameter": "Load (A)", "Value": request.load_amps},
            {"Parameter": "Voltage (V)", "Value": request.voltage},
            {"Parameter": "Length (m)", "Value": request.total_length_meters},
            {"Parameter": "Material", "Value": getattr(request.material, "value", request.material)},
            {"Parameter": "Installation", "Value": getattr(request.installation_method, "value", request.installation_method)},
            {"Parameter": "Derating Factor", "Value": request.derating_factor},
        ]
    rows += [
        {"Parameter": "Recommended Size", "Value": result.recommended_size},
        {"Parameter": "Cables in Parallel", "Value": result.cables_in_parallel},
        {"Parameter": "Load per Cable (A)", "Value": round(result.load_per_cable, 2)},
        {"Parameter": "Derated Ampacity per Cable (A)", "Value": round(result.ampacity_per_cable, 2)},
        {"Parameter": "Impedance (Ohm/km)", "Value": result.ohm_per_km},
        {"Parameter": "Volt Drop (V)", "Value": result.volt_drop_volts},
        {"Parameter": "Volt Drop (%)", "Value": result.volt_drop_percent},
        {"Parameter": "Volt Drop Limit (%)", "Value": result.volt_drop_limit},
        {"Parameter": "Supply Cost", "Value": result.supply_cost},
        {"Parameter": "Install Cost", "Value": result.install_cost},
        {"Parameter": "Total Cost", "Value": result.total_cost},
        {"Parameter": "Savings vs Next Option", "Value": result.cost_savings},
    ]
    return pd.DataFrame(rows)


def alternatives_frame(result: SizingResult) -> pd.DataFrame:
    return pd.DataFrame([
        {
            "Size": alt.cable_size,
            "Parallel": alt.cables_in_parallel,
            "Load/Cable (A)": round(alt.load_per_cable, 2),
            "% VD": alt.volt_drop_percent,
            "Supply": alt.supply_cost,
            "Install": alt.install_cost,
            "Total": alt.total_cost,
            "Recommended": "YES" if alt.is_recommended else "",
        }
        for alt in result.alternatives
    ], columns=["Size", "Parallel", "Load/Cable (A)", "% VD", "Supply", "Install", "Total", "Recommended"])


def reference_frame(store: ReferenceTableStore, material) -> pd.DataFrame:
    return store.to_dataframe(material).rename(columns={
        "size": "Size",
        "ampacity_ground": "Ground (A)",
        "ampacity_ducts": "Ducts (A)",
        "ampacity_air": "Air (A)",
        "ohm_per_km": "Ohm/km",
        "volt_drop_3ph": "3ph VD (mV/A/m)",
        "volt_drop_1ph": "1ph VD (mV/A/m)",
        "supply_cost": "Supply /m",
        "install_cost": "Install /m",
        "diameter_mm": "Diameter (mm)",
        "mass_kg_per_km": "Mass (kg/km)",
    })


def _style_headers(writer: pd.ExcelWriter) -> None:
    for ws in writer.book.worksheets:
        for cell in ws[1]:
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
        for col in ws.columns:
            ws.column_dimensions[col[0].column_letter].width = 18


def to_excel(result: SizingResult, request: Optional[SizingRequest] = None,
             store: Optional[ReferenceTableStore] = None) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        result_frame(result, request).to_excel(writer, index=False, sheet_name="Result")
        alternatives_frame(result).to_excel(writer, index=False, sheet_name="Alternatives")
        if store is not None and request is not None:
            reference_frame(store, request.material).to_excel(writer, index=False, sheet_name="Reference")
        _style_headers(writer)
    return output.getvalue()


def export_filename(prefix: str = "Cable_Sizing") -> str:
    return f"{prefix}_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
