import re
import sys
import datetime
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from core.models import SizingRequest, ConductorMaterial, InstallationMethod, CircuitType
from core.converters import convert_power_to_amps, convert_length_unit, apply_circuit_multiplier, default_power_factor
from core.calculator import SizingEngine
from core.config import load_settings
from core.errors import SizingError, NoFeasibleConfiguration
from core.logging_setup import init_logging


def ask_choice(prompt, options, default):
    print(f"{prompt}: " + ", ".join(f"({i + 1}) {o}" for i, o in enumerate(options)))
    choice = input(f"Select [{options.index(default) + 1}]: ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(options):
        return options[int(choice) - 1]
    return default


def get_circuit_input(settings):
    print("\n--- Circuit Data ---")
    name = input("Circuit name: ").strip()
    if not name:
        return None

    # Value & unit, e.g. "120 A", "45 kW"
    p_input_str = input("Load (e.g. 120 A, 45 KW, 60 KVA): ").strip()
    match = re.match(r"([0-9\.]+)\s*([a-zA-Z]+)", p_input_str)
    if match:
        val = float(match.group(1))
        unit = match.group(2)
    else:
        val = float(p_input_str)
        unit = "A"

    voltage = 230 if input("Voltage (230/400) [400]: ").strip() == "230" else 400
    circuit_type = ask_choice("Circuit type", [c.value for c in CircuitType], CircuitType.POWER.value)

    amps = convert_power_to_amps(val, unit, voltage, default_power_factor(circuit_type))
    design_amps = apply_circuit_multiplier(amps, circuit_type)

    l_input_str = input("Circuit length (e.g. 50 m, 0.2 km): ").strip()
    match_l = re.match(r"([0-9\.]+)\s*([a-zA-Z]+)", l_input_str)
    if match_l:
        length_m = convert_length_unit(float(match_l.group(1)), match_l.group(2))
    else:
        length_m = float(l_input_str)

    material = ask_choice("Material", [m.value for m in ConductorMaterial], settings.default_cable_material)
    method = ask_choice("Installation", [m.value for m in InstallationMethod], settings.default_installation_method)
    derating = float(input("Derating factor [1.0]: ") or 1.0)

    request = SizingRequest(
        load_amps=design_amps,
        voltage=voltage,
        total_length_meters=length_m,
        material=material,
        installation_method=method,
        derating_factor=derating,
    )
    return name, request


def export_to_excel(rows):
    wb = Workbook()

    ws1 = wb.active
    ws1.title = "Cable Schedule"
    headers = ["Circuit", "Design A", "Voltage", "Length (m)", "Material", "Installation",
               "Cable", "Parallel", "A/Cable", "% VD", "Supply", "Install", "Total", "Notes"]
    ws1.append(headers)

    header_fill = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
    header_font = Font(bold=True)
    for cell in ws1[1]:
        cell.font = header_font
        cell.fill = header_fill

    for name, request, result, error in rows:
        base = [name, round(request.load_amps, 2), request.voltage, round(request.total_length_meters, 1),
                str(request.material), str(request.installation_method)]
        if result is None:
            ws1.append(base + ["-", "-", "-", "-", "-", "-", "-", error])
        else:
            ws1.append(base + [
                result.recommended_size, result.cables_in_parallel, round(result.load_per_cable, 1),
                result.volt_drop_percent, result.supply_cost, result.install_cost, result.total_cost,
                f"Saves {result.cost_savings:.2f} vs next option" if result.cost_savings else "",
            ])

    for col in ws1.columns:
        ws1.column_dimensions[col[0].column_letter].width = 15

    # --- Alternatives per circuit ---
    ws2 = wb.create_sheet("Alternatives")
    ws2.append(["Circuit", "Cable", "Parallel", "% VD", "Total", "Recommended"])
    for cell in ws2[1]:
        cell.font = header_font
        cell.fill = header_fill
    for name, _, result, _ in rows:
        if result is None:
            continue
        for alt in result.alternatives:
            ws2.append([name, alt.cable_size, alt.cables_in_parallel, alt.volt_drop_percent,
                        alt.total_cost, "YES" if alt.is_recommended else ""])

    filename = f"Cable_Sizing_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    wb.save(filename)
    print(f"\n[INFO] Excel generated: {filename}")


def main():
    init_logging()
    print("==========================================================")
    print(" CABLE SIZING & PARALLEL RUN OPTIMIZER (SANS 10142-1)")
    print("==========================================================")

    engine = SizingEngine(settings=load_settings())
    rows = []

    while True:
        try:
            data = get_circuit_input(engine.settings)
        except ValueError as e:
            print(f"Input error: {e}. Try again.")
            continue
        if data is None:
            break
        name, request = data

        try:
            result = engine.calculate(request)
            rows.append((name, request, result, ""))
            print(f"-> {result.description} | {result.load_per_cable:.1f} A/cable | "
                  f"VD {result.volt_drop_percent:.2f}% (limit {result.volt_drop_limit}%) | "
                  f"Cost {result.total_cost:.2f}")
            for alt in result.alternatives[1:]:
                print(f"   alt: {alt.description:<28} VD {alt.volt_drop_percent:>5.2f}%  Cost {alt.total_cost:.2f}")
        except NoFeasibleConfiguration as e:
            rows.append((name, request, None, e.message))
            print(f"(!) {e.message}. {e.hint}")
        except SizingError as e:
            print(f"Input error: {e.message}")

        if input("Add another circuit? (y/n): ").lower() != 'y':
            break

    if not rows:
        print("No circuits entered.")
        sys.exit()

    if input("\nExport report to Excel? (y/n): ").lower() == 'y':
        export_to_excel(rows)


if __name__ == "__main__":
    main()
