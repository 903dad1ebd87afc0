# SANS 10142-1 / SANS 1507-3 reference data for PVC insulated, armoured
# 600/1000V cables (4 core). Values are fixed external input.
# Columns:
#   size, ampacity ground (A), ampacity ducts (A), ampacity air (A),
#   impedance (Ohm/km at 20C), 3ph volt drop (mV/A/m), 1ph volt drop (mV/A/m),
#   supply cost (R/m), install cost (R/m), diameter D2 (mm), mass (kg/km)

TABLE_COLUMNS = (
    "size", "ampacity_ground", "ampacity_ducts", "ampacity_air",
    "ohm_per_km", "volt_drop_3ph", "volt_drop_1ph",
    "supply_cost", "install_cost", "diameter_mm", "mass_kg_per_km",
)

# SANS 1507-3 Table 6.2 - Copper
SANS_COPPER_TABLE = [
    ("1.5mm²", 24, 20, 19, 14.48, 25.080, 28.956, 8.5, 15, 14.95, 501),
    ("2.5mm²", 32, 26, 26, 8.87, 15.363, 17.734, 12, 18, 16.18, 597),
    ("4mm²", 42, 34, 35, 5.52, 9.561, 11.034, 18, 22, 18.39, 762),
    ("6mm²", 53, 43, 45, 3.69, 6.391, 7.374, 25, 28, 19.72, 910),
    ("10mm²", 70, 58, 62, 2.19, 3.793, 4.384, 38, 35, 21.96, 1169),
    ("16mm²", 91, 75, 83, 1.38, 2.390, 2.759, 52, 42, 25.92, 1768),
    ("25mm²", 119, 96, 110, 0.8749, 1.515, 1.749, 75, 55, 28.34, 2196),
    ("35mm²", 143, 116, 135, 0.6335, 1.097, 1.267, 95, 65, 31.17, 2732),
    ("50mm²", 169, 138, 163, 0.4718, 0.817, 0.944, 125, 78, 36.54, 3893),
    ("70mm²", 210, 171, 207, 0.3325, 0.576, 0.665, 165, 95, 40.09, 4837),
    ("95mm²", 251, 205, 251, 0.2460, 0.427, 0.492, 210, 115, 44.62, 6115),
    ("120mm²", 285, 234, 290, 0.2012, 0.348, 0.402, 255, 135, 47.40, 7269),
    ("150mm²", 320, 263, 332, 0.1698, 0.294, 0.339, 310, 155, 52.65, 9250),
    ("185mm²", 361, 298, 378, 0.1445, 0.250, 0.289, 375, 180, 57.45, 11039),
    ("240mm²", 416, 344, 445, 0.1220, 0.211, 0.244, 475, 215, 64.16, 13726),
    ("300mm²", 465, 385, 510, 0.1090, 0.189, 0.218, 580, 250, 70.13, 16544),
]

# SANS 1507-3 Table 6.3 - Aluminium
SANS_ALUMINIUM_TABLE = [
    ("25mm²", 90, 73, 80, 1.4446, 2.502, 2.889, 45, 55, 27.65, 1554),
    ("35mm²", 108, 87, 99, 1.0465, 1.813, 2.093, 58, 65, 29.13, 1757),
    ("50mm²", 129, 104, 119, 0.7749, 1.342, 1.549, 75, 78, 32.25, 2150),
    ("70mm²", 158, 130, 151, 0.5388, 0.933, 1.078, 98, 95, 37.67, 2930),
    ("95mm²", 192, 157, 186, 0.3934, 0.681, 0.787, 125, 115, 42.53, 3647),
    ("120mm²", 219, 179, 216, 0.3148, 0.545, 0.629, 152, 135, 44.24, 4023),
    ("150mm²", 245, 201, 250, 0.2607, 0.452, 0.521, 185, 155, 49.69, 5276),
    ("185mm²", 278, 229, 287, 0.2133, 0.369, 0.427, 222, 180, 54.81, 6231),
    ("240mm²", 324, 268, 342, 0.1708, 0.296, 0.342, 280, 215, 61.14, 7550),
]

# SANS 10142-1 - Minimum conductor size (mm2) for a given protection rating
# Format: (Protection rating strictly above, minimum size)
MIN_SIZE_FOR_PROTECTION = [
    (800, 185),
    (630, 150),
    (500, 120),
    (400, 95),
    (315, 70),
    (250, 50),
    (200, 35),
    (160, 25),
    (125, 16),
    (100, 10),
    (63, 6),
    (32, 4),
    (20, 2.5),
]


def get_min_size_for_protection(rating_amps: float) -> float:
    for threshold, size_mm2 in MIN_SIZE_FOR_PROTECTION:
        if rating_amps > threshold:
            return size_mm2
    return 1.5


def size_to_mm2(size: str) -> float:
    """'16mm²' -> 16.0"""
    digits = ""
    for ch in size:
        if ch.isdigit() or ch == ".":
            digits += ch
        elif digits:
            break
    return float(digits) if digits else 0.0
