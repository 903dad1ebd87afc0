import unittest
from core.converters import (
    convert_power_to_amps, convert_length_unit, parse_material, parse_installation_method,
    apply_circuit_multiplier, default_power_factor,
)
from core.errors import UnknownMaterial, UnknownInstallationMethod
from core.models import ConductorMaterial, InstallationMethod, CircuitType


class TestConverters(unittest.TestCase):
    def test_amps_passthrough(self):
        self.assertEqual(convert_power_to_amps(120, "A", 400), 120)

    def test_three_phase_kw(self):
        # 10kW / 0.8 = 12.5kVA -> 12500 / (sqrt(3) * 400) = 18.04A
        self.assertAlmostEqual(convert_power_to_amps(10, "KW", 400, 0.8), 18.042, places=3)

    def test_single_phase_kva(self):
        # Apparent power ignores the power factor
        self.assertAlmostEqual(convert_power_to_amps(2.3, "kva", 230, 0.5), 10.0)

    def test_horsepower(self):
        # 1HP = 746W, pf 0.9 (default) at 230V
        self.assertAlmostEqual(convert_power_to_amps(1, "HP", 230), 746 / 0.9 / 230)

    def test_unknown_unit(self):
        with self.assertRaises(ValueError):
            convert_power_to_amps(10, "BTU", 400)

    def test_length_units(self):
        self.assertEqual(convert_length_unit(50, "m"), 50)
        self.assertEqual(convert_length_unit(0.2, "km"), 200)
        self.assertAlmostEqual(convert_length_unit(100, "ft"), 30.48)

    def test_material_aliases(self):
        self.assertEqual(parse_material("Cu/PVC/SWA"), ConductorMaterial.COPPER)
        self.assertEqual(parse_material("Al"), ConductorMaterial.ALUMINIUM)
        self.assertEqual(parse_material("Aluminum"), ConductorMaterial.ALUMINIUM)
        self.assertEqual(parse_material(ConductorMaterial.COPPER), ConductorMaterial.COPPER)
        with self.assertRaises(UnknownMaterial):
            parse_material("steel")

    def test_installation_aliases(self):
        self.assertEqual(parse_installation_method("Underground"), InstallationMethod.GROUND)
        self.assertEqual(parse_installation_method("conduit"), InstallationMethod.DUCTS)
        self.assertEqual(parse_installation_method("Tray"), InstallationMethod.AIR)
        with self.assertRaises(UnknownInstallationMethod) as ctx:
            parse_installation_method("overhead")
        self.assertEqual(ctx.exception.field, "installation_method")

    def test_circuit_multipliers(self):
        self.assertAlmostEqual(apply_circuit_multiplier(100, "motor"), 150.0)
        self.assertAlmostEqual(apply_circuit_multiplier(100, CircuitType.LIGHTING), 125.0)
        self.assertAlmostEqual(apply_circuit_multiplier(100, "data"), 100.0)
        self.assertEqual(default_power_factor("motor"), 0.80)
        with self.assertRaises(ValueError):
            apply_circuit_multiplier(100, "welding")


if __name__ == '__main__':
    unittest.main()
