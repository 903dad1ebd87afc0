import unittest
from core.components import CableEntry, CableRate
from core.models import ConductorMaterial
from standards.reference import ReferenceTableStore
from standards.schedule import ScheduleOptimizer, CostBreakdown


def feeder(**overrides):
    data = dict(
        cable_tag="C-101",
        from_location="MV/LV Sub",
        to_location="DB-1",
        voltage=400,
        load_amps=200,
        cable_size="240mm²",
        cable_type="Aluminium",
        total_length=100,
        installation_method="air",
        parallel_total_count=1,
    )
    data.update(overrides)
    return CableEntry(**data)


class TestScheduleOptimizer(unittest.TestCase):
    def setUp(self):
        self.store = ReferenceTableStore.default()
        self.optimizer = ScheduleOptimizer(self.store)

    def test_cheaper_alternatives(self):
        # Current: 1x 240mm2 Al -> (280 + 215) * 100 = 49500
        # Safety margin 1.15, grouping 1.0/0.8/0.7/0.65:
        # n=1: 200A / (1 / 1.15)    = 230A  -> 150mm2 (250A) -> 340 * 100     = 34000
        # n=2: 100A / (0.8 / 1.15)  = 144A  -> 70mm2 (151A)  -> 2 * 193 * 100 = 38600
        # n=3: 66.7A / (0.7 / 1.15) = 110A  -> 50mm2 (119A)  -> 3 * 153 * 100 = 45900
        # n=4: 50A / (0.65 / 1.15)  = 88.5A -> 35mm2 (99A)   -> 4 * 123 * 100 = 49200
        # n=5, 6: below 50A per cable
        result = self.optimizer.analyze_entry(feeder(), [])

        self.assertEqual(result.cable_tag, "C-101")
        self.assertEqual(result.current_config.cost.total, 49500.0)
        self.assertEqual([(a.size, a.parallel_count) for a in result.alternatives],
                         [("150mm²", 1), ("70mm²", 2), ("50mm²", 3), ("35mm²", 4)])
        self.assertEqual([a.cost.total for a in result.alternatives], [34000.0, 38600.0, 45900.0, 49200.0])
        self.assertEqual(result.alternatives[0].savings, 15500.0)
        self.assertAlmostEqual(result.alternatives[0].savings_percent, 15500 / 49500 * 100)
        for alt in result.alternatives:
            self.assertGreater(alt.savings, 0)
            self.assertLessEqual(alt.volt_drop_percent, 5.0)
            self.assertFalse(alt.is_current_config)

    def test_local_protection_requires_in_le_iz(self):
        # 250A breaker: 2x 70mm2 = 241.6A and 3x 50mm2 = 249.9A are too small
        result = self.optimizer.analyze_entry(feeder(protection_device_rating=250), [])
        self.assertEqual([(a.size, a.parallel_count) for a in result.alternatives],
                         [("150mm²", 1), ("35mm²", 4)])

    def test_upstream_protection_is_ignored(self):
        # 800A is more than 3x the 200A load, so In <= Iz is not applied.
        # Minimum size for 800A protection is 150mm2, which rules out 70mm2 and smaller.
        result = self.optimizer.analyze_entry(feeder(protection_device_rating=800), [])
        self.assertEqual([(a.size, a.parallel_count) for a in result.alternatives], [("150mm²", 1)])

    def test_project_rates(self):
        rates = [CableRate("150mm²", "Al/PVC", 100.0, 50.0, termination_cost_per_end=500.0)]
        result = self.optimizer.analyze_entry(feeder(), rates)
        best = result.alternatives[0]
        self.assertEqual(best.cost, CostBreakdown(supply=10000.0, install=5000.0, termination=1000.0))
        self.assertEqual(best.cost.total, 16000.0)
        self.assertEqual(best.savings, 33500.0)

    def test_cost_breakdown_without_data(self):
        cost = self.optimizer.cost_breakdown("999mm²", "Aluminium", ConductorMaterial.ALUMINIUM, 100, 1, [])
        self.assertEqual(cost.total, 0.0)

    def test_incomplete_entries_skipped(self):
        self.assertIsNone(self.optimizer.analyze_entry(feeder(voltage=None), []))
        self.assertIsNone(self.optimizer.analyze_entry(feeder(total_length=0), []))
        self.assertIsNone(self.optimizer.analyze_entry(feeder(load_amps=None), []))

    def test_protection_used_when_load_missing(self):
        result = self.optimizer.analyze_entry(feeder(load_amps=None, protection_device_rating=200), [])
        self.assertEqual(result.current_config.load_amps, 200)
        self.assertIn("protection device", result.compliance_notes)

    def test_parallel_group_analysed_once(self):
        entries = [
            feeder(cable_tag="C-201/1", base_cable_tag="C-201", parallel_group_id="G1", parallel_total_count=2,
                   cable_size="120mm²", load_amps=300),
            feeder(cable_tag="C-201/2", base_cable_tag="C-201", parallel_group_id="G1", parallel_total_count=2,
                   cable_size="120mm²", load_amps=300),
            feeder(cable_tag="C-101"),
        ]
        results = self.optimizer.analyze(entries, [])
        self.assertEqual([r.cable_tag for r in results], ["C-201", "C-101"])

    def test_bad_entry_logged_and_skipped(self):
        entries = [feeder(cable_tag="C-301", installation_method="overhead"), feeder()]
        with self.assertLogs("standards.schedule", level="WARNING") as cm:
            results = self.optimizer.analyze(entries, [])
        self.assertEqual(len(results), 1)
        self.assertIn("C-301", cm.output[0])


if __name__ == '__main__':
    unittest.main()
