import unittest
from core.config import CalculationSettings
from core.models import InstallationMethod
from standards.optimizer import ParallelRunOptimizer, RunCandidate, to_currency
from standards.ranking import CostRanker
from standards.reference import ReferenceTableStore


def make_candidate(spec, n, total):
    return RunCandidate(spec=spec, cables_in_parallel=n, load_per_cable=100.0 / n,
                        volt_drop_volts=1.0, volt_drop_percent=0.25,
                        supply_cost=total / 2, install_cost=total / 2, total_cost=total)


class TestParallelRunOptimizer(unittest.TestCase):
    def setUp(self):
        self.store = ReferenceTableStore.default()
        self.copper = self.store.lookup("copper")
        self.aluminium = self.store.lookup("aluminium")
        self.optimizer = ParallelRunOptimizer()

    def test_single_run(self):
        c = self.optimizer.evaluate_run_count(self.copper, 100, 1, InstallationMethod.DUCTS, 1.0, 50, 400)
        self.assertEqual(c.spec.size, "35mm²")
        self.assertEqual(c.supply_cost, 4750.0)
        self.assertEqual(c.install_cost, 3250.0)
        self.assertEqual(c.total_cost, 8000.0)

    def test_steps_up_for_voltage_drop(self):
        # 100A ducts over 300m:
        # 35mm2 -> 8.23%, 50mm2 -> 6.13%, 70mm2 -> 0.576 * 100 * 300 / 1000 = 17.28V -> 4.32%
        c = self.optimizer.evaluate_run_count(self.copper, 100, 1, InstallationMethod.DUCTS, 1.0, 300, 400)
        self.assertEqual(c.spec.size, "70mm²")
        self.assertAlmostEqual(c.volt_drop_percent, 4.32)

    def test_derating_raises_required_rating(self):
        c = self.optimizer.evaluate_run_count(self.copper, 100, 1, InstallationMethod.DUCTS, 0.8, 10, 400)
        self.assertEqual(c.spec.size, "50mm²")

    def test_infeasible_run_count(self):
        self.assertIsNone(
            self.optimizer.evaluate_run_count(self.aluminium, 400, 1, InstallationMethod.AIR, 1.0, 80, 400))
        self.assertIsNone(
            self.optimizer.evaluate_run_count(self.copper, 100, 1, InstallationMethod.DUCTS, 1.0, 20000, 400))

    def test_run_counts(self):
        # Parallel runs need at least 50A per cable, loads above 400A need ceil(load / 400) runs
        self.assertEqual(list(self.optimizer.run_counts(30)), [1])
        self.assertEqual(list(self.optimizer.run_counts(100)), [1, 2])
        self.assertEqual(list(self.optimizer.run_counts(400)), [1, 2, 3, 4, 5, 6])
        self.assertEqual(list(self.optimizer.run_counts(900)), [3, 4, 5, 6])
        self.assertEqual(list(ParallelRunOptimizer(CalculationSettings(min_amps_per_parallel_cable=0)).run_counts(30)),
                         [1, 2, 3, 4, 5, 6])

    def test_search_compares_single_and_parallel(self):
        # n=1: 35mm2 -> 8000
        # n=2: 50A / 0.8 = 62.5A -> 16mm2 (75A) -> 2 * (52 + 42) * 50 = 9400
        candidates = self.optimizer.search(self.copper, 100, InstallationMethod.DUCTS, 1.0, 50, 400)
        self.assertEqual([(c.spec.size, c.cables_in_parallel, c.total_cost) for c in candidates],
                         [("35mm²", 1, 8000.0), ("16mm²", 2, 9400.0)])
        self.assertEqual(ParallelRunOptimizer.best(candidates).cables_in_parallel, 1)

    def test_grouping_factor_applied_to_parallel_runs(self):
        # Without grouping derating 2x 10mm2 (58A each) at 2 * 73 * 50 = 7300 beats one 35mm2
        optimizer = ParallelRunOptimizer(CalculationSettings(grouping_factor_2_circuits=1.0))
        best = ParallelRunOptimizer.best(
            optimizer.search(self.copper, 100, InstallationMethod.DUCTS, 1.0, 50, 400))
        self.assertEqual((best.spec.size, best.cables_in_parallel, best.total_cost), ("10mm²", 2, 7300.0))

    def test_search_escalates_when_single_fails(self):
        candidates = self.optimizer.search(self.aluminium, 400, InstallationMethod.AIR, 1.0, 80, 400)
        self.assertEqual(sorted(c.cables_in_parallel for c in candidates), [2, 3, 4, 5, 6])

    def test_search_starts_at_minimum_runs_for_large_loads(self):
        # 900A / 400A per cable -> at least 3 runs, grouping 0.7 / 0.65
        # n=3: 300A / 0.7  = 429A -> 300mm2 3*(580+250)*20 = 49800
        # n=4: 225A / 0.65 = 346A -> 185mm2 4*(375+180)*20 = 44400
        # n=5: 180A / 0.65 = 277A -> 120mm2 5*(255+135)*20 = 39000
        # n=6: 150A / 0.65 = 231A -> 95mm2  6*(210+115)*20 = 39000
        candidates = self.optimizer.search(self.copper, 900, InstallationMethod.GROUND, 1.0, 20, 400)
        by_runs = {c.cables_in_parallel: c for c in candidates}
        self.assertEqual(sorted(by_runs), [3, 4, 5, 6])
        self.assertEqual(by_runs[3].spec.size, "300mm²")
        self.assertEqual(by_runs[4].total_cost, 44400.0)
        self.assertEqual(by_runs[6].spec.size, "95mm²")

        # Equal cost: fewer runs wins
        best = ParallelRunOptimizer.best(candidates)
        self.assertEqual((best.spec.size, best.cables_in_parallel, best.total_cost), ("120mm²", 5, 39000.0))

    def test_search_respects_max_runs(self):
        optimizer = ParallelRunOptimizer(CalculationSettings(max_parallel_runs=3))
        candidates = optimizer.search(self.aluminium, 400, InstallationMethod.AIR, 1.0, 80, 400)
        self.assertEqual(sorted(c.cables_in_parallel for c in candidates), [2, 3])

    def test_best_of_nothing(self):
        self.assertIsNone(ParallelRunOptimizer.best([]))

    def test_to_currency(self):
        self.assertEqual(to_currency(1234.5678), 1234.57)


class TestCostRanker(unittest.TestCase):
    def setUp(self):
        store = ReferenceTableStore.default()
        self.s35 = store.find("copper", "35mm²")
        self.s50 = store.find("copper", "50mm²")
        self.s70 = store.find("copper", "70mm²")

    def test_sorted_by_cost_then_runs(self):
        ranked = CostRanker.rank([
            make_candidate(self.s70, 3, 900.0),
            make_candidate(self.s35, 2, 500.0),
            make_candidate(self.s50, 4, 500.0),
            make_candidate(self.s50, 1, 700.0),
        ])
        self.assertEqual([(c.spec.size, c.cables_in_parallel) for c in ranked],
                         [("35mm²", 2), ("50mm²", 4), ("50mm²", 1), ("70mm²", 3)])

    def test_tie_prefers_fewer_runs(self):
        best = ParallelRunOptimizer.best([make_candidate(self.s35, 4, 100.0), make_candidate(self.s70, 2, 100.0)])
        self.assertEqual(best.cables_in_parallel, 2)

    def test_duplicates_removed(self):
        ranked = CostRanker.rank([make_candidate(self.s35, 2, 500.0), make_candidate(self.s35, 2, 500.0)])
        self.assertEqual(len(ranked), 1)

    def test_truncated(self):
        candidates = [make_candidate(self.s35, n, 100.0 * n) for n in range(1, 7)]
        self.assertEqual(len(CostRanker.rank(candidates)), 5)
        self.assertEqual(len(CostRanker.rank(candidates, max_alternatives=2)), 2)

    def test_alternatives_and_savings(self):
        ranked = CostRanker.rank([make_candidate(self.s50, 1, 700.0), make_candidate(self.s35, 2, 500.0)])
        alts = CostRanker.to_alternatives(ranked)
        self.assertEqual([a.is_recommended for a in alts], [True, False])
        self.assertEqual(alts[0].description, "2x 35mm² in parallel")
        self.assertEqual(alts[1].description, "50mm²")
        self.assertEqual(CostRanker.cost_savings(ranked), 200.0)
        self.assertEqual(CostRanker.cost_savings(ranked[:1]), 0.0)


if __name__ == '__main__':
    unittest.main()
