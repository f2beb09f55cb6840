from django.test import SimpleTestCase

from apps.analytics.exceptions import NoData, UnsupportedOperation
from apps.analytics.optimization import OptimizationEngine, optimization_score, summarize_performance
from apps.analytics.options import Objective, OptimizationOptions
from .factories import performance_row


class SummaryAndScoreTest(SimpleTestCase):

    def test_summary_sums_counters_and_averages_rates(self):
        rows = [
            performance_row(impressions=10000, clicks=500, conversions=60, cost=1000, revenue=2500),
            performance_row(impressions=1000, clicks=10, conversions=1, cost=100, revenue=50),
        ]
        summary = summarize_performance('CAMP0001', rows)

        self.assertEqual(summary.total_impressions, 11000)
        self.assertEqual(summary.total_clicks, 510)
        self.assertEqual(summary.total_conversions, 61)
        self.assertEqual(summary.total_cost, 1100)
        self.assertEqual(summary.total_revenue, 2550)
        # mean of per-row rates, not recomputed from totals
        self.assertAlmostEqual(summary.avg_ctr, (5.0 + 1.0) / 2)
        self.assertAlmostEqual(summary.avg_cpc, (2.0 + 10.0) / 2)
        self.assertAlmostEqual(summary.avg_roas, (2.5 + 0.5) / 2)

    def test_summary_of_nothing_raises(self):
        with self.assertRaises(NoData):
            summarize_performance('CAMP0404', [])

    def test_score_components(self):
        self.assertEqual(optimization_score(2.5, 5.0, 60), 85)
        self.assertEqual(optimization_score(4.0, 3.0, 100), 100)
        self.assertEqual(optimization_score(1.0, 1.0, 10), 60)
        self.assertEqual(optimization_score(0.5, 0.5, 0), 30)
        self.assertEqual(optimization_score(2.0, 2.0, 50), 80)

    def test_score_is_bounded(self):
        for roas in (0, 0.99, 1, 2, 4, 100):
            for ctr in (0, 1, 2, 3, 50):
                for conversions in (0, 10, 50, 100, 10 ** 6):
                    self.assertTrue(0 <= optimization_score(roas, ctr, conversions) <= 100)


class OptimizeCampaignTest(SimpleTestCase):

    def setUp(self):
        self.engine = OptimizationEngine()
        self.rows = [performance_row()]

    def optimize(self, objective, rows=None):
        options = OptimizationOptions(objective=Objective.parse(objective))
        return self.engine.optimize('CAMP0001', rows or self.rows, options)

    def test_maximize_roas_on_healthy_campaign(self):
        result = self.optimize('maximize_roas')

        self.assertEqual(result['recommendations'], [
            "Focus budget on high-performing segments",
            "Reduce spend on low ROAS keywords/audiences",
            "Increase bids for high-converting demographics",
        ])
        self.assertNotIn('priority_actions', result)
        self.assertEqual(result['optimization_score'], 85)
        self.assertEqual(result['current_metrics']['total_conversions'], 60)
        self.assertAlmostEqual(result['current_metrics']['avg_roas'], 2.5)

    def test_maximize_roas_flags_weak_return(self):
        result = self.optimize('maximize_roas', [performance_row(revenue=1500)])
        self.assertEqual(result['priority_actions'][0], "Review and optimize targeting criteria")

    def test_minimize_cost_suggests_budget_cut(self):
        result = self.optimize('minimize_cost')

        self.assertAlmostEqual(result['suggested_budget_reduction'], 150.0)
        self.assertEqual(result['recommendations'][0], "Lower bids on expensive keywords")
        self.assertNotIn('priority_actions', result)

    def test_maximize_conversions_flags_low_volume(self):
        result = self.optimize('maximize_conversions')

        self.assertEqual(result['recommendations'][0], "Increase budget for high-converting campaigns")
        self.assertEqual(result['priority_actions'], [
            "Review conversion tracking setup",
            "Optimize landing page experience",
            "Test different call-to-action messages",
        ])

    def test_maximize_conversions_enough_volume(self):
        result = self.optimize('maximize_conversions', [performance_row(conversions=150)])
        self.assertNotIn('priority_actions', result)

    def test_unknown_objective(self):
        with self.assertRaises(UnsupportedOperation):
            Objective.parse('maximize_reach')

    def test_no_rows(self):
        options = OptimizationOptions(objective=Objective.MAXIMIZE_ROAS)
        with self.assertRaises(NoData):
            self.engine.optimize('CAMP0404', [], options)


class CostMinimizationTest(SimpleTestCase):

    def setUp(self):
        self.engine = OptimizationEngine()

    def test_healthy_campaign(self):
        result = self.engine.minimize_cost('CAMP0001', [performance_row()])

        self.assertEqual(result['optimization_type'], 'minimize_cost')
        self.assertAlmostEqual(result['avg_cpc'], 2.0)
        self.assertAlmostEqual(result['projected_savings'], 200.0)
        self.assertAlmostEqual(result['savings_percentage'], 20.0)
        self.assertEqual(result['recommendations'][1], "Pause ad sets with CPC above $3.00")
        self.assertEqual(len(result['recommendations']), 5)
        self.assertEqual(len(result['implementation_plan']), 5)
        self.assertEqual(result['risk_assessment'], "Low Risk")

    def test_risk_levels(self):
        medium = self.engine.minimize_cost('CAMP0001', [performance_row(revenue=1800)])
        high = self.engine.minimize_cost('CAMP0001', [performance_row(revenue=1000)])

        self.assertEqual(medium['risk_assessment'], "Medium Risk - Monitor conversion rates closely")
        self.assertEqual(high['risk_assessment'], "High Risk - Consider campaign restructuring")

    def test_zero_clicks_and_cost(self):
        result = self.engine.minimize_cost('CAMP0001', [performance_row(clicks=0, cost=0.0)])

        self.assertEqual(result['avg_cpc'], 0.0)
        self.assertEqual(result['current_roas'], 0.0)
        self.assertEqual(result['projected_savings'], 0.0)

    def test_no_rows(self):
        with self.assertRaises(NoData):
            self.engine.minimize_cost('CAMP0404', [])


class ConversionMaximizationTest(SimpleTestCase):

    def setUp(self):
        self.engine = OptimizationEngine()

    def test_projection_and_timeline(self):
        result = self.engine.maximize_conversions('CAMP0001', [performance_row()])

        self.assertEqual(result['current_conversions'], 60)
        self.assertAlmostEqual(result['current_conversion_rate'], 12.0)
        self.assertEqual(result['projected_conversions'], 75)
        self.assertAlmostEqual(result['improvement_percentage'], 25.0)
        self.assertEqual(len(result['recommendations']), 6)
        self.assertEqual(len(result['implementation_plan']), 6)
        self.assertEqual(result['expected_timeline'], "8-12 weeks to see significant improvement")

    def test_low_conversion_rate_takes_longer(self):
        result = self.engine.maximize_conversions('CAMP0001', [performance_row(conversions=3)])

        self.assertEqual(result['projected_conversions'], 4)
        self.assertEqual(result['expected_timeline'], "12-16 weeks for substantial gains")

    def test_projection_rounds_half_up(self):
        for total, projected in ((2, 3), (6, 8), (10, 13), (14, 18)):
            result = self.engine.maximize_conversions('CAMP0001', [performance_row(conversions=total)])
            self.assertEqual(result['projected_conversions'], projected, total)

    def test_zero_clicks(self):
        result = self.engine.maximize_conversions('CAMP0001', [performance_row(clicks=0, conversions=0)])
        self.assertEqual(result['current_conversion_rate'], 0.0)

    def test_no_rows(self):
        with self.assertRaises(NoData):
            self.engine.maximize_conversions('CAMP0404', [])
