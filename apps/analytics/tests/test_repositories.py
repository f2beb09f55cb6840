from datetime import datetime, timezone
from unittest import mock

from django.core.cache import cache
from django.test import TestCase, override_settings

from apps.analytics.exceptions import NotFound
from apps.analytics.models import CustomerSegment, PredictionResult
from apps.analytics.options import DateRange
from apps.analytics.records import Prediction, SegmentCriteria, SegmentResult
from apps.analytics.repository import AnalyticsRepository
from apps.campaigns.models import CampaignPerformance, MarketingCampaign
from apps.customers.models import Customer, Purchase


def at(day, hour=12):
    return datetime(2024, 5, day, hour, tzinfo=timezone.utc)


class AnalyticsRepositoryTest(TestCase):

    def setUp(self):
        cache.clear()
        for i in range(1, 4):
            Customer.objects.create(
                customer_id=f"CUST{i:05d}",
                age=20 + i,
                registration_date=at(1),
                total_spent=100.0 * i,
                purchase_frequency=i,
            )
        Purchase.objects.create(customer_id='CUST00001', amount=10.0, quantity=2, purchase_date=at(1, 9))
        Purchase.objects.create(customer_id='CUST00001', amount=5.0, quantity=1, purchase_date=at(1, 18))
        Purchase.objects.create(customer_id='CUST00001', amount=100.0, quantity=1, purchase_date=at(3))

    def test_find_customers_pages_in_insertion_order(self):
        first_page = AnalyticsRepository.find_customers(limit=2, offset=0)
        second_page = AnalyticsRepository.find_customers(limit=2, offset=2)

        self.assertEqual([c.customer_id for c in first_page], ['CUST00001', 'CUST00002'])
        self.assertEqual([c.customer_id for c in second_page], ['CUST00003'])
        self.assertEqual(first_page[1].total_spent, 200.0)

    def test_find_customer_by_id(self):
        self.assertEqual(AnalyticsRepository.find_customer_by_id('CUST00002').age, 22)

    def test_missing_customer_raises_not_found(self):
        with self.assertRaises(NotFound):
            AnalyticsRepository.find_customer_by_id('CUST99999')

    def test_purchases_sorted_by_date(self):
        ascending = AnalyticsRepository.find_purchases_by_customer('CUST00001')
        descending = AnalyticsRepository.find_purchases_by_customer('CUST00001', sort_by_date_desc=True)

        self.assertEqual([p.amount for p in ascending], [10.0, 5.0, 100.0])
        self.assertEqual([p.amount for p in descending], [100.0, 5.0, 10.0])

    def test_performance_rows_carry_stored_metrics(self):
        CampaignPerformance.objects.create(
            campaign_id='CAMP0001', impressions=10000, clicks=500, conversions=20,
            cost=1000.0, revenue=2500.0, date=at(2),
        )
        rows = AnalyticsRepository.find_performance_by_campaign('CAMP0001')

        self.assertEqual(len(rows), 1)
        self.assertEqual((rows[0].ctr, rows[0].cpc, rows[0].roas), (5.0, 2.0, 2.5))
        self.assertEqual(AnalyticsRepository.find_performance_by_campaign('CAMP0404'), [])

    def test_insert_segment_stores_criteria_as_dict(self):
        segment = SegmentResult(
            segment_id='segment_3', name='Low Value Customers', description='low',
            criteria=SegmentCriteria(max_total_spent=100.0, max_purchase_frequency=1), size=4,
        )
        saved = AnalyticsRepository.insert_segment(segment, run_id='run-1')

        stored = CustomerSegment.objects.get(pk=saved.pk)
        self.assertEqual(stored.criteria, {'max_total_spent': 100.0, 'max_purchase_frequency': 1})
        self.assertEqual(stored.run_id, 'run-1')
        self.assertEqual(stored.algorithm, 'tertile')

    def test_insert_prediction(self):
        AnalyticsRepository.insert_prediction(
            Prediction(customer_id='CUST00001', prediction_type='churn', probability=0.5, confidence=0.75)
        )
        stored = PredictionResult.objects.get(customer_id='CUST00001')
        self.assertEqual((stored.prediction_type, stored.probability), ('churn', 0.5))

    def test_compute_and_update_customer_aggregate(self):
        fields = AnalyticsRepository.compute_customer_aggregate('CUST00001')

        self.assertEqual(fields['total_spent'], 115.0)
        self.assertEqual(fields['purchase_frequency'], 3)
        self.assertEqual(fields['last_purchase_date'], at(3))

        AnalyticsRepository.update_customer_aggregate('CUST00001', fields)
        customer = Customer.objects.get(customer_id='CUST00001')
        self.assertEqual((customer.total_spent, customer.purchase_frequency), (115.0, 3))

    def test_aggregate_of_customer_without_purchases(self):
        self.assertIsNone(AnalyticsRepository.compute_customer_aggregate('CUST00002'))

    def test_update_rejects_non_aggregate_fields(self):
        with self.assertRaises(ValueError):
            AnalyticsRepository.update_customer_aggregate('CUST00001', {'age': 99})

    def test_dashboard_totals(self):
        MarketingCampaign.objects.create(
            campaign_id='CAMP0001', name='Spring', type='email', budget=100,
            start_date=at(1), end_date=at(20), status='active',
        )
        MarketingCampaign.objects.create(
            campaign_id='CAMP0002', name='Winter', type='search', budget=100,
            start_date=at(1), end_date=at(2), status='completed',
        )
        totals = AnalyticsRepository.dashboard_totals(DateRange())

        self.assertEqual(totals['total_customers'], 3)
        self.assertEqual(totals['total_purchases'], 3)
        self.assertAlmostEqual(totals['total_revenue'], 115.0)
        self.assertAlmostEqual(totals['avg_order_value'], 115.0 / 3)
        self.assertEqual((totals['total_campaigns'], totals['active_campaigns']), (2, 1))

    def test_dashboard_totals_within_date_range(self):
        totals = AnalyticsRepository.dashboard_totals(DateRange(at(2, 0), at(4, 0)))

        self.assertEqual(totals['total_purchases'], 1)
        self.assertAlmostEqual(totals['total_revenue'], 100.0)

    def test_half_open_date_range_is_ignored(self):
        totals = AnalyticsRepository.dashboard_totals(DateRange(start_date=at(2, 0)))
        self.assertEqual(totals['total_purchases'], 3)

    def test_daily_revenue_multiplies_quantity(self):
        rows = AnalyticsRepository.daily_revenue(DateRange())

        self.assertEqual(rows, [
            {'date': '2024-05-01', 'revenue': 25.0},
            {'date': '2024-05-03', 'revenue': 100.0},
        ])

    def test_dashboard_is_cached(self):
        AnalyticsRepository.dashboard_totals(DateRange())
        Customer.objects.create(customer_id='CUST00004', age=40, registration_date=at(1))

        self.assertEqual(AnalyticsRepository.dashboard_totals(DateRange())['total_customers'], 3)
        cache.clear()
        self.assertEqual(AnalyticsRepository.dashboard_totals(DateRange())['total_customers'], 4)

    @override_settings(ANALYTICS_SLOW_QUERY_SECONDS=-1)
    def test_slow_reads_are_logged(self):
        with self.assertLogs('apps.analytics.repositories.performance', level='WARNING') as logs:
            AnalyticsRepository.find_customers()
        self.assertIn('Slow query: find_customers', logs.output[0])

    def test_fast_reads_are_not_logged(self):
        with mock.patch('apps.analytics.repositories.performance.logger') as logger:
            AnalyticsRepository.find_customers()
        logger.warning.assert_not_called()
