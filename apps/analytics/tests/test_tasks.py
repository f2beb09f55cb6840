from unittest import mock

from django.core.cache import cache
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from apps.analytics.circuit_breaker import CircuitBreaker, CircuitState
from apps.analytics.exceptions import NoData, ServiceUnavailable
from apps.analytics.models import CustomerSegment
from apps.analytics.repository import AnalyticsRepository
from apps.analytics.services import AnalyticsService
from apps.analytics.tasks import refresh_all_customer_metrics, run_customer_segmentation
from apps.customers.models import Customer


class RunCustomerSegmentationTest(TestCase):

    def test_segments_are_stored(self):
        for i in range(1, 4):
            Customer.objects.create(
                customer_id=f"CUST{i:05d}", age=30, registration_date=timezone.now(),
                total_spent=100.0 * i, purchase_frequency=i,
            )

        result = run_customer_segmentation('kmeans', ['total_spent'], 1000)

        self.assertEqual([s['segment_id'] for s in result['segments']],
                         ['segment_1', 'segment_2', 'segment_3'])
        stored = CustomerSegment.objects.filter(run_id=result['run_id'])
        self.assertEqual(stored.count(), 3)
        self.assertEqual(set(stored.values_list('algorithm', flat=True)), {'kmeans'})

    def test_empty_population_raises(self):
        with self.assertRaises(NoData):
            run_customer_segmentation()

    def test_failed_insert_leaves_no_partial_run(self):
        Customer.objects.create(customer_id='CUST00001', age=30, registration_date=timezone.now(),
                                total_spent=100.0, purchase_frequency=1)
        insert_segment = AnalyticsRepository.insert_segment

        def fail_on_third(segment, run_id, algorithm='tertile'):
            if segment.segment_id == 'segment_3':
                raise DatabaseError('disk full')
            return insert_segment(segment, run_id, algorithm)

        with mock.patch.object(AnalyticsRepository, 'insert_segment', side_effect=fail_on_third), \
                mock.patch('tenacity.nap.time.sleep') as sleep:
            with self.assertRaises(DatabaseError):
                run_customer_segmentation()

        self.assertEqual(sleep.call_count, 2)
        self.assertFalse(CustomerSegment.objects.exists())

    def test_failed_insert_rolls_back_service_run(self):
        Customer.objects.create(customer_id='CUST00001', age=30, registration_date=timezone.now(),
                                total_spent=100.0, purchase_frequency=1)
        service = AnalyticsService()
        insert_segment = AnalyticsRepository.insert_segment
        calls = []

        def fail_on_third(segment, run_id, algorithm='tertile'):
            calls.append(run_id)
            if len(calls) == 3:
                raise DatabaseError('disk full')
            return insert_segment(segment, run_id, algorithm)

        with mock.patch.object(AnalyticsRepository, 'insert_segment', side_effect=fail_on_third):
            with self.assertRaises(DatabaseError):
                service.segment_customers()

        self.assertFalse(CustomerSegment.objects.filter(run_id=calls[0]).exists())


class RefreshAllCustomerMetricsTest(TestCase):

    def test_schedules_every_customer(self):
        for i in range(1, 4):
            Customer.objects.create(customer_id=f"CUST{i:05d}", age=30, registration_date=timezone.now())

        with mock.patch('apps.analytics.tasks.schedule_customer_metrics_refresh') as schedule:
            result = refresh_all_customer_metrics(batch_size=2)

        self.assertEqual(result, {'customers_scheduled': 3})
        self.assertEqual(schedule.call_count, 3)

    def test_rejected_enqueues_are_not_counted(self):
        Customer.objects.create(customer_id='CUST00001', age=30, registration_date=timezone.now())

        with mock.patch('apps.analytics.tasks.schedule_customer_metrics_refresh', return_value=None):
            result = refresh_all_customer_metrics()

        self.assertEqual(result['customers_scheduled'], 0)


class CircuitBreakerTest(SimpleTestCase):

    def setUp(self):
        cache.clear()
        self.breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60)
        self.backend = mock.Mock(return_value={'total_customers': 1})

        @self.breaker
        def totals(key):
            return self.backend(key)

        self.totals = totals

    def test_serves_last_good_result_on_failure(self):
        self.assertEqual(self.totals('all'), {'total_customers': 1})

        self.backend.side_effect = DatabaseError('connection refused')
        self.assertEqual(self.totals('all'), {'total_customers': 1})

    def test_no_fallback_raises_service_unavailable(self):
        self.backend.side_effect = DatabaseError('connection refused')
        with self.assertRaises(ServiceUnavailable):
            self.totals('all')

    def test_opens_after_threshold(self):
        self.backend.side_effect = DatabaseError('connection refused')
        for _ in range(2):
            with self.assertRaises(ServiceUnavailable):
                self.totals('all')

        state = self.breaker.get_state(self.totals.circuit_name)
        self.assertEqual(state['state'], CircuitState.OPEN.value)

        self.backend.reset_mock()
        with self.assertRaises(ServiceUnavailable):
            self.totals('all')
        self.backend.assert_not_called()

    def test_half_open_success_closes(self):
        self.backend.side_effect = DatabaseError('connection refused')
        for _ in range(2):
            with self.assertRaises(ServiceUnavailable):
                self.totals('all')

        self.backend.side_effect = None
        with mock.patch.object(self.breaker, '_should_attempt_reset', return_value=True):
            self.assertEqual(self.totals('all'), {'total_customers': 1})

        state = self.breaker.get_state(self.totals.circuit_name)
        self.assertEqual(state['state'], CircuitState.CLOSED.value)

    def test_other_errors_propagate(self):
        self.backend.side_effect = KeyError('bug')
        with self.assertRaises(KeyError):
            self.totals('all')
