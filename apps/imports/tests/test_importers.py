from datetime import datetime

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.utils import timezone

from apps.campaigns.models import CampaignPerformance, MarketingCampaign
from apps.customers.models import Customer, Purchase
from apps.imports.importers import (
    DATASETS,
    BulkImporter,
    ImportFileError,
    get_dataset,
    import_bulk,
    sample_csv,
)

CUSTOMER_HEADER = 'customer_id,age,gender,location,income_range,registration_date,preferred_category\n'


def csv_upload(content, name='upload.csv'):
    return SimpleUploadedFile(name, content.encode('utf-8'), content_type='text/csv')


class CsvImportTest(TestCase):

    def import_csv(self, dataset, content, name='upload.csv'):
        return BulkImporter(DATASETS[dataset]).from_csv(csv_upload(content, name))

    def test_every_sample_file_imports_cleanly(self):
        for name in ('customers', 'purchases', 'campaigns', 'performance'):
            result = self.import_csv(name, sample_csv(DATASETS[name]))
            self.assertEqual(result['imported'], 3, name)
            self.assertNotIn('errors', result, name)

        self.assertEqual(Customer.objects.count(), 3)
        self.assertEqual(Purchase.objects.count(), 3)
        self.assertEqual(MarketingCampaign.objects.count(), 3)
        self.assertEqual(CampaignPerformance.objects.count(), 3)

    def test_dates_become_midnight(self):
        self.import_csv('customers', CUSTOMER_HEADER + 'CUST00001,25,Female,New York,$50k-$75k,2024-01-15,Fashion\n')

        customer = Customer.objects.get(customer_id='CUST00001')
        self.assertEqual(customer.registration_date, timezone.make_aware(datetime(2024, 1, 15)))
        self.assertEqual(customer.purchase_frequency, 0)

    def test_bad_rows_are_reported_and_skipped(self):
        Customer.objects.create(customer_id='CUST00009', age=40, registration_date=timezone.now())
        content = CUSTOMER_HEADER + (
            'CUST00001,25,Female,New York,$50k-$75k,2024-01-15,Fashion\n'
            'CUST00002,abc,Male,Texas,$25k-$50k,2024-01-16,Books\n'
            'CUST00001,30,Male,Texas,$25k-$50k,2024-01-17,Books\n'
            'CUST00003,31,Male\n'
            'CUST00009,50,Other,Phoenix,$150k+,2024-01-18,Sports\n'
            'CUST00004,33,Female,Dallas,$50k-$75k,15/01/2024,Beauty\n'
        )

        result = self.import_csv('customers', content)

        self.assertEqual(result['imported'], 1)
        self.assertEqual(result['total_rows'], 6)
        errors = result['errors']
        self.assertEqual(len(errors), 5)
        self.assertTrue(any(e.startswith('Row 3: age') for e in errors))
        self.assertIn('Row 4: duplicate customer_id CUST00001', errors)
        self.assertIn('Row 5: insufficient columns', errors)
        self.assertTrue(any(e.startswith('Row 6: customer_id') for e in errors))
        self.assertTrue(any(e.startswith('Row 7: registration_date') for e in errors))

    def test_performance_ratios_are_derived(self):
        self.import_csv('performance', 'campaign_id,impressions,clicks,conversions,revenue,cost,date\n'
                                       'CAMP0001,10000,500,60,2500.00,1000.00,2024-06-01\n')

        row = CampaignPerformance.objects.get()
        self.assertAlmostEqual(row.ctr, 5.0)
        self.assertAlmostEqual(row.cpc, 2.0)
        self.assertAlmostEqual(row.roas, 2.5)

    def test_purchases_refresh_customer_aggregates(self):
        Customer.objects.create(customer_id='CUST00001', age=30, registration_date=timezone.now())

        result = self.import_csv('purchases', 'customer_id,product_id,category,amount,quantity,purchase_date,channel\n'
                                              'CUST00001,PROD001,Books,20.00,1,2024-01-20,online\n'
                                              'CUST00001,PROD002,Books,30.00,2,2024-01-21,store\n'
                                              'CUST00404,PROD003,Books,10.00,1,2024-01-22,online\n')

        self.assertEqual(result['imported'], 2)
        self.assertEqual(result['metrics_refreshes_scheduled'], 1)
        self.assertIn('Row 4: customer_id', result['errors'][0])

        customer = Customer.objects.get(customer_id='CUST00001')
        self.assertEqual(customer.purchase_frequency, 2)
        self.assertAlmostEqual(customer.total_spent, 50.0)

    def test_header_whitespace_and_case_are_ignored(self):
        content = ' Customer_ID ,AGE,gender,location,income_range,registration_date,preferred_category\n' \
                  'CUST00001,25,Female,New York,$50k-$75k,2024-01-15,Fashion\n'
        self.assertEqual(self.import_csv('customers', content)['imported'], 1)

    def test_file_level_rejections(self):
        cases = [
            (CUSTOMER_HEADER + 'CUST00001,25,Female,NY,$50k-$75k,2024-01-15,Fashion\n', 'customers.txt',
             'Only CSV files are allowed'),
            (CUSTOMER_HEADER, 'customers.csv', 'CSV file must contain header and at least one data row'),
            ('id,age\nCUST00001,25\n', 'customers.csv', 'Invalid CSV headers'),
        ]
        for content, name, message in cases:
            with self.assertRaisesMessage(ImportFileError, message):
                self.import_csv('customers', content, name)

        self.assertFalse(Customer.objects.exists())

    def test_invalid_headers_report_expectation(self):
        with self.assertRaises(ImportFileError) as caught:
            self.import_csv('customers', 'id,age\nCUST00001,25\n')

        self.assertEqual(caught.exception.extra['expected'][0], 'customer_id')
        self.assertEqual(caught.exception.extra['received'], ['id', 'age'])

    @override_settings(ANALYTICS_IMPORT_MAX_ROWS=1)
    def test_row_limit(self):
        content = CUSTOMER_HEADER + (
            'CUST00001,25,Female,New York,$50k-$75k,2024-01-15,Fashion\n'
            'CUST00002,26,Female,New York,$50k-$75k,2024-01-15,Fashion\n'
        )
        with self.assertRaisesMessage(ImportFileError, 'Maximum 1 rows per import'):
            self.import_csv('customers', content)

    def test_unknown_dataset(self):
        with self.assertRaisesMessage(ImportFileError, 'Supported types: customers, purchases, campaigns, performance'):
            get_dataset('orders')


class BulkRecordImportTest(TestCase):

    def test_customers_are_imported_before_their_purchases(self):
        results = import_bulk({
            'purchases': [
                {'customer_id': 'CUST00001', 'amount': 12.5, 'quantity': 2, 'purchase_date': '2024-03-01'},
            ],
            'customers': [
                {'customer_id': 'CUST00001', 'age': 41, 'registration_date': '2024-01-01'},
                {'customer_id': 'CUST00002', 'age': 29, 'registration_date': '2024-01-02T10:30:00Z'},
            ],
        })

        self.assertEqual(results, {'customers_imported': 2, 'purchases_imported': 1})
        self.assertEqual(Customer.objects.get(customer_id='CUST00001').purchase_frequency, 1)

    def test_invalid_records_are_listed_per_dataset(self):
        now = timezone.now()
        results = import_bulk({
            'campaigns': [
                {'campaign_id': 'CAMP0001', 'name': 'Ok', 'type': 'email', 'budget': 10,
                 'start_date': '2024-06-01', 'end_date': '2024-06-30'},
                {'campaign_id': 'CAMP0002', 'name': 'Backwards', 'type': 'email', 'budget': 10,
                 'start_date': '2024-06-30', 'end_date': '2024-06-01'},
                'not-a-record',
            ],
            'performance': [
                {'campaign_id': 'CAMP0001', 'impressions': 100, 'clicks': 10, 'cost': 5.0,
                 'revenue': 20.0, 'date': now.isoformat()},
            ],
        })

        self.assertEqual(results['campaigns_imported'], 1)
        self.assertEqual(len(results['campaigns_errors']), 2)
        self.assertTrue(results['campaigns_errors'][0].startswith('Row 2: end_date'))
        self.assertEqual(results['campaigns_errors'][1], 'Row 3: expected an object')
        self.assertEqual(results['performance_imported'], 1)
        self.assertAlmostEqual(CampaignPerformance.objects.get().roas, 4.0)
