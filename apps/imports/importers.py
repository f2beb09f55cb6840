"""Bulk import of customers, purchases, campaigns and daily campaign performance.

Rows are validated one by one with the same serializers the REST API uses.
Rows that fail are reported as ``Row N: ...`` and skipped; the valid rest is
bulk inserted in one transaction.
"""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.campaigns.models import CampaignPerformance, MarketingCampaign, derive_performance_metrics
from apps.campaigns.serializers import CampaignPerformanceSerializer, MarketingCampaignSerializer
from apps.customers.models import Customer, Purchase
from apps.customers.serializers import CustomerSerializer, PurchaseSerializer
from apps.customers.tasks import schedule_customer_metrics_refresh

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'


class ImportFileError(Exception):
    """The upload as a whole is unusable; ``extra`` is merged into the error body."""

    def __init__(self, message, **extra):
        super().__init__(message)
        self.extra = extra


@dataclass(frozen=True)
class Dataset:
    name: str
    model: Any
    serializer_class: Any
    headers: Tuple[str, ...]
    date_fields: Tuple[str, ...]
    data_types: Dict[str, str]
    sample_rows: Tuple[Tuple[str, ...], ...]
    # identifier that must not repeat within one import
    unique_field: Optional[str] = None

    def template(self):
        return {
            'required_headers': list(self.headers),
            'data_types': dict(self.data_types),
            'example_row': ','.join(self.sample_rows[0]),
        }


DATASETS = {
    'customers': Dataset(
        name='customers',
        model=Customer,
        serializer_class=CustomerSerializer,
        headers=('customer_id', 'age', 'gender', 'location', 'income_range',
                 'registration_date', 'preferred_category'),
        date_fields=('registration_date',),
        data_types={
            'customer_id': 'string (unique identifier)',
            'age': 'integer',
            'gender': 'string (Male/Female/Other)',
            'location': 'string (city/state)',
            'income_range': 'string (e.g., $50k-$75k)',
            'registration_date': 'date (YYYY-MM-DD format)',
            'preferred_category': 'string (product category)',
        },
        sample_rows=(
            ('CUST00001', '25', 'Female', 'New York', '$50k-$75k', '2024-01-15', 'Fashion'),
            ('CUST00002', '35', 'Male', 'California', '$75k-$100k', '2024-01-20', 'Electronics'),
            ('CUST00003', '28', 'Female', 'Texas', '$25k-$50k', '2024-02-01', 'Home & Garden'),
        ),
        unique_field='customer_id',
    ),
    'purchases': Dataset(
        name='purchases',
        model=Purchase,
        serializer_class=PurchaseSerializer,
        headers=('customer_id', 'product_id', 'category', 'amount', 'quantity',
                 'purchase_date', 'channel'),
        date_fields=('purchase_date',),
        data_types={
            'customer_id': 'string (must exist in customers)',
            'product_id': 'string (product identifier)',
            'category': 'string (product category)',
            'amount': 'decimal (purchase amount)',
            'quantity': 'integer (number of items)',
            'purchase_date': 'date (YYYY-MM-DD format)',
            'channel': 'string (online/store)',
        },
        sample_rows=(
            ('CUST00001', 'PROD001', 'Fashion', '89.99', '1', '2024-01-20', 'online'),
            ('CUST00002', 'PROD002', 'Electronics', '299.99', '1', '2024-01-25', 'store'),
            ('CUST00003', 'PROD003', 'Home & Garden', '45.50', '2', '2024-02-05', 'online'),
        ),
    ),
    'campaigns': Dataset(
        name='campaigns',
        model=MarketingCampaign,
        serializer_class=MarketingCampaignSerializer,
        headers=('campaign_id', 'name', 'type', 'target_segment', 'budget',
                 'start_date', 'end_date', 'status'),
        date_fields=('start_date', 'end_date'),
        data_types={
            'campaign_id': 'string (unique identifier)',
            'name': 'string (campaign name)',
            'type': 'string (email/social/display/search/influencer)',
            'target_segment': 'string (target audience)',
            'budget': 'decimal (campaign budget)',
            'start_date': 'date (YYYY-MM-DD format)',
            'end_date': 'date (YYYY-MM-DD format)',
            'status': 'string (active/paused/completed)',
        },
        sample_rows=(
            ('CAMP0001', 'Summer Fashion Sale', 'email', 'Fashion Lovers', '5000.00',
             '2024-06-01', '2024-06-30', 'completed'),
            ('CAMP0002', 'Electronics Black Friday', 'social', 'Tech Enthusiasts', '10000.00',
             '2024-11-20', '2024-11-30', 'completed'),
            ('CAMP0003', 'Spring Collection', 'display', 'Young Adults', '7500.00',
             '2024-03-01', '2024-03-31', 'active'),
        ),
        unique_field='campaign_id',
    ),
    'performance': Dataset(
        name='performance',
        model=CampaignPerformance,
        serializer_class=CampaignPerformanceSerializer,
        headers=('campaign_id', 'impressions', 'clicks', 'conversions', 'revenue', 'cost', 'date'),
        date_fields=('date',),
        data_types={
            'campaign_id': 'string (campaign identifier)',
            'impressions': 'integer (ad impressions)',
            'clicks': 'integer (ad clicks)',
            'conversions': 'integer (conversions)',
            'revenue': 'decimal (revenue generated)',
            'cost': 'decimal (campaign cost)',
            'date': 'date (YYYY-MM-DD format)',
        },
        sample_rows=(
            ('CAMP0001', '10000', '500', '25', '2500.00', '1000.00', '2024-06-01'),
            ('CAMP0001', '12000', '600', '30', '3000.00', '1200.00', '2024-06-02'),
            ('CAMP0002', '15000', '750', '50', '5000.00', '1500.00', '2024-11-20'),
        ),
    ),
}

# JSON bulk import order: purchases are checked against customers imported just before
IMPORT_ORDER = ('customers', 'purchases', 'campaigns', 'performance')

GUIDELINES = [
    "CSV files must include headers as the first row",
    "Date format must be YYYY-MM-DD",
    "Decimal numbers use dot (.) as separator",
    "Text fields containing commas must be quoted",
]


def get_dataset(name):
    try:
        return DATASETS[name]
    except KeyError:
        raise ImportFileError(
            f"Invalid data type. Supported types: {', '.join(DATASETS)}"
        ) from None


def import_guidelines():
    return GUIDELINES + [
        f"File size limit: {settings.ANALYTICS_IMPORT_MAX_BYTES // (1024 * 1024)}MB",
        f"Maximum {settings.ANALYTICS_IMPORT_MAX_ROWS:,} rows per import",
    ]


def parse_date(value):
    """YYYY-MM-DD becomes midnight; other values go to the serializer as they are."""
    if not isinstance(value, str):
        return value
    try:
        parsed = datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        return value
    return timezone.make_aware(parsed)


def format_errors(errors):
    parts = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            messages = ' '.join(str(m) for m in messages)
        parts.append(f"{field}: {messages}")
    return '; '.join(parts)


def read_csv(upload, dataset: Dataset) -> Tuple[List[Tuple[int, Dict[str, str]]], List[str]]:
    """Parse an uploaded CSV into numbered rows, checking the header line."""
    if not upload.name.lower().endswith('.csv'):
        raise ImportFileError("Only CSV files are allowed")
    if upload.size > settings.ANALYTICS_IMPORT_MAX_BYTES:
        raise ImportFileError("CSV file is too large")

    try:
        text = upload.read().decode('utf-8-sig')
    except UnicodeDecodeError:
        raise ImportFileError("CSV file must be UTF-8 encoded") from None

    try:
        records = [r for r in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in r)]
    except csv.Error:
        raise ImportFileError("Failed to parse CSV file") from None

    if len(records) < 2:
        raise ImportFileError("CSV file must contain header and at least one data row")

    received = records[0]
    if tuple(h.strip().lower() for h in received) != dataset.headers:
        raise ImportFileError("Invalid CSV headers", expected=list(dataset.headers), received=received)

    if len(records) - 1 > settings.ANALYTICS_IMPORT_MAX_ROWS:
        raise ImportFileError(f"Maximum {settings.ANALYTICS_IMPORT_MAX_ROWS:,} rows per import")

    rows, errors = [], []
    for number, record in enumerate(records[1:], start=2):
        if len(record) < len(dataset.headers):
            errors.append(f"Row {number}: insufficient columns")
            continue
        rows.append((number, {h: cell.strip() for h, cell in zip(dataset.headers, record)}))
    return rows, errors


class BulkImporter:

    def __init__(self, dataset: Dataset, batch_size: int = 1000):
        self.dataset = dataset
        self.batch_size = batch_size

    def build(self, rows: Iterable[Tuple[int, Dict[str, Any]]], errors: List[str]):
        instances = []
        seen = set()
        for number, row in rows:
            if not isinstance(row, dict):
                errors.append(f"Row {number}: expected an object")
                continue

            data = dict(row)
            for field in self.dataset.date_fields:
                if field in data:
                    data[field] = parse_date(data[field])

            serializer = self.dataset.serializer_class(data=data)
            if not serializer.is_valid():
                errors.append(f"Row {number}: {format_errors(serializer.errors)}")
                continue

            key_field = self.dataset.unique_field
            if key_field:
                key = serializer.validated_data[key_field]
                if key in seen:
                    errors.append(f"Row {number}: duplicate {key_field} {key}")
                    continue
                seen.add(key)

            instances.append(self.instantiate(serializer.validated_data))
        return instances

    def instantiate(self, validated_data):
        instance = self.dataset.model(**validated_data)
        if isinstance(instance, CampaignPerformance):
            # bulk_create skips save(), which derives the ratios
            instance.ctr, instance.cpc, instance.roas = derive_performance_metrics(
                instance.impressions, instance.clicks, instance.cost, instance.revenue
            )
        return instance

    def run(self, rows, errors=None, total_rows=None) -> Dict[str, Any]:
        rows = list(rows)
        errors = list(errors or [])
        if total_rows is None:
            total_rows = len(rows)

        instances = self.build(rows, errors)
        with transaction.atomic():
            self.dataset.model.objects.bulk_create(instances, batch_size=self.batch_size)

        result = {
            'success_count': len(instances),
            'total_rows': total_rows,
            'imported': len(instances),
        }
        if self.dataset.model is Purchase:
            result['metrics_refreshes_scheduled'] = self.refresh_customers(instances)
        if errors:
            result['errors'] = errors

        logger.info(
            f"Imported {len(instances)}/{total_rows} {self.dataset.name} rows with {len(errors)} errors"
        )
        return result

    def refresh_customers(self, purchases):
        scheduled = 0
        for customer_id in sorted({p.customer_id for p in purchases}):
            if schedule_customer_metrics_refresh(customer_id) is not None:
                scheduled += 1
        return scheduled

    def from_csv(self, upload):
        rows, errors = read_csv(upload, self.dataset)
        return self.run(rows, errors, total_rows=len(rows) + len(errors))

    def from_records(self, records):
        return self.run(enumerate(records, start=1))


def import_bulk(payload: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    """Import every dataset present in ``payload``, customers first."""
    results = {}
    for name in IMPORT_ORDER:
        records = payload.get(name)
        if not records:
            continue
        outcome = BulkImporter(DATASETS[name]).from_records(records)
        results[f"{name}_imported"] = outcome['imported']
        if 'errors' in outcome:
            results[f"{name}_errors"] = outcome['errors']
    return results


def sample_csv(dataset: Dataset) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(dataset.headers)
    writer.writerows(dataset.sample_rows)
    return buffer.getvalue()
