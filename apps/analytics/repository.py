from typing import Any, Dict, List, Optional

from django.db.models import Avg, Count, F, FloatField, Max, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from apps.campaigns.models import CampaignPerformance, MarketingCampaign
from apps.customers.models import Customer, Purchase
from .exceptions import NotFound
from .models import CustomerSegment, PredictionResult
from .options import DateRange
from .records import CustomerRecord, PerformanceRecord, Prediction, PurchaseRecord, SegmentResult
from .repositories.cached import cache_heavy_query
from .repositories.performance import monitor_query_performance

AGGREGATE_FIELDS = ('total_spent', 'purchase_frequency', 'last_purchase_date')


def to_customer_record(customer: Customer) -> CustomerRecord:
    return CustomerRecord(
        customer_id=customer.customer_id,
        age=customer.age,
        registration_date=customer.registration_date,
        last_purchase_date=customer.last_purchase_date,
        total_spent=customer.total_spent,
        purchase_frequency=customer.purchase_frequency,
        gender=customer.gender,
        location=customer.location,
        income_range=customer.income_range,
        preferred_category=customer.preferred_category,
    )


def to_purchase_record(purchase: Purchase) -> PurchaseRecord:
    return PurchaseRecord(
        customer_id=purchase.customer_id,
        amount=purchase.amount,
        quantity=purchase.quantity,
        purchase_date=purchase.purchase_date,
        channel=purchase.channel,
        category=purchase.category,
        product_id=purchase.product_id,
    )


def to_performance_record(row: CampaignPerformance) -> PerformanceRecord:
    return PerformanceRecord(
        campaign_id=row.campaign_id,
        impressions=row.impressions,
        clicks=row.clicks,
        conversions=row.conversions,
        revenue=row.revenue,
        cost=row.cost,
        ctr=row.ctr,
        cpc=row.cpc,
        roas=row.roas,
        date=row.date,
    )


def _purchase_filter(date_range: Optional[DateRange]):
    if date_range is not None and date_range.is_bounded:
        return {'purchase_date__gte': date_range.start_date, 'purchase_date__lte': date_range.end_date}
    return {}


class AnalyticsRepository:
    """ORM-backed reads and writes the analytics engines depend on."""

    @staticmethod
    @monitor_query_performance
    def find_customers(limit: int = 1000, offset: int = 0) -> List[CustomerRecord]:
        rows = Customer.objects.order_by('id')[offset:offset + limit]
        return [to_customer_record(c) for c in rows]

    @staticmethod
    def find_customer_by_id(customer_id: str) -> CustomerRecord:
        try:
            return to_customer_record(Customer.objects.get(customer_id=customer_id))
        except Customer.DoesNotExist:
            raise NotFound(f"customer not found: {customer_id}") from None

    @staticmethod
    @monitor_query_performance
    def find_purchases_by_customer(customer_id: str, sort_by_date_desc: bool = False) -> List[PurchaseRecord]:
        ordering = '-purchase_date' if sort_by_date_desc else 'purchase_date'
        rows = Purchase.objects.filter(customer_id=customer_id).order_by(ordering, 'id')
        return [to_purchase_record(p) for p in rows]

    @staticmethod
    @monitor_query_performance
    def find_performance_by_campaign(campaign_id: str) -> List[PerformanceRecord]:
        rows = CampaignPerformance.objects.filter(campaign_id=campaign_id).order_by('date', 'id')
        return [to_performance_record(r) for r in rows]

    @staticmethod
    def insert_segment(segment: SegmentResult, run_id: str, algorithm: str = 'tertile') -> CustomerSegment:
        return CustomerSegment.objects.create(
            run_id=run_id,
            segment_id=segment.segment_id,
            name=segment.name,
            description=segment.description,
            criteria=segment.criteria.as_dict(),
            size=segment.size,
            algorithm=algorithm,
        )

    @staticmethod
    def insert_prediction(prediction: Prediction) -> PredictionResult:
        return PredictionResult.objects.create(
            customer_id=prediction.customer_id,
            prediction_type=prediction.prediction_type,
            probability=prediction.probability,
            value=prediction.value,
            confidence=prediction.confidence,
        )

    @staticmethod
    def compute_customer_aggregate(customer_id: str) -> Optional[Dict[str, Any]]:
        """Roll the purchase ledger up into the denormalized customer fields.

        Returns None when the customer has no purchases.
        """
        result = Purchase.objects.filter(customer_id=customer_id).aggregate(
            total_spent=Sum('amount'),
            purchase_frequency=Count('id'),
            last_purchase_date=Max('purchase_date'),
        )
        if not result['purchase_frequency']:
            return None
        return result

    @staticmethod
    def update_customer_aggregate(customer_id: str, fields: Dict[str, Any]) -> int:
        unknown = set(fields) - set(AGGREGATE_FIELDS)
        if unknown:
            raise ValueError(f"not an aggregate field: {', '.join(sorted(unknown))}")
        return Customer.objects.filter(customer_id=customer_id).update(
            updated_at=timezone.now(), **fields
        )

    @staticmethod
    @cache_heavy_query()
    @monitor_query_performance
    def dashboard_totals(date_range: Optional[DateRange] = None) -> Dict[str, Any]:
        purchases = Purchase.objects.filter(**_purchase_filter(date_range))
        revenue = purchases.aggregate(total_revenue=Sum('amount'), avg_order_value=Avg('amount'))

        return {
            'total_customers': Customer.objects.count(),
            'total_purchases': purchases.count(),
            'total_revenue': revenue['total_revenue'] or 0.0,
            'avg_order_value': revenue['avg_order_value'] or 0.0,
            'total_campaigns': MarketingCampaign.objects.count(),
            'active_campaigns': MarketingCampaign.objects.filter(status='active').count(),
        }

    @staticmethod
    @cache_heavy_query()
    @monitor_query_performance
    def daily_revenue(date_range: Optional[DateRange] = None) -> List[Dict[str, Any]]:
        rows = (
            Purchase.objects.filter(**_purchase_filter(date_range))
            .annotate(day=TruncDate('purchase_date'))
            .values('day')
            .annotate(revenue=Sum(F('amount') * F('quantity'), output_field=FloatField()))
            .order_by('day')
        )
        return [{'date': row['day'].isoformat(), 'revenue': row['revenue']} for row in rows]
