from celery import shared_task
from django.db import DatabaseError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
import logging

from apps.customers.models import Customer
from apps.customers.tasks import schedule_customer_metrics_refresh
from .options import SegmentationOptions
from .services import AnalyticsService

logger = logging.getLogger(__name__)


@shared_task
@retry(
    retry=retry_if_exception_type(DatabaseError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    reraise=True,
)
def run_customer_segmentation(algorithm='tertile', features=None, limit=1000):
    """Segmentation off the request path; transient database errors are retried."""
    options = SegmentationOptions(
        algorithm=algorithm,
        features=tuple(features or SegmentationOptions.features),
        limit=limit,
    )
    segments = AnalyticsService().segment_customers(options)

    run_id = segments[0].run_id if segments else None
    logger.info(f"Background segmentation {run_id} finished with {len(segments)} segments")
    return {
        'run_id': run_id,
        'segments': [
            {'segment_id': s.segment_id, 'name': s.name, 'size': s.size}
            for s in segments
        ],
    }


@shared_task
def refresh_all_customer_metrics(batch_size=500):
    """Re-enqueue the aggregate refresh for every customer."""
    scheduled = 0
    customer_ids = Customer.objects.order_by('id').values_list('customer_id', flat=True)
    for customer_id in customer_ids.iterator(chunk_size=batch_size):
        if schedule_customer_metrics_refresh(customer_id) is not None:
            scheduled += 1

    logger.info(f"Scheduled metrics refresh for {scheduled} customers")
    return {'customers_scheduled': scheduled}
