from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def recompute_customer_metrics(customer_id):
    """Refresh total_spent / purchase_frequency / last_purchase_date from the ledger.

    Best effort: no retries, and failures are dropped so the purchase that
    triggered the refresh is never affected. Concurrent runs for the same
    customer are last-write-wins.
    """
    from apps.analytics.repository import AnalyticsRepository

    try:
        fields = AnalyticsRepository.compute_customer_aggregate(customer_id)
        if fields is None:
            return None
        AnalyticsRepository.update_customer_aggregate(customer_id, fields)
        return fields
    except Exception as e:
        logger.debug(f"Customer metrics refresh dropped for {customer_id}: {e}")
        return None


def schedule_customer_metrics_refresh(customer_id):
    """Enqueue the refresh and hand back its AsyncResult.

    Callers may keep the handle to wait for the aggregate to converge, but
    nothing requires them to. Returns None when the broker rejects the task.
    """
    try:
        return recompute_customer_metrics.delay(customer_id)
    except Exception as e:
        logger.debug(f"Could not enqueue metrics refresh for {customer_id}: {e}")
        return None
