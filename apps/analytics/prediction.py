"""Churn, lifetime value and next-purchase estimates.

Basic predictions read only the denormalized customer aggregate, which may
lag the purchase ledger. Advanced predictions read the purchase history
itself to estimate purchase intervals and their spread.
"""
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .options import PredictionType
from .records import CustomerRecord, Prediction, PurchaseRecord

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0
NO_PURCHASE_DAYS = 365
DEFAULT_INTERVAL_DAYS = 30.0
BASIC_LIFESPAN_MONTHS = 24.0


def days_between(later, earlier):
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def purchase_gaps(purchases: Sequence[PurchaseRecord]) -> List[float]:
    """Day gaps between consecutive purchases, most recent first.

    Non-positive gaps (same-instant or out-of-order rows) are discarded.
    """
    ordered = sorted(purchases, key=lambda p: p.purchase_date, reverse=True)
    gaps = []
    for newer, older in zip(ordered, ordered[1:]):
        gap = days_between(newer.purchase_date, older.purchase_date)
        if gap > 0:
            gaps.append(gap)
    return gaps


def lifespan_months(age):
    if age < 25:
        return 36.0
    if age < 40:
        return 48.0
    if age < 60:
        return 60.0
    return 36.0


class PredictionEngine:
    def __init__(self, now: Optional[datetime] = None):
        self._now = now

    @property
    def now(self):
        return self._now or datetime.now(timezone.utc)

    def predict(self, customer: CustomerRecord, prediction_type) -> Prediction:
        """Dispatch a basic prediction; raises UnsupportedOperation for other types."""
        kind = PredictionType.basic(prediction_type)
        if kind is PredictionType.CHURN:
            return self.predict_churn(customer)
        if kind is PredictionType.LTV:
            return self.predict_lifetime_value(customer)
        return self.predict_next_purchase(customer)

    def predict_churn(self, customer: CustomerRecord) -> Prediction:
        if customer.last_purchase_date is not None:
            days_since = int(days_between(self.now, customer.last_purchase_date))
        else:
            days_since = NO_PURCHASE_DAYS

        if days_since > 180:
            probability = 0.8
        elif days_since > 90:
            probability = 0.5
        elif days_since > 30:
            probability = 0.2
        else:
            probability = 0.1

        if customer.purchase_frequency > 10:
            probability *= 0.7
        elif customer.purchase_frequency < 3:
            probability *= 1.3

        return Prediction(
            customer_id=customer.customer_id,
            prediction_type=PredictionType.CHURN.value,
            probability=min(probability, 1.0),
            confidence=0.75,
        )

    def _basic_ltv(self, customer):
        if customer.purchase_frequency == 0:
            avg_order_value = 0.0
        else:
            avg_order_value = customer.total_spent / customer.purchase_frequency
        monthly_rate = customer.purchase_frequency / 12.0
        return avg_order_value * monthly_rate * BASIC_LIFESPAN_MONTHS

    def predict_lifetime_value(self, customer: CustomerRecord) -> Prediction:
        return Prediction(
            customer_id=customer.customer_id,
            prediction_type=PredictionType.LTV.value,
            value=self._basic_ltv(customer),
            confidence=0.65,
        )

    def _basic_days_until_next(self, customer):
        interval = DEFAULT_INTERVAL_DAYS
        if customer.purchase_frequency > 1 and customer.last_purchase_date is not None:
            interval = days_between(self.now, customer.registration_date) / customer.purchase_frequency

        days_since = 0.0
        if customer.last_purchase_date is not None:
            days_since = days_between(self.now, customer.last_purchase_date)

        return max(0.0, interval - days_since)

    def predict_next_purchase(self, customer: CustomerRecord) -> Prediction:
        return Prediction(
            customer_id=customer.customer_id,
            prediction_type=PredictionType.NEXT_PURCHASE.value,
            value=self._basic_days_until_next(customer),
            confidence=0.60,
        )

    def predict_lifetime_value_advanced(self, customer: CustomerRecord,
                                        purchases: Sequence[PurchaseRecord]) -> Prediction:
        if not purchases:
            logger.debug(f"No purchase history for {customer.customer_id}, using basic LTV")
            return Prediction(
                customer_id=customer.customer_id,
                prediction_type=PredictionType.LTV_ADVANCED.value,
                value=self._basic_ltv(customer),
                confidence=0.65,
            )

        avg_order_value = sum(p.amount for p in purchases) / len(purchases)

        gaps = purchase_gaps(purchases)
        avg_interval = sum(gaps) / len(gaps) if gaps else DEFAULT_INTERVAL_DAYS
        monthly_frequency = 30.0 / avg_interval

        lifespan = lifespan_months(customer.age)
        if monthly_frequency > 2:
            lifespan *= 1.2
        elif monthly_frequency < 0.5:
            lifespan *= 0.8

        confidence = 0.75
        if len(purchases) > 10:
            confidence = 0.90
        elif len(purchases) > 5:
            confidence = 0.85

        return Prediction(
            customer_id=customer.customer_id,
            prediction_type=PredictionType.LTV_ADVANCED.value,
            value=avg_order_value * monthly_frequency * lifespan,
            confidence=confidence,
        )

    def predict_next_purchase_advanced(self, customer: CustomerRecord,
                                       purchases: Sequence[PurchaseRecord]) -> Prediction:
        kind = PredictionType.NEXT_PURCHASE_ADVANCED.value

        if len(purchases) < 2:
            return Prediction(
                customer_id=customer.customer_id,
                prediction_type=kind,
                value=self._basic_days_until_next(customer),
                probability=0.6,
                confidence=0.65,
            )

        gaps = purchase_gaps(purchases)
        if not gaps:
            return Prediction(
                customer_id=customer.customer_id,
                prediction_type=kind,
                value=DEFAULT_INTERVAL_DAYS,
                probability=0.5,
                confidence=0.5,
            )

        avg_interval = sum(gaps) / len(gaps)
        std_dev = math.sqrt(sum((gap - avg_interval) ** 2 for gap in gaps) / len(gaps))

        most_recent = max(p.purchase_date for p in purchases)
        days_since = days_between(self.now, most_recent)
        days_until_next = max(0.0, avg_interval - days_since)

        probability = 0.7
        if std_dev < avg_interval * 0.3:
            probability = 0.85
        elif std_dev > avg_interval * 0.7:
            probability = 0.5

        if days_since > avg_interval * 1.5:
            probability *= 0.8
        elif days_since < avg_interval * 0.5:
            probability *= 1.1

        confidence = 0.75
        if len(gaps) > 6:
            confidence = 0.85
        elif len(gaps) > 3:
            confidence = 0.80

        return Prediction(
            customer_id=customer.customer_id,
            prediction_type=kind,
            value=days_until_next,
            probability=min(probability, 1.0),
            confidence=confidence,
        )
