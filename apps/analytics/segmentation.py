"""Tertile value segmentation over customer spend and purchase frequency."""
import logging
from typing import List, Sequence

from .exceptions import NoData
from .options import SegmentationOptions
from .records import CustomerRecord, SegmentCriteria, SegmentResult

logger = logging.getLogger(__name__)

HIGH_VALUE = "High Value Customers"
MEDIUM_VALUE = "Medium Value Customers"
LOW_VALUE = "Low Value Customers"


def tertile_thresholds(values):
    """Values at index n//3 and 2n//3 of the sorted list."""
    ordered = sorted(values)
    n = len(ordered)
    return ordered[n // 3], ordered[2 * n // 3]


def tier_points(value, lower, upper):
    if value > upper:
        return 2
    if value > lower:
        return 1
    return 0


class SegmentationEngine:
    """Partitions a population into High / Medium / Low value tiers.

    Each customer scores 0-4: up to 2 points for spend above the spend
    tertiles and up to 2 for frequency above the frequency tertiles.
    Score >= 3 is High, >= 1 Medium, otherwise Low. Every customer lands in
    exactly one tier.
    """

    def segment(self, customers: Sequence[CustomerRecord],
                options: SegmentationOptions = SegmentationOptions()) -> List[SegmentResult]:
        if not customers:
            raise NoData("no customers found for segmentation")

        spend_t1, spend_t2 = tertile_thresholds(c.total_spent for c in customers)
        freq_t1, freq_t2 = tertile_thresholds(c.purchase_frequency for c in customers)

        high, medium, low = [], [], []
        for customer in customers:
            score = (tier_points(customer.total_spent, spend_t1, spend_t2)
                     + tier_points(customer.purchase_frequency, freq_t1, freq_t2))
            if score >= 3:
                high.append(customer.customer_id)
            elif score >= 1:
                medium.append(customer.customer_id)
            else:
                low.append(customer.customer_id)

        logger.info(
            f"Segmented {len(customers)} customers with {options.algorithm}: "
            f"high={len(high)} medium={len(medium)} low={len(low)}"
        )

        return [
            SegmentResult(
                segment_id="segment_1",
                name=HIGH_VALUE,
                description="Customers with high spending and purchase frequency",
                criteria=SegmentCriteria(min_total_spent=spend_t2, min_purchase_frequency=freq_t2),
                size=len(high),
                member_ids=high,
            ),
            SegmentResult(
                segment_id="segment_2",
                name=MEDIUM_VALUE,
                description="Customers with medium spending and purchase frequency",
                criteria=SegmentCriteria(min_total_spent=spend_t1, min_purchase_frequency=freq_t1),
                size=len(medium),
                member_ids=medium,
            ),
            SegmentResult(
                segment_id="segment_3",
                name=LOW_VALUE,
                description="Customers with low spending and purchase frequency",
                criteria=SegmentCriteria(max_total_spent=spend_t1, max_purchase_frequency=freq_t1),
                size=len(low),
                member_ids=low,
            ),
        ]
