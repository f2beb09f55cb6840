"""In-memory snapshots the engines compute over.

The repository converts ORM rows into these frozen dataclasses so the
segmentation, prediction and optimization code never touches the database.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class CustomerRecord:
    customer_id: str
    age: int
    registration_date: datetime
    last_purchase_date: Optional[datetime]
    total_spent: float
    purchase_frequency: int
    gender: str = ''
    location: str = ''
    income_range: str = ''
    preferred_category: str = ''


@dataclass(frozen=True)
class PurchaseRecord:
    customer_id: str
    amount: float
    quantity: int
    purchase_date: datetime
    channel: str = 'online'
    category: str = ''
    product_id: str = ''


@dataclass(frozen=True)
class PerformanceRecord:
    campaign_id: str
    impressions: int
    clicks: int
    conversions: int
    revenue: float
    cost: float
    ctr: float
    cpc: float
    roas: float
    date: Optional[datetime] = None


@dataclass(frozen=True)
class SegmentCriteria:
    """Thresholds of one tier; min_* for High/Medium, max_* for Low."""
    min_total_spent: Optional[float] = None
    min_purchase_frequency: Optional[int] = None
    max_total_spent: Optional[float] = None
    max_purchase_frequency: Optional[int] = None

    def as_dict(self):
        return {key: value for key, value in self.__dict__.items() if value is not None}


@dataclass(frozen=True)
class SegmentResult:
    segment_id: str
    name: str
    description: str
    criteria: SegmentCriteria
    size: int
    member_ids: List[str] = field(default_factory=list, compare=False, repr=False)


@dataclass(frozen=True)
class Prediction:
    customer_id: str
    prediction_type: str
    probability: float = 0.0
    value: float = 0.0
    confidence: float = 0.0
