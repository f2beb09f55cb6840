"""Typed request options for the analytics entry points.

Only a fixed set of keys is ever read, so each call site gets its own
struct instead of an open-ended parameter map.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .exceptions import UnsupportedOperation


class PredictionType(str, Enum):
    CHURN = "churn"
    LTV = "ltv"
    NEXT_PURCHASE = "next_purchase"
    LTV_ADVANCED = "ltv_advanced"
    NEXT_PURCHASE_ADVANCED = "next_purchase_advanced"

    @classmethod
    def basic(cls, value):
        """Resolve a type accepted by the basic prediction entry point."""
        for member in (cls.CHURN, cls.LTV, cls.NEXT_PURCHASE):
            if member.value == value:
                return member
        raise UnsupportedOperation(f"unsupported prediction type: {value}")


class Objective(str, Enum):
    MAXIMIZE_ROAS = "maximize_roas"
    MINIMIZE_COST = "minimize_cost"
    MAXIMIZE_CONVERSIONS = "maximize_conversions"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedOperation(f"unsupported optimization objective: {value}") from None


@dataclass(frozen=True)
class SegmentationOptions:
    # algorithm and features are recorded on the run; the tertile method
    # only reads spend and frequency
    algorithm: str = "tertile"
    features: Tuple[str, ...] = ("total_spent", "purchase_frequency")
    limit: int = 1000


@dataclass(frozen=True)
class OptimizationOptions:
    objective: Objective
    budget_reduction_rate: float = 0.15
    roas_priority_threshold: float = 2.0
    conversions_priority_threshold: int = 100


@dataclass(frozen=True)
class DateRange:
    start_date: Optional[object] = None
    end_date: Optional[object] = None

    @property
    def is_bounded(self):
        return self.start_date is not None and self.end_date is not None


@dataclass(frozen=True)
class SampleDataOptions:
    customers: int = 50
    purchases: int = 200
    campaigns: int = 10
    seed: Optional[int] = None
