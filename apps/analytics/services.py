"""Fetch, compute, persist: the analytics entry points used by views, tasks and GraphQL."""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.db import transaction

from .models import CustomerSegment, PredictionResult
from .optimization import OptimizationEngine
from .options import DateRange, Objective, OptimizationOptions, SegmentationOptions
from .prediction import PredictionEngine
from .repository import AnalyticsRepository
from .segmentation import SegmentationEngine

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Wires the repository to the three engines.

    Engine errors (NotFound, NoData, UnsupportedOperation) propagate
    unchanged; retrying is left to the caller.
    """

    def __init__(self, repository=AnalyticsRepository, now: Optional[datetime] = None):
        self.repository = repository
        self.segmentation = SegmentationEngine()
        self.prediction = PredictionEngine(now=now)
        self.optimization = OptimizationEngine()

    # Segmentation

    def segment_customers(self, options: Optional[SegmentationOptions] = None) -> List[CustomerSegment]:
        if options is None:
            options = SegmentationOptions(limit=settings.ANALYTICS_SEGMENTATION_LIMIT)

        customers = self.repository.find_customers(limit=options.limit, offset=0)
        results = self.segmentation.segment(customers, options)

        run_id = uuid.uuid4().hex
        # A run is stored whole or not at all
        with transaction.atomic():
            saved = [self.repository.insert_segment(result, run_id, options.algorithm) for result in results]
        logger.info(f"Segmentation run {run_id} stored {len(saved)} segments")
        return saved

    # Predictions

    def predict(self, customer_id: str, prediction_type: str) -> PredictionResult:
        customer = self.repository.find_customer_by_id(customer_id)
        prediction = self.prediction.predict(customer, prediction_type)
        return self.repository.insert_prediction(prediction)

    def predict_lifetime_value_advanced(self, customer_id: str) -> PredictionResult:
        customer = self.repository.find_customer_by_id(customer_id)
        purchases = self.repository.find_purchases_by_customer(customer_id, sort_by_date_desc=True)
        prediction = self.prediction.predict_lifetime_value_advanced(customer, purchases)
        return self.repository.insert_prediction(prediction)

    def predict_next_purchase_advanced(self, customer_id: str) -> PredictionResult:
        customer = self.repository.find_customer_by_id(customer_id)
        purchases = self.repository.find_purchases_by_customer(customer_id, sort_by_date_desc=True)
        prediction = self.prediction.predict_next_purchase_advanced(customer, purchases)
        return self.repository.insert_prediction(prediction)

    # Optimization

    def optimize_campaign(self, campaign_id: str, objective, **parameters) -> Dict[str, Any]:
        options = OptimizationOptions(objective=Objective.parse(objective), **parameters)
        rows = self.repository.find_performance_by_campaign(campaign_id)
        return self.optimization.optimize(campaign_id, rows, options)

    def minimize_campaign_cost(self, campaign_id: str) -> Dict[str, Any]:
        rows = self.repository.find_performance_by_campaign(campaign_id)
        return self.optimization.minimize_cost(campaign_id, rows)

    def maximize_campaign_conversions(self, campaign_id: str) -> Dict[str, Any]:
        rows = self.repository.find_performance_by_campaign(campaign_id)
        return self.optimization.maximize_conversions(campaign_id, rows)

    # Dashboard

    def dashboard(self, date_range: Optional[DateRange] = None) -> Dict[str, Any]:
        return self.repository.dashboard_totals(date_range or DateRange())

    def daily_revenue(self, date_range: Optional[DateRange] = None) -> List[Dict[str, Any]]:
        return self.repository.daily_revenue(date_range or DateRange())
