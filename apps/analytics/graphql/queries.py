import strawberry
from typing import List, Optional
from apps.analytics.models import CustomerSegment, PredictionResult
from core.graphql.permissions import IsAuthenticated
from .types import CustomerSegmentType, PredictionResultType


@strawberry.type
class AnalyticsQueries:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def predictions(self, customer_id: str, prediction_type: Optional[str] = None,
                    limit: int = 20) -> List[PredictionResultType]:
        queryset = PredictionResult.objects.filter(customer_id=customer_id)
        if prediction_type:
            queryset = queryset.filter(prediction_type=prediction_type)
        return queryset.order_by('-created_at', '-id')[:limit]

    @strawberry.field(permission_classes=[IsAuthenticated])
    def latest_segments(self) -> List[CustomerSegmentType]:
        """Segments of the most recent segmentation run."""
        latest = CustomerSegment.objects.order_by('-created_at', '-id').first()
        if latest is None:
            return []
        return CustomerSegment.objects.filter(run_id=latest.run_id).order_by('segment_id')
