import strawberry_django
from strawberry import auto
from apps.analytics.models import CustomerSegment, PredictionResult


@strawberry_django.type(CustomerSegment)
class CustomerSegmentType:
    id: auto
    run_id: auto
    segment_id: auto
    name: auto
    description: auto
    criteria: auto
    size: auto
    algorithm: auto
    created_at: auto


@strawberry_django.type(PredictionResult)
class PredictionResultType:
    id: auto
    customer_id: auto
    prediction_type: auto
    probability: auto
    value: auto
    confidence: auto
    created_at: auto
