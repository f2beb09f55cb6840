from functools import wraps
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .circuit_breaker import CircuitBreaker
from .exceptions import NoData, NotFound, ServiceUnavailable, UnsupportedOperation
from .models import CustomerSegment
from .sample_data import load_sample_data
from .serializers import (
    CustomerSegmentSerializer,
    DateRangeSerializer,
    OptimizationRequestSerializer,
    PredictionRequestSerializer,
    PredictionResultSerializer,
    SampleDataRequestSerializer,
    SegmentationRequestSerializer,
)
from .services import AnalyticsService
from .tasks import run_customer_segmentation

logger = logging.getLogger(__name__)

dashboard_circuit = CircuitBreaker(failure_threshold=5, recovery_timeout=60)

ERROR_STATUS = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (NoData, status.HTTP_404_NOT_FOUND),
    (UnsupportedOperation, status.HTTP_400_BAD_REQUEST),
    (ServiceUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def analytics_errors(view):
    """Translate engine errors into `{'error': ...}` responses."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except tuple(exc for exc, _ in ERROR_STATUS) as e:
            code = next(code for exc, code in ERROR_STATUS if isinstance(e, exc))
            logger.info(f"{view.__name__} rejected: {e}")
            return Response({'error': str(e)}, status=code)
    return wrapper


@dashboard_circuit
def _dashboard_totals(date_range):
    return AnalyticsService().dashboard(date_range)


@dashboard_circuit
def _daily_revenue(date_range):
    return AnalyticsService().daily_revenue(date_range)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@analytics_errors
def customer_segmentation(request):
    """POST runs the tertile segmentation; GET returns the latest stored run."""
    if request.method == 'GET':
        latest = CustomerSegment.objects.order_by('-created_at', '-id').first()
        if latest is None:
            return Response({'error': 'no segmentation run found'}, status=status.HTTP_404_NOT_FOUND)
        segments = CustomerSegment.objects.filter(run_id=latest.run_id).order_by('segment_id')
        return Response({
            'run_id': latest.run_id,
            'segments': CustomerSegmentSerializer(segments, many=True).data,
        })

    serializer = SegmentationRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    segments = AnalyticsService().segment_customers(
        serializer.to_options(limit=settings.ANALYTICS_SEGMENTATION_LIMIT)
    )
    return Response({
        'run_id': segments[0].run_id,
        'segments': CustomerSegmentSerializer(segments, many=True).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def trigger_segmentation(request):
    serializer = SegmentationRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    options = serializer.to_options(limit=settings.ANALYTICS_SEGMENTATION_LIMIT)

    result = run_customer_segmentation.delay(options.algorithm, list(options.features), options.limit)
    return Response({'task_id': result.id, 'status': 'queued'}, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@analytics_errors
def predict_customer_behavior(request):
    serializer = PredictionRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    prediction = AnalyticsService().predict(
        serializer.validated_data['customer_id'],
        serializer.validated_data['prediction_type'],
    )
    return Response({'prediction': PredictionResultSerializer(prediction).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def predict_lifetime_value(request, customer_id):
    prediction = AnalyticsService().predict_lifetime_value_advanced(customer_id)
    return Response({'prediction': PredictionResultSerializer(prediction).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def predict_next_purchase(request, customer_id):
    prediction = AnalyticsService().predict_next_purchase_advanced(customer_id)
    return Response({'prediction': PredictionResultSerializer(prediction).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@analytics_errors
def optimize_campaign(request):
    serializer = OptimizationRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    optimization = AnalyticsService().optimize_campaign(
        data['campaign_id'], data['objective'], **data.get('parameters', {})
    )
    return Response({'optimization': optimization})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def minimize_campaign_cost(request, campaign_id):
    return Response({'optimization': AnalyticsService().minimize_campaign_cost(campaign_id)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def maximize_campaign_conversions(request, campaign_id):
    return Response({'optimization': AnalyticsService().maximize_campaign_conversions(campaign_id)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def analytics_dashboard(request):
    serializer = DateRangeSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return Response({'dashboard': _dashboard_totals(serializer.to_date_range())})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@analytics_errors
def daily_revenue(request):
    serializer = DateRangeSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return Response({'daily_revenue': _daily_revenue(serializer.to_date_range())})


@api_view(['POST'])
@permission_classes([AllowAny])
def generate_sample_data(request):
    serializer = SampleDataRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return Response({'sample_data': load_sample_data(serializer.to_options())})
