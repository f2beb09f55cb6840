import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .importers import (
    DATASETS,
    BulkImporter,
    ImportFileError,
    get_dataset,
    import_bulk,
    import_guidelines,
    sample_csv,
)
from .serializers import BulkImportSerializer

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def import_templates(request):
    return Response({
        'templates': {name: dataset.template() for name, dataset in DATASETS.items()},
        'general_guidelines': import_guidelines(),
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def import_sample(request, data_type):
    try:
        dataset = get_dataset(data_type)
    except ImportFileError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    response = HttpResponse(sample_csv(dataset), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="sample_{dataset.name}.csv"'
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def import_csv(request, data_type):
    """Multipart upload under ``file``; bad rows are reported and skipped."""
    upload = request.FILES.get('file')
    if upload is None:
        return Response({'error': 'No file uploaded'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = BulkImporter(get_dataset(data_type)).from_csv(upload)
    except ImportFileError as e:
        logger.info(f"Rejected {data_type} import {upload.name}: {e}")
        return Response({'error': str(e), **e.extra}, status=status.HTTP_400_BAD_REQUEST)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def import_records(request):
    serializer = BulkImportSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return Response({'import_results': import_bulk(serializer.validated_data)})
