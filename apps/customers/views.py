from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from .models import Customer, Purchase
from .serializers import CustomerSerializer, PurchaseSerializer
from .tasks import schedule_customer_metrics_refresh


class CustomerViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      mixins.CreateModelMixin,
                      viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = CustomerSerializer
    queryset = Customer.objects.all()
    lookup_field = 'customer_id'

    def list(self, request, *args, **kwargs):
        try:
            limit = int(request.query_params.get('limit', 50))
            offset = int(request.query_params.get('offset', 0))
        except ValueError:
            return Response({'error': 'Invalid limit or offset parameter'},
                            status=status.HTTP_400_BAD_REQUEST)

        customers = self.get_queryset().order_by('id')[offset:offset + limit]
        serializer = self.get_serializer(customers, many=True)
        return Response({'customers': serializer.data, 'limit': limit, 'offset': offset})


class PurchaseViewSet(mixins.CreateModelMixin,
                      mixins.ListModelMixin,
                      viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseSerializer

    def get_queryset(self):
        queryset = Purchase.objects.all().order_by('-purchase_date')
        customer_id = self.request.query_params.get('customer_id')
        if customer_id:
            queryset = queryset.filter(customer_id=customer_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase = serializer.save()

        # Customer aggregate converges later; the handle is informational only
        handle = schedule_customer_metrics_refresh(purchase.customer_id)

        return Response({
            'purchase': serializer.data,
            'metrics_task_id': handle.id if handle is not None else None,
            'customer_metrics': 'eventually_consistent',
        }, status=status.HTTP_201_CREATED)
