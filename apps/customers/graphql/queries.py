import strawberry
from typing import List, Optional
from apps.customers.models import Customer, Purchase
from core.graphql.permissions import IsAuthenticated
from .types import CustomerType, PurchaseType


@strawberry.type
class CustomerQueries:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def customers(self, limit: int = 50, offset: int = 0) -> List[CustomerType]:
        return Customer.objects.order_by('id')[offset:offset + limit]

    @strawberry.field(permission_classes=[IsAuthenticated])
    def customer(self, customer_id: str) -> Optional[CustomerType]:
        return Customer.objects.filter(customer_id=customer_id).first()

    @strawberry.field(permission_classes=[IsAuthenticated])
    def purchases(self, customer_id: str) -> List[PurchaseType]:
        return Purchase.objects.filter(customer_id=customer_id).order_by('-purchase_date')
