import strawberry_django
from strawberry import auto
from apps.customers.models import Customer, Purchase


@strawberry_django.type(Customer)
class CustomerType:
    id: auto
    customer_id: auto
    age: auto
    gender: auto
    location: auto
    income_range: auto
    registration_date: auto
    last_purchase_date: auto
    total_spent: auto
    purchase_frequency: auto
    preferred_category: auto


@strawberry_django.type(Purchase)
class PurchaseType:
    id: auto
    customer_id: auto
    product_id: auto
    category: auto
    amount: auto
    quantity: auto
    purchase_date: auto
    channel: auto
