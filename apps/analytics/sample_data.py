"""Reproducible demo data for customers, purchases, campaigns and daily performance.

All randomness comes from the ``random.Random`` handed to the generator, so a
fixed seed always yields the same records.
"""
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from django.db import transaction

from apps.campaigns.models import CampaignPerformance, MarketingCampaign, derive_performance_metrics
from apps.customers.models import Customer, Purchase
from .options import SampleDataOptions

logger = logging.getLogger(__name__)

LOCATIONS = ["New York", "Los Angeles", "Chicago", "Houston", "Phoenix",
             "Philadelphia", "San Antonio", "San Diego", "Dallas", "San Jose"]
GENDERS = ["Male", "Female", "Other"]
INCOME_RANGES = ["$25k-$50k", "$50k-$75k", "$75k-$100k", "$100k-$150k", "$150k+"]
CATEGORIES = ["Electronics", "Fashion", "Home & Garden", "Books", "Sports", "Beauty", "Automotive"]
PRODUCTS = [f"PROD{i:03d}" for i in range(1, 11)]
CHANNELS = ["online", "store"]

CAMPAIGN_NAMES = [
    "Summer Fashion Sale",
    "Black Friday Electronics Blowout",
    "New Year New You Campaign",
    "Spring Home & Garden Collection",
    "Back to School Tech Deals",
    "Holiday Beauty Bonanza",
    "Winter Sports Equipment Sale",
    "Valentine's Day Special",
    "Mother's Day Gift Guide",
    "Father's Day Automotive Deals",
]
CAMPAIGN_TYPES = ["email", "social", "display", "search", "influencer"]
TARGET_SEGMENTS = ["High Value Customers", "Young Adults 18-25", "Frequent Buyers",
                   "At-Risk Customers", "New Customers"]

# (base, spread) per campaign type
CAMPAIGN_BUDGETS = {
    "search": (5000, 20000),
    "display": (3000, 15000),
    "social": (2000, 10000),
    "email": (500, 3000),
    "influencer": (10000, 40000),
}

# (base, spread) per purchase category; anything else is (15, 150)
CATEGORY_PRICES = {
    "Electronics": (100, 1000),
    "Fashion": (25, 200),
    "Home & Garden": (50, 300),
    "Automotive": (200, 800),
}


class SampleDataGenerator:

    def __init__(self, rng: Optional[random.Random] = None, now: Optional[datetime] = None):
        self.rng = rng or random.Random()
        self.now = now or datetime.now(timezone.utc)

    def customers(self, count: int, start: int = 1) -> List[Customer]:
        rng = self.rng
        customers = []
        for i in range(count):
            registration = self.now - timedelta(days=30 * rng.randrange(24) + rng.randrange(30))

            age = 18 + rng.randrange(60)
            if age < 25:
                total_spent, frequency = 50 + rng.randrange(800), 1 + rng.randrange(8)
            elif age < 40:
                total_spent, frequency = 200 + rng.randrange(2000), 3 + rng.randrange(15)
            else:
                total_spent, frequency = 500 + rng.randrange(5000), 5 + rng.randrange(25)

            # roughly 80% of customers have bought something
            last_purchase = None
            days_registered = (self.now - registration).days
            if rng.randrange(10) > 1 and days_registered > 0:
                last_purchase = self.now - timedelta(days=rng.randrange(days_registered))

            customers.append(Customer(
                customer_id=f"CUST{start + i:05d}",
                age=age,
                gender=rng.choice(GENDERS),
                location=rng.choice(LOCATIONS),
                income_range=rng.choice(INCOME_RANGES),
                registration_date=registration,
                last_purchase_date=last_purchase,
                total_spent=float(total_spent),
                purchase_frequency=frequency,
                preferred_category=rng.choice(CATEGORIES),
            ))
        return customers

    def purchases(self, count: int, customers: List[Customer]) -> List[Purchase]:
        if not customers:
            return []

        rng = self.rng
        purchases = []
        for _ in range(count):
            customer = rng.choice(customers)
            days_registered = max((self.now - customer.registration_date).days, 1)
            category = rng.choice(CATEGORIES)
            base, spread = CATEGORY_PRICES.get(category, (15, 150))

            purchases.append(Purchase(
                customer_id=customer.customer_id,
                product_id=rng.choice(PRODUCTS),
                category=category,
                amount=float(base + rng.randrange(spread)),
                quantity=1 + rng.randrange(3),
                purchase_date=customer.registration_date + timedelta(days=rng.randrange(days_registered)),
                channel=rng.choice(CHANNELS),
            ))
        return purchases

    def campaigns(self, count: int, start: int = 1) -> List[MarketingCampaign]:
        rng = self.rng
        campaigns = []
        for i in range(count):
            start_date = self.now - timedelta(days=30 * rng.randrange(12) + rng.randrange(30))
            end_date = start_date + timedelta(days=7 + rng.randrange(60))

            if end_date < self.now:
                status = "completed"
            elif start_date < self.now:
                status = "active"
            else:
                status = "paused"

            campaign_type = rng.choice(CAMPAIGN_TYPES)
            base, spread = CAMPAIGN_BUDGETS[campaign_type]

            campaigns.append(MarketingCampaign(
                campaign_id=f"CAMP{start + i:04d}",
                name=rng.choice(CAMPAIGN_NAMES),
                type=campaign_type,
                target_segment=rng.choice(TARGET_SEGMENTS),
                budget=float(base + rng.randrange(spread)),
                start_date=start_date,
                end_date=end_date,
                status=status,
            ))
        return campaigns

    def performances(self, campaigns: List[MarketingCampaign]) -> List[CampaignPerformance]:
        """One row per campaign day."""
        rng = self.rng
        rows = []
        for campaign in campaigns:
            days = max((campaign.end_date - campaign.start_date).days, 1)
            for day in range(days):
                impressions = 1000 + rng.randrange(10000)
                clicks = 50 + rng.randrange(impressions // 10)
                conversions = 5 + rng.randrange(clicks // 5)
                revenue = float(conversions * (50 + rng.randrange(200)))
                cost = impressions * 0.001 * (0.5 + rng.random())
                ctr, cpc, roas = derive_performance_metrics(impressions, clicks, cost, revenue)

                rows.append(CampaignPerformance(
                    campaign_id=campaign.campaign_id,
                    impressions=impressions,
                    clicks=clicks,
                    conversions=conversions,
                    revenue=revenue,
                    cost=cost,
                    ctr=ctr,
                    cpc=cpc,
                    roas=roas,
                    date=campaign.start_date + timedelta(days=day),
                ))
        return rows


def load_sample_data(options: SampleDataOptions = SampleDataOptions(),
                     rng: Optional[random.Random] = None,
                     now: Optional[datetime] = None,
                     batch_size: int = 1000) -> Dict[str, int]:
    """Generate and bulk insert a batch of demo records.

    Identifiers continue from the current row counts so repeated loads do
    not collide with earlier ones.
    """
    if rng is None:
        rng = random.Random(options.seed)
    generator = SampleDataGenerator(rng=rng, now=now)

    with transaction.atomic():
        customers = generator.customers(options.customers, start=Customer.objects.count() + 1)
        purchases = generator.purchases(options.purchases, customers)
        campaigns = generator.campaigns(options.campaigns, start=MarketingCampaign.objects.count() + 1)
        performances = generator.performances(campaigns)

        Customer.objects.bulk_create(customers, batch_size=batch_size)
        Purchase.objects.bulk_create(purchases, batch_size=batch_size)
        MarketingCampaign.objects.bulk_create(campaigns, batch_size=batch_size)
        CampaignPerformance.objects.bulk_create(performances, batch_size=batch_size)

    counts = {
        'customers_created': len(customers),
        'purchases_created': len(purchases),
        'campaigns_created': len(campaigns),
        'performance_rows_created': len(performances),
    }
    logger.info(f"Sample data loaded: {counts}")
    return counts
