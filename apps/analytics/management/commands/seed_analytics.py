from django.core.management.base import BaseCommand

from apps.analytics.options import SampleDataOptions
from apps.analytics.sample_data import load_sample_data
from apps.campaigns.models import CampaignPerformance, MarketingCampaign
from apps.customers.models import Customer, Purchase


class Command(BaseCommand):
    help = 'Seed customers, purchases, campaigns and daily campaign performance'

    def add_arguments(self, parser):
        parser.add_argument('--customers', type=int, default=50, help='Number of customers to create')
        parser.add_argument('--purchases', type=int, default=200, help='Number of purchases to create')
        parser.add_argument('--campaigns', type=int, default=10, help='Number of campaigns to create')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible data')
        parser.add_argument('--batch_size', type=int, default=1000, help='Batch size for bulk creation')

    def handle(self, *args, **options):
        sample_options = SampleDataOptions(
            customers=options['customers'],
            purchases=options['purchases'],
            campaigns=options['campaigns'],
            seed=options['seed'],
        )

        self.stdout.write(
            self.style.SUCCESS(
                f'Seeding {sample_options.customers} customers, {sample_options.purchases} purchases '
                f'and {sample_options.campaigns} campaigns'
            )
        )

        counts = load_sample_data(sample_options, batch_size=options['batch_size'])

        for label, value in counts.items():
            self.stdout.write(f'   {label.replace("_", " ").capitalize()}: {value:,}')

        self.show_stats()

    def show_stats(self):
        self.stdout.write(self.style.SUCCESS('\nTOTALS:'))
        self.stdout.write(f'   Customers: {Customer.objects.count():,}')
        self.stdout.write(f'   Purchases: {Purchase.objects.count():,}')
        self.stdout.write(f'   Campaigns: {MarketingCampaign.objects.count():,}')
        self.stdout.write(f'   Performance rows: {CampaignPerformance.objects.count():,}')
