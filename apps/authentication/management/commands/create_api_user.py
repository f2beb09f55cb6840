from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

User = get_user_model()


class Command(BaseCommand):
    help = 'Create an API user that can obtain JWT tokens'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, required=True)
        parser.add_argument('--password', type=str, required=True)
        parser.add_argument('--username', type=str, required=True)
        parser.add_argument('--role', type=str, default='analyst', choices=['analyst', 'admin'])

    def handle(self, *args, **options):
        email = options['email']

        if User.objects.filter(email=email).exists():
            self.stdout.write(
                self.style.ERROR(f'User with email {email} already exists')
            )
            return

        User.objects.create_user(
            username=options['username'],
            email=email,
            password=options['password'],
            role=options['role'],
            is_staff=options['role'] == 'admin',
        )

        self.stdout.write(
            self.style.SUCCESS(f'Successfully created {options["role"]} user {email}')
        )
