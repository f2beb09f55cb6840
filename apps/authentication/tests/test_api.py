from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.authentication.models import User


class AuthenticationAPITest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            username='analyst', email='analyst@example.com', password='s3cret-pass'
        )

    def test_register_returns_tokens(self):
        response = self.client.post(reverse('register'), {
            'email': 'new@example.com', 'username': 'newcomer', 'password': 'long-enough',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], 'analyst')
        self.assertNotIn('password', response.data['user'])
        self.assertIn('access', response.data['tokens'])

    def test_register_rejects_short_password(self):
        response = self.client.post(reverse('register'), {
            'email': 'new@example.com', 'username': 'newcomer', 'password': 'short',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        response = self.client.post(reverse('login'), {
            'email': 'analyst@example.com', 'password': 's3cret-pass',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['email'], 'analyst@example.com')

    def test_login_with_wrong_password(self):
        response = self.client.post(reverse('login'), {
            'email': 'analyst@example.com', 'password': 'wrong-password',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_access_token_authenticates_api_calls(self):
        tokens = self.client.post(reverse('token_obtain_pair'), {
            'email': 'analyst@example.com', 'password': 's3cret-pass',
        }, format='json').data

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = self.client.get(reverse('customer-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_logout_blacklists_refresh_token(self):
        tokens = self.client.post(reverse('login'), {
            'email': 'analyst@example.com', 'password': 's3cret-pass',
        }, format='json').data['tokens']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = self.client.post(reverse('logout'), {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)

        refreshed = self.client.post(reverse('token_refresh'), {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(refreshed.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_garbage_token(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('logout'), {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class CreateApiUserCommandTest(TestCase):

    def test_creates_admin_as_staff(self):
        out = StringIO()
        call_command('create_api_user', email='ops@example.com', password='pw-12345678',
                     username='ops', role='admin', stdout=out)

        user = User.objects.get(email='ops@example.com')
        self.assertTrue(user.is_staff)
        self.assertIn('Successfully created admin user', out.getvalue())

    def test_existing_email_is_reported(self):
        User.objects.create_user(username='ops', email='ops@example.com', password='pw-12345678')
        out = StringIO()
        call_command('create_api_user', email='ops@example.com', password='x', username='ops2', stdout=out)

        self.assertIn('already exists', out.getvalue())
        self.assertEqual(User.objects.filter(email='ops@example.com').count(), 1)
