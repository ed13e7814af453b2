from django.test import TestCase
from rest_framework.test import APIClient

from .models import User


class AuthApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()

	def test_register_creates_customer(self):
		response = self.client.post('/api/auth/register/', {
			'username': 'acme_logistics',
			'email': 'ops@acme.example',
			'password': 'Sup3r-secret-pw',
			'company_name': 'ACME GmbH',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['user']['role'], 'customer')
		self.assertEqual(response.data['message'], 'Customer account created')
		self.assertIn('access', response.data['tokens'])
		self.assertTrue(User.objects.get(username='acme_logistics').is_customer)

	def test_register_rejects_duplicate_email(self):
		User.objects.create_user(username='first', email='ops@acme.example', password='x')

		response = self.client.post('/api/auth/register/', {
			'username': 'second',
			'email': 'ops@acme.example',
			'password': 'Sup3r-secret-pw',
			'company_name': 'ACME GmbH',
		}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('email', response.data)

	def test_login_and_refresh(self):
		User.objects.create_user(username='dispo', password='pass1234', role='dispatcher')

		response = self.client.post('/api/auth/login/', {'username': 'dispo', 'password': 'pass1234'}, format='json')
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['user']['role'], 'dispatcher')

		refresh = response.data['tokens']['refresh']
		response = self.client.post('/api/auth/refresh/', {'refresh': refresh}, format='json')
		self.assertEqual(response.status_code, 200)
		self.assertIn('access', response.data)

	def test_login_with_wrong_password(self):
		User.objects.create_user(username='dispo', password='pass1234')

		response = self.client.post('/api/auth/login/', {'username': 'dispo', 'password': 'nope'}, format='json')

		self.assertEqual(response.status_code, 400)

	def test_refresh_with_invalid_token(self):
		response = self.client.post('/api/auth/refresh/', {'refresh': 'garbage'}, format='json')

		self.assertEqual(response.status_code, 401)

	def test_refresh_requires_token(self):
		response = self.client.post('/api/auth/refresh/', {}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('refresh', response.data)

	def test_current_user_uses_access_token(self):
		response = self.client.post('/api/auth/register/', {
			'username': 'acme_logistics',
			'password': 'Sup3r-secret-pw',
			'company_name': 'ACME GmbH',
		}, format='json')
		self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['access']}")

		response = self.client.get('/api/auth/me/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['company_name'], 'ACME GmbH')
		self.assertEqual(response.data['role'], 'customer')

	def test_current_user_requires_authentication(self):
		response = self.client.get('/api/auth/me/')

		self.assertEqual(response.status_code, 401)

	def test_dispatcher_role_includes_admin(self):
		self.assertTrue(User(role='admin').is_dispatcher)
		self.assertFalse(User(role='customer').is_dispatcher)
