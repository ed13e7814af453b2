from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from freight.models import PackageItem, PackageTypePreset, Quote, TransportRequest

from .factories import (
	make_user, make_carrier, make_transport_request, make_pricing_rule, make_carrier_request,
)
from .test_lifecycle import make_quote


class CustomerApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_user()
		self.client.force_authenticate(user=self.customer)

	def test_create_request_prices_it(self):
		make_pricing_rule('van', rate_per_km=Decimal('1.00'), minimum_price=Decimal('0'))

		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'start_country': 'de',
			'start_latitude': '52.000000',
			'start_longitude': '13.000000',
			'destination_address': 'Rostock',
			'destination_country': 'de',
			'destination_latitude': '53.000000',
			'destination_longitude': '13.000000',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'vehicle_type': 'van',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['transport_request']['distance_km'], '111.19')
		self.assertEqual(response.data['transport_request']['status'], 'quoted')
		self.assertEqual(response.data['quote']['total_price'], '111.19')
		self.assertEqual(response.data['quote']['line_items'][0]['kind'], 'base_transport')
		self.assertEqual(response.data['pricing_errors'], [])

	def test_create_request_rounds_geocoder_precision(self):
		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'start_latitude': '52.5200066',
			'start_longitude': '13.4049540',
			'destination_address': 'Rostock',
			'destination_latitude': '54.0886707',
			'destination_longitude': '12.1400211',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'vehicle_type': 'van',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['transport_request']['start_latitude'], '52.520007')
		self.assertEqual(response.data['transport_request']['destination_longitude'], '12.140021')
		self.assertEqual(TransportRequest.objects.get().start_latitude, Decimal('52.520007'))

	def test_create_request_with_package_items(self):
		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'destination_address': 'Rostock',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'shipping_mode': 'packages',
			'package_items': [
				{'package_type': 'euro_pallet', 'quantity': 2, 'weight_kg': '300.00',
				 'length_cm': 120, 'width_cm': 80, 'height_cm': 100},
				{'package_type': 'box', 'quantity': 5, 'weight_kg': '10.00'},
			],
		}, format='json')

		self.assertEqual(response.status_code, 201)
		created = response.data['transport_request']
		self.assertEqual([item['package_type'] for item in created['package_items']], ['euro_pallet', 'box'])
		self.assertEqual(created['package_items'][0]['total_weight'], '600.00')
		self.assertEqual(created['total_package_count'], 7)
		self.assertEqual(created['total_package_weight'], '650.00')

	def test_create_request_rejects_invalid_package_item(self):
		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'destination_address': 'Rostock',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'shipping_mode': 'packages',
			'package_items': [{'package_type': 'euro_pallet', 'quantity': 0}],
		}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('quantity', response.data['package_items'][0])
		self.assertIn('weight_kg', response.data['package_items'][0])
		self.assertFalse(TransportRequest.objects.exists())

	def test_list_package_presets(self):
		PackageTypePreset.objects.create(name='Euro Pallet', category='pallet', default_length_cm=120, default_width_cm=80)
		PackageTypePreset.objects.create(name='Box', category='box')

		response = self.client.get('/api/freight/customer/package-presets/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual([preset['name'] for preset in response.data], ['Box', 'Euro Pallet'])
		self.assertEqual(response.data[1]['default_length_cm'], 120)

	def test_create_request_without_pricing_rule(self):
		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'destination_address': 'Rostock',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'vehicle_type': 'van',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertIsNone(response.data['quote'])
		self.assertEqual(response.data['pricing_errors'], ['Distance must be calculated before pricing'])
		self.assertEqual(TransportRequest.objects.get().status, 'new')

	def test_create_request_validation_error(self):
		response = self.client.post('/api/freight/customer/requests/', {
			'start_address': 'Berlin',
			'destination_address': 'Rostock',
			'pickup_date_from': '2026-03-11T09:00:00+01:00',
			'delivery_date_from': '2026-03-10T09:00:00+01:00',
		}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertIn('delivery_date_from', response.data)
		self.assertFalse(TransportRequest.objects.exists())

	def test_dispatcher_cannot_use_customer_api(self):
		self.client.force_authenticate(user=make_user('dispatcher', role='dispatcher'))

		response = self.client.post('/api/freight/customer/requests/', {}, format='json')

		self.assertEqual(response.status_code, 403)

	def test_get_quote_of_other_customer_is_not_found(self):
		other = make_user('other')
		transport_request = make_transport_request(other, status='quoted')
		make_quote(transport_request)

		response = self.client.get(f'/api/freight/customer/requests/{transport_request.id}/quote/')

		self.assertEqual(response.status_code, 404)

	@patch('freight.tasks.match_carriers_task.delay')
	def test_accept_quote_starts_matching(self, mock_delay):
		transport_request = make_transport_request(self.customer, status='quoted')
		make_quote(transport_request)

		with self.captureOnCommitCallbacks(execute=True):
			response = self.client.post(f'/api/freight/customer/requests/{transport_request.id}/quote/accept/')

		self.assertEqual(response.status_code, 200)
		self.assertTrue(response.data['matching_started'])
		self.assertEqual(response.data['quote']['status'], 'accepted')
		self.assertEqual(response.data['transport_request']['status'], 'matching')
		mock_delay.assert_called_once_with(transport_request.id)

	def test_accept_declined_quote_fails(self):
		transport_request = make_transport_request(self.customer, status='quote_declined')
		make_quote(transport_request, status='declined')

		response = self.client.post(f'/api/freight/customer/requests/{transport_request.id}/quote/accept/')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'quote_not_pending')

	def test_decline_quote(self):
		transport_request = make_transport_request(self.customer, status='quoted')
		make_quote(transport_request)

		response = self.client.post(f'/api/freight/customer/requests/{transport_request.id}/quote/decline/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(Quote.objects.get().status, 'declined')

	@patch('freight.tasks.send_carrier_email_task.delay')
	def test_list_and_accept_offers(self, mock_email):
		transport_request = make_transport_request(self.customer, status='matching')
		cheap = make_carrier_request(transport_request, make_carrier('Alpha'), status='offered', offered_price=Decimal('300.00'))
		pricey = make_carrier_request(transport_request, make_carrier('Bravo'), status='offered', offered_price=Decimal('500.00'))
		make_carrier_request(transport_request, make_carrier('Charlie'), status='sent')

		response = self.client.get(f'/api/freight/customer/requests/{transport_request.id}/offers/')
		self.assertEqual(response.status_code, 200)
		self.assertEqual([offer['id'] for offer in response.data['offers']], [cheap.id, pricey.id])
		self.assertEqual(response.data['offers'][0]['carrier']['company_name'], 'Alpha')

		response = self.client.post(
			f'/api/freight/customer/requests/{transport_request.id}/offers/{cheap.id}/accept/'
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['rejected_offer_ids'], [pricey.id])

		response = self.client.post(
			f'/api/freight/customer/requests/{transport_request.id}/offers/{pricey.id}/accept/'
		)
		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['error'], 'transport_request_closed')

	@patch('freight.tasks.send_carrier_email_task.delay')
	def test_reject_offer(self, mock_email):
		transport_request = make_transport_request(self.customer, status='matching')
		offer = make_carrier_request(transport_request, make_carrier('Alpha'), status='offered', offered_price=Decimal('300.00'))

		response = self.client.post(
			f'/api/freight/customer/requests/{transport_request.id}/offers/{offer.id}/reject/'
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['offer']['status'], 'rejected')


class DispatcherApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(user=make_user('dispatcher', role='dispatcher'))
		self.transport_request = make_transport_request(make_user())

	def test_price_request(self):
		make_pricing_rule('van')

		response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/price/')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['status'], 'pending')

		response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/price/')
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'quote_exists')

	def test_price_request_failure(self):
		response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/price/')

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['errors'], ['No pricing rule found for vehicle type: van'])

	@patch('freight.tasks.match_carriers_task.delay')
	def test_run_matching(self, mock_delay):
		with self.captureOnCommitCallbacks(execute=True):
			response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/run-matching/')

		self.assertEqual(response.status_code, 202)
		self.assertEqual(response.data['matching_stage'], 'match_queued')
		mock_delay.assert_called_once_with(self.transport_request.id)

		response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/run-matching/')
		self.assertEqual(response.status_code, 400)

	def test_customer_cannot_dispatch(self):
		self.client.force_authenticate(user=make_user('someone'))

		response = self.client.post(f'/api/freight/dispatch/requests/{self.transport_request.id}/run-matching/')

		self.assertEqual(response.status_code, 403)


class PublicOfferApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.transport_request = make_transport_request(make_user(), status='matching')
		self.invitation = make_carrier_request(self.transport_request, make_carrier('Alpha'), status='sent')

	def test_offer_detail(self):
		PackageItem.objects.create(
			transport_request=self.transport_request, package_type='euro_pallet', quantity=2, weight_kg=Decimal('300.00')
		)

		response = self.client.get(f'/api/freight/offers/{self.invitation.access_token}/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['carrier'], 'Alpha')
		self.assertEqual(response.data['transport_request']['id'], self.transport_request.id)
		self.assertEqual(response.data['transport_request']['package_items'][0]['quantity'], 2)
		self.assertEqual(response.data['transport_request']['total_package_weight'], '600.00')

	def test_unknown_token(self):
		response = self.client.get('/api/freight/offers/00000000-0000-0000-0000-000000000000/')

		self.assertEqual(response.status_code, 404)

	def test_submit_offer(self):
		response = self.client.post(f'/api/freight/offers/{self.invitation.access_token}/submit/', {
			'offered_price': '450.00',
			'offered_delivery_date': '2026-03-12T10:00:00+01:00',
			'vehicle_type': 'Sprinter',
			'driver_language': 'de',
		}, format='json')

		self.assertEqual(response.status_code, 200)
		self.invitation.refresh_from_db()
		self.assertEqual(self.invitation.status, 'offered')
		self.assertEqual(self.invitation.offered_price, Decimal('450.00'))

	def test_submit_offer_requires_price(self):
		response = self.client.post(
			f'/api/freight/offers/{self.invitation.access_token}/submit/', {}, format='json'
		)

		self.assertEqual(response.status_code, 400)
		self.assertIn('offered_price', response.data)

	def test_submit_offer_after_award(self):
		self.transport_request.status = 'matched'
		self.transport_request.save()

		response = self.client.post(
			f'/api/freight/offers/{self.invitation.access_token}/submit/',
			{'offered_price': '450.00'}, format='json'
		)

		self.assertEqual(response.status_code, 409)


class HealthCheckTests(TestCase):
	@patch('freight_backend.views.celery_app.control.ping', return_value=[{'worker@host': {'ok': 'pong'}}])
	@patch('freight_backend.views.redis.Redis.from_url')
	def test_health_check(self, mock_redis, mock_ping):
		response = APIClient().get('/health/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['services']['database'], 'healthy')
		self.assertEqual(response.data['services']['redis'], 'healthy')
		self.assertEqual(response.data['services']['celery'], 'healthy')
		mock_ping.assert_called_once_with(timeout=1)

	@patch('freight_backend.views.celery_app.control.ping', return_value=[{'worker@host': {'ok': 'pong'}}])
	@patch('freight_backend.views.redis.Redis.from_url', side_effect=ConnectionError('down'))
	def test_health_check_reports_redis_down(self, mock_redis, mock_ping):
		response = APIClient().get('/health/')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['status'], 'unhealthy')

	@patch('freight_backend.views.celery_app.control.ping', return_value=[])
	@patch('freight_backend.views.redis.Redis.from_url')
	def test_health_check_reports_no_celery_workers(self, mock_redis, mock_ping):
		response = APIClient().get('/health/')

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['status'], 'unhealthy')
		self.assertEqual(response.data['services']['celery'], 'unhealthy: no workers responded')
