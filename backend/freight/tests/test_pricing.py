from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings

from freight.models import Quote, QuoteLineItem
from services.lifecycle import submit_offer
from services.matching import start_matching
from services.pricing import PriceCalculator

from .factories import (
	make_user, make_transport_request, make_pricing_rule, make_carrier, make_carrier_request,
	WEDNESDAY_PICKUP, SATURDAY_PICKUP,
)


class PriceCalculatorTests(TestCase):
	def setUp(self):
		self.customer = make_user()

	def test_base_price_is_distance_times_rate(self):
		make_pricing_rule('van', rate_per_km=Decimal('1.50'), minimum_price=Decimal('50.00'))
		transport_request = make_transport_request(self.customer, distance_km=Decimal('200.00'))

		quote = PriceCalculator(transport_request).calculate()

		self.assertIsNotNone(quote)
		self.assertEqual(quote.base_price, Decimal('300.00'))
		self.assertEqual(quote.surcharge_total, Decimal('0.00'))
		self.assertEqual(quote.total_price, Decimal('300.00'))
		self.assertEqual(quote.status, 'pending')
		self.assertEqual(quote.currency, 'EUR')

		transport_request.refresh_from_db()
		self.assertEqual(transport_request.status, 'quoted')

	def test_minimum_price_floor(self):
		make_pricing_rule('van', rate_per_km=Decimal('1.00'), minimum_price=Decimal('150.00'))
		transport_request = make_transport_request(self.customer, distance_km=Decimal('42.00'))

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.base_price, Decimal('150.00'))
		self.assertEqual(quote.total_price, Decimal('150.00'))

	def test_base_price_rounds_half_up(self):
		make_pricing_rule('van', rate_per_km=Decimal('1.25'), minimum_price=Decimal('0'))
		transport_request = make_transport_request(self.customer, distance_km=Decimal('100.01'))

		quote = PriceCalculator(transport_request).calculate()

		# 100.01 * 1.25 = 125.0125
		self.assertEqual(quote.base_price, Decimal('125.01'))

	def test_weekend_surcharge(self):
		make_pricing_rule(
			'van', rate_per_km=Decimal('1.00'), minimum_price=Decimal('0'),
			weekend_surcharge_percent=Decimal('10'),
		)
		transport_request = make_transport_request(
			self.customer, distance_km=Decimal('100.00'), pickup_date_from=SATURDAY_PICKUP
		)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.base_price, Decimal('100.00'))
		self.assertEqual(quote.surcharge_total, Decimal('10.00'))
		self.assertEqual(quote.total_price, Decimal('110.00'))

		items = list(quote.line_items.all())
		self.assertEqual([item.kind for item in items], ['base_transport', 'weekend_surcharge'])
		self.assertEqual([item.line_order for item in items], [0, 1])
		self.assertEqual(items[1].amount, Decimal('10.00'))
		self.assertEqual(items[1].calculation, '10.00% surcharge')

	def test_no_weekend_surcharge_on_weekday(self):
		make_pricing_rule(
			'van', rate_per_km=Decimal('1.00'), minimum_price=Decimal('0'),
			weekend_surcharge_percent=Decimal('10'),
		)
		transport_request = make_transport_request(self.customer, pickup_date_from=WEDNESDAY_PICKUP)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.surcharge_total, Decimal('0.00'))
		self.assertEqual(quote.line_items.count(), 1)

	def test_express_surcharge_within_24_hours(self):
		make_pricing_rule(
			'van', rate_per_km=Decimal('2.00'), minimum_price=Decimal('0'),
			express_surcharge_percent=Decimal('5'),
		)
		transport_request = make_transport_request(
			self.customer,
			distance_km=Decimal('100.00'),
			delivery_date_from=WEDNESDAY_PICKUP + timedelta(hours=24),
		)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.base_price, Decimal('200.00'))
		self.assertEqual(quote.surcharge_total, Decimal('10.00'))
		self.assertEqual(quote.total_price, Decimal('210.00'))
		self.assertEqual(quote.line_items.last().kind, 'express_surcharge')

	def test_no_express_surcharge_after_24_hours(self):
		make_pricing_rule('van', express_surcharge_percent=Decimal('5'))
		transport_request = make_transport_request(
			self.customer, delivery_date_from=WEDNESDAY_PICKUP + timedelta(hours=25)
		)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.line_items.count(), 1)

	def test_both_surcharges_are_applied_to_base_price(self):
		make_pricing_rule(
			'van', rate_per_km=Decimal('1.00'), minimum_price=Decimal('0'),
			weekend_surcharge_percent=Decimal('10'), express_surcharge_percent=Decimal('5'),
		)
		transport_request = make_transport_request(
			self.customer,
			distance_km=Decimal('100.00'),
			pickup_date_from=SATURDAY_PICKUP,
			delivery_date_from=SATURDAY_PICKUP + timedelta(hours=6),
		)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.surcharge_total, Decimal('15.00'))
		self.assertEqual(quote.total_price, Decimal('115.00'))
		self.assertEqual(
			list(quote.line_items.values_list('kind', flat=True)),
			['base_transport', 'weekend_surcharge', 'express_surcharge'],
		)

	def test_total_equals_sum_of_line_items(self):
		make_pricing_rule(
			'van', rate_per_km=Decimal('1.33'), minimum_price=Decimal('0'),
			weekend_surcharge_percent=Decimal('7.5'),
		)
		transport_request = make_transport_request(
			self.customer, distance_km=Decimal('123.45'), pickup_date_from=SATURDAY_PICKUP
		)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(sum(item.amount for item in quote.line_items.all()), quote.total_price)

	def test_falls_back_to_any_rule(self):
		make_pricing_rule('any', rate_per_km=Decimal('3.00'), minimum_price=Decimal('0'))
		transport_request = make_transport_request(self.customer, distance_km=Decimal('10.00'))

		calculator = PriceCalculator(transport_request)
		quote = calculator.calculate()

		self.assertEqual(calculator.pricing_rule.vehicle_type, 'any')
		self.assertEqual(quote.base_price, Decimal('30.00'))

	def test_umbrella_vehicle_type_uses_concrete_rule(self):
		make_pricing_rule('truck_7_5t', rate_per_km=Decimal('2.00'), minimum_price=Decimal('0'))
		transport_request = make_transport_request(
			self.customer, vehicle_type='truck', distance_km=Decimal('10.00')
		)

		calculator = PriceCalculator(transport_request)
		quote = calculator.calculate()

		self.assertEqual(calculator.pricing_rule.vehicle_type, 'truck_7_5t')
		self.assertEqual(quote.base_price, Decimal('20.00'))

	def test_inactive_rule_is_ignored(self):
		make_pricing_rule('van', active=False)
		transport_request = make_transport_request(self.customer)

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(calculator.errors, ['No pricing rule found for vehicle type: van'])

	def test_missing_distance(self):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer, distance_km=None)

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(calculator.errors, ['Distance must be calculated before pricing'])
		self.assertFalse(Quote.objects.exists())

	def test_missing_vehicle_type(self):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer, vehicle_type='')

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(calculator.errors, ['Vehicle type must be specified'])

	def test_second_quote_fails_without_side_effects(self):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer)
		PriceCalculator(transport_request).calculate()

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertTrue(calculator.errors)
		self.assertEqual(Quote.objects.count(), 1)
		self.assertEqual(QuoteLineItem.objects.count(), 1)

	def test_existing_quote_blocks_requote_of_new_request(self):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer)
		PriceCalculator(transport_request).calculate()
		transport_request.status = 'new'
		transport_request.save()

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(Quote.objects.count(), 1)

	@patch('freight.tasks.match_carriers_task.delay')
	def test_pricing_refused_once_matching_started(self, mock_delay):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer)
		start_matching(transport_request)
		invitation = make_carrier_request(transport_request, make_carrier('Alpha'), status='sent')

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(calculator.errors, ['Only new transport requests can be priced (status: matching)'])
		transport_request.refresh_from_db()
		self.assertEqual(transport_request.status, 'matching')
		self.assertFalse(Quote.objects.exists())
		self.assertTrue(submit_offer(invitation, Decimal('300.00')).success)

	@override_settings(PLATFORM_CURRENCY='CHF', QUOTE_VALIDITY_DAYS=3)
	def test_currency_and_validity_from_settings(self):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer)

		quote = PriceCalculator(transport_request).calculate()

		self.assertEqual(quote.currency, 'CHF')
		self.assertAlmostEqual(
			(quote.valid_until - quote.created_at).total_seconds(),
			timedelta(days=3).total_seconds(),
			delta=5,
		)

	@patch('services.pricing.calculator.PriceCalculator.calculate_surcharges', side_effect=RuntimeError('boom'))
	def test_unexpected_error_is_reported(self, mock_surcharges):
		make_pricing_rule('van')
		transport_request = make_transport_request(self.customer)

		calculator = PriceCalculator(transport_request)

		self.assertIsNone(calculator.calculate())
		self.assertEqual(calculator.errors, ['Quote calculation failed: boom'])
		self.assertFalse(Quote.objects.exists())
