from django.core import mail
from django.core.management import call_command
from django.test import TestCase
from unittest.mock import patch

from freight.models import CarrierRequest
from services.matching import (
	start_matching, run_match_stage, run_invitation_stage, resume_pending_invitations,
)

from .factories import make_user, make_carrier, make_transport_request, make_carrier_request


class MatchingPipelineTests(TestCase):
	def setUp(self):
		self.customer = make_user()
		self.transport_request = make_transport_request(self.customer)

	@patch('freight.tasks.match_carriers_task.delay')
	def test_start_matching_queues_match_stage(self, mock_delay):
		with self.captureOnCommitCallbacks(execute=True):
			self.assertTrue(start_matching(self.transport_request))

		mock_delay.assert_called_once_with(self.transport_request.id)
		self.transport_request.refresh_from_db()
		self.assertEqual(self.transport_request.status, 'matching')
		self.assertEqual(self.transport_request.matching_stage, 'match_queued')

	@patch('freight.tasks.match_carriers_task.delay')
	def test_start_matching_refused_when_not_matchable(self, mock_delay):
		self.transport_request.status = 'matched'
		self.transport_request.save()

		with self.captureOnCommitCallbacks(execute=True):
			self.assertFalse(start_matching(self.transport_request))

		mock_delay.assert_not_called()

	@patch('freight.tasks.send_carrier_invitations_task.delay')
	def test_zero_matches_reverts_to_new(self, mock_delay):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		make_carrier('Austria Only', pickup_countries=['AT'])

		with self.captureOnCommitCallbacks(execute=True):
			self.assertEqual(run_match_stage(self.transport_request.id), 0)

		mock_delay.assert_not_called()
		self.transport_request.refresh_from_db()
		self.assertEqual(self.transport_request.status, 'new')
		self.assertEqual(self.transport_request.matching_stage, 'no_matches')

	@patch('freight.tasks.send_carrier_invitations_task.delay')
	def test_matches_queue_invitation_stage(self, mock_delay):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		make_carrier('Alpha')
		make_carrier('Bravo')

		with self.captureOnCommitCallbacks(execute=True):
			self.assertEqual(run_match_stage(self.transport_request.id), 2)

		mock_delay.assert_called_once_with(self.transport_request.id)
		self.transport_request.refresh_from_db()
		self.assertEqual(self.transport_request.status, 'matching')
		self.assertEqual(self.transport_request.matching_stage, 'invitations_queued')

	@patch('freight.tasks.send_carrier_invitations_task.delay')
	def test_redelivered_match_stage_skips_matcher(self, mock_delay):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		carrier = make_carrier('Alpha')
		make_carrier_request(self.transport_request, carrier)

		with self.captureOnCommitCallbacks(execute=True):
			self.assertEqual(run_match_stage(self.transport_request.id), 1)

		self.assertEqual(CarrierRequest.objects.count(), 1)
		mock_delay.assert_called_once_with(self.transport_request.id)

	def test_match_stage_skipped_outside_matching(self):
		make_carrier('Alpha')

		self.assertEqual(run_match_stage(self.transport_request.id), 0)
		self.assertFalse(CarrierRequest.objects.exists())

	@patch('freight.tasks.send_carrier_email_task.delay')
	def test_invitation_stage_sends_new_requests_only(self, mock_email):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		fresh = make_carrier_request(self.transport_request, make_carrier('Alpha'))
		already_sent = make_carrier_request(self.transport_request, make_carrier('Bravo'), status='sent')

		with self.captureOnCommitCallbacks(execute=True):
			self.assertEqual(run_invitation_stage(self.transport_request.id), 1)

		fresh.refresh_from_db()
		already_sent.refresh_from_db()
		self.assertEqual(fresh.status, 'sent')
		self.assertIsNotNone(fresh.email_sent_at)
		self.assertEqual(already_sent.status, 'sent')
		self.assertIsNone(already_sent.email_sent_at)
		mock_email.assert_called_once_with('invitation', fresh.id)

		self.transport_request.refresh_from_db()
		self.assertEqual(self.transport_request.matching_stage, 'invitations_sent')

	@patch('freight.tasks.send_carrier_invitations_task.delay')
	def test_resume_pending_invitations(self, mock_delay):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		make_carrier_request(self.transport_request, make_carrier('Alpha'))
		make_carrier_request(self.transport_request, make_carrier('Bravo'))

		idle = make_transport_request(self.customer)
		make_carrier_request(idle, make_carrier('Charlie'))

		self.assertEqual(resume_pending_invitations(), [self.transport_request.id])
		mock_delay.assert_called_once_with(self.transport_request.id)

	@patch('freight.tasks.send_carrier_invitations_task.delay')
	def test_resume_command(self, mock_delay):
		self.transport_request.status = 'matching'
		self.transport_request.save()
		make_carrier_request(self.transport_request, make_carrier('Alpha'))

		call_command('resume_carrier_invitations')

		mock_delay.assert_called_once_with(self.transport_request.id)


class MatchingPipelineEndToEndTests(TestCase):
	"""Runs the chained Celery tasks eagerly, down to the outgoing emails."""

	def test_start_matching_invites_every_qualifying_carrier(self):
		customer = make_user()
		transport_request = make_transport_request(customer)
		make_carrier('Alpha Logistik')
		make_carrier('Bravo Transporte')
		make_carrier('Trucks Only', has_van=False)

		with self.captureOnCommitCallbacks(execute=True):
			start_matching(transport_request)

		transport_request.refresh_from_db()
		self.assertEqual(transport_request.status, 'matching')
		self.assertEqual(transport_request.matching_stage, 'invitations_sent')
		self.assertEqual(
			sorted(transport_request.carrier_requests.values_list('status', flat=True)),
			['sent', 'sent'],
		)
		self.assertEqual(len(mail.outbox), 2)
		self.assertEqual(mail.outbox[0].subject, 'New transport request')
		self.assertIn('https://freight.test/offers/', mail.outbox[0].body)
