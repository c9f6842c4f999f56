"""
Tests for finance app.

Covers:
- Services (PaymentService: request, approve, reject)
- PDF receipts
- API endpoints (student payments, admin review)
"""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from roster.services import RosterService
from tenants.models import School

from .models import Payment
from .receipts import format_amount, receipt_filename, render_receipt
from .services import PaymentService, PaymentStateError

User = get_user_model()


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


def make_student(school, name='Rahim Uddin', roll=1):
    return RosterService.add_student(
        school, name=name, class_name='Class 5', roll=roll, shift='Morning', session='2025',
    )


class PaymentServiceTest(TestCase):
    """Tests for PaymentService transitions."""

    def setUp(self):
        self.school = make_school()
        self.student = make_student(self.school)
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )

    def test_request_payment(self):
        payment = PaymentService.request_payment(self.student, Decimal('150.00'), 'Bank Transfer', 'TRX-100200')
        self.assertEqual(payment.status, Payment.Status.PENDING)
        self.assertEqual(payment.school, self.school)
        self.assertEqual(payment.student_name, 'Rahim Uddin')
        self.assertIsNone(payment.approved_at)

    def test_approve(self):
        payment = PaymentService.request_payment(self.student, Decimal('150.00'), 'Cash', 'CASH-000001')
        payment = PaymentService.approve(payment, reviewed_by=self.admin)
        self.assertEqual(payment.status, Payment.Status.APPROVED)
        self.assertIsNotNone(payment.approved_at)
        self.assertEqual(payment.reviewed_by, self.admin)

    def test_reject(self):
        payment = PaymentService.request_payment(self.student, Decimal('150.00'), 'Cash', 'CASH-000001')
        payment = PaymentService.reject(payment, reviewed_by=self.admin)
        self.assertEqual(payment.status, Payment.Status.REJECTED)
        self.assertIsNone(payment.approved_at)
        self.assertIsNotNone(payment.reviewed_at)

    def test_review_only_once(self):
        payment = PaymentService.request_payment(self.student, Decimal('150.00'), 'Cash', 'CASH-000001')
        PaymentService.approve(payment, reviewed_by=self.admin)
        with self.assertRaises(PaymentStateError):
            PaymentService.reject(payment, reviewed_by=self.admin)
        with self.assertRaises(PaymentStateError):
            PaymentService.approve(payment, reviewed_by=self.admin)
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.Status.APPROVED)


class ReceiptTest(TestCase):

    def setUp(self):
        self.school = make_school(address='')
        self.student = make_student(self.school, name='Rahim <Uddin> & Co')

    def test_render_receipt(self):
        payment = PaymentService.request_payment(self.student, Decimal('1250.50'), 'Stripe', 'ch_123456789')
        payment = PaymentService.approve(payment, reviewed_by=None)
        pdf = render_receipt(payment)
        self.assertTrue(pdf.startswith(b'%PDF'))
        self.assertEqual(receipt_filename(payment), 'receipt-ch_123456789.pdf')

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal('1250.5')), '$1,250.50')


class MyPaymentsAPITest(APITestCase):
    """Tests for /api/my-payments/ (student)."""

    def setUp(self):
        self.school = make_school()
        self.student = make_student(self.school)
        self.client.force_authenticate(user=self.student.user)

    def test_request_payment(self):
        response = self.client.post(reverse('my-payment-list'), {
            'amount': '500.00',
            'method': 'PayPal',
            'trx': 'PAYID-12345',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(Payment.objects.get().student, self.student)

    def test_validation(self):
        response = self.client.post(reverse('my-payment-list'), {
            'amount': '0',
            'method': 'Bitcoin',
            'trx': '123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('amount', 'method', 'trx'):
            self.assertIn(field, response.data)

    def test_list_only_own_payments(self):
        other = make_student(self.school, name='Karima Begum', roll=2)
        PaymentService.request_payment(other, Decimal('100.00'), 'Cash', 'CASH-000002')
        PaymentService.request_payment(self.student, Decimal('100.00'), 'Cash', 'CASH-000003')
        response = self.client.get(reverse('my-payment-list'))
        self.assertEqual([row['trx'] for row in response.data], ['CASH-000003'])

    def test_receipt(self):
        payment = PaymentService.request_payment(self.student, Decimal('100.00'), 'Cash', 'CASH-000004')
        url = reverse('my-payment-receipt', args=[payment.pk])

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        PaymentService.approve(payment, reviewed_by=None)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('receipt-CASH-000004.pdf', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_admin_forbidden(self):
        admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.client.force_authenticate(user=admin)
        self.assertEqual(self.client.get(reverse('my-payment-list')).status_code, status.HTTP_403_FORBIDDEN)


class PaymentReviewAPITest(APITestCase):
    """Tests for /api/payments/ (school admin)."""

    def setUp(self):
        self.school = make_school()
        self.student = make_student(self.school)
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.payment = PaymentService.request_payment(self.student, Decimal('300.00'), 'Cash', 'CASH-000010')
        self.client.force_authenticate(user=self.admin)

    def test_filter_by_status(self):
        response = self.client.get(reverse('payment-list'), {'status': 'pending'})
        self.assertEqual(len(response.data), 1)
        response = self.client.get(reverse('payment-list'), {'status': 'approved'})
        self.assertEqual(response.data, [])

    def test_approve_then_conflict(self):
        response = self.client.post(reverse('payment-approve', args=[self.payment.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'approved')
        self.assertEqual(response.data['reviewed_by_email'], 'admin@school.test')

        response = self.client.post(reverse('payment-reject', args=[self.payment.pk]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_other_school_payment_not_found(self):
        other = make_school(name='Other School')
        foreign = PaymentService.request_payment(make_student(other), Decimal('10.00'), 'Cash', 'CASH-000011')
        response = self.client.post(reverse('payment-approve', args=[foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        foreign.refresh_from_db()
        self.assertEqual(foreign.status, Payment.Status.PENDING)

    def test_expired_subscription_blocks_review(self):
        self.school.subscription_expires_at = timezone.now() - timedelta(minutes=1)
        self.school.save()
        response = self.client.post(reverse('payment-approve', args=[self.payment.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse('payment-list')).status_code, status.HTTP_200_OK)
