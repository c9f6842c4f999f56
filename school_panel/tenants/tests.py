"""
Tests for tenants app.

Covers:
- Subscription status and seat limits (pure functions)
- Atomic seat reservation
- School management API (master)
- Dashboard stats per role
- Isolation system checks
"""
import re
from unittest.mock import patch
from datetime import datetime, timedelta, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from finance.services import PaymentService
from roster.models import Student
from roster.services import RosterService

from .checks import find_unscoped_viewsets
from .codes import SCHOOL_PREFIX, generate_code, generate_unique_code
from .limits import SeatLimitError, check_seat_limit, create_within_seat_limit
from .models import School
from .subscriptions import days_until, is_subscription_active

User = get_user_model()

UTC = dt_timezone.utc


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


class SubscriptionStatusTest(SimpleTestCase):

    def test_active_before_expiry(self):
        expiry = datetime(2025, 6, 1, tzinfo=UTC)
        self.assertTrue(is_subscription_active(expiry, expiry - timedelta(seconds=1)))

    def test_expiry_instant_is_inactive(self):
        expiry = datetime(2025, 6, 1, tzinfo=UTC)
        self.assertFalse(is_subscription_active(expiry, expiry))
        self.assertFalse(is_subscription_active(expiry, expiry + timedelta(days=1)))

    def test_missing_expiry(self):
        self.assertFalse(is_subscription_active(None, datetime(2025, 6, 1, tzinfo=UTC)))

    def test_days_until(self):
        now = datetime(2025, 6, 1, tzinfo=UTC)
        self.assertEqual(days_until(now + timedelta(days=10, hours=5), now), 10)
        self.assertEqual(days_until(now - timedelta(days=2), now), -2)
        self.assertEqual(days_until(None, now), 0)


class SeatLimitTest(SimpleTestCase):

    def test_check_seat_limit(self):
        self.assertTrue(check_seat_limit(0, 1))
        self.assertTrue(check_seat_limit(99, 100))
        self.assertFalse(check_seat_limit(100, 100))
        # Лимит уменьшили ниже текущего количества
        self.assertFalse(check_seat_limit(5, 3))


class CodesTest(SimpleTestCase):

    def test_code_format(self):
        self.assertRegex(generate_code(SCHOOL_PREFIX), r'^SCH-[A-Z0-9]{6}$')

    def test_unique_code_gives_up(self):
        with self.assertRaises(RuntimeError):
            generate_unique_code('STU', lambda code: True, attempts=3)


class SchoolModelTest(TestCase):

    def test_code_generated_on_save(self):
        school = make_school()
        self.assertTrue(re.match(r'^SCH-[A-Z0-9]{6}$', school.code))
        self.assertTrue(school.is_active)
        self.assertTrue(school.subscription_active())

    def test_expired_school(self):
        school = make_school(days=-3)
        self.assertFalse(school.subscription_active())
        self.assertLess(school.days_until_expiry(), 0)


class CreateWithinSeatLimitTest(TestCase):

    def setUp(self):
        self.school = make_school(max_students=2, max_teachers=1)

    def add_student(self, name='Rahim Uddin', roll=1):
        return RosterService.add_student(
            self.school, name=name, class_name='Class 5', roll=roll, shift='Morning', session='2025',
        )

    def test_fills_up_to_limit(self):
        self.add_student(roll=1)
        self.add_student(name='Karima Begum', roll=2)
        with self.assertRaises(SeatLimitError):
            self.add_student(name='Late Student', roll=3)
        self.assertEqual(self.school.students.count(), 2)
        # Пользователь для отклонённого ученика тоже не создан
        self.assertEqual(User.objects.filter(role='student').count(), 2)

    def test_lowered_limit_keeps_existing(self):
        self.add_student(roll=1)
        self.add_student(name='Karima Begum', roll=2)
        self.school.max_students = 1
        self.school.save()
        with self.assertRaises(SeatLimitError):
            self.add_student(name='Late Student', roll=3)
        self.assertEqual(Student.objects.filter(school=self.school).count(), 2)

    def test_limits_are_per_resource(self):
        RosterService.add_teacher(self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=['Math'])
        with self.assertRaises(SeatLimitError):
            RosterService.add_teacher(self.school, name='Second Teacher', assigned_class='Class 6', assigned_subjects=['Art'])
        self.add_student()

    def test_check_and_create_run_under_row_lock(self):
        outer_depth = len(connection.atomic_blocks)
        real_select_for_update = School.objects.select_for_update
        locks = []

        def tracking_select_for_update(*args, **kwargs):
            qs = real_select_for_update(*args, **kwargs)
            locks.append((len(connection.atomic_blocks), qs))
            return qs

        created = {}

        def create(locked):
            created['depth'] = len(connection.atomic_blocks)
            created['school'] = locked
            return 'created'

        with patch.object(School.objects, 'select_for_update', side_effect=tracking_select_for_update):
            self.assertEqual(create_within_seat_limit(self.school, 'students', create), 'created')

        self.assertEqual(len(locks), 1)
        lock_depth, locked_qs = locks[0]
        self.assertTrue(locked_qs.query.select_for_update)
        # Блокировка и вставка внутри одного transaction.atomic()
        self.assertGreater(lock_depth, outer_depth)
        self.assertEqual(created['depth'], lock_depth)
        self.assertEqual(created['school'].pk, self.school.pk)
        self.assertIsNot(created['school'], self.school)

    def test_limit_read_from_locked_row_not_stale_instance(self):
        stale = School.objects.get(pk=self.school.pk)
        self.add_student(roll=1)
        self.add_student(name='Karima Begum', roll=2)
        # У устаревшего экземпляра лимит больше, чем в БД
        stale.max_students = 100
        with self.assertRaises(SeatLimitError):
            create_within_seat_limit(stale, 'students', lambda school: None)

    def test_unknown_resource(self):
        with self.assertRaises(ValueError):
            create_within_seat_limit(self.school, 'parents', lambda school: None)


class SchoolAPITest(APITestCase):
    """Tests for /api/schools/ (master only)."""

    def setUp(self):
        self.master = User.objects.create_user(email='owner@test.com', password='testpass123', role='master')
        self.client.force_authenticate(user=self.master)

    def test_create_school(self):
        expires = int((timezone.now() + timedelta(days=365)).timestamp())
        response = self.client.post(reverse('school-list'), {
            'name': 'Sunrise Academy',
            'address': '12 Lake Road',
            'max_students': 50,
            'max_teachers': 5,
            'subscription_expires_at': {'seconds': expires, 'nanoseconds': 0},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['code'].startswith('SCH-'))
        self.assertTrue(response.data['subscription_active'])
        self.assertEqual(response.data['student_count'], 0)

    def test_validation(self):
        response = self.client.post(reverse('school-list'), {
            'name': 'AB',
            'max_students': 0,
            'max_teachers': 5,
            'subscription_expires_at': 'soon',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('name', 'max_students', 'subscription_expires_at'):
            self.assertIn(field, response.data)

    def test_disable_school(self):
        school = make_school()
        response = self.client.patch(
            reverse('school-detail', args=[school.pk]), {'status': 'disabled'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        school.refresh_from_db()
        self.assertFalse(school.is_active)

    def test_delete_not_allowed(self):
        school = make_school()
        response = self.client.delete(reverse('school-detail', args=[school.pk]))
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_school_admins(self):
        school = make_school()
        url = reverse('school-admins', args=[school.pk])
        response = self.client.post(url, {'email': 'Head@Sunrise.test', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'head@sunrise.test')

        duplicate = self.client.post(url, {'email': 'head@sunrise.test', 'password': 'testpass123'}, format='json')
        self.assertEqual(duplicate.status_code, status.HTTP_400_BAD_REQUEST)

        listing = self.client.get(url)
        self.assertEqual([row['email'] for row in listing.data], ['head@sunrise.test'])
        self.assertEqual(User.objects.get(email='head@sunrise.test').school, school)

    def test_subscriptions(self):
        make_school(name='Active School')
        make_school(name='Expired School', days=-1)
        response = self.client.get(reverse('subscriptions'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        active = {row['name']: row['subscription_active'] for row in response.data}
        self.assertEqual(active, {'Active School': True, 'Expired School': False})

    def test_admin_cannot_manage_schools(self):
        school = make_school()
        admin = User.objects.create_user(email='admin@test.com', password='testpass123', role='admin', school=school)
        self.client.force_authenticate(user=admin)
        self.assertEqual(self.client.get(reverse('school-list')).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse('subscriptions')).status_code, status.HTTP_403_FORBIDDEN)


class DashboardStatsTest(APITestCase):

    def setUp(self):
        self.school = make_school(max_students=10, max_teachers=3)
        self.student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )

    def test_master(self):
        make_school(name='Expired School', days=-1)
        master = User.objects.create_user(email='owner@test.com', password='testpass123', role='master')
        self.client.force_authenticate(user=master)
        response = self.client.get(reverse('dashboard-stats'))
        self.assertEqual(response.data['schools'], 2)
        self.assertEqual(response.data['active_subscriptions'], 1)

    def test_admin(self):
        PaymentService.request_payment(self.student, amount='50.00', method='Cash', trx='CASH-0001')
        admin = User.objects.create_user(email='admin@test.com', password='testpass123', role='admin', school=self.school)
        self.client.force_authenticate(user=admin)
        response = self.client.get(reverse('dashboard-stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['students'], 1)
        self.assertEqual(response.data['max_students'], 10)
        self.assertEqual(response.data['teachers'], 0)
        self.assertEqual(response.data['pending_payments'], 1)

    def test_student(self):
        self.client.force_authenticate(user=self.student.user)
        response = self.client.get(reverse('dashboard-stats'))
        self.assertEqual(response.data['school']['code'], self.school.code)
        self.assertTrue(response.data['subscription_active'])
        self.assertNotIn('pending_payments', response.data)


class IsolationChecksTest(SimpleTestCase):

    def test_all_viewsets_are_school_scoped(self):
        self.assertEqual(find_unscoped_viewsets(), [])
