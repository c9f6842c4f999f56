from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from roster.services import RosterService
from tenants.models import School

from .access_policy import (
    API_ACCESS_TABLE,
    DASHBOARD_ACCESS_TABLE,
    AccessRule,
    navigation_for,
    resolve_access,
    resolve_rule,
)
from .claims import RoleClaim, claim_for_user, claim_from_token

User = get_user_model()


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


class AccessPolicyTest(SimpleTestCase):
    """Tests for the longest-prefix access table."""

    def test_admin_pages(self):
        self.assertTrue(resolve_access('admin', '/dashboard/students'))
        self.assertTrue(resolve_access('admin', '/dashboard/students/42/edit'))
        self.assertFalse(resolve_access('teacher', '/dashboard/students'))

    def test_dashboard_root_open_to_all_roles(self):
        for role in ('master', 'admin', 'teacher', 'student'):
            with self.subTest(role=role):
                self.assertTrue(resolve_access(role, '/dashboard'))

    def test_specific_rule_overrides_general(self):
        # '/dashboard' пускает admin, но '/dashboard/schools' только master
        self.assertFalse(resolve_access('admin', '/dashboard/schools'))
        self.assertTrue(resolve_access('master', '/dashboard/schools'))
        self.assertFalse(resolve_access('master', '/dashboard/students'))

    def test_unmatched_path_is_denied(self):
        for role in ('master', 'admin', 'teacher', 'student'):
            with self.subTest(role=role):
                self.assertFalse(resolve_access(role, '/settings'))

    def test_missing_role_is_denied(self):
        self.assertFalse(resolve_access(None, '/dashboard'))
        self.assertFalse(resolve_access('', '/dashboard'))

    def test_rules_are_not_merged(self):
        table = [AccessRule('/a', ['x']), AccessRule('/a/b', ['y'])]
        self.assertFalse(resolve_access('x', '/a/b/c', table))
        self.assertTrue(resolve_access('y', '/a/b/c', table))
        self.assertTrue(resolve_access('x', '/a/c', table))

    def test_table_order_does_not_matter(self):
        forward = [AccessRule('/a', ['x']), AccessRule('/a/b', ['y'])]
        self.assertEqual(resolve_rule('/a/b', forward), resolve_rule('/a/b', list(reversed(forward))))

    def test_api_table_mirrors_dashboard(self):
        self.assertTrue(resolve_access('teacher', '/api/result-entry/', API_ACCESS_TABLE))
        self.assertFalse(resolve_access('student', '/api/result-entry/', API_ACCESS_TABLE))
        self.assertTrue(resolve_access('student', '/api/notices/', API_ACCESS_TABLE))
        self.assertFalse(resolve_access('teacher', '/api/notices/generate/', API_ACCESS_TABLE))
        self.assertTrue(resolve_access('admin', '/api/notices/generate/', API_ACCESS_TABLE))
        self.assertFalse(resolve_access('admin', '/api/unknown/', API_ACCESS_TABLE))

    def test_resolve_rule_returns_most_specific(self):
        rule = resolve_rule('/dashboard/my-payments/3', DASHBOARD_ACCESS_TABLE)
        self.assertEqual(rule.prefix, '/dashboard/my-payments')
        self.assertIsNone(resolve_rule('/other', DASHBOARD_ACCESS_TABLE))


class NavigationTest(SimpleTestCase):

    def labels(self, role):
        return [item['label'] for item in navigation_for(role)]

    def test_master(self):
        self.assertEqual(self.labels('master'), ['Dashboard', 'Schools', 'Subscriptions'])

    def test_admin(self):
        self.assertEqual(
            self.labels('admin'),
            ['Dashboard', 'Students', 'Teachers', 'Results', 'Payments', 'Notices'],
        )

    def test_teacher(self):
        self.assertEqual(self.labels('teacher'), ['Dashboard', 'Notices', 'My Students', 'Result Entry'])

    def test_student(self):
        self.assertEqual(self.labels('student'), ['Dashboard', 'Notices', 'My Result', 'My Payments'])

    def test_unknown_role(self):
        self.assertEqual(navigation_for('guest'), [])


class ClaimsTest(TestCase):

    def test_master_claim_has_no_school(self):
        master = User.objects.create_user(email='owner@test.com', password='testpass123', role='master')
        claim = claim_for_user(master)
        self.assertEqual(claim, RoleClaim(role='master', school_id=None, subscription_active=True))

    def test_school_claim_follows_subscription(self):
        school = make_school(days=-1)
        admin = User.objects.create_user(email='admin@test.com', password='testpass123', role='admin', school=school)
        claim = claim_for_user(admin)
        self.assertEqual(claim.school_id, str(school.pk))
        self.assertFalse(claim.subscription_active)

    def test_claim_from_token_defaults(self):
        claim = claim_from_token({'role': 'superuser'})
        self.assertEqual(claim.role, 'student')
        self.assertIsNone(claim.school_id)
        self.assertFalse(claim.subscription_active)


class LoginTest(APITestCase):
    """Tests for email and code login."""

    def setUp(self):
        self.school = make_school()
        self.admin = User.objects.create_user(
            email='admin@school.test',
            password='testpass123',
            role='admin',
            school=self.school,
        )

    def test_email_login_puts_claims_into_token(self):
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'Admin@School.test', 'password': 'testpass123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'admin')
        self.assertEqual(token['school_id'], str(self.school.pk))
        self.assertTrue(token['subscription_active'])

    def test_mixed_case_email_is_stored_lowercase_and_can_login(self):
        master = User.objects.create_superuser(email='Owner@Platform.Test', password='testpass123')
        self.assertEqual(master.email, 'owner@platform.test')
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'Owner@Platform.Test', 'password': 'testpass123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessToken(response.data['access'])['role'], 'master')

    def test_wrong_password(self):
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'admin@school.test', 'password': 'wrong-password'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_disabled_school_cannot_login(self):
        self.school.status = School.Status.DISABLED
        self.school.save()
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'admin@school.test', 'password': 'testpass123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_keeps_claims(self):
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'admin@school.test', 'password': 'testpass123'},
            format='json',
        )
        # Роль меняется в БД, но в сессии остаётся прежней до повторного входа
        self.admin.role = 'teacher'
        self.admin.save()

        refreshed = self.client.post(
            reverse('token_refresh'),
            {'refresh': response.data['refresh']},
            format='json',
        )
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessToken(refreshed.data['access'])['role'], 'admin')

    def test_code_login(self):
        student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )
        response = self.client.post(
            reverse('code_login'),
            {'school_code': self.school.code.lower(), 'login_code': student.login_code.lower()},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'student')
        self.assertEqual(token['school_id'], str(self.school.pk))

    def test_code_login_other_school(self):
        other = make_school(name='Other School')
        student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )
        response = self.client.post(
            reverse('code_login'),
            {'school_code': other.code, 'login_code': student.login_code},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class MeAndAccessViewsTest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=['Math'],
        ).user
        token = AccessToken.for_user(self.teacher)
        token['role'] = 'teacher'
        token['school_id'] = str(self.school.pk)
        token['subscription_active'] = True
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def test_me(self):
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'teacher')
        self.assertEqual(response.data['school_name'], 'Green Valley School')
        self.assertEqual(response.data['claims']['school_id'], str(self.school.pk))

    def test_access_check(self):
        response = self.client.get(reverse('access_check'), {'path': '/dashboard/result-entry'})
        self.assertTrue(response.data['allowed'])
        self.assertEqual(response.data['matched_prefix'], '/dashboard/result-entry')

        response = self.client.get(reverse('access_check'), {'path': '/dashboard/payments'})
        self.assertFalse(response.data['allowed'])

    def test_navigation(self):
        response = self.client.get(reverse('access_navigation'))
        hrefs = [item['href'] for item in response.data['items']]
        self.assertIn('/dashboard/result-entry', hrefs)
        self.assertNotIn('/dashboard/students', hrefs)

    def test_anonymous(self):
        self.client.credentials()
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class SetMasterRoleCommandTest(TestCase):

    def test_creates_master(self):
        out = StringIO()
        call_command('set_master_role', 'Owner@Test.com', password='testpass123', stdout=out)
        user = User.objects.get(email='owner@test.com')
        self.assertEqual(user.role, 'master')
        self.assertIsNone(user.school)
        self.assertTrue(user.is_staff)
        self.assertIn('master', out.getvalue())

    def test_promotes_existing_admin(self):
        school = make_school()
        User.objects.create_user(email='admin@test.com', password='testpass123', role='admin', school=school)
        call_command('set_master_role', 'admin@test.com', stdout=StringIO())
        user = User.objects.get(email='admin@test.com')
        self.assertEqual(user.role, 'master')
        self.assertIsNone(user.school_id)

    def test_unknown_user_without_password(self):
        with self.assertRaises(CommandError):
            call_command('set_master_role', 'nobody@test.com', stdout=StringIO())
