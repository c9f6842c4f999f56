"""
Tests for notices app.

Covers:
- Audience filtering (all / teacher / student / class)
- Admin CRUD and publishing
- AI drafts (requests mocked): /generate/, /draft/ sync and queued, Celery task
"""
from datetime import timedelta
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from roster.services import RosterService
from tenants.models import School

from .ai_service import generate_notice_content
from .models import Notice
from .tasks import generate_notice_draft

User = get_user_model()

AI_TEXT = 'Content: Dear students, the annual sports day will be held next Friday on the main field.'


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


def chat_response(text=AI_TEXT):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = {'choices': [{'message': {'content': text}}]}
    return response


class AiServiceTest(TestCase):

    @patch('notices.ai_service.requests.post')
    def test_deepseek_success(self, mock_post):
        mock_post.return_value = chat_response()
        result = generate_notice_content('Annual Sports Day', 'student')
        self.assertIsNone(result['error'])
        self.assertTrue(result['content'].startswith('Dear students'))

        payload = mock_post.call_args.kwargs['json']
        self.assertEqual(payload['messages'][0]['role'], 'system')
        self.assertIn('Title: Annual Sports Day', payload['messages'][1]['content'])
        self.assertIn('Class Details: Not Applicable', payload['messages'][1]['content'])

    @patch('notices.ai_service.requests.post')
    def test_provider_failure(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('connection refused')
        result = generate_notice_content('Annual Sports Day', 'all')
        self.assertEqual(result['content'], '')
        self.assertIn('connection refused', result['error'])

    def test_unknown_provider(self):
        result = generate_notice_content('Annual Sports Day', 'all', provider='llama')
        self.assertIn('llama', result['error'])

    @override_settings(OPENAI_API_KEY='')
    def test_missing_key(self):
        result = generate_notice_content('Annual Sports Day', 'all', provider='openai')
        self.assertIn('OPENAI_API_KEY', result['error'])


class NoticeAudienceTest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )
        self.teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 6', assigned_subjects=['Math'],
        )
        for title, audience, class_details in [
            ('For everyone', 'all', ''),
            ('For teachers', 'teacher', ''),
            ('For students', 'student', ''),
            ('For Class 5', 'class', 'Class 5'),
            ('For Class 6', 'class', 'Class 6'),
        ]:
            Notice.objects.create(
                school=self.school, title=title, content='x' * 30,
                publish_to=audience, class_details=class_details, published=True,
            )
        Notice.objects.create(school=self.school, title='Draft notice', content='x' * 30, published=False)

        other = make_school(name='Other School')
        Notice.objects.create(school=other, title='Other school notice', content='x' * 30, published=True)

    def titles(self, user):
        self.client.force_authenticate(user=user)
        response = self.client.get(reverse('notice-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return sorted(row['title'] for row in response.data)

    def test_student(self):
        self.assertEqual(self.titles(self.student.user), ['For Class 5', 'For everyone', 'For students'])

    def test_teacher(self):
        self.assertEqual(self.titles(self.teacher.user), ['For Class 6', 'For everyone', 'For teachers'])

    def test_admin_sees_all_of_own_school(self):
        admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.assertEqual(len(self.titles(admin)), 6)

    def test_audience_filter_without_class(self):
        notices = Notice.objects.filter(school=self.school, published=True).filter(Notice.audience_filter('student'))
        self.assertEqual(sorted(notices.values_list('title', flat=True)), ['For everyone', 'For students'])


class NoticeAdminAPITest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.client.force_authenticate(user=self.admin)

    def test_create_and_publish(self):
        response = self.client.post(reverse('notice-list'), {
            'title': 'Annual Sports Day',
            'content': 'The annual sports day will be held next Friday.',
            'publish_to': 'all',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        notice = Notice.objects.get()
        self.assertEqual(notice.school, self.school)
        self.assertEqual(notice.created_by, self.admin)
        self.assertFalse(notice.published)

        response = self.client.post(reverse('notice-toggle-publish', args=[notice.pk]))
        self.assertTrue(response.data['published'])

    def test_validation(self):
        response = self.client.post(reverse('notice-list'), {
            'title': 'Hi',
            'content': 'Too short',
            'publish_to': 'all',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)
        self.assertIn('content', response.data)

    def test_class_notice_requires_class(self):
        response = self.client.post(reverse('notice-list'), {
            'title': 'Class trip reminder',
            'content': 'Please bring the signed permission slip tomorrow.',
            'publish_to': 'class',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('class_details', response.data)

    def test_delete(self):
        notice = Notice.objects.create(school=self.school, title='Old notice', content='x' * 30)
        response = self.client.delete(reverse('notice-detail', args=[notice.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Notice.objects.exists())

    def test_teacher_read_only(self):
        teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 6', assigned_subjects=['Math'],
        )
        self.client.force_authenticate(user=teacher.user)
        response = self.client.post(reverse('notice-list'), {
            'title': 'Annual Sports Day',
            'content': 'The annual sports day will be held next Friday.',
            'publish_to': 'all',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class NoticeDraftAPITest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.notice = Notice.objects.create(
            school=self.school, title='Annual Sports Day', content='Placeholder text for the notice.',
            publish_to='student',
        )
        self.client.force_authenticate(user=self.admin)

    @patch('notices.ai_service.requests.post')
    def test_generate(self, mock_post):
        mock_post.return_value = chat_response()
        response = self.client.post(reverse('notice-generate'), {
            'title': 'Annual Sports Day',
            'target_audience': 'class',
            'class_details': 'Class 5',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['content'].startswith('Dear students'))
        self.assertIn('Class Details: Class 5', mock_post.call_args.kwargs['json']['messages'][1]['content'])

    @patch('notices.ai_service.requests.post')
    def test_generate_failure(self, mock_post):
        mock_post.side_effect = requests.Timeout('timed out')
        response = self.client.post(reverse('notice-generate'), {
            'title': 'Annual Sports Day',
            'target_audience': 'all',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('timed out', response.data['error'])

    def test_generate_admin_only(self):
        teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 6', assigned_subjects=['Math'],
        )
        self.client.force_authenticate(user=teacher.user)
        response = self.client.post(reverse('notice-generate'), {
            'title': 'Annual Sports Day',
            'target_audience': 'all',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch('notices.ai_service.requests.post')
    def test_draft_sync(self, mock_post):
        mock_post.return_value = chat_response()
        response = self.client.post(reverse('notice-draft', args=[self.notice.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.notice.refresh_from_db()
        self.assertEqual(self.notice.draft_status, Notice.DraftStatus.COMPLETED)
        self.assertTrue(self.notice.content.startswith('Dear students'))

    @patch('notices.ai_service.requests.post')
    def test_draft_failure_keeps_content(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('connection refused')
        response = self.client.post(reverse('notice-draft', args=[self.notice.pk]))
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.notice.refresh_from_db()
        self.assertEqual(self.notice.draft_status, Notice.DraftStatus.FAILED)
        self.assertEqual(self.notice.content, 'Placeholder text for the notice.')

    @override_settings(NOTICE_AI_ASYNC=True)
    @patch('notices.tasks.generate_notice_draft')
    def test_draft_queued(self, mock_task):
        response = self.client.post(reverse('notice-draft', args=[self.notice.pk]))
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(response.data['draft_status'], 'pending')
        mock_task.delay.assert_called_once_with(self.notice.pk)


class GenerateNoticeDraftTaskTest(TestCase):

    def setUp(self):
        self.school = make_school()
        self.notice = Notice.objects.create(school=self.school, title='Parent meeting', publish_to='all')

    @patch('notices.ai_service.requests.post')
    def test_task_applies_draft(self, mock_post):
        mock_post.return_value = chat_response('A parent meeting is scheduled for Saturday at 10 AM.')
        result = generate_notice_draft(self.notice.pk)
        self.assertIsNone(result['error'])
        self.notice.refresh_from_db()
        self.assertEqual(self.notice.content, 'A parent meeting is scheduled for Saturday at 10 AM.')

    def test_missing_notice(self):
        self.assertIsNone(generate_notice_draft(999999))
