"""
Tests for exam app.

Covers:
- Grade ladder and GPA (exam.grading)
- Result model (gpa recomputed on save)
- Result entry by teachers, publishing by admins, student view
"""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from roster.services import RosterService
from tenants.models import School

from .grading import compute_gpa, gpa_decimal, grade_breakdown, grade_letter_of, grade_point_of
from .models import Result

User = get_user_model()


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


def marks(*values):
    return [{'name': f'Subject {i}', 'mark': value} for i, value in enumerate(values)]


class GradeLadderTest(SimpleTestCase):

    def test_thresholds(self):
        cases = [
            (100, 5.0, 'A+'), (80, 5.0, 'A+'),
            (79.99, 4.0, 'A'), (70, 4.0, 'A'),
            (69, 3.5, 'A-'), (60, 3.5, 'A-'),
            (59, 3.0, 'B'), (50, 3.0, 'B'),
            (49, 2.0, 'C'), (40, 2.0, 'C'),
            (39, 1.0, 'D'), (33, 1.0, 'D'),
            (32.99, 0.0, 'F'), (0, 0.0, 'F'),
        ]
        for mark, point, letter in cases:
            with self.subTest(mark=mark):
                self.assertEqual(grade_point_of(mark), point)
                self.assertEqual(grade_letter_of(mark), letter)

    def test_out_of_range_marks(self):
        self.assertEqual(grade_letter_of(-5), 'F')
        self.assertEqual(grade_letter_of(150), 'A+')


class ComputeGpaTest(SimpleTestCase):

    def test_mean_of_points(self):
        self.assertEqual(compute_gpa(marks(85, 75)), 4.5)

    def test_rounds_half_up(self):
        # (5*4 + 1*3 + 2) / 8 = 3.125
        self.assertEqual(compute_gpa(marks(80, 80, 80, 80, 33, 33, 33, 40)), 3.13)
        self.assertEqual(gpa_decimal(marks(80, 80, 80, 80, 33, 33, 33, 40)), Decimal('3.13'))

    def test_single_failure_zeroes_gpa(self):
        self.assertEqual(compute_gpa(marks(100, 20)), 0.0)
        self.assertEqual(compute_gpa(marks(100, 100, 100, 32)), 0.0)

    def test_empty(self):
        self.assertEqual(compute_gpa([]), 0.0)

    def test_bounds(self):
        self.assertEqual(compute_gpa(marks(100, 100)), 5.0)
        self.assertEqual(compute_gpa(marks(33)), 1.0)

    def test_order_independent(self):
        self.assertEqual(compute_gpa(marks(90, 65, 45)), compute_gpa(marks(45, 90, 65)))

    def test_breakdown(self):
        rows = grade_breakdown([{'name': 'Math', 'mark': 85}, {'name': 'Art', 'mark': 30}])
        self.assertEqual(rows[0], {'name': 'Math', 'mark': 85, 'letter': 'A+', 'point': 5.0})
        self.assertEqual(rows[1]['letter'], 'F')


class ResultModelTest(TestCase):

    def setUp(self):
        self.school = make_school()
        self.student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )

    def test_gpa_recomputed_on_save(self):
        result = Result.objects.create(
            school=self.school,
            student=self.student,
            student_name=self.student.name,
            exam_name='Midterm',
            subjects=marks(85, 75),
        )
        self.assertEqual(result.gpa, Decimal('4.50'))
        self.assertTrue(result.passed)

        result.subjects = marks(85, 10)
        result.save(update_fields=['subjects'])
        result.refresh_from_db()
        self.assertEqual(result.gpa, Decimal('0.00'))
        self.assertFalse(result.passed)


class ResultEntryAPITest(APITestCase):
    """Tests for /api/result-entry/ (teacher)."""

    def setUp(self):
        self.school = make_school()
        self.teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=['Math', 'English'],
        )
        self.student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )
        self.client.force_authenticate(user=self.teacher.user)

    def payload(self, **overrides):
        data = {
            'student': self.student.pk,
            'exam_name': 'Midterm 2025',
            'subjects': [{'name': 'Math', 'mark': 85}, {'name': 'English', 'mark': 75}],
        }
        data.update(overrides)
        return data

    def test_create_result(self):
        response = self.client.post(reverse('result-entry-list'), self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['gpa'], 4.5)
        self.assertFalse(response.data['published'])

        result = Result.objects.get()
        self.assertEqual(result.school, self.school)
        self.assertEqual(result.student_name, 'Rahim Uddin')
        self.assertEqual(result.created_by, self.teacher.user)

    def test_client_gpa_is_ignored(self):
        response = self.client.post(
            reverse('result-entry-list'), self.payload(gpa=5.0, published=True), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        result = Result.objects.get()
        self.assertEqual(result.gpa, Decimal('4.50'))
        self.assertFalse(result.published)

    def test_invalid_subjects(self):
        cases = [
            [],
            [{'name': 'Math', 'mark': 101}],
            [{'name': 'Math', 'mark': -1}],
            [{'name': '', 'mark': 50}],
            [{'name': 'Math', 'mark': 50}, {'name': 'math', 'mark': 60}],
        ]
        for subjects in cases:
            with self.subTest(subjects=subjects):
                response = self.client.post(
                    reverse('result-entry-list'), self.payload(subjects=subjects), format='json',
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('subjects', response.data)
        self.assertFalse(Result.objects.exists())

    def test_student_from_other_school(self):
        other = make_school(name='Other School')
        foreign = RosterService.add_student(
            other, name='Foreign Student', class_name='Class 5', roll=1, shift='Day', session='2025',
        )
        response = self.client.post(reverse('result-entry-list'), self.payload(student=foreign.pk), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('student', response.data)

    def test_preview(self):
        response = self.client.post(reverse('result-entry-preview'), {
            'subjects': [{'name': 'Math', 'mark': 80}, {'name': 'Art', 'mark': 20}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['gpa'], 0.0)
        self.assertFalse(response.data['passed'])
        self.assertEqual([row['letter'] for row in response.data['subjects']], ['A+', 'F'])
        self.assertFalse(Result.objects.exists())

    def test_students_list(self):
        response = self.client.get(reverse('result-entry-students'))
        self.assertEqual([row['name'] for row in response.data], ['Rahim Uddin'])

    def test_student_cannot_enter_results(self):
        self.client.force_authenticate(user=self.student.user)
        response = self.client.post(reverse('result-entry-list'), self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ResultPublishingTest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.student = RosterService.add_student(
            self.school, name='Rahim Uddin', class_name='Class 5', roll=1, shift='Morning', session='2025',
        )
        self.result = Result.objects.create(
            school=self.school,
            student=self.student,
            student_name=self.student.name,
            exam_name='Final Exam',
            subjects=[{'name': 'Math', 'mark': 85}, {'name': 'English', 'mark': 75}],
        )

    def test_admin_toggles_publish(self):
        self.client.force_authenticate(user=self.admin)
        url = reverse('result-toggle-publish', args=[self.result.pk])

        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['published'])
        self.assertEqual(response.data['grades'][0]['letter'], 'A+')

        self.client.post(url)
        self.result.refresh_from_db()
        self.assertFalse(self.result.published)

    def test_admin_list_filters(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('result-list'), {'published': 'true'})
        self.assertEqual(response.data, [])
        response = self.client.get(reverse('result-list'), {'student': self.student.pk})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['gpa'], 4.5)

    def test_admin_list_rejects_non_numeric_student(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('result-list'), {'student': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('student', response.data)

    def test_student_sees_only_published(self):
        self.client.force_authenticate(user=self.student.user)
        self.assertEqual(self.client.get(reverse('my-result-list')).data, [])

        self.result.published = True
        self.result.save()
        response = self.client.get(reverse('my-result-list'))
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['exam_name'], 'Final Exam')
        self.assertTrue(response.data[0]['passed'])

    def test_student_does_not_see_other_students(self):
        other = RosterService.add_student(
            self.school, name='Karima Begum', class_name='Class 5', roll=2, shift='Morning', session='2025',
        )
        self.result.published = True
        self.result.save()
        self.client.force_authenticate(user=other.user)
        self.assertEqual(self.client.get(reverse('my-result-list')).data, [])
