from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from tenants.models import School

from .models import Student, Teacher
from .services import RosterService

User = get_user_model()


def make_school(days=30, **kwargs):
    kwargs.setdefault('name', 'Green Valley School')
    return School.objects.create(
        subscription_expires_at=timezone.now() + timedelta(days=days),
        **kwargs,
    )


STUDENT_PAYLOAD = {
    'name': 'Rahim Uddin',
    'class_name': 'Class 5',
    'roll': 7,
    'shift': 'Morning',
    'session': '2025',
}


class RosterServiceTest(TestCase):

    def setUp(self):
        self.school = make_school()

    def test_add_student_creates_login(self):
        student = RosterService.add_student(self.school, **STUDENT_PAYLOAD)
        self.assertRegex(student.login_code, r'^STU-[A-Z0-9]{6}$')
        self.assertEqual(student.user.login_code, student.login_code)
        self.assertEqual(student.user.role, 'student')
        self.assertEqual(student.user.school, self.school)
        self.assertFalse(student.user.has_usable_password())

    def test_add_teacher(self):
        teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=('Math', 'Science'),
        )
        self.assertRegex(teacher.login_code, r'^TCH-[A-Z0-9]{6}$')
        self.assertEqual(teacher.assigned_subjects, ['Math', 'Science'])
        self.assertEqual(teacher.user.role, 'teacher')


class StudentAPITest(APITestCase):
    """Tests for /api/students/ (school admin)."""

    def setUp(self):
        self.school = make_school(max_students=2)
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.client.force_authenticate(user=self.admin)

    def test_create_student(self):
        response = self.client.post(reverse('student-list'), STUDENT_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['login_code'].startswith('STU-'))
        self.assertEqual(Student.objects.get().school, self.school)

    def test_validation(self):
        payload = dict(STUDENT_PAYLOAD, name='Al', class_name='Class 13', roll=0, shift='Night', session='2023')
        response = self.client.post(reverse('student-list'), payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('name', 'class_name', 'roll', 'shift', 'session'):
            self.assertIn(field, response.data)

    def test_seat_limit(self):
        for roll in (1, 2):
            response = self.client.post(reverse('student-list'), dict(STUDENT_PAYLOAD, roll=roll), format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(reverse('student-list'), dict(STUDENT_PAYLOAD, roll=3), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Student.objects.count(), 2)

    def test_list_is_school_scoped_and_filtered(self):
        other = make_school(name='Other School')
        RosterService.add_student(other, **STUDENT_PAYLOAD)
        RosterService.add_student(self.school, **STUDENT_PAYLOAD)
        RosterService.add_student(self.school, **dict(STUDENT_PAYLOAD, class_name='Class 6', name='Karima Begum'))

        response = self.client.get(reverse('student-list'))
        self.assertEqual(len(response.data), 2)

        response = self.client.get(reverse('student-list'), {'class_name': 'Class 6'})
        self.assertEqual([row['name'] for row in response.data], ['Karima Begum'])

    def test_other_school_student_not_found(self):
        other = make_school(name='Other School')
        foreign = RosterService.add_student(other, **STUDENT_PAYLOAD)
        response = self.client.get(reverse('student-detail', args=[foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_student(self):
        student = RosterService.add_student(self.school, **STUDENT_PAYLOAD)
        response = self.client.patch(reverse('student-detail', args=[student.pk]), {'roll': 12}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        student.refresh_from_db()
        self.assertEqual(student.roll, 12)

    def test_expired_subscription_is_read_only(self):
        self.school.subscription_expires_at = timezone.now() - timedelta(days=1)
        self.school.save()
        self.assertEqual(self.client.get(reverse('student-list')).status_code, status.HTTP_200_OK)
        response = self.client.post(reverse('student-list'), STUDENT_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_teacher_forbidden(self):
        teacher = RosterService.add_teacher(self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=['Math'])
        self.client.force_authenticate(user=teacher.user)
        self.assertEqual(self.client.get(reverse('student-list')).status_code, status.HTTP_403_FORBIDDEN)


class TeacherAPITest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.admin = User.objects.create_user(
            email='admin@school.test', password='testpass123', role='admin', school=self.school,
        )
        self.client.force_authenticate(user=self.admin)

    def test_create_teacher_dedupes_subjects(self):
        response = self.client.post(reverse('teacher-list'), {
            'name': 'Karim Ahmed',
            'assigned_class': 'Class 5',
            'assigned_subjects': ['Math', 'English', 'Math'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Teacher.objects.get().assigned_subjects, ['Math', 'English'])

    def test_subjects_required(self):
        response = self.client.post(reverse('teacher-list'), {
            'name': 'Karim Ahmed',
            'assigned_class': 'Class 5',
            'assigned_subjects': [],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('assigned_subjects', response.data)


class MyStudentsAPITest(APITestCase):

    def setUp(self):
        self.school = make_school()
        self.teacher = RosterService.add_teacher(
            self.school, name='Karim Ahmed', assigned_class='Class 5', assigned_subjects=['Math'],
        )
        RosterService.add_student(self.school, **STUDENT_PAYLOAD)
        RosterService.add_student(self.school, **dict(STUDENT_PAYLOAD, class_name='Class 6', name='Karima Begum'))

    def test_only_assigned_class(self):
        self.client.force_authenticate(user=self.teacher.user)
        response = self.client.get(reverse('my-student-list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Rahim Uddin'])
        self.assertNotIn('login_code', response.data[0])

    def test_student_forbidden(self):
        student = Student.objects.first()
        self.client.force_authenticate(user=student.user)
        self.assertEqual(self.client.get(reverse('my-student-list')).status_code, status.HTTP_403_FORBIDDEN)
