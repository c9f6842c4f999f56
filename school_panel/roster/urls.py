from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register('students', views.StudentViewSet, basename='student')
router.register('teachers', views.TeacherViewSet, basename='teacher')
router.register('my-students', views.MyStudentsViewSet, basename='my-student')

urlpatterns = router.urls
