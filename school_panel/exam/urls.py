"""URL configuration для результатов экзаменов."""
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register(r'result-entry', views.ResultEntryViewSet, basename='result-entry')
router.register(r'results', views.ResultViewSet, basename='result')
router.register(r'my-result', views.MyResultViewSet, basename='my-result')

urlpatterns = router.urls
