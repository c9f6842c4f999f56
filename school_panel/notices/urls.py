from rest_framework.routers import SimpleRouter

from .views import NoticeViewSet

router = SimpleRouter()
router.register(r'notices', NoticeViewSet, basename='notice')

urlpatterns = router.urls
