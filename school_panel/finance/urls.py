from rest_framework.routers import SimpleRouter

from .views import MyPaymentsViewSet, PaymentViewSet

router = SimpleRouter()
router.register(r'my-payments', MyPaymentsViewSet, basename='my-payment')
router.register(r'payments', PaymentViewSet, basename='payment')

urlpatterns = router.urls
