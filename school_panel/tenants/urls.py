from django.urls import path
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register('schools', views.SchoolViewSet, basename='school')

urlpatterns = [
    path('subscriptions/', views.SubscriptionListView.as_view(), name='subscriptions'),
    path('dashboard/stats/', views.DashboardStatsView.as_view(), name='dashboard-stats'),
] + router.urls
