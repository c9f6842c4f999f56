from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views
from .jwt_views import CodeLoginView, LoginView

urlpatterns = [
    # JWT
    path('auth/login/', LoginView.as_view(), name='token_obtain_pair'),
    path('auth/code-login/', CodeLoginView.as_view(), name='code_login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Профиль и политика доступа
    path('me/', views.MeView.as_view(), name='me'),
    path('access/check/', views.AccessCheckView.as_view(), name='access_check'),
    path('access/navigation/', views.NavigationView.as_view(), name='access_navigation'),
]
