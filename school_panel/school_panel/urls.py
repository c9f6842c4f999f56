"""
URL configuration for school_panel project.

Все API под /api/, маршруты приложений подключаются через include().
"""
from django.contrib import admin
from django.urls import include, path

from .health import health_check, live_check, ready_check

urlpatterns = [
    path('admin/', admin.site.urls),

    # Мониторинг
    path('health/', health_check, name='health'),
    path('health/ready/', ready_check, name='health-ready'),
    path('health/live/', live_check, name='health-live'),

    path('api/', include('accounts.urls')),
    path('api/', include('tenants.urls')),
    path('api/', include('roster.urls')),
    path('api/', include('exam.urls')),
    path('api/', include('finance.urls')),
    path('api/', include('notices.urls')),
]
