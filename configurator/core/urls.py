from django.urls import path
from .views import login, refresh_token, logout, admin_me

urlpatterns = [
    # Auth endpoints
    path('auth/login/', login, name='auth-login'),
    path('auth/refresh/', refresh_token, name='auth-refresh'),
    path('auth/logout/', logout, name='auth-logout'),
    path('auth/me/', admin_me, name='auth-me'),
]
