from django.urls import path

from .views import (
    ForgotPasswordView, LoginView, RegisterView, ResetPasswordView,
    UserByEmailView, UserProfileView
)

urlpatterns = [
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/forgot-password/', ForgotPasswordView.as_view(), name='forgot-password'),
    path('auth/reset-password/', ResetPasswordView.as_view(), name='reset-password'),
    path('auth/profile/', UserProfileView.as_view(), name='profile'),
    path('users/by-email/', UserByEmailView.as_view(), name='user-by-email'),
]
