import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.utils import timezone
from rest_framework import generics, status, views
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import AccessToken

from .models import PasswordReset
from .permissions import IsAdminUser
from .serializers import (
    ForgotPasswordSerializer, ResetPasswordSerializer,
    UserRegistrationSerializer, UserSerializer
)
from .utils import generate_reset_token, send_password_reset_email

logger = logging.getLogger(__name__)

User = get_user_model()


def issue_access_token(user):
    token = AccessToken.for_user(user)
    token['user_id'] = user.pk
    token['email'] = user.email
    return str(token)


class RegisterView(generics.CreateAPIView):
    serializer_class = UserRegistrationSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        referrer = user.referrer

        return Response({
            'success': True,
            'message': f'User {user.name} registered successfully!',
            'data': {
                'user': UserSerializer(user).data,
                'referral_info': {
                    'referrer_id': referrer.id,
                    'referrer_name': referrer.name,
                    'referral_code': referrer.referral_code,
                } if referrer else None,
            }
        }, status=status.HTTP_201_CREATED)


class LoginView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        email = request.data.get('email')
        password = request.data.get('password')

        if not email or not password:
            return Response({'success': False, 'error': 'Email and password are required'},
                            status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(request, username=email, password=password)

        if not user:
            logger.info(f"Failed login attempt for {email}")
            return Response({'success': False, 'error': 'Invalid email or password'},
                            status=status.HTTP_401_UNAUTHORIZED)

        return Response({
            'success': True,
            'message': 'Login successful',
            'data': {
                'user': UserSerializer(user).data,
                'token': issue_access_token(user),
            }
        })


class ForgotPasswordView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            return Response({'success': False, 'error': 'No account found with this email address'},
                            status=status.HTTP_404_NOT_FOUND)

        reset = PasswordReset.objects.create(
            user=user,
            email=user.email,
            token=generate_reset_token(),
            expires_at=timezone.now() + settings.PASSWORD_RESET_TTL,
        )
        send_password_reset_email(user, reset.token)
        logger.info(f"Password reset requested for user {user.id}")

        return Response({
            'success': True,
            'message': 'Password reset instructions have been sent to your email address.'
        })


class ResetPasswordView(views.APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reset = PasswordReset.objects.select_related('user').filter(
            token=serializer.validated_data['token'],
            used=False,
            expires_at__gt=timezone.now(),
        ).first()
        if reset is None:
            return Response({'success': False, 'error': 'Invalid or expired reset token'},
                            status=status.HTTP_400_BAD_REQUEST)

        user = reset.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        reset.used = True
        reset.save(update_fields=['used'])
        logger.info(f"Password reset completed for user {user.id}")

        return Response({
            'success': True,
            'message': 'Your password has been reset successfully. You can now log in with your new password.'
        })


class UserProfileView(generics.RetrieveUpdateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    def get_object(self):
        return self.request.user

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        return Response({
            'success': True,
            'message': 'Profile updated successfully',
            'data': serializer.data,
        })


class UserByEmailView(views.APIView):
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get(self, request):
        email = request.query_params.get('email')
        if not email:
            return Response({'success': False, 'error': 'Email parameter is required'},
                            status=status.HTTP_400_BAD_REQUEST)
        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            return Response({'success': False, 'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response({'success': True, 'user': UserSerializer(user).data})
