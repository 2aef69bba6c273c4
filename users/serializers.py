import logging

from django.db import transaction
from django.db.models import F
from rest_framework import serializers

from referrals.models import Referral, ReferralLink

from .models import User
from .utils import generate_unique_referral_code

logger = logging.getLogger(__name__)


def resolve_referrer(code):
    """Find the user behind a referral code, or raise if it can't be used"""
    referral = Referral.objects.select_related('user').filter(referral_code=code).first()
    if referral is not None:
        if referral.status != Referral.STATUS_ACTIVE:
            raise serializers.ValidationError(f'The referral code "{code}" is no longer active.')
        return referral.user

    referrer = User.objects.filter(referral_code=code).first()
    if referrer is None:
        raise serializers.ValidationError(f'The referral code "{code}" does not exist. Please check and try again.')
    return referrer


class UserRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(error_messages={'invalid': 'Please enter a valid email address'})
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        error_messages={'min_length': 'Password must be at least 6 characters long'},
    )
    referral_code = serializers.CharField(max_length=50, required=False, allow_blank=True, write_only=True)

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('User with this email already exists')
        return value

    def validate_referral_code(self, value):
        value = (value or '').strip()
        if not value:
            return None
        return resolve_referrer(value)

    def create(self, validated_data):
        referrer = validated_data.pop('referral_code', None)

        with transaction.atomic():
            user = User.objects.create_user(
                email=validated_data['email'],
                password=validated_data['password'],
                name=validated_data['name'],
                phone=validated_data.get('phone') or '',
                referral_code=generate_unique_referral_code(),
                referrer=referrer,
            )
            Referral.objects.create(user=user, referral_code=user.referral_code)

            if referrer is not None:
                ReferralLink.objects.filter(user=referrer).update(signups=F('signups') + 1)

        logger.info(f"User {user.id} registered (referrer={referrer.id if referrer else None})")
        return user


class UserSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source='id', read_only=True)

    class Meta:
        model = User
        fields = ('user_id', 'name', 'email', 'phone', 'account_balance', 'total_earning',
                  'rewards', 'referral_code', 'referrer_id', 'is_staff', 'created_at', 'updated_at')
        read_only_fields = ('email', 'account_balance', 'total_earning', 'rewards', 'referral_code',
                            'referrer_id', 'is_staff', 'created_at', 'updated_at')


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)
    new_password = serializers.CharField(
        write_only=True,
        min_length=6,
        error_messages={'min_length': 'Password must be at least 6 characters long'},
    )
