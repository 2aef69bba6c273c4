import logging
import time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.db import transaction
from rest_framework import serializers

from bdspro.exceptions import InsufficientBalance
from referrals.models import Referral
from users.utils import generate_unique_referral_code

from .models import Deposit, Payment, Transaction, Withdrawal
from .services import PaymentService

logger = logging.getLogger(__name__)

User = get_user_model()

MIN_DEPOSIT_MESSAGE = f'Minimum deposit amount is {settings.MIN_DEPOSIT_AMOUNT} USDT'
MIN_WITHDRAWAL_MESSAGE = f'Minimum withdrawal amount is {settings.MIN_WITHDRAWAL_AMOUNT} USDT'


def validate_proof_image(image):
    content_type = getattr(image, 'content_type', None)
    if content_type not in settings.ALLOWED_PROOF_IMAGE_TYPES:
        raise serializers.ValidationError('Invalid file type. Only JPEG and PNG images are allowed.')
    if image.size > settings.MAX_PROOF_IMAGE_SIZE:
        raise serializers.ValidationError('File size too large. Maximum 5MB allowed.')
    return image


class DepositSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Deposit
        fields = ('id', 'user_id', 'user_name', 'user_email', 'amount', 'payment_method', 'wallet_address',
                  'transaction_hash', 'status', 'payment_proof_url', 'admin_notes', 'created_at', 'updated_at')
        read_only_fields = fields


class DepositCreateSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(
        max_digits=15, decimal_places=2,
        min_value=settings.MIN_DEPOSIT_AMOUNT,
        error_messages={'min_value': MIN_DEPOSIT_MESSAGE},
    )
    user_id = serializers.IntegerField(required=False, write_only=True, help_text='Admin only: deposit on behalf of a user')

    class Meta:
        model = Deposit
        fields = ('amount', 'payment_method', 'wallet_address', 'transaction_hash', 'payment_proof_url', 'user_id')
        extra_kwargs = {
            'payment_method': {'error_messages': {'invalid_choice': 'Invalid payment method'}},
        }


class DepositUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Deposit.STATUS_CHOICES, required=False,
        error_messages={'invalid_choice': 'Invalid status'},
    )
    admin_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('No fields to update')
        return attrs


class WithdrawalSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Withdrawal
        fields = ('id', 'user_id', 'user_name', 'user_email', 'email', 'network', 'transaction_hash',
                  'transaction_uid', 'amount', 'status', 'created_at', 'updated_at')
        read_only_fields = fields


class WithdrawalCreateSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(
        max_digits=15, decimal_places=2,
        min_value=settings.MIN_WITHDRAWAL_AMOUNT,
        error_messages={'min_value': MIN_WITHDRAWAL_MESSAGE},
    )
    email = serializers.EmailField(required=False)
    transaction_hash = serializers.CharField(max_length=255)
    transaction_uid = serializers.CharField(max_length=255)

    class Meta:
        model = Withdrawal
        fields = ('email', 'network', 'transaction_hash', 'transaction_uid', 'amount')

    def validate(self, attrs):
        user = self.context['request'].user
        if user.account_balance < attrs['amount']:
            raise InsufficientBalance()
        return attrs


class WithdrawalStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Withdrawal.STATUS_CHOICES,
        error_messages={'invalid_choice': 'Invalid status'},
    )


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ('id', 'referred_id', 'referrer_id', 'image_url', 'transaction_hash', 'amount', 'network',
                  'wallet_address', 'status', 'full_name', 'email', 'created_at', 'updated_at')
        read_only_fields = fields


class AdminPaymentSerializer(PaymentSerializer):
    hash_password = serializers.SerializerMethodField()

    class Meta(PaymentSerializer.Meta):
        fields = PaymentSerializer.Meta.fields + ('hash_password',)
        read_only_fields = fields

    def get_hash_password(self, obj):
        if not obj.hash_password:
            return None
        return f"{obj.hash_password[:20]}..."


class TransactionProofSerializer(AdminPaymentSerializer):
    referred_name = serializers.CharField(source='referred.name', read_only=True, default=None)
    referred_email = serializers.EmailField(source='referred.email', read_only=True, default=None)
    referrer_name = serializers.CharField(source='referrer.name', read_only=True, default=None)
    referrer_email = serializers.EmailField(source='referrer.email', read_only=True, default=None)

    class Meta(AdminPaymentSerializer.Meta):
        fields = AdminPaymentSerializer.Meta.fields + ('referred_name', 'referred_email', 'referrer_name', 'referrer_email')
        read_only_fields = fields


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Payment.STATUS_CHOICES,
        error_messages={'invalid_choice': 'Invalid status. Must be pending, verified, or rejected'},
    )


class PaymentSubmitSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    amount = serializers.DecimalField(
        max_digits=15, decimal_places=2,
        min_value=settings.MIN_DEPOSIT_AMOUNT,
        error_messages={'min_value': MIN_DEPOSIT_MESSAGE},
    )
    hash_password = serializers.CharField(
        write_only=True,
        min_length=6,
        error_messages={'min_length': 'Hash password must be at least 6 characters long'},
    )
    network = serializers.ChoiceField(
        choices=Payment.NETWORK_CHOICES,
        error_messages={'invalid_choice': 'Invalid network. Must be trc20 or bep20'},
    )
    wallet_address = serializers.CharField(max_length=255)
    transaction_hash = serializers.CharField(max_length=255, required=False, allow_blank=True)
    image = serializers.ImageField(required=False, validators=[validate_proof_image])
    screenshot = serializers.ImageField(required=False, validators=[validate_proof_image])

    def validate(self, attrs):
        image = attrs.pop('image', None) or attrs.pop('screenshot', None)
        attrs.pop('screenshot', None)
        if image is None:
            raise serializers.ValidationError({'image': 'Payment screenshot is required'})
        attrs['image'] = image
        return attrs

    def _resolve_payer(self, email, full_name):
        request = self.context.get('request')
        if request is not None and request.user.is_authenticated:
            return request.user

        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            return user

        user = User.objects.create_user(
            email=email,
            name=full_name,
            referral_code=generate_unique_referral_code(),
        )
        Referral.objects.create(user=user, referral_code=user.referral_code)
        logger.info(f"Created account {user.id} for payment submitted by {email}")
        return user

    def create(self, validated_data):
        image = validated_data.pop('image')
        image_url = PaymentService.store_proof_image(image)

        with transaction.atomic():
            payer = self._resolve_payer(validated_data['email'], validated_data['full_name'])
            payment = Payment.objects.create(
                referred=payer,
                referrer=payer.referrer,
                image_url=image_url,
                transaction_hash=validated_data.get('transaction_hash') or f"TXN_{int(time.time() * 1000)}",
                amount=validated_data['amount'],
                network=validated_data['network'],
                wallet_address=validated_data['wallet_address'],
                hash_password=make_password(validated_data['hash_password']),
                full_name=validated_data['full_name'],
                email=validated_data['email'],
            )

        logger.info(f"Payment {payment.id} submitted by user {payer.id} for {payment.amount} USDT")
        return payment


class ProofUploadSerializer(serializers.Serializer):
    image = serializers.ImageField(validators=[validate_proof_image])
    transaction_hash = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(
        max_digits=15, decimal_places=2,
        min_value=settings.MIN_DEPOSIT_AMOUNT,
        error_messages={'min_value': MIN_DEPOSIT_MESSAGE},
    )


class TransactionSerializer(serializers.ModelSerializer):
    """Ledger row in the shape the statement screen renders."""
    name = serializers.CharField(source='get_type_display', read_only=True)
    detail = serializers.CharField(source='description', read_only=True)
    credit = serializers.SerializerMethodField()
    debit = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = ('id', 'type', 'name', 'detail', 'amount', 'credit', 'debit', 'balance', 'status', 'timestamp')
        read_only_fields = fields

    def get_credit(self, obj):
        return None if obj.is_debit else obj.amount

    def get_debit(self, obj):
        return obj.amount if obj.is_debit else None
