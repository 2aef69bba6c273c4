from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from bdspro.exceptions import Conflict

from .models import Referral, ReferralLink

User = get_user_model()


class ReferralSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    user_email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Referral
        fields = ('id', 'user_id', 'user_name', 'user_email', 'referral_code', 'status', 'created_at', 'updated_at')
        read_only_fields = fields


class ReferralWriteSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    referral_code = serializers.CharField(max_length=50)
    status = serializers.ChoiceField(
        choices=Referral.STATUS_CHOICES,
        default=Referral.STATUS_ACTIVE,
        error_messages={'invalid_choice': 'Invalid status. Must be active or inactive'},
    )

    def validate_user_id(self, value):
        if not User.objects.filter(pk=value).exists():
            raise NotFound('User not found')
        return value

    def validate_referral_code(self, value):
        value = value.strip()
        taken = Referral.objects.filter(referral_code=value)
        if self.instance is not None:
            taken = taken.exclude(pk=self.instance.pk)
        if taken.exists():
            raise Conflict('Referral code already exists')
        return value

    def validate(self, attrs):
        code = attrs.get('referral_code')
        if code:
            owner_id = attrs.get('user_id', self.instance.user_id if self.instance is not None else None)
            if User.objects.filter(referral_code=code).exclude(pk=owner_id).exists():
                raise Conflict('Referral code already exists')
        return attrs

    def create(self, validated_data):
        return Referral.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        return instance


class ReferralLinkSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReferralLink
        fields = ('referral_code', 'referral_link', 'clicks', 'signups', 'created_at', 'updated_at')
        read_only_fields = fields


class GenerateLinkSerializer(serializers.Serializer):
    custom_code = serializers.RegexField(
        r'^[A-Za-z0-9_-]{4,50}$',
        required=False,
        allow_blank=True,
        error_messages={'invalid': 'Custom code may only contain letters, digits, "-" and "_" (4-50 characters)'},
    )
