from django.conf import settings
from django.db import models


class Referral(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='referral_codes')
    referral_code = models.CharField(max_length=50, unique=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'referrals'
        ordering = ('-created_at', '-id')

    def __str__(self):
        return f"{self.referral_code} ({self.status})"


class ReferralLink(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='referral_link')
    referral_code = models.CharField(max_length=50, unique=True)
    referral_link = models.CharField(max_length=500)
    clicks = models.PositiveIntegerField(default=0)
    signups = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'referral_links'

    def __str__(self):
        return self.referral_link


class Commission(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='commissions_received')
    source_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='commissions_generated')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    level = models.PositiveSmallIntegerField(help_text="Generation level (1-2)")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'commissions'

    def __str__(self):
        return f"{self.amount} to {self.user.email} from {self.source_user.email} (L{self.level})"
