from django.conf import settings
from django.db import models


class Deposit(models.Model):
    METHOD_TRC20 = 'USDT_TRC20'
    METHOD_BEP20 = 'USDT_BEP20'
    PAYMENT_METHODS = (
        (METHOD_TRC20, 'USDT (TRC20)'),
        (METHOD_BEP20, 'USDT (BEP20)'),
    )
    STATUS_PENDING = 'pending'
    STATUS_VERIFIED = 'verified'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_VERIFIED, 'Verified'),
        (STATUS_REJECTED, 'Rejected'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='deposits')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHODS)
    wallet_address = models.CharField(max_length=255)
    transaction_hash = models.CharField(max_length=255, null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_proof_url = models.TextField(null=True, blank=True)
    admin_notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'deposits'
        ordering = ('-created_at', '-id')

    def __str__(self):
        return f"Deposit #{self.pk} - {self.amount} USDT ({self.status})"


class Payment(models.Model):
    """Deposit proof submitted with a screenshot; reviewed on the admin payments screen."""
    NETWORK_TRC20 = 'trc20'
    NETWORK_BEP20 = 'bep20'
    NETWORK_CHOICES = (
        (NETWORK_TRC20, 'TRC20 (Tron)'),
        (NETWORK_BEP20, 'BEP20 (BNB Smart Chain)'),
    )
    STATUS_PENDING = 'pending'
    STATUS_VERIFIED = 'verified'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_VERIFIED, 'Verified'),
        (STATUS_REJECTED, 'Rejected'),
    )

    referred = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments')
    referrer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='referred_payments')
    image_url = models.TextField()
    transaction_hash = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    network = models.CharField(max_length=10, choices=NETWORK_CHOICES, blank=True, default='')
    wallet_address = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    hash_password = models.CharField(max_length=255, blank=True, default='')
    full_name = models.CharField(max_length=150, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'images'
        ordering = ('-created_at', '-id')

    def __str__(self):
        return f"Payment #{self.pk} - {self.amount} USDT ({self.status})"


class Withdrawal(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_COMPLETED, 'Completed'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='withdrawals')
    email = models.EmailField()
    network = models.CharField(max_length=100)
    transaction_hash = models.CharField(max_length=255, null=True, blank=True)
    transaction_uid = models.CharField(max_length=255, null=True, blank=True)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'withdrawals'
        ordering = ('-created_at', '-id')

    def __str__(self):
        return f"Withdrawal #{self.pk} - {self.amount} USDT ({self.status})"


class Transaction(models.Model):
    """Ledger entry written on every balance change."""
    TYPE_DEPOSIT = 'deposit'
    TYPE_WITHDRAWAL = 'withdrawal'
    TYPE_CASHBACK = 'cashback'
    TYPE_LEVEL1_INCOME = 'level1_income'
    TYPE_LEVEL2_INCOME = 'level2_income'
    TYPE_REWARD = 'reward'
    TYPE_WITHDRAWAL_REFUND = 'withdrawal_refund'
    TRANSACTION_TYPES = (
        (TYPE_DEPOSIT, 'Deposit'),
        (TYPE_WITHDRAWAL, 'Withdrawal'),
        (TYPE_CASHBACK, 'Cashback'),
        (TYPE_LEVEL1_INCOME, 'Level 1 Income'),
        (TYPE_LEVEL2_INCOME, 'Level 2 Income'),
        (TYPE_REWARD, 'Reward'),
        (TYPE_WITHDRAWAL_REFUND, 'Withdrawal Refund'),
    )
    DEBIT_TYPES = (TYPE_WITHDRAWAL,)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, default='completed')
    balance = models.DecimalField(max_digits=15, decimal_places=2, help_text='Account balance after this entry')
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transactions'
        ordering = ('-timestamp', '-id')

    @property
    def is_debit(self):
        return self.type in self.DEBIT_TYPES

    def __str__(self):
        return f"{self.user.email} - {self.type} - ${self.amount}"


class SystemSettings(models.Model):
    """Store system-wide configurable settings"""
    key = models.CharField(max_length=100, unique=True, db_index=True)
    value = models.TextField()
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)

    class Meta:
        db_table = 'system_settings'
        verbose_name = 'System Setting'
        verbose_name_plural = 'System Settings'

    @classmethod
    def get_value(cls, key, default=None):
        setting = cls.objects.filter(key=key).first()
        return setting.value if setting else default

    def __str__(self):
        return f"{self.key}: {self.value[:50]}"
