from django.contrib import admin, messages
from django.shortcuts import redirect
from django.urls import path
from django.utils.html import format_html
from rest_framework.exceptions import APIException

from .models import Deposit, Payment, SystemSettings, Transaction, Withdrawal
from .services import DepositService, PaymentService, WithdrawalService


class ReviewActionsMixin:
    """Approve/reject buttons on the changelist, routed through the wallet services."""
    approve_status = None
    reject_status = None

    def action_buttons(self, obj):
        if obj.status == 'pending':
            info = self.model._meta.app_label, self.model._meta.model_name
            return format_html(
                '<a class="button" href="/admin/{}/{}/{}/approve/">Approve</a> '
                '<a class="button" href="/admin/{}/{}/{}/reject/">Reject</a>',
                *info, obj.pk, *info, obj.pk
            )
        return format_html('<span style="color: green;">Processed</span>')
    action_buttons.short_description = 'Actions'

    def get_urls(self):
        urls = super().get_urls()
        custom_urls = [
            path('<int:pk>/approve/', self.admin_site.admin_view(self.approve_view),
                 name=f'{self.model._meta.model_name}-approve'),
            path('<int:pk>/reject/', self.admin_site.admin_view(self.reject_view),
                 name=f'{self.model._meta.model_name}-reject'),
        ]
        return custom_urls + urls

    def apply_status(self, pk, new_status):
        raise NotImplementedError

    def _review(self, request, pk, new_status):
        try:
            self.apply_status(pk, new_status)
            messages.success(request, f'{self.model._meta.verbose_name.title()} {pk} marked {new_status}')
        except APIException as e:
            messages.error(request, str(e.detail))
        return redirect(f'admin:{self.model._meta.app_label}_{self.model._meta.model_name}_changelist')

    def approve_view(self, request, pk):
        return self._review(request, pk, self.approve_status)

    def reject_view(self, request, pk):
        return self._review(request, pk, self.reject_status)


@admin.register(Deposit)
class DepositAdmin(ReviewActionsMixin, admin.ModelAdmin):
    list_display = ('id', 'user', 'amount', 'payment_method', 'status', 'created_at', 'action_buttons')
    list_filter = ('status', 'payment_method', 'created_at')
    search_fields = ('user__email', 'user__name', 'transaction_hash', 'wallet_address')
    readonly_fields = ('status', 'created_at', 'updated_at')
    approve_status = Deposit.STATUS_VERIFIED
    reject_status = Deposit.STATUS_REJECTED

    def apply_status(self, pk, new_status):
        DepositService.update(pk, {'status': new_status})


@admin.register(Payment)
class PaymentAdmin(ReviewActionsMixin, admin.ModelAdmin):
    list_display = ('id', 'full_name', 'email', 'amount', 'network', 'status', 'created_at', 'action_buttons')
    list_filter = ('status', 'network')
    search_fields = ('email', 'full_name', 'transaction_hash')
    readonly_fields = ('status', 'hash_password', 'created_at', 'updated_at')
    approve_status = Payment.STATUS_VERIFIED
    reject_status = Payment.STATUS_REJECTED

    def apply_status(self, pk, new_status):
        PaymentService.update_status(pk, new_status)


@admin.register(Withdrawal)
class WithdrawalAdmin(ReviewActionsMixin, admin.ModelAdmin):
    list_display = ('id', 'user', 'amount', 'network', 'status', 'created_at', 'action_buttons')
    list_filter = ('status', 'network')
    search_fields = ('user__email', 'email', 'transaction_hash', 'transaction_uid')
    readonly_fields = ('status', 'created_at', 'updated_at')
    approve_status = Withdrawal.STATUS_APPROVED
    reject_status = Withdrawal.STATUS_REJECTED

    def apply_status(self, pk, new_status):
        WithdrawalService.update_status(pk, new_status)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('user', 'type', 'amount', 'balance', 'status', 'timestamp')
    list_filter = ('type', 'status')
    search_fields = ('user__email', 'description')
    readonly_fields = ('timestamp',)


@admin.register(SystemSettings)
class SystemSettingsAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'updated_at', 'updated_by')
    search_fields = ('key',)

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)
