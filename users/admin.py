from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import PasswordReset, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'name', 'account_balance', 'total_earning', 'referral_code', 'referrer', 'is_staff')
    search_fields = ('email', 'name', 'phone', 'referral_code')
    list_filter = ('is_staff', 'is_active')
    ordering = ('-created_at',)
    readonly_fields = ('created_at', 'updated_at', 'last_login', 'date_joined')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name', 'phone')}),
        ('Balances', {'fields': ('account_balance', 'total_earning', 'rewards')}),
        ('Referral Info', {'fields': ('referral_code', 'referrer')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Timestamps', {'fields': ('last_login', 'date_joined', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'password1', 'password2'),
        }),
    )


@admin.register(PasswordReset)
class PasswordResetAdmin(admin.ModelAdmin):
    list_display = ('email', 'expires_at', 'used', 'created_at')
    list_filter = ('used',)
    search_fields = ('email',)
    readonly_fields = ('token', 'created_at')
