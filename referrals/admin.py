from django.contrib import admin

from .models import Commission, Referral, ReferralLink


@admin.register(Referral)
class ReferralAdmin(admin.ModelAdmin):
    list_display = ('referral_code', 'user', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('referral_code', 'user__email', 'user__name')


@admin.register(ReferralLink)
class ReferralLinkAdmin(admin.ModelAdmin):
    list_display = ('user', 'referral_code', 'clicks', 'signups', 'updated_at')
    search_fields = ('referral_code', 'user__email')
    readonly_fields = ('clicks', 'signups', 'created_at', 'updated_at')


@admin.register(Commission)
class CommissionAdmin(admin.ModelAdmin):
    list_display = ('user', 'source_user', 'amount', 'level', 'created_at')
    list_filter = ('level',)
    search_fields = ('user__email', 'source_user__email')
