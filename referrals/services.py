import logging
from collections import defaultdict
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum

from users.utils import build_referral_link, generate_unique_referral_code
from wallet.models import Deposit, Payment

from .models import Referral, ReferralLink

logger = logging.getLogger(__name__)

User = get_user_model()


class ReferralService:
    @staticmethod
    def network(user):
        """Level 1 (direct) and level 2 (indirect) members under user."""
        level1 = list(User.objects.filter(referrer=user).order_by('-created_at', '-id'))
        level2 = list(
            User.objects.filter(referrer__referrer=user)
            .exclude(pk=user.pk)
            .order_by('-created_at', '-id')
        )
        return level1, level2

    @staticmethod
    def investment_totals(user_ids):
        """Verified deposits plus verified payments per user id."""
        totals = defaultdict(lambda: Decimal('0.00'))
        deposits = (
            Deposit.objects.filter(user_id__in=user_ids, status=Deposit.STATUS_VERIFIED)
            .values('user_id')
            .annotate(total=Sum('amount'))
        )
        for row in deposits:
            totals[row['user_id']] += row['total']

        payments = (
            Payment.objects.filter(referred_id__in=user_ids, status=Payment.STATUS_VERIFIED)
            .values('referred_id')
            .annotate(total=Sum('amount'))
        )
        for row in payments:
            totals[row['referred_id']] += row['total']
        return totals

    @staticmethod
    def describe_members(members):
        totals = ReferralService.investment_totals([member.pk for member in members])
        return [
            {
                'id': member.pk,
                'name': member.name,
                'email': member.email,
                'joined_date': member.created_at,
                'total_invested': totals[member.pk],
            }
            for member in members
        ]

    @staticmethod
    def code_taken(code, user):
        """True if another user already owns this code, either directly or through a Referral row."""
        if User.objects.filter(referral_code=code).exclude(pk=user.pk).exists():
            return True
        return Referral.objects.filter(referral_code=code).exclude(user=user).exists()

    @staticmethod
    def ensure_referral_code(user):
        if not user.referral_code:
            user.referral_code = generate_unique_referral_code()
            user.save(update_fields=['referral_code', 'updated_at'])
        return user.referral_code

    @staticmethod
    def upsert_link(user, custom_code=None):
        """Store the user's referral link, optionally switching to a custom code first."""
        with transaction.atomic():
            if custom_code and custom_code != user.referral_code:
                user.referral_code = custom_code
                user.save(update_fields=['referral_code', 'updated_at'])
            code = ReferralService.ensure_referral_code(user)

            link, created = ReferralLink.objects.update_or_create(
                user=user,
                defaults={
                    'referral_code': code,
                    'referral_link': build_referral_link(code),
                },
            )

        logger.info(f"Referral link {'created' if created else 'updated'} for user {user.id}: {link.referral_link}")
        return link, created
