import base64
import logging
import os
import time
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.db import transaction

from bdspro.exceptions import InsufficientBalance, InvalidStatusTransition
from referrals.models import Commission

from .models import Deposit, Payment, Transaction, Withdrawal

logger = logging.getLogger(__name__)

User = get_user_model()

CENT = Decimal('0.01')

LEVEL_INCOME_TYPES = {
    1: Transaction.TYPE_LEVEL1_INCOME,
    2: Transaction.TYPE_LEVEL2_INCOME,
}

# Allowed withdrawal status moves; approval debits, rejecting an approved request refunds
WITHDRAWAL_TRANSITIONS = {
    Withdrawal.STATUS_PENDING: {Withdrawal.STATUS_APPROVED, Withdrawal.STATUS_REJECTED},
    Withdrawal.STATUS_APPROVED: {Withdrawal.STATUS_COMPLETED, Withdrawal.STATUS_REJECTED},
    Withdrawal.STATUS_REJECTED: set(),
    Withdrawal.STATUS_COMPLETED: set(),
}


class WalletService:
    @staticmethod
    def lock_user(user_id):
        return User.objects.select_for_update().get(pk=user_id)

    @staticmethod
    def record(user, amount, transaction_type, description, status='completed'):
        """Write a ledger entry carrying the user's balance after the change."""
        return Transaction.objects.create(
            user=user,
            amount=amount,
            type=transaction_type,
            description=description,
            status=status,
            balance=user.account_balance,
        )

    @staticmethod
    def credit_investment(user_id, amount, description):
        """
        Credit a verified deposit to the user and pay the uplines.
        Must run inside transaction.atomic().
        """
        user = WalletService.lock_user(user_id)
        user.account_balance += amount
        user.total_earning += amount
        user.save(update_fields=['account_balance', 'total_earning', 'updated_at'])

        WalletService.record(user, amount, Transaction.TYPE_DEPOSIT, description)
        CommissionService.distribute(user, amount)

        logger.info(f"Credited {amount} USDT to user {user.id}: {description}")
        return user


class CommissionService:
    @staticmethod
    def commission_for(amount, level):
        rate = settings.REFERRAL_COMMISSION_RATES.get(level, Decimal('0'))
        return (Decimal(str(amount)) * rate).quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def distribute(source_user, amount):
        """
        Credit the referral commission for an investment by source_user:
        - Level 1 (direct referrer): 1%
        - Level 2 (referrer's referrer): 1%
        Must run inside transaction.atomic().
        """
        commissions = []
        current_user = source_user

        for level in sorted(settings.REFERRAL_COMMISSION_RATES):
            if not current_user.referrer_id or current_user.referrer_id == source_user.pk:
                break

            referrer = WalletService.lock_user(current_user.referrer_id)
            commission_amount = CommissionService.commission_for(amount, level)

            if commission_amount > 0:
                referrer.account_balance += commission_amount
                referrer.total_earning += commission_amount
                referrer.save(update_fields=['account_balance', 'total_earning', 'updated_at'])

                commissions.append(Commission.objects.create(
                    user=referrer,
                    source_user=source_user,
                    amount=commission_amount,
                    level=level,
                ))
                WalletService.record(
                    referrer,
                    commission_amount,
                    LEVEL_INCOME_TYPES[level],
                    f"Level {level} commission from {source_user.name} ({amount} USDT investment)",
                )
                logger.info(f"Level {level} commission {commission_amount} USDT to user {referrer.id} from user {source_user.id}")

            current_user = referrer

        return commissions


class DepositService:
    @staticmethod
    def update(deposit_id, data):
        """Apply an admin review (status and/or admin_notes) to a deposit."""
        with transaction.atomic():
            deposit = Deposit.objects.select_for_update().get(pk=deposit_id)
            new_status = data.get('status', deposit.status)
            credit = False

            if new_status != deposit.status:
                if deposit.status == Deposit.STATUS_VERIFIED:
                    raise InvalidStatusTransition('Deposit already verified')
                credit = new_status == Deposit.STATUS_VERIFIED
                deposit.status = new_status

            if 'admin_notes' in data:
                deposit.admin_notes = data['admin_notes']
            deposit.save()

            if credit:
                WalletService.credit_investment(
                    deposit.user_id,
                    deposit.amount,
                    f"Deposit verified - {deposit.get_payment_method_display()} - Deposit ID: {deposit.pk}",
                )

        logger.info(f"Deposit {deposit.pk} updated (status={deposit.status}, credited={credit})")
        return deposit


class PaymentService:
    @staticmethod
    def update_status(payment_id, new_status):
        """Review a payment proof; verification credits the paying user. Returns (payment, credited)."""
        with transaction.atomic():
            payment = Payment.objects.select_for_update().get(pk=payment_id)
            credited = False

            if new_status != payment.status:
                if payment.status == Payment.STATUS_VERIFIED:
                    raise InvalidStatusTransition('Payment already verified')
                payment.status = new_status
                payment.save(update_fields=['status', 'updated_at'])

                if new_status == Payment.STATUS_VERIFIED and payment.referred_id:
                    WalletService.credit_investment(
                        payment.referred_id,
                        payment.amount,
                        f"Deposit from payment verification - Payment ID: {payment.pk}",
                    )
                    credited = True

        logger.info(f"Payment {payment.pk} status set to {payment.status} (credited={credited})")
        return payment, credited

    @staticmethod
    def store_proof_image(upload, prefix='payment'):
        """Save an uploaded proof image and return its URL, or a base64 data URL if storage fails."""
        extension = os.path.splitext(upload.name or '')[1].lstrip('.').lower() or 'png'
        filename = f"uploads/{prefix}_{int(time.time() * 1000)}.{extension}"
        try:
            saved_name = default_storage.save(filename, upload)
            return default_storage.url(saved_name)
        except Exception as e:
            logger.error(f"Proof upload to storage failed, storing inline: {e}")
            upload.seek(0)
            encoded = base64.b64encode(upload.read()).decode()
            return f"data:{upload.content_type};base64,{encoded}"


class WithdrawalService:
    @staticmethod
    def update_status(withdrawal_id, new_status):
        with transaction.atomic():
            withdrawal = Withdrawal.objects.select_for_update().get(pk=withdrawal_id)
            old_status = withdrawal.status

            if new_status not in WITHDRAWAL_TRANSITIONS[old_status]:
                raise InvalidStatusTransition(f'Cannot change withdrawal from {old_status} to {new_status}')

            if new_status == Withdrawal.STATUS_APPROVED:
                user = WalletService.lock_user(withdrawal.user_id)
                if user.account_balance < withdrawal.amount:
                    raise InsufficientBalance()
                user.account_balance -= withdrawal.amount
                user.save(update_fields=['account_balance', 'updated_at'])
                WalletService.record(
                    user,
                    withdrawal.amount,
                    Transaction.TYPE_WITHDRAWAL,
                    f"Withdrawal approved - {withdrawal.network} - UID: {withdrawal.transaction_uid or withdrawal.transaction_hash}",
                )
            elif new_status == Withdrawal.STATUS_REJECTED and old_status == Withdrawal.STATUS_APPROVED:
                user = WalletService.lock_user(withdrawal.user_id)
                user.account_balance += withdrawal.amount
                user.save(update_fields=['account_balance', 'updated_at'])
                WalletService.record(
                    user,
                    withdrawal.amount,
                    Transaction.TYPE_WITHDRAWAL_REFUND,
                    f"Withdrawal #{withdrawal.pk} rejected after approval - refunded",
                )

            withdrawal.status = new_status
            withdrawal.save(update_fields=['status', 'updated_at'])

        logger.info(f"Withdrawal {withdrawal.pk} moved {old_status} -> {new_status}")
        return withdrawal
