from decimal import Decimal

import pytest
from django.db import transaction

from referrals.models import Commission
from wallet.models import Transaction
from wallet.services import CommissionService, WalletService

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('amount,expected', [
    (Decimal('50'), Decimal('0.50')),
    (Decimal('123.45'), Decimal('1.23')),
    (Decimal('0.50'), Decimal('0.01')),
])
def test_commission_rounds_to_cents(amount, expected):
    assert CommissionService.commission_for(amount, 1) == expected


def test_unknown_level_pays_nothing():
    assert CommissionService.commission_for(Decimal('100'), 3) == Decimal('0.00')


def test_two_levels_only(make_user):
    top = make_user()
    level2 = make_user(referrer=top)
    level1 = make_user(referrer=level2)
    investor = make_user(referrer=level1)

    with transaction.atomic():
        commissions = CommissionService.distribute(investor, Decimal('1000.00'))

    assert [(c.user_id, c.level, c.amount) for c in commissions] == [
        (level1.id, 1, Decimal('10.00')),
        (level2.id, 2, Decimal('10.00')),
    ]
    top.refresh_from_db()
    assert top.account_balance == 0

    level1.refresh_from_db()
    assert level1.total_earning == Decimal('10.00')
    entry = Transaction.objects.get(user=level1)
    assert entry.type == Transaction.TYPE_LEVEL1_INCOME
    assert entry.balance == Decimal('10.00')
    assert Transaction.objects.get(user=level2).type == Transaction.TYPE_LEVEL2_INCOME


def test_no_referrer_no_commission(user):
    with transaction.atomic():
        assert CommissionService.distribute(user, Decimal('100')) == []
    assert not Commission.objects.exists()


def test_circular_referrers_do_not_pay_the_investor(make_user):
    first = make_user()
    second = make_user(referrer=first)
    first.referrer = second
    first.save()

    with transaction.atomic():
        commissions = CommissionService.distribute(second, Decimal('100'))

    assert [c.user_id for c in commissions] == [first.id]
    second.refresh_from_db()
    assert second.account_balance == 0


def test_credit_investment_records_ledger(make_user):
    parent = make_user()
    investor = make_user(referrer=parent, balance=Decimal('5.00'))

    with transaction.atomic():
        WalletService.credit_investment(investor.id, Decimal('50.00'), 'Deposit verified')

    investor.refresh_from_db()
    assert investor.account_balance == Decimal('55.00')
    assert investor.total_earning == Decimal('50.00')
    entry = Transaction.objects.get(user=investor)
    assert (entry.type, entry.amount, entry.balance) == (Transaction.TYPE_DEPOSIT, Decimal('50.00'), Decimal('55.00'))
    assert Commission.objects.get(source_user=investor).amount == Decimal('0.50')
