from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.db import transaction
from django.test import Client

from referrals.models import ReferralLink
from wallet.models import Deposit, SystemSettings, Transaction, Withdrawal
from wallet.services import WalletService

pytestmark = pytest.mark.django_db


def credit(user, amount):
    with transaction.atomic():
        WalletService.credit_investment(user.id, Decimal(amount), 'Deposit verified')


class TestUserData:
    def test_balances_income_and_network(self, client_for, make_user):
        root = make_user(name='Root')
        direct = make_user(referrer=root)
        indirect = make_user(referrer=direct)
        Deposit.objects.create(user=direct, amount=Decimal('200.00'), payment_method=Deposit.METHOD_BEP20,
                               wallet_address='0x1', status=Deposit.STATUS_VERIFIED)
        credit(direct, '200.00')
        credit(indirect, '100.00')

        response = client_for(root).get('/api/dashboard/user-data/')

        assert response.status_code == 200
        data = response.data['data']
        assert data['name'] == 'Root'
        assert data['level1_income'] == Decimal('2.00')
        assert data['level2_income'] == Decimal('1.00')
        assert data['account_balance'] == Decimal('3.00')
        assert data['level1_business'] == Decimal('200.00')
        assert data['direct_referrals'] == 1
        assert data['indirect_referrals'] == 1
        assert len(data['recent_transactions']) == 2

    def test_recent_transactions_capped_at_ten(self, user_client, user):
        for _ in range(12):
            WalletService.record(user, Decimal('1.00'), Transaction.TYPE_REWARD, 'Reward')

        response = user_client.get('/api/dashboard/user-data/')

        assert len(response.data['data']['recent_transactions']) == 10
        assert response.data['data']['level1_income'] == 0

    def test_requires_token(self, api_client):
        assert api_client.get('/api/dashboard/user-data/').status_code == 401


class TestLedger:
    def test_statement_has_credit_and_debit_columns(self, user_client, user):
        WalletService.record(user, Decimal('50.00'), Transaction.TYPE_DEPOSIT, 'Deposit verified')
        WalletService.record(user, Decimal('20.00'), Transaction.TYPE_WITHDRAWAL, 'Withdrawal approved')

        response = user_client.get('/api/transactions/')

        assert response.status_code == 200
        rows = {row['type']: row for row in response.data['data']}
        assert rows['deposit']['credit'] == Decimal('50.00')
        assert rows['deposit']['debit'] is None
        assert rows['withdrawal']['debit'] == Decimal('20.00')
        assert rows['withdrawal']['name'] == 'Withdrawal'
        assert rows['withdrawal']['detail'] == 'Withdrawal approved'

    def test_only_own_entries(self, user_client, make_user):
        WalletService.record(make_user(), Decimal('5.00'), Transaction.TYPE_REWARD, 'Reward')

        assert user_client.get('/api/transactions/').data['pagination']['total'] == 0

    def test_by_category(self, user_client, user):
        WalletService.record(user, Decimal('1.50'), Transaction.TYPE_LEVEL1_INCOME, 'L1')
        WalletService.record(user, Decimal('2.50'), Transaction.TYPE_LEVEL1_INCOME, 'L1')
        WalletService.record(user, Decimal('9.00'), Transaction.TYPE_CASHBACK, 'Cashback')

        response = user_client.get('/api/transactions/by-category/')

        totals = {row['type']: (row['count'], row['total']) for row in response.data['data']}
        assert totals == {
            'cashback': (1, Decimal('9.00')),
            'level1_income': (2, Decimal('4.00')),
        }


def test_healthz(client):
    response = client.get('/healthz')

    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}


def test_errors_use_envelope(admin_client):
    response = admin_client.delete('/api/deposits/999999/')

    assert response.status_code == 404
    assert response.data == {'success': False, 'error': 'No Deposit matches the given query.'}


class TestDjangoAdmin:
    @pytest.fixture
    def staff_client(self, make_user):
        staff = make_user(email='staff@example.com', is_staff=True)
        staff.is_superuser = True
        staff.save()
        client = Client()
        client.force_login(staff)
        return client

    @pytest.mark.parametrize('url', [
        '/admin/users/user/',
        '/admin/wallet/deposit/',
        '/admin/wallet/payment/',
        '/admin/wallet/withdrawal/',
        '/admin/wallet/transaction/',
        '/admin/referrals/referral/',
    ])
    def test_changelists_render(self, staff_client, url):
        assert staff_client.get(url).status_code == 200

    def test_approve_button_verifies_deposit(self, staff_client, user):
        deposit = Deposit.objects.create(user=user, amount=Decimal('80.00'), payment_method=Deposit.METHOD_TRC20,
                                         wallet_address='T1')

        response = staff_client.get(f'/admin/wallet/deposit/{deposit.pk}/approve/')

        assert response.status_code == 302
        user.refresh_from_db()
        assert user.account_balance == Decimal('80.00')

    def test_approve_button_reports_insufficient_balance(self, staff_client, user):
        withdrawal = Withdrawal.objects.create(user=user, email=user.email, network='TRC20', amount=Decimal('30.00'))

        response = staff_client.get(f'/admin/wallet/withdrawal/{withdrawal.pk}/approve/', follow=True)

        assert response.status_code == 200
        withdrawal.refresh_from_db()
        assert withdrawal.status == Withdrawal.STATUS_PENDING
        assert 'Insufficient balance' in [str(m) for m in response.context['messages']]


class TestManagementCommands:
    def test_setup_deposit_addresses(self):
        call_command('setup_deposit_addresses', '--trc20', 'TNEW', stdout=StringIO())

        assert SystemSettings.get_value('deposit_address_trc20') == 'TNEW'
        assert SystemSettings.get_value('deposit_address_bep20') == '0xdfca28ad998742570aecb7ffde1fe564b7d42c30'

    def test_generate_referral_links(self, user, make_user):
        make_user()

        call_command('generate_referral_links', stdout=StringIO())

        assert ReferralLink.objects.count() == 2


def test_no_browsable_api_root(client):
    assert client.get('/api/').status_code == 404
