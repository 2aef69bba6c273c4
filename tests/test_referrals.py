from decimal import Decimal

import pytest

from referrals.models import Referral, ReferralLink
from wallet.models import Deposit, Payment

pytestmark = pytest.mark.django_db


class TestReferralAdmin:
    def test_create_defaults_to_active(self, admin_client, user):
        response = admin_client.post('/api/referrals/', {'user_id': user.id, 'referral_code': 'SPRING24'}, format='json')

        assert response.status_code == 201
        assert response.data['data']['status'] == 'active'
        assert response.data['data']['user_email'] == user.email

    def test_duplicate_code_conflicts(self, admin_client, user):
        response = admin_client.post('/api/referrals/', {'user_id': user.id, 'referral_code': user.referral_code}, format='json')

        assert response.status_code == 409
        assert response.data['error'] == 'Referral code already exists'

    def test_code_owned_by_another_user_conflicts(self, admin_client, api_client, user_client, user, make_user):
        user_client.post('/api/referrals/generate-link/', {'custom_code': 'ALICE2024'}, format='json')
        other = make_user()

        response = admin_client.post('/api/referrals/', {'user_id': other.id, 'referral_code': 'ALICE2024'}, format='json')

        assert response.status_code == 409
        signup = api_client.post('/api/auth/register/', {
            'name': 'Bob', 'email': 'bob@example.com', 'password': 'secret123', 'referral_code': 'ALICE2024',
        }, format='json')
        assert signup.data['data']['referral_info']['referrer_id'] == user.id

    def test_owner_may_get_a_row_for_own_code(self, admin_client, make_user):
        owner = make_user()
        Referral.objects.filter(user=owner).delete()

        response = admin_client.post('/api/referrals/', {'user_id': owner.id, 'referral_code': owner.referral_code}, format='json')

        assert response.status_code == 201

    def test_unknown_user(self, admin_client):
        response = admin_client.post('/api/referrals/', {'user_id': 9999, 'referral_code': 'NEWCODE'}, format='json')

        assert response.status_code == 404

    def test_invalid_status(self, admin_client, user):
        response = admin_client.post('/api/referrals/', {
            'user_id': user.id, 'referral_code': 'NEWCODE', 'status': 'paused',
        }, format='json')

        assert response.status_code == 400

    def test_update_and_duplicate_on_update(self, admin_client, user, make_user):
        other = make_user()
        referral = Referral.objects.get(user=user)

        response = admin_client.patch(f'/api/referrals/{referral.id}/', {'status': 'inactive'}, format='json')
        assert response.status_code == 200
        assert response.data['data']['status'] == 'inactive'

        clash = admin_client.patch(f'/api/referrals/{referral.id}/', {'referral_code': other.referral_code}, format='json')
        assert clash.status_code == 409

    def test_list_search_and_filter(self, admin_client, user, make_user):
        make_user(email='zed@example.com', name='Zed')
        Referral.objects.filter(user=user).update(status=Referral.STATUS_INACTIVE)

        searched = admin_client.get('/api/referrals/', {'search': 'zed@example.com'})
        assert [row['user_name'] for row in searched.data['data']] == ['Zed']

        inactive = admin_client.get('/api/referrals/', {'status': 'inactive'})
        assert inactive.data['pagination']['total'] == 1

    def test_delete(self, admin_client, user):
        referral = Referral.objects.get(user=user)

        assert admin_client.delete(f'/api/referrals/{referral.id}/').status_code == 200
        assert not Referral.objects.filter(pk=referral.id).exists()

    def test_regular_user_forbidden(self, user_client):
        assert user_client.get('/api/referrals/').status_code == 403


class TestReferralLinks:
    def test_link_with_qr_code(self, user_client, user, settings):
        settings.REFERRAL_BASE_URL = 'https://bdspro.example/'

        response = user_client.get('/api/referrals/link/')

        assert response.status_code == 200
        data = response.data['data']
        assert data['referral_link'] == f'https://bdspro.example/signup?ref={user.referral_code}'
        assert data['qr_code'].startswith('data:image/png;base64,')

    def test_generate_link_lifecycle(self, user_client, user):
        assert user_client.get('/api/referrals/generate-link/').status_code == 404

        created = user_client.post('/api/referrals/generate-link/', {}, format='json')
        assert created.status_code == 201
        assert created.data['data']['referral_code'] == user.referral_code

        stored = user_client.get('/api/referrals/generate-link/')
        assert stored.status_code == 200
        assert stored.data['data']['signups'] == 0

    def test_custom_code(self, user_client, user):
        response = user_client.post('/api/referrals/generate-link/', {'custom_code': 'ALICE2024'}, format='json')

        assert response.status_code == 201
        user.refresh_from_db()
        assert user.referral_code == 'ALICE2024'
        assert ReferralLink.objects.get(user=user).referral_link.endswith('?ref=ALICE2024')

    def test_custom_code_taken(self, user_client, make_user):
        other = make_user()

        response = user_client.post('/api/referrals/generate-link/', {'custom_code': other.referral_code}, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'This referral code is already taken'

    def test_admin_user_links(self, admin_client, user, make_user):
        make_user()

        before = admin_client.get('/api/referrals/user-links/')
        assert before.data['totals']['total_users'] == 3
        assert before.data['totals']['generated_links'] == 0

        generated = admin_client.post('/api/referrals/user-links/', {'generate_for_all': True}, format='json')
        assert generated.data['generated'] == 3
        assert ReferralLink.objects.count() == 3

        after = admin_client.get('/api/referrals/user-links/')
        assert all(row['generated'] for row in after.data['data'])

    def test_generate_for_all_flag_required(self, admin_client):
        assert admin_client.post('/api/referrals/user-links/', {}, format='json').status_code == 400


class TestUserReferrals:
    def test_levels_and_verified_investment(self, client_for, make_user):
        root = make_user(name='Root')
        direct = make_user(name='Direct', referrer=root)
        indirect = make_user(name='Indirect', referrer=direct)
        make_user(name='Too Deep', referrer=indirect)

        Deposit.objects.create(user=direct, amount=Decimal('100.00'), payment_method=Deposit.METHOD_TRC20,
                               wallet_address='T1', status=Deposit.STATUS_VERIFIED)
        Deposit.objects.create(user=direct, amount=Decimal('500.00'), payment_method=Deposit.METHOD_TRC20,
                               wallet_address='T1', status=Deposit.STATUS_PENDING)
        Payment.objects.create(referred=direct, image_url='x', transaction_hash='h', amount=Decimal('50.00'),
                               status=Payment.STATUS_VERIFIED)

        response = client_for(root).get('/api/referrals/user-referrals/')

        assert response.status_code == 200
        level1 = response.data['referrals']['level1']
        level2 = response.data['referrals']['level2']
        assert [(row['name'], row['total_invested']) for row in level1] == [('Direct', Decimal('150.00'))]
        assert [row['name'] for row in level2] == ['Indirect']
        assert level2[0]['total_invested'] == 0

    def test_admin_can_inspect_other_user(self, admin_client, make_user):
        root = make_user()
        make_user(referrer=root)

        response = admin_client.get('/api/referrals/user-referrals/', {'userId': root.id})

        assert response.data['user']['referral_code'] == root.referral_code
        assert len(response.data['referrals']['level1']) == 1

    def test_admin_unknown_user(self, admin_client):
        assert admin_client.get('/api/referrals/user-referrals/', {'userId': 9999}).status_code == 404
