from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password

from referrals.models import Commission
from wallet.models import Payment, SystemSettings, Transaction

User = get_user_model()

pytestmark = pytest.mark.django_db


def payment_form(image, **overrides):
    data = {
        'full_name': 'Erin Investor',
        'email': 'erin@example.com',
        'amount': '120.00',
        'hash_password': 'hashpass1',
        'network': 'trc20',
        'wallet_address': 'TTxh7Fv9Npov8rZGYzYzwcUWhQzBEpAtzt',
        'image': image,
    }
    data.update(overrides)
    return data


def make_payment(user, amount='100.00', status=Payment.STATUS_PENDING):
    return Payment.objects.create(
        referred=user,
        referrer=user.referrer,
        image_url='/media/uploads/proof.png',
        transaction_hash='0xproof',
        amount=Decimal(amount),
        network=Payment.NETWORK_BEP20,
        status=status,
        hash_password='bcrypt_sha256$$2b$12$abcdefghijklmnopqrstuv',
        full_name=user.name,
        email=user.email,
    )


class TestSubmitPayment:
    def test_anonymous_submission_creates_account(self, api_client, image_upload, media_root):
        response = api_client.post('/api/payments/', payment_form(image_upload()), format='multipart')

        assert response.status_code == 201
        payment = Payment.objects.get()
        payer = User.objects.get(email='erin@example.com')
        assert payment.referred == payer
        assert payment.status == Payment.STATUS_PENDING
        assert payment.transaction_hash.startswith('TXN_')
        assert payment.image_url.startswith('/media/uploads/payment_')
        assert check_password('hashpass1', payment.hash_password)
        assert not payer.has_usable_password()
        assert payer.referral_code.startswith('BDS')
        assert any(media_root.joinpath('uploads').iterdir())

    def test_existing_email_reuses_account(self, api_client, image_upload, user):
        response = api_client.post(
            '/api/payments/', payment_form(image_upload(), email=user.email), format='multipart')

        assert response.status_code == 201
        assert Payment.objects.get().referred == user
        assert User.objects.count() == 1

    def test_authenticated_payer_and_referrer(self, client_for, image_upload, make_user):
        parent = make_user()
        child = make_user(referrer=parent)

        response = client_for(child).post(
            '/api/payments/',
            payment_form(image_upload(), email='other@example.com', transaction_hash='0xfeed'),
            format='multipart',
        )

        assert response.status_code == 201
        payment = Payment.objects.get()
        assert payment.referred == child
        assert payment.referrer == parent
        assert payment.transaction_hash == '0xfeed'

    def test_screenshot_field_is_accepted(self, api_client, image_upload):
        data = payment_form(None)
        del data['image']
        data['screenshot'] = image_upload()

        response = api_client.post('/api/payments/', data, format='multipart')

        assert response.status_code == 201

    def test_image_required(self, api_client):
        data = payment_form(None)
        del data['image']

        response = api_client.post('/api/payments/', data, format='multipart')

        assert response.status_code == 400
        assert response.data['error'] == 'Payment screenshot is required'

    def test_rejects_non_jpeg_png(self, api_client, image_upload):
        gif = image_upload(name='proof.gif', image_format='GIF', content_type='image/gif')

        response = api_client.post('/api/payments/', payment_form(gif), format='multipart')

        assert response.status_code == 400
        assert response.data['error'] == 'Invalid file type. Only JPEG and PNG images are allowed.'

    def test_rejects_large_image(self, api_client, image_upload, settings):
        settings.MAX_PROOF_IMAGE_SIZE = 10

        response = api_client.post('/api/payments/', payment_form(image_upload()), format='multipart')

        assert response.status_code == 400
        assert response.data['error'] == 'File size too large. Maximum 5MB allowed.'

    def test_minimum_amount(self, api_client, image_upload):
        response = api_client.post('/api/payments/', payment_form(image_upload(), amount='20'), format='multipart')

        assert response.status_code == 400
        assert response.data['error'] == 'Minimum deposit amount is 50 USDT'

    def test_short_hash_password(self, api_client, image_upload):
        response = api_client.post('/api/payments/', payment_form(image_upload(), hash_password='123'), format='multipart')

        assert response.status_code == 400

    def test_storage_failure_keeps_image_inline(self, api_client, image_upload, monkeypatch):
        class BrokenStorage:
            def save(self, name, content):
                raise OSError('disk full')

        monkeypatch.setattr('wallet.services.default_storage', BrokenStorage())

        response = api_client.post('/api/payments/', payment_form(image_upload()), format='multipart')

        assert response.status_code == 201
        assert Payment.objects.get().image_url.startswith('data:image/png;base64,')


class TestListPayments:
    def test_user_sees_own(self, user_client, user, make_user):
        make_payment(user)
        make_payment(make_user())

        response = user_client.get('/api/payments/')

        assert response.status_code == 200
        assert len(response.data['payments']) == 1
        assert 'hash_password' not in response.data['payments'][0]

    def test_admin_filters_by_email(self, admin_client, user, make_user):
        make_payment(user)
        make_payment(make_user())

        response = admin_client.get('/api/payments/', {'email': user.email})

        assert [row['email'] for row in response.data['payments']] == [user.email]


def test_payment_methods_are_public(api_client):
    SystemSettings.objects.create(key='deposit_address_bep20', value='0xoverride')

    response = api_client.get('/api/payments/methods/')

    assert response.status_code == 200
    methods = {row['network']: row for row in response.data['methods']}
    assert methods['trc20']['address'] == 'TTxh7Fv9Npov8rZGYzYzwcUWhQzBEpAtzt'
    assert methods['bep20']['address'] == '0xoverride'
    assert methods['trc20']['min_amount'] == Decimal('50')


class TestAdminPayments:
    def test_list_truncates_hash_password(self, admin_client, user):
        make_payment(user)

        response = admin_client.get('/api/admin/payments/')

        assert response.status_code == 200
        assert response.data['payments'][0]['hash_password'] == 'bcrypt_sha256$$2b$12...'

    def test_verification_credits_and_pays_commission(self, admin_client, make_user):
        parent = make_user()
        child = make_user(referrer=parent)
        payment = make_payment(child, amount='300.00')

        response = admin_client.patch(f'/api/admin/payments/{payment.id}/', {'status': 'verified'}, format='json')

        assert response.status_code == 200
        assert response.data['deposit_credited'] is True
        child.refresh_from_db()
        parent.refresh_from_db()
        assert child.account_balance == Decimal('300.00')
        assert child.total_earning == Decimal('300.00')
        assert parent.account_balance == Decimal('3.00')
        assert Transaction.objects.filter(user=child, type=Transaction.TYPE_DEPOSIT).count() == 1
        assert Commission.objects.get(user=parent).level == 1

    def test_second_verification_is_noop(self, admin_client, user):
        payment = make_payment(user)
        admin_client.patch(f'/api/admin/payments/{payment.id}/', {'status': 'verified'}, format='json')

        response = admin_client.patch(f'/api/admin/payments/{payment.id}/', {'status': 'verified'}, format='json')

        assert response.data['deposit_credited'] is False
        user.refresh_from_db()
        assert user.account_balance == Decimal('100.00')

    def test_verified_payment_is_final(self, admin_client, user):
        payment = make_payment(user, status=Payment.STATUS_VERIFIED)

        response = admin_client.patch(f'/api/admin/payments/{payment.id}/', {'status': 'rejected'}, format='json')

        assert response.status_code == 400

    def test_invalid_status(self, admin_client, user):
        payment = make_payment(user)

        response = admin_client.patch(f'/api/admin/payments/{payment.id}/', {'status': 'done'}, format='json')

        assert response.status_code == 400

    def test_regular_user_forbidden(self, user_client):
        assert user_client.get('/api/admin/payments/').status_code == 403

    def test_transaction_proofs_include_names(self, admin_client, make_user):
        parent = make_user(name='Parent')
        child = make_user(name='Child', referrer=parent)
        payment = make_payment(child)

        response = admin_client.get('/api/admin/transaction-proofs/')

        row = response.data['proofs'][0]
        assert row['referred_name'] == 'Child'
        assert row['referrer_name'] == 'Parent'

        update = admin_client.patch(f'/api/admin/transaction-proofs/{payment.id}/', {'status': 'rejected'}, format='json')
        assert update.status_code == 200
        assert update.data['deposit_credited'] is False


def test_upload_proof_for_current_user(client_for, image_upload, make_user):
    parent = make_user()
    child = make_user(referrer=parent)

    response = client_for(child).post('/api/transactions/upload-proof/', {
        'image': image_upload(name='proof.jpg', image_format='JPEG', content_type='image/jpeg'),
        'transaction_hash': '0xupload',
        'amount': '80',
    }, format='multipart')

    assert response.status_code == 201
    payment = Payment.objects.get()
    assert payment.referred == child
    assert payment.referrer == parent
    assert payment.image_url.startswith('/media/uploads/proof_')
